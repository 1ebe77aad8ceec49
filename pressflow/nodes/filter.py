"""Local predicate node that drops branches failing any configured rule."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Optional

from ..contracts import ExecutionContext, FilterRule, WorkflowNode
from .base import BaseNodeHandler, context_data

logger = logging.getLogger(__name__)


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 or RFC 2822 string or datetime.

    Naive values are taken as UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            # Feed dates, e.g. "Mon, 01 Jan 2024 10:00:00 GMT"
            try:
                parsed = parsedate_to_datetime(value)
            except (TypeError, ValueError):
                return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _contains(text: Any, needle: str) -> bool:
    return isinstance(text, str) and needle in text.lower()


def _keyword_rejects(rule: FilterRule, data: Dict[str, Any]) -> bool:
    needle = str(rule.value or "").lower()
    return not (_contains(data.get("title"), needle) or _contains(data.get("content"), needle))


def _date_rejects(rule: FilterRule, data: Dict[str, Any]) -> bool:
    article_date = parse_datetime(data.get("publishedAt") or data.get("published_date"))
    rule_date = parse_datetime(rule.value)
    # Comparisons against an unknown date never reject.
    if article_date is None or rule_date is None:
        return False
    if rule.operator == "after":
        return article_date <= rule_date
    if rule.operator == "before":
        return article_date >= rule_date
    return False


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _score_rejects(rule: FilterRule, data: Dict[str, Any]) -> bool:
    score = _as_number(data.get("priority_score") or 0)
    threshold = _as_number(rule.value)
    if score is None or threshold is None:
        return False
    if rule.operator == "gt":
        return score <= threshold
    if rule.operator == "lt":
        return score >= threshold
    return False


_RULES = {
    "keyword": _keyword_rejects,
    "date": _date_rejects,
    "score": _score_rejects,
}


class FilterHandler(BaseNodeHandler):
    """Evaluate ``config["filters"]`` in order; the first rejection wins."""

    async def execute(self, node: WorkflowNode, context: ExecutionContext) -> Any:
        data = context_data(context)
        for raw_rule in node.config.get("filters") or []:
            rule = FilterRule.model_validate(raw_rule)
            check = _RULES.get(rule.type)
            if check is None:
                logger.debug(f"Ignoring unknown filter type {rule.type}")
                continue
            if check(rule, data):
                logger.info(
                    f"Context {context.execution_id} rejected by {rule.type} filter "
                    f"on {node.display_name}"
                )
                return None
        return context.data
