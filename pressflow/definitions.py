"""Loading workflow graphs from YAML or JSON documents."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field

from .contracts import WorkflowNode


class WorkflowDefinition(BaseModel):
    """A stored workflow rule: an id plus its node graph."""

    id: str
    name: Optional[str] = None
    nodes: List[WorkflowNode] = Field(default_factory=list)


def load_workflow(path: str | Path) -> WorkflowDefinition:
    """Read a workflow definition from ``path``.

    Files ending in ``.json`` are parsed as JSON, everything else as YAML.
    """
    path = Path(path)
    text = path.read_text()
    if path.suffix.lower() == ".json":
        data = json.loads(text)
    else:
        data = yaml.safe_load(text) or {}
    return WorkflowDefinition.model_validate(data)
