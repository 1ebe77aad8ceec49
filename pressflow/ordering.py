"""Graph ordering for workflow nodes."""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Set, Tuple

from .constants import TRIGGER
from .contracts import WorkflowNode
from .errors import CycleDetectedError

logger = logging.getLogger(__name__)

_Frame = Tuple[str, Optional[Iterator[str]]]


class GraphOrderer:
    """Depth-first topological sort over ``WorkflowNode.connected`` edges.

    Traversal is seeded from every trigger node, then from any node left
    unvisited in input order. A node is emitted only after everything
    reachable from it, so ``order()`` lists consumers before their producers.
    ``execution_plan()`` reverses that into the sequence nodes should run in.

    Duplicate ids keep the first node; edges to unknown ids are skipped.
    """

    def order(self, nodes: Sequence[WorkflowNode]) -> List[WorkflowNode]:
        index: Dict[str, WorkflowNode] = {}
        for node in nodes:
            if node.id in index:
                logger.debug(f"Ignoring duplicate node id {node.id}")
                continue
            index[node.id] = node

        ordered: List[WorkflowNode] = []
        visited: Set[str] = set()
        visiting: Set[str] = set()

        seeds = [n.id for n in nodes if n.type == TRIGGER]
        seeds.extend(n.id for n in nodes)
        for node_id in seeds:
            if node_id not in visited:
                self._visit(node_id, index, ordered, visited, visiting)
        return ordered

    def execution_plan(self, nodes: Sequence[WorkflowNode]) -> List[WorkflowNode]:
        """Nodes in run order: every producer before the nodes it feeds."""
        return list(reversed(self.order(nodes)))

    def _visit(
        self,
        root: str,
        index: Dict[str, WorkflowNode],
        ordered: List[WorkflowNode],
        visited: Set[str],
        visiting: Set[str],
    ) -> None:
        stack: List[_Frame] = [(root, None)]
        while stack:
            node_id, children = stack[-1]
            if children is None:
                if node_id in visiting:
                    raise CycleDetectedError(node_id)
                node = index.get(node_id)
                if node is None or node_id in visited:
                    if node is None:
                        logger.debug(f"Skipping edge to unknown node {node_id}")
                    stack.pop()
                    continue
                visiting.add(node_id)
                children = iter(node.connected)
                stack[-1] = (node_id, children)

            child = next(children, None)
            if child is not None:
                stack.append((child, None))
                continue

            stack.pop()
            visiting.discard(node_id)
            visited.add(node_id)
            ordered.append(index[node_id])
