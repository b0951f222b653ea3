"""Depth-first traversal of the construct tree.

Traversal is a pure read of the tree. All visiting state lives in locals of
a single ``traverse`` call, so one ``TreeTraverser`` can be shared across
threads and concurrent calls never see each other's state.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from ..core.construct import Construct
from ..exceptions import TreeCycleError

logger = logging.getLogger(__name__)


@dataclass
class TraversalResult:
    """Constructs found by one traversal, in depth-first pre-order."""

    constructs: List[Construct] = field(default_factory=list)
    stacks: Dict[str, Construct] = field(default_factory=dict)
    constructs_by_path: Dict[str, Construct] = field(default_factory=dict)


class TreeTraverser:
    """Walks a construct tree and discovers its stacks."""

    def traverse(self, root: Construct) -> TraversalResult:
        """Visit ``root`` and every descendant, siblings in insertion order.

        Raises:
            TreeCycleError: If a construct is reached again while it is still
                being visited
        """
        result = TraversalResult()
        visiting: Set[int] = set()
        visited: Set[int] = set()

        # Explicit stack of (construct, exiting) frames keeps deep trees off
        # the interpreter's recursion limit.
        frames = [(root, False)]
        trail: List[str] = []
        while frames:
            construct, exiting = frames.pop()
            key = id(construct)
            if exiting:
                visiting.discard(key)
                visited.add(key)
                trail.pop()
                continue

            path = construct.node.path
            if key in visiting or key in visited:
                raise TreeCycleError(
                    f"Cycle detected in construct tree at '{path or '<root>'}'",
                    path=path,
                    cycle=trail + [path],
                )
            visiting.add(key)
            trail.append(path)

            result.constructs.append(construct)
            result.constructs_by_path[path] = construct
            if construct.node.is_stack:
                result.stacks[path] = construct

            frames.append((construct, True))
            for child in reversed(construct.node.children):
                frames.append((child, False))

        logger.debug(
            f"Traversed {len(result.constructs)} construct(s), "
            f"found {len(result.stacks)} stack(s)"
        )
        return result

    @staticmethod
    def find_stack(construct: Construct) -> Optional[Construct]:
        """Nearest stack at or above ``construct``, or None."""
        return construct.node.find_stack()

    @staticmethod
    def get_descendants(construct: Construct) -> List[Construct]:
        """Strict descendants of ``construct`` in depth-first pre-order."""
        return construct.node.find_all()[1:]


def traverse(root: Construct) -> TraversalResult:
    """Traverse the tree under ``root`` with a fresh traverser."""
    return TreeTraverser().traverse(root)
