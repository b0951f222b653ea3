"""Ownership-tree primitive held by every construct.

A ``Node`` records a construct's id, its parent scope, its ordered children,
metadata tags and its role. The tree shape is fixed once a construct's
constructor returns: children are only ever appended during construction of
the child itself, and no API removes or reparents a node.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from ..exceptions import DuplicateConstructIdError, InvalidConstructIdError

if TYPE_CHECKING:
    from .construct import Construct

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "/"

# Metadata type written by stacks; kept for tooling that reads raw metadata.
STACK_METADATA_TYPE = "azure:arm:stack"


class ConstructRole(str, Enum):
    """Explicit role of a construct in the tree."""

    STACK = "stack"
    RESOURCE_GROUP = "resource_group"
    PLAIN = "plain"


@dataclass(frozen=True)
class MetadataEntry:
    """A metadata tag attached to a node."""

    type: str
    data: Dict[str, Any] = field(default_factory=dict)


class Node:
    """Identity and ownership record for a construct."""

    def __init__(
        self,
        host: "Construct",
        scope: Optional["Construct"],
        id: str,
        role: ConstructRole = ConstructRole.PLAIN,
    ) -> None:
        self._host = host
        self._scope = scope
        self._id = id
        self._role = role
        self._children: List["Construct"] = []
        self._metadata: List[MetadataEntry] = []
        self._path = Node.child_path(scope, id)

    @staticmethod
    def child_path(scope: Optional["Construct"], id: str) -> str:
        """Path a child with ``id`` would have under ``scope``."""
        if scope is None:
            return id
        parent_path = scope.node.path
        if not parent_path:
            return id
        return f"{parent_path}{PATH_SEPARATOR}{id}"

    @staticmethod
    def check_can_attach(scope: Optional["Construct"], id: str) -> None:
        """Validate that a child ``id`` may be attached to ``scope``.

        Raises:
            InvalidConstructIdError: If the id is empty or contains a separator
            DuplicateConstructIdError: If the scope already has that child id
        """
        path = Node.child_path(scope, id)
        if scope is None:
            return
        if not id:
            raise InvalidConstructIdError(
                "Construct id cannot be empty for non-root constructs", path=path
            )
        if PATH_SEPARATOR in id:
            raise InvalidConstructIdError(
                f"Construct id '{id}' cannot contain '{PATH_SEPARATOR}'", path=path
            )
        if scope.node.find_child(id) is not None:
            raise DuplicateConstructIdError(
                f"There is already a construct with id '{id}' in scope "
                f"'{scope.node.path or '<root>'}'",
                path=path,
            )

    def _attach(self) -> None:
        if self._scope is not None:
            self._scope.node._children.append(self._host)
        logger.debug(f"Attached construct '{self._path or '<root>'}'")

    @property
    def id(self) -> str:
        return self._id

    @property
    def path(self) -> str:
        return self._path

    @property
    def scope(self) -> Optional["Construct"]:
        return self._scope

    @property
    def role(self) -> ConstructRole:
        return self._role

    @property
    def is_stack(self) -> bool:
        return self._role is ConstructRole.STACK

    @property
    def children(self) -> Tuple["Construct", ...]:
        return tuple(self._children)

    @property
    def metadata(self) -> Tuple[MetadataEntry, ...]:
        return tuple(self._metadata)

    @property
    def root(self) -> "Construct":
        current = self._host
        while current.node.scope is not None:
            current = current.node.scope
        return current

    @property
    def scopes(self) -> List["Construct"]:
        """All constructs from the root down to (and including) this one."""
        chain: List["Construct"] = []
        current: Optional["Construct"] = self._host
        while current is not None:
            chain.append(current)
            current = current.node.scope
        chain.reverse()
        return chain

    def find_stack(self) -> Optional["Construct"]:
        """Nearest construct with the STACK role, starting at this one."""
        current: Optional["Construct"] = self._host
        while current is not None:
            if current.node.is_stack:
                return current
            current = current.node.scope
        return None

    def find_child(self, id: str) -> Optional["Construct"]:
        for child in self._children:
            if child.node.id == id:
                return child
        return None

    def find_all(self) -> List["Construct"]:
        """This construct and all descendants, depth-first pre-order."""
        found: List["Construct"] = [self._host]
        for child in self._children:
            found.extend(child.node.find_all())
        return found

    def add_metadata(self, type: str, data: Optional[Dict[str, Any]] = None) -> None:
        """Attach a metadata tag. Tags never change the tree shape."""
        self._metadata.append(MetadataEntry(type=type, data=dict(data or {})))

    def has_metadata(self, type: str) -> bool:
        return any(entry.type == type for entry in self._metadata)

    def __repr__(self) -> str:
        return f"Node(path={self._path!r}, role={self._role.value})"
