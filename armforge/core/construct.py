"""Base class for every member of the construct tree."""

from typing import Optional

from .node import ConstructRole, Node


class Construct:
    """A node-owning unit of the ownership tree.

    Constructs are built top-down with ``(scope, id)``. All checks run before
    the construct is linked into its parent, so a failed constructor never
    leaves a partially attached child behind.
    """

    ROLE: ConstructRole = ConstructRole.PLAIN

    def __init__(self, scope: Optional["Construct"], id: str) -> None:
        Node.check_can_attach(scope, id)
        self._node = Node(self, scope, id, role=self.ROLE)
        self._node._attach()

    @property
    def node(self) -> Node:
        return self._node

    @property
    def scope(self) -> Optional["Construct"]:
        return self._node.scope

    @property
    def id(self) -> str:
        return self._node.id

    @property
    def path(self) -> str:
        return self._node.path

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(path={self.path!r})"
