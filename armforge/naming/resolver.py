"""Resolves the name of a resource while it is being constructed."""

import logging
from typing import TYPE_CHECKING, Optional

from ..core.node import Node
from ..exceptions import InvalidResourceNameError, MissingStackError
from .generator import ResourceNameGenerator, derive_purpose
from .validation import validate_resource_name

if TYPE_CHECKING:
    from ..core.construct import Construct
    from ..core.stack import Stack

logger = logging.getLogger(__name__)


class NamingResolver:
    """Finds the owning stack of a construct and produces its resource name.

    Resolution is a pure function of the construct ids along the tree path,
    the owning stack's naming context and its naming conventions.
    """

    def find_stack(self, scope: Optional["Construct"], construct_id: str) -> "Stack":
        """Nearest stack at or above ``scope``.

        Raises:
            MissingStackError: If no stack encloses ``scope``
        """
        stack = scope.node.find_stack() if scope is not None else None
        if stack is None:
            path = Node.child_path(scope, construct_id)
            raise MissingStackError(
                f"Resource '{path}' has no enclosing stack; naming context is "
                f"unavailable",
                path=path,
            )
        return stack

    def resolve(
        self,
        scope: Optional["Construct"],
        construct_id: str,
        kind: str,
        explicit_name: Optional[str] = None,
    ) -> str:
        """Resolve the name of construct ``construct_id`` being added to ``scope``.

        Args:
            scope: Parent construct the resource will be attached to
            construct_id: Id of the resource being constructed
            kind: Naming kind of the resource type
            explicit_name: User-supplied name, validated instead of generated

        Returns:
            The resource name

        Raises:
            MissingStackError: If no stack encloses ``scope``
            InvalidResourceNameError: If the explicit name breaks the kind's rule
        """
        stack = self.find_stack(scope, construct_id)
        conventions = stack.naming_conventions
        path = Node.child_path(scope, construct_id)

        if explicit_name is not None:
            result = validate_resource_name(explicit_name, kind, conventions, path)
            if not result.valid:
                raise InvalidResourceNameError(
                    f"Invalid {kind} name '{explicit_name}' for '{path}'",
                    path=path,
                    name=explicit_name,
                    errors=[issue.message for issue in result.errors],
                )
            return explicit_name

        generator = ResourceNameGenerator(conventions)
        name = generator.generate_name(
            kind, stack.naming_context, derive_purpose(construct_id)
        )
        logger.debug(f"Resolved name '{name}' for '{path}'")
        return name
