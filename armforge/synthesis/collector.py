"""Collects the resources that belong to a stack."""

import logging
from typing import List

from ..core.resource import Resource
from ..core.scopes import DeploymentScope
from ..core.stack import Stack
from ..exceptions import ResourceScopeError

logger = logging.getLogger(__name__)


class ResourceCollector:
    """Gathers the resources owned by a stack.

    A resource belongs to the nearest stack above it, so resources inside a
    nested stack are left for that stack's own synthesis.
    """

    def collect(self, stack: Stack) -> List[Resource]:
        """Resources owned by ``stack`` in depth-first pre-order.

        Raises:
            ResourceScopeError: If a subscription-scoped resource sits in a
                resource-group stack
        """
        resources: List[Resource] = []
        for construct in stack.node.find_all()[1:]:
            if not isinstance(construct, Resource):
                continue
            if construct.node.scope.node.find_stack() is not stack:
                continue
            if (
                stack.deployment_scope is DeploymentScope.RESOURCE_GROUP
                and construct.deployment_scope is DeploymentScope.SUBSCRIPTION
            ):
                raise ResourceScopeError(
                    f"{construct.resource_type} '{construct.path}' is "
                    f"subscription-scoped and cannot be deployed by resource "
                    f"group stack '{stack.path}'",
                    path=construct.path,
                    resource_type=construct.resource_type,
                )
            resources.append(construct)

        logger.debug(f"Collected {len(resources)} resource(s) for '{stack.path}'")
        return resources
