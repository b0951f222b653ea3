"""Stacks: the deployment units that each synthesize to one ARM template."""

import logging
from typing import Dict, Mapping, Optional, Union

from ..exceptions import InvalidResourceNameError, MissingStackError
from ..naming.context import NamingContext
from ..naming.conventions import NamingConventions
from ..naming.generator import ResourceNameGenerator, derive_purpose
from ..naming.validation import validate_resource_name
from .construct import Construct
from .naming_components import ComponentInput, Geography, as_component
from .node import PATH_SEPARATOR, STACK_METADATA_TYPE, ConstructRole, Node
from .scopes import DeploymentScope

logger = logging.getLogger(__name__)


def _root_attribute(scope: Optional[Construct], name: str):
    """Read a tree-wide setting (conventions, default tags...) from the root."""
    if scope is None:
        return None
    return getattr(scope.node.root, name, None)


class Stack(Construct):
    """A construct that owns a naming context and deploys as one template.

    Args:
        scope: Parent construct
        id: Construct id
        naming_context: Components used to name every resource in the stack
        tags: Tags merged into every resource of the stack
        naming_conventions: Rules used for names; defaults to the App's
    """

    ROLE = ConstructRole.STACK
    DEPLOYMENT_SCOPE = DeploymentScope.RESOURCE_GROUP

    def __init__(
        self,
        scope: Optional[Construct],
        id: str,
        naming_context: NamingContext,
        tags: Optional[Mapping[str, str]] = None,
        naming_conventions: Optional[NamingConventions] = None,
    ) -> None:
        self._naming_context = naming_context
        self._naming_conventions = (
            naming_conventions
            or _root_attribute(scope, "naming_conventions")
            or NamingConventions()
        )
        self._tags: Dict[str, str] = dict(tags or {})
        super().__init__(scope, id)
        self.node.add_metadata(
            STACK_METADATA_TYPE, {"deploymentScope": self.DEPLOYMENT_SCOPE.value}
        )

    @property
    def naming_context(self) -> NamingContext:
        return self._naming_context

    @property
    def naming_conventions(self) -> NamingConventions:
        return self._naming_conventions

    @property
    def tags(self) -> Dict[str, str]:
        return dict(self._tags)

    @property
    def deployment_scope(self) -> DeploymentScope:
        return self.DEPLOYMENT_SCOPE

    @property
    def location(self) -> str:
        return self._naming_context.geography.location

    @property
    def stack_name(self) -> str:
        """Artifact name: path segments joined with ``-``."""
        return "-".join(s for s in self.path.split(PATH_SEPARATOR) if s)

    def generate_resource_name(self, kind: str, purpose: Optional[str] = None) -> str:
        """Generate a name for ``kind`` from this stack's naming context."""
        generator = ResourceNameGenerator(self._naming_conventions)
        return generator.generate_name(
            kind,
            self._naming_context,
            derive_purpose(purpose) if purpose else None,
        )


class SubscriptionStack(Stack):
    """Stack deployed at subscription scope that owns its naming context.

    Example:
        >>> stack = SubscriptionStack(
        ...     app, "Foundation",
        ...     organization="dp", project="authr", environment="nonprod",
        ...     geography="eastus", instance=1,
        ... )
    """

    DEPLOYMENT_SCOPE = DeploymentScope.SUBSCRIPTION

    def __init__(
        self,
        scope: Optional[Construct],
        id: str,
        *,
        organization: ComponentInput,
        project: ComponentInput,
        environment: ComponentInput,
        geography: ComponentInput,
        instance: Union[int, ComponentInput] = 1,
        subscription_id: Optional[str] = None,
        tags: Optional[Mapping[str, str]] = None,
        naming_conventions: Optional[NamingConventions] = None,
    ) -> None:
        naming_context = NamingContext.create(
            organization, project, environment, geography, instance
        )
        merged_tags = dict(_root_attribute(scope, "default_tags") or {})
        merged_tags.update(tags or {})
        self.subscription_id = subscription_id or _root_attribute(
            scope, "subscription_id"
        )
        super().__init__(
            scope,
            id,
            naming_context,
            tags=merged_tags,
            naming_conventions=naming_conventions,
        )
        logger.debug(
            f"Created subscription stack '{self.path}' "
            f"({naming_context.organization}/{naming_context.project}/"
            f"{naming_context.environment})"
        )


class ResourceGroupStack(Stack):
    """Stack deployed into a single resource group.

    Must be nested inside a ``SubscriptionStack``; it inherits that stack's
    naming context, naming conventions and tags so its resources are named
    consistently with the rest of the subscription.

    Args:
        scope: The parent subscription stack (or a construct below it)
        id: Construct id
        resource_group_name: Target resource group; generated from the id
            when omitted
        location: Deployment location; defaults to the parent geography
        tags: Tags merged over the inherited ones
    """

    DEPLOYMENT_SCOPE = DeploymentScope.RESOURCE_GROUP

    def __init__(
        self,
        scope: Construct,
        id: str,
        *,
        resource_group_name: Optional[str] = None,
        location: Optional[ComponentInput] = None,
        tags: Optional[Mapping[str, str]] = None,
    ) -> None:
        parent = scope.node.find_stack() if scope is not None else None
        path = Node.child_path(scope, id)
        if not isinstance(parent, SubscriptionStack):
            raise MissingStackError(
                f"ResourceGroupStack '{path}' must be nested inside a "
                f"SubscriptionStack",
                path=path,
            )

        if resource_group_name is None:
            resource_group_name = parent.generate_resource_name("rg", id)
        else:
            result = validate_resource_name(
                resource_group_name, "rg", parent.naming_conventions, path
            )
            if not result.valid:
                raise InvalidResourceNameError(
                    f"Invalid resource group name '{resource_group_name}' for "
                    f"'{path}'",
                    path=path,
                    name=resource_group_name,
                    errors=[issue.message for issue in result.errors],
                )

        self.parent_stack = parent
        self.resource_group_name = resource_group_name
        self.subscription_id = parent.subscription_id
        self._location: Optional[Geography] = as_component(Geography, location)

        merged_tags = parent.tags
        merged_tags.update(tags or {})
        super().__init__(
            scope,
            id,
            parent.naming_context,
            tags=merged_tags,
            naming_conventions=parent.naming_conventions,
        )

    @property
    def location(self) -> str:
        if self._location is not None:
            return self._location.location
        return self.parent_stack.location
