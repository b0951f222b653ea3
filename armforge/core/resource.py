"""Base class for ARM resources.

A resource is a construct that renders to one entry of an ARM template's
``resources`` array. Everything about it is decided in the constructor: the
properties are validated, the name is resolved against the owning stack and
the location and tags are fixed. Nothing is mutated afterwards.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Dict,
    FrozenSet,
    List,
    Mapping,
    Optional,
    Sequence,
    Type,
)

from ..exceptions import PropertyValidationError
from ..naming.conventions import DEFAULT_KIND
from ..naming.resolver import NamingResolver
from .construct import Construct
from .node import Node
from .references import build_resource_id, resource_id_expression
from .scopes import DeploymentScope
from .validation import ValidationIssue, ValidationSeverity

if TYPE_CHECKING:
    from .stack import Stack

logger = logging.getLogger(__name__)

MAX_TAGS = 50
MAX_TAG_KEY_LENGTH = 512
MAX_TAG_VALUE_LENGTH = 256
_INVALID_TAG_KEY_CHARS = set("<>%&\\?/")


def property_error(
    message: str, code: Optional[str] = None, suggestion: Optional[str] = None
) -> ValidationIssue:
    """Shorthand for an error-severity property violation."""
    return ValidationIssue(
        message=message,
        severity=ValidationSeverity.ERROR,
        code=code,
        suggestion=suggestion,
        validator="properties",
    )


def enum_value(value: Any) -> Any:
    """Plain value of an enum member; other values pass through."""
    return value.value if isinstance(value, Enum) else value


def choice_error(
    field_name: str, value: Any, choices: Type[Enum]
) -> Optional[ValidationIssue]:
    """Error when ``value`` is neither a member nor a value of ``choices``."""
    allowed = [member.value for member in choices]
    if enum_value(value) in allowed:
        return None
    return property_error(
        f"{field_name} must be one of {', '.join(map(str, allowed))} "
        f"(got '{enum_value(value)}')"
    )


@dataclass(frozen=True, kw_only=True)
class ResourceProps:
    """Properties shared by every resource.

    Attributes:
        name: Explicit resource name; generated from the stack when omitted
        location: Azure location; defaults to the stack location
        tags: Tags merged over the stack tags
        depends_on: Resources that must deploy before this one
    """

    name: Optional[str] = None
    location: Optional[str] = None
    tags: Mapping[str, str] = field(default_factory=dict)
    depends_on: Sequence["Resource"] = ()

    def validate(self) -> List[ValidationIssue]:
        """Return every violated constraint; an empty list means valid."""
        issues: List[ValidationIssue] = []
        if self.location is not None and not self.location.strip():
            issues.append(property_error("location cannot be blank"))
        if len(self.tags) > MAX_TAGS:
            issues.append(
                property_error(
                    f"A resource can have at most {MAX_TAGS} tags "
                    f"(current: {len(self.tags)})"
                )
            )
        for key, value in self.tags.items():
            if not key or len(key) > MAX_TAG_KEY_LENGTH:
                issues.append(
                    property_error(
                        f"Tag key '{key}' must be 1-{MAX_TAG_KEY_LENGTH} characters"
                    )
                )
            elif _INVALID_TAG_KEY_CHARS.intersection(key):
                issues.append(
                    property_error(f"Tag key '{key}' contains invalid characters")
                )
            if len(str(value)) > MAX_TAG_VALUE_LENGTH:
                issues.append(
                    property_error(
                        f"Tag '{key}' value must not exceed {MAX_TAG_VALUE_LENGTH} "
                        f"characters"
                    )
                )
        for dependency in self.depends_on:
            if not isinstance(dependency, Resource):
                issues.append(
                    property_error(
                        f"depends_on entries must be resources "
                        f"(got {type(dependency).__name__})"
                    )
                )
        return issues


class Resource(Construct):
    """A construct that renders to one ARM template resource.

    Subclasses set ``RESOURCE_TYPE``, ``API_VERSION``, ``NAMING_KIND`` and
    implement ``_render_properties``. ``EMBEDDED_CHILD_TYPES`` lists child
    resource types rendered inside this resource instead of as top-level
    template entries.

    Raises:
        MissingStackError: If no stack encloses ``scope``
        PropertyValidationError: If ``props`` violate any constraint
        InvalidResourceNameError: If an explicit name breaks the naming rule
    """

    RESOURCE_TYPE: str = ""
    API_VERSION: str = ""
    DEPLOYMENT_SCOPE = DeploymentScope.RESOURCE_GROUP
    NAMING_KIND: str = DEFAULT_KIND
    EMBEDDED_CHILD_TYPES: FrozenSet[str] = frozenset()
    HAS_LOCATION = True
    HAS_TAGS = True

    def __init__(
        self, scope: Construct, id: str, props: Optional[ResourceProps] = None
    ) -> None:
        self._props = props if props is not None else ResourceProps()
        resolver = NamingResolver()
        stack = resolver.find_stack(scope, id)
        Node.check_can_attach(scope, id)

        path = Node.child_path(scope, id)
        issues = list(self._props.validate()) + list(self._validate_placement(scope))
        errors = [
            issue if issue.path else replace(issue, path=path)
            for issue in issues
            if issue.is_error
        ]
        if errors:
            raise PropertyValidationError(
                f"Invalid properties for {self.resource_type} '{path}': "
                + "; ".join(issue.message for issue in errors),
                path=path,
                violations=errors,
            )

        self._stack = stack
        self._name = self._resolve_name(resolver, scope, id)
        self._location = self._props.location or stack.location
        self._tags: Dict[str, str] = {**stack.tags, **dict(self._props.tags)}
        self._depends_on = tuple(self._props.depends_on)
        super().__init__(scope, id)
        logger.debug(f"Created {self.resource_type} '{self._name}' at '{path}'")

    def _validate_placement(self, scope: Construct) -> List[ValidationIssue]:
        """Checks that depend on where the resource is placed in the tree."""
        return []

    def _resolve_name(self, resolver: NamingResolver, scope: Construct, id: str) -> str:
        return resolver.resolve(scope, id, self.naming_kind, self._props.name)

    @property
    def resource_type(self) -> str:
        return self.RESOURCE_TYPE

    @property
    def api_version(self) -> str:
        return self.API_VERSION

    @property
    def deployment_scope(self) -> DeploymentScope:
        return self.DEPLOYMENT_SCOPE

    @property
    def naming_kind(self) -> str:
        return self.NAMING_KIND

    @property
    def props(self) -> ResourceProps:
        return self._props

    @property
    def stack(self) -> "Stack":
        return self._stack

    @property
    def name(self) -> str:
        return self._name

    @property
    def location(self) -> str:
        return self._location

    @property
    def tags(self) -> Dict[str, str]:
        return dict(self._tags)

    @property
    def depends_on(self) -> Sequence["Resource"]:
        return self._depends_on

    @property
    def resource_id(self) -> str:
        """Literal ID with ``{subscriptionId}``/``{resourceGroupName}`` placeholders."""
        return build_resource_id(self.resource_type, self.name, self.deployment_scope)

    @property
    def resource_id_expression(self) -> str:
        """``[resourceId(...)]`` expression other resources use to reference this one."""
        return resource_id_expression(self.resource_type, self.name)

    @property
    def host(self) -> Optional["Resource"]:
        """The resource this one is rendered inside, if it is embedded."""
        parent = self.scope
        if (
            isinstance(parent, Resource)
            and self.resource_type in parent.EMBEDDED_CHILD_TYPES
        ):
            return parent
        return None

    @property
    def is_embedded(self) -> bool:
        return self.host is not None

    def embedded_children(self) -> List["Resource"]:
        """Child resources rendered inside this resource, in construction order."""
        return [
            child
            for child in self.node.children
            if isinstance(child, Resource)
            and child.resource_type in self.EMBEDDED_CHILD_TYPES
        ]

    def to_arm_template(self) -> Dict[str, Any]:
        """Render this resource as an ARM template resource entry.

        ``dependsOn`` is not included; the synthesizer adds it once the
        dependency order of the whole stack is known.
        """
        template: Dict[str, Any] = {
            "type": self.resource_type,
            "apiVersion": self.api_version,
            "name": self.name,
        }
        if self.HAS_LOCATION:
            template["location"] = self.location
        if self.HAS_TAGS and self._tags:
            template["tags"] = dict(self._tags)
        template.update(self._render_top_level())
        template["properties"] = self._render_properties()
        return template

    def _render_top_level(self) -> Dict[str, Any]:
        """Extra top-level fields such as ``sku`` or ``kind``."""
        return {}

    def _render_properties(self) -> Dict[str, Any]:
        return {}
