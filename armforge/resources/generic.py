"""Resources of any type, with property data produced elsewhere.

``GenericResource`` carries opaque ``properties`` (for instance exported from
an existing deployment) through synthesis unchanged, except that literal
``{"id": "/subscriptions/..."}`` references are rewritten to ``resourceId()``
expressions so they order correctly and pass template validation.
"""

import copy
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..core.construct import Construct
from ..core.references import is_literal_resource_id, to_reference_expression
from ..core.resource import Resource, ResourceProps, property_error
from ..core.scopes import DeploymentScope
from ..core.validation import ValidationIssue
from ..naming.conventions import kind_for_resource_type

_RESOURCE_TYPE_PATTERN = re.compile(r"^[A-Za-z0-9.]+(/[A-Za-z0-9]+)+$")
_API_VERSION_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}(-preview|-beta)?$")

# Top-level keys owned by Resource.to_arm_template
_RESERVED_KEYS = {"type", "apiVersion", "name", "location", "tags", "properties"}


def _normalize_references(value: Any) -> Any:
    if isinstance(value, dict):
        normalized = {}
        for key, item in value.items():
            if key == "id" and is_literal_resource_id(item):
                normalized[key] = to_reference_expression(item)
            else:
                normalized[key] = _normalize_references(item)
        return normalized
    if isinstance(value, list):
        return [_normalize_references(item) for item in value]
    return value


@dataclass(frozen=True, kw_only=True)
class GenericResourceProps(ResourceProps):
    """Properties of a generic resource.

    Attributes:
        resource_type: ARM type, e.g. ``Microsoft.Web/serverfarms``
        api_version: ARM API version
        properties: ARM ``properties`` object, copied as-is
        top_level: Extra top-level fields such as ``sku`` or ``kind``
        naming_kind: Naming rule to apply; derived from the type when omitted
        deployment_scope: Scope the resource deploys at
        normalize_references: Rewrite literal ``id`` references as expressions
    """

    resource_type: str
    api_version: str
    properties: Mapping[str, Any] = field(default_factory=dict)
    top_level: Mapping[str, Any] = field(default_factory=dict)
    naming_kind: Optional[str] = None
    deployment_scope: DeploymentScope = DeploymentScope.RESOURCE_GROUP
    normalize_references: bool = True

    def validate(self) -> List[ValidationIssue]:
        issues = super().validate()
        if not _RESOURCE_TYPE_PATTERN.match(self.resource_type or ""):
            issues.append(
                property_error(
                    f"resource_type '{self.resource_type}' must look like "
                    f"'Namespace/type'"
                )
            )
        if not _API_VERSION_PATTERN.match(self.api_version or ""):
            issues.append(
                property_error(
                    f"api_version '{self.api_version}' must look like 'YYYY-MM-DD'"
                )
            )
        if not isinstance(self.properties, Mapping):
            issues.append(property_error("properties must be a mapping"))
        reserved = sorted(_RESERVED_KEYS.intersection(self.top_level))
        if reserved:
            issues.append(
                property_error(
                    f"top_level cannot override {', '.join(reserved)}; use the "
                    f"matching property instead"
                )
            )
        return issues


class GenericResource(Resource):
    """Any ARM resource type described entirely by its props."""

    def __init__(self, scope: Construct, id: str, props: GenericResourceProps) -> None:
        super().__init__(scope, id, props)

    @property
    def props(self) -> GenericResourceProps:
        return self._props  # type: ignore[return-value]

    @property
    def resource_type(self) -> str:
        return self.props.resource_type

    @property
    def api_version(self) -> str:
        return self.props.api_version

    @property
    def deployment_scope(self) -> DeploymentScope:
        return self.props.deployment_scope

    @property
    def naming_kind(self) -> str:
        return self.props.naming_kind or kind_for_resource_type(self.resource_type)

    def _render_top_level(self) -> Dict[str, Any]:
        return copy.deepcopy(dict(self.props.top_level))

    def _render_properties(self) -> Dict[str, Any]:
        properties = copy.deepcopy(dict(self.props.properties))
        if self.props.normalize_references:
            properties = _normalize_references(properties)
        return properties
