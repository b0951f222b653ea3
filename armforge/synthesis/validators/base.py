"""Base validator class for synthesized ARM templates.

Validators inspect a rendered template and report ``ValidationIssue``s. They
never raise for template problems and never stop at the first issue; the
pipeline decides what blocks emission.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, Tuple

from ...core.scopes import DeploymentScope
from ...core.validation import ValidationResult
from ...naming.conventions import NamingConventions


@dataclass(frozen=True)
class ValidationContext:
    """What validators know about the stack a template came from.

    Attributes:
        stack_path: Construct path of the stack
        deployment_scope: Scope the template deploys at
        conventions: Naming conventions in effect for the stack
        resource_paths: ``resource_key`` of a rendered resource -> construct path
    """

    stack_path: str = ""
    deployment_scope: DeploymentScope = DeploymentScope.RESOURCE_GROUP
    conventions: NamingConventions = field(default_factory=NamingConventions)
    resource_paths: Mapping[Tuple[str, str], str] = field(default_factory=dict)

    def path_for(self, resource: Mapping[str, Any]) -> str:
        """Construct path of a template resource, falling back to the stack."""
        return self.resource_paths.get(resource_key(resource), self.stack_path)


class TemplateValidator(ABC):
    """Abstract base class for template validators.

    Subclasses set ``name`` (used in the registry and in
    ``ValidationSettings.disabled_validators``) and implement ``validate``.
    """

    name: str = ""
    description: str = ""

    @abstractmethod
    def validate(
        self, template: Dict[str, Any], context: ValidationContext
    ) -> ValidationResult:
        """Validate ``template`` and return every issue found."""
        raise NotImplementedError

    @staticmethod
    def iter_resources(template: Mapping[str, Any]) -> Iterator[Dict[str, Any]]:
        resources = template.get("resources")
        if not isinstance(resources, list):
            return
        for resource in resources:
            if isinstance(resource, dict):
                yield resource

    @staticmethod
    def properties_of(resource: Mapping[str, Any]) -> Dict[str, Any]:
        properties = resource.get("properties")
        return properties if isinstance(properties, dict) else {}

    @staticmethod
    def embedded_subnets(resource: Mapping[str, Any]) -> Iterator[Dict[str, Any]]:
        subnets = TemplateValidator.properties_of(resource).get("subnets")
        if not isinstance(subnets, list):
            return
        for subnet in subnets:
            if isinstance(subnet, dict):
                yield subnet

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


def describe(resource: Mapping[str, Any]) -> str:
    """Short label for messages, e.g. ``Microsoft.Network/virtualNetworks 'vnet-a'``."""
    return f"{resource.get('type', '<unknown type>')} '{resource.get('name', '?')}'"


def resource_key(resource: Mapping[str, Any]) -> Tuple[str, str]:
    """Case-insensitive ``(type, name)`` identity of a template resource."""
    return (
        str(resource.get("type", "")).lower(),
        str(resource.get("name", "")).lower(),
    )
