"""ARM structural validation.

Catches template shapes that pass JSON schema checks loosely but fail at
deployment time:

- ARM001: subnet delegations must wrap ``serviceName`` in ``properties``
- ARM002: subnet ``addressPrefix`` must live under ``properties``
- ARM003: ``{"id": ...}`` references must be ``resourceId()`` expressions
- ARM004: ``publicNetworkAccess`` must not be ``Disabled`` at deployment time
"""

from typing import Any, Dict, Mapping

from ...core.references import is_expression
from ...core.validation import (
    ValidationResult,
    ValidationResultBuilder,
    catalog_suggestion,
)
from .base import TemplateValidator, ValidationContext, describe

REQUIRED_TEMPLATE_KEYS = ("$schema", "contentVersion", "resources")
REQUIRED_RESOURCE_KEYS = ("type", "apiVersion", "name")
SUBNET_TYPE_SUFFIX = "/subnets"


class ArmStructureValidator(TemplateValidator):
    """Checks the structure of the template and of network resources."""

    name = "arm_structure"
    description = "Template keys, subnet and delegation shape, reference objects"

    def validate(
        self, template: Dict[str, Any], context: ValidationContext
    ) -> ValidationResult:
        builder = ValidationResultBuilder(validator=self.name)

        for key in REQUIRED_TEMPLATE_KEYS:
            if key not in template:
                builder.add_error(
                    f"Template is missing required key '{key}'",
                    path=context.stack_path,
                    code="TEMPLATE_STRUCTURE",
                )
        if "resources" in template and not isinstance(template["resources"], list):
            builder.add_error(
                "Template 'resources' must be a list",
                path=context.stack_path,
                code="TEMPLATE_STRUCTURE",
            )

        for resource in self.iter_resources(template):
            path = context.path_for(resource)
            for key in REQUIRED_RESOURCE_KEYS:
                if not resource.get(key):
                    builder.add_error(
                        f"{describe(resource)} is missing required field '{key}'",
                        path=path,
                        code="RESOURCE_STRUCTURE",
                    )
            if "properties" in resource and not isinstance(
                resource["properties"], dict
            ):
                builder.add_error(
                    f"{describe(resource)} 'properties' must be an object",
                    path=path,
                    code="RESOURCE_STRUCTURE",
                )

            properties = self.properties_of(resource)
            if str(resource.get("type", "")).endswith(SUBNET_TYPE_SUFFIX):
                self._check_subnet(
                    builder, str(resource.get("name")), resource, path, embedded=False
                )
            for subnet in self.embedded_subnets(resource):
                self._check_subnet(
                    builder, str(subnet.get("name")), subnet, path, embedded=True
                )

            self._check_references(builder, describe(resource), properties, path)

            if str(properties.get("publicNetworkAccess", "")).lower() == "disabled":
                builder.add_error(
                    f"{describe(resource)} disables public network access before "
                    f"deployment",
                    path=path,
                    code="ARM004",
                    suggestion=catalog_suggestion("ARM004"),
                )

        return builder.build()

    def _check_subnet(
        self,
        builder: ValidationResultBuilder,
        subnet_name: str,
        subnet: Mapping[str, Any],
        path: str,
        embedded: bool,
    ) -> None:
        label = f"Subnet '{subnet_name}'"
        if embedded and "name" not in subnet:
            builder.add_error(
                "Embedded subnet is missing 'name'", path=path, code="RESOURCE_STRUCTURE"
            )

        for key in ("addressPrefix", "addressPrefixes"):
            if key in subnet:
                builder.add_error(
                    f"{label} has '{key}' outside of 'properties'",
                    path=path,
                    code="ARM002",
                    suggestion=catalog_suggestion("ARM002"),
                )

        properties = subnet.get("properties")
        if not isinstance(properties, dict):
            builder.add_error(
                f"{label} is missing its 'properties' object",
                path=path,
                code="ARM002",
                suggestion=catalog_suggestion("ARM002"),
            )
            return

        if not properties.get("addressPrefix") and not properties.get(
            "addressPrefixes"
        ):
            builder.add_error(
                f"{label} has no address prefix",
                path=path,
                code="SUBNET_NO_PREFIX",
            )

        delegations = properties.get("delegations", [])
        if not isinstance(delegations, list):
            builder.add_error(
                f"{label} 'delegations' must be a list",
                path=path,
                code="ARM001",
                suggestion=catalog_suggestion("ARM001"),
            )
            delegations = []
        for delegation in delegations:
            if not isinstance(delegation, dict):
                continue
            delegation_properties = delegation.get("properties")
            service_name = (
                delegation_properties.get("serviceName")
                if isinstance(delegation_properties, dict)
                else None
            )
            if "serviceName" in delegation or not service_name:
                builder.add_error(
                    f"{label} delegation '{delegation.get('name', '?')}' must "
                    f"declare serviceName under 'properties'",
                    path=path,
                    code="ARM001",
                    suggestion=catalog_suggestion("ARM001"),
                )
            if not delegation.get("name"):
                builder.add_error(
                    f"{label} has a delegation without a name",
                    path=path,
                    code="ARM001",
                )

        nsg = properties.get("networkSecurityGroup")
        if nsg is not None and (not isinstance(nsg, dict) or "id" not in nsg):
            builder.add_error(
                f"{label} networkSecurityGroup must be an object with an 'id'",
                path=path,
                code="ARM003",
                suggestion=catalog_suggestion("ARM003"),
            )

    def _check_references(
        self,
        builder: ValidationResultBuilder,
        label: str,
        value: Any,
        path: str,
        trail: str = "properties",
    ) -> None:
        """Every ``{"id": ...}`` object below ``properties`` must hold an expression."""
        if isinstance(value, dict):
            reference = value.get("id")
            if isinstance(reference, str) and not is_expression(reference):
                builder.add_error(
                    f"{label} reference at '{trail}.id' is a literal "
                    f"('{reference}')",
                    path=path,
                    code="ARM003",
                    suggestion=catalog_suggestion("ARM003"),
                )
            for key, item in value.items():
                if key != "id":
                    self._check_references(builder, label, item, path, f"{trail}.{key}")
        elif isinstance(value, list):
            for index, item in enumerate(value):
                self._check_references(builder, label, item, path, f"{trail}[{index}]")
