"""
Subnet Address Range Validation for synthesized templates

Validates subnet address ranges to ensure they:
1. Fall within their parent VNet address space
2. Don't overlap with other subnets in the same VNet
3. Have sufficient address space for resources

Embedded subnets (``properties.subnets``) and standalone subnet resources
(``<vnet>/<subnet>``) of a VNet declared in the same template are both
checked. Nothing is rewritten; issues are reported only.
"""

import ipaddress
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple, Union

from ...core.references import is_expression
from ...core.validation import (
    ValidationResult,
    ValidationResultBuilder,
    catalog_suggestion,
)
from .base import TemplateValidator, ValidationContext

logger = logging.getLogger(__name__)

VNET_TYPE = "microsoft.network/virtualnetworks"
SUBNET_TYPE = "microsoft.network/virtualnetworks/subnets"

# Azure reserves five addresses in every subnet.
MIN_RECOMMENDED_ADDRESSES = 16

Network = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


@dataclass
class _SubnetEntry:
    name: str
    prefixes: List[str]
    path: str


@dataclass
class _VnetEntry:
    name: str
    address_space: List[str]
    path: str
    subnets: List[_SubnetEntry] = field(default_factory=list)


def _extract_address_prefixes(subnet: Mapping[str, Any]) -> List[str]:
    properties = subnet.get("properties", {})
    if not isinstance(properties, dict):
        return []
    if "addressPrefixes" in properties:
        prefixes = properties["addressPrefixes"]
        if not isinstance(prefixes, list):
            return []
        return [p for p in prefixes if isinstance(p, str)]
    if "addressPrefix" in properties and isinstance(properties["addressPrefix"], str):
        return [properties["addressPrefix"]]
    return []


class SubnetAddressValidator(TemplateValidator):
    """
    Validates subnet address ranges against their VNet.

    This validator checks that:
    - Subnets fall within their VNet's address space (NET001)
    - Subnets don't overlap with each other (NET002)
    - Subnets have adequate address space (warning)
    """

    name = "subnet_address"
    description = "Subnets lie inside the VNet address space and do not overlap"

    def validate(
        self, template: Dict[str, Any], context: ValidationContext
    ) -> ValidationResult:
        builder = ValidationResultBuilder(validator=self.name)

        vnets: Dict[str, _VnetEntry] = {}
        standalone: List[Tuple[str, _SubnetEntry]] = []
        for resource in self.iter_resources(template):
            resource_type = str(resource.get("type", "")).lower()
            name = resource.get("name")
            if not isinstance(name, str) or is_expression(name):
                continue
            path = context.path_for(resource)
            if resource_type == VNET_TYPE:
                address_space = (
                    self.properties_of(resource)
                    .get("addressSpace", {})
                    .get("addressPrefixes", [])
                )
                vnet = _VnetEntry(name, list(address_space), path)
                for subnet in self.embedded_subnets(resource):
                    vnet.subnets.append(
                        _SubnetEntry(
                            str(subnet.get("name", "unknown")),
                            _extract_address_prefixes(subnet),
                            path,
                        )
                    )
                vnets[name.lower()] = vnet
            elif resource_type == SUBNET_TYPE and "/" in name:
                vnet_name, subnet_name = name.split("/", 1)
                standalone.append(
                    (
                        vnet_name.lower(),
                        _SubnetEntry(
                            subnet_name, _extract_address_prefixes(resource), path
                        ),
                    )
                )

        for vnet_name, subnet in standalone:
            vnet = vnets.get(vnet_name)
            if vnet is None:
                builder.add_info(
                    f"Subnet '{subnet.name}' belongs to VNet '{vnet_name}', which is "
                    f"not declared in this template; address checks skipped",
                    path=subnet.path,
                    code="VNET_NOT_IN_TEMPLATE",
                )
                continue
            vnet.subnets.append(subnet)

        for vnet in vnets.values():
            self._validate_vnet(builder, vnet)

        return builder.build()

    def _validate_vnet(self, builder: ValidationResultBuilder, vnet: _VnetEntry) -> None:
        """Validate all subnets for a given VNet."""
        try:
            vnet_networks = [
                ipaddress.ip_network(addr, strict=False) for addr in vnet.address_space
            ]
        except (TypeError, ValueError) as e:
            logger.error(
                f"Invalid VNet address space for '{vnet.name}': "
                f"{vnet.address_space} - {e}"
            )
            builder.add_error(
                f"VNet '{vnet.name}' has an invalid address space: {e}",
                path=vnet.path,
                code="INVALID_VNET_SPACE",
            )
            return

        # Track allocated subnet networks for overlap detection
        allocated_subnets: List[Tuple[str, Network]] = []

        for subnet in vnet.subnets:
            if not subnet.prefixes:
                # Reported by the structure validator.
                continue

            for prefix in subnet.prefixes:
                try:
                    subnet_network = ipaddress.ip_network(prefix, strict=False)
                except ValueError as e:
                    builder.add_error(
                        f"Subnet '{subnet.name}' has invalid prefix '{prefix}': {e}",
                        path=subnet.path,
                        code="INVALID_PREFIX",
                    )
                    continue

                within_vnet = any(
                    subnet_network.version == vnet_net.version
                    and subnet_network.subnet_of(vnet_net)  # type: ignore[arg-type]
                    for vnet_net in vnet_networks
                )
                if not within_vnet:
                    builder.add_error(
                        f"Subnet CIDR {prefix} of '{subnet.name}' is not within VNet "
                        f"'{vnet.name}' range {', '.join(vnet.address_space)}",
                        path=subnet.path,
                        code="NET001",
                        suggestion=catalog_suggestion("NET001"),
                    )
                    continue

                for allocated_name, allocated_net in allocated_subnets:
                    if (
                        subnet_network.version == allocated_net.version
                        and subnet_network.overlaps(allocated_net)  # type: ignore[arg-type]
                    ):
                        builder.add_error(
                            f"Subnet address spaces overlap: '{subnet.name}' "
                            f"({prefix}) and '{allocated_name}' ({allocated_net})",
                            path=subnet.path,
                            code="NET002",
                            suggestion=catalog_suggestion("NET002"),
                        )

                if subnet_network.num_addresses < MIN_RECOMMENDED_ADDRESSES:
                    builder.add_warning(
                        f"Subnet '{subnet.name}' has only "
                        f"{subnet_network.num_addresses} addresses (recommend at "
                        f"least /28 or {MIN_RECOMMENDED_ADDRESSES} addresses)",
                        path=subnet.path,
                        code="SUBNET_TOO_SMALL",
                    )

                allocated_subnets.append((subnet.name, subnet_network))
