"""Virtual networks, subnets and network security groups.

Subnets created inside a ``VirtualNetwork`` are rendered in the VNet's
``properties.subnets`` array and never as top-level resources, so the VNet
and its subnets deploy atomically. A subnet created anywhere else must name
its VNet with ``virtual_network_name`` and renders as a standalone
``Microsoft.Network/virtualNetworks/subnets`` resource.
"""

import ipaddress
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from ..core.construct import Construct
from ..core.references import to_reference_expression
from ..core.resource import (
    Resource,
    ResourceProps,
    choice_error,
    enum_value,
    property_error,
)
from ..core.validation import ValidationIssue, catalog_suggestion
from ..exceptions import PropertyValidationError
from ..naming.resolver import NamingResolver

logger = logging.getLogger(__name__)

NETWORK_API_VERSION = "2024-07-01"
VIRTUAL_NETWORK_TYPE = "Microsoft.Network/virtualNetworks"
SUBNET_TYPE = "Microsoft.Network/virtualNetworks/subnets"
NETWORK_SECURITY_GROUP_TYPE = "Microsoft.Network/networkSecurityGroups"

MIN_RULE_PRIORITY = 100
MAX_RULE_PRIORITY = 4096
MAX_RULE_DESCRIPTION_LENGTH = 140

_PLURAL_KEYS = {
    "sourcePortRange": "sourcePortRanges",
    "destinationPortRange": "destinationPortRanges",
    "sourceAddressPrefix": "sourceAddressPrefixes",
    "destinationAddressPrefix": "destinationAddressPrefixes",
}


def _cidr_error(field_name: str, value: Any) -> Optional[ValidationIssue]:
    if not isinstance(value, str) or "/" not in value:
        return property_error(
            f"{field_name} '{value}' is not valid CIDR notation "
            f"(expected e.g. '10.0.0.0/16')"
        )
    try:
        ipaddress.ip_network(value, strict=False)
    except ValueError:
        return property_error(f"{field_name} '{value}' is not valid CIDR notation")
    return None


# Virtual network


@dataclass(frozen=True, kw_only=True)
class VirtualNetworkProps(ResourceProps):
    """Properties of a virtual network.

    Attributes:
        address_space: CIDR ranges of the VNet; at least one is required
        dns_servers: Custom DNS server IP addresses
        enable_ddos_protection: Enable DDoS protection standard
        enable_vm_protection: Enable VM protection for subnets
    """

    address_space: Sequence[str]
    dns_servers: Sequence[str] = ()
    enable_ddos_protection: bool = False
    enable_vm_protection: bool = False

    def validate(self) -> List[ValidationIssue]:
        issues = super().validate()
        if not self.address_space:
            issues.append(
                property_error("address_space must contain at least one CIDR range")
            )
        for index, prefix in enumerate(self.address_space):
            issue = _cidr_error(f"address_space[{index}]", prefix)
            if issue:
                issues.append(issue)
        for server in self.dns_servers:
            try:
                ipaddress.ip_address(server)
            except ValueError:
                issues.append(
                    property_error(f"DNS server '{server}' is not a valid IP address")
                )
        return issues


class VirtualNetwork(Resource):
    """A virtual network that renders its ``Subnet`` children inline."""

    RESOURCE_TYPE = VIRTUAL_NETWORK_TYPE
    API_VERSION = NETWORK_API_VERSION
    NAMING_KIND = "vnet"
    EMBEDDED_CHILD_TYPES = frozenset({SUBNET_TYPE})

    def __init__(self, scope: Construct, id: str, props: VirtualNetworkProps) -> None:
        super().__init__(scope, id, props)

    @property
    def props(self) -> VirtualNetworkProps:
        return self._props  # type: ignore[return-value]

    @property
    def address_space(self) -> List[str]:
        return list(self.props.address_space)

    @property
    def subnets(self) -> List["Subnet"]:
        return [child for child in self.embedded_children() if isinstance(child, Subnet)]

    def _render_properties(self) -> Dict[str, Any]:
        props = self.props
        properties: Dict[str, Any] = {
            "addressSpace": {"addressPrefixes": list(props.address_space)}
        }
        if props.dns_servers:
            properties["dhcpOptions"] = {"dnsServers": list(props.dns_servers)}
        if props.enable_ddos_protection:
            properties["enableDdosProtection"] = True
        if props.enable_vm_protection:
            properties["enableVmProtection"] = True
        subnets = self.subnets
        if subnets:
            properties["subnets"] = [subnet.to_embedded_template() for subnet in subnets]
        return properties


# Network security group


class SecurityRuleDirection(str, Enum):
    INBOUND = "Inbound"
    OUTBOUND = "Outbound"


class SecurityRuleAccess(str, Enum):
    ALLOW = "Allow"
    DENY = "Deny"


class SecurityRuleProtocol(str, Enum):
    TCP = "Tcp"
    UDP = "Udp"
    ICMP = "Icmp"
    ESP = "Esp"
    AH = "Ah"
    ANY = "*"


@dataclass(frozen=True)
class SecurityRule:
    """A single NSG security rule.

    Singular and plural forms of the port and address fields are mutually
    exclusive; the plural form wins when both are given.
    """

    name: str
    priority: int
    direction: Union[SecurityRuleDirection, str]
    access: Union[SecurityRuleAccess, str] = SecurityRuleAccess.ALLOW
    protocol: Union[SecurityRuleProtocol, str] = SecurityRuleProtocol.TCP
    source_port_range: str = "*"
    destination_port_range: str = "*"
    source_address_prefix: str = "*"
    destination_address_prefix: str = "*"
    source_port_ranges: Sequence[str] = ()
    destination_port_ranges: Sequence[str] = ()
    source_address_prefixes: Sequence[str] = ()
    destination_address_prefixes: Sequence[str] = ()
    description: Optional[str] = None

    def validate(self) -> List[ValidationIssue]:
        issues: List[ValidationIssue] = []
        label = f"Security rule '{self.name}'"
        if not self.name or not self.name.strip():
            issues.append(property_error("Security rule name cannot be empty"))
        if not MIN_RULE_PRIORITY <= self.priority <= MAX_RULE_PRIORITY:
            issues.append(
                property_error(
                    f"{label}: priority must be between {MIN_RULE_PRIORITY} and "
                    f"{MAX_RULE_PRIORITY} (got {self.priority})"
                )
            )
        if self.description and len(self.description) > MAX_RULE_DESCRIPTION_LENGTH:
            issues.append(
                property_error(
                    f"{label}: description cannot exceed "
                    f"{MAX_RULE_DESCRIPTION_LENGTH} characters"
                )
            )
        for field_name, value, choices in (
            ("direction", self.direction, SecurityRuleDirection),
            ("access", self.access, SecurityRuleAccess),
            ("protocol", self.protocol, SecurityRuleProtocol),
        ):
            issue = choice_error(f"{label}: {field_name}", value, choices)
            if issue:
                issues.append(issue)
        return issues

    def to_template(self) -> Dict[str, Any]:
        properties: Dict[str, Any] = {}
        if self.description:
            properties["description"] = self.description
        properties["protocol"] = enum_value(self.protocol)
        ranges = (
            ("sourcePortRange", self.source_port_range, self.source_port_ranges),
            (
                "destinationPortRange",
                self.destination_port_range,
                self.destination_port_ranges,
            ),
            (
                "sourceAddressPrefix",
                self.source_address_prefix,
                self.source_address_prefixes,
            ),
            (
                "destinationAddressPrefix",
                self.destination_address_prefix,
                self.destination_address_prefixes,
            ),
        )
        for key, singular, plural in ranges:
            if plural:
                properties[_PLURAL_KEYS[key]] = list(plural)
            else:
                properties[key] = singular
        properties["access"] = enum_value(self.access)
        properties["priority"] = self.priority
        properties["direction"] = enum_value(self.direction)
        return {"name": self.name, "properties": properties}


@dataclass(frozen=True, kw_only=True)
class NetworkSecurityGroupProps(ResourceProps):
    """Properties of a network security group.

    Attributes:
        security_rules: Rules in evaluation order
        flush_connection: Re-evaluate existing flows when rules change
    """

    security_rules: Sequence[SecurityRule] = ()
    flush_connection: Optional[bool] = None

    def validate(self) -> List[ValidationIssue]:
        issues = super().validate()
        names = set()
        priorities: Dict[str, Dict[int, str]] = {}
        for rule in self.security_rules:
            issues.extend(rule.validate())
            if rule.name in names:
                issues.append(
                    property_error(f"Duplicate security rule name '{rule.name}'")
                )
            names.add(rule.name)

            direction = str(enum_value(rule.direction))
            seen = priorities.setdefault(direction, {})
            if rule.priority in seen:
                issues.append(
                    property_error(
                        f"Security rules '{seen[rule.priority]}' and '{rule.name}' "
                        f"share {direction} priority {rule.priority}",
                        code="SEC001",
                        suggestion=catalog_suggestion("SEC001"),
                    )
                )
            else:
                seen[rule.priority] = rule.name
        return issues


class NetworkSecurityGroup(Resource):
    """A network security group with inline security rules."""

    RESOURCE_TYPE = NETWORK_SECURITY_GROUP_TYPE
    API_VERSION = NETWORK_API_VERSION
    NAMING_KIND = "nsg"

    def __init__(
        self,
        scope: Construct,
        id: str,
        props: Optional[NetworkSecurityGroupProps] = None,
    ) -> None:
        super().__init__(scope, id, props or NetworkSecurityGroupProps())

    @property
    def props(self) -> NetworkSecurityGroupProps:
        return self._props  # type: ignore[return-value]

    @property
    def security_rules(self) -> List[SecurityRule]:
        return list(self.props.security_rules)

    def _render_properties(self) -> Dict[str, Any]:
        properties: Dict[str, Any] = {}
        if self.props.security_rules:
            properties["securityRules"] = [
                rule.to_template() for rule in self.props.security_rules
            ]
        if self.props.flush_connection is not None:
            properties["flushConnection"] = self.props.flush_connection
        return properties


# Subnet


@dataclass(frozen=True)
class SubnetDelegation:
    """Delegates a subnet to an Azure service, e.g. ``Microsoft.Web/serverFarms``."""

    name: str
    service_name: str

    def to_template(self) -> Dict[str, Any]:
        return {"name": self.name, "properties": {"serviceName": self.service_name}}


@dataclass(frozen=True, kw_only=True)
class SubnetProps(ResourceProps):
    """Properties of a subnet.

    Attributes:
        address_prefix: CIDR range of the subnet
        address_prefixes: Several CIDR ranges, instead of ``address_prefix``
        network_security_group: NSG resource, or its resource ID or expression
        delegations: Service delegations
        service_endpoints: Service endpoint names, e.g. ``Microsoft.Storage``
        virtual_network_name: Name of the VNet; required when the subnet is
            not created inside a ``VirtualNetwork``
    """

    address_prefix: Optional[str] = None
    address_prefixes: Sequence[str] = ()
    network_security_group: Optional[Union[Resource, str]] = None
    delegations: Sequence[SubnetDelegation] = ()
    service_endpoints: Sequence[str] = ()
    virtual_network_name: Optional[str] = None

    def validate(self) -> List[ValidationIssue]:
        issues = super().validate()
        if self.address_prefix and self.address_prefixes:
            issues.append(
                property_error("Use either address_prefix or address_prefixes, not both")
            )
        elif not self.address_prefix and not self.address_prefixes:
            issues.append(
                property_error("A subnet needs address_prefix or address_prefixes")
            )
        if self.address_prefix:
            issue = _cidr_error("address_prefix", self.address_prefix)
            if issue:
                issues.append(issue)
        for index, prefix in enumerate(self.address_prefixes):
            issue = _cidr_error(f"address_prefixes[{index}]", prefix)
            if issue:
                issues.append(issue)

        nsg = self.network_security_group
        if isinstance(nsg, Resource):
            if nsg.resource_type != NETWORK_SECURITY_GROUP_TYPE:
                issues.append(
                    property_error(
                        f"network_security_group must be a network security group "
                        f"(got {nsg.resource_type})"
                    )
                )
        elif nsg is not None and (not isinstance(nsg, str) or not nsg.strip()):
            issues.append(
                property_error("network_security_group must be a resource or an ID")
            )

        for index, delegation in enumerate(self.delegations):
            if not delegation.name or not delegation.name.strip():
                issues.append(
                    property_error(
                        f"delegations[{index}] is missing a name",
                        code="ARM001",
                        suggestion=catalog_suggestion("ARM001"),
                    )
                )
            if not delegation.service_name or not delegation.service_name.strip():
                issues.append(
                    property_error(
                        f"delegations[{index}] is missing a service name",
                        code="ARM001",
                        suggestion=catalog_suggestion("ARM001"),
                    )
                )
        for index, endpoint in enumerate(self.service_endpoints):
            if not endpoint or not endpoint.strip():
                issues.append(
                    property_error(f"service_endpoints[{index}] cannot be empty")
                )
        vnet_name = self.virtual_network_name
        if vnet_name is not None and not vnet_name.strip():
            issues.append(property_error("virtual_network_name cannot be blank"))
        return issues


class Subnet(Resource):
    """A subnet, either embedded in its VNet or standalone.

    Example:
        >>> vnet = VirtualNetwork(rg, "Hub", VirtualNetworkProps(
        ...     address_space=["10.0.0.0/16"]))
        >>> Subnet(vnet, "Web", SubnetProps(address_prefix="10.0.1.0/24"))
    """

    RESOURCE_TYPE = SUBNET_TYPE
    API_VERSION = NETWORK_API_VERSION
    NAMING_KIND = "snet"
    HAS_LOCATION = False
    HAS_TAGS = False

    def __init__(self, scope: Construct, id: str, props: SubnetProps) -> None:
        self._subnet_name = ""
        super().__init__(scope, id, props)

    @property
    def props(self) -> SubnetProps:
        return self._props  # type: ignore[return-value]

    @property
    def subnet_name(self) -> str:
        """Name of the subnet without its VNet prefix."""
        return self._subnet_name

    @property
    def virtual_network_name(self) -> str:
        return self.name.rsplit("/", 1)[0]

    def _validate_placement(self, scope: Construct) -> List[ValidationIssue]:
        vnet_name = self.props.virtual_network_name
        if isinstance(scope, VirtualNetwork):
            if vnet_name is not None and vnet_name != scope.name:
                return [
                    property_error(
                        f"virtual_network_name '{vnet_name}' does not match the "
                        f"enclosing virtual network '{scope.name}'"
                    )
                ]
            return []
        if vnet_name is None:
            return [
                property_error(
                    "A subnet outside a VirtualNetwork must set virtual_network_name"
                )
            ]
        return []

    def _resolve_name(self, resolver: NamingResolver, scope: Construct, id: str) -> str:
        subnet_name = resolver.resolve(scope, id, self.naming_kind, self.props.name)
        if isinstance(scope, VirtualNetwork):
            vnet_name = scope.name
            for sibling in scope.subnets:
                if sibling.subnet_name == subnet_name:
                    path = f"{scope.path}/{id}"
                    raise PropertyValidationError(
                        f"Subnet name '{subnet_name}' is already used in virtual "
                        f"network '{vnet_name}'",
                        path=path,
                        violations=[
                            property_error(f"Duplicate subnet name '{subnet_name}'")
                        ],
                    )
        else:
            vnet_name = self.props.virtual_network_name or ""
        self._subnet_name = subnet_name
        return f"{vnet_name}/{subnet_name}"

    def _render_properties(self) -> Dict[str, Any]:
        props = self.props
        properties: Dict[str, Any] = {}
        if props.address_prefixes:
            properties["addressPrefixes"] = list(props.address_prefixes)
        else:
            properties["addressPrefix"] = props.address_prefix

        nsg = props.network_security_group
        if isinstance(nsg, Resource):
            properties["networkSecurityGroup"] = {"id": nsg.resource_id_expression}
        elif nsg is not None:
            properties["networkSecurityGroup"] = {"id": to_reference_expression(nsg)}

        if props.delegations:
            properties["delegations"] = [d.to_template() for d in props.delegations]
        if props.service_endpoints:
            properties["serviceEndpoints"] = [
                {"service": service} for service in props.service_endpoints
            ]
        return properties

    def to_embedded_template(self) -> Dict[str, Any]:
        """Entry of the parent VNet's ``properties.subnets`` array."""
        return {"name": self.subnet_name, "properties": self._render_properties()}
