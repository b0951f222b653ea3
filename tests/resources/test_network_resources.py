"""
Tests for VirtualNetwork, Subnet and NetworkSecurityGroup.
"""

import pytest

from armforge.core.construct import Construct
from armforge.exceptions import PropertyValidationError
from armforge.resources.network import (
    NetworkSecurityGroup,
    NetworkSecurityGroupProps,
    SecurityRule,
    SecurityRuleAccess,
    SecurityRuleDirection,
    SecurityRuleProtocol,
    Subnet,
    SubnetDelegation,
    SubnetProps,
    VirtualNetwork,
    VirtualNetworkProps,
)
from armforge.resources.storage import StorageAccount


@pytest.fixture
def hub(rg_stack):
    return VirtualNetwork(
        rg_stack,
        "Hub",
        VirtualNetworkProps(name="vnet-hub", address_space=["10.0.0.0/16"]),
    )


def messages(exc_info):
    return [violation.message for violation in exc_info.value.violations]


class TestVirtualNetwork:
    """Test cases for VirtualNetwork."""

    def test_render(self, hub):
        template = hub.to_arm_template()

        assert template["type"] == "Microsoft.Network/virtualNetworks"
        assert template["apiVersion"] == "2024-07-01"
        assert template["properties"] == {
            "addressSpace": {"addressPrefixes": ["10.0.0.0/16"]}
        }

    def test_optional_properties(self, rg_stack):
        vnet = VirtualNetwork(
            rg_stack,
            "Spoke",
            VirtualNetworkProps(
                address_space=["10.1.0.0/16"],
                dns_servers=["10.1.0.4"],
                enable_ddos_protection=True,
            ),
        )

        properties = vnet.to_arm_template()["properties"]

        assert properties["dhcpOptions"] == {"dnsServers": ["10.1.0.4"]}
        assert properties["enableDdosProtection"] is True
        assert "enableVmProtection" not in properties

    def test_empty_address_space(self, rg_stack):
        with pytest.raises(PropertyValidationError) as exc_info:
            VirtualNetwork(rg_stack, "Bad", VirtualNetworkProps(address_space=[]))

        assert "at least one CIDR range" in messages(exc_info)[0]

    def test_invalid_cidr_and_dns(self, rg_stack):
        """Test that every malformed value is reported at once."""
        props = VirtualNetworkProps(
            address_space=["10.0.0.0", "300.0.0.0/8"], dns_servers=["dns"]
        )

        with pytest.raises(PropertyValidationError) as exc_info:
            VirtualNetwork(rg_stack, "Bad", props)

        assert len(exc_info.value.violations) == 3
        assert rg_stack.node.find_child("Bad") is None

    def test_generated_name(self, rg_stack):
        vnet = VirtualNetwork(
            rg_stack, "Core", VirtualNetworkProps(address_space=["10.0.0.0/16"])
        )

        assert vnet.name == "vnet-dp-authr-core-nonprod-eus-01"


class TestSubnet:
    """Test cases for Subnet."""

    def test_embedded_template(self, hub):
        subnet = Subnet(
            hub,
            "Web",
            SubnetProps(
                name="snet-web",
                address_prefix="10.0.1.0/24",
                delegations=[
                    SubnetDelegation(
                        name="web", service_name="Microsoft.Web/serverFarms"
                    )
                ],
                service_endpoints=["Microsoft.Storage"],
            ),
        )

        assert subnet.name == "vnet-hub/snet-web"
        assert subnet.to_embedded_template() == {
            "name": "snet-web",
            "properties": {
                "addressPrefix": "10.0.1.0/24",
                "delegations": [
                    {
                        "name": "web",
                        "properties": {"serviceName": "Microsoft.Web/serverFarms"},
                    }
                ],
                "serviceEndpoints": [{"service": "Microsoft.Storage"}],
            },
        }
        assert hub.subnets == [subnet]

    def test_standalone_template_has_no_location(self, rg_stack):
        subnet = Subnet(
            rg_stack,
            "Web",
            SubnetProps(
                name="snet-web",
                address_prefixes=["10.0.1.0/24", "10.0.2.0/24"],
                virtual_network_name="vnet-hub",
            ),
        )

        template = subnet.to_arm_template()

        assert list(template) == ["type", "apiVersion", "name", "properties"]
        assert template["name"] == "vnet-hub/snet-web"
        assert template["properties"] == {
            "addressPrefixes": ["10.0.1.0/24", "10.0.2.0/24"]
        }
        assert not subnet.is_embedded
        assert subnet.virtual_network_name == "vnet-hub"

    def test_standalone_requires_vnet_name(self, rg_stack):
        with pytest.raises(PropertyValidationError) as exc_info:
            Subnet(rg_stack, "Web", SubnetProps(address_prefix="10.0.1.0/24"))

        assert "virtual_network_name" in messages(exc_info)[0]

    def test_vnet_name_must_match_parent(self, hub):
        with pytest.raises(PropertyValidationError):
            Subnet(
                hub,
                "Web",
                SubnetProps(address_prefix="10.0.1.0/24", virtual_network_name="other"),
            )

    def test_prefix_required_once(self, hub):
        with pytest.raises(PropertyValidationError):
            Subnet(hub, "None", SubnetProps())
        with pytest.raises(PropertyValidationError):
            Subnet(
                hub,
                "Both",
                SubnetProps(
                    address_prefix="10.0.1.0/24", address_prefixes=["10.0.2.0/24"]
                ),
            )

    def test_duplicate_subnet_name(self, hub):
        """Test that two subnets of one VNet cannot share a name."""
        Subnet(hub, "A", SubnetProps(name="snet-web", address_prefix="10.0.1.0/24"))

        with pytest.raises(PropertyValidationError):
            Subnet(hub, "B", SubnetProps(name="snet-web", address_prefix="10.0.2.0/24"))

        assert [s.id for s in hub.subnets] == ["A"]

    def test_nsg_reference(self, hub, rg_stack):
        nsg = NetworkSecurityGroup(
            rg_stack, "Web", NetworkSecurityGroupProps(name="nsg-web")
        )

        subnet = Subnet(
            hub,
            "Web",
            SubnetProps(address_prefix="10.0.1.0/24", network_security_group=nsg),
        )

        assert subnet.to_embedded_template()["properties"]["networkSecurityGroup"] == {
            "id": "[resourceId('Microsoft.Network/networkSecurityGroups', 'nsg-web')]"
        }

    def test_nsg_reference_must_be_nsg(self, hub, rg_stack):
        storage = StorageAccount(rg_stack, "Data")

        with pytest.raises(PropertyValidationError) as exc_info:
            Subnet(
                hub,
                "Web",
                SubnetProps(
                    address_prefix="10.0.1.0/24", network_security_group=storage
                ),
            )

        assert "must be a network security group" in messages(exc_info)[0]

    def test_incomplete_delegation(self, hub):
        with pytest.raises(PropertyValidationError) as exc_info:
            Subnet(
                hub,
                "Web",
                SubnetProps(
                    address_prefix="10.0.1.0/24",
                    delegations=[SubnetDelegation(name="web", service_name="")],
                ),
            )

        assert exc_info.value.violations[0].code == "ARM001"

    def test_subnet_in_plain_construct_under_vnet(self, hub):
        """Test that only direct VNet children are embedded."""
        group = Construct(hub, "Group")

        with pytest.raises(PropertyValidationError):
            Subnet(group, "Web", SubnetProps(address_prefix="10.0.1.0/24"))


class TestNetworkSecurityGroup:
    """Test cases for NetworkSecurityGroup and SecurityRule."""

    def test_rule_template(self):
        rule = SecurityRule(
            name="allow-web",
            priority=200,
            direction=SecurityRuleDirection.INBOUND,
            protocol=SecurityRuleProtocol.TCP,
            destination_port_ranges=["80", "443"],
            source_address_prefix="Internet",
            description="Web traffic",
        )

        assert rule.to_template() == {
            "name": "allow-web",
            "properties": {
                "description": "Web traffic",
                "protocol": "Tcp",
                "sourcePortRange": "*",
                "destinationPortRanges": ["80", "443"],
                "sourceAddressPrefix": "Internet",
                "destinationAddressPrefix": "*",
                "access": "Allow",
                "priority": 200,
                "direction": "Inbound",
            },
        }

    def test_plain_string_values_accepted(self):
        rule = SecurityRule(
            name="deny-all", priority=4096, direction="Outbound", access="Deny"
        )

        assert rule.validate() == []
        assert rule.to_template()["properties"]["access"] == "Deny"

    def test_invalid_rule(self):
        rule = SecurityRule(
            name="bad", priority=50, direction="Sideways", protocol="Gre"
        )

        assert len(rule.validate()) == 3

    def test_duplicate_priority_same_direction(self, rg_stack):
        rules = [
            SecurityRule(name="a", priority=100, direction="Inbound"),
            SecurityRule(name="b", priority=100, direction="Inbound"),
        ]

        with pytest.raises(PropertyValidationError) as exc_info:
            NetworkSecurityGroup(
                rg_stack, "Web", NetworkSecurityGroupProps(security_rules=rules)
            )

        violation = exc_info.value.violations[0]
        assert violation.code == "SEC001"
        assert violation.suggestion

    def test_same_priority_different_direction(self, rg_stack):
        rules = [
            SecurityRule(name="in", priority=100, direction="Inbound"),
            SecurityRule(
                name="out",
                priority=100,
                direction=SecurityRuleDirection.OUTBOUND,
                access=SecurityRuleAccess.DENY,
            ),
        ]

        nsg = NetworkSecurityGroup(
            rg_stack, "Web", NetworkSecurityGroupProps(security_rules=rules)
        )

        assert len(nsg.to_arm_template()["properties"]["securityRules"]) == 2

    def test_duplicate_rule_name(self, rg_stack):
        rules = [
            SecurityRule(name="a", priority=100, direction="Inbound"),
            SecurityRule(name="a", priority=200, direction="Inbound"),
        ]

        with pytest.raises(PropertyValidationError) as exc_info:
            NetworkSecurityGroup(
                rg_stack, "Web", NetworkSecurityGroupProps(security_rules=rules)
            )

        assert "Duplicate security rule name 'a'" in messages(exc_info)

    def test_flush_connection(self, rg_stack):
        nsg = NetworkSecurityGroup(
            rg_stack, "Web", NetworkSecurityGroupProps(flush_connection=True)
        )

        assert nsg.to_arm_template()["properties"] == {"flushConnection": True}
