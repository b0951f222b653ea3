"""Azure resource group, deployed from a subscription-scoped template."""

from typing import Any, Dict

from ..core.node import ConstructRole
from ..core.references import RESOURCE_GROUP_TYPE
from ..core.resource import Resource
from ..core.scopes import DeploymentScope


class ResourceGroup(Resource):
    """A resource group declared inside a ``SubscriptionStack``.

    Example:
        >>> rg = ResourceGroup(stack, "DataRG")
        >>> rg.name
        'rg-dp-authr-datarg-nonprod-eus-01'
    """

    ROLE = ConstructRole.RESOURCE_GROUP
    RESOURCE_TYPE = RESOURCE_GROUP_TYPE
    API_VERSION = "2025-04-01"
    DEPLOYMENT_SCOPE = DeploymentScope.SUBSCRIPTION
    NAMING_KIND = "rg"

    @property
    def resource_group_name(self) -> str:
        return self.name

    def _render_properties(self) -> Dict[str, Any]:
        return {}
