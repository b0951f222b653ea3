"""ARM deployment scopes and their template schemas."""

from enum import Enum


class DeploymentScope(str, Enum):
    """Level at which an ARM template is deployed."""

    SUBSCRIPTION = "subscription"
    RESOURCE_GROUP = "resourceGroup"


TEMPLATE_SCHEMAS = {
    DeploymentScope.SUBSCRIPTION: (
        "https://schema.management.azure.com/schemas/2018-05-01/"
        "subscriptionDeploymentTemplate.json#"
    ),
    DeploymentScope.RESOURCE_GROUP: (
        "https://schema.management.azure.com/schemas/2019-04-01/"
        "deploymentTemplate.json#"
    ),
}


def get_schema_for_scope(scope: DeploymentScope) -> str:
    """Return the ``$schema`` URL for a deployment scope."""
    return TEMPLATE_SCHEMAS.get(scope, TEMPLATE_SCHEMAS[DeploymentScope.RESOURCE_GROUP])
