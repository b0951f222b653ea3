"""Resource IDs and ARM ``resourceId()`` expressions.

Literal IDs keep ``{subscriptionId}`` and ``{resourceGroupName}`` placeholders
because the core never knows the deployment target. Templates reference other
resources through expressions such as
``[resourceId('Microsoft.Network/networkSecurityGroups', 'nsg-web')]``.
"""

import re
from typing import Iterator, Optional, Tuple

from .scopes import DeploymentScope

RESOURCE_GROUP_TYPE = "Microsoft.Resources/resourceGroups"

SUBSCRIPTION_PREFIX = "/subscriptions/{subscriptionId}"
RESOURCE_GROUP_PREFIX = SUBSCRIPTION_PREFIX + "/resourceGroups/{resourceGroupName}"

_EXPRESSION_CALL = re.compile(r"resourceId\(\s*((?:'[^']*'\s*,?\s*)+)\)")
_QUOTED = re.compile(r"'([^']*)'")
PLACEHOLDER_PATTERN = re.compile(r"\{[A-Za-z_][A-Za-z0-9_]*\}")


def provider_path(resource_type: str, name: str) -> str:
    """``Microsoft.Network/virtualNetworks/subnets`` + ``vnet/snet`` ->
    ``Microsoft.Network/virtualNetworks/vnet/subnets/snet``."""
    namespace, *types = resource_type.split("/")
    names = name.split("/")
    if not types or len(types) != len(names):
        raise ValueError(
            f"Resource name '{name}' does not match the segments of type "
            f"'{resource_type}'"
        )
    segments = [namespace]
    for type_segment, name_segment in zip(types, names):
        segments.extend([type_segment, name_segment])
    return "/".join(segments)


def build_resource_id(
    resource_type: str,
    name: str,
    scope: DeploymentScope = DeploymentScope.RESOURCE_GROUP,
) -> str:
    """Literal resource ID with deployment placeholders."""
    if resource_type == RESOURCE_GROUP_TYPE:
        return f"{SUBSCRIPTION_PREFIX}/resourceGroups/{name}"
    prefix = (
        SUBSCRIPTION_PREFIX
        if scope is DeploymentScope.SUBSCRIPTION
        else RESOURCE_GROUP_PREFIX
    )
    return f"{prefix}/providers/{provider_path(resource_type, name)}"


def resource_id_expression(resource_type: str, name: str) -> str:
    """``[resourceId('<type>', '<name segment>', ...)]``."""
    args = ", ".join(f"'{part}'" for part in [resource_type, *name.split("/")])
    return f"[resourceId({args})]"


def is_expression(value: object) -> bool:
    """True for ARM template expressions (``[...]`` but not escaped ``[[...``)."""
    return (
        isinstance(value, str)
        and value.startswith("[")
        and value.endswith("]")
        and not value.startswith("[[")
    )


def is_literal_resource_id(value: object) -> bool:
    return isinstance(value, str) and value.lower().startswith("/subscriptions/")


def parse_resource_id(resource_id: str) -> Optional[Tuple[str, str]]:
    """Split a literal resource ID into ``(resource_type, name)``.

    Returns None when the string is not a provider or resource group ID.
    """
    parts = [p for p in resource_id.split("/") if p]
    lowered = [p.lower() for p in parts]
    if "providers" in lowered:
        index = len(lowered) - 1 - lowered[::-1].index("providers")
        segments = parts[index + 1 :]
        if len(segments) < 3 or len(segments) % 2 == 0:
            return None
        namespace, rest = segments[0], segments[1:]
        types = rest[0::2]
        names = rest[1::2]
        return "/".join([namespace, *types]), "/".join(names)
    if (
        len(parts) == 4
        and lowered[0] == "subscriptions"
        and lowered[2] == "resourcegroups"
    ):
        return RESOURCE_GROUP_TYPE, parts[3]
    return None


def parse_expression(expression: str) -> Optional[Tuple[str, str]]:
    """Extract ``(resource_type, name)`` from a ``resourceId()`` expression."""
    return next(iter_expression_references(expression), None)


def to_reference_expression(reference: str) -> str:
    """Convert a literal resource ID to a ``resourceId()`` expression.

    Expressions pass through unchanged. Literal IDs that cannot be parsed are
    returned as-is and left for template validation to report.
    """
    if is_expression(reference):
        return reference
    parsed = parse_resource_id(reference)
    if parsed is None:
        return reference
    return resource_id_expression(*parsed)


def iter_expression_references(text: str) -> Iterator[Tuple[str, str]]:
    """``(resource_type, name)`` of every ``resourceId()`` call in ``text``."""
    for match in _EXPRESSION_CALL.finditer(text):
        args = _QUOTED.findall(match.group(1))
        if len(args) >= 2:
            yield args[0], "/".join(args[1:])
