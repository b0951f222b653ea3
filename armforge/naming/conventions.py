"""Azure naming rules per resource kind.

Azure naming constraints:
- Resource group: 1-90 chars, alphanumerics, underscores, hyphens, periods and
  parentheses, cannot end with a period
- Virtual network / subnet / NSG: 2-80 chars, must start with alphanumeric and
  end with alphanumeric or underscore
- Storage account: 3-24 chars, lowercase alphanumeric only, globally unique
- Key Vault: 3-24 chars, alphanumeric and hyphens, must start with a letter,
  end with alphanumeric, no consecutive hyphens, globally unique
"""

import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Dict, Mapping, Optional, Pattern

if TYPE_CHECKING:
    from ..config.models import NamingSettings

DEFAULT_KIND = "default"
DEFAULT_SEPARATOR = "-"
DEFAULT_HASH_LENGTH = 6


@dataclass(frozen=True)
class NamingRule:
    """Provider constraints and generation policy for one resource kind."""

    kind: str
    prefix: str
    min_length: int = 1
    max_length: int = 64
    pattern: Optional[Pattern[str]] = None
    remove_hyphens: bool = False
    lowercase: bool = True
    globally_unique: bool = False
    must_start_with_letter: bool = False
    allow_consecutive_hyphens: bool = True
    # Forces this separator regardless of the configured one.
    separator: Optional[str] = None
    description: str = ""


_STANDARD_PATTERN = re.compile(
    r"^[a-zA-Z0-9](?:[a-zA-Z0-9_.-]*[a-zA-Z0-9_])?$"
)

BUILTIN_RULES: Dict[str, NamingRule] = {
    "rg": NamingRule(
        kind="rg",
        prefix="rg",
        min_length=1,
        max_length=90,
        pattern=re.compile(r"^[\w\-().]*[\w\-()]$"),
        description="alphanumerics, underscores, hyphens, periods and parentheses; "
        "cannot end with a period",
    ),
    "vnet": NamingRule(
        kind="vnet",
        prefix="vnet",
        min_length=2,
        max_length=64,
        pattern=_STANDARD_PATTERN,
        description="starts with alphanumeric, ends with alphanumeric or underscore",
    ),
    "snet": NamingRule(
        kind="snet",
        prefix="snet",
        min_length=1,
        max_length=80,
        pattern=_STANDARD_PATTERN,
        description="starts with alphanumeric, ends with alphanumeric or underscore",
    ),
    "nsg": NamingRule(
        kind="nsg",
        prefix="nsg",
        min_length=1,
        max_length=80,
        pattern=_STANDARD_PATTERN,
        description="starts with alphanumeric, ends with alphanumeric or underscore",
    ),
    "st": NamingRule(
        kind="st",
        prefix="st",
        min_length=3,
        max_length=24,
        pattern=re.compile(r"^[a-z0-9]+$"),
        remove_hyphens=True,
        globally_unique=True,
        description="lowercase letters and numbers only",
    ),
    "kv": NamingRule(
        kind="kv",
        prefix="kv",
        min_length=3,
        max_length=24,
        pattern=re.compile(r"^[a-zA-Z][a-zA-Z0-9-]*[a-zA-Z0-9]$"),
        globally_unique=True,
        must_start_with_letter=True,
        allow_consecutive_hyphens=False,
        separator="-",
        description="starts with a letter, ends with a letter or digit, "
        "alphanumerics and single hyphens",
    ),
    DEFAULT_KIND: NamingRule(
        kind=DEFAULT_KIND,
        prefix="res",
        min_length=1,
        max_length=64,
        pattern=_STANDARD_PATTERN,
        description="starts with alphanumeric, ends with alphanumeric or underscore",
    ),
}

# ARM resource type -> naming kind, used when validating rendered templates.
RESOURCE_TYPE_KINDS: Dict[str, str] = {
    "Microsoft.Resources/resourceGroups": "rg",
    "Microsoft.Network/virtualNetworks": "vnet",
    "Microsoft.Network/virtualNetworks/subnets": "snet",
    "Microsoft.Network/networkSecurityGroups": "nsg",
    "Microsoft.Storage/storageAccounts": "st",
    "Microsoft.KeyVault/vaults": "kv",
}


def kind_for_resource_type(resource_type: str) -> str:
    return RESOURCE_TYPE_KINDS.get(resource_type, DEFAULT_KIND)


class NamingConventions:
    """The set of naming rules plus generation settings in effect for a tree.

    Args:
        separator: Separator placed between name components
        hash_length: Hex characters appended to globally unique names
        rules: Rules keyed by kind, defaults to ``BUILTIN_RULES``
    """

    def __init__(
        self,
        separator: str = DEFAULT_SEPARATOR,
        hash_length: int = DEFAULT_HASH_LENGTH,
        rules: Optional[Mapping[str, NamingRule]] = None,
    ) -> None:
        self.separator = separator
        self.hash_length = hash_length
        self._rules: Dict[str, NamingRule] = dict(rules or BUILTIN_RULES)

    @classmethod
    def from_settings(cls, settings: "NamingSettings") -> "NamingConventions":
        """Apply prefix and length overrides on top of the built-in rules."""
        rules = dict(BUILTIN_RULES)
        for kind, prefix in settings.prefix_overrides.items():
            base = rules.get(kind, replace(rules[DEFAULT_KIND], kind=kind))
            rules[kind] = replace(base, prefix=prefix.lower())
        for kind, max_length in settings.max_length_overrides.items():
            base = rules.get(kind, replace(rules[DEFAULT_KIND], kind=kind))
            # Overrides may only tighten the provider limit.
            rules[kind] = replace(base, max_length=min(base.max_length, max_length))
        return cls(
            separator=settings.separator,
            hash_length=settings.hash_length,
            rules=rules,
        )

    def rule_for(self, kind: str) -> NamingRule:
        """Rule for ``kind``; unknown kinds get the default rule with that prefix."""
        rule = self._rules.get(kind)
        if rule is not None:
            return rule
        return replace(self._rules[DEFAULT_KIND], kind=kind, prefix=kind.lower())