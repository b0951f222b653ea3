"""Immutable naming components used to build resource names.

Each component keeps the raw ``value`` it was created from, a normalized
``resource_name`` (lowercase, hyphenated, ``[a-z0-9-]`` only, no leading or
trailing hyphen) and a display ``title``.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from ..exceptions import InvalidNamingComponentError

_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_INVALID_CHARS = re.compile(r"[^a-z0-9-]+")
_REPEATED_HYPHENS = re.compile(r"-{2,}")


def normalize_resource_name(value: str) -> str:
    """Normalize a raw string into a name-safe token.

    ``"Digital Minion"`` becomes ``"digital-minion"`` and ``"my_Project!"``
    becomes ``"my-project"``.
    """
    text = value.strip().replace("_", "-").replace(" ", "-").replace(".", "-")
    text = text.lower()
    text = _INVALID_CHARS.sub("", text)
    text = _REPEATED_HYPHENS.sub("-", text)
    return text.strip("-")


def to_title(value: str) -> str:
    """Build a display form, e.g. ``"digital-minion"`` -> ``"Digital Minion"``."""
    text = _WORD_BOUNDARY.sub(r"\1 \2", value.strip())
    words = re.split(r"[\s_\-.]+", text)
    return " ".join(w[:1].upper() + w[1:] for w in words if w)


@dataclass(frozen=True)
class NamingComponent:
    """Base naming component.

    Args:
        value: Raw value supplied by the user
        resource_name: Optional explicit normalized form
        title: Optional explicit display form

    Raises:
        InvalidNamingComponentError: If the normalized form is empty or invalid
    """

    value: str
    resource_name: str = ""
    title: str = ""

    MAX_LENGTH = 50

    def __post_init__(self) -> None:
        raw = str(self.value)
        object.__setattr__(self, "value", raw)
        resource_name = normalize_resource_name(self.resource_name or raw)
        if not resource_name:
            raise InvalidNamingComponentError(
                f"{self.__class__.__name__} value '{raw}' normalizes to an empty "
                f"resource name",
                value=raw,
            )
        if len(resource_name) > self.MAX_LENGTH:
            raise InvalidNamingComponentError(
                f"{self.__class__.__name__} resource name must not exceed "
                f"{self.MAX_LENGTH} characters (current: {len(resource_name)})",
                value=raw,
            )
        object.__setattr__(self, "resource_name", resource_name)
        object.__setattr__(self, "title", self.title or to_title(raw))

    def __str__(self) -> str:
        return self.resource_name


class Organization(NamingComponent):
    """Organization that owns the deployment, e.g. ``"dp"``."""


class Project(NamingComponent):
    """Project or workload name, e.g. ``"authr"``."""


class Environment(NamingComponent):
    """Deployment environment, e.g. ``"nonprod"``."""

    MAX_LENGTH = 20


@dataclass(frozen=True)
class Instance(NamingComponent):
    """Instance number or label. Integers render zero-padded to two digits."""

    MAX_LENGTH = 10

    @classmethod
    def of(cls, value: Union[int, str, "Instance"]) -> "Instance":
        if isinstance(value, Instance):
            return value
        if isinstance(value, int):
            if value < 0:
                raise InvalidNamingComponentError(
                    f"Instance number must be non-negative (got {value})",
                    value=str(value),
                )
            return cls(f"{value:02d}")
        text = str(value).strip()
        if text.isdigit() and len(text) < 2:
            text = text.zfill(2)
        return cls(text)


# Azure region abbreviations and display names used in resource names.
GEOGRAPHY_ABBREVIATIONS: Dict[str, str] = {
    # US
    "eastus": "eus",
    "eastus2": "eus2",
    "westus": "wus",
    "westus2": "wus2",
    "westus3": "wus3",
    "centralus": "cus",
    "northcentralus": "ncus",
    "southcentralus": "scus",
    "westcentralus": "wcus",
    # Europe
    "northeurope": "neu",
    "westeurope": "weu",
    "francecentral": "frc",
    "germanywestcentral": "dewc",
    "norwayeast": "noe",
    "swedencentral": "sec",
    "switzerlandnorth": "chn",
    "uksouth": "uks",
    "ukwest": "ukw",
    # Asia Pacific
    "australiaeast": "aue",
    "australiasoutheast": "ause",
    "centralindia": "inc",
    "eastasia": "ea",
    "japaneast": "jpe",
    "japanwest": "jpw",
    "koreacentral": "krc",
    "southeastasia": "sea",
    "southindia": "ins",
    # Government
    "usgovvirginia": "usgv",
    "usgovarizona": "usga",
    "usgovtexas": "usgt",
    # Other
    "brazilsouth": "brs",
    "canadacentral": "cac",
    "canadaeast": "cae",
    "southafricanorth": "zan",
    "uaenorth": "uaen",
}

GEOGRAPHY_DISPLAY_NAMES: Dict[str, str] = {
    "eastus": "East US",
    "eastus2": "East US 2",
    "westus": "West US",
    "westus2": "West US 2",
    "westus3": "West US 3",
    "centralus": "Central US",
    "northcentralus": "North Central US",
    "southcentralus": "South Central US",
    "westcentralus": "West Central US",
    "northeurope": "North Europe",
    "westeurope": "West Europe",
    "francecentral": "France Central",
    "germanywestcentral": "Germany West Central",
    "norwayeast": "Norway East",
    "swedencentral": "Sweden Central",
    "switzerlandnorth": "Switzerland North",
    "uksouth": "UK South",
    "ukwest": "UK West",
    "australiaeast": "Australia East",
    "australiasoutheast": "Australia Southeast",
    "centralindia": "Central India",
    "eastasia": "East Asia",
    "japaneast": "Japan East",
    "japanwest": "Japan West",
    "koreacentral": "Korea Central",
    "southeastasia": "Southeast Asia",
    "southindia": "South India",
    "usgovvirginia": "US Gov Virginia",
    "usgovarizona": "US Gov Arizona",
    "usgovtexas": "US Gov Texas",
    "brazilsouth": "Brazil South",
    "canadacentral": "Canada Central",
    "canadaeast": "Canada East",
    "southafricanorth": "South Africa North",
    "uaenorth": "UAE North",
}


@dataclass(frozen=True)
class Geography(NamingComponent):
    """Azure region used both for deployment and for naming.

    ``location`` is the ARM location string (``"eastus"``), ``abbreviation``
    the short form used in names (``"eus"``) and ``display_name`` the
    human-readable region name (``"East US"``). Hyphenated spellings such as
    ``"east-us-2"`` resolve to the same region.
    """

    abbreviation: str = ""
    display_name: str = ""
    location: str = field(default="", init=False)

    MAX_LENGTH = 20

    def __post_init__(self) -> None:
        super().__post_init__()
        location = self.resource_name.replace("-", "")
        object.__setattr__(self, "location", location)
        if not self.abbreviation:
            object.__setattr__(
                self,
                "abbreviation",
                GEOGRAPHY_ABBREVIATIONS.get(location, self.resource_name),
            )
        if not self.display_name:
            object.__setattr__(
                self,
                "display_name",
                GEOGRAPHY_DISPLAY_NAMES.get(location, self.title),
            )


ComponentInput = Union[str, NamingComponent]


def as_component(cls, value: Optional[ComponentInput]):
    """Coerce a raw string into the given component class."""
    if value is None:
        return None
    if isinstance(value, cls):
        return value
    if cls is Instance:
        return Instance.of(value)  # type: ignore[arg-type]
    if isinstance(value, NamingComponent):
        return cls(value.value)
    return cls(value)
