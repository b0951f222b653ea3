"""Naming context owned by a stack."""

from dataclasses import dataclass
from typing import Union

from ..core.naming_components import (
    ComponentInput,
    Environment,
    Geography,
    Instance,
    Organization,
    Project,
    as_component,
)


@dataclass(frozen=True)
class NamingContext:
    """The five naming components shared by every resource in a stack."""

    organization: Organization
    project: Project
    environment: Environment
    geography: Geography
    instance: Instance

    @classmethod
    def create(
        cls,
        organization: ComponentInput,
        project: ComponentInput,
        environment: ComponentInput,
        geography: ComponentInput,
        instance: Union[int, ComponentInput] = 1,
    ) -> "NamingContext":
        """Build a context, coercing raw strings and integers into components."""
        return cls(
            organization=as_component(Organization, organization),
            project=as_component(Project, project),
            environment=as_component(Environment, environment),
            geography=as_component(Geography, geography),
            instance=as_component(Instance, instance),
        )

