"""Renders resources into ARM template fragments."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from ..core.resource import Resource

logger = logging.getLogger(__name__)


@dataclass
class RenderedResource:
    """A resource paired with its rendered template fragment."""

    resource: Resource
    template: Dict[str, Any]

    @property
    def path(self) -> str:
        return self.resource.path


class ResourceTransformer:
    """Turns collected resources into top-level template fragments.

    Resources embedded in a parent (see ``Resource.EMBEDDED_CHILD_TYPES``) are
    rendered by that parent and produce no fragment of their own.
    """

    def transform(self, resources: Sequence[Resource]) -> List[RenderedResource]:
        rendered: List[RenderedResource] = []
        for resource in resources:
            if resource.is_embedded:
                logger.debug(
                    f"Skipping '{resource.path}': rendered inside "
                    f"'{resource.host.path}'"
                )
                continue
            rendered.append(RenderedResource(resource, resource.to_arm_template()))
        return rendered
