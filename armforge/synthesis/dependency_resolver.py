"""Dependency ordering of the resources in one stack.

Edges come from three sources:

1. ``resourceId()`` expressions and literal resource IDs of other resources
   found anywhere in a fragment's ``properties``; a reference to an embedded
   child (a subnet inside a VNet) points at the resource it renders in
2. ``depends_on`` given when a resource was constructed (including those of
   resources embedded in it)
3. the parent/child relation of child resource types, e.g. a standalone
   ``vnet/subnet`` depends on ``vnet``

The order is a lexicographic topological sort keyed by collection order, so
independent resources keep the order they were declared in and the result
never depends on hash ordering.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence, Set, Tuple

import networkx as nx

from ..core.references import (
    is_literal_resource_id,
    iter_expression_references,
    parse_resource_id,
)
from ..core.resource import Resource
from ..exceptions import DependencyCycleError
from .transformer import RenderedResource

logger = logging.getLogger(__name__)

TypeName = Tuple[str, str]


def _iter_strings(value: Any) -> Iterator[str]:
    if isinstance(value, str):
        yield value
    elif isinstance(value, dict):
        for item in value.values():
            yield from _iter_strings(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _iter_strings(item)


def _key(resource_type: str, name: str) -> TypeName:
    return resource_type.lower(), name.lower()


class DependencyResolver:
    """Orders rendered resources and fills in their ``dependsOn`` lists."""

    def build_graph(self, rendered: Sequence[RenderedResource]) -> "nx.DiGraph[str]":
        """Dependency graph over resource paths; an edge ``a -> b`` means
        ``a`` must deploy before ``b``.

        Raises:
            DependencyCycleError: If a resource references itself
        """
        by_type_name: Dict[TypeName, str] = {}
        by_resource: Dict[int, str] = {}
        for item in rendered:
            resource = item.resource
            by_type_name.setdefault(
                _key(resource.resource_type, resource.name), item.path
            )
            by_resource[id(resource)] = item.path
        # Embedded children are reached through the resource they render in.
        embedded_hosts: Dict[TypeName, str] = {}
        for item in rendered:
            for child in self._embedded_descendants(item.resource):
                embedded_hosts.setdefault(
                    _key(child.resource_type, child.name), item.path
                )

        graph: "nx.DiGraph[str]" = nx.DiGraph()
        for item in rendered:
            graph.add_node(item.path)

        for item in rendered:
            for dependency in self._dependencies(
                item, by_type_name, embedded_hosts, by_resource
            ):
                if dependency == item.path:
                    raise DependencyCycleError(
                        f"Resource '{item.path}' depends on itself",
                        path=item.path,
                        cycle=[item.path, item.path],
                    )
                graph.add_edge(dependency, item.path)
        return graph

    def resolve(self, rendered: Sequence[RenderedResource]) -> List[RenderedResource]:
        """Return ``rendered`` in deployment order with ``dependsOn`` filled in.

        Raises:
            DependencyCycleError: If the references form a cycle
        """
        position = {item.path: index for index, item in enumerate(rendered)}
        by_path = {item.path: item for item in rendered}
        graph = self.build_graph(rendered)

        try:
            order = list(
                nx.lexicographical_topological_sort(graph, key=lambda p: position[p])
            )
        except nx.NetworkXUnfeasible:
            edges = nx.find_cycle(graph)
            cycle = [source for source, _ in edges] + [edges[0][0]]
            raise DependencyCycleError(
                f"Dependency cycle detected: {' -> '.join(cycle)}",
                path=cycle[0],
                cycle=cycle,
            ) from None

        rank = {path: index for index, path in enumerate(order)}
        ordered: List[RenderedResource] = []
        for path in order:
            item = by_path[path]
            predecessors = sorted(graph.predecessors(path), key=rank.__getitem__)
            depends_on = [
                by_path[p].resource.resource_id_expression for p in predecessors
            ]
            for entry in item.template.get("dependsOn", []):
                if entry not in depends_on:
                    depends_on.append(entry)
            if depends_on:
                item.template["dependsOn"] = depends_on
            ordered.append(item)

        logger.debug(
            f"Ordered {len(ordered)} resource(s) with "
            f"{graph.number_of_edges()} dependency edge(s)"
        )
        return ordered

    def _dependencies(
        self,
        item: RenderedResource,
        by_type_name: Dict[TypeName, str],
        embedded_hosts: Dict[TypeName, str],
        by_resource: Dict[int, str],
    ) -> List[str]:
        found: List[str] = []
        seen: Set[str] = set()

        def add(path: Optional[str]) -> None:
            if path is not None and path not in seen:
                seen.add(path)
                found.append(path)

        def lookup(key: TypeName) -> Optional[str]:
            if key in by_type_name:
                return by_type_name[key]
            host = embedded_hosts.get(key)
            # A resource never depends on what it renders itself.
            return None if host == item.path else host

        for text in _iter_strings(item.template.get("properties", {})):
            if is_literal_resource_id(text):
                parsed = parse_resource_id(text)
                if parsed is not None:
                    add(lookup(_key(*parsed)))
                continue
            if "resourceId(" in text:
                for reference in iter_expression_references(text):
                    add(lookup(_key(*reference)))

        for dependency in self._explicit_dependencies(item.resource):
            top_level = dependency
            while top_level.host is not None:
                top_level = top_level.host
            if top_level is item.resource and dependency is not top_level:
                continue
            path = by_resource.get(id(top_level))
            if path is None:
                logger.warning(
                    f"'{item.path}' depends on '{dependency.path}', which is not "
                    f"deployed by the same stack; dependency ignored"
                )
                continue
            add(path)

        resource_type = item.resource.resource_type
        name = item.resource.name
        if resource_type.count("/") >= 2 and "/" in name:
            parent_type = resource_type.rsplit("/", 1)[0]
            parent_name = name.rsplit("/", 1)[0]
            add(by_type_name.get(_key(parent_type, parent_name)))

        return found

    @staticmethod
    def _explicit_dependencies(resource: Resource) -> List[Resource]:
        dependencies = list(resource.depends_on)
        for child in resource.embedded_children():
            dependencies.extend(DependencyResolver._explicit_dependencies(child))
        return dependencies

    @staticmethod
    def _embedded_descendants(resource: Resource) -> Iterator[Resource]:
        for child in resource.embedded_children():
            yield child
            yield from DependencyResolver._embedded_descendants(child)
