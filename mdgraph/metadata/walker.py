"""Recursive walk turning a metadata configuration into graph nodes and edges."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, Optional

from ..graph.ids import node_id
from ..graph.model import GraphEdge, GraphNode
from .model import (
    Attribute,
    Configuration,
    MDObject,
    MDOType,
    Role,
    Subsystem,
    ValueTypeDescription,
)

LOGGER = logging.getLogger(__name__)

# Child kinds carrying no structural information.
SKIPPED_KINDS = frozenset({MDOType.COMMON_PICTURE, MDOType.SESSION_PARAMETER, MDOType.STYLE_ITEM})

TABULAR_SECTION_SEPARATOR = "."


def configuration_node(configuration: Configuration) -> GraphNode:
    return GraphNode.configuration(configuration.uuid, configuration.name, configuration.synonym)


def object_node(md: MDObject) -> GraphNode:
    return GraphNode.md_object(md.uuid, md.name, md.synonym, md.kind.to_node_type())


@dataclass
class MetadataWalker:
    """Produce the nodes and edges of one configuration.

    :meth:`nodes` and :meth:`edges` are generators: each call starts a fresh
    single pass over the tree and yields items one at a time. References that
    do not resolve to a child of the configuration (including defined types)
    are skipped without error. The tree is never modified.
    """

    configuration: Configuration
    logger: logging.Logger = field(default_factory=lambda: LOGGER)

    def __post_init__(self) -> None:
        self._index: Dict[str, MDObject] = {}
        # Skipped kinds never become nodes, so they are not edge targets either.
        for child in self.configuration.children:
            if child.kind in SKIPPED_KINDS:
                continue
            self._index.setdefault(child.mdo_ref.lower(), child)

    # -- resolution --------------------------------------------------------

    def resolve(self, reference: Optional[str]) -> Optional[MDObject]:
        """Return the child addressed by ``reference`` (``Kind.Name``)."""

        if not reference:
            return None
        kind, dot, name = reference.partition(".")
        if not dot:
            return None
        try:
            key = f"{MDOType.parse(kind).value}.{name}".lower()
        except ValueError:
            return None
        return self._index.get(key)

    def resolve_types(self, description: ValueTypeDescription) -> Iterator[MDObject]:
        """Yield the objects named by the metadata types of ``description``."""

        for value_type in description.metadata_types():
            target = self.resolve(value_type.reference())
            if target is None:
                self.logger.debug("Skipping unresolved type %s", value_type.name)
                continue
            yield target

    # -- nodes -------------------------------------------------------------

    def nodes(self) -> Iterator[GraphNode]:
        configuration = self.configuration
        yield configuration_node(configuration)
        for child in configuration.children:
            if child.kind in SKIPPED_KINDS:
                continue
            yield object_node(child)
        for subsystem in configuration.subsystems:
            yield from self._nested_subsystem_nodes(subsystem)

    def _nested_subsystem_nodes(self, subsystem: Subsystem) -> Iterator[GraphNode]:
        for child in subsystem.subsystems:
            yield object_node(child)
            yield from self._nested_subsystem_nodes(child)

    # -- edges -------------------------------------------------------------

    def edges(self) -> Iterator[GraphEdge]:
        configuration = self.configuration
        for subsystem in configuration.subsystems:
            yield from self._subsystem_children_edges(subsystem)
        for subsystem in configuration.subsystems:
            yield from self._subsystem_content_edges(subsystem)
        for role in configuration.roles:
            yield from self._role_edges(role)
        for option in configuration.functional_options:
            yield from self._contains_edges(option, option.content)
        for plan in configuration.exchange_plans:
            yield from self._contains_edges(plan, (item.metadata for item in plan.content))
        for subscription in configuration.event_subscriptions:
            for target in self.resolve_types(subscription.value_type):
                yield GraphEdge.contains(node_id(subscription.uuid), node_id(target.uuid))
        for child in configuration.children:
            if not child.is_attribute_owner:
                continue
            owner_id = node_id(child.uuid)
            yield from self._attribute_edges(owner_id, child.attributes)
            for section in child.tabular_sections:
                prefix = f"{section.name}{TABULAR_SECTION_SEPARATOR}"
                yield from self._attribute_edges(owner_id, section.attributes, prefix)

    def _subsystem_children_edges(self, subsystem: Subsystem) -> Iterator[GraphEdge]:
        parent_id = node_id(subsystem.uuid)
        for child in subsystem.subsystems:
            yield GraphEdge.children(parent_id, node_id(child.uuid))
            yield from self._subsystem_children_edges(child)

    def _subsystem_content_edges(self, subsystem: Subsystem) -> Iterator[GraphEdge]:
        yield from self._contains_edges(subsystem, subsystem.content)
        for child in subsystem.subsystems:
            yield from self._subsystem_content_edges(child)

    def _contains_edges(self, owner: MDObject, references: Iterable[str]) -> Iterator[GraphEdge]:
        source_id = node_id(owner.uuid)
        for reference in references:
            target = self.resolve(reference)
            if target is None:
                self.logger.debug("Skipping unresolved reference %s of %s", reference, owner.mdo_ref)
                continue
            yield GraphEdge.contains(source_id, node_id(target.uuid))

    def _role_edges(self, role: Role) -> Iterator[GraphEdge]:
        source_id = node_id(role.uuid)
        for grant in role.object_rights:
            target = self.resolve(grant.name)
            if target is None:
                continue
            yield GraphEdge.access(source_id, node_id(target.uuid), ", ".join(grant.granted()))

    def _attribute_edges(
        self, owner_id: str, attributes: Iterable[Attribute], prefix: str = ""
    ) -> Iterator[GraphEdge]:
        for attribute in attributes:
            for target in self.resolve_types(attribute.value_type):
                yield GraphEdge.attribute(owner_id, node_id(target.uuid), prefix + attribute.name)


__all__ = ["MetadataWalker", "SKIPPED_KINDS", "configuration_node", "object_node"]
