"""Build a :class:`Configuration` from a JSON dump.

Expected layout::

    {
      "uuid": "...", "name": "...", "synonym": "...",
      "children": [
        {"kind": "Catalog", "uuid": "...", "name": "Goods",
         "attributes": [{"name": "Owner", "type": ["CatalogRef.Partners"]}],
         "tabularSections": [{"name": "Prices", "attributes": [...]}]},
        {"kind": "Subsystem", ..., "content": ["Catalog.Goods"], "subsystems": [...]},
        {"kind": "Role", ..., "rights": [{"object": "Catalog.Goods", "rights": {"Read": true}}]},
        {"kind": "FunctionalOption", ..., "content": ["Catalog.Goods"]},
        {"kind": "ExchangePlan", ..., "content": [{"metadata": "Catalog.Goods", "autoRecord": true}]},
        {"kind": "EventSubscription", ..., "source": ["DocumentObject.Order"]}
      ]
    }
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Mapping

from .model import (
    Attribute,
    Configuration,
    EventSubscription,
    ExchangePlan,
    ExchangePlanItem,
    FunctionalOption,
    MDObject,
    MDOType,
    ObjectRights,
    Right,
    Role,
    Subsystem,
    TabularSection,
    ValueTypeDescription,
)


class MetadataLoadError(ValueError):
    """Raised when a configuration dump cannot be turned into a tree."""


def _require(payload: Mapping[str, Any], key: str, where: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise MetadataLoadError(f"{where}: '{key}' is required")
    return value


def _type_names(raw: Any) -> List[str]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return [raw]
    return [str(item) for item in raw]


def _attributes(raw: Any) -> List[Attribute]:
    attributes = []
    for item in raw or []:
        attributes.append(
            Attribute(
                name=_require(item, "name", "attribute"),
                value_type=ValueTypeDescription.of(*_type_names(item.get("type"))),
                uuid=str(item.get("uuid", "")),
            )
        )
    return attributes


def _tabular_sections(raw: Any) -> List[TabularSection]:
    return [
        TabularSection(
            name=_require(item, "name", "tabular section"),
            attributes=_attributes(item.get("attributes")),
            uuid=str(item.get("uuid", "")),
        )
        for item in raw or []
    ]


def _rights(raw: Any) -> List[ObjectRights]:
    grants = []
    for item in raw or []:
        rights = item.get("rights") or {}
        if isinstance(rights, Mapping):
            entries = [Right(name=str(name), value=bool(value)) for name, value in rights.items()]
        else:
            entries = [Right(name=str(name), value=True) for name in rights]
        grants.append(ObjectRights(name=_require(item, "object", "role rights"), rights=entries))
    return grants


def _exchange_content(raw: Any) -> List[ExchangePlanItem]:
    items = []
    for item in raw or []:
        if isinstance(item, str):
            items.append(ExchangePlanItem(metadata=item))
        else:
            items.append(
                ExchangePlanItem(
                    metadata=_require(item, "metadata", "exchange plan content"),
                    auto_record=bool(item.get("autoRecord", False)),
                )
            )
    return items


def _subsystem(payload: Mapping[str, Any], common: dict) -> Subsystem:
    return Subsystem(
        **common,
        content=[str(item) for item in payload.get("content") or []],
        subsystems=[_nested_subsystem(item) for item in payload.get("subsystems") or []],
    )


def _nested_subsystem(payload: Any) -> Subsystem:
    if isinstance(payload, Mapping) and "kind" not in payload:
        payload = {**payload, "kind": MDOType.SUBSYSTEM.value}
    nested = load_object(payload)
    if not isinstance(nested, Subsystem):
        raise MetadataLoadError(f"nested subsystem {nested.name}: unexpected kind {nested.kind.value}")
    return nested


def load_object(payload: Mapping[str, Any]) -> MDObject:
    """Build one metadata object from its JSON description."""

    if not isinstance(payload, Mapping):
        raise MetadataLoadError(f"metadata object must be a mapping, got {type(payload).__name__}")
    try:
        kind = MDOType.parse(_require(payload, "kind", "metadata object"))
    except ValueError as exc:
        raise MetadataLoadError(str(exc)) from exc

    where = f"{kind.value} {payload.get('name', '?')}"
    common = {
        "uuid": _require(payload, "uuid", where),
        "name": _require(payload, "name", where),
        "synonym": str(payload.get("synonym") or ""),
        "attributes": _attributes(payload.get("attributes")),
        "tabular_sections": _tabular_sections(payload.get("tabularSections")),
    }

    if kind is MDOType.SUBSYSTEM:
        return _subsystem(payload, common)
    if kind is MDOType.ROLE:
        return Role(**common, object_rights=_rights(payload.get("rights")))
    if kind is MDOType.FUNCTIONAL_OPTION:
        return FunctionalOption(**common, content=[str(item) for item in payload.get("content") or []])
    if kind is MDOType.EXCHANGE_PLAN:
        return ExchangePlan(**common, content=_exchange_content(payload.get("content")))
    if kind is MDOType.EVENT_SUBSCRIPTION:
        return EventSubscription(
            **common, value_type=ValueTypeDescription.of(*_type_names(payload.get("source")))
        )
    return MDObject(kind=kind, **common)


def load_configuration(payload: Mapping[str, Any]) -> Configuration:
    """Build a :class:`Configuration` from an already parsed JSON document."""

    if not isinstance(payload, Mapping):
        raise MetadataLoadError("configuration dump must be a JSON object")
    return Configuration(
        uuid=_require(payload, "uuid", "configuration"),
        name=_require(payload, "name", "configuration"),
        synonym=str(payload.get("synonym") or ""),
        children=[load_object(item) for item in payload.get("children") or []],
    )


def load_configuration_file(path: str | Path) -> Configuration:
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise MetadataLoadError(f"Cannot read configuration from {path}: {exc}") from exc
    return load_configuration(payload)


__all__ = ["MetadataLoadError", "load_configuration", "load_configuration_file", "load_object"]
