"""Shared fixtures building ``nebula3`` wire values for the graph tests."""

from __future__ import annotations

import copy
from types import SimpleNamespace

import pytest
from nebula3.common.ttypes import NList, NMap, NSet, Edge, Tag, Value, Vertex

from mdgraph.exec.client import ResultRows
from mdgraph.metadata.loader import load_configuration


def string(text: str | bytes) -> Value:
    value = Value()
    value.set_sVal(text.encode("utf-8") if isinstance(text, str) else text)
    return value


def integer(number: int) -> Value:
    value = Value()
    value.set_iVal(number)
    return value


def boolean(flag: bool) -> Value:
    value = Value()
    value.set_bVal(flag)
    return value


def null() -> Value:
    value = Value()
    value.set_nVal(0)
    return value


def listing(*items: Value) -> Value:
    value = Value()
    value.set_lVal(NList(values=list(items)))
    return value


def unique(*items: Value) -> Value:
    value = Value()
    value.set_uVal(NSet(values=list(items)))
    return value


def mapping(**items: Value) -> Value:
    value = Value()
    value.set_mVal(NMap(kvs={key.encode("utf-8"): item for key, item in items.items()}))
    return value


def node(vid: str, name: str = "", type: str = "CATALOG", uid: str | None = None, synonym: str = "") -> Value:
    props = {
        b"uid": string(uid if uid is not None else vid),
        b"name": string(name or vid),
        b"synonym": string(synonym),
        b"type": string(type),
    }
    value = Value()
    value.set_vVal(Vertex(vid=string(vid), tags=[Tag(name=b"MDObject", props=props)]))
    return value


def edge(source: str, target: str, edge_type: str = "CONTAINS", /, **props: str) -> Value:
    value = Value()
    value.set_eVal(
        Edge(
            src=string(source),
            dst=string(target),
            type=1,
            name=edge_type.encode("utf-8"),
            ranking=0,
            props={key.encode("utf-8"): string(item) for key, item in props.items()},
        )
    )
    return value


def rows(columns, *values) -> ResultRows:
    return ResultRows(column_names=list(columns), rows=[list(row) for row in values])


@pytest.fixture()
def wire() -> SimpleNamespace:
    """Builders for wire values and result rows."""

    return SimpleNamespace(
        string=string,
        integer=integer,
        boolean=boolean,
        null=null,
        listing=listing,
        unique=unique,
        mapping=mapping,
        node=node,
        edge=edge,
        rows=rows,
        uid=uid,
        vid=vid,
    )


def uid(number: int) -> str:
    return f"00000000-0000-0000-0000-{number:012d}"


def vid(number: int) -> str:
    return f"{number:032d}"


SHOP_DUMP = {
    "uuid": uid(1),
    "name": "Shop",
    "synonym": "Shop configuration",
    "children": [
        {
            "kind": "Catalog",
            "uuid": uid(2),
            "name": "Goods",
            "synonym": "Goods",
            "attributes": [{"name": "Owner", "type": ["CatalogRef.Partners", "String"]}],
            "tabularSections": [
                {
                    "name": "Prices",
                    "attributes": [
                        {"name": "Partner", "type": ["CatalogRef.Partners"]},
                        {"name": "Currency", "type": ["CatalogRef.Currencies"]},
                    ],
                }
            ],
        },
        {"kind": "Catalog", "uuid": uid(3), "name": "Partners"},
        {
            "kind": "Document",
            "uuid": uid(4),
            "name": "Order",
            "attributes": [
                {"name": "Goods", "type": ["CatalogRef.Goods"]},
                {"name": "Amount", "type": ["DefinedType.Money"]},
            ],
        },
        {
            "kind": "Subsystem",
            "uuid": uid(5),
            "name": "Sales",
            "content": ["Catalog.Goods", "Document.Order", "Report.Missing"],
            "subsystems": [
                {"kind": "Subsystem", "uuid": uid(6), "name": "Orders", "content": ["Document.Order"]}
            ],
        },
        {
            "kind": "Role",
            "uuid": uid(7),
            "name": "Manager",
            "rights": [
                {"object": "Catalog.Goods", "rights": {"Read": True, "Update": True, "Delete": False}},
                {"object": "Catalog.Missing", "rights": {"Read": True}},
            ],
        },
        {"kind": "FunctionalOption", "uuid": uid(8), "name": "UseOrders", "content": ["Document.Order"]},
        {
            "kind": "ExchangePlan",
            "uuid": uid(9),
            "name": "Full",
            "content": [{"metadata": "Catalog.Goods", "autoRecord": True}],
        },
        {"kind": "EventSubscription", "uuid": uid(10), "name": "OnWrite", "source": ["DocumentObject.Order"]},
        {"kind": "CommonPicture", "uuid": uid(11), "name": "Logo"},
    ],
}


@pytest.fixture()
def shop_dump() -> dict:
    """A small configuration covering every edge-producing construct."""

    return copy.deepcopy(SHOP_DUMP)


@pytest.fixture()
def shop_configuration(shop_dump):
    return load_configuration(shop_dump)
