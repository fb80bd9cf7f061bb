"""Tests for :mod:`mdgraph.graph.ids`."""

from __future__ import annotations

import uuid

from mdgraph.graph.ids import VID_LENGTH, is_canonical_uuid, node_id


def test_canonical_uuid_loses_separators():
    assert node_id("0b4c9a6e-3f11-4f0e-9d0c-6a0e4f5e2b11") == "0b4c9a6e3f114f0e9d0c6a0e4f5e2b11"


def test_non_canonical_identifier_is_hashed_to_vid_length():
    first = node_id("a-b")
    second = node_id("ab")
    assert len(first) == VID_LENGTH
    assert first != second


def test_node_id_is_deterministic():
    assert node_id("Catalog.Goods") == node_id("Catalog.Goods")


def test_is_canonical_uuid():
    assert is_canonical_uuid(str(uuid.uuid4()))
    assert not is_canonical_uuid("not-a-uuid")


def test_ids_are_unique_over_generated_corpus():
    uids = {str(uuid.UUID(int=index * 7919 + 1)) for index in range(5000)}
    ids = {node_id(item) for item in uids}
    assert len(ids) == len(uids)
    assert all(len(item) == VID_LENGTH for item in ids)
