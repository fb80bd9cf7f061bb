"""Helpers for deriving vertex identifiers from metadata identifiers."""
from __future__ import annotations

import re
from hashlib import sha1

# Vertex ids are stored as FIXED_STRING(32).
VID_LENGTH = 32

_CANONICAL_UUID = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def is_canonical_uuid(uid: str) -> bool:
    """Return ``True`` when ``uid`` is written in the 8-4-4-4-12 form."""

    return bool(_CANONICAL_UUID.match(uid))


def node_id(uid: str) -> str:
    """Return the vertex identifier for the metadata object ``uid``.

    Canonical UUIDs lose their ``-`` separators, which keeps them unique
    because the separators always sit at the same positions. Any other
    identifier is hashed instead, since stripping characters from free-form
    text could make two identifiers collide.
    """

    if is_canonical_uuid(uid):
        return uid.replace("-", "")
    return sha1(uid.encode("utf-8")).hexdigest()[:VID_LENGTH]
