"""Decoding of NebulaGraph wire values into plain Python data.

Every result cell returned by the graph service is a thrift ``Value`` union
with exactly one field set. :class:`ValueDecoder` turns such a value into
``None``, scalars, lists, dicts and the vertex/edge/path/dataset records
described below, recursing through nested collections with one routine.

Records produced for the structural kinds::

    vertex  -> {"vid": ..., "tags": {tag: {prop: value}}}
    edge    -> {"src", "dst", "type", "name", "ranking", "props"}
    path    -> {"src": ..., "steps": [{"dst", "type", "name", "ranking", "props"}]}
    dataset -> {"column_names": [...], "rows": [[...], ...]}

A failure while decoding one value never aborts its siblings: the failing
value is replaced by an ``"ERROR: ..."`` marker string.
"""
from __future__ import annotations

import datetime as _dt
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Sequence

from nebula3.common.ttypes import Value

LOGGER = logging.getLogger(__name__)

ERROR_MARKER = "ERROR"


def error_marker(exc: BaseException) -> str:
    """Return the marker string substituted for an undecodable value."""

    return f"{ERROR_MARKER}: {exc}"


def is_error_marker(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(f"{ERROR_MARKER}: ")


def _text(raw: bytes | str) -> str:
    if isinstance(raw, str):
        return raw
    return raw.decode("utf-8")


@dataclass
class ValueDecoder:
    """Recursive, failure-tolerant decoder for ``nebula3`` values."""

    logger: logging.Logger = field(default_factory=lambda: LOGGER)

    def __post_init__(self) -> None:
        self._handlers: Dict[int, Callable[[Any], Any]] = {
            Value.NVAL: lambda raw: None,
            Value.BVAL: bool,
            Value.IVAL: int,
            Value.FVAL: float,
            Value.SVAL: _text,
            Value.DVAL: self._date,
            Value.TVAL: self._time,
            Value.DTVAL: self._datetime,
            Value.LVAL: self._list,
            Value.UVAL: self._set,
            Value.MVAL: self._map,
            Value.VVAL: self._vertex,
            Value.EVAL: self._edge,
            Value.PVAL: self._path,
            Value.GVAL: self._dataset,
            Value.GGVAL: str,
            Value.DUVAL: self._duration,
        }

    def decode(self, value: Value) -> Any:
        """Decode ``value``; return an error marker instead of raising."""

        try:
            kind = value.getType()
            if kind == Value.__EMPTY__:
                return None
            handler = self._handlers.get(kind)
            if handler is None:
                self.logger.warning("Unsupported value kind %s", kind)
                return str(value)
            return handler(value.value)
        except Exception as exc:
            self.logger.warning("Failed to decode value: %s", exc)
            return error_marker(exc)

    def decode_all(self, values: Iterable[Value]) -> List[Any]:
        return [self.decode(item) for item in values]

    def decode_row(self, column_names: Sequence[str], values: Sequence[Value]) -> Dict[str, Any]:
        """Return ``{column: decoded value}`` for one result row."""

        return {name: self.decode(item) for name, item in zip(column_names, values)}

    def decode_props(self, props: Mapping[bytes | str, Value] | None) -> Dict[str, Any]:
        return {self._name(key): self.decode(item) for key, item in (props or {}).items()}

    def _name(self, raw: bytes | str) -> str:
        """Decode a tag, edge, property or column name; markers on failure."""

        try:
            return _text(raw)
        except Exception as exc:
            self.logger.warning("Failed to decode name: %s", exc)
            return error_marker(exc)

    # -- collections -------------------------------------------------------

    def _list(self, raw) -> List[Any]:
        return self.decode_all(raw.values)

    def _set(self, raw) -> List[Any]:
        unique: List[Any] = []
        for item in self.decode_all(raw.values):
            if item not in unique:
                unique.append(item)
        return unique

    def _map(self, raw) -> Dict[str, Any]:
        return self.decode_props(raw.kvs)

    # -- graph structures --------------------------------------------------

    def _vertex(self, raw) -> Dict[str, Any]:
        record: Dict[str, Any] = {"vid": self.decode(raw.vid)}
        tags: Dict[str, Dict[str, Any]] = {}
        for tag in raw.tags or []:
            tags[self._name(tag.name)] = self.decode_props(tag.props)
        record["tags"] = tags
        return record

    def _edge(self, raw) -> Dict[str, Any]:
        return {
            "src": self.decode(raw.src),
            "dst": self.decode(raw.dst),
            "type": raw.type,
            "name": self._name(raw.name),
            "ranking": raw.ranking,
            "props": self.decode_props(raw.props),
        }

    def _path(self, raw) -> Dict[str, Any]:
        steps = [self._step(step) for step in raw.steps or []]
        return {"src": self.decode(raw.src.vid), "steps": steps}

    def _step(self, step) -> Any:
        try:
            return {
                "dst": self.decode(step.dst.vid),
                "type": step.type,
                "name": self._name(step.name),
                "ranking": step.ranking,
                "props": self.decode_props(step.props),
            }
        except Exception as exc:
            self.logger.warning("Failed to decode path step: %s", exc)
            return error_marker(exc)

    def _dataset(self, raw) -> Dict[str, Any]:
        return {
            "column_names": [self._name(name) for name in raw.column_names or []],
            "rows": [self.decode_all(row.values) for row in raw.rows or []],
        }

    # -- temporal ----------------------------------------------------------

    @staticmethod
    def _date(raw) -> _dt.date:
        return _dt.date(raw.year, raw.month, raw.day)

    @staticmethod
    def _time(raw) -> _dt.time:
        return _dt.time(raw.hour, raw.minute, raw.sec, raw.microsec)

    @staticmethod
    def _datetime(raw) -> _dt.datetime:
        return _dt.datetime(raw.year, raw.month, raw.day, raw.hour, raw.minute, raw.sec, raw.microsec)

    @staticmethod
    def _duration(raw) -> Dict[str, int]:
        return {"seconds": raw.seconds, "microseconds": raw.microseconds, "months": raw.months}


_DEFAULT_DECODER = ValueDecoder()


def decode_value(value: Value) -> Any:
    """Decode ``value`` with a shared module-level :class:`ValueDecoder`."""

    return _DEFAULT_DECODER.decode(value)


__all__ = ["ERROR_MARKER", "ValueDecoder", "decode_value", "error_marker", "is_error_marker"]
