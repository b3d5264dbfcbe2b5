# -*- coding: utf-8 -*-
"""Value tree produced by the parser and consumed by the serializer."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union


def validate_key(key: str) -> str:
    """Return ``key`` unchanged or raise ``ValueError`` if it cannot be written back."""
    if not isinstance(key, str):
        raise ValueError(f"key must be a string, got {type(key).__name__}")
    if key == "":
        raise ValueError("key must not be empty")
    if key.startswith("\ufeff"):
        raise ValueError(f"key {key!r} starts with a byte-order mark")
    if key != key.strip():
        raise ValueError(f"key {key!r} has surrounding whitespace")
    if "\n" in key or "\r" in key:
        raise ValueError(f"key {key!r} contains a line break")
    if key.startswith("="):
        raise ValueError(f"key {key!r} starts with '='")
    if " = " in key or key.endswith(" ="):
        raise ValueError(f"key {key!r} contains ' = '")
    return key


@dataclass(frozen=True)
class Scalar:
    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class MultilineScalar:
    """Text from a ``\"\"\"hint`` block.

    The text is normalized on construction: CRLF becomes LF, whitespace-only
    lines become empty and leading/trailing blank lines are dropped. Blank
    text is rejected since it has no written form.
    """

    hint: str
    text: str

    def __post_init__(self) -> None:
        if self.hint != self.hint.strip() or "\n" in self.hint or "\r" in self.hint:
            raise ValueError(f"invalid multi-line hint: {self.hint!r}")
        text = normalize_block_text(self.text)
        if not text:
            raise ValueError("multi-line text must contain a non-blank line")
        object.__setattr__(self, "text", text)

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Array:
    """Non-empty list of scalars; an empty list has no written form."""

    items: List[Scalar]

    def __post_init__(self) -> None:
        items = [_as_scalar(v) for v in self.items]
        if not items:
            raise ValueError("an array needs at least one item")
        object.__setattr__(self, "items", items)

    def __iter__(self) -> Iterator[Scalar]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def texts(self) -> List[str]:
        return [s.text for s in self.items]


@dataclass(frozen=True)
class Table:
    """Ordered ``key -> Value`` mapping. Plain strings are wrapped in ``Scalar``."""

    entries: Dict[str, "Value"] = field(default_factory=dict)

    def __post_init__(self) -> None:
        entries: Dict[str, Value] = {}
        for k, v in dict(self.entries).items():
            entries[validate_key(k)] = _as_value(v)
        object.__setattr__(self, "entries", entries)

    def __getitem__(self, key: str) -> "Value":
        return self.entries[key]

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, key: str, default: Optional["Value"] = None) -> Optional["Value"]:
        return self.entries.get(key, default)

    def keys(self):
        return self.entries.keys()

    def items(self):
        return self.entries.items()


@dataclass(frozen=True)
class TableArray:
    tables: List[Table]

    def __post_init__(self) -> None:
        tables = []
        for t in self.tables:
            if isinstance(t, Mapping):
                t = Table(dict(t))
            if not isinstance(t, Table):
                raise ValueError(f"table-array element must be a Table, got {type(t).__name__}")
            tables.append(t)
        if not tables:
            raise ValueError("a table-array needs at least one table")
        object.__setattr__(self, "tables", tables)

    def __iter__(self) -> Iterator[Table]:
        return iter(self.tables)

    def __len__(self) -> int:
        return len(self.tables)


Value = Union[Scalar, MultilineScalar, Array, Table, TableArray]
_VALUE_TYPES = (Scalar, MultilineScalar, Array, Table, TableArray)


def normalize_block_text(text: str) -> str:
    lines = [ln.rstrip("\r") for ln in text.replace("\r\n", "\n").split("\n")]
    lines = ["" if ln.strip() == "" else ln for ln in lines]
    while lines and lines[0] == "":
        lines.pop(0)
    while lines and lines[-1] == "":
        lines.pop()
    return "\n".join(lines)


def _as_scalar(v: Any) -> Scalar:
    if isinstance(v, Scalar):
        return v
    if isinstance(v, str):
        return Scalar(v)
    raise ValueError(f"array items must be scalars, got {type(v).__name__}")


def _as_value(v: Any) -> Value:
    if isinstance(v, _VALUE_TYPES):
        return v
    if isinstance(v, str):
        return Scalar(v)
    raise ValueError(f"not a CONL value: {type(v).__name__}")


# ============================================================
# Plain Python conversion
# ============================================================
def to_python(value: Value) -> Any:
    """Drop the value wrappers: strings, lists and dicts only."""
    if isinstance(value, (Scalar, MultilineScalar)):
        return value.text
    if isinstance(value, Array):
        return value.texts()
    if isinstance(value, Table):
        return {k: to_python(v) for k, v in value.items()}
    if isinstance(value, TableArray):
        return [to_python(t) for t in value.tables]
    raise TypeError(f"not a CONL value: {type(value).__name__}")


def from_python(obj: Any) -> Value:
    """Build a value tree from plain Python data.

    ``None`` entries and empty lists are omitted, booleans become
    ``true``/``false``, a list of mappings becomes a table-array and any other
    list an array.
    """
    if isinstance(obj, _VALUE_TYPES):
        return obj
    if isinstance(obj, Mapping):
        return Table({str(k): from_python(v) for k, v in obj.items() if not _absent(v)})
    if isinstance(obj, (list, tuple)):
        if obj and all(isinstance(x, (Mapping, Table)) for x in obj):
            return TableArray([from_python(x) for x in obj])
        return Array([_scalar_text(x) for x in obj if x is not None])
    return Scalar(_scalar_text(obj))


def _absent(v: Any) -> bool:
    if isinstance(v, (list, tuple)):
        return all(x is None for x in v)
    return v is None


def _scalar_text(v: Any) -> str:
    if isinstance(v, Scalar):
        return v.text
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, (str, int, float)):
        return str(v)
    raise TypeError(f"cannot convert {type(v).__name__} to a CONL scalar")
