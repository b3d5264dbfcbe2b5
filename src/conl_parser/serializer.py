# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .values import Array, MultilineScalar, Scalar, Table, TableArray, Value

_QUOTE_TRIGGERS = (";", "=", "\n", "\r")


def escape_value(s: str) -> str:
    """Quote ``s`` when it would not read back verbatim, otherwise return it unchanged."""
    if (
        s == ""
        or s != s.strip()
        or s.startswith('"')
        or any(ch in s for ch in _QUOTE_TRIGGERS)
    ):
        escaped = (
            s.replace("\\", "\\\\")
            .replace('"', '\\"')
            .replace("\n", "\\n")
            .replace("\r", "\\r")
            .replace("\t", "\\t")
        )
        return f'"{escaped}"'
    return s


def format_multiline(text: str, hint: str = "", pad: str = "  ") -> List[str]:
    """Opener value plus body lines; ``pad`` is the indentation of the body."""
    out = [f'"""{hint}']
    for line in text.split("\n"):
        out.append(pad + line if line else "")
    return out


@dataclass(frozen=True)
class ConlSerializer:
    indent_step: int = 2

    def serialize(self, table: Table) -> str:
        if not isinstance(table, Table):
            raise TypeError(f"a CONL document is a Table, got {type(table).__name__}")
        out: List[str] = []
        self._emit_table(table, 0, out)
        return "\n".join(out) + "\n"

    def _pad(self, level: int) -> str:
        return " " * (self.indent_step * level)

    def _emit_table(self, table: Table, level: int, out: List[str]) -> None:
        for key, value in table.items():
            self._emit_entry(key, value, level, out)

    def _emit_entry(self, key: str, value: Value, level: int, out: List[str]) -> None:
        pad = self._pad(level)
        if isinstance(value, Scalar):
            out.append(f"{pad}{key} = {escape_value(value.text)}")
        elif isinstance(value, MultilineScalar):
            opener, *body = format_multiline(value.text, value.hint, self._pad(level + 1))
            out.append(f"{pad}{key} = {opener}")
            out.extend(body)
        elif isinstance(value, Array):
            out.append(f"{pad}{key}")
            item_pad = self._pad(level + 1)
            for item in value.items:
                out.append(f"{item_pad}= {escape_value(item.text)}")
        elif isinstance(value, Table):
            out.append(f"{pad}{key}")
            self._emit_table(value, level + 1, out)
        elif isinstance(value, TableArray):
            out.append(f"{pad}{key}")
            marker_pad = self._pad(level + 1)
            for element in value.tables:
                out.append(f"{marker_pad}=")
                self._emit_table(element, level + 2, out)
        else:
            raise TypeError(f"not a CONL value: {type(value).__name__}")


def serialize(table: Table, indent_step: int = 2) -> str:
    return ConlSerializer(indent_step=indent_step).serialize(table)
