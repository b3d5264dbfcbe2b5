# -*- coding: utf-8 -*-

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .lines import Line, LineKind, split_lines
from .values import Array, MultilineScalar, Scalar, Table, TableArray, Value, validate_key


# ============================================================
# Errors
# ============================================================
class ConlError(ValueError):
    pass


class ConlDecodeError(ConlError):
    """Malformed document. ``line`` is 1-based."""

    def __init__(self, message: str, line: int):
        super().__init__(message)
        self.message = message
        self.line = line


class ConlLexicalError(ConlDecodeError):
    pass


class ConlStructureError(ConlDecodeError):
    pass


class SchemaViolationError(ConlError):
    pass


# ============================================================
# Config
# ============================================================
@dataclass(frozen=True)
class ParserConfig:
    indent_step: int = 2
    strict_duplicates: bool = False  # default: last write wins
    max_depth: int = 64


class NextShape(Enum):
    """What a bare key introduces, decided from its first child line."""

    ARRAY = "array"
    TABLE_ARRAY = "table_array"
    TABLE = "table"


_ESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}


def decode_scalar(raw: str, lineno: int) -> str:
    """Undo the serializer's quoting. Unquoted text is returned as is."""
    if not raw.startswith('"'):
        return raw
    out: List[str] = []
    i = 1
    while i < len(raw):
        ch = raw[i]
        if ch == "\\":
            if i + 1 >= len(raw):
                break
            esc = raw[i + 1]
            if esc not in _ESCAPES:
                raise ConlLexicalError(f"invalid escape sequence \\{esc} at line {lineno}", lineno)
            out.append(_ESCAPES[esc])
            i += 2
            continue
        if ch == '"':
            if raw[i + 1:].strip():
                raise ConlLexicalError(f"unexpected text after closing quote at line {lineno}", lineno)
            return "".join(out)
        out.append(ch)
        i += 1
    raise ConlLexicalError(f"unterminated quoted scalar at line {lineno}", lineno)


# ============================================================
# Parser
# ============================================================
class ConlParser:
    """Recursive descent over classified lines.

    Every routine takes ``(lines, index, depth)`` and returns
    ``(value, next_index)``; no cursor is shared between frames.
    """

    def __init__(self, cfg: ParserConfig = ParserConfig()):
        self.cfg = cfg

    def parse(self, text: str) -> Table:
        lines = split_lines(text or "")
        table, i = self.parse_block(lines, 0, 0)
        i = self._skip_blank(lines, i)
        if i < len(lines):
            # parse_block only stops early on a shallower line, impossible at depth 0
            raise ConlStructureError(f"unparsed input at line {lines[i].lineno}", lines[i].lineno)
        return table

    # ---------------- Helpers ----------------
    @staticmethod
    def _skip_blank(lines: List[Line], i: int) -> int:
        while i < len(lines) and lines[i].is_blank:
            i += 1
        return i

    def _level(self, line: Line) -> int:
        if line.tab_indented:
            raise ConlLexicalError(f"tabs are not allowed in indentation (line {line.lineno})", line.lineno)
        step = self.cfg.indent_step
        if line.indent % step:
            raise ConlLexicalError(
                f"indentation must be a multiple of {step} spaces (line {line.lineno})", line.lineno
            )
        return line.indent // step

    def _check_depth(self, depth: int, line: Line) -> None:
        if depth > self.cfg.max_depth:
            raise ConlStructureError(
                f"nesting deeper than {self.cfg.max_depth} levels at line {line.lineno}", line.lineno
            )

    @staticmethod
    def _key(line: Line) -> str:
        try:
            return validate_key(line.key or "")
        except ValueError as e:
            raise ConlLexicalError(f"invalid key at line {line.lineno}: {e}", line.lineno) from e

    def _unexpected_indent(self, line: Line) -> ConlStructureError:
        return ConlStructureError(f"unexpected indentation at line {line.lineno}", line.lineno)

    # ---------------- Shape ----------------
    def sniff_shape(self, lines: List[Line], i: int, depth: int) -> NextShape:
        """Look at the first non-blank line after a bare key at ``depth``."""
        i = self._skip_blank(lines, i)
        if i >= len(lines) or lines[i].indent <= depth * self.cfg.indent_step:
            return NextShape.TABLE
        kind = lines[i].kind
        if kind is LineKind.ARRAY_ITEM:
            return NextShape.ARRAY
        if kind is LineKind.TABLE_ARRAY_MARKER:
            return NextShape.TABLE_ARRAY
        return NextShape.TABLE

    # ---------------- Blocks ----------------
    def parse_block(self, lines: List[Line], i: int, depth: int) -> Tuple[Table, int]:
        """Parse table entries at ``depth`` until a shallower line or end of input."""
        entries: Dict[str, Value] = {}
        while True:
            i = self._skip_blank(lines, i)
            if i >= len(lines):
                break
            line = lines[i]
            level = self._level(line)
            if level < depth:
                break
            if level > depth:
                raise self._unexpected_indent(line)

            if line.kind is LineKind.ARRAY_ITEM:
                raise ConlStructureError(
                    f"expected key = value, found bare array item at line {line.lineno}", line.lineno
                )
            if line.kind is LineKind.TABLE_ARRAY_MARKER:
                raise ConlStructureError(
                    f"expected key = value, found table-array marker at line {line.lineno}", line.lineno
                )

            key = self._key(line)
            value: Value
            if line.kind is LineKind.KEY_VALUE:
                value = Scalar(decode_scalar(line.value or "", line.lineno))
                i += 1
            elif line.kind is LineKind.MULTILINE_OPEN:
                value, i = self.read_multiline(lines, i + 1, depth)
            else:
                value, i = self._parse_nested(lines, i + 1, depth + 1, line)

            if key in entries and self.cfg.strict_duplicates:
                raise ConlStructureError(f"duplicate key {key!r} at line {line.lineno}", line.lineno)
            entries[key] = value
        return Table(entries), i

    def _parse_nested(self, lines: List[Line], i: int, depth: int, owner: Line) -> Tuple[Value, int]:
        self._check_depth(depth, owner)
        shape = self.sniff_shape(lines, i, depth - 1)
        if shape is NextShape.ARRAY:
            return self.parse_array(lines, i, depth)
        if shape is NextShape.TABLE_ARRAY:
            return self.parse_table_array(lines, i, depth)
        return self.parse_block(lines, i, depth)

    def parse_array(self, lines: List[Line], i: int, depth: int) -> Tuple[Array, int]:
        items: List[Scalar] = []
        while True:
            i = self._skip_blank(lines, i)
            if i >= len(lines):
                break
            line = lines[i]
            level = self._level(line)
            if level < depth:
                break
            if level > depth:
                raise self._unexpected_indent(line)
            if line.kind is not LineKind.ARRAY_ITEM:
                raise ConlStructureError(f"expected array item at line {line.lineno}", line.lineno)
            items.append(Scalar(decode_scalar(line.value or "", line.lineno)))
            i += 1
        return Array(items), i

    def parse_table_array(self, lines: List[Line], i: int, depth: int) -> Tuple[TableArray, int]:
        tables: List[Table] = []
        while True:
            i = self._skip_blank(lines, i)
            if i >= len(lines):
                break
            line = lines[i]
            level = self._level(line)
            if level < depth:
                break
            if level > depth:
                raise self._unexpected_indent(line)
            if line.kind is not LineKind.TABLE_ARRAY_MARKER:
                raise ConlStructureError(f"expected table-array marker '=' at line {line.lineno}", line.lineno)
            self._check_depth(depth + 1, line)
            table, i = self.parse_block(lines, i + 1, depth + 1)
            tables.append(table)
        return TableArray(tables), i

    def read_multiline(self, lines: List[Line], i: int, depth: int) -> Tuple[MultilineScalar, int]:
        """Collect the raw block after a ``\"\"\"hint`` opener at ``depth``."""
        opener = lines[i - 1]
        block_indent = (depth + 1) * self.cfg.indent_step
        body: List[str] = []
        while i < len(lines):
            line = lines[i]
            if line.is_blank:
                body.append("")
            elif line.indent >= block_indent:
                body.append(line.raw[block_indent:])
            else:
                break
            i += 1
        if not any(body):
            raise ConlLexicalError(
                f"unterminated multi-line block opened at line {opener.lineno}", opener.lineno
            )
        return MultilineScalar(opener.hint or "", "\n".join(body)), i


def parse(text: str, cfg: Optional[ParserConfig] = None) -> Table:
    return ConlParser(cfg or ParserConfig()).parse(text)
