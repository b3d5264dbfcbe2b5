# -*- coding: utf-8 -*-
"""Line classifier.

Every physical line is tagged by its shape alone. Nothing here raises: the
content of a multi-line block may look like anything, so validation happens
in the parser once it knows a line is structural.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

MULTILINE_MARKER = '"""'
KV_SEPARATOR = " = "


class LineKind(Enum):
    BLANK = "blank"
    KEY_VALUE = "key_value"
    MULTILINE_OPEN = "multiline_open"
    ARRAY_ITEM = "array_item"
    TABLE_ARRAY_MARKER = "table_array_marker"
    BARE_KEY = "bare_key"


@dataclass(frozen=True)
class Line:
    lineno: int  # 1-based
    raw: str
    indent: int  # leading spaces
    content: str
    kind: LineKind
    key: Optional[str] = None
    value: Optional[str] = None
    hint: Optional[str] = None

    @property
    def depth(self) -> int:
        return self.indent // 2

    @property
    def is_blank(self) -> bool:
        return self.kind is LineKind.BLANK

    @property
    def tab_indented(self) -> bool:
        return self.content.startswith("\t")


def classify_line(raw: str, lineno: int) -> Line:
    indent = len(raw) - len(raw.lstrip(" "))
    content = raw[indent:].rstrip()

    if content.strip() == "":
        return Line(lineno, raw, indent, "", LineKind.BLANK)

    # Array items first: a quoted item may itself contain " = ".
    if content == "=":
        return Line(lineno, raw, indent, content, LineKind.TABLE_ARRAY_MARKER)
    if content.startswith("= "):
        return Line(lineno, raw, indent, content, LineKind.ARRAY_ITEM, value=content[2:].strip())

    if KV_SEPARATOR in content:
        key, value = content.split(KV_SEPARATOR, 1)
        key, value = key.strip(), value.strip()
    elif content.endswith(" ="):
        key, value = content[:-2].strip(), ""
    else:
        return Line(lineno, raw, indent, content, LineKind.BARE_KEY, key=content.strip())

    if value.startswith(MULTILINE_MARKER):
        hint = value[len(MULTILINE_MARKER):].strip()
        return Line(lineno, raw, indent, content, LineKind.MULTILINE_OPEN, key=key, hint=hint)
    return Line(lineno, raw, indent, content, LineKind.KEY_VALUE, key=key, value=value)


def split_lines(text: str) -> List[Line]:
    """Split on LF (dropping a trailing CR per line and a leading BOM) and classify."""
    if text.startswith("\ufeff"):
        text = text[1:]
    raw_lines = text.split("\n")
    if raw_lines and raw_lines[-1] == "":
        raw_lines.pop()
    return [classify_line(raw.rstrip("\r"), i + 1) for i, raw in enumerate(raw_lines)]
