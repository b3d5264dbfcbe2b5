# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from .conl import ParserConfig, parse
from .serializer import ConlSerializer
from .values import from_python, to_python


@runtime_checkable
class ConlBackend(Protocol):
    """CONL encode/decode interface over plain Python data."""
    def encode(self, value: Any) -> str: ...
    def decode(self, text: str) -> Any: ...


@dataclass(frozen=True)
class PlainConlBackend:
    """dict/list/str in, dict/list/str out."""
    cfg: ParserConfig = field(default_factory=ParserConfig)

    def encode(self, value: Any) -> str:
        serializer = ConlSerializer(indent_step=self.cfg.indent_step)
        return serializer.serialize(from_python(value))

    def decode(self, text: str) -> Any:
        return to_python(parse(text, self.cfg))
