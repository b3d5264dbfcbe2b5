# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import re
from typing import Any, Optional, Type

from langchain_core.exceptions import OutputParserException
from langchain_core.output_parsers import BaseOutputParser
from pydantic import BaseModel, Field

from .backend import PlainConlBackend
from .conl import ParserConfig
from .prompting import build_conl_format_prompt
from .security import safe_raw_preview

logger = logging.getLogger(__name__)

_CODE_FENCE_RE = re.compile(r"```(?:conl)?[ \t]*\n(.*?)```", re.DOTALL)


def strip_code_fence(text: str) -> str:
    m = _CODE_FENCE_RE.search(text or "")
    return m.group(1) if m else (text or "")


class ConlOutputParser(BaseOutputParser[BaseModel]):
    """LangChain output parser: CONL text -> pydantic model."""

    pydantic_model: Type[BaseModel] = Field(default=None)
    cfg: ParserConfig = Field(default_factory=ParserConfig)
    _backend: Any = None

    def __init__(self, model: Type[BaseModel], cfg: Optional[ParserConfig] = None, **kwargs):
        super().__init__(**kwargs)
        object.__setattr__(self, 'pydantic_model', model)
        object.__setattr__(self, 'cfg', cfg or ParserConfig())
        object.__setattr__(self, '_backend', PlainConlBackend(cfg=self.cfg))

    def get_format_instructions(self) -> str:
        return build_conl_format_prompt(self.pydantic_model)

    def decode(self, text: str) -> dict:
        """CONL text to a plain dict, without model validation."""
        return self._backend.decode(strip_code_fence(text))

    def parse(self, text: str) -> BaseModel:
        try:
            return self.pydantic_model.model_validate(self.decode(text))
        except Exception as e:
            logger.debug("CONL output rejected (%s): %s", e, safe_raw_preview(text))
            raise OutputParserException(str(e)) from e

    @property
    def _type(self) -> str:
        return "conl"
