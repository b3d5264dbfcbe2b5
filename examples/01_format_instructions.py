from __future__ import annotations

from pydantic import BaseModel, Field
from conl_parser import ConlOutputParser

class Issue(BaseModel):
    name: str
    year: int = Field(..., ge=1847)
    stamp_images: list[str] = Field(default_factory=list)

parser = ConlOutputParser(model=Issue)
print(parser.get_format_instructions())
