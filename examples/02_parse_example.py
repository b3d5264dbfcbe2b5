from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field
from conl_parser import ConlOutputParser

class Credits(BaseModel):
    artist: Optional[str] = Field(None, description="artist")
    designer: Optional[str] = Field(None, description="designer")

class Issue(BaseModel):
    name: str = Field(..., description="stamp name")
    year: int
    summary: str
    credits: Optional[Credits] = None

parser = ConlOutputParser(model=Issue)

conl_output = '''
name = Lunar New Year: Year of the Monkey
year = 2016
summary = """txt
  The eighth stamp in the series.
  Red and gold.
credits
  artist = Kam Mak
'''.strip()

print(parser.parse(conl_output))
