from __future__ import annotations

import pytest
from langchain_core.exceptions import OutputParserException
from pydantic import BaseModel, Field
from conl_parser import ConlOutputParser

class M(BaseModel):
    route: str
    confidence: float = Field(..., ge=0, le=1)
    reason: str

def test_parse_success_dict_to_model():
    parser = ConlOutputParser(model=M)
    out = parser.parse("route = search\nconfidence = 0.9\nreason = ok\n")
    assert out.route == "search"
    assert out.confidence == 0.9

def test_schema_mismatch_raises():
    parser = ConlOutputParser(model=M)
    with pytest.raises(OutputParserException):
        parser.parse("route = search\nconfidence = not_a_number\nreason = ok\n")

def test_malformed_document_raises():
    parser = ConlOutputParser(model=M)
    with pytest.raises(OutputParserException) as exc:
        parser.parse('route = "search\nconfidence = 0.5\nreason = x\n')
    assert "line 1" in str(exc.value)

def test_extract_from_code_fence():
    parser = ConlOutputParser(model=M)
    text = "Sure:\n```conl\nroute = faq\nconfidence = 0.5\nreason = x\n```"
    out = parser.parse(text)
    assert out.route == "faq"

def test_decode_returns_plain_data():
    parser = ConlOutputParser(model=M)
    assert parser.decode("route = a\ntags\n  = x\n") == {"route": "a", "tags": ["x"]}

def test_format_instructions_contain_example():
    parser = ConlOutputParser(model=M)
    text = parser.get_format_instructions()
    assert "```conl\n" in text
    assert "route = example" in text
    assert "confidence = 0.5" in text
