# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Any, Dict, Optional, Type

from pydantic import BaseModel

from .serializer import serialize
from .values import from_python

_RULES = """Rules:
- One `key = value` per line. Nesting is shown by indenting 2 spaces.
- A list of values: the key alone on its line, then one `= value` line per item, indented.
- A list of records: the key alone, then a bare `=` line per record, with the record's fields indented below it.
- Long text: `key = \"\"\"txt` then the text on the following lines, indented.
- Wrap a value in double quotes when it is empty, starts or ends with a space, or contains `;` or `=`.
- Leave out fields you have no value for."""


def _dummy_scalar(t: Optional[str]) -> Any:
    if t == "integer":
        return 1
    if t == "number":
        return 0.5
    if t == "boolean":
        return True
    return "example"


def _resolve(schema: Dict[str, Any], defs: Dict[str, Any]) -> Dict[str, Any]:
    seen = set()
    while "$ref" in schema:
        ref = schema["$ref"]
        if ref in seen:
            return {}
        seen.add(ref)
        schema = defs.get(ref.rsplit("/", 1)[-1], {})
    for key in ("anyOf", "oneOf", "allOf"):
        options = [o for o in schema.get(key) or [] if o.get("type") != "null"]
        if options:
            return _resolve(options[0], defs)
    return schema


def _dummy_from_schema(schema: Dict[str, Any], defs: Dict[str, Any], depth: int = 0, max_depth: int = 3) -> Any:
    schema = _resolve(schema, defs)
    t = schema.get("type")
    if t == "object":
        if depth >= max_depth:
            return None
        props = schema.get("properties") or {}
        out = {k: _dummy_from_schema(v, defs, depth + 1, max_depth) for k, v in props.items()}
        return {k: v for k, v in out.items() if v is not None} or None
    if t == "array":
        if depth >= max_depth:
            return None
        item = _dummy_from_schema(schema.get("items") or {}, defs, depth + 1, max_depth)
        return None if item is None else [item, item]
    if "enum" in schema and schema["enum"]:
        return schema["enum"][0]
    return _dummy_scalar(t)


def build_conl_example(model: Type[BaseModel]) -> str:
    """Small CONL document with every field of ``model`` filled with a placeholder."""
    schema = model.model_json_schema()
    defs = schema.get("$defs") or schema.get("definitions") or {}
    example = _dummy_from_schema(schema, defs) or {}
    return serialize(from_python(example))


def build_conl_format_prompt(model: Type[BaseModel]) -> str:
    return (
        "Answer with a CONL document and nothing else.\n\n"
        + _RULES
        + "\n\nExample for this schema:\n\n```conl\n"
        + build_conl_example(model)
        + "```\n"
    )
