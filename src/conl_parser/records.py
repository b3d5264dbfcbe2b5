# -*- coding: utf-8 -*-
"""Stamp metadata <-> CONL text.

``dumps_metadata`` writes the record straight to text without building a
value tree; its output matches ``serialize(metadata_to_value(meta))``.
"""
from __future__ import annotations

from typing import List, Optional

from .conl import ParserConfig, parse
from .schema import ABOUT_HINT, Credits, Product, StampMetadata, StampType, format_amount, metadata_from_value
from .serializer import escape_value, format_multiline
from .values import normalize_block_text

_CREDIT_ROLES = ("art_director", "artist", "designer", "typographer", "photographer", "illustrator")


def loads_metadata(text: str, cfg: Optional[ParserConfig] = None) -> StampMetadata:
    return metadata_from_value(parse(text, cfg))


def _field(lines: List[str], pad: str, key: str, v: Optional[str]) -> None:
    if v:
        lines.append(f"{pad}{key} = {escape_value(v)}")


def _array(lines: List[str], pad: str, key: str, items: List[str]) -> None:
    if items:
        lines.append(f"{pad}{key}")
        lines.extend(f"{pad}  = {escape_value(item)}" for item in items)


def _credits(lines: List[str], credits: Credits) -> None:
    if credits.is_empty():
        return
    lines.append("credits")
    for role in _CREDIT_ROLES:
        _field(lines, "  ", role, getattr(credits, role))
    _array(lines, "  ", "sources", credits.sources)


def _product(lines: List[str], product: Product) -> None:
    lines.append("  =")
    lines.append(f"    title = {escape_value(product.title)}")
    _field(lines, "    ", "long_title", product.long_title)
    _field(lines, "    ", "price", product.price)
    _field(lines, "    ", "postal_store_url", product.postal_store_url)
    _field(lines, "    ", "stamps_forever_url", product.stamps_forever_url)
    _array(lines, "    ", "images", product.images)

    meta = product.metadata
    if meta is None:
        return
    body: List[str] = []
    _field(body, "      ", "format", meta.format)
    if meta.quantity is not None:
        body.append(f"      quantity = {meta.quantity}")
    _field(body, "      ", "size", meta.size)
    _field(body, "      ", "style", meta.style)
    _field(body, "      ", "closure", meta.closure)
    if meta.sided is not None:
        body.append(f"      sided = {meta.sided}")
    if body:
        lines.append("    metadata")
        lines.extend(body)


def dumps_metadata(meta: StampMetadata) -> str:
    lines: List[str] = [
        f"name = {escape_value(meta.name)}",
        f"slug = {escape_value(meta.slug)}",
        f"api_slug = {escape_value(meta.api_slug)}",
        f"url = {escape_value(meta.url)}",
    ]
    _field(lines, "", "issue_date", meta.issue_date)
    _field(lines, "", "issue_location", meta.issue_location)
    if meta.rate is not None:
        lines.append(f"rate = {format_amount(meta.rate)}")
    if meta.rate_type is not None:
        lines.append(f"rate_type = {escape_value(meta.rate_type.value)}")
    if meta.extra_cost is not None:
        lines.append(f"extra_cost = {format_amount(meta.extra_cost)}")
    lines.append(f"forever = {'true' if meta.forever else 'false'}")
    lines.append(f"year = {meta.year}")
    if meta.stamp_type is not StampType.STAMP:
        lines.append(f"type = {meta.stamp_type.value}")
    _field(lines, "", "series", meta.series)
    _field(lines, "", "background_color", meta.background_color)
    _array(lines, "", "stamp_images", meta.stamp_images)
    _field(lines, "", "sheet_image", meta.sheet_image)
    _credits(lines, meta.credits)

    if meta.about and meta.about.strip():
        opener, *body = format_multiline(normalize_block_text(meta.about), ABOUT_HINT)
        lines.append(f"about = {opener}")
        lines.extend(body)

    if meta.products:
        lines.append("products")
        for product in meta.products:
            _product(lines, product)

    return "\n".join(lines) + "\n"

