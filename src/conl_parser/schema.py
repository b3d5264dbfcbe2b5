# -*- coding: utf-8 -*-
"""Stamp metadata records and their mapping to and from value trees.

Field order in each model is the order fields are written. Identity fields
(``name``, ``slug``, ``year``) must be present and valid; the other fields
fall back to a documented default instead of failing.
"""
from __future__ import annotations

import re
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .conl import SchemaViolationError
from .values import Array, MultilineScalar, Scalar, Table, TableArray, Value, to_python

_HEX_COLOR_RE = re.compile(r"^(?:[0-9A-Fa-f]{3}|[0-9A-Fa-f]{6})$")
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

ABOUT_HINT = "md"


class RateType(str, Enum):
    FOREVER = "Forever"
    POSTCARD = "Postcard"
    INTERNATIONAL = "International"
    GLOBAL_FOREVER = "Global Forever"
    ADDITIONAL_OUNCE = "Additional Ounce"
    TWO_OUNCE = "Two Ounce"
    THREE_OUNCE = "Three Ounce"
    NONMACHINEABLE = "Nonmachineable Surcharge"
    SEMIPOSTAL = "Semipostal"
    DEFINITIVE = "Definitive"
    PRIORITY_MAIL = "Priority Mail"
    PRIORITY_MAIL_EXPRESS = "Priority Mail Express"
    PRESORTED_FIRST_CLASS = "Presorted First-Class"
    PRESORTED_STANDARD = "Presorted Standard"
    NONPROFIT = "Nonprofit"
    OTHER = "Other"

    @classmethod
    def from_label(cls, label: str) -> "RateType":
        if label == "Additional Postage":
            return cls.ADDITIONAL_OUNCE
        try:
            return cls(label)
        except ValueError:
            return cls.OTHER

    @property
    def is_forever(self) -> bool:
        return self in _FOREVER_RATES


_FOREVER_RATES = frozenset(
    {
        RateType.FOREVER,
        RateType.POSTCARD,
        RateType.INTERNATIONAL,
        RateType.GLOBAL_FOREVER,
        RateType.ADDITIONAL_OUNCE,
        RateType.TWO_OUNCE,
        RateType.THREE_OUNCE,
        RateType.NONMACHINEABLE,
        RateType.SEMIPOSTAL,
    }
)


class StampType(str, Enum):
    STAMP = "stamp"
    CARD = "card"
    ENVELOPE = "envelope"

    @classmethod
    def from_label(cls, label: str) -> "StampType":
        try:
            return cls(label.strip().lower())
        except ValueError:
            return cls.STAMP


def _optional_float(v: Any) -> Optional[float]:
    if v is None or isinstance(v, float):
        return v
    try:
        return float(v)
    except (TypeError, ValueError):
        return None


def _optional_int(v: Any) -> Optional[int]:
    if v is None or isinstance(v, int):
        return v
    try:
        return int(str(v).strip())
    except ValueError:
        return None


def _string_list(v: Any) -> List[str]:
    return v if isinstance(v, list) and all(isinstance(x, str) for x in v) else []


def _optional_text(v: Any) -> Optional[str]:
    return v if isinstance(v, str) else None


def _text(v: Any) -> str:
    return v if isinstance(v, str) else ""


class Credits(BaseModel):
    art_director: Optional[str] = None
    artist: Optional[str] = None
    designer: Optional[str] = None
    typographer: Optional[str] = None
    photographer: Optional[str] = None
    illustrator: Optional[str] = None
    sources: List[str] = Field(default_factory=list)

    @field_validator("art_director", "artist", "designer", "typographer", "photographer", "illustrator", mode="before")
    @classmethod
    def _names(cls, v: Any) -> Optional[str]:
        return _optional_text(v)

    @field_validator("sources", mode="before")
    @classmethod
    def _sources(cls, v: Any) -> List[str]:
        return _string_list(v)

    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in type(self).model_fields)


class ProductMetadata(BaseModel):
    """Parsed facts about a product listing (envelope size, booklet sides, ...)."""

    format: str = ""
    quantity: Optional[int] = None
    size: Optional[str] = None
    style: Optional[str] = None
    closure: Optional[str] = None
    sided: Optional[int] = None

    @field_validator("format", mode="before")
    @classmethod
    def _format(cls, v: Any) -> str:
        return _text(v)

    @field_validator("size", "style", "closure", mode="before")
    @classmethod
    def _texts(cls, v: Any) -> Optional[str]:
        return _optional_text(v)

    @field_validator("quantity", "sided", mode="before")
    @classmethod
    def _ints(cls, v: Any) -> Optional[int]:
        return _optional_int(v)


class Product(BaseModel):
    title: str = ""
    long_title: Optional[str] = None
    price: Optional[str] = None
    postal_store_url: Optional[str] = None
    stamps_forever_url: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    metadata: Optional[ProductMetadata] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v: Any) -> str:
        return _text(v)

    @field_validator("long_title", "price", "postal_store_url", "stamps_forever_url", mode="before")
    @classmethod
    def _texts(cls, v: Any) -> Optional[str]:
        return _optional_text(v)

    @field_validator("images", mode="before")
    @classmethod
    def _images(cls, v: Any) -> List[str]:
        return _string_list(v)

    @field_validator("metadata", mode="before")
    @classmethod
    def _metadata(cls, v: Any) -> Any:
        return v if isinstance(v, (dict, ProductMetadata)) else None


class StampMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    api_slug: str = ""
    url: str = ""
    issue_date: Optional[str] = None
    issue_location: Optional[str] = None
    rate: Optional[float] = None
    rate_type: Optional[RateType] = None
    extra_cost: Optional[float] = None
    # Files written before the flag existed are all forever stamps.
    forever: bool = True
    year: int
    stamp_type: StampType = Field(default=StampType.STAMP, alias="type")
    series: Optional[str] = None
    background_color: Optional[str] = None
    stamp_images: List[str] = Field(default_factory=list)
    sheet_image: Optional[str] = None
    credits: Credits = Field(default_factory=Credits)
    about: Optional[str] = None
    products: List[Product] = Field(default_factory=list)

    @field_validator("api_slug", "url", mode="before")
    @classmethod
    def _links(cls, v: Any) -> str:
        return _text(v)

    @field_validator("issue_location", "series", "sheet_image", "about", mode="before")
    @classmethod
    def _texts(cls, v: Any) -> Optional[str]:
        return _optional_text(v)

    @field_validator("rate", "extra_cost", mode="before")
    @classmethod
    def _floats(cls, v: Any) -> Optional[float]:
        return _optional_float(v)

    @field_validator("rate_type", mode="before")
    @classmethod
    def _rate_type(cls, v: Any) -> Any:
        if isinstance(v, RateType):
            return v
        return RateType.from_label(v) if isinstance(v, str) else None

    @field_validator("forever", mode="before")
    @classmethod
    def _forever(cls, v: Any) -> bool:
        if isinstance(v, bool):
            return v
        return str(v).strip().lower() != "false"

    @field_validator("stamp_type", mode="before")
    @classmethod
    def _stamp_type(cls, v: Any) -> Any:
        if isinstance(v, StampType):
            return v
        return StampType.from_label(v) if isinstance(v, str) else StampType.STAMP

    @field_validator("background_color", mode="before")
    @classmethod
    def _color(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) and _HEX_COLOR_RE.match(v) else None

    @field_validator("issue_date", mode="before")
    @classmethod
    def _issue_date(cls, v: Any) -> Optional[str]:
        if not isinstance(v, str) or not _ISO_DATE_RE.match(v):
            return None
        try:
            datetime.strptime(v, "%Y-%m-%d")
        except ValueError:
            return None
        return v

    @field_validator("stamp_images", mode="before")
    @classmethod
    def _stamp_images(cls, v: Any) -> List[str]:
        return _string_list(v)

    @field_validator("credits", mode="before")
    @classmethod
    def _credits(cls, v: Any) -> Any:
        return v if isinstance(v, (dict, Credits)) else {}

    @field_validator("products", mode="before")
    @classmethod
    def _products(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return []
        return [p for p in v if isinstance(p, (dict, Product))]

    @model_validator(mode="after")
    def _default_api_slug(self) -> "StampMetadata":
        if not self.api_slug:
            self.api_slug = self.slug
        return self


# ============================================================
# Value tree <-> record
# ============================================================
def format_amount(v: float) -> str:
    return f"{v:.2f}"


def validate_metadata(data: Dict[str, Any]) -> StampMetadata:
    try:
        return StampMetadata.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '$'}: {err['msg']}" for err in e.errors()
        )
        raise SchemaViolationError(f"invalid stamp metadata: {problems}") from e


def metadata_from_value(table: Value) -> StampMetadata:
    if not isinstance(table, Table):
        raise SchemaViolationError(f"stamp metadata must be a table, got {type(table).__name__}")
    return validate_metadata(to_python(table))


def _put(entries: Dict[str, Value], key: str, v: Optional[str]) -> None:
    if v:
        entries[key] = Scalar(v)


def _credits_value(credits: Credits) -> Table:
    entries: Dict[str, Value] = {}
    for name in ("art_director", "artist", "designer", "typographer", "photographer", "illustrator"):
        _put(entries, name, getattr(credits, name))
    if credits.sources:
        entries["sources"] = Array(credits.sources)
    return Table(entries)


def _product_metadata_value(meta: ProductMetadata) -> Table:
    entries: Dict[str, Value] = {}
    _put(entries, "format", meta.format)
    if meta.quantity is not None:
        entries["quantity"] = Scalar(str(meta.quantity))
    _put(entries, "size", meta.size)
    _put(entries, "style", meta.style)
    _put(entries, "closure", meta.closure)
    if meta.sided is not None:
        entries["sided"] = Scalar(str(meta.sided))
    return Table(entries)


def _product_value(product: Product) -> Table:
    entries: Dict[str, Value] = {"title": Scalar(product.title)}
    _put(entries, "long_title", product.long_title)
    _put(entries, "price", product.price)
    _put(entries, "postal_store_url", product.postal_store_url)
    _put(entries, "stamps_forever_url", product.stamps_forever_url)
    if product.images:
        entries["images"] = Array(product.images)
    if product.metadata is not None:
        meta = _product_metadata_value(product.metadata)
        if len(meta):
            entries["metadata"] = meta
    return Table(entries)


def metadata_to_value(meta: StampMetadata) -> Table:
    entries: Dict[str, Value] = {
        "name": Scalar(meta.name),
        "slug": Scalar(meta.slug),
        "api_slug": Scalar(meta.api_slug),
        "url": Scalar(meta.url),
    }
    _put(entries, "issue_date", meta.issue_date)
    _put(entries, "issue_location", meta.issue_location)
    if meta.rate is not None:
        entries["rate"] = Scalar(format_amount(meta.rate))
    if meta.rate_type is not None:
        entries["rate_type"] = Scalar(meta.rate_type.value)
    if meta.extra_cost is not None:
        entries["extra_cost"] = Scalar(format_amount(meta.extra_cost))
    entries["forever"] = Scalar("true" if meta.forever else "false")
    entries["year"] = Scalar(str(meta.year))
    if meta.stamp_type is not StampType.STAMP:
        entries["type"] = Scalar(meta.stamp_type.value)
    _put(entries, "series", meta.series)
    _put(entries, "background_color", meta.background_color)
    if meta.stamp_images:
        entries["stamp_images"] = Array(meta.stamp_images)
    _put(entries, "sheet_image", meta.sheet_image)
    if not meta.credits.is_empty():
        entries["credits"] = _credits_value(meta.credits)
    if meta.about and meta.about.strip():
        entries["about"] = MultilineScalar(ABOUT_HINT, meta.about)
    if meta.products:
        entries["products"] = TableArray([_product_value(p) for p in meta.products])
    return Table(entries)
