"""Required vs optional fields of stamp metadata."""
from __future__ import annotations

import pytest

from conl_parser import (
    RateType,
    SchemaViolationError,
    StampType,
    dumps_metadata,
    loads_metadata,
)

MINIMAL = """name = Apples
slug = apples
year = 2016
"""


def test_required_fields_only():
    meta = loads_metadata(MINIMAL)
    assert meta.name == "Apples"
    assert meta.slug == "apples"
    assert meta.year == 2016
    # defaults
    assert meta.api_slug == "apples"
    assert meta.url == ""
    assert meta.forever is True
    assert meta.stamp_type is StampType.STAMP
    assert meta.rate is None
    assert meta.stamp_images == []
    assert meta.credits.is_empty()
    assert meta.products == []


@pytest.mark.parametrize(
    "text",
    [
        "slug = apples\nyear = 2016\n",
        "name = Apples\nyear = 2016\n",
        "name = Apples\nslug = apples\n",
        'name = ""\nslug = apples\nyear = 2016\n',
        "name = Apples\nslug = apples\nyear = soon\n",
        "name\n  = Apples\nslug = apples\nyear = 2016\n",
    ],
)
def test_identity_field_errors(text):
    with pytest.raises(SchemaViolationError):
        loads_metadata(text)


def test_error_names_the_field():
    with pytest.raises(SchemaViolationError) as exc:
        loads_metadata("name = Apples\nslug = apples\n")
    assert "year" in str(exc.value)


def test_optional_fields_fall_back():
    text = MINIMAL + (
        "rate = free\n"
        "rate_type = Commemorative\n"
        "issue_date = January 2016\n"
        "background_color = #FF0000\n"
        "forever = false\n"
        "type = Postcard\n"
        "stamp_images = a.png\n"
        "credits = nobody\n"
        "products = none\n"
    )
    meta = loads_metadata(text)
    assert meta.rate is None
    assert meta.rate_type is RateType.OTHER
    assert meta.issue_date is None
    assert meta.background_color is None
    assert meta.forever is False
    assert meta.stamp_type is StampType.STAMP
    assert meta.stamp_images == []
    assert meta.credits.is_empty()
    assert meta.products == []


def test_rate_type_aliases():
    assert RateType.from_label("Additional Postage") is RateType.ADDITIONAL_OUNCE
    assert RateType.from_label("Forever") is RateType.FOREVER
    assert RateType.from_label("Global Forever").is_forever
    assert not RateType.from_label("Priority Mail").is_forever


def test_forever_is_true_unless_false():
    assert loads_metadata(MINIMAL + "forever = yes\n").forever is True
    assert loads_metadata(MINIMAL + "forever = FALSE\n").forever is False


def test_dump_minimal():
    assert dumps_metadata(loads_metadata(MINIMAL)) == (
        "name = Apples\n"
        "slug = apples\n"
        "api_slug = apples\n"
        'url = ""\n'
        "forever = true\n"
        "year = 2016\n"
    )


@pytest.mark.parametrize(
    "extra",
    [
        "url\n  x = y\n",
        "api_slug\n  = a\n",
        "products\n  =\n    title\n      = a\n",
        "products\n  =\n    title = Pane\n    metadata\n      size\n        = a\n",
        "products\n  =\n    title = Pane\n    metadata\n      format\n        kind = pane\n      closure\n        = peel\n",
    ],
)
def test_structured_values_in_text_fields_fall_back(extra):
    meta = loads_metadata(MINIMAL + extra)
    assert meta.url == ""
    assert meta.api_slug == "apples"
    for product in meta.products:
        assert product.title in ("", "Pane")
        if product.metadata is not None:
            assert product.metadata.format == ""
            assert product.metadata.size is None
            assert product.metadata.closure is None


@pytest.mark.parametrize("value", ["2016-W01-1", "2016-1-8", "2016-02-30", "20160108"])
def test_issue_date_must_be_calendar_date(value):
    assert loads_metadata(MINIMAL + f"issue_date = {value}\n").issue_date is None
    assert loads_metadata(MINIMAL + "issue_date = 2016-01-08\n").issue_date == "2016-01-08"
