from __future__ import annotations

from conl_parser import (
    Credits,
    MultilineScalar,
    Product,
    ProductMetadata,
    RateType,
    StampMetadata,
    StampType,
    dumps_metadata,
    loads_metadata,
    metadata_from_value,
    metadata_to_value,
    parse,
    serialize,
)

RECORD = '''name = Lunar New Year: Year of the Monkey
slug = lunar-new-year-year-of-the-monkey
api_slug = lunar-new-year-2016
url = https://example.com/stamps/lunar-new-year-2016
issue_date = 2016-01-08
issue_location = Chicago, IL 60607
rate = 0.49
rate_type = Forever
forever = true
year = 2016
series = Lunar New Year
background_color = C8102E
stamp_images
  = monkey-1.png
  = monkey-2.png
sheet_image = sheet.png
credits
  art_director = Ethel Kessler
  artist = Kam Mak
  sources
    = https://example.com/source
about = """md
  The eighth stamp in the series.

  Celebrates the Year of the Monkey.
products
  =
    title = Pane of 12
    price = $5.88
    images
      = pane.jpg
    metadata
      format = pane
      quantity = 12
  =
    title = Press Sheet
'''


def _full_record() -> StampMetadata:
    return StampMetadata(
        name="Pioneers; of = American Industrial Design",
        slug="pioneers",
        url="https://example.com/p",
        issue_date="2011-06-29",
        issue_location=" Washington, DC ",
        rate=0.44,
        rate_type=RateType.FOREVER,
        extra_cost=0.1,
        forever=False,
        year=2011,
        stamp_type=StampType.ENVELOPE,
        series="Design",
        background_color="abc",
        stamp_images=["1.png", "a = b.png"],
        sheet_image="sheet.png",
        credits=Credits(designer="Derry Noyes", sources=["s1", "s2"]),
        about="Line one.\n\nLine \"two\"; = three.",
        products=[
            Product(
                title="Envelope",
                long_title="Stamped envelope, #10",
                price="$1.20",
                postal_store_url="https://example.com/store",
                stamps_forever_url="https://example.com/forever",
                images=["e.jpg"],
                metadata=ProductMetadata(format="envelope", size="#10", style="window", closure="peel", sided=2),
            ),
            Product(title=""),
        ],
    )


def test_load_record():
    meta = loads_metadata(RECORD)
    assert meta.name == "Lunar New Year: Year of the Monkey"
    assert meta.api_slug == "lunar-new-year-2016"
    assert meta.issue_location == "Chicago, IL 60607"
    assert meta.rate == 0.49
    assert meta.rate_type is RateType.FOREVER
    assert meta.stamp_images == ["monkey-1.png", "monkey-2.png"]
    assert meta.credits.artist == "Kam Mak"
    assert meta.credits.sources == ["https://example.com/source"]
    assert meta.about == "The eighth stamp in the series.\n\nCelebrates the Year of the Monkey."
    assert len(meta.products) == 2
    assert meta.products[0].metadata == ProductMetadata(format="pane", quantity=12)
    assert meta.products[0].images == ["pane.jpg"]
    assert meta.products[1].title == "Press Sheet"
    assert meta.products[1].metadata is None


def test_dump_is_byte_identical_for_canonical_input():
    assert dumps_metadata(loads_metadata(RECORD)) == RECORD


def test_round_trip():
    meta = _full_record()
    assert loads_metadata(dumps_metadata(meta)).model_dump() == meta.model_dump()


def test_direct_dump_matches_tree_serialization():
    for meta in (_full_record(), loads_metadata(RECORD)):
        assert dumps_metadata(meta) == serialize(metadata_to_value(meta))


def test_about_is_a_markdown_block():
    tree = metadata_to_value(_full_record())
    assert tree["about"] == MultilineScalar("md", "Line one.\n\nLine \"two\"; = three.")
    assert "about" not in metadata_to_value(loads_metadata("name = a\nslug = a\nyear = 2000\n"))


def test_stamp_type_written_only_when_not_stamp():
    text = dumps_metadata(_full_record())
    assert "\ntype = envelope\n" in text
    assert "\ntype = " not in dumps_metadata(loads_metadata(RECORD))


def test_amounts_use_two_decimals():
    text = dumps_metadata(_full_record())
    assert "\nrate = 0.44\n" in text
    assert "\nextra_cost = 0.10\n" in text


def test_metadata_from_value_uses_tree():
    meta = metadata_from_value(parse(RECORD))
    assert meta == loads_metadata(RECORD)
