from __future__ import annotations

import logging
import sys
import tempfile
from datetime import date

from conl_parser import PostalRates, RateHistory, dumps_metadata, loads_metadata
from conl_parser.store import load_all_stamps, save_stamp

logging.basicConfig(level=logging.INFO, stream=sys.stderr)

record = loads_metadata('''name = Apples
slug = apples
year = 2016
rate = 0.47
rate_type = Forever
stamp_images
  = apples-1.png
  = apples-2.png
credits
  art_director = Derry Noyes
about = """md
  Four varieties of American apples.
''')

print(record.api_slug, record.forever, record.rate_type.value)
print(dumps_metadata(record))

with tempfile.TemporaryDirectory() as root:
    print(save_stamp(record, root))
    print([s.slug for s in load_all_stamps(root)])

rates = PostalRates(
    letter=RateHistory.from_text("letter", "2016-04-10 = 0.47\n2017-01-22 = 0.49\n"),
    ounce=RateHistory.from_text("ounce", "2016-04-10 = 0.21\n"),
    postcard=RateHistory.from_text("postcard", "2016-04-10 = 0.34\n"),
)
print(rates.letter_2oz(date(2017, 3, 1)), rates.postcard_rate(date(2017, 3, 1)))
