# -*- coding: utf-8 -*-
"""Historical postage rate tables: a flat ``YYYY-MM-DD = rate`` document per rate type."""
from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Mapping, Optional, Tuple

from .conl import ParserConfig, SchemaViolationError, parse
from .serializer import serialize
from .values import Scalar, Table


def loads_rates(text: str, cfg: Optional[ParserConfig] = None) -> Dict[str, float]:
    table = parse(text, cfg)
    out: Dict[str, float] = {}
    for key, value in table.items():
        if not isinstance(value, Scalar):
            raise SchemaViolationError(f"rate {key!r}: expected a scalar, got {type(value).__name__}")
        try:
            out[key] = float(value.text)
        except ValueError as e:
            raise SchemaViolationError(f"rate {key!r}: not a number: {value.text!r}") from e
    return out


def dumps_rates(rates: Mapping[str, float]) -> str:
    return serialize(Table({k: Scalar(repr(float(rates[k]))) for k in sorted(rates)}))


def _parse_date(s: str) -> Optional[date]:
    try:
        return date.fromisoformat(s.strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class RateHistory:
    """Effective-dated rates for one rate type, sorted by date."""

    name: str
    rates: List[Tuple[date, float]] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, name: str, entries: Mapping[str, float]) -> "RateHistory":
        rates = []
        for key, rate in entries.items():
            d = _parse_date(key)
            if d is not None:
                rates.append((d, rate))
        rates.sort(key=lambda r: r[0])
        return cls(name=name, rates=rates)

    @classmethod
    def from_text(cls, name: str, text: str) -> "RateHistory":
        return cls.from_mapping(name, loads_rates(text))

    def rate_on_date(self, when: date) -> Optional[float]:
        """Rate in effect on ``when``; ``None`` before the first entry."""
        idx = bisect.bisect_right([d for d, _ in self.rates], when)
        if idx == 0:
            return None
        return self.rates[idx - 1][1]

    def rate_on_date_str(self, when: str) -> Optional[float]:
        d = _parse_date(when)
        return self.rate_on_date(d) if d is not None else None


@dataclass(frozen=True)
class PostalRates:
    letter: RateHistory
    ounce: RateHistory
    postcard: RateHistory

    def letter_2oz(self, when: date) -> Optional[float]:
        base = self.letter.rate_on_date(when)
        extra = self.ounce.rate_on_date(when)
        if base is None or extra is None:
            return None
        return base + extra

    def letter_3oz(self, when: date) -> Optional[float]:
        base = self.letter.rate_on_date(when)
        extra = self.ounce.rate_on_date(when)
        if base is None or extra is None:
            return None
        return base + extra * 2

    def postcard_rate(self, when: date) -> Optional[float]:
        return self.postcard.rate_on_date(when)

    def letter_2oz_str(self, when: str) -> Optional[float]:
        d = _parse_date(when)
        return self.letter_2oz(d) if d is not None else None

    def letter_3oz_str(self, when: str) -> Optional[float]:
        d = _parse_date(when)
        return self.letter_3oz(d) if d is not None else None

    def postcard_str(self, when: str) -> Optional[float]:
        d = _parse_date(when)
        return self.postcard_rate(d) if d is not None else None
