# -*- coding: utf-8 -*-
"""On-disk layout.

- ``<data_dir>/<year>/<api_slug>/metadata.conl``: one stamp record each.
- ``<rates_dir>/<name>.conl``: one rate history per rate type.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .conl import ConlError
from .rates import PostalRates, RateHistory
from .records import dumps_metadata, loads_metadata
from .schema import StampMetadata
from .security import safe_raw_preview

logger = logging.getLogger(__name__)

METADATA_FILENAME = "metadata.conl"

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class StoreConfig:
    data_dir: Path = Path("data/stamps")
    rates_dir: Path = Path("enrichment/rates")

    @staticmethod
    def from_env() -> "StoreConfig":
        return StoreConfig(
            data_dir=Path(os.getenv("CONL_DATA_DIR", "data/stamps")),
            rates_dir=Path(os.getenv("CONL_RATES_DIR", "enrichment/rates")),
        )


def load_stamp(path: PathLike) -> StampMetadata:
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    try:
        return loads_metadata(text)
    except ConlError:
        logger.debug("Failed to decode %s: %s", path, safe_raw_preview(text))
        raise


def save_stamp(meta: StampMetadata, data_dir: Optional[PathLike] = None) -> Path:
    """Write ``meta`` to its conventional location and return the file path."""
    root = Path(data_dir) if data_dir is not None else StoreConfig.from_env().data_dir
    stamp_dir = root / str(meta.year) / meta.api_slug
    stamp_dir.mkdir(parents=True, exist_ok=True)
    path = stamp_dir / METADATA_FILENAME
    path.write_text(dumps_metadata(meta), encoding="utf-8")
    logger.debug("Wrote %s", path)
    return path


def load_all_stamps(data_dir: Optional[PathLike] = None) -> List[StampMetadata]:
    """Load every stamp under ``data_dir``; broken files are logged and skipped."""
    root = Path(data_dir) if data_dir is not None else StoreConfig.from_env().data_dir
    if not root.is_dir():
        logger.info("Stamp directory %s does not exist", root)
        return []

    stamps: List[StampMetadata] = []
    for year_dir in sorted(p for p in root.iterdir() if p.is_dir()):
        for stamp_dir in sorted(p for p in year_dir.iterdir() if p.is_dir()):
            path = stamp_dir / METADATA_FILENAME
            if not path.exists():
                continue
            try:
                stamps.append(load_stamp(path))
            except (ConlError, OSError, UnicodeDecodeError) as e:
                logger.warning("Failed to load %s: %s", path, e)
    logger.info("Loaded %d stamps from %s", len(stamps), root)
    return stamps


def load_rate_history(name: str, rates_dir: Optional[PathLike] = None) -> RateHistory:
    root = Path(rates_dir) if rates_dir is not None else StoreConfig.from_env().rates_dir
    path = root / f"{name.lower()}.conl"
    return RateHistory.from_text(name, path.read_text(encoding="utf-8"))


def load_postal_rates(rates_dir: Optional[PathLike] = None) -> PostalRates:
    return PostalRates(
        letter=load_rate_history("letter", rates_dir),
        ounce=load_rate_history("ounce", rates_dir),
        postcard=load_rate_history("postcard", rates_dir),
    )
