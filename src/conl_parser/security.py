# -*- coding: utf-8 -*-
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RawLogPolicy:
    """Controls how much of a CONL document the store and output parser may log.

    Stamp files and model replies are redacted to their length unless
    ``CONL_LOG_RAW=true``, in which case the first ``preview_chars`` characters
    are logged on one line.
    """
    enabled: bool
    preview_chars: int = 200

    @staticmethod
    def from_env() -> "RawLogPolicy":
        enabled = os.getenv("CONL_LOG_RAW", "false").lower() == "true"
        try:
            preview_chars = int(os.getenv("CONL_LOG_PREVIEW_CHARS", "200"))
        except ValueError:
            preview_chars = 200
        return RawLogPolicy(enabled=enabled, preview_chars=max(0, preview_chars))


def safe_raw_preview(text: str, policy: Optional[RawLogPolicy] = None) -> str:
    """Preview of ``text`` suitable for a log message under ``policy``."""
    if policy is None:
        policy = RawLogPolicy.from_env()
    if not policy.enabled:
        return f"<{len(text or '')} chars redacted>"
    preview = (text or "")[: policy.preview_chars]
    return preview.replace("\n", "\\n")
