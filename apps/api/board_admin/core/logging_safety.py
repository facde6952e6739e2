"""Utilities for safe structured logging fields."""

from __future__ import annotations

import hashlib
from typing import Any


def safe_log_identifier(value: Any, *, prefix: str) -> str:
    """Return a deterministic non-reversible token for log correlation fields."""
    text = str(value or "").strip()
    if not text:
        return f"{prefix}-missing"

    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:12]
    return f"{prefix}-{digest}"


def describe_payload_keys(payload: Any) -> str:
    """Summarize a request payload by its top-level keys only."""
    if not isinstance(payload, dict):
        return type(payload).__name__
    return ",".join(sorted(str(key) for key in payload)) or "-"
