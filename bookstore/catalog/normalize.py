"""
Helpers turning raw form text into typed book fields.

Every function here is lenient: malformed input degrades to ``None``
(or an empty list) instead of raising, so a bad number never rejects
the whole request.
"""

from __future__ import annotations

import math
import re
from typing import List, Optional

MAX_KEYWORDS = 30
MIN_RATING = 0.0
MAX_RATING = 5.0

# ASCII and full-width commas/semicolons plus whitespace
_KEYWORD_SPLIT = re.compile(r"[,，;； \t\r\n]+")


def clean_text(raw: Optional[str]) -> Optional[str]:
    """Strip a free-text field, returning ``None`` when it is blank."""
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def parse_optional_number(raw: Optional[str]) -> Optional[float]:
    """Parse a decimal number from form text.

    Parameters
    ----------
    raw : Optional[str]
        The submitted value, possibly padded with whitespace.

    Returns
    -------
    Optional[float]
        The parsed value, or ``None`` when the field is missing, blank,
        not a number, or not finite.
    """
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def parse_price(raw: Optional[str]) -> Optional[float]:
    """Like ``parse_optional_number`` but negative prices count as missing."""
    value = parse_optional_number(raw)
    if value is None or value < 0:
        return None
    return value


def clamp_rating(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    if value < MIN_RATING:
        return MIN_RATING
    if value > MAX_RATING:
        return MAX_RATING
    return value


def tokenize_keywords(raw: Optional[str]) -> List[str]:
    """Split a keyword string on commas, semicolons and whitespace.

    Empty tokens are dropped and only the first ``MAX_KEYWORDS`` are kept,
    in their original order. Duplicates are preserved.
    """
    if raw is None:
        return []
    tokens = [t.strip() for t in _KEYWORD_SPLIT.split(raw)]
    return [t for t in tokens if t][:MAX_KEYWORDS]
