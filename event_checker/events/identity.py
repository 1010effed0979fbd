"""Guest identity keys.

Two submissions belong to the same guest when their normalized name and
normalized phone match within one event.
"""

import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")
_NON_DIGIT_RE = re.compile(r"[^0-9]")


def normalize_name(raw: str | None) -> str:
    """Strip accents, trim, lowercase and collapse inner whitespace.

    >>> normalize_name("  João   Silva ")
    'joao silva'
    """
    decomposed = unicodedata.normalize("NFD", raw or "")
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _WHITESPACE_RE.sub(" ", without_marks.strip().lower())


def normalize_digits(raw: str | None) -> str:
    """Keep only the digits of a phone number."""
    return _NON_DIGIT_RE.sub("", raw or "")
