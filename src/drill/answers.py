"""Comparison of typed or spoken answers with the expected translation."""

from __future__ import annotations


_STRIPPED_PUNCTUATION = ".,/#!$%^&*;:{}=-_`~()"
_PUNCTUATION_TABLE = str.maketrans("", "", _STRIPPED_PUNCTUATION)


def normalize_answer(text: str) -> str:
    """Lowercase, trim and drop punctuation; inner whitespace is kept as typed."""
    return text.lower().translate(_PUNCTUATION_TABLE).strip()


def is_blank(text: str | None) -> bool:
    return not text or not text.strip()


def is_match(user_text: str, expected_text: str) -> bool:
    """Return True when both answers are equal after normalization.

    Articles and word order are significant: ``"de mensa"`` does not match
    ``"mensa"``.
    """
    return normalize_answer(user_text) == normalize_answer(expected_text)
