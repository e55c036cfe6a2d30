"""Deterministic ordering of chapter vocabulary and fixed-size windows over it."""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from src.drill.models import Card, ChapterWindow


LOGGER = logging.getLogger(__name__)

_SEPARATED_NUMBER_RE = re.compile(r"[-_./:#](\d+)")
_TRAILING_NUMBER_RE = re.compile(r"(\d+)$")


def extract_number(card_id: str) -> Optional[int]:
    """Return the display number embedded in a card id.

    A digit run right after a separator wins (``c1-007`` gives 7); otherwise
    trailing digits are used. Ids without either yield ``None``.
    """
    separated = _SEPARATED_NUMBER_RE.findall(card_id)
    if separated:
        return int(separated[-1])
    match = _TRAILING_NUMBER_RE.search(card_id)
    if match:
        return int(match.group(1))
    return None


def order_key(card: Card) -> Tuple[int, int, int, str]:
    """Global sort key: chapter, numeric id suffix, then the raw id."""
    number = extract_number(card.id)
    if number is None:
        return (card.chapter_number, 1, 0, card.id)
    return (card.chapter_number, 0, number, card.id)


def available_chapters(cards: Iterable[Card]) -> List[int]:
    return sorted({card.chapter_number for card in cards})


def chapter_cards(cards: Iterable[Card], chapter: int) -> List[Card]:
    """Return the cards of ``chapter`` in their stable global order."""
    return sorted((card for card in cards if card.chapter_number == chapter), key=order_key)


def _window_label(chunk: Sequence[Card], start: int, end: int) -> str:
    first = extract_number(chunk[0].id)
    last = extract_number(chunk[-1].id)
    if first is None or last is None:
        return f"{start + 1}-{end}"
    return f"{first}-{last}"


def windows_for(ordered: Sequence[Card], window_size: int) -> List[ChapterWindow]:
    """Slice an already ordered card list into consecutive labelled windows."""
    if window_size < 1:
        raise ValueError("window_size must be a positive integer.")

    windows: List[ChapterWindow] = []
    for start in range(0, len(ordered), window_size):
        chunk = ordered[start : start + window_size]
        end = start + len(chunk)
        windows.append(ChapterWindow(start, end, _window_label(chunk, start, end)))
    return windows


def build_windows(cards: Iterable[Card], chapter: int, window_size: int) -> List[ChapterWindow]:
    """Partition a chapter into windows of ``window_size`` cards.

    The last window may be shorter. A chapter without cards produces an
    empty list, which callers treat as nothing to study.
    """
    ordered = chapter_cards(cards, chapter)
    windows = windows_for(ordered, window_size)
    LOGGER.debug(
        "Chapter %s split into %s windows of up to %s cards.",
        chapter,
        len(windows),
        window_size,
    )
    return windows


def window_cards(ordered: Sequence[Card], window: ChapterWindow) -> List[Card]:
    return list(ordered[window.start_offset : window.end_offset])
