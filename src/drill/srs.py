"""Spaced-repetition scheduling helpers for vocabulary reviews."""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from src.drill.errors import InvalidGrade
from src.drill.models import MIN_EASE_FACTOR, Card, MasteryLevel, ReviewState, mastery_for


PASSING_QUALITY = 3
MAX_QUALITY = 5
FIRST_INTERVAL_DAYS = 1
SECOND_INTERVAL_DAYS = 6


def validate_quality(quality: object) -> int:
    """Return ``quality`` when it is a grade on the 0-5 scale, else raise InvalidGrade."""
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise InvalidGrade(quality)
    if quality < 0 or quality > MAX_QUALITY:
        raise InvalidGrade(quality)
    return quality


def is_passing(quality: int) -> bool:
    return quality >= PASSING_QUALITY


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def adjust_ease_factor(ease_factor: float, quality: int) -> float:
    """Apply the SM-2 ease update, never dropping below the minimum."""
    penalty = MAX_QUALITY - quality
    adjusted = ease_factor + 0.1 - penalty * (0.08 + penalty * 0.02)
    return max(MIN_EASE_FACTOR, adjusted)


def next_state(
    current: ReviewState,
    quality: int,
    now: Optional[datetime] = None,
) -> ReviewState:
    """Return the review state that follows ``current`` after a grade of ``quality``.

    The input is never modified. Passing grades grow the interval 1, 6, then
    by the ease factor; lapses restart the streak with a one day interval.
    The ease factor is updated on every grade.
    """
    quality = validate_quality(quality)
    if now is None:
        now = datetime.now(timezone.utc)

    repetition = current.repetition_count
    interval = max(0, current.interval_days)

    if is_passing(quality):
        if repetition == 0:
            interval = FIRST_INTERVAL_DAYS
        elif repetition == 1:
            interval = SECOND_INTERVAL_DAYS
        else:
            interval = _round_half_up(interval * current.ease_factor)
        repetition += 1
    else:
        repetition = 0
        interval = FIRST_INTERVAL_DAYS

    return ReviewState(
        ease_factor=adjust_ease_factor(current.ease_factor, quality),
        interval_days=interval,
        repetition_count=repetition,
        next_due_at=now + timedelta(days=interval),
    )


def due_cards(cards: Iterable[Card], now: Optional[datetime] = None) -> List[Card]:
    """Return cards whose review is due, longest overdue first."""
    if now is None:
        now = datetime.now(timezone.utc)
    due = [card for card in cards if card.review.next_due_at <= now]
    # sorted() is stable, so equal timestamps keep their input order.
    return sorted(due, key=lambda card: card.review.next_due_at)


def mastery_breakdown(cards: Iterable[Card]) -> dict[MasteryLevel, int]:
    """Count cards per mastery level, including empty levels."""
    counts = {level: 0 for level in MasteryLevel}
    for card in cards:
        counts[mastery_for(card.review.repetition_count)] += 1
    return counts
