"""Clock and randomness providers injected into the study core."""

from __future__ import annotations

import random
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, TypeVar


T = TypeVar("T")

Clock = Callable[[], datetime]
Shuffler = Callable[[Sequence[T]], List[T]]


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def fixed_clock(moment: datetime) -> Clock:
    """Build a clock that always reports ``moment``."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return lambda: moment


def fisher_yates_shuffle(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Return a uniformly shuffled copy of ``items``.

    ``random.shuffle`` is a Fisher-Yates shuffle, so every permutation is
    equally likely. The input sequence is left untouched.
    """
    shuffled = list(items)
    (rng or random).shuffle(shuffled)
    return shuffled


def seeded_shuffler(seed: int) -> Shuffler:
    """Return a shuffler with a private RNG so repeated runs give the same order."""
    rng = random.Random(seed)

    def _shuffle(items: Sequence[T]) -> List[T]:
        return fisher_yates_shuffle(items, rng)

    return _shuffle
