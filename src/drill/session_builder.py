"""Selection of practice cards and construction of shuffled session queues."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from src.drill.chapters import chapter_cards, windows_for, window_cards
from src.drill.errors import EmptySelection
from src.drill.models import Card, MasteryLevel
from src.drill.providers import Clock, Shuffler, fisher_yates_shuffle
from src.drill.session import ReviewSink, StudyInputMode, StudySession


LOGGER = logging.getLogger(__name__)

BROAD_REVIEW_WINDOW = 30
TARGETED_PRACTICE_WINDOW = 10
HARD_LEVELS = frozenset({MasteryLevel.NEW, MasteryLevel.LEARNING})


@dataclass(frozen=True, slots=True)
class SelectionCriteria:
    """Which part of a chapter to practice.

    ``window_size`` of ``None`` selects the whole chapter; otherwise the
    window at ``window_index`` is used. ``hard_only`` keeps only cards that
    are still new or being learned.
    """

    chapter: int
    window_size: Optional[int] = None
    window_index: int = 0
    hard_only: bool = False

    @property
    def is_windowed(self) -> bool:
        return self.window_size is not None

    @classmethod
    def whole_chapter(cls, chapter: int, *, hard_only: bool = False) -> "SelectionCriteria":
        return cls(chapter=chapter, hard_only=hard_only)

    @classmethod
    def broad_review(
        cls,
        chapter: int,
        window_index: int,
        *,
        hard_only: bool = False,
        window_size: int = BROAD_REVIEW_WINDOW,
    ) -> "SelectionCriteria":
        return cls(chapter=chapter, window_size=window_size, window_index=window_index, hard_only=hard_only)

    @classmethod
    def targeted_practice(
        cls,
        chapter: int,
        window_index: int,
        *,
        hard_only: bool = False,
        window_size: int = TARGETED_PRACTICE_WINDOW,
    ) -> "SelectionCriteria":
        return cls(chapter=chapter, window_size=window_size, window_index=window_index, hard_only=hard_only)


def is_hard(card: Card) -> bool:
    return card.mastery_level in HARD_LEVELS


def select_cards(cards: Iterable[Card], criteria: SelectionCriteria) -> List[Card]:
    """Return the ordered, unshuffled cards matching ``criteria``.

    Raises EmptySelection when nothing is left to practice.
    """
    selection = chapter_cards(cards, criteria.chapter)

    if criteria.window_size is not None:
        windows = windows_for(selection, criteria.window_size)
        if 0 <= criteria.window_index < len(windows):
            selection = window_cards(selection, windows[criteria.window_index])
        else:
            LOGGER.debug(
                "Window %s is out of range for chapter %s (%s windows).",
                criteria.window_index,
                criteria.chapter,
                len(windows),
            )
            selection = []

    if criteria.hard_only:
        before_filter = len(selection)
        selection = [card for card in selection if is_hard(card)]
        if not selection and before_filter:
            raise EmptySelection(criteria, filtered_by_difficulty=True)

    if not selection:
        raise EmptySelection(criteria)
    return selection


def build_queue(
    cards: Iterable[Card],
    criteria: SelectionCriteria,
    shuffler: Optional[Shuffler] = None,
) -> List[Card]:
    """Select cards for ``criteria`` and return them in shuffled order."""
    shuffle = shuffler or fisher_yates_shuffle
    return shuffle(select_cards(cards, criteria))


def start_session(
    cards: Iterable[Card],
    criteria: SelectionCriteria,
    *,
    review_sink: Optional[ReviewSink] = None,
    clock: Optional[Clock] = None,
    shuffler: Optional[Shuffler] = None,
    input_mode: StudyInputMode = StudyInputMode.FLASHCARD,
) -> StudySession:
    """Build a queue for ``criteria`` and open a study session over it."""
    queue = build_queue(cards, criteria, shuffler)
    LOGGER.info(
        "Starting %s session with %s cards from chapter %s (window=%s, hard_only=%s).",
        input_mode.value,
        len(queue),
        criteria.chapter,
        criteria.window_index if criteria.is_windowed else "all",
        criteria.hard_only,
    )
    return StudySession(
        queue,
        review_sink=review_sink,
        clock=clock,
        shuffler=shuffler,
        input_mode=input_mode,
    )
