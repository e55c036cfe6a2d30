"""State machine that walks a learner through a queue of cards."""

from __future__ import annotations

import enum
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

from src.drill.answers import is_blank, is_match
from src.drill.errors import EmptyAnswer, NoIncorrectResults, SessionNotActive
from src.drill.models import Card, ResultEntry, ReviewState, SessionSummary
from src.drill.providers import Clock, Shuffler, fisher_yates_shuffle, utc_now
from src.drill.srs import is_passing, next_state, validate_quality


LOGGER = logging.getLogger(__name__)

KNOWN_QUALITY = 4
UNKNOWN_QUALITY = 1


class ReviewSink(Protocol):
    """Receives review states computed during a session."""

    def replace_review_state(self, card_id: str, state: ReviewState, *, quality: int) -> None:
        ...


class SessionState(str, enum.Enum):
    ACTIVE = "active"
    COMPLETE = "complete"


class StudyInputMode(str, enum.Enum):
    FLASHCARD = "flashcard"
    TYPING = "typing"
    VOICE = "voice"


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Read-only view of a session for the presentation layer."""

    state: SessionState
    input_mode: StudyInputMode
    cursor: int
    total: int
    card_ids: Tuple[str, ...]
    current_card: Optional[Card]
    results: Tuple[ResultEntry, ...]


class StudySession:
    """One pass over a shuffled queue of cards.

    The session is either active, with a cursor on the card being shown, or
    complete. Each grade is logged, scheduled and forwarded to the review
    sink; queued cards themselves are never modified. Once complete, the
    incorrectly answered cards can be practised again in a fresh queue.
    """

    def __init__(
        self,
        queue: Sequence[Card],
        *,
        review_sink: Optional[ReviewSink] = None,
        clock: Optional[Clock] = None,
        shuffler: Optional[Shuffler] = None,
        input_mode: StudyInputMode = StudyInputMode.FLASHCARD,
    ) -> None:
        if not queue:
            raise ValueError("A study session needs at least one card.")
        self._review_sink = review_sink
        self._clock = clock or utc_now
        self._shuffler = shuffler or fisher_yates_shuffle
        self._input_mode = input_mode
        self._lock = threading.Lock()
        self._latest_states: Dict[str, ReviewState] = {}
        self._reset(list(queue))

    def _reset(self, queue: List[Card]) -> None:
        self._queue: List[Card] = queue
        self._cursor = 0
        self._results: List[ResultEntry] = []
        self._state = SessionState.ACTIVE
        self._started_at: datetime = self._clock()
        self._completed_at: Optional[datetime] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def input_mode(self) -> StudyInputMode:
        return self._input_mode

    @property
    def is_complete(self) -> bool:
        return self._state is SessionState.COMPLETE

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def queue(self) -> Tuple[Card, ...]:
        return tuple(self._queue)

    @property
    def results(self) -> Tuple[ResultEntry, ...]:
        return tuple(self._results)

    @property
    def current_card(self) -> Optional[Card]:
        if self.is_complete:
            return None
        return self._queue[self._cursor]

    @property
    def can_retry(self) -> bool:
        return self.is_complete and any(not entry.was_correct for entry in self._results)

    def submit_grade(self, quality: int) -> ReviewState:
        """Grade the current card and move on; returns the card's new review state."""
        quality = validate_quality(quality)
        with self._lock:
            if self._state is not SessionState.ACTIVE:
                raise SessionNotActive("Cannot grade a card in a completed session.")
            return self._grade_locked(self._queue[self._cursor], quality)

    def _grade_locked(self, card: Card, quality: int) -> ReviewState:
        # Caller holds self._lock and has checked the session is active.
        was_correct = is_passing(quality)
        self._results.append(ResultEntry(card.id, was_correct))

        current = self._latest_states.get(card.id, card.review)
        updated = next_state(current, quality, now=self._clock())
        self._latest_states[card.id] = updated
        if self._review_sink is not None:
            self._review_sink.replace_review_state(card.id, updated, quality=quality)

        LOGGER.debug(
            "Card %s graded %s (%s/%s), next due in %s days.",
            card.id,
            quality,
            self._cursor + 1,
            len(self._queue),
            updated.interval_days,
        )

        if self._cursor >= len(self._queue) - 1:
            self._state = SessionState.COMPLETE
            self._completed_at = self._clock()
            LOGGER.info(
                "Session complete: %s of %s correct.",
                sum(1 for entry in self._results if entry.was_correct),
                len(self._results),
            )
        else:
            self._cursor += 1
        return updated

    def submit_answer(self, text: str) -> bool:
        """Check a typed or spoken answer against the current card and grade it."""
        if is_blank(text):
            raise EmptyAnswer("An answer is required before it can be checked.")
        with self._lock:
            if self._state is not SessionState.ACTIVE:
                raise SessionNotActive("Cannot answer a card in a completed session.")
            card = self._queue[self._cursor]
            correct = is_match(text, card.back)
            self._grade_locked(card, KNOWN_QUALITY if correct else UNKNOWN_QUALITY)
        return correct

    def retry_incorrect(self) -> "StudySession":
        """Restart the session with only the cards answered incorrectly."""
        with self._lock:
            if self._state is not SessionState.COMPLETE:
                raise SessionNotActive("Retry is only available once the session is complete.")

            by_id = {card.id: card for card in self._queue}
            retry: List[Card] = []
            seen: set[str] = set()
            for entry in self._results:
                if entry.was_correct or entry.card_id in seen:
                    continue
                seen.add(entry.card_id)
                retry.append(by_id[entry.card_id])

            if not retry:
                raise NoIncorrectResults("Every card in this session was answered correctly.")

            LOGGER.info("Retrying %s incorrectly answered cards.", len(retry))
            self._reset(self._shuffler(retry))
        return self

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                state=self._state,
                input_mode=self._input_mode,
                cursor=self._cursor,
                total=len(self._queue),
                card_ids=tuple(card.id for card in self._queue),
                current_card=self.current_card,
                results=tuple(self._results),
            )

    def summary(self) -> SessionSummary:
        """Summarize the results logged so far."""
        with self._lock:
            total = len(self._results)
            correct = sum(1 for entry in self._results if entry.was_correct)
            finished_at = self._completed_at or self._clock()
            duration = max(0, int((finished_at - self._started_at).total_seconds()))
            percentage = int(correct * 100 / total + 0.5) if total else 0
            incorrect_ids = tuple(entry.card_id for entry in self._results if not entry.was_correct)
            return SessionSummary(
                correct=correct,
                incorrect=total - correct,
                total=total,
                percentage=percentage,
                duration_seconds=duration,
                completed_at=self._completed_at,
                incorrect_card_ids=incorrect_ids,
            )
