"""Core data model for vocabulary cards and their review state."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional


DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
EXTRA_CHAPTER = 8


class MasteryLevel(enum.IntEnum):
    """Coarse progress bucket shown to learners."""

    NEW = 0
    LEARNING = 1
    REVIEWING = 2
    MASTERED = 3


class PartOfSpeech(str, enum.Enum):
    """Word class as recorded on a card."""

    NOUN = "noun"
    VERB = "verb"
    ADJECTIVE = "adjective"
    ADVERB = "adverb"
    PREPOSITION = "preposition"
    CONJUNCTION = "conjunction"
    PRONOUN = "pronoun"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Optional[str]) -> "PartOfSpeech":
        """Map free-form labels onto a known part of speech, defaulting to OTHER."""
        if not value:
            return cls.OTHER
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.OTHER


def mastery_for(repetition_count: int) -> MasteryLevel:
    """Classify a streak of successful reviews into a mastery level."""
    if repetition_count <= 0:
        return MasteryLevel.NEW
    if repetition_count < 3:
        return MasteryLevel.LEARNING
    if repetition_count < 5:
        return MasteryLevel.REVIEWING
    return MasteryLevel.MASTERED


@dataclass(frozen=True, slots=True)
class ReviewState:
    """Spaced-repetition state of a single card."""

    ease_factor: float
    interval_days: int
    repetition_count: int
    next_due_at: datetime

    @property
    def mastery_level(self) -> MasteryLevel:
        return mastery_for(self.repetition_count)

    @classmethod
    def fresh(cls, now: Optional[datetime] = None) -> "ReviewState":
        """Return the state of a card that has never been reviewed."""
        if now is None:
            now = datetime.now(timezone.utc)
        return cls(
            ease_factor=DEFAULT_EASE_FACTOR,
            interval_days=0,
            repetition_count=0,
            next_due_at=now,
        )


@dataclass(frozen=True, slots=True)
class Card:
    """A vocabulary entry together with its current review state."""

    id: str
    front: str
    back: str
    part_of_speech: PartOfSpeech
    chapter_number: int
    review: ReviewState
    grammatical_gender: Optional[str] = None
    grammar_note: Optional[str] = None

    @property
    def mastery_level(self) -> MasteryLevel:
        return self.review.mastery_level

    def with_review(self, state: ReviewState) -> "Card":
        """Return a copy of the card carrying ``state``."""
        return replace(self, review=state)

    @classmethod
    def new(
        cls,
        card_id: str,
        front: str,
        back: str,
        *,
        part_of_speech: PartOfSpeech | str = PartOfSpeech.OTHER,
        chapter_number: int = EXTRA_CHAPTER,
        grammatical_gender: Optional[str] = None,
        grammar_note: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "Card":
        """Create a card that is due immediately."""
        if not isinstance(part_of_speech, PartOfSpeech):
            part_of_speech = PartOfSpeech.parse(part_of_speech)
        return cls(
            id=card_id,
            front=front.strip(),
            back=back.strip(),
            part_of_speech=part_of_speech,
            chapter_number=chapter_number,
            review=ReviewState.fresh(now),
            grammatical_gender=grammatical_gender or None,
            grammar_note=grammar_note or None,
        )


@dataclass(frozen=True, slots=True)
class ChapterWindow:
    """Half-open slice ``[start_offset, end_offset)`` of a chapter's ordered cards."""

    start_offset: int
    end_offset: int
    label: str

    @property
    def size(self) -> int:
        return self.end_offset - self.start_offset


@dataclass(frozen=True, slots=True)
class ResultEntry:
    """Outcome of one card presentation within a session."""

    card_id: str
    was_correct: bool


@dataclass(frozen=True, slots=True)
class SessionSummary:
    """Aggregated outcome of a finished study session."""

    correct: int
    incorrect: int
    total: int
    percentage: int
    duration_seconds: int
    completed_at: Optional[datetime] = None
    incorrect_card_ids: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_errors(self) -> bool:
        return self.incorrect > 0
