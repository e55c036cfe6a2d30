"""In-memory authoritative vocabulary for one learner."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Iterator, List, Optional

from src.drill.models import Card, MasteryLevel, ReviewState
from src.drill.providers import Clock, utc_now
from src.drill.srs import due_cards, mastery_breakdown


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PendingReview:
    """A review state change that has not been written to the store yet."""

    card_id: str
    state: ReviewState
    quality: int
    reviewed_at: datetime


class Vocabulary:
    """Ordered card collection that absorbs review updates from study sessions."""

    def __init__(self, cards: Iterable[Card] = (), *, clock: Optional[Clock] = None) -> None:
        self._clock = clock or utc_now
        self._cards: Dict[str, Card] = {}
        for card in cards:
            self._cards[card.id] = card
        self._pending: List[PendingReview] = []

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(list(self._cards.values()))

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._cards

    @property
    def cards(self) -> List[Card]:
        return list(self._cards.values())

    @property
    def pending_reviews(self) -> List[PendingReview]:
        return list(self._pending)

    def get(self, card_id: str) -> Optional[Card]:
        return self._cards.get(card_id)

    def add(self, card: Card) -> None:
        """Insert a new card ahead of the existing ones."""
        if card.id in self._cards:
            raise ValueError(f"Card {card.id!r} already exists.")
        self._cards = {card.id: card, **self._cards}
        LOGGER.debug("Added card %s to chapter %s.", card.id, card.chapter_number)

    def replace_review_state(
        self,
        card_id: str,
        state: ReviewState,
        *,
        quality: int,
        reviewed_at: Optional[datetime] = None,
    ) -> None:
        card = self._cards.get(card_id)
        if card is None:
            raise KeyError(card_id)
        self._cards[card_id] = card.with_review(state)
        self._pending.append(
            PendingReview(
                card_id=card_id,
                state=state,
                quality=quality,
                reviewed_at=reviewed_at or self._clock(),
            )
        )

    def drain_pending(self) -> List[PendingReview]:
        """Return and forget the review updates collected so far."""
        pending, self._pending = self._pending, []
        return pending

    def restore_pending(self, reviews: Iterable[PendingReview]) -> None:
        """Put back reviews that could not be saved, ahead of newer ones."""
        self._pending = [*reviews, *self._pending]

    def search(self, term: str) -> List[Card]:
        """Case-insensitive substring search over both sides of every card."""
        needle = term.strip().lower()
        if not needle:
            return self.cards
        return [
            card
            for card in self._cards.values()
            if needle in card.front.lower() or needle in card.back.lower()
        ]

    def due(self, now: Optional[datetime] = None) -> List[Card]:
        return due_cards(self._cards.values(), now or self._clock())

    def mastery_breakdown(self) -> Dict[MasteryLevel, int]:
        return mastery_breakdown(self._cards.values())
