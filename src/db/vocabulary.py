"""Helpers for persisting learner vocabulary and review outcomes."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.drill.models import Card, PartOfSpeech, ReviewState
from src.drill.srs import is_passing

from . import CardReview, VocabularyCard


LOGGER = logging.getLogger(__name__)


def _ensure_aware(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def to_card(record: VocabularyCard) -> Card:
    """Convert a stored row into an immutable core card."""
    return Card(
        id=record.card_id,
        front=record.front,
        back=record.back,
        part_of_speech=PartOfSpeech.parse(record.part_of_speech),
        chapter_number=record.chapter_number,
        review=ReviewState(
            ease_factor=record.ease_factor,
            interval_days=record.interval_days,
            repetition_count=record.repetition_count,
            next_due_at=_ensure_aware(record.next_due_at),
        ),
        grammatical_gender=record.grammatical_gender,
        grammar_note=record.grammar_note,
    )


def _apply_state(record: VocabularyCard, state: ReviewState) -> None:
    record.ease_factor = state.ease_factor
    record.interval_days = state.interval_days
    record.repetition_count = state.repetition_count
    record.next_due_at = state.next_due_at


async def _get_record(session: AsyncSession, learner_id: str, card_id: str) -> Optional[VocabularyCard]:
    stmt = select(VocabularyCard).where(
        VocabularyCard.learner_id == learner_id,
        VocabularyCard.card_id == card_id,
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def add_cards(
    session: AsyncSession,
    learner_id: str,
    cards: Sequence[Card],
) -> tuple[int, int]:
    """Attach cards to a learner, skipping ids the learner already has.

    Returns ``(added, already_present)``.
    """
    result = await session.execute(
        select(VocabularyCard.card_id).where(VocabularyCard.learner_id == learner_id)
    )
    existing = set(result.scalars().all())

    added = 0
    for card in cards:
        if card.id in existing:
            continue
        record = VocabularyCard(
            learner_id=learner_id,
            card_id=card.id,
            front=card.front,
            back=card.back,
            part_of_speech=card.part_of_speech.value,
            chapter_number=card.chapter_number,
            grammatical_gender=card.grammatical_gender,
            grammar_note=card.grammar_note,
        )
        _apply_state(record, card.review)
        session.add(record)
        existing.add(card.id)
        added += 1

    if added:
        await session.flush()
    return added, len(cards) - added


async def load_cards(session: AsyncSession, learner_id: str) -> List[Card]:
    """Return every card of a learner in insertion order."""
    stmt = (
        select(VocabularyCard)
        .where(VocabularyCard.learner_id == learner_id)
        .order_by(VocabularyCard.id)
    )
    result = await session.execute(stmt)
    return [to_card(record) for record in result.scalars()]


async def load_due_cards(
    session: AsyncSession,
    learner_id: str,
    now: Optional[datetime] = None,
) -> List[Card]:
    """Return the learner's due cards, longest overdue first."""
    if now is None:
        now = datetime.now(timezone.utc)

    stmt = (
        select(VocabularyCard)
        .where(VocabularyCard.learner_id == learner_id, VocabularyCard.next_due_at <= now)
        .order_by(VocabularyCard.next_due_at, VocabularyCard.id)
    )
    result = await session.execute(stmt)
    return [to_card(record) for record in result.scalars()]


async def record_review(
    session: AsyncSession,
    learner_id: str,
    card_id: str,
    state: ReviewState,
    quality: int,
    now: Optional[datetime] = None,
) -> bool:
    """Replace a card's review state and append the grade to its history.

    Returns False when the learner has no card with ``card_id``.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    record = await _get_record(session, learner_id, card_id)
    if record is None:
        LOGGER.warning("Ignoring review for unknown card %s of learner %s.", card_id, learner_id)
        return False

    _apply_state(record, state)
    record.updated_at = now
    session.add(
        CardReview(
            vocabulary_card_id=record.id,
            quality=quality,
            was_correct=is_passing(quality),
            reviewed_at=now,
        )
    )
    await session.flush()
    return True


async def reset_progress(
    session: AsyncSession,
    learner_id: str,
    now: Optional[datetime] = None,
) -> int:
    """Return every card of a learner to the never-reviewed state and drop its history."""
    if now is None:
        now = datetime.now(timezone.utc)

    result = await session.execute(
        select(VocabularyCard).where(VocabularyCard.learner_id == learner_id)
    )
    records = list(result.scalars())
    if not records:
        return 0

    fresh = ReviewState.fresh(now)
    for record in records:
        _apply_state(record, fresh)
        record.updated_at = now

    await session.execute(
        delete(CardReview).where(
            CardReview.vocabulary_card_id.in_([record.id for record in records])
        )
    )
    await session.flush()
    return len(records)
