from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.drill.models import MasteryLevel, mastery_for

from . import Learner, VocabularyCard


@dataclass(slots=True)
class LearnerStatistics:
    """Aggregated progress metrics for a learner's vocabulary."""

    learner_id: str
    display_name: Optional[str]
    created_at: datetime
    cards_added: int
    cards_reviewed: int
    total_cards: int
    due_cards: int
    mastery: Dict[MasteryLevel, int] = field(default_factory=dict)

    @property
    def mastered_cards(self) -> int:
        return self.mastery.get(MasteryLevel.MASTERED, 0)


async def upsert_learner(
    session: AsyncSession,
    learner_id: str,
    display_name: Optional[str] = None,
) -> Learner:
    """Create the learner record or refresh its display name."""
    learner = await session.get(Learner, learner_id)

    if learner is None:
        now = datetime.now(timezone.utc)
        learner = Learner(
            id=learner_id,
            display_name=display_name,
            cards_added=0,
            cards_reviewed=0,
            created_at=now,
            updated_at=now,
        )
        session.add(learner)
        return learner

    if display_name is not None and learner.display_name != display_name:
        learner.display_name = display_name
        learner.updated_at = datetime.now(timezone.utc)
        await session.flush()

    return learner


async def increment_learner_statistics(
    session: AsyncSession,
    learner_id: str,
    *,
    added: int = 0,
    reviewed: int = 0,
) -> None:
    """Increment one or more learner counters."""
    values = {}
    if added:
        values["cards_added"] = Learner.cards_added + added
    if reviewed:
        values["cards_reviewed"] = Learner.cards_reviewed + reviewed

    if not values:
        return

    values["updated_at"] = datetime.now(timezone.utc)

    stmt = (
        update(Learner)
        .where(Learner.id == learner_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    await session.execute(stmt)


async def get_learner_statistics(
    session: AsyncSession,
    learner_id: str,
    now: Optional[datetime] = None,
) -> Optional[LearnerStatistics]:
    """Return counters plus a mastery breakdown, or None for unknown learners."""
    learner = await session.get(Learner, learner_id)
    if learner is None:
        return None
    if now is None:
        now = datetime.now(timezone.utc)

    result = await session.execute(
        select(VocabularyCard.repetition_count, VocabularyCard.next_due_at).where(
            VocabularyCard.learner_id == learner_id
        )
    )
    mastery = {level: 0 for level in MasteryLevel}
    total = 0
    due = 0
    for repetition_count, next_due_at in result.all():
        total += 1
        mastery[mastery_for(repetition_count)] += 1
        if next_due_at.tzinfo is None:
            next_due_at = next_due_at.replace(tzinfo=timezone.utc)
        if next_due_at <= now:
            due += 1

    return LearnerStatistics(
        learner_id=learner.id,
        display_name=learner.display_name,
        created_at=learner.created_at,
        cards_added=learner.cards_added,
        cards_reviewed=learner.cards_reviewed,
        total_cards=total,
        due_cards=due,
        mastery=mastery,
    )
