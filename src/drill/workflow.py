"""Coordinates the study core with the persistent vocabulary store."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.db.learners import increment_learner_statistics, upsert_learner
from src.db.vocabulary import add_cards, load_cards, record_review, reset_progress
from src.drill.chapters import build_windows
from src.drill.models import Card, ChapterWindow
from src.drill.providers import Clock, Shuffler, utc_now
from src.drill.session import StudyInputMode, StudySession
from src.drill.session_builder import (
    BROAD_REVIEW_WINDOW,
    TARGETED_PRACTICE_WINDOW,
    SelectionCriteria,
    start_session,
)
from src.drill.starter import load_starter_vocabulary
from src.drill.vocabulary import Vocabulary


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class SaveResult:
    """Outcome of writing pending reviews back to the store."""

    saved: int
    missing: List[str]


class StudyWorkflow:
    """Loads a learner's vocabulary, opens sessions over it and saves progress."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        clock: Optional[Clock] = None,
        shuffler: Optional[Shuffler] = None,
        broad_review_window: int = BROAD_REVIEW_WINDOW,
        targeted_practice_window: int = TARGETED_PRACTICE_WINDOW,
        starter_vocabulary_path: Optional[Path] = None,
        seed_new_learners: bool = True,
    ) -> None:
        self._session_factory = session_factory
        self._clock = clock or utc_now
        self._shuffler = shuffler
        self._broad_review_window = broad_review_window
        self._targeted_practice_window = targeted_practice_window
        self._starter_vocabulary_path = starter_vocabulary_path
        self._seed_new_learners = seed_new_learners

    async def load_vocabulary(self, learner_id: str, display_name: Optional[str] = None) -> Vocabulary:
        """Return the learner's vocabulary, seeding it with starter cards on first use."""
        async with self._session_factory() as session:
            async with session.begin():
                await upsert_learner(session, learner_id, display_name)
                cards = await load_cards(session, learner_id)
                if not cards and self._seed_new_learners:
                    starter = load_starter_vocabulary(self._starter_vocabulary_path, now=self._clock())
                    added, _ = await add_cards(session, learner_id, starter)
                    if added:
                        await increment_learner_statistics(session, learner_id, added=added)
                    LOGGER.info("Seeded learner %s with %s starter cards.", learner_id, added)
                    cards = await load_cards(session, learner_id)

        return Vocabulary(cards, clock=self._clock)

    def broad_review_windows(self, vocabulary: Vocabulary, chapter: int) -> List[ChapterWindow]:
        return build_windows(vocabulary, chapter, self._broad_review_window)

    def targeted_practice_windows(self, vocabulary: Vocabulary, chapter: int) -> List[ChapterWindow]:
        return build_windows(vocabulary, chapter, self._targeted_practice_window)

    def broad_review(self, chapter: int, window_index: Optional[int] = None, *, hard_only: bool = False) -> SelectionCriteria:
        """Criteria for the review mode: a whole chapter or one of its larger windows."""
        if window_index is None:
            return SelectionCriteria.whole_chapter(chapter, hard_only=hard_only)
        return SelectionCriteria.broad_review(
            chapter, window_index, hard_only=hard_only, window_size=self._broad_review_window
        )

    def targeted_practice(self, chapter: int, window_index: int) -> SelectionCriteria:
        return SelectionCriteria.targeted_practice(
            chapter, window_index, window_size=self._targeted_practice_window
        )

    def start_session(
        self,
        vocabulary: Vocabulary,
        criteria: SelectionCriteria,
        input_mode: StudyInputMode = StudyInputMode.FLASHCARD,
    ) -> StudySession:
        """Open a session whose grades flow back into ``vocabulary``."""
        return start_session(
            vocabulary,
            criteria,
            review_sink=vocabulary,
            clock=self._clock,
            shuffler=self._shuffler,
            input_mode=input_mode,
        )

    async def save_progress(self, learner_id: str, vocabulary: Vocabulary) -> SaveResult:
        """Persist review updates collected by ``vocabulary`` since the last save."""
        pending = vocabulary.drain_pending()
        if not pending:
            return SaveResult(saved=0, missing=[])

        saved = 0
        missing: List[str] = []
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    for review in pending:
                        stored = await record_review(
                            session,
                            learner_id,
                            review.card_id,
                            review.state,
                            review.quality,
                            now=review.reviewed_at,
                        )
                        if stored:
                            saved += 1
                        else:
                            missing.append(review.card_id)
                    await increment_learner_statistics(session, learner_id, reviewed=saved)
        except Exception:
            LOGGER.exception("Failed to save %s reviews for learner %s.", len(pending), learner_id)
            vocabulary.restore_pending(pending)
            raise

        LOGGER.info("Saved %s reviews for learner %s.", saved, learner_id)
        return SaveResult(saved=saved, missing=missing)

    async def add_card(self, learner_id: str, vocabulary: Vocabulary, card: Card) -> bool:
        """Store a new card and add it to the loaded vocabulary; False when the id exists."""
        if card.id in vocabulary:
            return False

        async with self._session_factory() as session:
            async with session.begin():
                await upsert_learner(session, learner_id)
                added, _ = await add_cards(session, learner_id, [card])
                if added:
                    await increment_learner_statistics(session, learner_id, added=added)

        if not added:
            LOGGER.warning("Card %s already stored for learner %s.", card.id, learner_id)
            return False
        vocabulary.add(card)
        return True

    async def reset_progress(self, learner_id: str) -> Vocabulary:
        """Forget all review progress and return the reloaded vocabulary."""
        async with self._session_factory() as session:
            async with session.begin():
                count = await reset_progress(session, learner_id, now=self._clock())
        LOGGER.info("Reset progress of %s cards for learner %s.", count, learner_id)
        return await self.load_vocabulary(learner_id)
