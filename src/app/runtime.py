"""Bootstrap logic for wiring the study workflow."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.app.settings import AppSettings
from src.db import get_session_factory, run_migrations_if_needed
from src.drill.providers import seeded_shuffler
from src.drill.workflow import StudyWorkflow


LOGGER = logging.getLogger(__name__)


def _configure_logging(log_level: str) -> None:
    """Set up project-wide logging configuration."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=log_level,
    )


def build_workflow(
    settings: AppSettings,
    session_factory: async_sessionmaker[AsyncSession],
) -> StudyWorkflow:
    """Create a study workflow configured from ``settings``."""
    shuffler = seeded_shuffler(settings.shuffle_seed) if settings.shuffle_seed is not None else None
    return StudyWorkflow(
        session_factory,
        shuffler=shuffler,
        broad_review_window=settings.broad_review_window,
        targeted_practice_window=settings.targeted_practice_window,
        starter_vocabulary_path=settings.starter_vocabulary_path,
    )


def bootstrap(
    settings: AppSettings,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> StudyWorkflow:
    """Configure logging, bring the schema up to date and return the workflow."""
    _configure_logging(settings.log_level)

    if session_factory is None:
        try:
            run_migrations_if_needed()
        except Exception:
            LOGGER.exception("Database migrations failed. Aborting startup.")
            raise
        session_factory = get_session_factory()

    workflow = build_workflow(settings, session_factory)
    LOGGER.info("%s is ready in %s mode.", settings.app_name, settings.app_env)
    return workflow
