from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from src.drill.models import EXTRA_CHAPTER, Card, MasteryLevel, PartOfSpeech, ReviewState
from src.drill.providers import fixed_clock
from src.drill.session import StudySession
from src.drill.starter import load_starter_vocabulary
from src.drill.vocabulary import Vocabulary


NOW = datetime(2026, 10, 18, 8, 30, tzinfo=timezone.utc)


def _card(card_id: str, front: str = "front", back: str = "back", due_in_days: int = 0) -> Card:
    card = Card.new(card_id, front, back, chapter_number=1, now=NOW)
    return card.with_review(ReviewState(2.5, 0, 0, NOW + timedelta(days=due_in_days)))


def test_session_grades_flow_into_vocabulary() -> None:
    vocabulary = Vocabulary([_card("c1-001"), _card("c1-002")], clock=fixed_clock(NOW))
    session = StudySession(vocabulary.cards, review_sink=vocabulary, clock=fixed_clock(NOW), shuffler=list)

    session.submit_grade(5)
    session.submit_grade(1)

    assert vocabulary.get("c1-001").review.repetition_count == 1
    assert vocabulary.get("c1-001").mastery_level is MasteryLevel.LEARNING
    assert vocabulary.get("c1-002").review.interval_days == 1
    pending = vocabulary.drain_pending()
    assert [(review.card_id, review.quality) for review in pending] == [("c1-001", 5), ("c1-002", 1)]
    assert all(review.reviewed_at == NOW for review in pending)
    assert vocabulary.drain_pending() == []


def test_unknown_card_update_raises() -> None:
    vocabulary = Vocabulary([_card("c1-001")])

    with pytest.raises(KeyError):
        vocabulary.replace_review_state("missing", ReviewState.fresh(NOW), quality=4)


def test_added_cards_are_listed_first_and_due() -> None:
    vocabulary = Vocabulary([_card("c1-001")], clock=fixed_clock(NOW))
    extra = Card.new("1760776200000", "rosa", "de roos", part_of_speech="Noun", now=NOW)

    vocabulary.add(extra)

    assert [card.id for card in vocabulary] == ["1760776200000", "c1-001"]
    assert extra.chapter_number == EXTRA_CHAPTER
    assert extra.part_of_speech is PartOfSpeech.NOUN
    assert [card.id for card in vocabulary.due()] == ["1760776200000", "c1-001"]
    with pytest.raises(ValueError):
        vocabulary.add(extra)


def test_search_matches_either_side_case_insensitively() -> None:
    vocabulary = Vocabulary(
        [
            _card("c1-001", "agricola", "de boer"),
            _card("c1-002", "puella", "het meisje"),
            _card("c1-003", "aqua", "het water"),
        ]
    )

    assert [card.id for card in vocabulary.search("AGRI")] == ["c1-001"]
    assert [card.id for card in vocabulary.search("het")] == ["c1-002", "c1-003"]
    assert len(vocabulary.search("  ")) == 3


def test_due_excludes_future_cards() -> None:
    vocabulary = Vocabulary([_card("c1-001", due_in_days=2), _card("c1-002", due_in_days=-1)])

    assert [card.id for card in vocabulary.due(NOW)] == ["c1-002"]


def test_mastery_breakdown_for_dashboard() -> None:
    vocabulary = Vocabulary([_card("c1-001"), _card("c1-002").with_review(ReviewState(2.5, 20, 5, NOW))])

    breakdown = vocabulary.mastery_breakdown()

    assert breakdown[MasteryLevel.NEW] == 1
    assert breakdown[MasteryLevel.MASTERED] == 1
    assert sum(breakdown.values()) == 2


def test_bundled_starter_vocabulary_loads() -> None:
    cards = load_starter_vocabulary(now=NOW)

    assert cards
    assert len({card.id for card in cards}) == len(cards)
    assert all(card.review == ReviewState.fresh(NOW) for card in cards)
    assert {card.chapter_number for card in cards} >= {1}


def test_starter_vocabulary_skips_incomplete_rows(tmp_path: Path) -> None:
    csv_path = tmp_path / "starter.csv"
    csv_path.write_text(
        "id;front;back;part_of_speech;chapter;gender;grammar_note\n"
        "c1-001;agricola;de boer;noun;1;m;agricolae\n"
        "c1-002;puella;;noun;1;f;\n"
        "c1-003;et;en;conjunction;one\n"
        "\n"
        "c1-004;non;niet;adverb;1\n",
        encoding="utf-8",
    )

    cards = load_starter_vocabulary(csv_path, now=NOW)

    assert [card.id for card in cards] == ["c1-001", "c1-004"]
    assert cards[0].grammatical_gender == "m"
    assert cards[0].grammar_note == "agricolae"
    assert cards[1].part_of_speech is PartOfSpeech.ADVERB
    assert cards[1].grammatical_gender is None


def test_missing_starter_file_raises(tmp_path: Path) -> None:
    with pytest.raises(RuntimeError):
        load_starter_vocabulary(tmp_path / "missing.csv")
