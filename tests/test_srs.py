from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.drill.errors import InvalidGrade
from src.drill.models import Card, MasteryLevel, PartOfSpeech, ReviewState, mastery_for
from src.drill.srs import adjust_ease_factor, due_cards, mastery_breakdown, next_state


NOW = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)


def _state(ease: float = 2.5, interval: int = 0, repetition: int = 0) -> ReviewState:
    return ReviewState(
        ease_factor=ease,
        interval_days=interval,
        repetition_count=repetition,
        next_due_at=NOW,
    )


def _card(card_id: str, due_at: datetime) -> Card:
    return Card(
        id=card_id,
        front=card_id,
        back=card_id,
        part_of_speech=PartOfSpeech.NOUN,
        chapter_number=1,
        review=ReviewState(2.5, 0, 0, due_at),
    )


def test_successful_review_increases_interval() -> None:
    schedule = next_state(_state(ease=2.5, interval=6, repetition=2), 5, now=NOW)

    assert schedule.repetition_count == 3
    assert schedule.interval_days == 15
    assert schedule.next_due_at == NOW + timedelta(days=15)
    assert schedule.ease_factor > 2.5
    assert schedule.mastery_level is MasteryLevel.REVIEWING


def test_failed_review_resets_progress() -> None:
    schedule = next_state(_state(ease=2.2, interval=10, repetition=4), 1, now=NOW)

    assert schedule.repetition_count == 0
    assert schedule.interval_days == 1
    assert schedule.next_due_at == NOW + timedelta(days=1)
    assert schedule.ease_factor >= 1.3
    assert schedule.mastery_level is MasteryLevel.NEW


@pytest.mark.parametrize("quality", [0, 1, 2])
@pytest.mark.parametrize("repetition", [0, 1, 3, 7])
def test_lapse_always_restarts_streak(quality: int, repetition: int) -> None:
    schedule = next_state(_state(ease=2.0, interval=40, repetition=repetition), quality, now=NOW)

    assert schedule.repetition_count == 0
    assert schedule.interval_days == 1


def test_ease_factor_never_drops_below_floor() -> None:
    for ease in (1.3, 1.35, 1.5, 2.5, 3.1):
        for quality in range(6):
            schedule = next_state(_state(ease=ease, interval=3, repetition=2), quality, now=NOW)
            assert schedule.ease_factor >= 1.3


def test_repeated_blackouts_settle_on_minimum_ease() -> None:
    state = _state()
    for _ in range(10):
        state = next_state(state, 0, now=NOW)

    assert state.ease_factor == pytest.approx(1.3)


def test_three_passes_follow_one_six_then_ease_growth() -> None:
    first = next_state(_state(), 5, now=NOW)
    second = next_state(first, 5, now=NOW)
    third = next_state(second, 5, now=NOW)

    assert [first.interval_days, second.interval_days] == [1, 6]
    assert third.interval_days == int(6 * second.ease_factor + 0.5)
    assert [first.repetition_count, second.repetition_count, third.repetition_count] == [1, 2, 3]


def test_ease_update_matches_quality_weighting() -> None:
    assert adjust_ease_factor(2.5, 5) == pytest.approx(2.6)
    assert adjust_ease_factor(2.5, 4) == pytest.approx(2.5)
    assert adjust_ease_factor(2.5, 3) == pytest.approx(2.36)
    assert adjust_ease_factor(2.5, 0) == pytest.approx(1.7)


def test_next_state_leaves_input_untouched() -> None:
    current = _state(ease=2.5, interval=6, repetition=2)

    next_state(current, 1, now=NOW)

    assert current == _state(ease=2.5, interval=6, repetition=2)


@pytest.mark.parametrize("quality", [-1, 6, 3.5, "4", True, None])
def test_invalid_quality_is_rejected(quality: object) -> None:
    with pytest.raises(InvalidGrade):
        next_state(_state(), quality, now=NOW)  # type: ignore[arg-type]


def test_invalid_grade_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        next_state(_state(), 9, now=NOW)


@pytest.mark.parametrize(
    ("repetition", "level"),
    [
        (0, MasteryLevel.NEW),
        (1, MasteryLevel.LEARNING),
        (2, MasteryLevel.LEARNING),
        (3, MasteryLevel.REVIEWING),
        (4, MasteryLevel.REVIEWING),
        (5, MasteryLevel.MASTERED),
        (12, MasteryLevel.MASTERED),
    ],
)
def test_mastery_is_derived_from_repetition_count(repetition: int, level: MasteryLevel) -> None:
    assert mastery_for(repetition) is level
    assert _state(repetition=repetition).mastery_level is level


def test_due_cards_filters_future_and_sorts_oldest_first() -> None:
    cards = [
        _card("later", NOW + timedelta(hours=1)),
        _card("yesterday", NOW - timedelta(days=1)),
        _card("now", NOW),
        _card("last-week", NOW - timedelta(days=7)),
    ]

    due = due_cards(cards, NOW)

    assert [card.id for card in due] == ["last-week", "yesterday", "now"]
    assert all(card.review.next_due_at <= NOW for card in due)


def test_due_cards_keeps_input_order_for_equal_timestamps() -> None:
    moment = NOW - timedelta(days=2)
    cards = [_card("b", moment), _card("a", moment), _card("c", moment)]

    assert [card.id for card in due_cards(cards, NOW)] == ["b", "a", "c"]


def test_mastery_breakdown_counts_every_level() -> None:
    cards = [
        _card("a", NOW).with_review(_state(repetition=0)),
        _card("b", NOW).with_review(_state(repetition=2)),
        _card("c", NOW).with_review(_state(repetition=6)),
    ]

    assert mastery_breakdown(cards) == {
        MasteryLevel.NEW: 1,
        MasteryLevel.LEARNING: 1,
        MasteryLevel.REVIEWING: 0,
        MasteryLevel.MASTERED: 1,
    }
