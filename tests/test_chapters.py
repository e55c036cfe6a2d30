from __future__ import annotations

import math
import random
from datetime import datetime, timezone

import pytest

from src.drill.chapters import (
    available_chapters,
    build_windows,
    chapter_cards,
    extract_number,
    window_cards,
)
from src.drill.models import Card


NOW = datetime(2026, 10, 18, tzinfo=timezone.utc)


def _card(card_id: str, chapter: int = 1) -> Card:
    return Card.new(card_id, f"front {card_id}", f"back {card_id}", chapter_number=chapter, now=NOW)


def _chapter(count: int, chapter: int = 1) -> list[Card]:
    return [_card(f"c{chapter}-{index:03d}", chapter) for index in range(1, count + 1)]


@pytest.mark.parametrize(
    ("card_id", "expected"),
    [
        ("c1-001", 1),
        ("c3-042", 42),
        ("word_17", 17),
        ("1700000000000", 1700000000000),
        ("c1-012b", 12),
        ("agricola", None),
        ("c1-", None),
    ],
)
def test_extract_number(card_id: str, expected: int | None) -> None:
    assert extract_number(card_id) == expected


def test_numeric_suffix_orders_before_lexical_comparison() -> None:
    cards = [_card("c1-10"), _card("c1-9"), _card("c1-100"), _card("c1-1")]

    ordered = chapter_cards(cards, 1)

    assert [card.id for card in ordered] == ["c1-1", "c1-9", "c1-10", "c1-100"]


def test_cards_without_number_follow_numbered_cards() -> None:
    cards = [_card("zeta"), _card("c1-002"), _card("alpha"), _card("c1-001")]

    ordered = chapter_cards(cards, 1)

    assert [card.id for card in ordered] == ["c1-001", "c1-002", "alpha", "zeta"]


def test_equal_numbers_fall_back_to_id() -> None:
    cards = [_card("b-5"), _card("a-5")]

    assert [card.id for card in chapter_cards(cards, 1)] == ["a-5", "b-5"]


def test_broad_review_windows_for_thirty_five_cards() -> None:
    cards = _chapter(35)

    windows = build_windows(cards, 1, 30)

    assert [window.label for window in windows] == ["1-30", "31-35"]
    assert [(window.start_offset, window.end_offset) for window in windows] == [(0, 30), (30, 35)]
    assert windows[1].size == 5


@pytest.mark.parametrize(("count", "size"), [(1, 10), (10, 10), (11, 10), (35, 30), (47, 7)])
def test_windows_cover_every_card_exactly_once(count: int, size: int) -> None:
    cards = _chapter(count)
    ordered = chapter_cards(cards, 1)

    windows = build_windows(cards, 1, size)

    assert len(windows) == math.ceil(count / size)
    covered: list[str] = []
    previous_end = 0
    for window in windows:
        assert window.start_offset == previous_end
        assert 0 < window.size <= size
        covered.extend(card.id for card in window_cards(ordered, window))
        previous_end = window.end_offset
    assert covered == [card.id for card in ordered]


def test_windows_are_reproducible_regardless_of_input_order() -> None:
    cards = _chapter(23) + _chapter(8, chapter=2)
    shuffled = list(cards)
    random.Random(7).shuffle(shuffled)

    assert build_windows(cards, 1, 10) == build_windows(shuffled, 1, 10)
    assert [window.label for window in build_windows(shuffled, 1, 10)] == ["1-10", "11-20", "21-23"]


def test_only_requested_chapter_is_partitioned() -> None:
    cards = _chapter(12, chapter=1) + _chapter(4, chapter=2)

    windows = build_windows(cards, 2, 10)

    assert [window.label for window in windows] == ["1-4"]


def test_label_falls_back_to_positions_without_numbers() -> None:
    cards = [_card(name) for name in ("amo", "bellum", "canis", "domus")]

    windows = build_windows(cards, 1, 3)

    assert [window.label for window in windows] == ["1-3", "4-4"]


def test_empty_chapter_yields_no_windows() -> None:
    assert build_windows(_chapter(5), 4, 10) == []


def test_window_size_must_be_positive() -> None:
    with pytest.raises(ValueError):
        build_windows(_chapter(5), 1, 0)


def test_available_chapters_are_sorted_and_unique() -> None:
    cards = _chapter(2, chapter=3) + _chapter(2, chapter=1) + _chapter(1, chapter=8)

    assert available_chapters(cards) == [1, 3, 8]
