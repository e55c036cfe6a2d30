"""Loading of the bundled starter vocabulary."""

from __future__ import annotations

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from src.drill.models import Card, PartOfSpeech


LOGGER = logging.getLogger(__name__)

DEFAULT_STARTER_PATH = Path(__file__).resolve().parents[2] / "static" / "starter_vocabulary.csv"


def load_starter_vocabulary(
    path: Optional[Path] = None,
    now: Optional[datetime] = None,
) -> List[Card]:
    """Read starter cards from a semicolon separated CSV file.

    Columns: id;front;back;part_of_speech;chapter;gender;grammar_note. The
    first row is a header. Rows missing an id, either side or a numeric
    chapter are skipped.
    """
    csv_path = path or DEFAULT_STARTER_PATH
    cards: List[Card] = []
    try:
        with csv_path.open("r", encoding="utf-8-sig", newline="") as csv_file:
            reader = csv.reader(csv_file, delimiter=";")
            next(reader, None)  # discard header
            for row_index, row in enumerate(reader, start=2):
                if not row:
                    continue
                padded = [value.strip() for value in row] + [""] * (7 - len(row))
                card_id, front, back, part_of_speech, chapter, gender, note = padded[:7]
                if not card_id or not front or not back or not chapter.isdigit():
                    LOGGER.debug("Skipping incomplete starter vocabulary row %s: %s", row_index, row)
                    continue
                cards.append(
                    Card.new(
                        card_id,
                        front,
                        back,
                        part_of_speech=PartOfSpeech.parse(part_of_speech),
                        chapter_number=int(chapter),
                        grammatical_gender=gender or None,
                        grammar_note=note or None,
                        now=now,
                    )
                )
    except FileNotFoundError as exc:
        raise RuntimeError(f"Starter vocabulary file {csv_path} is missing.") from exc

    LOGGER.info("Loaded %s starter cards from %s.", len(cards), csv_path)
    return cards
