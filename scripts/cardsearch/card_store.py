"""Filesystem card store: one subdirectory per set, one JSON file per card.

Layout:  <cards_dir>/<set>/<card-id>.json

Sets and files are read in sorted order so every consumer (search results,
SQL export) sees the same traversal order for the same tree.
"""

import json
import logging

from cardsearch.constants import LIST_FIELDS, RANGE_FIELDS, TEXT_FIELDS
from cardsearch.errors import CardStoreError

logger = logging.getLogger(__name__)


# ─── Parsing & Cleaning ─────────────────────────────────────────

def _to_int(value):
    """Coerce a card number field. Digit strings become ints, anything else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _to_list(value):
    """Normalize an array field: None → [], scalar → [scalar], drop blanks."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        value = [value]
    return [str(v) for v in value if v is not None and str(v) != ""]


def _to_text(value):
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def clean_card(raw, skip_log=None):
    """Turn a raw card record into a clean card dict. Returns None if invalid.

    If skip_log is a list, a reason string is appended for each rejection.
    """
    if not isinstance(raw, dict):
        if skip_log is not None:
            skip_log.append("not_an_object")
        return None

    card_id = str(raw.get("id") or "").strip()
    name = str(raw.get("name") or "").strip()

    if not card_id:
        if skip_log is not None:
            skip_log.append("missing_id")
        return None
    if not name:
        if skip_log is not None:
            skip_log.append("missing_name")
        return None

    card = {"id": card_id, "name": name}
    for field in TEXT_FIELDS:
        card[field] = str(raw.get(field) or "")
    for field in LIST_FIELDS:
        card[field] = _to_list(raw.get(field))
    for field in RANGE_FIELDS:
        card[field] = _to_int(raw.get(field))
    card["effect"] = _to_text(raw.get("effect"))
    card["trigger"] = _to_text(raw.get("trigger"))
    return card


# ─── Directory Traversal ────────────────────────────────────────

def iter_card_files(cards_dir):
    """Yield every <set>/*.json path under cards_dir, sorted by set then file."""
    if not cards_dir.is_dir():
        raise CardStoreError(f"Could not access cards directory at: {cards_dir}")

    for set_dir in sorted(p for p in cards_dir.iterdir() if p.is_dir()):
        try:
            files = sorted(p for p in set_dir.iterdir() if p.suffix == ".json" and p.is_file())
        except OSError as e:
            logger.warning("Skipping set directory %s: %s", set_dir.name, e)
            continue
        yield from files


def load_card_file(path):
    """Read and decode a single card file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_cards(cards_dir, skip_log=None):
    """Load every card under cards_dir.

    A file that is unusable is logged and skipped, so one bad record never
    fails a whole search. A missing root directory is a
    configuration problem and raises CardStoreError.
    """
    cards = []
    for path in iter_card_files(cards_dir):
        try:
            raw = load_card_file(path)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error("Error reading card file %s: %s", path.name, e)
            if skip_log is not None:
                skip_log.append("unreadable")
            continue

        card = clean_card(raw, skip_log=skip_log)
        if card is None:
            logger.warning("Skipping invalid card file %s", path.name)
            continue
        cards.append(card)

    logger.info("Loaded %d cards from %s", len(cards), cards_dir)
    return cards
