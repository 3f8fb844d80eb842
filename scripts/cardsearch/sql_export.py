"""SQL import script generator: card JSON tree → import-cards-part-N.sql.

One-shot migration into the hosted `cards` table:
    part 1      table + index preamble, then one multi-row INSERT
    part 2..N   one multi-row INSERT each
    part N      also ANALYZE + verification queries

Output is deterministic for a given tree. The scripts are not idempotent:
running them twice against a live table duplicates every row.
"""

import math

from cardsearch.card_store import load_cards
from cardsearch.constants import INSERT_COLUMNS, NUM_CHUNKS, SQL_FILE_TEMPLATE, CARDS_TABLE

TABLE_DDL = f"""-- Create the cards table if it doesn't exist
CREATE TABLE IF NOT EXISTS {CARDS_TABLE} (
  id BIGSERIAL PRIMARY KEY,
  card_id TEXT NOT NULL,
  pack_id TEXT NOT NULL,
  name TEXT NOT NULL,
  rarity TEXT NOT NULL,
  category TEXT NOT NULL,
  img_url TEXT NOT NULL,
  img_full_url TEXT NOT NULL,
  colors TEXT[] NOT NULL,
  cost INTEGER,
  attributes TEXT[] NOT NULL,
  power INTEGER,
  counter INTEGER,
  types TEXT[] NOT NULL,
  effect TEXT,
  trigger TEXT,
  created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
  updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);

-- Create indexes for common queries
CREATE INDEX IF NOT EXISTS idx_cards_card_id ON {CARDS_TABLE}(card_id);
CREATE INDEX IF NOT EXISTS idx_cards_name ON {CARDS_TABLE} USING gin(to_tsvector('english', name));
CREATE INDEX IF NOT EXISTS idx_cards_pack_id ON {CARDS_TABLE}(pack_id);
CREATE INDEX IF NOT EXISTS idx_cards_rarity ON {CARDS_TABLE}(rarity);
CREATE INDEX IF NOT EXISTS idx_cards_category ON {CARDS_TABLE}(category);
CREATE INDEX IF NOT EXISTS idx_cards_colors ON {CARDS_TABLE} USING gin(colors);
CREATE INDEX IF NOT EXISTS idx_cards_types ON {CARDS_TABLE} USING gin(types);

-- Clear existing data (optional - uncomment to replace existing rows)
-- TRUNCATE TABLE {CARDS_TABLE};

"""

VERIFY_SQL = f"""
-- Update statistics
ANALYZE {CARDS_TABLE};

-- Verify import
SELECT COUNT(*) as total_cards FROM {CARDS_TABLE};
SELECT pack_id, COUNT(*) as card_count FROM {CARDS_TABLE} GROUP BY pack_id ORDER BY pack_id;
"""


# ─── Value Rendering ────────────────────────────────────────────

def escape_sql(value):
    """Render a string literal: quotes doubled, backslashes escaped. None → NULL."""
    if value is None:
        return "NULL"
    text = str(value).replace("'", "''").replace("\\", "\\\\")
    return f"'{text}'"


def array_to_sql(values):
    """Render a text[] literal, e.g. ARRAY['Red', 'Green']."""
    if not values:
        return "ARRAY[]::text[]"
    return "ARRAY[" + ", ".join(escape_sql(v) for v in values) + "]"


def _int_sql(value):
    return "NULL" if value is None else str(int(value))


def _optional_text_sql(value):
    return escape_sql(value) if value else "NULL"


def card_values_sql(card):
    """One VALUES tuple in INSERT_COLUMNS order."""
    values = [
        escape_sql(card["id"]),
        escape_sql(card.get("pack_id")),
        escape_sql(card.get("name")),
        escape_sql(card.get("rarity")),
        escape_sql(card.get("category")),
        escape_sql(card.get("img_url")),
        escape_sql(card.get("img_full_url")),
        array_to_sql(card.get("colors")),
        _int_sql(card.get("cost")),
        array_to_sql(card.get("attributes")),
        _int_sql(card.get("power")),
        _int_sql(card.get("counter")),
        array_to_sql(card.get("types")),
        _optional_text_sql(card.get("effect")),
        _optional_text_sql(card.get("trigger")),
    ]
    return "(" + ", ".join(values) + ")"


# ─── Script Assembly ────────────────────────────────────────────

def chunk_cards(cards, num_chunks=NUM_CHUNKS):
    """Split cards into at most num_chunks slices of ceil(n / num_chunks)."""
    if not cards:
        return []
    size = math.ceil(len(cards) / num_chunks)
    return [cards[i:i + size] for i in range(0, len(cards), size)]


def insert_statement(cards):
    """One multi-row INSERT for a chunk of cards."""
    rows = [f"  {card_values_sql(card)}" for card in cards]
    return (
        f"INSERT INTO {CARDS_TABLE} ({', '.join(INSERT_COLUMNS)})\n"
        "VALUES\n"
        + ",\n".join(rows)
        + ";\n"
    )


def build_import_scripts(cards, num_chunks=NUM_CHUNKS):
    """Return [(filename, sql), ...] for the chunked import, in run order."""
    chunks = chunk_cards(cards, num_chunks)
    total = len(chunks)
    scripts = []

    for i, chunk in enumerate(chunks, 1):
        if i == 1:
            sql = (
                f"-- One Piece Card Game - Import Script (Part 1 of {total})\n"
                f"-- Generated from {len(cards)} card files\n"
                "-- Run this script FIRST in your SQL editor\n\n"
                + TABLE_DDL
            )
        else:
            sql = (
                f"-- One Piece Card Game - Import Script (Part {i} of {total})\n"
                f"-- Run this script after Part {i - 1}\n\n"
            )

        sql += f"-- Insert cards (chunk {i} of {total} - {len(chunk)} cards)\n"
        sql += insert_statement(chunk)

        if i == total:
            sql += VERIFY_SQL

        scripts.append((SQL_FILE_TEMPLATE.format(i), sql))

    return scripts


def write_import_scripts(cards_dir, output_dir, num_chunks=NUM_CHUNKS):
    """Load the card tree and write the import scripts. Returns the written paths."""
    print(f"  Reading card files from: {cards_dir}")
    skip_log = []
    cards = load_cards(cards_dir, skip_log=skip_log)
    print(f"  Loaded {len(cards)} cards, skipped {len(skip_log)}")

    scripts = build_import_scripts(cards, num_chunks)
    if not scripts:
        print("  No cards found, nothing to write")
        return []

    output_dir.mkdir(parents=True, exist_ok=True)
    paths = []
    for filename, sql in scripts:
        path = output_dir / filename
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(sql)
        paths.append(path)
        print(f"  Wrote {filename} ({len(sql.splitlines())} lines)")

    print(f"\n  Generated {len(paths)} SQL files for {len(cards)} cards")
    print("  Run the files in order in your database's SQL editor:")
    for i, path in enumerate(paths, 1):
        print(f"    {i}. {path.name}")
    return paths
