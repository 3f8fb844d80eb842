"""Hosted card store: the `cards` table behind Supabase's PostgREST API.

The client is built once per process by create_supabase_client() and shared
by every request; queries translate a filter set into PostgREST operators.
"""

import logging

from postgrest.exceptions import APIError
from supabase import create_client

from cardsearch.constants import (
    CARDS_TABLE, LIST_FIELDS, QUERY_PAGE_SIZE, RANGE_FIELDS, ROW_ONLY_COLUMNS,
)
from cardsearch.errors import QueryFailedError
from cardsearch.settings import require

logger = logging.getLogger(__name__)


def create_supabase_client(settings):
    """Create the process-wide Supabase client from SUPABASE_URL / SUPABASE_ANON_KEY."""
    url, key = require(settings, "SUPABASE_URL", "SUPABASE_ANON_KEY")
    logger.info("Connecting card search to %s", url)
    return create_client(url, key)


# ─── Query Translation ──────────────────────────────────────────

def _quote(value):
    """Double-quote a value for a PostgREST logic tree so , ( ) stay literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def text_search_filter(query):
    """PostgREST `or` expression for a case-insensitive id/name substring match."""
    pattern = _quote(f"%{query}%")
    return f"card_id.ilike.{pattern},name.ilike.{pattern}"


def build_card_query(client, query="", filters=None):
    """Translate a text query + filter set into a PostgREST select on the cards table."""
    filters = filters or {}
    request = client.table(CARDS_TABLE).select("*")

    term = (query or "").strip()
    if term:
        request = request.or_(text_search_filter(term))

    for field in LIST_FIELDS:
        values = filters.get(field)
        if values:
            request = request.overlaps(field, list(values))

    for field in RANGE_FIELDS:
        low = filters.get(f"{field}_min")
        high = filters.get(f"{field}_max")
        if low is not None:
            request = request.gte(field, low)
        if high is not None:
            request = request.lte(field, high)

    has_trigger = filters.get("has_trigger")
    if has_trigger is True:
        request = request.not_.is_("trigger", "null")
    elif has_trigger is False:
        request = request.is_("trigger", "null")

    return request


def row_to_card(row):
    """Map a table row back to the card record shape (card_id → id)."""
    card = {k: v for k, v in row.items() if k not in ROW_ONLY_COLUMNS and k != "id"}
    card["id"] = card.pop("card_id", row.get("id"))
    for field in LIST_FIELDS:
        card[field] = card.get(field) or []
    return card


def _fetch_page(client, query, filters, start, page_size):
    """One id-ordered slice of the result set, rows start..start+page_size-1."""
    try:
        request = build_card_query(client, query, filters)
        response = request.order("id").range(start, start + page_size - 1).execute()
    except APIError as e:
        logger.error("Supabase query error: %s", e.message)
        raise QueryFailedError(f"Database query failed: {e.message}") from e
    except Exception as e:
        logger.error("Supabase request failed: %s", e)
        raise QueryFailedError(f"Database query failed: {e}") from e
    return response.data or []


def query_cards(client, query="", filters=None, page_size=QUERY_PAGE_SIZE):
    """Run a card search against the hosted table.

    PostgREST caps each response at its max-rows setting, so rows are read
    one page at a time until a short page comes back. Any failure, whether
    building the request, on the wire, or reported by PostgREST, is raised
    as QueryFailedError.
    """
    rows = []
    start = 0
    while True:
        page = _fetch_page(client, query, filters, start, page_size)
        rows.extend(page)
        if len(page) < page_size:
            break
        start += page_size

    return [row_to_card(row) for row in rows]
