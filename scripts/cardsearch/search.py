"""Card search service: picks the configured card source and runs queries on it.

A card source is a callable `(query, filters) -> list[card]`. It is built
once when the app starts; the Supabase client inside it is reused across
requests.
"""

import logging

from cardsearch.constants import BACKEND_FILES
from cardsearch.card_store import load_cards
from cardsearch.errors import ConfigurationError
from cardsearch.filtering import filter_cards
from cardsearch.supabase_store import create_supabase_client, query_cards

logger = logging.getLogger(__name__)


def file_card_source(cards_dir):
    """Card source that reads the JSON tree on every query and filters in memory."""
    def search(query, filters):
        return filter_cards(load_cards(cards_dir), query, filters)
    return search


def supabase_card_source(client):
    """Card source that forwards queries to the hosted cards table."""
    def search(query, filters):
        return query_cards(client, query, filters)
    return search


def unavailable_card_source(error):
    """Card source standing in for a backend whose configuration is missing."""
    def search(query, filters):
        raise ConfigurationError(str(error))
    return search


def build_card_source(settings):
    """Build the card source for settings["CARD_BACKEND"].

    Missing Supabase configuration does not stop startup; the returned
    source reports it on the first search instead.
    """
    if settings["CARD_BACKEND"] == BACKEND_FILES:
        logger.info("Card search reading files from %s", settings["CARDS_DIR"])
        return file_card_source(settings["CARDS_DIR"])

    try:
        client = create_supabase_client(settings)
    except ConfigurationError as e:
        logger.warning("Card search unavailable: %s", e)
        return unavailable_card_source(e)
    return supabase_card_source(client)


def search_cards(source, query="", filters=None):
    """Search the catalogue. Storage failures propagate to the caller."""
    query = (query or "").strip()
    filters = filters or {}
    results = source(query, filters)
    logger.info("Search q=%r filters=%s → %d cards", query, sorted(filters), len(results))
    return results
