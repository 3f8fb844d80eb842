"""HTTP API: card search and the analytics dashboard proxy.

    GET /api/search?q=<text>&colors=Red,Blue&cost_min=1&has_trigger=true ...
    GET /api/analytics?days=<int>
"""

import logging

from flask import Flask, jsonify, request

from cardsearch.analytics import fetch_dashboard, parse_days
from cardsearch.errors import CardSearchError
from cardsearch.filtering import parse_filters
from cardsearch.search import build_card_source, search_cards
from cardsearch.settings import load_settings

logger = logging.getLogger(__name__)

SEARCH_FAILED = "An error occurred while searching for cards"
ANALYTICS_FAILED = "Failed to fetch analytics data"


def _error(message, status=500):
    return jsonify({"error": message}), status


def create_app(settings=None, card_source=None):
    """Build the Flask app. The card source (and its DB client) is created once here."""
    app = Flask(__name__)
    app.json.sort_keys = False

    settings = settings if settings is not None else load_settings()
    app.config["SETTINGS"] = settings
    app.config["CARD_SOURCE"] = card_source or build_card_source(settings)

    @app.get("/api/search")
    def search():
        query = request.args.get("q", "")
        try:
            filters = parse_filters(request.args)
            results = search_cards(app.config["CARD_SOURCE"], query, filters)
        except CardSearchError as e:
            logger.error("Search error: %s", e)
            return _error(str(e))
        except Exception:
            logger.exception("Search error")
            return _error(SEARCH_FAILED)
        return jsonify(results)

    @app.get("/api/analytics")
    def analytics():
        days = parse_days(request.args.get("days"))
        try:
            data = fetch_dashboard(app.config["SETTINGS"], days,
                                   session=app.config.get("HTTP_SESSION"))
        except CardSearchError as e:
            logger.error("Analytics API error: %s", e)
            return _error(str(e) or ANALYTICS_FAILED)
        except Exception:
            logger.exception("Analytics API error")
            return _error(ANALYTICS_FAILED)
        return jsonify(data)

    return app
