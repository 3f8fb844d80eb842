"""Analytics proxy: four Google Analytics Data API reports for the dashboard.

Auth is a service-account JWT (RS256) exchanged for a bearer token at the
Google OAuth endpoint. The four report requests then run concurrently; the
first failure aborts the whole response. No retries, no caching.
"""

import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import jwt
import requests

from cardsearch.constants import (
    DEFAULT_DAYS, GA_API_TEMPLATE, GA_JWT_LIFETIME, GA_SCOPE, GA_TOKEN_URL,
    HTTP_TIMEOUT, REPORT_NAMES,
)
from cardsearch.errors import AnalyticsError, ConfigurationError
from cardsearch.settings import require

logger = logging.getLogger(__name__)


# ─── Service Account Auth ───────────────────────────────────────

def load_service_account(raw_json):
    """Parse GA_SERVICE_ACCOUNT_JSON and return (client_email, private_key)."""
    if not raw_json:
        raise ConfigurationError("GA_SERVICE_ACCOUNT_JSON environment variable not set")

    try:
        account = json.loads(raw_json)
    except (json.JSONDecodeError, TypeError) as e:
        raise ConfigurationError("Invalid GA_SERVICE_ACCOUNT_JSON format. Must be valid JSON.") from e

    if not isinstance(account, dict):
        raise ConfigurationError("Invalid GA_SERVICE_ACCOUNT_JSON format. Must be a JSON object.")

    client_email = account.get("client_email")
    private_key = account.get("private_key")
    if not client_email or not private_key:
        raise ConfigurationError("Service account JSON must contain client_email and private_key")

    # Keys pasted into env vars often carry literal "\n" instead of newlines
    return client_email, private_key.replace("\\n", "\n")


def create_jwt(client_email, private_key, now=None):
    """Sign the token-exchange assertion for a service account."""
    issued_at = int(now if now is not None else time.time())
    payload = {
        "iss": client_email,
        "scope": GA_SCOPE,
        "aud": GA_TOKEN_URL,
        "iat": issued_at,
        "exp": issued_at + GA_JWT_LIFETIME,
    }
    try:
        return jwt.encode(payload, private_key, algorithm="RS256")
    except (ValueError, TypeError, jwt.PyJWTError) as e:
        raise AnalyticsError(f"Failed to create JWT: {e}") from e


def _token_error_message(response):
    """Best error text from a failed token response."""
    message = f"Failed to get access token: {response.reason}"
    try:
        body = response.json()
    except ValueError:
        return message
    if isinstance(body, dict):
        return body.get("error_description") or body.get("error") or message
    return message


def get_access_token(client_email, private_key, session):
    """Exchange a signed assertion for an OAuth bearer token."""
    assertion = create_jwt(client_email, private_key)
    response = session.post(GA_TOKEN_URL, data={
        "grant_type": "urn:ietf:params:oauth:grant-type:jwt-bearer",
        "assertion": assertion,
    }, timeout=HTTP_TIMEOUT)

    if not response.ok:
        logger.error("Token exchange error: %s", response.text)
        raise AnalyticsError(_token_error_message(response))

    token = response.json().get("access_token")
    if not token:
        raise AnalyticsError("Token response did not include an access_token")
    return token


# ─── Report Requests ────────────────────────────────────────────

def parse_days(value):
    """Window size from the `days` query param. Falls back to 30 on junk."""
    try:
        days = int(value)
    except (TypeError, ValueError):
        return DEFAULT_DAYS
    return days if days >= 0 else DEFAULT_DAYS


def date_range(days, today=None):
    """{startDate, endDate} spanning `days` days and ending today (UTC)."""
    end = today or datetime.now(timezone.utc).date()
    start = end - timedelta(days=days)
    return {"startDate": start.isoformat(), "endDate": end.isoformat()}


def build_report_requests(days, today=None):
    """The four runReport bodies, in REPORT_NAMES order."""
    ranges = [date_range(days, today)]
    by_date = [{"dimension": {"dimensionName": "date"}, "desc": False}]
    by_sessions = [{"metric": {"metricName": "sessions"}, "desc": True}]

    return [
        # overview
        {
            "dateRanges": ranges,
            "dimensions": [{"name": "date"}, {"name": "pagePath"}],
            "metrics": [
                {"name": "activeUsers"},
                {"name": "sessions"},
                {"name": "screenPageViews"},
                {"name": "averageSessionDuration"},
            ],
            "orderBys": by_date,
        },
        # acquisition
        {
            "dateRanges": ranges,
            "dimensions": [{"name": "date"}, {"name": "sessionSourceMedium"}],
            "metrics": [{"name": "sessions"}],
            "orderBys": by_date,
        },
        # countries
        {
            "dateRanges": ranges,
            "dimensions": [{"name": "country"}],
            "metrics": [{"name": "sessions"}],
            "orderBys": by_sessions,
            "limit": 10,
        },
        # devices
        {
            "dateRanges": ranges,
            "dimensions": [{"name": "deviceCategory"}],
            "metrics": [{"name": "sessions"}],
            "orderBys": by_sessions,
        },
    ]


def run_report(session, endpoint, token, body):
    """POST one runReport request and return its decoded JSON."""
    response = session.post(endpoint, json=body, headers={
        "Authorization": f"Bearer {token}",
    }, timeout=HTTP_TIMEOUT)

    if not response.ok:
        logger.error("GA API error: %s", response.text)
        raise AnalyticsError(f"Failed to fetch analytics data: {response.reason}")
    return response.json()


def fetch_dashboard(settings, days, session=None):
    """Fetch the overview/acquisition/countries/devices reports for the last `days` days."""
    client_email, private_key = load_service_account(settings.get("GA_SERVICE_ACCOUNT_JSON"))
    endpoint = GA_API_TEMPLATE.format(require(settings, "GA_PROPERTY_ID"))

    own_session = session is None
    session = session or requests.Session()
    try:
        token = get_access_token(client_email, private_key, session)
        bodies = build_report_requests(days)

        with ThreadPoolExecutor(max_workers=len(bodies)) as executor:
            futures = [executor.submit(run_report, session, endpoint, token, b) for b in bodies]
            results = [f.result() for f in futures]
    except requests.exceptions.RequestException as e:
        raise AnalyticsError(f"Failed to fetch analytics data: {e}") from e
    finally:
        if own_session:
            session.close()

    logger.info("Fetched %d analytics reports for %d days", len(results), days)
    return dict(zip(REPORT_NAMES, results))
