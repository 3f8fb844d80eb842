"""Process settings: read once from the environment at startup.

Values are kept under their environment variable names so a missing one can
be reported by name when an endpoint or command needs it.
"""

import os
from pathlib import Path

from cardsearch.constants import (
    CARDS_DIR, ENGLISH_DIR, DEFAULT_BACKEND, BACKEND_FILES, BACKEND_SUPABASE,
    DEFAULT_GA_PROPERTY_ID, DEFAULT_BUCKET_REGION, DEFAULT_BUCKET_PREFIX,
)
from cardsearch.errors import ConfigurationError

BACKENDS = (BACKEND_SUPABASE, BACKEND_FILES)


def load_settings(environ=None):
    """Build the settings dict from environment variables.

    Nothing is validated here beyond the backend name; required values are
    checked by require() when they are actually used.
    """
    env = os.environ if environ is None else environ

    backend = (env.get("CARD_BACKEND") or DEFAULT_BACKEND).strip().lower()
    if backend not in BACKENDS:
        raise ConfigurationError(
            f"CARD_BACKEND must be one of {', '.join(BACKENDS)}, got '{backend}'"
        )

    return {
        "CARD_BACKEND": backend,
        "CARDS_DIR": Path(env.get("CARDS_DIR") or CARDS_DIR).resolve(),
        "SUPABASE_URL": env.get("SUPABASE_URL") or None,
        "SUPABASE_ANON_KEY": env.get("SUPABASE_ANON_KEY") or None,
        "GA_SERVICE_ACCOUNT_JSON": env.get("GA_SERVICE_ACCOUNT_JSON") or None,
        "GA_PROPERTY_ID": env.get("GA_PROPERTY_ID") or DEFAULT_GA_PROPERTY_ID,
        "ASSETS_SOURCE": Path(env.get("ASSETS_SOURCE") or ENGLISH_DIR).resolve(),
        "ASSETS_BUCKET": env.get("ASSETS_BUCKET") or None,
        "ASSETS_PREFIX": env.get("ASSETS_PREFIX") or DEFAULT_BUCKET_PREFIX,
        "ASSETS_ENDPOINT_URL": env.get("ASSETS_ENDPOINT_URL") or None,
        "AWS_ACCESS_KEY_ID": env.get("AWS_ACCESS_KEY_ID") or None,
        "AWS_SECRET_ACCESS_KEY": env.get("AWS_SECRET_ACCESS_KEY") or None,
        "AWS_DEFAULT_REGION": env.get("AWS_DEFAULT_REGION") or DEFAULT_BUCKET_REGION,
    }


def require(settings, *names):
    """Return the named settings, raising ConfigurationError for the first missing one."""
    values = []
    for name in names:
        value = settings.get(name)
        if not value:
            raise ConfigurationError(f"{name} environment variable not set")
        values.append(value)
    return values[0] if len(values) == 1 else tuple(values)
