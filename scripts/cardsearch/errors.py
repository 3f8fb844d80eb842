"""Exception types raised by the card store, search and analytics layers."""


class CardSearchError(Exception):
    """Base class for every error the application reports to a caller."""


class ConfigurationError(CardSearchError):
    """A required setting is missing or malformed."""


class CardStoreError(CardSearchError):
    """The card data directory could not be read."""


class QueryFailedError(CardSearchError):
    """A card query failed in the storage layer."""


class AnalyticsError(CardSearchError):
    """The analytics token exchange or a report request failed."""
