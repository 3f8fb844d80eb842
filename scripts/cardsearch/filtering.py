"""Search predicates: text query + attribute filters over clean card dicts.

A filter set is a plain dict. Keys that are absent impose no constraint:

    colors / attributes / types      list of str, overlap match (any shared value)
    cost_min ... counter_max         int, inclusive bounds
    has_trigger                      bool

Filters combine with AND across fields and OR within a list field.
"""

from cardsearch.constants import LIST_FIELDS, RANGE_FIELDS

TRUE_WORDS = {"true", "1", "yes"}
FALSE_WORDS = {"false", "0", "no"}


# ─── Request Parsing ────────────────────────────────────────────

def _get_all(params, key):
    """Read every value for key from a MultiDict-like or plain dict."""
    if hasattr(params, "getlist"):
        return params.getlist(key)
    value = params.get(key)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _parse_list(values):
    items = []
    for value in values:
        for part in str(value).split(","):
            part = part.strip()
            if part and part not in items:
                items.append(part)
    return items


def _parse_int(value):
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _parse_bool(value):
    if value is None:
        return None
    text = str(value).strip().lower()
    if text in TRUE_WORDS:
        return True
    if text in FALSE_WORDS:
        return False
    return None


def parse_filters(params):
    """Build a filter set from request query parameters.

    Only presence is checked: values that do not parse are dropped as if
    they were never sent.
    """
    filters = {}

    for field in LIST_FIELDS:
        values = _parse_list(_get_all(params, field))
        if values:
            filters[field] = values

    for field in RANGE_FIELDS:
        for bound in ("min", "max"):
            key = f"{field}_{bound}"
            value = _parse_int(params.get(key))
            if value is not None:
                filters[key] = value

    has_trigger = _parse_bool(params.get("has_trigger"))
    if has_trigger is not None:
        filters["has_trigger"] = has_trigger

    return filters


# ─── Predicates ─────────────────────────────────────────────────

def matches_query(card, query):
    """Empty query matches everything; otherwise a case-insensitive substring of id or name."""
    term = (query or "").strip().casefold()
    if not term:
        return True
    return term in card["id"].casefold() or term in card["name"].casefold()


def _overlaps(card_values, wanted):
    return bool(set(card_values or []) & set(wanted))


def _in_range(value, low, high):
    # NULL never satisfies a bound, same as the SQL comparison
    if value is None:
        return low is None and high is None
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def matches_filters(card, filters):
    """True when the card satisfies every predicate in the filter set."""
    if not filters:
        return True

    for field in LIST_FIELDS:
        wanted = filters.get(field)
        if wanted and not _overlaps(card.get(field), wanted):
            return False

    for field in RANGE_FIELDS:
        low = filters.get(f"{field}_min")
        high = filters.get(f"{field}_max")
        if low is None and high is None:
            continue
        if not _in_range(card.get(field), low, high):
            return False

    has_trigger = filters.get("has_trigger")
    if has_trigger is True and card.get("trigger") is None:
        return False
    if has_trigger is False and card.get("trigger") is not None:
        return False

    return True


def filter_cards(cards, query="", filters=None):
    """Keep cards matching both the text query and the filter set, in input order."""
    return [c for c in cards if matches_query(c, query) and matches_filters(c, filters)]
