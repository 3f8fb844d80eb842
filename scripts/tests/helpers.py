"""Shared test factories for card search tests.

Provides card dicts with sensible defaults, an on-disk card tree writer,
and small doubles for the PostgREST query builder and HTTP sessions.
"""

import json
import sys
from pathlib import Path

SCRIPTS_DIR = Path(__file__).resolve().parent.parent
if str(SCRIPTS_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPTS_DIR))


# ─── Card Factories ──────────────────────────────────────────────

def make_card(**overrides):
    """Build a valid clean card dict. Override any field via kwargs.

    The default is the ST01 starter-deck Luffy leader.
    """
    card = {
        "id": "ST01-001",
        "pack_id": "569001",
        "name": "Monkey.D.Luffy",
        "rarity": "L",
        "category": "Leader",
        "img_url": "https://example.test/images/ST01-001.png",
        "img_full_url": "https://example.test/images/full/ST01-001.png",
        "colors": ["Red"],
        "cost": 0,
        "attributes": ["Strike"],
        "power": 5000,
        "counter": None,
        "types": ["Supernovas", "Straw Hat Crew"],
        "effect": "[Activate:Main] [Once Per Turn] Give this Leader or 1 of your Characters up to 1 rested DON!! card.",
        "trigger": None,
    }
    card.update(overrides)
    return card


def sample_catalogue():
    """A handful of cards spanning colors, costs, triggers and sets."""
    return [
        make_card(),
        make_card(id="ST01-004", name="Sanji", category="Character", rarity="C",
                  cost=2, power=4000, counter=1000, attributes=["Strike"],
                  types=["Straw Hat Crew"], effect=None),
        make_card(id="ST01-012", name="Monkey.D.Luffy", category="Character", rarity="SR",
                  cost=5, power=6000, counter=None, types=["Supernovas", "Straw Hat Crew"]),
        make_card(id="ST02-007", pack_id="569002", name="Jewelry Bonney", category="Character",
                  rarity="C", colors=["Green"], cost=1, power=1000, counter=1000,
                  attributes=["Special"], types=["Supernovas", "Bonney Pirates"],
                  trigger="[Trigger] Play this card."),
        make_card(id="OP01-060", pack_id="569101", name="Donquixote Doflamingo",
                  category="Leader", rarity="L", colors=["Blue", "Purple"], cost=None,
                  power=5000, counter=None, attributes=["Special"],
                  types=["The Seven Warlords of the Sea", "Donquixote Pirates"]),
    ]


def write_card_tree(root, cards, set_for=None):
    """Write cards as <root>/<set>/<id>.json. Returns root.

    set_for maps a card to its set directory name (default: id prefix).
    """
    set_for = set_for or (lambda c: c["id"].split("-")[0])
    for card in cards:
        set_dir = root / set_for(card)
        set_dir.mkdir(parents=True, exist_ok=True)
        with open(set_dir / f"{card['id']}.json", "w", encoding="utf-8") as f:
            json.dump(card, f)
    return root


# ─── PostgREST Doubles ───────────────────────────────────────────

class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    """Chainable stand-in for a supabase-py request builder.

    Every builder call is appended to `calls` as (method, *args). A `not_`
    access is recorded as ("not_",) before the negated call.
    """

    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.calls = []
        self.window = None

    def _record(self, name, *args):
        self.calls.append((name, *args))
        return self

    def table(self, name):
        return self._record("table", name)

    def select(self, columns):
        return self._record("select", columns)

    def or_(self, expression):
        return self._record("or_", expression)

    def overlaps(self, column, values):
        return self._record("overlaps", column, values)

    def gte(self, column, value):
        return self._record("gte", column, value)

    def lte(self, column, value):
        return self._record("lte", column, value)

    def is_(self, column, value):
        return self._record("is_", column, value)

    @property
    def not_(self):
        return self._record("not_")

    def order(self, column):
        return self._record("order", column)

    def range(self, start, end):
        self.window = (start, end)
        return self._record("range", start, end)

    def execute(self):
        self.calls.append(("execute",))
        if self.error is not None:
            raise self.error
        if self.window is None:
            return FakeResponse(self.rows)
        start, end = self.window
        return FakeResponse(self.rows[start:end + 1])


def card_to_row(card, row_id=1):
    """Shape a clean card the way the hosted table returns it."""
    row = dict(card)
    row["card_id"] = row.pop("id")
    row["id"] = row_id
    row["created_at"] = "2025-11-20T10:00:00+00:00"
    row["updated_at"] = "2025-11-20T10:00:00+00:00"
    return row


# ─── Service Account ─────────────────────────────────────────────

def make_rsa_key():
    """Throwaway RSA key pair: (private PEM str, public key object)."""
    from cryptography.hazmat.primitives import serialization
    from cryptography.hazmat.primitives.asymmetric import rsa

    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii")
    return pem, key.public_key()


def make_service_account_json(private_key, escape_newlines=False, **overrides):
    """GA_SERVICE_ACCOUNT_JSON value for a key, optionally with literal \\n sequences."""
    account = {
        "type": "service_account",
        "client_email": "dashboard@punk-records.iam.gserviceaccount.com",
        "private_key": private_key,
    }
    account.update(overrides)
    raw = json.dumps(account)
    if escape_newlines:
        # Double-encoded form: the JSON string holds backslash-n, not newline escapes
        raw = raw.replace("\\n", "\\\\n")
    return raw


# ─── HTTP Doubles ────────────────────────────────────────────────

class FakeHTTPResponse:
    def __init__(self, status_code=200, payload=None, text=None, reason="OK"):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)
        self.reason = reason

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class FakeSession:
    """Records POSTs and answers from a url → response (or callable) map."""

    def __init__(self, routes):
        self.routes = routes
        self.posts = []

    def post(self, url, data=None, json=None, headers=None, timeout=None):
        self.posts.append({"url": url, "data": data, "json": json, "headers": headers})
        answer = self.routes[url]
        if callable(answer):
            return answer(json)
        return answer

    def close(self):
        pass
