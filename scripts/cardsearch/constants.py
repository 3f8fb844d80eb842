"""Card search constants: paths, table layout and service defaults."""

from pathlib import Path

# ─── Paths ──────────────────────────────────────────────────────

SCRIPT_DIR = Path(__file__).resolve().parent.parent  # scripts/
PROJECT_DIR = SCRIPT_DIR.parent

# Card data authored outside this repo: english/cards/<set>/<card-id>.json
ENGLISH_DIR = PROJECT_DIR / "english"
CARDS_DIR = ENGLISH_DIR / "cards"

# Generated SQL import scripts land here by default
SQL_OUTPUT_DIR = PROJECT_DIR / "sql"

# Hosting layout: where the card data directory must exist after a build
ASSET_DESTINATIONS = [
    PROJECT_DIR / "build" / "server" / "assets" / "english",
    PROJECT_DIR / ".output" / "assets" / "english",
    PROJECT_DIR / "assets" / "english",
]

# ─── Card Backend ───────────────────────────────────────────────

BACKEND_SUPABASE = "supabase"
BACKEND_FILES = "files"
DEFAULT_BACKEND = BACKEND_SUPABASE

CARDS_TABLE = "cards"

# Rows per hosted request; matches Supabase's default PostgREST max-rows
QUERY_PAGE_SIZE = 1000

# Array-valued card fields, filtered with overlap semantics
LIST_FIELDS = ["colors", "attributes", "types"]

# Integer card fields, filtered with inclusive min/max bounds
RANGE_FIELDS = ["cost", "power", "counter"]

TEXT_FIELDS = ["pack_id", "rarity", "category", "img_url", "img_full_url"]

# Column order shared by the SQL INSERT and the card record
INSERT_COLUMNS = [
    "card_id", "pack_id", "name", "rarity", "category", "img_url", "img_full_url",
    "colors", "cost", "attributes", "power", "counter", "types", "effect", "trigger",
]

# Table columns that are bookkeeping, not card data
ROW_ONLY_COLUMNS = ["created_at", "updated_at"]

# ─── SQL Export ─────────────────────────────────────────────────

NUM_CHUNKS = 5
SQL_FILE_TEMPLATE = "import-cards-part-{}.sql"

# ─── Google Analytics ───────────────────────────────────────────

DEFAULT_GA_PROPERTY_ID = "514866014"
GA_API_TEMPLATE = "https://analyticsdata.googleapis.com/v1beta/properties/{}:runReport"
GA_TOKEN_URL = "https://oauth2.googleapis.com/token"
GA_SCOPE = "https://www.googleapis.com/auth/analytics.readonly"
GA_JWT_LIFETIME = 3600  # seconds

DEFAULT_DAYS = 30
REPORT_NAMES = ["overview", "acquisition", "countries", "devices"]

# Outbound HTTP timeout for token + report calls
HTTP_TIMEOUT = 30

# ─── Asset Publishing ───────────────────────────────────────────

DEFAULT_BUCKET_REGION = "auto"
DEFAULT_BUCKET_PREFIX = "english"
