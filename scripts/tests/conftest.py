"""Pytest conftest: import paths for cardsearch and helpers, plus shared fixtures."""

import sys
from pathlib import Path

import pytest

# scripts/ for `from cardsearch import ...`, tests/ for `from helpers import ...`
TESTS_DIR = Path(__file__).resolve().parent
for path in (TESTS_DIR.parent, TESTS_DIR):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from helpers import sample_catalogue, write_card_tree  # noqa: E402


@pytest.fixture
def catalogue_dir(tmp_path):
    """A card tree holding the five-card sample catalogue."""
    return write_card_tree(tmp_path, sample_catalogue())
