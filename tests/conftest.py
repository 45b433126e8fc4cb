"""Shared fixtures for jsonns tests."""

import json
from pathlib import Path

import pytest

from jsonns.context import Context
from jsonns.processor import Processor

FIXTURES_DIR = Path(__file__).parent / "fixtures"
CASES_DIR = FIXTURES_DIR / "cases"


# ---------------------------------------------------------------------------
# Contexts
# ---------------------------------------------------------------------------


@pytest.fixture()
def schema_context():
    """A context with a schema: prefix, a default namespace and a language."""
    return Context.from_value(
        {
            "@vocab": "http://example.com/ns#",
            "@language": "en",
            "schema": "http://schema.org/",
            "fullName": {"@id": "schema:name"},
            "title": {"@container": "@language"},
        }
    )


@pytest.fixture()
def processor():
    """A processor that rewords schema.org IRIs to the schema: prefix."""
    return Processor().add_rule("schema", "http://schema.org/")


# ---------------------------------------------------------------------------
# Sample documents
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_doc():
    """A small document using inline prefixes, aliases and a language map."""
    with open(FIXTURES_DIR / "sample-doc.json") as f:
        return json.load(f)


@pytest.fixture(params=sorted(CASES_DIR.glob("*.txt")), ids=lambda p: p.stem)
def case_path(request):
    """Parametrized fixture for each plain-text processing case."""
    return request.param
