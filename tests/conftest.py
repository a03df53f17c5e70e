"""
Shared fixtures: dialects and formatters used across the test modules.
"""
import json

import pytest

from mmlformat.core.formatter import Formatter
from mmlformat.utils.dialect import Dialect


# A dialect with every feature switched on. Properties are chosen so that
# the expected HTML in the tests stays short.
FULL_DIALECT = {
    "name": "test",
    "description": "Everything enabled",
    "section": {"prop": ""},
    "paragraph": {"prop": ""},
    "quotations": {"prop": "quote"},
    "smartquotes": True,
    "softhyphens": True,
    "codeblocks": [{"prop": "code1"}, {"prop": "code2"}],
    "headings": [{"tag": "=", "prop": "h1"}, {"tag": "-", "prop": "h2"}],
    "dividers": [{"tag": "***", "prop": "stars"}],
    "charformats": [{"tag": "*", "prop": "italics"}, {"tag": "`", "prop": "spaced"}],
    "paraformats": [{"leftTag": "->", "rightTag": "<-", "prop": "centered"}],
    "milestones": [{"leftTag": "[[", "rightTag": "]]", "prop": "page"}],
}


@pytest.fixture
def dialect_data():
    """A fresh copy of the full dialect document."""
    return json.loads(json.dumps(FULL_DIALECT))


@pytest.fixture
def dialect(dialect_data):
    return Dialect.from_dict(dialect_data)


@pytest.fixture
def formatter(dialect):
    return Formatter(dialect, check_html=True)


@pytest.fixture
def plain_formatter():
    """A formatter with no features configured at all."""
    return Formatter(Dialect())


@pytest.fixture
def dialect_file(tmp_path, dialect_data):
    path = tmp_path / "dialect.json"
    path.write_text(json.dumps(dialect_data), encoding="utf-8")
    return path
