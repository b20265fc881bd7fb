"""Shared test fixtures for the changewriter test suite."""

from __future__ import annotations

from typing import Any

import pytest

# ---------------------------------------------------------------------------
# Commit and note fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def grouped_commits() -> list[dict[str, Any]]:
    """Three commits across two ``groupBy`` values."""
    return [
        {"groupBy": "A", "content": "this is A"},
        {"groupBy": "A", "content": "this is another A"},
        {"groupBy": "Big B", "content": "this is B and its a bit longer"},
    ]


@pytest.fixture()
def partly_grouped_commits() -> list[dict[str, Any]]:
    """Two commits without ``groupBy`` followed by one with it."""
    return [
        {"content": "this is A"},
        {"content": "this is another A"},
        {"groupBy": "Big B", "content": "this is B and its a bit longer"},
    ]


@pytest.fixture()
def notes() -> list[dict[str, str]]:
    """Interleaved notes under three titles."""
    return [
        {"title": "A title", "text": "this is A and its a bit longer"},
        {"title": "B+", "text": "this is B"},
        {"title": "C", "text": "this is C"},
        {"title": "A title", "text": "this is another A"},
        {"title": "B+", "text": "this is another B"},
    ]


@pytest.fixture()
def revert_history() -> list[dict[str, Any]]:
    """A revert, the commit it reverts, and two unrelated commits.

    Stored hashes carry a trailing newline as emitted by ``git log``; the
    revert reference does not, so matching has to be by prefix.
    """
    return [
        {
            "header": "revert: feat(): amazing new module\n",
            "body": "This reverts commit 56185b7356766d2b30cfa2406b257080272e0b7a.\n",
            "footer": None,
            "notes": [],
            "references": [],
            "revert": {
                "header": "feat(): amazing new module",
                "hash": "56185b7356766d2b30cfa2406b257080272e0b7a",
            },
            "hash": "789d898b5f8422d7f65cc25135af2c1a95a125ac\n",
        },
        {
            "header": "feat(): amazing new module\n",
            "body": None,
            "footer": "BREAKING CHANGE: Not backward compatible.\n",
            "notes": [],
            "references": [],
            "revert": None,
            "hash": "56185b7356766d2b30cfa2406b257080272e0b7a\n",
        },
        {
            "header": "feat(): new feature\n",
            "body": None,
            "footer": None,
            "notes": [],
            "references": [],
            "revert": None,
            "hash": "815a3f0717bf1dfce007bd076420c609504edcf3\n",
        },
        {
            "header": "chore: first commit\n",
            "body": None,
            "footer": None,
            "notes": [],
            "references": [],
            "revert": None,
            "hash": "74a3e4d6d25dee2c0d6483a0a3887417728cbe0a\n",
        },
    ]


@pytest.fixture()
def conventional_commits() -> list[dict[str, Any]]:
    """Parsed conventional commits with types and a breaking-change note."""
    return [
        {
            "type": "Features",
            "header": "feat: add login",
            "hash": "aaa1111111111111111111111111111111111111",
            "notes": [{"title": "BREAKING CHANGES", "text": "sessions reset"}],
        },
        {
            "type": "Bug Fixes",
            "header": "fix: handle empty password",
            "hash": "bbb2222222222222222222222222222222222222",
            "notes": [],
        },
        {
            "type": "Features",
            "header": "feat: add logout",
            "hash": "ccc3333333333333333333333333333333333333",
            "notes": [],
        },
    ]
