"""Shared fixtures for npm-lockfile tests."""

from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir():
    """Directory holding the sample lockfiles."""
    return FIXTURES


@pytest.fixture
def read_fixture():
    """Return the text of a sample lockfile, e.g. read_fixture("v3")."""

    def _read(name: str) -> str:
        return (FIXTURES / name / "package-lock.json").read_text(encoding="utf-8")

    return _read
