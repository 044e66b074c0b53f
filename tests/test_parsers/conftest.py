"""Shared fixtures for parser tests."""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def reference_txt():
    return (FIXTURES_DIR / "reference.txt").read_bytes()


@pytest.fixture
def reference_json():
    return (FIXTURES_DIR / "reference.json").read_bytes()


@pytest.fixture
def exhausted_txt():
    """Two candidates, three ballots that rank nobody."""
    return (FIXTURES_DIR / "exhausted.txt").read_bytes()
