"""Shared fixtures: sample workflows under tests/fixtures."""

from pathlib import Path

import pytest

FIXTURES = Path(__file__).resolve().parent / "fixtures"


def load_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


@pytest.fixture
def main_xaml() -> str:
    """Sequence with variables, arguments, an Assign and an If (persistent ids)."""
    return load_fixture("main.xaml")


@pytest.fixture
def automation_xaml() -> str:
    """MultipleAssign plus UI automation inside an ActivityAction (no ids)."""
    return load_fixture("automation.xaml")
