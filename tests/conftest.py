from __future__ import annotations

import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

# Make src/ importable when the package is not installed.
ROOT = TESTS_DIR.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from fixtures import BankBuilder, WorkspaceBuilder  # noqa: E402

_QUIZ_ENV = (
    "QUIZ_CLI_CONFIG",
    "QUIZ_CLI_BANK",
    "QUIZ_CLI_SEED",
    "QUIZ_CLI_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep every test away from the real ~/.quiz-cli-data."""

    home = tmp_path / "quiz-home"
    monkeypatch.setenv("QUIZ_CLI_DATA_HOME", str(home))
    for name in _QUIZ_ENV:
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    """Provide a helper bound to pytest's per-test tmp directory."""

    return WorkspaceBuilder(tmp_path)


@pytest.fixture
def bank_builder(tmp_path: Path) -> BankBuilder:
    return BankBuilder(tmp_path / "banks")
