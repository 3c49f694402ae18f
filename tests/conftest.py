"""
Pytest configuration and fixtures for quicksheet tests.
"""

from pathlib import Path
from typing import List

import pytest

from quicksheet.models import Item, ItemKind, Preferences

# 2025-01-01T00:00:00Z in ms
NOW_MS = 1_735_689_600_000
DAY_MS = 86_400_000


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "tui: marks TUI tests")


@pytest.fixture
def temp_state_dir(tmp_path: Path, monkeypatch) -> Path:
    """Create and return a temporary state directory.

    Sets QUICKSHEET_STATE / QUICKSHEET_CONFIG / QUICKSHEET_SETTINGS and
    resets the debug logger so it picks up the new paths.
    """
    state_dir = tmp_path / ".local" / "state" / "quicksheet"
    state_dir.mkdir(parents=True)
    config_dir = tmp_path / ".config" / "quicksheet"
    config_dir.mkdir(parents=True)
    monkeypatch.setenv("QUICKSHEET_STATE", str(state_dir))
    monkeypatch.setenv("QUICKSHEET_CONFIG", str(config_dir))
    monkeypatch.setenv("QUICKSHEET_SETTINGS", str(config_dir / "settings.json"))
    monkeypatch.delenv("QUICKSHEET_DEBUG", raising=False)

    from quicksheet.debug_logger import reset_logger
    reset_logger()

    return state_dir


@pytest.fixture(autouse=True)
def isolate_state_dir(temp_state_dir: Path):
    """Autouse fixture so no test touches the real ~/.local/state/quicksheet."""
    yield temp_state_dir

    from quicksheet.debug_logger import reset_logger
    reset_logger()


@pytest.fixture
def settings_path(temp_state_dir: Path, tmp_path: Path) -> Path:
    return tmp_path / ".config" / "quicksheet" / "settings.json"


def _make_item(id, name=None, category="Dynamics", popularity=None, rank=None, **kwargs) -> Item:
    """Create an Item with sensible defaults for testing."""
    return Item(
        id=id,
        kind=kwargs.pop("kind", ItemKind.EQUATION),
        name=name or id,
        category=category,
        popularity=popularity,
        rank=rank,
        **kwargs,
    )


@pytest.fixture
def constants() -> List[Item]:
    """The two-constant scenario: g (pop 10, rank 1) and k_B (pop 5, rank 2)."""
    return [
        _make_item("g", "Standard gravity", category="Constants", popularity=10, rank=1,
                  kind=ItemKind.CONSTANT, symbol="g", value="9.80665", units="m s^-2"),
        _make_item("k_B", "Boltzmann constant", category="Constants", popularity=5, rank=2,
                  kind=ItemKind.CONSTANT, symbol="k_B", value="1.380649e-23", units="J K^-1"),
    ]


@pytest.fixture
def default_prefs() -> Preferences:
    return Preferences()


@pytest.fixture
def clock():
    """Controllable clock returning NOW_MS until advanced."""

    class Clock:
        def __init__(self):
            self.now = NOW_MS

        def __call__(self) -> int:
            return self.now

        def advance_days(self, days: float) -> None:
            self.now += int(days * DAY_MS)

    return Clock()
