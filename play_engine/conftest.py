"""Shared pytest fixtures for play engine tests."""

import pytest

from play_engine.autosave import DraftAutosaver, InMemoryDraftStore
from play_engine.config import EngineSettings, RuleSettings
from play_engine.controller import InteractionController
from play_engine.model import PlayModel
from play_engine.persistence import InMemoryPlayStore


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def settings() -> EngineSettings:
    """Engine settings with the stock rule tolerances, ignoring the environment."""
    return EngineSettings(
        autosave_delay=2.0,
        history_limit=50,
        click_threshold=5.0,
        supabase_url=None,
        supabase_key=None,
        rules=RuleSettings(
            neutral_zone_buffer=5.0,
            los_tolerance=5.0,
            min_on_line=7,
            expected_linemen=5,
            tackle_box_half_width=120.0,
            max_split_ineligibles=0,
            min_defenders_in_box=6,
            box_depth=80.0,
        ),
    )


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def spread_model(settings) -> PlayModel:
    """Shotgun Spread offense, no assignments yet.

    Slot order: X, LT, LG, C, RG, RT, TE, SL, Z, QB, RB (offense-0 .. offense-10).
    """
    return PlayModel("offense", "Shotgun Spread", settings=settings)


@pytest.fixture
def doubles_model(settings) -> PlayModel:
    """Gun Doubles offense: SL is offense-7, SR is offense-8."""
    return PlayModel("offense", "Gun Doubles", settings=settings)


@pytest.fixture
def four_three_model(settings) -> PlayModel:
    """4-3 defense with no coverage applied."""
    return PlayModel("defense", "4-3", settings=settings)


@pytest.fixture
def punt_model(settings) -> PlayModel:
    """Punt unit (drawn offensive style)."""
    return PlayModel("specialTeams", "Punt", settings=settings)


def player_id(model: PlayModel, label: str) -> str:
    """Id of the first real player with ``label``."""
    return next(p.id for p in model.players if p.label == label)


@pytest.fixture
def by_label():
    """Lookup helper: by_label(model, "SL") -> "offense-7"."""
    return player_id


# =============================================================================
# Editing & Storage Fixtures
# =============================================================================


@pytest.fixture
def controller(spread_model) -> InteractionController:
    """Interaction controller driving the spread model."""
    return InteractionController(spread_model)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def draft_store() -> InMemoryDraftStore:
    return InMemoryDraftStore()


@pytest.fixture
def autosaver(draft_store, clock) -> DraftAutosaver:
    """Autosaver with a 2 second debounce on the fake clock."""
    return DraftAutosaver(draft_store, key="team-1", delay=2.0, clock=clock)


@pytest.fixture
def play_store() -> InMemoryPlayStore:
    return InMemoryPlayStore(team_id="team-1")
