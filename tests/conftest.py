"""
Pytest fixtures for terminal and cartridge tests.
"""

import random

import pytest

from server.core.clock import ManualClock
from server.core.render_surface import BufferRenderSurface
from server.core.session_controller import SessionController
from server.games import ALL_GAMES, EngineContext, GameRegistry


@pytest.fixture
def surface() -> BufferRenderSurface:
    """In-memory render surface."""
    return BufferRenderSurface()


@pytest.fixture
def clock() -> ManualClock:
    """Deterministic clock for a single engine."""
    return ManualClock()


@pytest.fixture
def exits() -> list:
    """Collects engines passed to the exit callback."""
    return []


@pytest.fixture
def context(surface, clock, exits) -> EngineContext:
    """Engine context with a seeded random source."""
    return EngineContext(on_exit=exits.append, clock=clock, surface=surface, rng=random.Random(1234))


@pytest.fixture
def registry() -> GameRegistry:
    """Registry with every shipped cartridge."""
    registry = GameRegistry()
    for game_class in ALL_GAMES:
        registry.register(game_class)
    return registry


@pytest.fixture
def clocks() -> list:
    """Every ManualClock handed out by the session fixture, in order."""
    return []


@pytest.fixture
def session(surface, registry, clocks):
    """A session whose games run on manual clocks."""
    def clock_factory():
        clock = ManualClock()
        clocks.append(clock)
        return clock

    session = SessionController(
        surface,
        registry,
        clock_factory=clock_factory,
        rng_factory=lambda: random.Random(7),
    )
    yield session
    session.shutdown()
