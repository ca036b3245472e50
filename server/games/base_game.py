"""
Base game interface for the Cartridge system.

All game cartridges inherit from BaseGame and implement the required methods.
This keeps the terminal (Console) ignorant of any game rules: the session
only ever talks to the uniform start / handle_input / tick / render / stop
contract defined here.
"""

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Tuple

from .keys import KEY_ENTER, QUIT_KEYS
from ..core.clock import TickClock
from ..core.render_surface import RenderSurface

logger = logging.getLogger(__name__)

# (x, y) grid coordinate; x in [0, WIDTH), y in [0, HEIGHT)
Cell = Tuple[int, int]


@dataclass
class EngineContext:
    """
    Everything a cartridge needs from the platform.

    Attributes:
        on_exit: Called with the engine exactly once when it hands control back
        clock: The periodic scheduler driving tick()
        surface: Where frames are drawn
        rng: Random source (seed it for deterministic play)
    """
    on_exit: Callable[['BaseGame'], None]
    clock: TickClock
    surface: RenderSurface
    rng: random.Random = field(default_factory=random.Random)


class BaseGame(ABC):
    """
    Abstract base class for all game cartridges.

    Games inherit from this class and implement:
    - _handle_play_input(): Key handling while the game is running
    - _step(): Advance the simulation by one tick
    - _board_lines(): Text rows of the board, borders included

    Class Attributes:
        GAME_ID: Name used by the `game` command (e.g., 'snake')
        GAME_NAME: Human-readable name (e.g., 'Classic Snake')
        WIDTH / HEIGHT: Fixed board dimensions
        INITIAL_TICK_MS: Starting tick interval
        CONTROLS: Footer hint shown under the board
    """

    GAME_ID: str = ""
    GAME_NAME: str = ""
    START_MESSAGE: str = ""
    WIDTH: int = 0
    HEIGHT: int = 0
    INITIAL_TICK_MS: int = 100
    CONTROLS: str = ""
    GAME_OVER_BANNER = "GAME OVER! Press ENTER to exit."

    def __init__(self, context: EngineContext):
        """
        Initialize the game with access to the platform context.

        Args:
            context: Exit callback, clock, render surface and random source
        """
        self.context = context
        self.clock = context.clock
        self.surface = context.surface
        self.rng = context.rng

        self.score: int = 0
        self.tick_interval_ms: int = self.INITIAL_TICK_MS
        self.is_over: bool = False

        self._started = False
        self._stopped = False
        self._exited = False

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Start the tick clock and draw the first frame."""
        if self._started:
            raise RuntimeError(f"{self.GAME_ID} already started")
        self._started = True
        if not self.is_over:
            self.clock.start(self.tick_interval_ms, self.tick)
        self.render()
        logger.info(f"Game started: {self.GAME_ID} ({self.tick_interval_ms}ms tick)")

    def stop(self) -> None:
        """Halt the clock and release the frame. Safe to call repeatedly."""
        self.clock.stop()
        if self._stopped:
            return
        self._stopped = True
        self.surface.clear_frame()

    def exit(self) -> None:
        """Stop and hand control back to the shell (once)."""
        self.stop()
        if self._exited:
            return
        self._exited = True
        logger.info(f"Game exited: {self.GAME_ID} (score {self.score})")
        self.context.on_exit(self)

    def game_over(self) -> None:
        """Freeze the game and show the final frame until acknowledged."""
        if self.is_over:
            return
        self.is_over = True
        self.clock.stop()
        logger.info(f"Game over: {self.GAME_ID} (score {self.score})")
        self.render()

    def restart_clock(self, interval_ms: int) -> None:
        """Cancel the scheduled tick and re-arm at a new interval."""
        self.tick_interval_ms = interval_ms
        self.clock.restart(interval_ms)

    # =========================================================================
    # Input and simulation
    # =========================================================================

    def handle_input(self, key: str) -> None:
        """
        Apply a single key symbol.

        While over, only Enter is recognised (acknowledge and exit). While
        running, quit keys exit immediately and everything else goes to the
        game's own handler. Unknown keys are ignored.
        """
        if self._stopped:
            return

        if self.is_over:
            if key == KEY_ENTER:
                self.exit()
            return

        if key in QUIT_KEYS:
            self.exit()
            return

        if self._handle_play_input(key):
            self.render()

    def tick(self) -> None:
        """Advance one step; render unless the step ended the game."""
        if self.is_over or self._stopped:
            return
        self._step()
        if not self.is_over:
            self.render()

    @abstractmethod
    def _handle_play_input(self, key: str) -> bool:
        """
        Handle a key while the game is running.

        Returns:
            True if the frame should be redrawn immediately
        """
        pass

    @abstractmethod
    def _step(self) -> None:
        """Advance the simulation by exactly one tick."""
        pass

    # =========================================================================
    # Rendering
    # =========================================================================

    @abstractmethod
    def _board_lines(self) -> List[str]:
        """Rows of the board as text, borders included."""
        pass

    def status_line(self) -> str:
        return f" Score: {self.score} | {self.CONTROLS}"

    def frame(self) -> str:
        """Full text snapshot of the current state (no side effects)."""
        text = '\n'.join(self._board_lines()) + '\n' + self.status_line()
        if self.is_over:
            text += f"\n\n {self.GAME_OVER_BANNER}"
        return text

    def render(self) -> str:
        """Publish the current snapshot to the surface and return it."""
        text = self.frame()
        if not self._stopped:
            self.surface.show_frame(self.GAME_ID, text)
        return text

    def get_status(self) -> dict:
        return {
            'game': self.GAME_ID,
            'score': self.score,
            'is_over': self.is_over,
            'tick_interval_ms': self.tick_interval_ms,
        }

    def in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.WIDTH and 0 <= y < self.HEIGHT

    def random_cell(self) -> Cell:
        return (self.rng.randrange(self.WIDTH), self.rng.randrange(self.HEIGHT))
