"""
SessionController: decides who owns the keyboard - the shell or a game.

This is the 'Console' side of the Console and Cartridge architecture. It
holds at most one active game engine, routes every key symbol to exactly
one consumer, and hands focus back to the shell when the engine exits.
"""

import logging
import random
import threading
from enum import Enum
from typing import Callable, Optional

from .clock import TickClock, TimerClock
from .command_interpreter import CommandInterpreter
from .render_surface import RenderSurface
from ..games.base_game import BaseGame, EngineContext
from ..games.game_registry import GameRegistry

logger = logging.getLogger(__name__)

EngineFactory = Callable[[EngineContext], BaseGame]


class Mode(Enum):
    """Which component currently has focus."""
    SHELL = "SHELL"
    GAME = "GAME"


class SessionController:
    """
    Process-wide terminal session.

    Invariants:
    - mode is GAME exactly when active_engine is set
    - input, ticks and the exit hand-back all run under one re-entrant lock,
      so no key is ever delivered to an engine that has already exited

    The lock is re-entrant because an engine exits from inside its own
    handle_input, which is already running under the lock.
    """

    def __init__(self, surface: RenderSurface, registry: GameRegistry,
                 clock_factory: Optional[Callable[[], TickClock]] = None,
                 rng_factory: Optional[Callable[[], random.Random]] = None,
                 prompt: str = "guest@terminal:~$"):
        self._lock = threading.RLock()
        self.surface = surface
        self.registry = registry

        self.mode: Mode = Mode.SHELL
        self.active_engine: Optional[BaseGame] = None

        self.clock_factory = clock_factory or (lambda: TimerClock(self._lock))
        self.rng_factory = rng_factory or random.Random
        self.interpreter = CommandInterpreter(self, registry, surface, prompt=prompt)

        logger.info("SessionController initialized in SHELL mode.")

    def launch(self, engine_factory: EngineFactory) -> bool:
        """
        Build an engine, give it focus and start its clock.

        Returns:
            True if the game started, False if a game is already running
        """
        with self._lock:
            if self.mode is Mode.GAME:
                logger.warning(f"Launch rejected: {self.active_engine.GAME_ID} is already running")
                return False

            context = EngineContext(
                on_exit=self.on_engine_exit,
                clock=self.clock_factory(),
                surface=self.surface,
                rng=self.rng_factory(),
            )
            engine = engine_factory(context)

            self.active_engine = engine
            self.mode = Mode.GAME
            self.surface.set_mode(Mode.GAME.value)

            try:
                engine.start()
            except Exception as e:
                logger.exception(f"Error starting game {engine.GAME_ID}: {e}")
                engine.stop()
                self._restore_shell()
                return False

            logger.info(f"Transitioned SHELL -> GAME ({engine.GAME_ID})")
            return True

    def route_input(self, key: str) -> None:
        """Deliver one key symbol to whichever component has focus."""
        with self._lock:
            if self.mode is Mode.GAME and self.active_engine is not None:
                self.active_engine.handle_input(key)
            else:
                self.interpreter.handle_key(key)

    def submit_line(self, line: str) -> bool:
        """
        Run a whole shell line at once (pasted text, mobile keyboards).

        Returns:
            False if a game has focus and the line was dropped
        """
        with self._lock:
            if self.mode is Mode.GAME:
                logger.debug("Dropping shell line while a game has focus")
                return False
            self.interpreter.execute(line)
            return True

    def current_frame(self) -> Optional[str]:
        with self._lock:
            if self.active_engine is None:
                return None
            return self.active_engine.frame()

    def on_engine_exit(self, engine: BaseGame) -> None:
        """
        Exit callback handed to every engine.

        Callbacks from anything other than the current engine are ignored.
        """
        with self._lock:
            if engine is not self.active_engine:
                logger.debug(f"Ignoring exit from inactive engine {engine.GAME_ID}")
                return

            engine.stop()
            self._restore_shell()
            self.surface.write('Game terminated.', 'info')
            self.interpreter.refresh_prompt()
            logger.info(f"Transitioned GAME ({engine.GAME_ID}) -> SHELL, final score {engine.score}")

    def _restore_shell(self) -> None:
        self.active_engine = None
        self.mode = Mode.SHELL
        self.surface.set_mode(Mode.SHELL.value)

    def shutdown(self) -> None:
        """Stop any running game without the shell hand-back message."""
        with self._lock:
            if self.active_engine is not None:
                self.active_engine.stop()
                self._restore_shell()

    def get_status(self) -> dict:
        """Snapshot for health checks and client sync."""
        with self._lock:
            status = {
                'mode': self.mode.value,
                'game': None,
                'score': None,
                'is_over': None,
            }
            if self.active_engine is not None:
                status.update(self.active_engine.get_status())
            return status
