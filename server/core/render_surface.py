"""
RenderSurface: the single output sink shared by the shell and the active game.

The surface has no logic of its own beyond placement. The shell writes
output lines, a game replaces the current frame with a full text snapshot.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from typing import Dict, Any, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class OutputLine:
    """
    One line of shell output.

    Attributes:
        text: The text to display (may contain embedded newlines)
        style: CSS-ish class for the client ('command', 'info', 'highlight', 'error' or '')
    """
    text: str
    style: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class RenderSurface(ABC):
    """Abstract sink the session, interpreter and games draw onto."""

    @abstractmethod
    def write_lines(self, lines: List[OutputLine]) -> None:
        """Append lines of shell output."""

    @abstractmethod
    def update_prompt(self, buffer: str) -> None:
        """Show the current contents of the shell input line."""

    @abstractmethod
    def show_frame(self, game_id: str, frame: str) -> None:
        """Replace the current game frame with a complete snapshot."""

    @abstractmethod
    def clear_frame(self) -> None:
        """Release the game frame area."""

    @abstractmethod
    def clear_screen(self) -> None:
        """Wipe all shell output."""

    @abstractmethod
    def set_mode(self, mode: str) -> None:
        """Announce which component currently owns focus ('SHELL' or 'GAME')."""

    def write(self, text: str, style: str = '') -> None:
        self.write_lines([OutputLine(text, style)])


class SocketIORenderSurface(RenderSurface):
    """Emits surface updates to connected browsers over Socket.IO."""

    def __init__(self, socketio):
        self.socketio = socketio

    def write_lines(self, lines: List[OutputLine]) -> None:
        if not lines:
            return
        self.socketio.emit('terminal_output', {'lines': [line.to_dict() for line in lines]})

    def update_prompt(self, buffer: str) -> None:
        self.socketio.emit('prompt_update', {'buffer': buffer})

    def show_frame(self, game_id: str, frame: str) -> None:
        self.socketio.emit('game_frame', {'game_id': game_id, 'frame': frame})

    def clear_frame(self) -> None:
        self.socketio.emit('game_closed', {})

    def clear_screen(self) -> None:
        self.socketio.emit('terminal_clear', {})

    def set_mode(self, mode: str) -> None:
        logger.debug(f"Surface focus -> {mode}")
        self.socketio.emit('mode_change', {'mode': mode})


class BufferRenderSurface(RenderSurface):
    """
    In-memory surface.

    Keeps the shell scrollback, the latest frame and a log of every
    operation, which is what the test-suite asserts against.
    """

    def __init__(self):
        self.lines: List[OutputLine] = []
        self.prompt: str = ''
        self.frame: Optional[str] = None
        self.frame_owner: Optional[str] = None
        self.frames_shown = 0
        self.mode: str = 'SHELL'
        self.operations: List[str] = []

    def write_lines(self, lines: List[OutputLine]) -> None:
        self.lines.extend(lines)
        self.operations.append('write_lines')

    def update_prompt(self, buffer: str) -> None:
        self.prompt = buffer

    def show_frame(self, game_id: str, frame: str) -> None:
        self.frame = frame
        self.frame_owner = game_id
        self.frames_shown += 1
        self.operations.append('show_frame')

    def clear_frame(self) -> None:
        self.frame = None
        self.frame_owner = None
        self.operations.append('clear_frame')

    def clear_screen(self) -> None:
        self.lines = []
        self.operations.append('clear_screen')

    def set_mode(self, mode: str) -> None:
        self.mode = mode
        self.operations.append(f'set_mode:{mode}')

    @property
    def texts(self) -> List[str]:
        return [line.text for line in self.lines]
