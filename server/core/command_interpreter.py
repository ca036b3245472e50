"""
CommandInterpreter: the shell side of the terminal.

Collects printable keys into an input line, and on Enter splits the line
into a command and arguments and dispatches it. The only command with a
side effect outside the shell is `game <name>`, which asks the session to
launch a cartridge.
"""

import logging
from typing import Dict, List, Callable, Tuple, TYPE_CHECKING

from .render_surface import OutputLine, RenderSurface
from ..games.keys import KEY_ENTER, KEY_BACKSPACE, is_printable

if TYPE_CHECKING:
    from .session_controller import SessionController
    from ..games.game_registry import GameRegistry

logger = logging.getLogger(__name__)

HELP_TEXT = """
 AVAILABLE COMMANDS
 ──────────────────
 game        - Play games (snake/defender/tetris)
 clear       - Clear screen
 echo        - Print text
 history     - Show command history
 ls          - List files
 cat         - Read a file
 whoami      - Who are you?
 help        - Show this message
"""


class CommandInterpreter:
    """
    Line editor plus command dispatch table.

    Class Attributes:
        COMMANDS: Mapping of command name -> handler method name
    """

    COMMANDS: Dict[str, str] = {
        'help': 'cmd_help',
        'clear': 'cmd_clear',
        'game': 'cmd_game',
        'whoami': 'cmd_whoami',
        'ls': 'cmd_ls',
        'echo': 'cmd_echo',
        'sudo': 'cmd_sudo',
        'history': 'cmd_history',
        'cat': 'cmd_cat',
    }

    def __init__(self, session: 'SessionController', registry: 'GameRegistry',
                 surface: RenderSurface, prompt: str = "guest@terminal:~$"):
        self.session = session
        self.registry = registry
        self.surface = surface
        self.prompt = prompt
        self.buffer: str = ''
        self.history: List[str] = []

    # =========================================================================
    # Line editing
    # =========================================================================

    def handle_key(self, key: str) -> None:
        """Apply one key symbol to the input line; unknown keys are ignored."""
        if key == KEY_ENTER:
            line = self.buffer
            self.buffer = ''
            self.refresh_prompt()
            self.execute(line)
        elif key == KEY_BACKSPACE:
            self.buffer = self.buffer[:-1]
            self.refresh_prompt()
        elif is_printable(key):
            self.buffer += key
            self.refresh_prompt()
        else:
            logger.debug(f"Shell ignored key: {key!r}")

    def refresh_prompt(self) -> None:
        self.surface.update_prompt(self.buffer)

    # =========================================================================
    # Dispatch
    # =========================================================================

    @staticmethod
    def parse(line: str) -> Tuple[str, List[str]]:
        """Split a line into a lowercase command token and argument tokens."""
        tokens = line.strip().lower().split()
        if not tokens:
            return '', []
        return tokens[0], tokens[1:]

    def execute(self, line: str) -> None:
        """Run one submitted line."""
        line = line.strip()
        if not line:
            return

        self.history.append(line)
        self.surface.write(f"{self.prompt} {line}", 'command')

        cmd, args = self.parse(line)
        handler_name = self.COMMANDS.get(cmd)
        if handler_name is None:
            self.surface.write(f"Command not found: {cmd}. Type 'help' for available commands.", 'error')
            return

        handler: Callable[[List[str]], None] = getattr(self, handler_name)
        handler(args)

    # =========================================================================
    # Built-in commands
    # =========================================================================

    def cmd_help(self, args):
        self.surface.write(HELP_TEXT)

    def cmd_clear(self, args):
        self.surface.clear_screen()

    def cmd_game(self, args):
        if not args:
            lines = [OutputLine('Available Games:', 'highlight')]
            for game_class in self.registry.get_all_games():
                lines.append(OutputLine(f"  game {game_class.GAME_ID:<9}({game_class.GAME_NAME})", 'info'))
            lines.append(OutputLine('Usage: game [name]', 'highlight'))
            self.surface.write_lines(lines)
            return

        name = args[0]
        game_class = self.registry.get_game(name)
        if game_class is None:
            names = ', '.join(f"'{cls.GAME_ID}'" for cls in self.registry.get_all_games())
            self.surface.write(f"Game '{name}' not found. Try one of {names}.", 'error')
            return

        self.surface.write(game_class.START_MESSAGE or f"Starting {game_class.GAME_NAME}...", 'highlight')
        if not self.session.launch(game_class):
            self.surface.write('A game is already running.', 'error')

    def cmd_whoami(self, args):
        self.surface.write('guest', 'highlight')

    def cmd_ls(self, args):
        files = [f"{cls.GAME_ID}.exe" for cls in self.registry.get_all_games()]
        self.surface.write('  '.join(['readme.txt'] + files))

    def cmd_echo(self, args):
        self.surface.write(' '.join(args))

    def cmd_sudo(self, args):
        self.surface.write('Nice try, but you need root privileges for that!', 'error')

    def cmd_history(self, args):
        self.surface.write_lines([
            OutputLine(f"{index:>4}  {entry}")
            for index, entry in enumerate(self.history, start=1)
        ])

    def cmd_cat(self, args):
        if args:
            self.surface.write(f"Reading {args[0]}... Nothing here but games. Try 'game' instead.", 'info')
