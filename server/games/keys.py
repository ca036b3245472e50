"""Named key symbols shared by the shell and the game cartridges."""

KEY_UP = 'ArrowUp'
KEY_DOWN = 'ArrowDown'
KEY_LEFT = 'ArrowLeft'
KEY_RIGHT = 'ArrowRight'
KEY_SPACE = ' '
KEY_ENTER = 'Enter'
KEY_ESCAPE = 'Escape'
KEY_BACKSPACE = 'Backspace'

# 'c' stands in for Ctrl+C inside a game
QUIT_KEYS = frozenset({KEY_ESCAPE, 'c'})

# Touch controls on the page map 1:1 onto the keyboard feed
MOBILE_BUTTONS = {
    'up': KEY_UP,
    'down': KEY_DOWN,
    'left': KEY_LEFT,
    'right': KEY_RIGHT,
    'fire': KEY_SPACE,
    'enter': KEY_ENTER,
    'exit': KEY_ESCAPE,
}


def is_printable(key: str) -> bool:
    """True for a single printable character (shell text entry)."""
    return isinstance(key, str) and len(key) == 1 and key.isprintable()
