"""
Retro Terminal - Main Flask Application
Entry point for the web terminal server: one shell session, playable games.
"""

import os
import atexit
import logging
import argparse
from flask import Flask, jsonify, send_from_directory
from flask_socketio import SocketIO

from server.core.render_surface import SocketIORenderSurface
from server.core.session_controller import SessionController
from server.games.game_registry import GameRegistry
from server.games import ALL_GAMES
from events import register_events

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Initialize Flask app
# Point to 'dist' folder for the static terminal page.
app = Flask(__name__, static_folder='dist', static_url_path='')
app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'retro-terminal-secret-key')

# Game clocks are threading.Timer based, so Socket.IO runs in threading mode
socketio = SocketIO(app, cors_allowed_origins="*", async_mode='threading')

# Initialize System
game_registry = GameRegistry()

# Register Games
for game_class in ALL_GAMES:
    game_registry.register(game_class)

surface = SocketIORenderSurface(socketio)
session = SessionController(
    surface,
    game_registry,
    prompt=os.environ.get('TERMINAL_PROMPT', 'guest@terminal:~$'),
)

# Register Socket.IO event handlers
register_events(socketio, session)

# No game timer may outlive the process
atexit.register(session.shutdown)


# =============================================================================
# HTTP ROUTES
# =============================================================================

@app.route('/')
def index():
    """Terminal page."""
    return send_from_directory(app.static_folder, 'terminal.html')


@app.route('/health')
def health():
    """Health check endpoint."""
    return {
        'status': 'ok',
        'session': session.get_status(),
        'games_count': len(game_registry.get_all_games())
    }


@app.route('/api/games')
def get_games():
    """List playable games."""
    return jsonify(game_registry.describe())


# =============================================================================
# MAIN
# =============================================================================

def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='Retro Terminal Server',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment variables:
    SECRET_KEY       - Flask session secret
    TERMINAL_PORT    - Default port when --port is not given
    TERMINAL_PROMPT  - Shell prompt shown before echoed commands
        """
    )
    parser.add_argument(
        '--port',
        type=int,
        default=int(os.environ.get('TERMINAL_PORT', 8080)),
        help='Server port (default: 8080)'
    )
    parser.add_argument(
        '--no-debug',
        action='store_true',
        help='Disable debug mode'
    )
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_args()

    logger.info("Starting Retro Terminal Server...")
    logger.info(f"Terminal: http://<your-ip>:{args.port}/")

    socketio.run(
        app,
        host='0.0.0.0',
        port=args.port,
        debug=not args.no_debug,
        use_reloader=False,
        allow_unsafe_werkzeug=True
    )
