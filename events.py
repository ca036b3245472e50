"""
Socket.IO Event Handlers for the web terminal.
Every key the browser sends is handed to the SessionController, which is the
only place that decides whether the shell or the active game receives it.
"""

import logging
from flask import request
from flask_socketio import emit

from server.games.keys import MOBILE_BUTTONS

logger = logging.getLogger(__name__)

# Global references
session = None
socketio = None


def register_events(sio, session_controller):
    """Register all Socket.IO event handlers."""
    global socketio, session
    socketio = sio
    session = session_controller

    sio.on_event('connect', on_connect)
    sio.on_event('disconnect', on_disconnect)
    sio.on_event('request_sync', on_request_sync)

    # Input boundary
    sio.on_event('key_input', on_key_input)
    sio.on_event('mobile_control', on_mobile_control)
    sio.on_event('command', on_command)

    logger.info("Socket.IO events registered")


def _route(key):
    """Hand a key to the session; report unexpected failures to the sender."""
    try:
        session.route_input(key)
    except Exception as e:
        logger.exception(f"Error routing key {key!r}: {e}")
        emit('error', {'code': 'INPUT_ERROR', 'message': str(e)})


# =============================================================================
# PLATFORM HANDLERS
# =============================================================================

def on_connect():
    logger.info(f"Client connected: {request.sid}")
    emit('session_status', session.get_status())


def on_disconnect():
    # Just log it
    logger.info(f"Client disconnected: {request.sid}")


def on_request_sync(data=None):
    """Resend focus, input line and the current frame to a (re)connected client."""
    status = session.get_status()
    emit('session_status', status)
    emit('mode_change', {'mode': status['mode']})
    emit('prompt_update', {'buffer': session.interpreter.buffer})
    frame = session.current_frame()
    if frame is not None:
        emit('game_frame', {'game_id': status['game'], 'frame': frame})


# =============================================================================
# INPUT HANDLERS
# =============================================================================

def on_key_input(data):
    key = (data or {}).get('key')
    if not isinstance(key, str) or not key:
        logger.debug(f"Dropping malformed key_input payload: {data!r}")
        return
    _route(key)


def on_mobile_control(data):
    """Touch buttons map 1:1 onto the named-key feed."""
    button = (data or {}).get('button', '')
    key = MOBILE_BUTTONS.get(button)
    if key is None:
        logger.debug(f"Unknown mobile button: {button!r}")
        return
    _route(key)


def on_command(data):
    """Submit a whole line at once."""
    line = (data or {}).get('line', '')
    if not isinstance(line, str):
        return
    try:
        session.submit_line(line)
    except Exception as e:
        logger.exception(f"Error executing command {line!r}: {e}")
        emit('error', {'code': 'COMMAND_ERROR', 'message': str(e)})
