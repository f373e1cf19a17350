from flask_socketio import join_room, leave_room, emit

from songle import socketio
from songle.services.game import get_controller
from songle.services.game.playback import PLAYER_ROOM


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_game(data=None):
    join_room(PLAYER_ROOM)
    emit('joined', {'room': PLAYER_ROOM})
    # Bring the new socket up to date
    emit('state_update', get_controller().state())


def handle_leave_game(data=None):
    leave_room(PLAYER_ROOM)
    emit('left', {'room': PLAYER_ROOM})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for ns in namespaces:
        socketio.on_event('connect', handle_connect, namespace=ns)
        socketio.on_event('join_game', handle_join_game, namespace=ns)
        socketio.on_event('leave_game', handle_leave_game, namespace=ns)
        socketio.on_event('ping', handle_ping, namespace=ns)
