from typing import List, Tuple

from songle import socketio

PLAYER_ROOM = 'player'


class SocketPlaybackDevice:
    """Drive the player's browser audio element over Socket.IO."""

    def __init__(self, namespace: str = '/ws', room: str = PLAYER_ROOM):
        self.namespace = namespace
        self.room = room

    def play(self, url: str, seconds: int) -> None:
        # Clients rewind to 0 before playing
        socketio.emit('playback_start', {'url': url, 'seconds': seconds, 'position': 0},
                      to=self.room, namespace=self.namespace)

    def stop(self) -> None:
        socketio.emit('playback_stop', {}, to=self.room, namespace=self.namespace)


class NullPlaybackDevice:
    """Records calls instead of playing anything."""

    def __init__(self):
        self.calls: List[Tuple] = []

    def play(self, url: str, seconds: int) -> None:
        self.calls.append(('play', url, seconds))

    def stop(self) -> None:
        self.calls.append(('stop',))
