def test_socket_connect_and_join(sio_client):
    # Ensure we are connected to /ws
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')

    # Flush any initial events
    sio_client.get_received('/ws')

    sio_client.emit('join_game', {}, namespace='/ws')
    received = sio_client.get_received('/ws')
    names = [pkt['name'] for pkt in received]
    assert 'joined' in names
    state = next(pkt for pkt in received if pkt['name'] == 'state_update')['args'][0]
    assert state['round'] is None


def test_ping_pong(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'pong' and pkt['args'][0] == {'n': 1} for pkt in received)


def test_player_receives_round_and_playback_events(sio_client, client):
    sio_client.emit('join_game', {}, namespace='/ws')
    sio_client.get_received('/ws')  # flush

    client.post('/api/game/start')
    client.post('/api/game/exposure', json={'level': 0})
    events = sio_client.get_received('/ws')
    names = [e['name'] for e in events]
    assert 'state_update' in names
    start = next(e for e in events if e['name'] == 'playback_start')['args'][0]
    assert start['seconds'] == 1
    assert start['position'] == 0

    client.post('/api/game/reveal')
    names = [e['name'] for e in sio_client.get_received('/ws')]
    assert 'playback_stop' in names


def test_leave_game(sio_client):
    sio_client.emit('join_game', {}, namespace='/ws')
    sio_client.emit('leave_game', {}, namespace='/ws')
    names = [e['name'] for e in sio_client.get_received('/ws')]
    assert 'left' in names
