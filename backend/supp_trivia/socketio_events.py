from flask_socketio import join_room, leave_room, emit
from flask import current_app

from supp_trivia import socketio
from supp_trivia.store import RoomStore, room_channel


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_subscribe(data):
    """Start receiving `room_update` pushes for a room.

    The current document is sent right away so the client never waits for
    the next write to render.
    """
    code = ((data or {}).get('code') or '').upper()
    if not code:
        emit('error', {'message': 'code is required'})
        return
    room = RoomStore().get(code)
    if room is None:
        emit('error', {'message': 'Sala não encontrada', 'code': code})
        return
    join_room(room_channel(code))
    current_app.logger.info(f"[subscribe] code={code}")
    emit('subscribed', {'code': code})
    emit('room_update', room.to_dict())


def handle_unsubscribe(data):
    code = ((data or {}).get('code') or '').upper()
    if not code:
        emit('error', {'message': 'code is required'})
        return
    leave_room(room_channel(code))
    emit('unsubscribed', {'code': code})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('subscribe', handle_subscribe, namespace=namespace)
        socketio.on_event('unsubscribe', handle_unsubscribe, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
