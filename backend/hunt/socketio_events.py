import hmac

from flask import current_app
from flask_socketio import join_room, leave_room, emit

from hunt import socketio, db
from hunt.models import Team

ORGANIZER_ROOM = 'organizers'


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_hunt(data):
    # Organizers authenticate with the same shared secret used for registration
    secret = (data or {}).get('secret_key')
    expected = current_app.config.get('REGISTER_KEY') or ''
    if not isinstance(secret, str) or not hmac.compare_digest(secret, expected):
        emit('error', {'message': 'invalid secret_key'})
        return
    join_room(ORGANIZER_ROOM)
    emit('joined', {'room': ORGANIZER_ROOM})


def handle_leave_hunt(data=None):
    leave_room(ORGANIZER_ROOM)
    emit('left', {'room': ORGANIZER_ROOM})


def handle_ping(data):
    emit('pong', data or {})


def broadcast_team_update(team_id: str) -> None:
    """Push a team's current state to the organizer room. Never carries the login code."""
    team = db.session.get(Team, team_id)
    if team is None:
        return
    socketio.emit('team_update', team.to_dict(), to=ORGANIZER_ROOM, namespace='/ws')


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    socketio.on_event('connect', handle_connect, namespace='/ws')
    socketio.on_event('join_hunt', handle_join_hunt, namespace='/ws')
    socketio.on_event('leave_hunt', handle_leave_hunt, namespace='/ws')
    socketio.on_event('ping', handle_ping, namespace='/ws')

    if testing:
        socketio.on_event('connect', handle_connect, namespace='/')
        socketio.on_event('join_hunt', handle_join_hunt, namespace='/')
        socketio.on_event('leave_hunt', handle_leave_hunt, namespace='/')
        socketio.on_event('ping', handle_ping, namespace='/')
