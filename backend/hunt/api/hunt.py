from functools import wraps
import hmac

from flask import Blueprint, jsonify, request, current_app
from flask_jwt_extended import create_access_token

from hunt import db
from hunt.errors import Forbidden, UnknownCode
from hunt.models import Team
from hunt.schemas import AnswerRequest, LoginRequest, RefuelRequest, RegisterRequest
from hunt.services.game.clock import current_random, current_time
from hunt.services.game.coupons import redeem_coupon
from hunt.services.game.progression import apply_answer
from hunt.services.game.registration import register_team
from hunt.services.game.session import SessionStatus, validate_session
from hunt.socketio_events import broadcast_team_update

hunt = Blueprint('hunt', __name__)

# Status codes here are what the game clients key on
_SESSION_RESPONSES = {
    SessionStatus.INVALID_TOKEN: ({'message': 'wrong otp entered'}, 401),
    SessionStatus.NOT_STARTED: ({'message': 'please login again!', 'type': 4}, 401),
    SessionStatus.GAME_COMPLETED: ({'message': 'yay! you completed the quest!', 'type': 4}, 418),
    SessionStatus.HEALTH_EXHAUSTED: ({'message': 'health is zero!', 'type': 5}, 422),
}


def _isoformat(value):
    return value.isoformat() if value else None


def _bearer_token():
    parts = request.headers.get('Authorization', '').split()
    if len(parts) != 2 or parts[0].lower() != 'bearer':
        return None
    return parts[1]


def session_required(view):
    """Run the session gate and hand the view an immutable snapshot."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        result = validate_session(
            _bearer_token(),
            current_time(),
            int(current_app.config.get('HUNT_DURATION_SEC', 1800)),
        )
        if not result.ok:
            body, status = _SESSION_RESPONSES[result.status]
            return jsonify(body), status
        return view(result.snapshot, *args, **kwargs)
    return wrapper


def _body(schema):
    return schema.model_validate(request.get_json(silent=True) or {})


@hunt.route('/')
def index():
    return 'server up'


@hunt.route('/register', methods=['POST'])
def register():
    data = _body(RegisterRequest)
    if not hmac.compare_digest(data.secret_key, current_app.config.get('REGISTER_KEY') or ''):
        raise Forbidden()

    team = register_team(
        data.name,
        data.phone_numbers,
        current_random(),
        current_app.extensions['hunt_notifier'],
    )
    broadcast_team_update(team.id)
    return jsonify({'message': 'registered'}), 200


@hunt.route('/login', methods=['POST'])
def login():
    data = _body(LoginRequest)
    code = f"{data.otp:06d}"
    team = Team.query.filter_by(id=code).with_for_update().first()
    if team is None:
        db.session.rollback()
        raise UnknownCode()

    if team.start_time is None:
        now = current_time()
        team.start_time = now
        team.last_synced_time = now
        current_app.logger.info(f"[login] team={team.name} started")
    db.session.commit()

    return jsonify({'token': create_access_token(identity=code)}), 200


@hunt.route('/question', methods=['GET'])
@session_required
def get_question(session):
    bank = current_app.extensions['hunt_questions']
    payload = bank.public(session.story, session.stage, session.phase)
    payload.update({
        'stage': session.stage,
        'story': session.story,
        'phase': session.phase,
        'startTime': _isoformat(session.start_time),
        'endTime': _isoformat(session.end_time),
        'health': session.health,
    })
    return jsonify(payload), 200


@hunt.route('/question', methods=['POST'])
@session_required
def answer_question(session):
    data = _body(AnswerRequest)
    bank = current_app.extensions['hunt_questions']
    correct = bank.is_correct(session.story, session.stage, session.phase, data.answer)

    result = apply_answer(session, correct, current_time())
    current_app.logger.info(
        f"[answer] team={session.team_id} correct={correct} stage={result.stage} phase={result.phase} completed={result.end_time is not None}"
    )
    broadcast_team_update(session.team_id)

    if not correct:
        return jsonify({'message': 'Wrong Answer/Code Scanned', 'health': result.health}), 400
    return jsonify({
        'message': 'Correct Answer!',
        'stage': result.stage,
        'phase': result.phase,
        'completed': result.end_time is not None,
    }), 200


@hunt.route('/refuel', methods=['POST'])
@session_required
def refuel(session):
    data = _body(RefuelRequest)
    team = redeem_coupon(session.team_id, data.coupon)
    broadcast_team_update(team.id)
    return jsonify({'message': 'Ship Health Restored!!', 'health': team.health}), 200
