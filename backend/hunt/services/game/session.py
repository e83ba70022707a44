import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from flask import current_app
from flask_jwt_extended import decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from hunt import db
from hunt.models import Team
from .health import current_health

DEFAULT_HUNT_DURATION_SEC = 1800


class SessionStatus(enum.Enum):
    ACTIVE = 'active'
    INVALID_TOKEN = 'invalid_token'
    GAME_COMPLETED = 'game_completed'
    NOT_STARTED = 'not_started'
    HEALTH_EXHAUSTED = 'health_exhausted'


@dataclass(frozen=True)
class SessionSnapshot:
    """What the gate saw for one request. Never re-read within that request."""
    team_id: str
    story: int
    stage: int
    phase: int
    start_time: datetime
    end_time: Optional[datetime]
    health: float
    last_synced_time: datetime


@dataclass(frozen=True)
class SessionResult:
    status: SessionStatus
    snapshot: Optional[SessionSnapshot] = None

    @property
    def ok(self) -> bool:
        return self.status is SessionStatus.ACTIVE


def team_id_from_token(token: Optional[str]) -> Optional[str]:
    """Verify a bearer token and return the team code it carries, or None."""
    if not token:
        return None
    try:
        claims = decode_token(token)
    except (PyJWTError, JWTExtendedException):
        return None
    identity = claims.get(current_app.config.get('JWT_IDENTITY_CLAIM', 'sub'))
    if not isinstance(identity, str) or not identity.isdigit():
        return None
    return identity


def validate_session(token: Optional[str], now: datetime, hunt_duration_sec: int = DEFAULT_HUNT_DURATION_SEC) -> SessionResult:
    """Gate every gameplay request.

    Recomputes the team's health from the time elapsed since it was last
    synced and persists it, so health never needs a background timer.
    Outcomes short-circuit in order: bad token, unknown team, completed,
    not started, hunt time over, health exhausted, active.
    """
    team_id = team_id_from_token(token)
    if team_id is None:
        return SessionResult(SessionStatus.INVALID_TOKEN)

    # Locked until this transaction ends; not held across the rest of the request
    team = Team.query.filter_by(id=team_id).with_for_update().first()
    if team is None:
        db.session.rollback()
        return SessionResult(SessionStatus.INVALID_TOKEN)
    if team.end_time is not None:
        db.session.rollback()
        return SessionResult(SessionStatus.GAME_COMPLETED)
    if team.start_time is None or team.last_synced_time is None:
        db.session.rollback()
        return SessionResult(SessionStatus.NOT_STARTED)
    if (team.last_synced_time - team.start_time).total_seconds() > hunt_duration_sec:
        db.session.rollback()
        return SessionResult(SessionStatus.HEALTH_EXHAUSTED)

    new_health = current_health(team.health, team.last_synced_time, now)

    if new_health <= 0:
        if team.health != 0:
            team.health = 0.0
            team.last_synced_time = now
            db.session.commit()
            current_app.logger.info(f"[health-zero] team={team.name}")
        else:
            db.session.rollback()
        return SessionResult(SessionStatus.HEALTH_EXHAUSTED)

    team.health = new_health
    team.last_synced_time = now
    snapshot = SessionSnapshot(
        team_id=team.id,
        story=team.story,
        stage=team.stage,
        phase=team.phase,
        start_time=team.start_time,
        end_time=team.end_time,
        health=new_health,
        last_synced_time=now,
    )
    db.session.commit()
    return SessionResult(SessionStatus.ACTIVE, snapshot)
