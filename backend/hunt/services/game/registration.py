import random
from typing import List, Sequence

from flask import current_app
from sqlalchemy.exc import IntegrityError

from hunt import db
from hunt.errors import AllStoriesPlayed, InternalError, NotificationFailure, TeamNameTaken
from hunt.models import Member, Team
from .notifications import NotificationError
from .progression import STORIES

CODE_LENGTH = 6


def generate_team_code(rng: random.Random) -> str:
    """Draw an unused six-digit code (leading zeros kept)."""
    while True:
        code = f"{rng.randrange(10 ** CODE_LENGTH):0{CODE_LENGTH}d}"
        if db.session.get(Team, code) is None:
            return code


def played_stories(phone_numbers: Sequence[int]) -> set:
    rows = (
        db.session.query(Team.story)
        .join(Member, Member.team_id == Team.id)
        .filter(Member.phone_number.in_(list(phone_numbers)))
        .distinct()
        .all()
    )
    return {row.story for row in rows}


def unplayed_stories(phone_numbers: Sequence[int]) -> List[int]:
    played = played_stories(phone_numbers)
    return [story for story in STORIES if story not in played]


def _create_team(code: str, name: str, story: int, phone_numbers: Sequence[int]) -> Team:
    # Forward action: team and members land together or not at all
    team = Team(id=code, name=name, story=story)
    team.members = [Member(phone_number=number) for number in phone_numbers]
    db.session.add(team)
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        if Team.query.filter_by(name=name).first() is not None:
            raise TeamNameTaken() from exc
        raise InternalError(f"team insert failed: {exc}") from exc
    return team


def _discard_team(code: str) -> None:
    # Compensating action for a team whose code never reached the players
    try:
        Member.query.filter_by(team_id=code).delete(synchronize_session='fetch')
        Team.query.filter_by(id=code).delete(synchronize_session='fetch')
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception(f"[saga-compensate-failed] team_code={code}")
        raise


def register_team(name: str, phone_numbers: Sequence[int], rng: random.Random, notifier) -> Team:
    """Create a team on a story none of its members has played, then text the code.

    If the SMS cannot be sent the freshly created team is deleted again and
    ``NotificationFailure`` is raised.
    """
    choices = unplayed_stories(phone_numbers)
    if not choices:
        raise AllStoriesPlayed()
    story = rng.choice(choices)

    if Team.query.filter_by(name=name).first() is not None:
        raise TeamNameTaken()

    code = generate_team_code(rng)
    team = _create_team(code, name, story, phone_numbers)
    current_app.logger.info(f"[register] team={name} story={story} members={len(phone_numbers)}")

    try:
        notifier.send_code(phone_numbers[0], code)
    except NotificationError as exc:
        current_app.logger.warning(f"[sms-fail] team={name} error={exc}")
        _discard_team(code)
        current_app.logger.info(f"[saga-compensate] team={name} removed")
        raise NotificationFailure() from exc

    return team
