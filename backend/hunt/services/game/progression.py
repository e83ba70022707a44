from collections import namedtuple
from datetime import datetime

from hunt import db
from hunt.errors import InternalError
from hunt.models import Team
from .session import SessionSnapshot

STORIES = (1, 2, 3)
# Same for every story
PHASES_PER_STAGE = {1: 4, 2: 2, 3: 4, 4: 3}
FINAL_STAGE = 4
WRONG_ANSWER_PENALTY = 5

Transition = namedtuple('Transition', ['stage', 'phase', 'completed'])
AnswerResult = namedtuple('AnswerResult', ['correct', 'stage', 'phase', 'health', 'end_time'])


def advance(story: int, stage: int, phase: int) -> Transition:
    """Where a correct answer at (stage, phase) leads.

    The last phase of stages 1-3 opens the next stage; the last phase of the
    final stage completes the hunt and leaves the position unchanged.
    """
    if story not in STORIES or stage not in PHASES_PER_STAGE:
        raise ValueError(f"no such position: story={story} stage={stage} phase={phase}")
    last_phase = PHASES_PER_STAGE[stage]
    if not 1 <= phase <= last_phase:
        raise ValueError(f"no such position: story={story} stage={stage} phase={phase}")
    if phase == last_phase:
        if stage == FINAL_STAGE:
            return Transition(stage, phase, True)
        return Transition(stage + 1, 1, False)
    return Transition(stage, phase + 1, False)


def penalise(health: float) -> float:
    return max(0.0, health - WRONG_ANSWER_PENALTY)


def apply_answer(session: SessionSnapshot, correct: bool, now: datetime) -> AnswerResult:
    """Persist the outcome of one answer for the team behind ``session``.

    A wrong answer costs health and keeps the position. A correct one moves
    the position; ``end_time`` becomes ``now`` only on the completing answer
    and is cleared otherwise. Both sync ``last_synced_time``.
    """
    # Penalties apply to the locked row so concurrent wrong answers all count
    team = db.session.get(Team, session.team_id, with_for_update=True, populate_existing=True)
    if team is None:
        raise InternalError(f"team vanished mid-request: {session.team_id}")
    if not correct:
        health = penalise(team.health)
        team.health = health
        team.last_synced_time = now
        db.session.commit()
        return AnswerResult(False, session.stage, session.phase, health, session.end_time)

    transition = advance(session.story, session.stage, session.phase)
    end_time = now if transition.completed else None
    team.stage = transition.stage
    team.phase = transition.phase
    team.end_time = end_time
    team.last_synced_time = now
    db.session.commit()
    return AnswerResult(True, transition.stage, transition.phase, session.health, end_time)
