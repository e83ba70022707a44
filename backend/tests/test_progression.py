from datetime import datetime, timedelta

import pytest
from flask_jwt_extended import create_access_token

from hunt import db
from hunt.models import Team
from hunt.services.game.progression import (
    PHASES_PER_STAGE,
    Transition,
    advance,
    apply_answer,
    penalise,
)
from hunt.services.game.session import SessionSnapshot, validate_session


def _snapshot(clock, team_id='123456', story=1, stage=1, phase=1, health=80.0):
    return SessionSnapshot(
        team_id=team_id,
        story=story,
        stage=stage,
        phase=phase,
        start_time=clock.now - timedelta(minutes=5),
        end_time=None,
        health=health,
        last_synced_time=clock.now,
    )


@pytest.mark.parametrize('story', [1, 2, 3])
def test_full_route_is_the_same_for_every_story(story):
    stage, phase = 1, 1
    visited = [(stage, phase)]
    while True:
        step = advance(story, stage, phase)
        if step.completed:
            break
        stage, phase = step.stage, step.phase
        visited.append((stage, phase))
    assert len(visited) == sum(PHASES_PER_STAGE.values())
    assert visited[-1] == (4, 3)
    assert [p for s, p in visited if s == 2] == [1, 2]


@pytest.mark.parametrize('stage,phase,expected', [
    (1, 1, Transition(1, 2, False)),
    (1, 4, Transition(2, 1, False)),
    (2, 1, Transition(2, 2, False)),
    (2, 2, Transition(3, 1, False)),
    (3, 3, Transition(3, 4, False)),
    (3, 4, Transition(4, 1, False)),
    (4, 2, Transition(4, 3, False)),
    (4, 3, Transition(4, 3, True)),
])
def test_advance(stage, phase, expected):
    assert advance(2, stage, phase) == expected


@pytest.mark.parametrize('story,stage,phase', [(4, 1, 1), (1, 5, 1), (1, 2, 3), (1, 1, 0)])
def test_advance_rejects_positions_off_the_board(story, stage, phase):
    with pytest.raises(ValueError):
        advance(story, stage, phase)


def test_penalty_floors_at_zero():
    assert penalise(42.5) == pytest.approx(37.5)
    assert penalise(3) == 0


def test_wrong_answer_costs_health_and_keeps_position(make_team, clock):
    make_team(stage=2, phase=1, health=80.0)
    clock.advance(10)

    result = apply_answer(_snapshot(clock, stage=2, phase=1, health=80.0), False, clock.now)

    assert result.correct is False
    assert result.health == pytest.approx(75.0)
    team = db.session.get(Team, '123456')
    assert (team.stage, team.phase) == (2, 1)
    assert team.health == pytest.approx(75.0)
    assert team.last_synced_time == clock.now


def test_stage_rollover_keeps_end_time_empty(make_team, clock):
    make_team(story=1, stage=1, phase=4)

    result = apply_answer(_snapshot(clock, story=1, stage=1, phase=4), True, clock.now)

    assert (result.stage, result.phase, result.end_time) == (2, 1, None)
    team = db.session.get(Team, '123456')
    assert (team.stage, team.phase) == (2, 1)
    assert team.end_time is None


def test_final_answer_completes_the_hunt(make_team, clock):
    make_team(story=3, stage=4, phase=3)
    clock.advance(30)

    result = apply_answer(_snapshot(clock, story=3, stage=4, phase=3), True, clock.now)

    assert (result.stage, result.phase) == (4, 3)
    assert result.end_time == clock.now
    team = db.session.get(Team, '123456')
    assert (team.stage, team.phase) == (4, 3)
    assert team.end_time == clock.now


def test_correct_answer_clears_a_stale_end_time(make_team, clock):
    make_team(stage=3, phase=2, end_time=datetime(2026, 1, 1))

    apply_answer(_snapshot(clock, stage=3, phase=2), True, clock.now)

    assert db.session.get(Team, '123456').end_time is None


def test_overlapping_wrong_answers_each_cost_health(make_team, clock):
    make_team(health=80.0)
    token = create_access_token(identity='123456')
    first = validate_session(token, clock.now).snapshot
    second = validate_session(token, clock.now).snapshot
    assert first.health == second.health == 80.0

    apply_answer(second, False, clock.now)
    result = apply_answer(first, False, clock.now)

    assert result.health == pytest.approx(70.0)
    assert db.session.get(Team, '123456').health == pytest.approx(70.0)
