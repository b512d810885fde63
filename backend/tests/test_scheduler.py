import pytest

from conftest import TestConfig, _make_app
from supp_trivia.services.rooms import scheduler


class InstantTurnsConfig(TestConfig):
    ENABLE_SCHEDULER_IN_TESTS = True
    FIRST_TURN_DURATION_SEC = 0
    TURN_DURATION_SEC = 0


@pytest.fixture()
def timed_app(judge):
    yield from _make_app(InstantTurnsConfig, judge)


def test_expired_turns_are_skipped_until_match_ends(timed_app):
    client = timed_app.test_client()
    code = client.post('/room', json={'nickname': 'Ana'}).get_json()['code']
    client.post(f'/room/{code}/join', json={'nickname': 'Bo'})

    started = client.post(f'/room/{code}/start').get_json()
    assert started['state'] == 'game'

    room = client.get(f'/room/{code}').get_json()
    assert room['finished'] is True
    assert len(room['messages']) == 12
    assert room['teamAScore'] == 0 and room['teamBScore'] == 0
    assert [m['team'] for m in room['messages'][::2]] == ['A', 'B'] * 3


def test_timer_disabled_in_plain_tests(client, started_room):
    room = client.get(f"/room/{started_room['code']}").get_json()
    assert room['messages'] == []
    assert room['finished'] is False


class QuickFirstTurnConfig(TestConfig):
    ENABLE_SCHEDULER_IN_TESTS = True
    FIRST_TURN_DURATION_SEC = 0
    TURN_DURATION_SEC = 120


@pytest.fixture()
def deferred_timers(judge, monkeypatch):
    launched = []
    monkeypatch.setattr(scheduler, '_launch', lambda app, worker, *args: launched.append((worker, args)))
    monkeypatch.setattr(scheduler, '_scheduled_turn_keys', set())
    for app in _make_app(QuickFirstTurnConfig, judge):
        yield app, launched


def test_worker_reschedules_after_turn_resolved_on_read(deferred_timers):
    app, launched = deferred_timers
    client = app.test_client()
    code = client.post('/room', json={'nickname': 'Ana'}).get_json()['code']
    client.post(f'/room/{code}/join', json={'nickname': 'Bo'})
    client.post(f'/room/{code}/start')
    assert [args[2] for _, args in launched] == [1]

    # a poll resolves round 1 before its worker wakes
    room = client.get(f'/room/{code}').get_json()
    assert room['currentRound'] == 2

    worker, args = launched.pop(0)
    worker(*args)

    assert len(launched) == 1
    _, (_, room_code, expected_round, due_ms) = launched[0]
    assert room_code == code
    assert expected_round == 2
    assert due_ms == room['turnDeadline']


def test_worker_stops_once_match_is_finished(deferred_timers):
    app, launched = deferred_timers
    client = app.test_client()
    code = client.post('/room', json={'nickname': 'Ana'}).get_json()['code']
    client.post(f'/room/{code}/join', json={'nickname': 'Bo'})
    client.post(f'/room/{code}/start')
    worker, args = launched.pop(0)

    client.get(f'/room/{code}')
    for i in range(5):
        team = 'B' if i % 2 == 0 else 'A'
        nickname = 'Bo' if team == 'B' else 'Ana'
        res = client.post(f'/room/{code}/message', json={'nickname': nickname, 'team': team, 'text': ''})
        assert res.status_code == 200
    assert client.get(f'/room/{code}').get_json()['finished'] is True
    launched.clear()

    worker(*args)
    assert launched == []
