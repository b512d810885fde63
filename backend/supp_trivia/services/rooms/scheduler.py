import time
from typing import Set, Tuple

from supp_trivia import socketio
from supp_trivia.models import now_ms
from supp_trivia.store import RoomStore


_scheduled_turn_keys: Set[Tuple[str, int]] = set()


def schedule_turn_timer(app, code: str) -> None:
    """Schedule the auto-skip for the active turn of the given room.

    - No-ops in TESTING mode or when deadlines are not enforced
    - Ensures a single timer per (code, round)
    - On expiry, resolves the turn as a skip unless the round moved on
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return
    if not app.config.get('ENFORCE_TURN_DEADLINE', True):
        return

    with app.app_context():
        room = RoomStore().get(code)
        if not room or room.state != 'game' or room.finished or not room.turn_deadline:
            return
        round_idx = int(room.current_round or 0)
        deadline = int(room.turn_deadline)
        key = (room.code, round_idx)
        if key in _scheduled_turn_keys:
            app.logger.info(f"[timer-skip] code={room.code} round={round_idx} already scheduled")
            return
        _scheduled_turn_keys.add(key)
        app.logger.info(f"[timer-set] code={room.code} round={round_idx} deadline={deadline}")

    _launch(app, _turn_worker, app, code, round_idx, deadline)


def _launch(app, worker, *args) -> None:
    if app.config.get('TESTING'):
        worker(*args)
    else:
        socketio.start_background_task(worker, *args)


def _turn_worker(app, room_code: str, expected_round: int, due_ms: int) -> None:
    delay = max(0.0, (due_ms - now_ms()) / 1000.0)
    if delay:
        time.sleep(delay)
    with app.app_context():
        _scheduled_turn_keys.discard((room_code, expected_round))
        from supp_trivia.api.rooms import build_session
        room = build_session(app).expire_turn(room_code, expected_round=expected_round)
        if room is None:
            app.logger.info(f"[timer-abort] code={room_code} round={expected_round} already resolved")
        else:
            app.logger.info(f"[timer-fire] code={room_code} round={expected_round} next_round={room.current_round}")
        # a read or a late submit may have resolved this turn first; keep the next one covered
        schedule_turn_timer(app, room_code)
