from typing import Callable, Optional

from flask import current_app

from supp_trivia.errors import (
    CapacityError,
    ConflictError,
    GenerationError,
    NotFoundError,
    StateError,
    TurnError,
    ValidationError,
)
from supp_trivia.models import Room, now_ms
from supp_trivia.services.judge import parse_json_answer
from supp_trivia.store import RoomStore
from . import prompts
from .codes import generate_room_code
from .scoring import apply_score, read_verdict, skip_verdict
from .teams import assign_team, is_team, other_team


def _clean_nickname(value) -> str:
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ValidationError('Nome de usuário inválido')
    return value.strip()


class RoomSession:
    """Room lifecycle: lobby, game start, turns, scoring and summaries.

    Every operation is a read-modify-write of one ``Room`` through the
    store. The judge is anything with ``complete(instructions, prompt)``.
    """

    def __init__(self, store: RoomStore, judge, config, clock: Callable[[], int] = now_ms):
        self.store = store
        self.judge = judge
        self.clock = clock
        self.max_players = int(config.get('MAX_PLAYERS', 8))
        self.max_team_size = int(config.get('MAX_TEAM_SIZE', 4))
        self.max_rounds = int(config.get('MAX_ROUNDS', 6))
        self.first_turn_sec = int(config.get('FIRST_TURN_DURATION_SEC', 240))
        self.turn_sec = int(config.get('TURN_DURATION_SEC', 120))
        self.enforce_deadline = bool(config.get('ENFORCE_TURN_DEADLINE', True))

    # ---- lobby ----

    def create_room(self, nickname) -> Room:
        nickname = _clean_nickname(nickname)
        if not nickname:
            raise ValidationError('Nome de usuário necessário')
        code = generate_room_code(self.store.exists)
        room = Room(
            code=code,
            host=nickname,
            players=[{'nickname': nickname, 'team': 'A', 'ready': True}],
            state='lobby',
            created=self.clock(),
            messages=[],
        )
        self.store.save(room)
        current_app.logger.info(f"[room-create] code={code} host={nickname}")
        return room

    def join_room(self, code, nickname, is_reconnect=False) -> Room:
        nickname = _clean_nickname(nickname)
        if not nickname:
            raise ValidationError('Nome de usuário necessário')
        room = self._require(code)
        existing = room.find_player(nickname)
        if is_reconnect and existing:
            current_app.logger.info(f"[room-reconnect] code={room.code} nickname={nickname}")
            return room
        if room.state != 'lobby':
            raise StateError('Jogo já começou')
        if existing:
            raise ConflictError('Nome de usuário já usado por alguém')
        if len(room.players or []) >= self.max_players:
            raise CapacityError('Sala lotada')
        team = assign_team(room.players or [], self.max_team_size)
        if team is None:
            raise CapacityError('Sala lotada')
        room.players = list(room.players or []) + [{'nickname': nickname, 'team': team, 'ready': False}]
        self.store.save(room)
        current_app.logger.info(f"[room-join] code={room.code} nickname={nickname} team={team}")
        return room

    def mark_ready(self, code, nickname, ready) -> Room:
        nickname = _clean_nickname(nickname)
        if not nickname or not isinstance(ready, bool):
            raise ValidationError('Nickname e ready (boolean) são obrigatórios')
        room = self._require(code)
        if nickname == room.host:
            # the host is always ready
            ready = True
        room.players = [
            dict(p, ready=ready) if p.get('nickname') == nickname else dict(p)
            for p in room.players or []
        ]
        self.store.save(room)
        return room

    def get_room(self, code) -> Room:
        room = self._require(code)
        if self._turn_expired(room):
            self._resolve_timeout(room)
        return room

    # ---- game ----

    def start_game(self, code) -> Room:
        room = self._require(code)
        if room.state != 'lobby':
            raise StateError('Jogo já começou')

        ticket = self._generate_ticket(room.code)

        now = self.clock()
        room.state = 'game'
        room.started = now
        room.messages = []
        room.current_team = 'A'
        room.team_a_score = 0
        room.team_b_score = 0
        room.current_round = 1
        room.ticket = ticket
        room.finished = False
        room.turn_deadline = now + self._turn_duration_ms(1)
        self.store.save(room)
        current_app.logger.info(f"[game-start] code={room.code} players={len(room.players or [])}")
        return room

    def submit_turn(self, code, nickname, team, text) -> dict:
        nickname = _clean_nickname(nickname)
        if not nickname or not team:
            raise ValidationError('Faltam nickname ou time')
        if not is_team(team):
            raise ValidationError('Time inválido')
        if text is not None and not isinstance(text, str):
            raise ValidationError('Texto inválido')
        room = self._require(code)
        if room.state != 'game':
            raise StateError('Jogo não está em andamento')
        if self._turn_expired(room):
            self._resolve_timeout(room)
        if room.finished:
            raise StateError('A partida já terminou')
        if room.current_team != team:
            raise TurnError('Não é a vez do seu time')

        if not text or not text.strip():
            player_msg = {'text': '', 'nickname': nickname, 'team': team, 'type': 'player', 'ts': self.clock()}
            judge_msg = skip_verdict(team)
        else:
            prompt = prompts.judge_prompt(room.ticket, team, text, room.current_round, self.max_rounds)
            answer = self.judge.complete(prompts.JUDGE_INSTRUCTIONS, prompt)
            player_msg = {'text': text, 'nickname': nickname, 'team': team, 'type': 'player', 'ts': self.clock()}
            judge_msg = read_verdict(answer)

        self._append_round(room, team, player_msg, judge_msg)
        self.store.save(room)
        current_app.logger.info(
            f"[turn] code={room.code} team={team} score={judge_msg['score']} round={room.current_round} finished={room.finished}"
        )
        return {
            'ok': True,
            'aiMsg': judge_msg,
            'teamAScore': room.team_a_score,
            'teamBScore': room.team_b_score,
            'currentTeam': room.current_team,
        }

    def expire_turn(self, code, expected_round: Optional[int] = None) -> Optional[Room]:
        """Resolve the active turn as a skip if its deadline has passed.

        Returns the updated room, or None when nothing was due.
        """
        room = self.store.get(code)
        if room is None or not self._turn_expired(room):
            return None
        if expected_round is not None and room.current_round != expected_round:
            return None
        self._resolve_timeout(room)
        return room

    def get_summary(self, code) -> str:
        room = self._require(code)
        prompt = prompts.summary_prompt(
            room.ticket, list(room.messages or []), room.team_a_score or 0, room.team_b_score or 0
        )
        return self.judge.complete(prompts.SUMMARY_INSTRUCTIONS, prompt)

    # ---- helpers ----

    def _require(self, code) -> Room:
        room = self.store.get(code)
        if room is None:
            raise NotFoundError('Sala não encontrada')
        return room

    def _generate_ticket(self, code) -> str:
        try:
            answer = self.judge.complete(prompts.TICKET_INSTRUCTIONS, prompts.TICKET_PROMPT)
            data = parse_json_answer(answer)
            title = data.get('title') if isinstance(data, dict) else None
            description = data.get('description') if isinstance(data, dict) else None
            if not title or not description:
                raise ValueError('ticket without title or description')
        except Exception as exc:
            current_app.logger.error(f"[ticket-error] code={code} {exc.__class__.__name__}: {exc}")
            raise GenerationError('Erro ao gerar chamado de suporte. Tente novamente.') from exc
        return prompts.format_ticket(title, description)

    def _turn_duration_ms(self, current_round) -> int:
        seconds = self.first_turn_sec if current_round == 1 else self.turn_sec
        return seconds * 1000

    def _turn_expired(self, room) -> bool:
        return (
            self.enforce_deadline
            and room.state == 'game'
            and not room.finished
            and room.turn_deadline is not None
            and self.clock() >= room.turn_deadline
        )

    def _resolve_timeout(self, room) -> None:
        team = room.current_team
        player_msg = {'text': '', 'nickname': '', 'team': team, 'type': 'player', 'ts': self.clock()}
        self._append_round(room, team, player_msg, skip_verdict(team))
        self.store.save(room)
        current_app.logger.info(f"[turn-timeout] code={room.code} team={team} round={room.current_round}")

    def _append_round(self, room, team, player_msg, judge_msg) -> None:
        messages = list(room.messages or []) + [player_msg, judge_msg]
        room.messages = messages
        apply_score(room, team, judge_msg.get('score') or 0)
        room.current_team = other_team(team)
        room.current_round = len(messages) // 2 + 1
        if len(messages) // 2 >= self.max_rounds:
            room.finished = True
            room.turn_deadline = None
        else:
            room.turn_deadline = self.clock() + self._turn_duration_ms(room.current_round)
