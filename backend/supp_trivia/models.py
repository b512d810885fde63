from supp_trivia import db
from sqlalchemy.ext.mutable import MutableList
import time

TEAMS = ('A', 'B')
TEAM_LABELS = {'A': 'Azul', 'B': 'Laranja'}


def now_ms():
    return int(time.time() * 1000)


class Room(db.Model):
    """One game session, keyed by its short join code.

    ``players`` and ``messages`` are stored as JSON lists of plain dicts in
    the same shape clients receive them.
    """
    __tablename__ = 'room'
    code = db.Column(db.String(5), primary_key=True)
    host = db.Column(db.String(64), nullable=False)
    players = db.Column(MutableList.as_mutable(db.JSON), nullable=False, default=list)
    state = db.Column(db.String(16), nullable=False, default='lobby')  # lobby, game
    created = db.Column(db.BigInteger, nullable=False, default=now_ms)
    updated = db.Column(db.BigInteger, nullable=False, default=now_ms, index=True)
    # Game fields, populated on start
    started = db.Column(db.BigInteger, nullable=True)
    messages = db.Column(MutableList.as_mutable(db.JSON), nullable=False, default=list)
    current_team = db.Column(db.String(1), nullable=True)
    team_a_score = db.Column(db.Integer, nullable=False, default=0)
    team_b_score = db.Column(db.Integer, nullable=False, default=0)
    current_round = db.Column(db.Integer, nullable=True)
    ticket = db.Column(db.Text, nullable=True)
    turn_deadline = db.Column(db.BigInteger, nullable=True)
    finished = db.Column(db.Boolean, nullable=False, default=False)
    version = db.Column(db.Integer, nullable=False)

    __mapper_args__ = {'version_id_col': version}

    def find_player(self, nickname):
        for p in self.players or []:
            if p.get('nickname') == nickname:
                return p
        return None

    def to_dict(self):
        payload = {
            'code': self.code,
            'host': self.host,
            'players': [dict(p) for p in self.players or []],
            'state': self.state,
            'created': self.created,
            'updated': self.updated,
        }
        if self.state == 'game':
            payload.update({
                'started': self.started,
                'messages': [dict(m) for m in self.messages or []],
                'currentTeam': self.current_team,
                'teamAScore': self.team_a_score,
                'teamBScore': self.team_b_score,
                'currentRound': self.current_round,
                'ticket': self.ticket,
                'turnDeadline': self.turn_deadline,
                'finished': bool(self.finished),
            })
        return payload
