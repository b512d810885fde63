from flask import current_app
from sqlalchemy.orm.exc import StaleDataError

from supp_trivia import db, socketio
from supp_trivia.errors import ConcurrentUpdateError
from supp_trivia.models import Room, now_ms


def room_channel(code):
    return f"room:{code}"


class RoomStore:
    """Keyed access to room documents.

    Every committed write pushes the full document to subscribers of the
    room's Socket.IO channel on ``/ws``.
    """

    def get(self, code):
        if not code:
            return None
        return Room.query.filter_by(code=code.upper()).first()

    def exists(self, code):
        return db.session.query(Room.code).filter_by(code=code).first() is not None

    def save(self, room):
        room.updated = now_ms()
        db.session.add(room)
        self._commit(room)
        self.publish(room)
        return room

    def publish(self, room):
        socketio.emit('room_update', room.to_dict(), to=room_channel(room.code), namespace='/ws')

    def purge_older_than(self, max_age_ms, now=None):
        cutoff = (now if now is not None else now_ms()) - max_age_ms
        stale = Room.query.filter(Room.updated < cutoff).all()
        for room in stale:
            db.session.delete(room)
        db.session.commit()
        return len(stale)

    def _commit(self, room):
        code = room.code
        try:
            db.session.commit()
        except StaleDataError:
            db.session.rollback()
            current_app.logger.warning(f"[stale-write] code={code}")
            raise ConcurrentUpdateError('A sala foi alterada por outra jogada. Tente novamente.')
