from flask import Blueprint, jsonify, request, current_app

from supp_trivia.services.rooms.scheduler import schedule_turn_timer
from supp_trivia.services.rooms.session import RoomSession
from supp_trivia.store import RoomStore


rooms = Blueprint('rooms', __name__)


def build_session(app=None) -> RoomSession:
    app = app or current_app._get_current_object()
    return RoomSession(RoomStore(), app.extensions['judge'], app.config)


def _body():
    return request.get_json(silent=True) or {}


@rooms.route('', methods=['POST'])
def create_room():
    room = build_session().create_room(_body().get('nickname'))
    return jsonify(room.to_dict())


@rooms.route('/<string:code>/join', methods=['POST'])
def join_room(code):
    data = _body()
    room = build_session().join_room(code, data.get('nickname'), data.get('isReconnect') is True)
    return jsonify(room.to_dict())


@rooms.route('/<string:code>', methods=['GET'])
def get_room(code):
    room = build_session().get_room(code)
    return jsonify(room.to_dict())


@rooms.route('/<string:code>/start', methods=['POST'])
def start_game(code):
    room = build_session().start_game(code)
    payload = room.to_dict()
    schedule_turn_timer(current_app._get_current_object(), room.code)
    return jsonify(payload)


@rooms.route('/<string:code>/message', methods=['POST'])
def submit_message(code):
    data = _body()
    result = build_session().submit_turn(code, data.get('nickname'), data.get('team'), data.get('text'))
    schedule_turn_timer(current_app._get_current_object(), code.upper())
    return jsonify(result)


@rooms.route('/<string:code>/summary', methods=['POST'])
def summary(code):
    return jsonify({'summary': build_session().get_summary(code)})


@rooms.route('/<string:code>/ready', methods=['POST'])
def mark_ready(code):
    data = _body()
    room = build_session().mark_ready(code, data.get('nickname'), data.get('ready'))
    return jsonify(room.to_dict())
