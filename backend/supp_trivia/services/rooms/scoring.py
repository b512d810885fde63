from supp_trivia.models import now_ms
from supp_trivia.services.judge import parse_json_answer
from .teams import team_label

MAX_SCORE = 10


def coerce_score(raw) -> int:
    """Clamp a judge-provided score to an int in 0..MAX_SCORE; non-numbers count as 0."""
    if isinstance(raw, bool):
        return 0
    try:
        value = int(round(float(raw)))
    except (TypeError, ValueError):
        return 0
    return max(0, min(MAX_SCORE, value))


def read_verdict(answer: str) -> dict:
    """Turn the judge's raw answer into a judge message.

    An answer that is not the requested JSON is kept verbatim as feedback
    with a zero score, so the turn still completes.
    """
    try:
        data = parse_json_answer(answer)
    except ValueError:
        data = None
    if not isinstance(data, dict):
        return {'type': 'judge', 'text': answer, 'score': 0, 'isTheAnswerPerfect': False, 'ts': now_ms()}
    return {
        'type': 'judge',
        'text': str(data.get('feedback') or ''),
        'score': coerce_score(data.get('score')),
        'isTheAnswerPerfect': data.get('isTheAnswerPerfect') is True,
        'ts': now_ms(),
    }


def skip_verdict(team: str) -> dict:
    return {'type': 'judge', 'text': f"Time {team_label(team)} perdeu a rodada", 'score': 0, 'ts': now_ms()}


def apply_score(room, team: str, score: int) -> None:
    if team == 'A':
        room.team_a_score = (room.team_a_score or 0) + score
    else:
        room.team_b_score = (room.team_b_score or 0) + score
