import logging
from types import SimpleNamespace

import openai
import pytest

from conftest import TestConfig, _make_app
from supp_trivia.errors import GenerationError
from supp_trivia.services.judge import OpenAIJudge, build_judge, parse_json_answer


class FakeResponses:
    def __init__(self, output_text=None, error=None):
        self.output_text = output_text
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(output_text=self.output_text)


class FakeClient:
    def __init__(self, **kwargs):
        self.responses = FakeResponses(**kwargs)


def test_complete_returns_output_text(flask_app):
    client = FakeClient(output_text='resposta')
    judge = OpenAIJudge(client, 'o4-mini')
    assert judge.complete('instruções', 'prompt') == 'resposta'
    assert client.responses.calls == [{'model': 'o4-mini', 'instructions': 'instruções', 'input': 'prompt'}]


def test_complete_with_empty_output(flask_app):
    judge = OpenAIJudge(FakeClient(output_text=None), 'o4-mini')
    assert judge.complete('instruções', 'prompt') == ''


def test_provider_error_becomes_generation_error(flask_app, caplog):
    judge = OpenAIJudge(FakeClient(error=openai.OpenAIError('boom')), 'o4-mini')
    with caplog.at_level(logging.ERROR):
        with pytest.raises(GenerationError) as excinfo:
            judge.complete('instruções', 'prompt')
    assert excinfo.value.status_code == 500
    assert '[judge-error]' in caplog.text
    assert 'boom' in caplog.text


def test_missing_client_is_a_generation_error(flask_app):
    with pytest.raises(GenerationError):
        OpenAIJudge(None, 'o4-mini').complete('instruções', 'prompt')


def test_build_judge_passes_client_settings():
    judge = build_judge({
        'OPENAI_API_KEY': 'sk-test',
        'OPENAI_MODEL': 'gpt-test',
        'OPENAI_TIMEOUT_SEC': '30',
        'OPENAI_MAX_RETRIES': '5',
    })
    assert judge.model == 'gpt-test'
    assert judge.client.timeout == 30.0
    assert judge.client.max_retries == 5


def test_build_judge_without_key():
    judge = build_judge({})
    assert judge.client is None
    assert judge.model == 'o4-mini'


def test_parse_json_answer_rejects_prose():
    assert parse_json_answer('```json\n{"score": 3}\n```') == {'score': 3}
    with pytest.raises(ValueError):
        parse_json_answer('sem json aqui')


@pytest.fixture()
def keyless_app():
    yield from _make_app(TestConfig, None)


def test_start_without_api_key_keeps_lobby(keyless_app):
    client = keyless_app.test_client()
    code = client.post('/room', json={'nickname': 'Ana'}).get_json()['code']
    client.post(f'/room/{code}/join', json={'nickname': 'Bo'})

    res = client.post(f'/room/{code}/start')
    assert res.status_code == 500
    assert res.get_json()['error'] == 'Erro ao gerar chamado de suporte. Tente novamente.'
    assert client.get(f'/room/{code}').get_json()['state'] == 'lobby'
