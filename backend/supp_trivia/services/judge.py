import json
import re
from typing import Any, Optional

from flask import current_app
import openai

from supp_trivia.errors import GenerationError


_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


def extract_json_text(text: str) -> str:
    """Return the body of the first fenced code block, or ``text`` unchanged."""
    match = _FENCED_BLOCK.search(text or '')
    if match:
        return match.group(1)
    return text or ''


def parse_json_answer(text: str) -> Any:
    """Parse a judge answer that may wrap its JSON in a markdown fence.

    Raises ``ValueError`` when the payload is not valid JSON.
    """
    return json.loads(extract_json_text(text))


class OpenAIJudge:
    """Judge backed by the OpenAI Responses API."""

    def __init__(self, client: Optional[openai.OpenAI], model: str):
        self.client = client
        self.model = model

    def complete(self, instructions: str, prompt: str) -> str:
        if self.client is None:
            raise GenerationError('Juiz não configurado (OPENAI_API_KEY ausente).')
        try:
            response = self.client.responses.create(
                model=self.model,
                instructions=instructions,
                input=prompt,
            )
        except openai.OpenAIError as exc:
            current_app.logger.error(f"[judge-error] model={self.model} {exc.__class__.__name__}: {exc}")
            raise GenerationError('Erro ao consultar o juiz. Tente novamente.') from exc
        return response.output_text or ''


def build_judge(config) -> OpenAIJudge:
    api_key = config.get('OPENAI_API_KEY')
    client = None
    if api_key:
        client = openai.OpenAI(
            api_key=api_key,
            timeout=float(config.get('OPENAI_TIMEOUT_SEC', 120)),
            max_retries=int(config.get('OPENAI_MAX_RETRIES', 2)),
        )
    return OpenAIJudge(client, config.get('OPENAI_MODEL', 'o4-mini'))
