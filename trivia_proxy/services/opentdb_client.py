import html
import json
import logging
from time import perf_counter
from typing import Any, Dict, List
from urllib.parse import unquote

import httpx
from pydantic import ValidationError

from ..config import settings
from ..errors import (
    EmptyOrMalformedResponseError,
    UpstreamRateLimitedError,
    UpstreamRejectedError,
    UpstreamUnavailableError,
)
from ..models import GetQuestionsParameters, OpenTdbApiResponse, OpenTdbQuestion

logger = logging.getLogger("trivia_proxy")

# Open Trivia Database response codes.
RESPONSE_SUCCESS = 0
RESPONSE_NO_RESULTS = 1
RESPONSE_INVALID_PARAMETER = 2
RESPONSE_RATE_LIMIT = 5


def decode_text(text: str) -> str:
    """Undo the url3986 encoding we request, then any HTML entities."""
    return html.unescape(unquote(text))


class OpenTdbClient:
    """Fetches raw questions from the Open Trivia Database."""

    def __init__(self, http: httpx.AsyncClient, base_url: str | None = None, timeout: float | None = None) -> None:
        self.http = http
        self.base_url = (base_url or settings.opentdb_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.opentdb_timeout_seconds

    def build_query(self, parameters: GetQuestionsParameters) -> Dict[str, Any]:
        query: Dict[str, Any] = {"amount": parameters.amount, "encode": "url3986"}
        if parameters.category_id is not None:
            query["category"] = parameters.category_id
        if parameters.difficulty is not None:
            query["difficulty"] = parameters.difficulty.value.lower()
        if parameters.type is not None:
            query["type"] = parameters.type.value
        return query

    async def get_questions(self, parameters: GetQuestionsParameters) -> List[OpenTdbQuestion]:
        query = self.build_query(parameters)
        url = f"{self.base_url}/api.php"
        t0 = perf_counter()
        try:
            response = await self.http.get(url, params=query, timeout=self.timeout)
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(f"Open Trivia Database request failed: {exc}") from exc
        logger.debug({
            "event": "opentdb_response",
            "params": query,
            "status_code": response.status_code,
            "latency_ms": int((perf_counter() - t0) * 1000),
        })
        if response.status_code == 429:
            raise UpstreamRateLimitedError("Open Trivia Database rate limit reached.")
        if not response.is_success:
            raise UpstreamUnavailableError(f"Open Trivia Database returned HTTP {response.status_code}.")

        envelope = self._parse_envelope(response.content)
        self._check_response_code(envelope.response_code)
        return [self._decode_question(q) for q in envelope.results]

    def _parse_envelope(self, body: bytes) -> OpenTdbApiResponse:
        if not body or not body.strip():
            raise EmptyOrMalformedResponseError("The Open Trivia Database returned an empty response body.")
        try:
            return OpenTdbApiResponse.model_validate(json.loads(body))
        except (ValueError, ValidationError) as exc:
            raise EmptyOrMalformedResponseError(
                "The Open Trivia Database returned an unparseable response body."
            ) from exc

    def _check_response_code(self, code: int) -> None:
        if code in (RESPONSE_SUCCESS, RESPONSE_NO_RESULTS):
            return
        if code == RESPONSE_RATE_LIMIT:
            raise UpstreamRateLimitedError("Open Trivia Database rate limit reached.")
        if code == RESPONSE_INVALID_PARAMETER:
            raise UpstreamRejectedError("Open Trivia Database rejected the request parameters.")
        raise UpstreamUnavailableError(f"Open Trivia Database returned response code {code}.")

    def _decode_question(self, question: OpenTdbQuestion) -> OpenTdbQuestion:
        return OpenTdbQuestion(
            category=decode_text(question.category),
            difficulty=decode_text(question.difficulty),
            type=decode_text(question.type),
            question=decode_text(question.question),
            correct_answer=decode_text(question.correct_answer),
            incorrect_answers=[decode_text(a) for a in question.incorrect_answers],
        )
