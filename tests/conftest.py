import random
from typing import List

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from trivia_proxy.config import Settings
from trivia_proxy.main import create_app
from trivia_proxy.models import GetQuestionsParameters, OpenTdbQuestion
from trivia_proxy.state import AnswerStore


class FakeQuestionSource:
	"""Returns canned questions and remembers what it was asked for."""

	def __init__(self) -> None:
		self.questions: List[OpenTdbQuestion] = []
		self.error: Exception | None = None
		self.calls: List[GetQuestionsParameters] = []

	async def get_questions(self, parameters: GetQuestionsParameters) -> List[OpenTdbQuestion]:
		self.calls.append(parameters)
		if self.error is not None:
			raise self.error
		return list(self.questions)


def make_question(**overrides) -> OpenTdbQuestion:
	fields = {
		"category": "Geography",
		"difficulty": "easy",
		"type": "multiple",
		"question": "What is the capital of France?",
		"correct_answer": "Paris",
		"incorrect_answers": ["London", "Berlin", "Madrid"],
	}
	fields.update(overrides)
	return OpenTdbQuestion(**fields)


@pytest.fixture
def raw_question():
	return make_question


@pytest.fixture
def answer_store() -> AnswerStore:
	return AnswerStore()


@pytest.fixture
def question_source() -> FakeQuestionSource:
	return FakeQuestionSource()


@pytest.fixture
def seeded_rng() -> random.Random:
	return random.Random(1234)


@pytest.fixture
def test_settings() -> Settings:
	return Settings(opentdb_base_url="https://opentdb.test", max_question_amount=50, cors_allow_origins=["*"])


@pytest_asyncio.fixture
async def api_client(test_settings, question_source, answer_store):
	app = create_app(settings=test_settings, question_source=question_source, answer_store=answer_store)
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client
