import logging
import random
import uuid
from typing import List, Optional, Protocol

from ..errors import UnrecognizedValueError
from ..models import (
    CheckAnswerRequest,
    CheckAnswerResponse,
    GetQuestionsParameters,
    OpenTdbQuestion,
    QuestionDifficulty,
    QuestionType,
    TriviaQuestionResponse,
)
from ..state import AnswerStore

logger = logging.getLogger("trivia_proxy")


class QuestionSource(Protocol):
    async def get_questions(self, parameters: GetQuestionsParameters) -> List[OpenTdbQuestion]:
        ...


def parse_difficulty(value: str) -> QuestionDifficulty:
    token = value.lower()
    if token == "easy":
        return QuestionDifficulty.EASY
    if token == "medium":
        return QuestionDifficulty.MEDIUM
    if token == "hard":
        return QuestionDifficulty.HARD
    raise UnrecognizedValueError("difficulty", value)


def parse_type(value: str) -> QuestionType:
    token = value.lower()
    if token == "multiple":
        return QuestionType.MULTIPLE
    if token == "boolean":
        return QuestionType.BOOLEAN
    raise UnrecognizedValueError("question type", value)


class TriviaService:
    """Hands out questions without their answers and grades submissions.

    The correct answer of every emitted question is kept in the shared
    AnswerStore under a fresh id and can be checked exactly once.
    """

    def __init__(self, question_source: QuestionSource, answer_store: AnswerStore, rng: Optional[random.Random] = None) -> None:
        self.question_source = question_source
        self.answer_store = answer_store
        self.rng = rng if rng is not None else random.SystemRandom()

    async def get_questions(self, parameters: GetQuestionsParameters) -> List[TriviaQuestionResponse]:
        raw_questions = await self.question_source.get_questions(parameters)
        # Nothing below awaits: once the fetch returns, the batch is stored in one go.
        questions: List[TriviaQuestionResponse] = []
        for raw in raw_questions:
            question_id = str(uuid.uuid4())
            question = self._to_client_question(question_id, raw)
            self.answer_store.store(question_id, raw.correct_answer)
            questions.append(question)
        logger.debug({"event": "questions_emitted", "count": len(questions), "pending_answers": self.answer_store.count()})
        return questions

    def check_answer(self, request: CheckAnswerRequest) -> Optional[CheckAnswerResponse]:
        """Grade ``request``; None when the question is unknown or already answered."""
        correct_answer = self.answer_store.consume(request.question_id)
        if correct_answer is None:
            return None
        is_correct = request.selected_answer.casefold() == correct_answer.casefold()
        logger.debug({"event": "answer_checked", "question_id": request.question_id, "is_correct": is_correct})
        return CheckAnswerResponse(
            question_id=request.question_id,
            is_correct=is_correct,
            correct_answer=correct_answer,
        )

    def _shuffle_options(self, raw: OpenTdbQuestion) -> List[str]:
        options = list(raw.incorrect_answers)
        options.append(raw.correct_answer)
        # random.shuffle is Fisher-Yates: every ordering equally likely.
        self.rng.shuffle(options)
        return options

    def _to_client_question(self, question_id: str, raw: OpenTdbQuestion) -> TriviaQuestionResponse:
        return TriviaQuestionResponse(
            question_id=question_id,
            category=raw.category,
            difficulty=parse_difficulty(raw.difficulty),
            type=parse_type(raw.type),
            question=raw.question,
            options=self._shuffle_options(raw),
        )
