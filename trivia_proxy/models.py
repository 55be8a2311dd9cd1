from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional

class CaseInsensitiveEnum(str, Enum):
    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            for member in cls:
                if member.value == value.lower():
                    return member
        return None

class QuestionDifficulty(CaseInsensitiveEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

class QuestionType(CaseInsensitiveEnum):
    MULTIPLE = "multiple"
    BOOLEAN = "boolean"

class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class GetQuestionsParameters(CamelModel):
    amount: int = Field(ge=1)
    category_id: Optional[int] = Field(default=None, ge=1)
    difficulty: Optional[QuestionDifficulty] = None
    type: Optional[QuestionType] = None

# Upstream shapes keep the provider's snake_case field names.
class OpenTdbQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: str = ""
    difficulty: str = ""
    type: str = ""
    question: str = ""
    correct_answer: str = ""
    incorrect_answers: List[str] = Field(default_factory=list)

class OpenTdbApiResponse(BaseModel):
    response_code: int = 0
    results: List[OpenTdbQuestion] = Field(default_factory=list)

class TriviaQuestionResponse(CamelModel):
    question_id: str
    category: str
    difficulty: QuestionDifficulty
    type: QuestionType
    question: str
    options: List[str]

class CheckAnswerRequest(CamelModel):
    question_id: str
    selected_answer: str

class CheckAnswerResponse(CamelModel):
    question_id: str
    is_correct: bool
    correct_answer: str

class NotFoundResponse(BaseModel):
    message: str

class HealthResponse(BaseModel):
    status: str
    pending_answers: int
