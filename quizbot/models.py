"""
Data Models Module
Typed question records and solve results shared by the quiz pipeline.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class QuestionType(str, Enum):
    """Closed set of question types detected from input controls."""
    MULTIPLE_CHOICE = "multiple_choice"
    MULTIPLE_SELECT = "multiple_select"
    ESSAY = "essay"
    SHORT_ANSWER = "short_answer"
    UNKNOWN = "unknown"

    @property
    def is_choice(self) -> bool:
        return self in (QuestionType.MULTIPLE_CHOICE, QuestionType.MULTIPLE_SELECT)

    @property
    def is_free_text(self) -> bool:
        return self in (QuestionType.ESSAY, QuestionType.SHORT_ANSWER)


class CamelModel(BaseModel):
    """Base model serialising with camelCase keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_dict(self) -> dict:
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)


class QuestionOption(CamelModel):
    """One selectable option of a choice question."""
    text: str
    value: str = ''
    id: str = ''


class QuestionRecord(CamelModel):
    """
    One detected quiz question.

    Options are filled only for choice types and ``input_id`` only for
    free-text types; an unknown question carries neither.
    """
    index: int
    text: str
    type: QuestionType = QuestionType.UNKNOWN
    options: List[QuestionOption] = []
    input_id: Optional[str] = None

    @model_validator(mode='after')
    def check_shape(self):
        if not self.text.strip():
            raise ValueError("question text must not be empty")
        if self.index < 0:
            raise ValueError("question index must not be negative")
        if self.type.is_choice:
            if not self.options:
                raise ValueError(f"{self.type.value} question needs options")
            if self.input_id is not None:
                raise ValueError(f"{self.type.value} question cannot carry an input id")
        elif self.type.is_free_text:
            if not self.input_id:
                raise ValueError(f"{self.type.value} question needs an input id")
            if self.options:
                raise ValueError(f"{self.type.value} question cannot carry options")
        elif self.options or self.input_id is not None:
            raise ValueError("unknown question carries neither options nor input id")
        return self


class AnswerResult(CamelModel):
    """Outcome of resolving and filling one question: an answer or an error."""
    question_text: str
    question_type: QuestionType
    answer: Optional[str] = None
    filled: Optional[bool] = None
    error: Optional[str] = None

    @model_validator(mode='after')
    def check_tag(self):
        if self.error is not None:
            if self.answer is not None or self.filled is not None:
                raise ValueError("an errored result cannot carry an answer")
        elif self.answer is None or self.filled is None:
            raise ValueError("a result needs either an answer and fill flag or an error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, question: QuestionRecord, answer: str, filled: bool) -> 'AnswerResult':
        return cls(
            question_text=question.text,
            question_type=question.type,
            answer=answer,
            filled=filled,
        )

    @classmethod
    def failure(cls, question: QuestionRecord, error: str) -> 'AnswerResult':
        return cls(
            question_text=question.text,
            question_type=question.type,
            error=error,
        )


class ExtractionReport(CamelModel):
    """Questions found on the page."""
    questions: List[QuestionRecord]
    count: int


class SolveReport(CamelModel):
    """Per-question outcomes of one solve operation."""
    results: List[AnswerResult]
    total_questions: int
    answered_questions: int
    submitted: Optional[bool] = None
