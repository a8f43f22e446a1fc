"""
Answer Resolver Module
Builds type-specific prompts and asks the completion service for answers.
"""

import logging
from typing import List

from .api_utils import CompletionClient
from .models import QuestionOption, QuestionRecord, QuestionType

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    'You are a helpful assistant that provides accurate answers to quiz questions. '
    'Be concise and precise.'
)
TEMPERATURE = 0.3
ESSAY_MAX_TOKENS = 1000
DEFAULT_MAX_TOKENS = 100


class ResolutionError(RuntimeError):
    """Raised when no usable answer comes back for a question."""


def option_letter(position: int) -> str:
    """Letter label of the option at ``position`` (0 -> 'A')."""
    return chr(ord('A') + position)


def _format_options(options: List[QuestionOption]) -> str:
    return ''.join(f"{option_letter(i)}. {opt.text}\n" for i, opt in enumerate(options))


def build_prompt(question: QuestionRecord) -> str:
    """Build the user prompt for a question, constraining the answer format by type."""
    if question.type == QuestionType.MULTIPLE_CHOICE:
        return (
            "Answer this multiple choice question. Return ONLY the letter "
            "(A, B, C, D, etc.) of the correct answer, nothing else.\n\n"
            f"Question: {question.text}\n\nOptions:\n{_format_options(question.options)}"
        )
    if question.type == QuestionType.MULTIPLE_SELECT:
        return (
            "Answer this multiple select question. Return ONLY the letters "
            "(e.g., \"A,C,D\") of ALL correct answers separated by commas, nothing else.\n\n"
            f"Question: {question.text}\n\nOptions:\n{_format_options(question.options)}"
        )
    if question.type == QuestionType.ESSAY:
        return (
            f"Provide a comprehensive essay answer to this question:\n\n{question.text}\n\n"
            "Write a detailed, well-structured response."
        )
    if question.type == QuestionType.SHORT_ANSWER:
        return f"Provide a concise, direct answer to this question:\n\n{question.text}"
    return f"Answer this question:\n\n{question.text}"


def max_tokens_for(question: QuestionRecord) -> int:
    return ESSAY_MAX_TOKENS if question.type == QuestionType.ESSAY else DEFAULT_MAX_TOKENS


class AnswerResolver:
    """Turns a question record into the completion service's raw answer text."""

    def __init__(self, client: CompletionClient):
        self.client = client

    def resolve(self, question: QuestionRecord) -> str:
        """
        Ask the completion service to answer one question.

        Args:
            question: Record produced by the extractor

        Returns:
            Answer text, stripped

        Raises:
            ResolutionError: If the service returned no usable text;
                errors raised by the client propagate unchanged
        """
        prompt = build_prompt(question)
        text = self.client.complete(SYSTEM_PROMPT, prompt, max_tokens_for(question), TEMPERATURE)

        answer = text.strip() if isinstance(text, str) else ''
        if not answer:
            raise ResolutionError(f"Empty answer for question {question.index}")

        logger.info(f"Question {question.index} ({question.type.value}) answered: {answer[:80]}")
        return answer
