"""
Quiz Bot Module
Question extraction, answer resolution and answer filling for quiz pages.
"""

from .models import (
    QuestionType,
    QuestionOption,
    QuestionRecord,
    AnswerResult,
    ExtractionReport,
    SolveReport,
)
from .api_utils import CompletionClient, CompletionError, GroqClient
from .extractor import QuestionExtractor
from .resolver import AnswerResolver, ResolutionError, build_prompt
from .filler import AnswerFiller, parse_letter, parse_letters
from .browser import BrowserManager, PageAccessor
from .session import QuizSession, SessionManager, SessionNotFound
from .solver_core import QuizSolver

__all__ = [
    'QuestionType',
    'QuestionOption',
    'QuestionRecord',
    'AnswerResult',
    'ExtractionReport',
    'SolveReport',
    'CompletionClient',
    'CompletionError',
    'GroqClient',
    'QuestionExtractor',
    'AnswerResolver',
    'ResolutionError',
    'build_prompt',
    'AnswerFiller',
    'parse_letter',
    'parse_letters',
    'BrowserManager',
    'PageAccessor',
    'QuizSession',
    'SessionManager',
    'SessionNotFound',
    'QuizSolver'
]
