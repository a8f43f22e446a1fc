"""
Solver Core Module
Runs extraction and the sequential resolve-then-fill loop over a quiz page.
"""

import os
import asyncio
import logging
from typing import List, Optional

from .api_utils import CompletionClient
from .extractor import QuestionExtractor
from .filler import AnswerFiller
from .models import AnswerResult, ExtractionReport, QuestionRecord, SolveReport
from .resolver import AnswerResolver

logger = logging.getLogger(__name__)

CLICK_SUBMIT_JS = '''() => {
    const submit = document.querySelector('button[type="submit"], input[type="submit"], .submit_quiz_button');
    if (!submit) {
        return false;
    }
    submit.click();
    return true;
}'''


class QuizSolver:
    """
    Quiz solving engine.

    Holds no per-page state: the page accessor, completion client and
    question records are passed into every call by the session owner.
    """

    def __init__(self, delay: Optional[float] = None):
        """
        Args:
            delay: Seconds to wait after each question (QUESTION_DELAY env, default 0.5)
        """
        self.delay = delay if delay is not None else float(os.getenv('QUESTION_DELAY', '0.5'))
        self.extractor = QuestionExtractor()
        self.filler = AnswerFiller()

    async def extract(self, page) -> ExtractionReport:
        """Extract the questions currently on the page."""
        questions = await self.extractor.extract(page)
        return ExtractionReport(questions=questions, count=len(questions))

    async def solve(self, page, client: CompletionClient, questions: List[QuestionRecord],
                    auto_submit: bool = False) -> SolveReport:
        """
        Answer questions one at a time and optionally submit the quiz.

        Args:
            page: Page accessor bound to the quiz document
            client: Completion service used to answer questions
            questions: Records from a previous extraction, in order
            auto_submit: Click the page's submit control afterwards

        Returns:
            Report with one result per question, in question order
        """
        resolver = AnswerResolver(client)
        results: List[AnswerResult] = []

        for question in questions:
            try:
                # Blocking HTTP call, kept off the event loop
                answer = await asyncio.to_thread(resolver.resolve, question)
            except Exception as e:
                logger.error(f"Question {question.index} failed: {e}")
                results.append(AnswerResult.failure(question, str(e) or type(e).__name__))
            else:
                filled = await self.filler.fill(page, question, answer)
                results.append(AnswerResult.success(question, answer, filled))

            # Let the page's own handlers settle before the next mutation
            await asyncio.sleep(self.delay)

        submitted = await self.submit(page) if auto_submit else None

        answered = sum(1 for r in results if r.filled)
        logger.info(f"Solved {answered}/{len(questions)} questions")
        return SolveReport(
            results=results,
            total_questions=len(questions),
            answered_questions=answered,
            submitted=submitted,
        )

    async def submit(self, page) -> bool:
        """Click the quiz's submit control. Errors are logged, not raised."""
        try:
            clicked = bool(await page.evaluate(CLICK_SUBMIT_JS))
        except Exception as e:
            logger.error(f"Auto-submit error: {e}")
            return False
        if clicked:
            logger.info("Quiz submitted")
        else:
            logger.warning("No submit control found")
        return clicked
