"""
Answer Filler Module
Applies resolved answers to the live quiz page.
"""

import logging
from typing import List, Optional

from .models import QuestionRecord, QuestionType

logger = logging.getLogger(__name__)


# Checks a radio/checkbox by id without toggling an already checked box off.
CHECK_OPTION_JS = '''(id) => {
    const control = document.getElementById(id);
    if (!control) {
        return false;
    }
    if (!control.checked) {
        // A real click fires the native change event
        control.click();
        if (control.checked) {
            return true;
        }
        control.checked = true;
    }
    control.dispatchEvent(new Event('change', {bubbles: true}));
    return true;
}'''

# Writes a free-text answer, falling back to the first text-capable field.
FILL_TEXT_JS = '''(data) => {
    const input = (data.inputId && document.getElementById(data.inputId)) ||
        document.querySelector('textarea, input[type="text"]');
    if (!input) {
        return false;
    }
    input.value = data.answer;
    input.dispatchEvent(new Event('input', {bubbles: true}));
    input.dispatchEvent(new Event('change', {bubbles: true}));
    return true;
}'''


def parse_letter(token: str) -> Optional[int]:
    """
    Map an answer token to a zero-based option index.

    Only a capital letter as the first character of the stripped token is
    accepted; anything else yields None.
    """
    token = token.strip()
    if not token:
        return None
    first = token[0]
    if 'A' <= first <= 'Z':
        return ord(first) - ord('A')
    return None


def parse_letters(answer: str) -> List[int]:
    """Parse a comma-separated letter list, dropping unparseable and repeated tokens."""
    indices: List[int] = []
    for token in answer.split(','):
        index = parse_letter(token)
        if index is not None and index not in indices:
            indices.append(index)
    return indices


class AnswerFiller:
    """Maps an answer onto the question's DOM controls."""

    async def fill(self, page, question: QuestionRecord, answer: str) -> bool:
        """
        Apply an answer to the page.

        Args:
            page: Page accessor bound to the quiz document
            question: Record the answer belongs to
            answer: Raw answer text from the resolver

        Returns:
            True if a control was found and mutated; never raises
        """
        try:
            if question.type == QuestionType.MULTIPLE_CHOICE:
                return await self._fill_single(page, question, answer)
            if question.type == QuestionType.MULTIPLE_SELECT:
                return await self._fill_multiple(page, question, answer)
            if question.type.is_free_text:
                return await self._fill_text(page, question, answer)
            return False
        except Exception as e:
            logger.error(f"Error filling question {question.index}: {e}")
            return False

    async def _fill_single(self, page, question: QuestionRecord, answer: str) -> bool:
        index = parse_letter(answer)
        if index is None or index >= len(question.options):
            logger.warning(f"Question {question.index}: no option for answer {answer[:20]!r}")
            return False
        found = await page.evaluate(CHECK_OPTION_JS, question.options[index].id)
        if not found:
            logger.warning(f"Question {question.index}: option {question.options[index].id!r} not found")
        return bool(found)

    async def _fill_multiple(self, page, question: QuestionRecord, answer: str) -> bool:
        for index in parse_letters(answer):
            if index >= len(question.options):
                continue
            option_id = question.options[index].id
            if not await page.evaluate(CHECK_OPTION_JS, option_id):
                logger.warning(f"Question {question.index}: option {option_id!r} not found")
        # Reported as filled once all letters were tried, even if none matched.
        return True

    async def _fill_text(self, page, question: QuestionRecord, answer: str) -> bool:
        found = await page.evaluate(FILL_TEXT_JS, {'inputId': question.input_id, 'answer': answer})
        if not found:
            logger.warning(f"Question {question.index}: no text field to fill")
        return bool(found)
