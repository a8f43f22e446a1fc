"""
Question Extractor Module
Scans a loaded quiz page and turns its question containers into typed records.
"""

import logging
from typing import Any, Dict, List, Optional

from .models import QuestionOption, QuestionRecord, QuestionType

logger = logging.getLogger(__name__)


# Runs inside the page. Returns one raw snapshot per container in document
# order; a container that throws yields {error} instead of a snapshot.
SCAN_QUESTIONS_JS = '''() => {
    const containers = document.querySelectorAll('.question, .quiz_question, [class*="question"]');
    const labelText = (control) => {
        let label = control.closest('label');
        if (!label && control.id) {
            label = document.querySelector(`label[for="${CSS.escape(control.id)}"]`);
        }
        if (!label) {
            label = control.parentElement;
        }
        return label ? (label.innerText || label.textContent || '').trim() : '';
    };
    const choices = (el, type) => Array.from(
        el.querySelectorAll(`input[type="${type}"]`)
    ).map((control) => ({
        text: labelText(control),
        value: control.value || '',
        id: control.id || ''
    }));

    return Array.from(containers).map((el) => {
        try {
            const textEl = el.querySelector('.question_text, .text, [class*="question_text"]');
            const textarea = el.querySelector('textarea');
            const textInput = el.querySelector('input[type="text"]');
            return {
                text: textEl ? (textEl.innerText || textEl.textContent || '') : '',
                radios: choices(el, 'radio'),
                checkboxes: choices(el, 'checkbox'),
                hasTextarea: !!textarea,
                textareaId: textarea ? textarea.id : '',
                hasTextInput: !!textInput,
                textInputId: textInput ? textInput.id : ''
            };
        } catch (e) {
            return {error: String(e && e.message ? e.message : e)};
        }
    });
}'''


class QuestionExtractor:
    """
    Detects quiz questions on a page.

    The page scan returns raw per-container snapshots; classification,
    index assignment and fallback ids happen here so that indices stay
    dense over the questions actually kept.
    """

    async def extract(self, page) -> List[QuestionRecord]:
        """
        Extract question records from the page.

        Args:
            page: Page accessor bound to the loaded quiz document

        Returns:
            Records in document order; never raises
        """
        try:
            snapshots = await page.evaluate(SCAN_QUESTIONS_JS)
        except Exception as e:
            logger.error(f"Question scan failed: {e}")
            return []

        records = self.build_records(snapshots or [])
        logger.info(f"Extracted {len(records)} questions from {len(snapshots or [])} containers")
        return records

    def build_records(self, snapshots: List[Dict[str, Any]]) -> List[QuestionRecord]:
        """Build records from raw container snapshots, skipping empty or broken ones."""
        records: List[QuestionRecord] = []

        for position, snapshot in enumerate(snapshots):
            try:
                record = self._build_record(snapshot, len(records))
            except Exception as e:
                logger.warning(f"Skipping question container {position}: {e}")
                continue
            if record is not None:
                records.append(record)

        return records

    def _build_record(self, snapshot: Dict[str, Any], index: int) -> Optional[QuestionRecord]:
        if snapshot.get('error'):
            raise ValueError(snapshot['error'])

        text = (snapshot.get('text') or '').strip()
        if not text:
            return None

        question_type = self.classify(snapshot)
        options: List[QuestionOption] = []
        input_id = None

        if question_type == QuestionType.MULTIPLE_CHOICE:
            options = self._options(snapshot['radios'])
        elif question_type == QuestionType.MULTIPLE_SELECT:
            options = self._options(snapshot['checkboxes'])
        elif question_type == QuestionType.ESSAY:
            input_id = snapshot.get('textareaId') or f'textarea-{index}'
        elif question_type == QuestionType.SHORT_ANSWER:
            input_id = snapshot.get('textInputId') or f'text-{index}'

        return QuestionRecord(
            index=index,
            text=text,
            type=question_type,
            options=options,
            input_id=input_id,
        )

    @staticmethod
    def classify(snapshot: Dict[str, Any]) -> QuestionType:
        """Pick the question type from the controls present, first match wins."""
        if snapshot.get('radios'):
            return QuestionType.MULTIPLE_CHOICE
        if snapshot.get('checkboxes'):
            return QuestionType.MULTIPLE_SELECT
        if snapshot.get('hasTextarea'):
            return QuestionType.ESSAY
        if snapshot.get('hasTextInput'):
            return QuestionType.SHORT_ANSWER
        return QuestionType.UNKNOWN

    @staticmethod
    def _options(controls: List[Dict[str, Any]]) -> List[QuestionOption]:
        return [
            QuestionOption(
                text=(control.get('text') or '').strip(),
                value=control.get('value') or '',
                id=control.get('id') or '',
            )
            for control in controls
        ]
