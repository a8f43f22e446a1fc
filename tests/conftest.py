"""Shared test fixtures."""
from __future__ import annotations

import pytest

from quizbot.extractor import SCAN_QUESTIONS_JS
from quizbot.filler import CHECK_OPTION_JS, FILL_TEXT_JS
from quizbot.models import QuestionOption, QuestionRecord, QuestionType
from quizbot.solver_core import CLICK_SUBMIT_JS


class FakePage:
    """In-memory page accessor mirroring what the page scripts do to a real DOM."""

    def __init__(self, snapshots=None, controls=(), fields=(), has_submit=False):
        self.snapshots = snapshots or []
        self.checked = {control_id: False for control_id in controls}
        # Text-capable fields in document order, id -> value
        self.fields = {field_id: "" for field_id in fields}
        self.has_submit = has_submit
        self.submit_clicks = 0
        self.events = []
        self.errors = {}

    def fail_on(self, expression, exc):
        self.errors[expression] = exc

    async def evaluate(self, expression, arg=None):
        if expression in self.errors:
            raise self.errors[expression]
        if expression == SCAN_QUESTIONS_JS:
            return self.snapshots
        if expression == CHECK_OPTION_JS:
            if arg not in self.checked:
                return False
            self.checked[arg] = True
            self.events.append(("change", arg))
            return True
        if expression == FILL_TEXT_JS:
            target = arg["inputId"] if arg["inputId"] in self.fields else next(iter(self.fields), None)
            if target is None:
                return False
            self.fields[target] = arg["answer"]
            self.events.append(("input", target))
            self.events.append(("change", target))
            return True
        if expression == CLICK_SUBMIT_JS:
            if not self.has_submit:
                return False
            self.submit_clicks += 1
            return True
        raise AssertionError(f"unexpected script: {expression[:40]}")


class FakeClient:
    """Completion client returning scripted replies in order."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def complete(self, system_prompt, user_prompt, max_tokens, temperature):
        self.calls.append({
            "system": system_prompt,
            "user": user_prompt,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def choice_snapshot(text, option_ids, kind="radios"):
    """Raw scan snapshot for a radio or checkbox question."""
    snapshot = {
        "text": text,
        "radios": [],
        "checkboxes": [],
        "hasTextarea": False,
        "textareaId": "",
        "hasTextInput": False,
        "textInputId": "",
    }
    snapshot[kind] = [
        {"text": f"Option {oid}", "value": str(i), "id": oid}
        for i, oid in enumerate(option_ids)
    ]
    return snapshot


def text_snapshot(text, textarea_id=None, text_input_id=None):
    """Raw scan snapshot for an essay or short-answer question."""
    return {
        "text": text,
        "radios": [],
        "checkboxes": [],
        "hasTextarea": textarea_id is not None,
        "textareaId": textarea_id or "",
        "hasTextInput": text_input_id is not None,
        "textInputId": text_input_id or "",
    }


@pytest.fixture
def mc_question():
    """A multiple-choice record with three options."""
    return QuestionRecord(
        index=0,
        text="Which planet is closest to the sun?",
        type=QuestionType.MULTIPLE_CHOICE,
        options=[
            QuestionOption(text="Mercury", value="0", id="o0"),
            QuestionOption(text="Venus", value="1", id="o1"),
            QuestionOption(text="Earth", value="2", id="o2"),
        ],
    )


@pytest.fixture
def ms_question():
    """A multiple-select record with three options."""
    return QuestionRecord(
        index=1,
        text="Which of these are prime?",
        type=QuestionType.MULTIPLE_SELECT,
        options=[
            QuestionOption(text="2", value="a", id="c0"),
            QuestionOption(text="4", value="b", id="c1"),
            QuestionOption(text="5", value="c", id="c2"),
        ],
    )


@pytest.fixture
def short_question():
    return QuestionRecord(
        index=2,
        text="What is the capital of France?",
        type=QuestionType.SHORT_ANSWER,
        input_id="answer-2",
    )


@pytest.fixture
def essay_question():
    return QuestionRecord(
        index=3,
        text="Discuss the causes of the First World War.",
        type=QuestionType.ESSAY,
        input_id="essay-3",
    )
