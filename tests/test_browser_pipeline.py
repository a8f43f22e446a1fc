"""Runs the page scripts in a real Chromium against a static quiz page.

Skipped when Playwright's browser is not installed.
"""
from __future__ import annotations

import pytest

from conftest import FakeClient
from quizbot.filler import AnswerFiller
from quizbot.models import QuestionOption, QuestionRecord, QuestionType
from quizbot.solver_core import QuizSolver

async_api = pytest.importorskip("playwright.async_api")

QUIZ_HTML = """
<html><body>
<form id="quiz" onsubmit="window.submitted = true; return false;">
  <div class="question" id="q1">
    <div class="question_text">  What colour is the sky?  </div>
    <label><input type="radio" name="q1" id="q1-a" value="blue"> Blue</label>
    <label><input type="radio" name="q1" id="q1-b" value="green"> Green</label>
  </div>
  <div class="question">
    <div class="question_text"></div>
    <input type="text" id="ignored">
  </div>
  <div class="quiz_question">
    <div class="question_text">Which are even?</div>
    <input type="checkbox" id="q2-a" value="2"><label for="q2-a">Two</label>
    <input type="checkbox" id="q2-b" value="3"><label for="q2-b">Three</label>
    <span><input type="checkbox" id="q2-c" value="4"> Four</span>
  </div>
  <div class="question">
    <div class="question_text">Explain gravity.</div>
    <textarea id="essay"></textarea>
  </div>
  <div class="question">
    <div class="question_text">Name a prime.</div>
    <input type="text">
  </div>
  <button type="submit">Submit</button>
</form>
<script>
  window.changes = [];
  document.addEventListener('change', (e) => window.changes.push(e.target.id || e.target.tagName));
</script>
</body></html>
"""


@pytest.mark.asyncio
async def test_extract_fill_and_submit_in_browser():
    async with async_api.async_playwright() as p:
        try:
            browser = await p.chromium.launch(headless=True)
        except Exception as e:
            pytest.skip(f"Chromium not available: {e}")
        try:
            page = await browser.new_page()
            await page.set_content(QUIZ_HTML)
            solver = QuizSolver(delay=0)

            report = await solver.extract(page)
            questions = report.questions

            assert report.count == 4
            assert [q.index for q in questions] == [0, 1, 2, 3]
            assert [q.type for q in questions] == [
                QuestionType.MULTIPLE_CHOICE,
                QuestionType.MULTIPLE_SELECT,
                QuestionType.ESSAY,
                QuestionType.SHORT_ANSWER,
            ]
            assert questions[0].text == "What colour is the sky?"
            assert [o.text for o in questions[0].options] == ["Blue", "Green"]
            assert [o.text for o in questions[1].options] == ["Two", "Three", "Four"]
            assert questions[2].input_id == "essay"
            assert questions[3].input_id == "text-3"

            client = FakeClient(["A", "A, C", "Mass attracts mass.", "7"])
            result = await solver.solve(page, client, questions, auto_submit=True)

            assert [r.filled for r in result.results] == [True, True, True, True]
            assert result.submitted is True
            state = await page.evaluate("""() => ({
                q1a: document.getElementById('q1-a').checked,
                q1b: document.getElementById('q1-b').checked,
                q2: ['q2-a', 'q2-b', 'q2-c'].map((id) => document.getElementById(id).checked),
                essay: document.getElementById('essay').value,
                changes: window.changes,
                submitted: !!window.submitted
            })""")
            assert state["q1a"] is True
            assert state["q1b"] is False
            assert state["q2"] == [True, False, True]
            assert state["essay"] == "Mass attracts mass."
            assert "essay" in state["changes"]
            assert [state["changes"].count(cid) for cid in ("q1-a", "q2-a", "q2-c")] == [1, 1, 1]
            assert state["submitted"] is True
        finally:
            await browser.close()


CHECKBOX_HTML = """
<html><body>
<label><input type="checkbox" id="pre" checked> Already ticked</label>
<label><input type="checkbox" id="fresh"> Not yet</label>
<script>
  window.changes = [];
  document.addEventListener('change', (e) => window.changes.push(e.target.id));
</script>
</body></html>
"""


@pytest.mark.asyncio
async def test_each_checked_control_sees_one_change_event():
    question = QuestionRecord(
        index=0,
        text="Tick both",
        type=QuestionType.MULTIPLE_SELECT,
        options=[QuestionOption(text="pre", id="pre"), QuestionOption(text="fresh", id="fresh")],
    )
    async with async_api.async_playwright() as p:
        try:
            browser = await p.chromium.launch(headless=True)
        except Exception as e:
            pytest.skip(f"Chromium not available: {e}")
        try:
            page = await browser.new_page()
            await page.set_content(CHECKBOX_HTML)

            assert await AnswerFiller().fill(page, question, "A,B") is True

            state = await page.evaluate("""() => ({
                pre: document.getElementById('pre').checked,
                fresh: document.getElementById('fresh').checked,
                changes: window.changes
            })""")
            assert state["pre"] is True
            assert state["fresh"] is True
            assert sorted(state["changes"]) == ["fresh", "pre"]
        finally:
            await browser.close()
