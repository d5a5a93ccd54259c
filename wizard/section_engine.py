"""
Section engine: which questions a section presents, and what a submitted
section form means.

compute_visible_questions() and classify_submission() are pure; SectionEngine
wires them to the response and navigation stores for one survey.
"""
import logging

from wizard.types import (
    Classification,
    ComputeResult,
    SubmissionOutcome,
    back_field,
    submit_field,
)
from wizard.validation import FormValidator

logger = logging.getLogger(__name__)


def _blank(value):
    return value is None or str(value).strip() == ''


def compute_visible_questions(questions, stored, previously_shown, submission=None):
    """
    Walk a section's question tree and work out what to show.

    - questions: top-level QuestionNodes of the section
    - stored: {question_id: value} already in the response store for the section
    - previously_shown: question ids the previous render showed
    - submission: raw posted values ({'question-<id>': value}); a posted
      field beats the stored answer, so subquestions open up (or close, when
      the field was cleared) before the answer is saved

    Questions come out in traversal order: top-level by position, each one
    followed by its applicable subquestions. Subquestions whose parent_value no
    longer matches the parent's answer are listed as stale (with everything
    below them) when they have a stored answer.
    """
    submission = submission or {}
    visible = []
    seen = set()
    stale = []
    revealed = False

    def current_answer(question):
        if question.field_id in submission:
            value = submission[question.field_id]
        else:
            value = stored.get(question.id)
        return None if _blank(value) else str(value).strip()

    def mark_stale(question):
        if question.id in stored:
            stale.append(question.id)
        for sub in question.subquestions:
            mark_stale(sub)

    def add(question):
        nonlocal revealed
        if question.id in seen:
            return
        seen.add(question.id)
        visible.append(question)

        answer = current_answer(question)
        if answer is None:
            return
        for sub in question.subquestions:
            if sub.parent_value == answer:
                if sub.id not in previously_shown and sub.id not in seen:
                    revealed = True
                add(sub)
            else:
                mark_stale(sub)

    top_level = [q for q in questions if q.parent_id is None]
    for question in sorted(top_level, key=lambda q: q.position):
        add(question)

    # a question reachable twice is shown once, so it can't be stale as well
    stale = [qid for qid in dict.fromkeys(stale) if qid not in seen]
    return ComputeResult(visible=tuple(visible), stale=tuple(stale), revealed=revealed)


def classify_submission(section_id, result, submission, validator=None, previously_shown=()):
    """
    Decide what a posted section form asks for.

    Only back-<section>, submit-<section> and the question-<id> fields of the
    visible questions are looked at. Questions the respondent already saw on
    the previous render must be answered (unless going back); subquestions
    appearing for the first time are not required yet.
    """
    validator = validator or FormValidator()
    back_key = back_field(section_id)
    submit_key = submit_field(section_id)

    fields = [back_key, submit_key] + [q.field_id for q in result.visible]
    required = [q.field_id for q in result.visible if q.id in previously_shown]
    validation = validator.run(fields, submission, required, back_field=back_key)

    if not validation.passed:
        return SubmissionOutcome(Classification.NONE, errors=validation.errors,
                                 validated=validation.validated)

    validated = validation.validated
    if validated.get(back_key):
        return SubmissionOutcome(Classification.BACK, validated=validated)

    if not validated.get(submit_key):
        return SubmissionOutcome(Classification.NONE, validated=validated)

    # every posted field is written, a cleared one as ''; always strings, so
    # parent_value comparisons stay stable
    upserts = {}
    for question in result.visible:
        if question.field_id in validated:
            upserts[question.id] = str(validated[question.field_id])

    if result.revealed:
        classification = Classification.SUBQUESTIONS_REVEALED
    else:
        classification = Classification.ADVANCE
    return SubmissionOutcome(classification, upserts=upserts, deletions=result.stale,
                             validated=validated)


class SectionEngine:
    """Runs compute/classify for one survey against its session stores."""

    def __init__(self, responses, navigation, validator=None):
        self.responses = responses
        self.navigation = navigation
        self.validator = validator or FormValidator()

    def render(self, section, questions):
        """Compute the questions to draw; remembers them as shown."""
        stored = self.responses.for_section(section.id)
        result = compute_visible_questions(questions, stored, self.navigation.questions_shown)
        self.navigation.questions_shown = result.visible_ids
        return result

    def submit(self, section, questions, submission):
        """
        Process a posted form for a section.

        Returns (ComputeResult, SubmissionOutcome). Answers are written and
        stale answers dropped only when the outcome is ADVANCE or
        SUBQUESTIONS_REVEALED.
        """
        shown = self.navigation.questions_shown
        stored = self.responses.for_section(section.id)
        result = compute_visible_questions(questions, stored, shown, submission)
        self.navigation.questions_shown = result.visible_ids

        outcome = classify_submission(section.id, result, submission, self.validator, shown)
        logger.info('section %s submission classified as %s', section.id,
                    outcome.classification.value)

        if outcome.classification in (Classification.ADVANCE,
                                      Classification.SUBQUESTIONS_REVEALED):
            self._persist(section.id, outcome)
        return result, outcome

    def _persist(self, section_id, outcome):
        for question_id, value in outcome.upserts.items():
            self.responses.set(section_id, question_id, value)
        for question_id in outcome.deletions:
            if self.responses.delete(section_id, question_id):
                logger.info('dropped stale answer for question %s in section %s',
                            question_id, section_id)
