"""
Session-backed storage for one survey.

Both stores wrap a mutable mapping (Flask's session when none is given) and
use the keys:

    survey.<id>.responses          {section_id: {question_id: value}}
    survey.<id>.active_section_id  int or absent
    survey.<id>.questions_shown    [question_id, ...]
    survey.<id>.complete           bool

The session is serialized as JSON, so ids are kept as strings inside it and
handed back as ints.
"""
import logging

from flask import session as flask_session

logger = logging.getLogger(__name__)


def survey_key(survey_id, name):
    return f'survey.{survey_id}.{name}'


class _SessionStore:

    def __init__(self, survey_id, session=None):
        self.survey_id = survey_id
        self._session = session if session is not None else flask_session

    def _key(self, name):
        return survey_key(self.survey_id, name)

    def _set(self, name, value):
        # reassigning marks a Flask session as modified; nested edits would not
        self._session[self._key(name)] = value


class SessionResponseStore(_SessionStore):
    """Answers given so far, per section and question."""

    def _raw(self):
        return self._session.get(self._key('responses'), {})

    def all(self):
        """Every stored answer as {section_id: {question_id: value}}."""
        return {
            int(section_id): {int(qid): value for qid, value in answers.items()}
            for section_id, answers in self._raw().items()
        }

    def for_section(self, section_id):
        answers = self._raw().get(str(section_id), {})
        return {int(qid): value for qid, value in answers.items()}

    def get(self, section_id, question_id):
        return self._raw().get(str(section_id), {}).get(str(question_id))

    def set(self, section_id, question_id, value):
        responses = {sid: dict(answers) for sid, answers in self._raw().items()}
        responses.setdefault(str(section_id), {})[str(question_id)] = str(value)
        self._set('responses', responses)

    def delete(self, section_id, question_id):
        """Drop one answer; returns True when something was removed."""
        responses = {sid: dict(answers) for sid, answers in self._raw().items()}
        answers = responses.get(str(section_id))
        if not answers or str(question_id) not in answers:
            return False
        del answers[str(question_id)]
        self._set('responses', responses)
        return True

    def reset(self):
        self._session.pop(self._key('responses'), None)


class SessionNavigationStore(_SessionStore):
    """Where the respondent is, and what the last render showed them."""

    @property
    def active_section_id(self):
        value = self._session.get(self._key('active_section_id'))
        # 0 and None both mean "start from the first section"
        return int(value) if value else None

    @active_section_id.setter
    def active_section_id(self, section_id):
        self._set('active_section_id', section_id)

    @property
    def questions_shown(self):
        return {int(qid) for qid in self._session.get(self._key('questions_shown'), [])}

    @questions_shown.setter
    def questions_shown(self, question_ids):
        self._set('questions_shown', [int(qid) for qid in question_ids])

    @property
    def complete(self):
        return bool(self._session.get(self._key('complete'), False))

    def mark_complete(self):
        self._set('complete', True)

    def reset(self):
        for name in ('active_section_id', 'questions_shown', 'complete'):
            self._session.pop(self._key(name), None)
        logger.info('navigation reset for survey %s', self.survey_id)
