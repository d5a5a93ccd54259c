"""
Read-only access to survey definitions.

Turns the SQLAlchemy rows from data_tables/ into the frozen value objects the
section engine works with, so nothing past this point lazy-loads from the db.
"""
import logging

from database import db
from data_tables.survey import Survey
from data_tables.section import Section
from wizard.errors import SectionNotFound
from wizard.types import AnswerOption, QuestionNode, SectionInfo, SurveyInfo

logger = logging.getLogger(__name__)


def _section_info(section):
    if section is None:
        return None
    return SectionInfo(
        id=section.id,
        survey_id=section.survey_id,
        title=section.title,
        position=section.position,
        description=section.description,
    )


def _question_node(question):
    return QuestionNode(
        id=question.id,
        type=question.type,
        label=question.question,
        options=tuple(AnswerOption(str(value), label) for value, label in question.options()),
        parent_id=question.parent_id,
        parent_value=None if question.parent_value is None else str(question.parent_value),
        position=question.position,
        subquestions=tuple(_question_node(sub) for sub in question.subquestions),
    )


class QuestionCatalog:

    def __init__(self, survey_id):
        self.survey_id = survey_id

    def _sections(self):
        return Section.query.filter_by(survey_id=self.survey_id)

    def get_survey(self):
        survey = Survey.query.get_or_404(self.survey_id)
        return SurveyInfo(id=survey.id, title=survey.title, description=survey.description)

    def first_section(self):
        return _section_info(self._sections().order_by(Section.position.asc()).first())

    def last_section(self):
        return _section_info(self._sections().order_by(Section.position.desc()).first())

    def section_after(self, position):
        section = (self._sections()
                   .filter(Section.position > position)
                   .order_by(Section.position.asc())
                   .first())
        return _section_info(section)

    def section_before(self, position):
        section = (self._sections()
                   .filter(Section.position < position)
                   .order_by(Section.position.desc())
                   .first())
        return _section_info(section)

    def get_section(self, section_id):
        section = db.session.get(Section, section_id)
        if section is None or section.survey_id != self.survey_id:
            logger.warning('section %s requested for survey %s', section_id, self.survey_id)
            raise SectionNotFound(self.survey_id, section_id)
        return _section_info(section)

    def question_tree(self, section):
        """Top-level questions of a section by position, subquestions nested."""
        row = db.session.get(Section, section.id)
        return [_question_node(question) for question in row.top_level_questions()]
