"""
Survey navigator: keeps track of the active section and moves it forward or
back depending on what the section engine made of the submitted form.
"""
import logging

from wizard.catalog import QuestionCatalog
from wizard.errors import EmptySurvey
from wizard.fields import build_fields
from wizard.section_engine import SectionEngine
from wizard.stores import SessionNavigationStore, SessionResponseStore
from wizard.types import (
    Classification,
    NavigatorState,
    SectionPage,
    back_field,
    submit_field,
)

logger = logging.getLogger(__name__)

NEXT_LABEL = 'Next'
FINISH_LABEL = 'Finish'


class SurveyNavigator:
    """
    Drives one respondent through one survey.

    Every call to resolve() is one request: it loads the active section
    (the first one by position when none is stored), applies the posted form
    if there is one, and returns the SectionPage to show next. on_complete,
    when given, is called with all answers the moment the last section is
    finished.
    """

    def __init__(self, survey_id, catalog=None, responses=None, navigation=None,
                 validator=None, on_complete=None, session=None):
        self.survey_id = survey_id
        self.catalog = catalog or QuestionCatalog(survey_id)
        self.responses = responses or SessionResponseStore(survey_id, session)
        self.navigation = navigation or SessionNavigationStore(survey_id, session)
        self.engine = SectionEngine(self.responses, self.navigation, validator)
        self.on_complete = on_complete
        self.state = NavigatorState.AWAITING_SECTION
        self.active_section = None

    def resolve(self, submission=None, section_id=None):
        """
        Work out the page for this request.

        section_id forces a particular section (it must belong to the survey,
        else SectionNotFound); otherwise the stored active section is used.
        """
        survey = self.catalog.get_survey()

        if self.navigation.complete:
            self.state = NavigatorState.COMPLETE
            return self._complete_page(survey)

        section = self._resolve_section(section_id or self.navigation.active_section_id)
        self.state = NavigatorState.IN_SECTION

        if not submission:
            return self._enter(survey, section)

        questions = self.catalog.question_tree(section)
        result, outcome = self.engine.submit(section, questions, submission)
        classification = outcome.classification

        if classification is Classification.NONE:
            self._set_active(section)
            return self._page(survey, section, result, submission, outcome.errors)

        if classification is Classification.SUBQUESTIONS_REVEALED:
            logger.info('subquestions revealed in section %s', section.id)
            return self._enter(survey, section)

        if classification is Classification.ADVANCE:
            following = self.catalog.section_after(section.position)
            if following is None:
                return self._finish(survey)
            return self._enter(survey, following)

        # Classification.BACK
        previous = self.catalog.section_before(section.position)
        if previous is None:
            logger.warning('back requested on first section %s of survey %s',
                           section.id, self.survey_id)
            return self._enter(survey, section)
        return self._enter(survey, previous)

    def reset(self):
        """Forget every answer and the position in the survey."""
        self.responses.reset()
        self.navigation.reset()
        self.state = NavigatorState.AWAITING_SECTION
        self.active_section = None

    def _resolve_section(self, section_id):
        if section_id:
            return self.catalog.get_section(section_id)
        section = self.catalog.first_section()
        if section is None:
            raise EmptySurvey(self.survey_id)
        return section

    def _set_active(self, section):
        self.active_section = section
        self.navigation.active_section_id = section.id

    def _enter(self, survey, section):
        questions = self.catalog.question_tree(section)
        result = self.engine.render(section, questions)
        logger.debug('survey %s showing section %s (%d questions)',
                     self.survey_id, section.id, len(result.visible))
        self.state = NavigatorState.IN_SECTION
        self._set_active(section)
        return self._page(survey, section, result)

    def _page(self, survey, section, result, submission=None, errors=None):
        first = self.catalog.first_section()
        last = self.catalog.last_section()
        fields = build_fields(result, self.responses.for_section(section.id), submission, errors,
                              required=self.engine.validator.require_answers)
        return SectionPage(
            survey=survey,
            state=self.state,
            section=section,
            fields=fields,
            back_field=back_field(section.id) if section.id != first.id else None,
            submit_field=submit_field(section.id),
            submit_label=FINISH_LABEL if section.id == last.id else NEXT_LABEL,
            errors=errors or {},
        )

    def _finish(self, survey):
        results = self.responses.all()
        # a failing hand-off leaves the survey open on its last section
        if self.on_complete is not None:
            self.on_complete(results)
        self.navigation.mark_complete()
        self.state = NavigatorState.COMPLETE
        self.active_section = None
        logger.info('survey %s complete with %d answered sections', self.survey_id, len(results))
        return self._complete_page(survey, results)

    def _complete_page(self, survey, results=None):
        if results is None:
            results = self.responses.all()
        return SectionPage(survey=survey, state=NavigatorState.COMPLETE, results=results)
