"""Navigator tests against the real catalog (sqlite) and a dict session."""

import pytest

from wizard.errors import EmptySurvey, SectionNotFound
from wizard.navigator import SurveyNavigator
from wizard.types import NavigatorState
from wizard.validation import FormValidator


class Respondent:
    """One respondent's session plus a record of completion hand-offs."""

    def __init__(self, survey_id):
        self.session = {}
        self.completed = []
        self.survey_id = survey_id

    def navigator(self):
        # a fresh navigator per request, like the blueprint builds one
        return SurveyNavigator(self.survey_id, session=self.session,
                               on_complete=self.completed.append)

    def get(self, section_id=None):
        return self.navigator().resolve(section_id=section_id)

    def post(self, form):
        return self.navigator().resolve(form)


def field_ids(page):
    return [field.field_id for field in page.fields]


def test_single_section_survey_completes(single_question_survey):
    ids = single_question_survey
    respondent = Respondent(ids['survey'])

    page = respondent.get()
    assert page.state is NavigatorState.IN_SECTION
    assert page.section.id == ids['section']
    assert field_ids(page) == [f"question-{ids['question']}"]

    page = respondent.post({f"question-{ids['question']}": 'yes',
                            f"submit-{ids['section']}": 'Finish'})

    assert page.complete
    assert page.results == {ids['section']: {ids['question']: 'yes'}}
    assert respondent.completed == [page.results]


def test_completed_survey_keeps_showing_results(single_question_survey):
    ids = single_question_survey
    respondent = Respondent(ids['survey'])
    respondent.get()
    respondent.post({f"question-{ids['question']}": 'no', f"submit-{ids['section']}": 'Finish'})

    page = respondent.get()

    assert page.complete
    assert page.results == {ids['section']: {ids['question']: 'no'}}
    # the hand-off happens once, when the survey is finished
    assert len(respondent.completed) == 1


def test_first_visit_starts_on_lowest_position(three_section_survey):
    ids = three_section_survey
    navigator = Respondent(ids['survey']).navigator()

    assert navigator.state is NavigatorState.AWAITING_SECTION
    page = navigator.resolve()

    assert navigator.state is NavigatorState.IN_SECTION
    assert page.section.id == ids['sections'][0]
    assert page.section.title == 'First'


def test_back_is_offered_on_every_section_but_the_first(three_section_survey):
    ids = three_section_survey
    respondent = Respondent(ids['survey'])

    pages = [respondent.get(section_id=section_id) for section_id in ids['sections']]

    assert [page.back_field for page in pages] == [
        None,
        f"back-{ids['sections'][1]}",
        f"back-{ids['sections'][2]}",
    ]


def test_finish_label_only_on_the_last_section(three_section_survey):
    ids = three_section_survey
    respondent = Respondent(ids['survey'])

    labels = [respondent.get(section_id=section_id).submit_label for section_id in ids['sections']]

    assert labels == ['Next', 'Next', 'Finish']


def test_next_and_back_move_one_section(three_section_survey):
    ids = three_section_survey
    s1, s2, s3 = ids['sections']
    q1, q2, q3 = ids['questions']
    respondent = Respondent(ids['survey'])
    respondent.get()

    page = respondent.post({f'question-{q1}': 'yes', f'submit-{s1}': 'Next'})
    assert page.section.id == s2
    assert respondent.session[f"survey.{ids['survey']}.active_section_id"] == s2

    # back does not need the current section to be answered
    page = respondent.post({f'back-{s2}': 'Back'})
    assert page.section.id == s1
    assert respondent.session[f"survey.{ids['survey']}.active_section_id"] == s1

    # the earlier answer is still there when coming back
    assert page.fields[0].current_value == 'yes'


def test_forced_back_on_first_section_stays_put(three_section_survey):
    ids = three_section_survey
    s1 = ids['sections'][0]
    respondent = Respondent(ids['survey'])
    respondent.get()

    page = respondent.post({f'back-{s1}': 'Back'})

    assert page.state is NavigatorState.IN_SECTION
    assert page.section.id == s1


def test_invalid_submission_stays_with_errors(three_section_survey):
    ids = three_section_survey
    s1 = ids['sections'][0]
    q1 = ids['questions'][0]
    respondent = Respondent(ids['survey'])
    respondent.get()

    page = respondent.post({f'submit-{s1}': 'Next'})

    assert page.section.id == s1
    assert page.errors == {f'question-{q1}': 'This question is required'}
    assert page.fields[0].error == 'This question is required'


def test_reveal_keeps_section_then_advances(branching_survey):
    ids = branching_survey
    first, second = ids['first'], ids['second']
    q1, q2, q4 = ids['q1'], ids['q2'], ids['q4']
    respondent = Respondent(ids['survey'])
    respondent.get()

    # "no" reveals nothing: straight on to the second section
    page = respondent.post({f'question-{q1}': 'no', f'question-{q4}': 'yes', f'submit-{first}': 'Next'})
    assert page.section.id == second
    assert q2 not in respondent.navigator().responses.for_section(first)

    page = respondent.post({f'back-{second}': 'Back'})
    assert page.section.id == first
    assert field_ids(page) == [f'question-{q1}', f'question-{q4}']

    # "yes" opens q2: answers are kept but the section is shown again
    page = respondent.post({f'question-{q1}': 'yes', f'question-{q4}': 'yes', f'submit-{first}': 'Next'})
    assert page.section.id == first
    assert field_ids(page) == [f'question-{q1}', f'question-{q2}', f'question-{q4}']
    assert respondent.navigator().responses.for_section(first) == {q1: 'yes', q4: 'yes'}

    page = respondent.post({f'question-{q1}': 'yes', f'question-{q2}': 'y',
                            f'question-{q4}': 'yes', f'submit-{first}': 'Next'})
    assert page.section.id == second
    assert respondent.navigator().responses.for_section(first) == {q1: 'yes', q2: 'y', q4: 'yes'}


def test_changing_parent_answer_drops_subquestion_answer(branching_survey):
    ids = branching_survey
    first, second = ids['first'], ids['second']
    q1, q2, q3, q4 = ids['q1'], ids['q2'], ids['q3'], ids['q4']
    respondent = Respondent(ids['survey'])
    respondent.get()

    respondent.post({f'question-{q1}': 'yes', f'question-{q4}': 'no', f'submit-{first}': 'Next'})
    respondent.post({f'question-{q1}': 'yes', f'question-{q2}': 'x',
                     f'question-{q4}': 'no', f'submit-{first}': 'Next'})
    page = respondent.post({f'question-{q1}': 'yes', f'question-{q2}': 'x', f'question-{q3}': 'a',
                            f'question-{q4}': 'no', f'submit-{first}': 'Next'})
    assert page.section.id == second
    assert respondent.navigator().responses.for_section(first) == {q1: 'yes', q2: 'x', q3: 'a', q4: 'no'}

    respondent.post({f'back-{second}': 'Back'})
    page = respondent.post({f'question-{q1}': 'no', f'question-{q4}': 'no', f'submit-{first}': 'Next'})

    assert page.section.id == second
    assert respondent.navigator().responses.for_section(first) == {q1: 'no', q4: 'no'}


def test_explicit_section_must_belong_to_the_survey(three_section_survey, single_question_survey):
    respondent = Respondent(three_section_survey['survey'])

    with pytest.raises(SectionNotFound):
        respondent.get(section_id=single_question_survey['section'])

    with pytest.raises(SectionNotFound):
        respondent.get(section_id=99999)


def test_survey_without_sections_is_an_error(empty_survey):
    with pytest.raises(EmptySurvey):
        Respondent(empty_survey).get()


def test_reset_starts_over(single_question_survey):
    ids = single_question_survey
    respondent = Respondent(ids['survey'])
    respondent.get()
    respondent.post({f"question-{ids['question']}": 'yes', f"submit-{ids['section']}": 'Finish'})

    navigator = respondent.navigator()
    navigator.reset()
    page = navigator.resolve()

    assert navigator.state is NavigatorState.IN_SECTION
    assert page.section.id == ids['section']
    assert page.fields[0].current_value is None


def test_failed_completion_hand_off_leaves_survey_open(three_section_survey):
    ids = three_section_survey
    s1, s2, s3 = ids['sections']
    q1, q2, q3 = ids['questions']
    session = {}

    def broken(results):
        raise RuntimeError('db down')

    def navigator(on_complete):
        return SurveyNavigator(ids['survey'], session=session, on_complete=on_complete)

    navigator(broken).resolve()
    navigator(broken).resolve({f'question-{q1}': 'yes', f'submit-{s1}': 'Next'})
    navigator(broken).resolve({f'question-{q2}': 'yes', f'submit-{s2}': 'Next'})

    with pytest.raises(RuntimeError):
        navigator(broken).resolve({f'question-{q3}': 'yes', f'submit-{s3}': 'Finish'})

    assert session.get(f"survey.{ids['survey']}.complete") is not True
    page = navigator(broken).resolve()
    assert page.state is NavigatorState.IN_SECTION
    assert page.section.id == s3

    # the hand-off runs again once it can succeed
    completed = []
    page = navigator(completed.append).resolve({f'question-{q3}': 'yes', f'submit-{s3}': 'Finish'})
    assert page.complete
    assert len(completed) == 1


def test_fields_are_marked_required_only_when_answers_are_enforced(single_question_survey):
    ids = single_question_survey

    strict = SurveyNavigator(ids['survey'], session={}).resolve()
    relaxed = SurveyNavigator(ids['survey'], session={},
                              validator=FormValidator(require_answers=False)).resolve()

    assert [field.required for field in strict.fields] == [True]
    assert [field.required for field in relaxed.fields] == [False]
