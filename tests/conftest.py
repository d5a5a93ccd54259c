"""Shared fixtures: an app on in-memory sqlite and a few seeded surveys."""

import pytest

from app import create_app
from config import TestConfig
from database import db
from data_tables.answer import Answer
from data_tables.question import Question, RADIO, SELECT
from data_tables.section import Section
from data_tables.survey import Survey

YES_NO = [('yes', 'Yes'), ('no', 'No')]


def add_question(section, text, options=YES_NO, parent=None, parent_value=None,
                 type=SELECT, position=None):
    if position is None:
        position = len(section.questions) + 1
    question = Question(section=section, question=text, type=type, position=position,
                        parent=parent, parent_value=parent_value)
    for index, (value, label) in enumerate(options, start=1):
        question.answers.append(Answer(position=index, value=value, answer=label))
    db.session.add(question)
    return question


def add_section(survey, title, position):
    section = Section(survey=survey, title=title, position=position, description='')
    db.session.add(section)
    return section


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def single_question_survey(app):
    """One section, one yes/no question."""
    survey = Survey(title='Quick poll')
    db.session.add(survey)
    section = add_section(survey, 'Only page', 1)
    question = add_question(section, 'Do you like surveys?')
    db.session.commit()
    return {'survey': survey.id, 'section': section.id, 'question': question.id}


@pytest.fixture
def branching_survey(app):
    """
    Two sections. The first one holds:

        q1 (yes/no)
          q2 shown when q1 == yes (x/y)
            q3 shown when q2 == x (a/b)
        q4 (yes/no)

    The second holds q5.
    """
    survey = Survey(title='Branching')
    db.session.add(survey)
    first = add_section(survey, 'First', 1)
    second = add_section(survey, 'Second', 2)

    q1 = add_question(first, 'Have you visited before?', position=1)
    q2 = add_question(first, 'Which site?', options=[('x', 'Site X'), ('y', 'Site Y')],
                      parent=q1, parent_value='yes', type=RADIO, position=1)
    q3 = add_question(first, 'Which entrance?', options=[('a', 'A'), ('b', 'B')],
                      parent=q2, parent_value='x', position=1)
    q4 = add_question(first, 'Would you come again?', position=2)
    q5 = add_question(second, 'Did you enjoy it?', position=1)
    db.session.commit()
    return {
        'survey': survey.id,
        'first': first.id,
        'second': second.id,
        'q1': q1.id, 'q2': q2.id, 'q3': q3.id, 'q4': q4.id, 'q5': q5.id,
    }


@pytest.fixture
def three_section_survey(app):
    survey = Survey(title='Three pages')
    db.session.add(survey)
    ids = {'survey': None, 'sections': [], 'questions': []}
    # positions deliberately not 1..3 and inserted out of order
    for title, position in (('Third', 30), ('First', 10), ('Second', 20)):
        section = add_section(survey, title, position)
        question = add_question(section, f'{title} question')
        db.session.flush()
        ids['sections'].append((position, section.id))
        ids['questions'].append((position, question.id))
    db.session.commit()
    ids['survey'] = survey.id
    ids['sections'] = [sid for _, sid in sorted(ids['sections'])]
    ids['questions'] = [qid for _, qid in sorted(ids['questions'])]
    return ids


@pytest.fixture
def empty_survey(app):
    survey = Survey(title='Nothing here yet')
    db.session.add(survey)
    db.session.commit()
    return survey.id
