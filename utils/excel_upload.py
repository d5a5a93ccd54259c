import logging

import pandas as pd

from database import db
from data_tables.answer import Answer
from data_tables.question import Question, QUESTION_TYPES, SELECT
from data_tables.section import Section
from data_tables.survey import Survey

logger = logging.getLogger(__name__)

# columns the sheet has to provide; section_description, question_key, type,
# options, parent_key and parent_value are optional
REQUIRED_COLUMNS = ['section', 'question']


def read_survey_sheet(file_path):
    """
    Read an Excel file describing a survey.

    Parameters:
        file_path: Path to the Excel file

    Returns:
        DataFrame with one row per question, column names lower-cased
    """
    excel_data = pd.read_excel(file_path, dtype=str)
    excel_data.columns = [str(column).strip().lower() for column in excel_data.columns]
    return excel_data


def _cell(row_data, column):
    """Cell text, or None for missing/empty cells."""
    if column not in row_data:
        return None
    value = row_data[column]
    if pd.isna(value):
        return None
    value = str(value).strip()
    if value == '' or value == 'nan':
        return None
    return value


def parse_options(text):
    """
    'yes=Yes|no=No' -> [('yes', 'Yes'), ('no', 'No')]

    an option without '=' uses the same text as value and label
    """
    options = []
    if not text:
        return options
    for part in text.split('|'):
        part = part.strip()
        if part == '':
            continue
        if '=' in part:
            value, label = part.split('=', 1)
        else:
            value, label = part, part
        options.append((value.strip(), label.strip()))
    return options


def build_survey(excel_data, title, description=''):
    """
    Create a survey (sections, questions, answers) from a sheet.

    Sections are numbered in the order they first appear; questions in the
    order of their rows. parent_key points at the question_key of an earlier
    question in the same section, which turns the row into a subquestion shown
    when the parent is answered with parent_value.

    Nothing is committed here.
    """
    missing = [column for column in REQUIRED_COLUMNS if column not in excel_data.columns]
    if missing:
        raise ValueError(f'Missing columns in survey sheet: {", ".join(missing)}')

    survey = Survey(title=title, description=description)
    db.session.add(survey)

    sections = {}
    questions_by_key = {}
    question_counts = {}

    for row_index, row_data in excel_data.iterrows():
        section_title = _cell(row_data, 'section')
        question_text = _cell(row_data, 'question')

        # Skip empty rows
        if section_title is None or question_text is None:
            continue

        section = sections.get(section_title)
        if section is None:
            section = Section(
                survey=survey,
                position=len(sections) + 1,
                title=section_title,
                description=_cell(row_data, 'section_description') or ''
            )
            db.session.add(section)
            sections[section_title] = section
            question_counts[section_title] = 0

        question_type = (_cell(row_data, 'type') or SELECT).lower()
        if question_type not in QUESTION_TYPES:
            raise ValueError(f'Row {row_index + 2}: unknown question type "{question_type}"')

        question_counts[section_title] += 1
        question = Question(
            section=section,
            position=question_counts[section_title],
            type=question_type,
            question=question_text
        )

        parent_key = _cell(row_data, 'parent_key')
        if parent_key is not None:
            parent = questions_by_key.get(parent_key)
            if parent is None or parent.section is not section:
                raise ValueError(f'Row {row_index + 2}: parent "{parent_key}" not found earlier in section "{section_title}"')
            question.parent = parent
            question.parent_value = _cell(row_data, 'parent_value')

        for position, (value, label) in enumerate(parse_options(_cell(row_data, 'options')), start=1):
            question.answers.append(Answer(position=position, value=value, answer=label))

        db.session.add(question)

        question_key = _cell(row_data, 'question_key')
        if question_key is not None:
            questions_by_key[question_key] = question

    if not sections:
        raise ValueError('No questions found in survey sheet')

    logger.info('built survey "%s" with %d sections', title, len(sections))
    return survey


def import_survey_file(file_path, title, description=''):
    """Read a sheet and store the survey it describes."""
    excel_data = read_survey_sheet(file_path)
    try:
        survey = build_survey(excel_data, title, description)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return survey


def check_if_excel_file(filename, allowed_types=('xlsx', 'xls')):
    """
    Check if a file is an Excel file (.xlsx or .xls).

    Parameters:
        filename: Name of the file
        allowed_types: extensions to accept (without the dot)

    Returns:
        True if Excel file, False otherwise
    """
    # Check if filename has a dot
    if '.' not in filename:
        return False

    # Get the file extension
    file_extension = filename.rsplit('.', 1)[1].lower()

    # Check if it's one of the accepted extensions
    if file_extension in allowed_types:
        return True
    else:
        return False
