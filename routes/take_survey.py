from flask import Blueprint, render_template, request, redirect, url_for, flash, current_app
from flask_mail import Message
from database import db
from data_tables.question import Question
from data_tables.response import Response, ResponseEntry
from data_tables.section import Section
from data_tables.survey import Survey
from wizard.errors import EmptySurvey, SectionNotFound
from wizard.fields import collect_submission, render_section
from wizard.navigator import SurveyNavigator
from wizard.types import NavigatorState
from wizard.validation import FormValidator

survey_bp = Blueprint('survey', __name__, url_prefix='/survey')


@survey_bp.route('/<int:survey_id>', methods=['GET', 'POST'])
def take_survey(survey_id):
    """Show the active section, or handle Back / Next / Finish on it."""

    navigator = make_navigator(survey_id)

    # ?section=<id> jumps straight to a section of this survey
    section_id = request.args.get('section', type=int)

    # ── POST ──────────────────────────────────────────────────────────────────
    if request.method == 'POST':
        page = navigator.resolve(collect_submission(request.form), section_id=section_id)

        if page.state is NavigatorState.IN_SECTION and page.errors:
            # Re-render same section with the errors (no redirect, keeps the form state)
            return render_page(page)

        # any other outcome: show whatever section is active now
        return redirect(url_for('survey.take_survey', survey_id=survey_id))

    # ── GET ───────────────────────────────────────────────────────────────────
    page = navigator.resolve(section_id=section_id)
    return render_page(page)


@survey_bp.route('/<int:survey_id>/restart', methods=['POST'])
def restart_survey(survey_id):
    """Throw away the answers in the session and start from the first section."""

    make_navigator(survey_id).reset()
    flash('Survey restarted', 'success')
    return redirect(url_for('survey.take_survey', survey_id=survey_id))


@survey_bp.errorhandler(SectionNotFound)
def section_not_found(error):
    current_app.logger.warning('Section not found: %s', error)
    return render_template('survey/error.html', message=str(error)), 404


@survey_bp.errorhandler(EmptySurvey)
def empty_survey(error):
    current_app.logger.error('Survey has no sections: %s', error)
    return render_template('survey/error.html', message='This survey has no questions yet.'), 500


def make_navigator(survey_id):
    """Navigator for the current respondent (answers live in the session)."""

    def on_complete(results):
        save_completed_response(survey_id, results)

    return SurveyNavigator(
        survey_id,
        validator=FormValidator(current_app.config.get('SURVEY_REQUIRE_ANSWERS', True)),
        on_complete=on_complete,
    )


def render_page(page):
    """
    Render the survey page for the navigator's result.

    A rendering problem is logged and an empty page returned, unless render
    errors are switched on (SURVEY_SHOW_RENDER_ERRORS, or debug mode when that
    setting is None), in which case the error goes up to Flask.
    """

    try:
        if page.complete:
            return render_template('survey/complete.html',
                                   survey=page.survey,
                                   results=page.results,
                                   answered=describe_results(page.results))

        return render_template('survey/survey.html',
                               survey=page.survey,
                               page=page,
                               section=render_section(page))

    except Exception:
        show_errors = current_app.config.get('SURVEY_SHOW_RENDER_ERRORS')
        if show_errors is None:
            show_errors = current_app.debug
        if show_errors:
            raise
        current_app.logger.exception('There was a problem rendering the survey')
        return ''


def describe_results(results):
    """
    Section titles and question texts for the answers given, in survey order.

    Returns a list of (section_title, [(question_text, answer_label), ...]).
    """

    described = []
    section_ids = [int(section_id) for section_id in results]
    sections = Section.query.filter(Section.id.in_(section_ids)).order_by(Section.position).all()

    for section in sections:
        answers = results.get(section.id, {})
        questions = {
            question.id: question
            for question in Question.query.filter(Question.id.in_(list(answers))).all()
        }

        rows = []
        for question_id, value in answers.items():
            question = questions.get(question_id)
            if question is None:
                rows.append((f'Question {question_id}', value))
                continue
            # show the option label rather than the stored token
            labels = dict(question.options())
            rows.append((question.question, labels.get(value, value)))
        described.append((section.title, rows))

    return described


def save_completed_response(survey_id, results):
    """Store the finished survey (called once, when Finish moves past the last section)."""

    survey = db.session.get(Survey, survey_id)
    response = Response(survey=survey)
    for section_id, answers in results.items():
        for question_id, value in answers.items():
            response.entries.append(ResponseEntry(section_id=section_id,
                                                  question_id=question_id,
                                                  value=value))
    db.session.add(response)

    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info('Stored response %s for survey %s', response.id, survey_id)
    send_completion_email(response)
    return response


def send_completion_email(response):
    """Send a short note about a finished survey. Returns True if sent, False if not configured or failed."""

    recipient = current_app.config.get('SURVEY_NOTIFY_EMAIL')

    # Don't even try if nobody should be told or credentials aren't configured
    if not recipient:
        return False
    if not current_app.config.get('MAIL_USERNAME') or not current_app.config.get('MAIL_PASSWORD'):
        current_app.logger.warning('Email not configured: set MAIL_USERNAME and MAIL_PASSWORD environment variables.')
        return False

    try:
        mail = current_app.extensions['mail']

        msg = Message(
            subject=f'Survey completed: {response.survey.title}',
            recipients=[recipient],
            body=f'''Hello,

A respondent has just finished: {response.survey.title}

Response id: {response.id}
Answers given: {len(response.entries)}
Submitted at: {response.submitted_at:%Y-%m-%d %H:%M}

Survey Wizard
'''
        )
        mail.send(msg)
        return True

    except Exception:
        current_app.logger.exception('Email send failed')
        return False
