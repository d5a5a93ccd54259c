"""
Field presentation adapter: turns the engine's visible questions into form
fields and back.

The engine never sees markup; templates/survey/_fields.html draws the
FieldSpecs built here.
"""
from flask import render_template
from markupsafe import Markup

from wizard.types import FieldSpec


def build_fields(result, stored, submission=None, errors=None, required=True):
    """
    One FieldSpec per visible question, in display order.

    The current value is what was just posted for the field, if it was posted
    at all (so a re-render keeps the respondent's choices), else the stored
    answer. required marks whether answers are enforced on the next submit.
    """
    submission = submission or {}
    errors = errors or {}
    fields = []
    for question in result.visible:
        if question.field_id in submission:
            value = submission[question.field_id]
        else:
            value = stored.get(question.id)
        fields.append(FieldSpec(
            field_id=question.field_id,
            label=question.label,
            kind=question.type,
            options=tuple((option.value, option.label) for option in question.options),
            current_value=None if value is None else str(value),
            required=required,
            error=errors.get(question.field_id),
        ))
    return tuple(fields)


def collect_submission(form):
    """Raw posted values, one string per field name."""
    return {key: form.get(key) for key in form.keys()}


def render_section(page):
    """Markup for the active section's form."""
    return Markup(render_template('survey/_fields.html', page=page))
