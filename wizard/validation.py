from wizard.types import ValidationResult

REQUIRED_MESSAGE = 'This question is required'


class FormValidator:
    """
    Server-side check of a submitted section form.

    The only rule is "did this field receive a non-empty value". A form with
    none of its fields posted is not a submission at all and never validates.
    Required questions are skipped when the back button was pressed, so the
    respondent can always go back.
    """

    def __init__(self, require_answers=True):
        self.require_answers = require_answers

    def run(self, fields, submission, required_ids=(), back_field=None):
        posted = {key: submission[key] for key in fields if key in submission}
        if not posted:
            return ValidationResult(passed=False)

        validated = {}
        for key, value in posted.items():
            value = '' if value is None else str(value).strip()
            validated[key] = value

        errors = {}
        going_back = back_field is not None and validated.get(back_field)
        if self.require_answers and not going_back:
            for key in required_ids:
                if not validated.get(key):
                    errors[key] = REQUIRED_MESSAGE

        return ValidationResult(passed=not errors, validated=validated, errors=errors)
