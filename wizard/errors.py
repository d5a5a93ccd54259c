class SurveyError(Exception):
    """Base class for fatal survey errors (never used for navigation)."""


class SectionNotFound(SurveyError):
    """Raised when a section id does not belong to the survey being taken."""

    def __init__(self, survey_id, section_id):
        self.survey_id = survey_id
        self.section_id = section_id
        super().__init__(f"We couldn't find the section with id ({section_id}) in survey {survey_id}")


class EmptySurvey(SurveyError):
    """Raised when a survey has no sections to show."""

    def __init__(self, survey_id):
        self.survey_id = survey_id
        super().__init__(f'Survey {survey_id} has no sections')
