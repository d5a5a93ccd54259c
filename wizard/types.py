"""
Value objects passed between the catalog, the section engine, the navigator
and the field adapter. None of them touch the database or the session.
"""
from dataclasses import dataclass, field
from enum import Enum


class Classification(Enum):
    """What a submitted section form asks the navigator to do."""
    NONE = 'none'
    BACK = 'back'
    SUBQUESTIONS_REVEALED = 'subquestions_revealed'
    ADVANCE = 'advance'


class NavigatorState(Enum):
    AWAITING_SECTION = 'awaiting_section'
    IN_SECTION = 'in_section'
    COMPLETE = 'complete'


@dataclass(frozen=True)
class AnswerOption:
    value: str
    label: str


@dataclass(frozen=True)
class QuestionNode:
    """
    A question with its answer options and the subquestions hanging off it.
    parent_id / parent_value are None for top-level questions.
    """
    id: int
    type: str
    label: str
    options: tuple = ()
    parent_id: int = None
    parent_value: str = None
    position: int = 0
    subquestions: tuple = ()

    @property
    def field_id(self):
        return question_field(self.id)


@dataclass(frozen=True)
class SurveyInfo:
    id: int
    title: str
    description: str = None


@dataclass(frozen=True)
class SectionInfo:
    id: int
    survey_id: int
    title: str
    position: int
    description: str = None


@dataclass(frozen=True)
class ComputeResult:
    """Outcome of one compute pass over a section's question tree."""
    visible: tuple
    stale: tuple  # question ids whose stored answer no longer applies
    revealed: bool

    @property
    def visible_ids(self):
        return [question.id for question in self.visible]


@dataclass(frozen=True)
class ValidationResult:
    passed: bool
    validated: dict = field(default_factory=dict)
    errors: dict = field(default_factory=dict)


@dataclass(frozen=True)
class SubmissionOutcome:
    """
    classify_submission() result. upserts maps question id -> string value,
    deletions lists question ids to drop from the response store.
    """
    classification: Classification
    upserts: dict = field(default_factory=dict)
    deletions: tuple = ()
    errors: dict = field(default_factory=dict)
    validated: dict = field(default_factory=dict)


@dataclass(frozen=True)
class FieldSpec:
    """Renderable description of one visible question."""
    field_id: str
    label: str
    kind: str
    options: tuple
    current_value: str = None
    required: bool = True
    error: str = None


@dataclass(frozen=True)
class SectionPage:
    """Everything the view needs to draw the active section, or the results."""
    survey: SurveyInfo
    state: NavigatorState
    section: SectionInfo = None
    fields: tuple = ()
    back_field: str = None
    submit_field: str = None
    submit_label: str = None
    errors: dict = field(default_factory=dict)
    results: dict = None

    @property
    def complete(self):
        return self.state is NavigatorState.COMPLETE


def question_field(question_id):
    return f'question-{question_id}'


def back_field(section_id):
    return f'back-{section_id}'


def submit_field(section_id):
    return f'submit-{section_id}'
