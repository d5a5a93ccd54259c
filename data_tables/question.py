"""
this is for one question of one section, with its answer options.

a question with a parent_id is a subquestion: it is only shown when the
parent question is answered with parent_value.
"""
from database import db

# input types a question can be rendered as
SELECT = 'select'
RADIO = 'radio'
QUESTION_TYPES = (SELECT, RADIO)


class Question(db.Model):
    __tablename__ = 'questions'

    id = db.Column(db.Integer, primary_key=True)
    section_id = db.Column(db.Integer, db.ForeignKey('sections.id'), nullable=False)
    parent_id = db.Column(db.Integer, db.ForeignKey('questions.id'))
    parent_value = db.Column(db.String(100))
    position = db.Column(db.Integer, nullable=False, default=0)
    type = db.Column(db.String(20), nullable=False, default=SELECT)
    question = db.Column(db.Text, nullable=False)

    # answer options, in the order they are offered
    answers = db.relationship('Answer', backref='question', lazy=True,
                              cascade='all, delete-orphan', order_by='Answer.position')

    subquestions = db.relationship('Question',
                                   backref=db.backref('parent', remote_side=[id]),
                                   lazy=True, cascade='all, delete-orphan',
                                   order_by='Question.position')

    def options(self):
        """value -> label pairs, in display order"""
        return [(answer.value, answer.answer) for answer in self.answers]

    def __repr__(self):
        return f'<Question {self.id}: {self.question[:50]}...'
