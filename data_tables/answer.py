from database import db


class Answer(db.Model):
    """
    one selectable answer of a question: the stored token (value) and
    the text shown to the respondent (answer)
    """

    __tablename__ = 'answers'
    __table_args__ = (
        db.UniqueConstraint('question_id', 'value', name='uq_answer_value'),
    )

    id = db.Column(db.Integer, primary_key=True)
    question_id = db.Column(db.Integer, db.ForeignKey('questions.id'), nullable=False)
    position = db.Column(db.Integer, nullable=False, default=0)
    value = db.Column(db.String(100), nullable=False)
    answer = db.Column(db.String(255), nullable=False)
    
    def __repr__(self):
        return f'<Answer: {self.value}={self.answer} for Question {self.question_id}>'
