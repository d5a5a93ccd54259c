from database import db
from datetime import datetime

class Response(db.Model):
    """
    one persons completed survey, handed over from the session when the
    last section is finished

    """

    __tablename__ = 'responses'

    id = db.Column(db.Integer, primary_key=True)
    survey_id = db.Column(db.Integer, db.ForeignKey('surveys.id'), nullable=False)

    submitted_at = db.Column(db.DateTime, default=datetime.utcnow)

    entries = db.relationship('ResponseEntry', backref='response', lazy=True, cascade='all, delete-orphan')

    def as_mapping(self):
        """section_id -> question_id -> value, the same shape the session holds."""
        results = {}
        for entry in self.entries:
            results.setdefault(entry.section_id, {})[entry.question_id] = entry.value
        return results

    def __repr__(self):
        return f'<Response {self.id} for Survey {self.survey_id}>'


class ResponseEntry(db.Model):
    """
    one answer inside a completed response
    """

    __tablename__ = 'response_entries'

    id = db.Column(db.Integer, primary_key=True)
    response_id = db.Column(db.Integer, db.ForeignKey('responses.id'), nullable=False)
    section_id = db.Column(db.Integer, db.ForeignKey('sections.id'), nullable=False)
    question_id = db.Column(db.Integer, db.ForeignKey('questions.id'), nullable=False)
    value = db.Column(db.Text, nullable=False)

    def __repr__(self):
        return f'<ResponseEntry: {self.value} for Question {self.question_id}>'
