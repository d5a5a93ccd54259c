from database import db

class Section(db.Model):
    """
    A section is one page of the survey wizard.
    
    For example:
    - Section 1: "About you"
    - Section 2: "Your visit"
    
    The respondent moves between sections with Back / Next / Finish, in the
    order given by position (unique within a survey).
    """
    
    __tablename__ = 'sections'
    __table_args__ = (
        db.UniqueConstraint('survey_id', 'position', name='uq_section_position'),
    )
    
    # Columns
    id = db.Column(db.Integer, primary_key=True)
    survey_id = db.Column(db.Integer, db.ForeignKey('surveys.id'), nullable=False)
    position = db.Column(db.Integer, nullable=False)  # Order: 1, 2, 3...
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)  # Optional instructions for this section
    
    # Relationships
    # every question of the page, subquestions included
    questions = db.relationship('Question', backref='section', lazy=True,
                                cascade='all, delete-orphan', order_by='Question.position')
    
    def top_level_questions(self):
        """Questions without a parent; subquestions hang off these."""
        return [q for q in self.questions if q.parent_id is None]
    
    def __repr__(self):
        return f'<Section {self.position}: {self.title}>'
