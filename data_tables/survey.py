from database import db
from datetime import datetime

class Survey(db.Model):
    """
    This shows an individual survey and its connections:
        - each survey is connected to many sections (the pages of the wizard)
        - each section has many questions
        - each survey is connected to many completed responses
    """
    
    __tablename__ = 'surveys'
    
    # Columns
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    
    # Relationships
    sections = db.relationship('Section', backref='survey', lazy=True,
                               cascade='all, delete-orphan', order_by='Section.position')
    responses = db.relationship('Response', backref='survey', lazy=True, cascade='all, delete-orphan')
    
    def __repr__(self):
        return f'<Survey: {self.title}>'
