from extensions import db
from datetime import datetime


class Application(db.Model):
    """A job the user is tracking through the application pipeline"""
    __tablename__ = 'applications'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    company = db.Column(db.String(200), nullable=False)
    location = db.Column(db.String(200), default='')
    link = db.Column(db.String(1000), default='')
    salary = db.Column(db.String(100), default='')
    job_type = db.Column(db.String(50), default='')
    description = db.Column(db.Text, default='')
    status = db.Column(db.String(20), nullable=False, default='saved')  # saved, applied, interview, offer, rejected
    logged_at = db.Column(db.String(40), nullable=False)  # ISO-8601 timestamp
    next_step_date = db.Column(db.String(10), default='')
    notes = db.Column(db.Text, default='')
    stage_history = db.Column(db.JSON, nullable=False, default=list)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'company': self.company,
            'location': self.location or '',
            'link': self.link or '',
            'salary': self.salary or '',
            'type': self.job_type or '',
            'description': self.description or '',
            'status': self.status,
            'loggedAt': self.logged_at,
            'nextStepDate': self.next_step_date or '',
            'notes': self.notes or '',
            'stageHistory': list(self.stage_history or [])
        }


class PendingApplication(db.Model):
    """A job queued from the listings page, waiting to be logged or dismissed"""
    __tablename__ = 'pending_applications'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    title = db.Column(db.String(200))
    company = db.Column(db.String(200))
    location = db.Column(db.String(200))
    link = db.Column(db.String(1000))
    salary = db.Column(db.String(100))
    job_type = db.Column(db.String(50))
    description = db.Column(db.Text)
    queued_at = db.Column(db.String(40), nullable=False)

    def to_job(self):
        """Shape expected by the tracker when the entry is logged"""
        return {
            'title': self.title,
            'company': self.company,
            'location': self.location,
            'link': self.link,
            'salary': self.salary,
            'type': self.job_type,
            'description': self.description,
            'queuedAt': self.queued_at
        }

    def to_dict(self):
        data = self.to_job()
        data['id'] = self.id
        return data
