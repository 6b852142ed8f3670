from extensions import db
from datetime import datetime


class ResumeFile(db.Model):
    __tablename__ = 'resume_files'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    filename = db.Column(db.String(255), nullable=False)
    original_name = db.Column(db.String(255))
    storage_path = db.Column(db.String(500), nullable=False)  # user-<id>/<filename>
    url = db.Column(db.String(1000))
    content_type = db.Column(db.String(120))
    size_bytes = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.filename,
            'originalName': self.original_name,
            'url': self.url,
            'contentType': self.content_type,
            'sizeBytes': self.size_bytes,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }
