from extensions import db
from utils.field_mapping import map_db_user
from werkzeug.security import generate_password_hash, check_password_hash
from datetime import datetime
import secrets
import bcrypt

BCRYPT_PREFIXES = ('$2a$', '$2b$', '$2y$')
WERKZEUG_PREFIXES = ('pbkdf2:', 'scrypt:')


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)

    first_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100))
    full_name = db.Column(db.String(200))
    birthday = db.Column(db.String(10))  # YYYY-MM-DD
    occupation = db.Column(db.String(120))

    # Address
    street = db.Column(db.String(200))
    city = db.Column(db.String(100))
    state = db.Column(db.String(50))
    zip = db.Column(db.String(20))

    # Education
    college = db.Column(db.String(200))
    certificate = db.Column(db.String(200))
    grad_date = db.Column(db.String(10))  # YYYY-MM-DD

    profile_pic_path = db.Column(db.String(500))
    is_active = db.Column(db.Boolean, default=True)
    last_login = db.Column(db.DateTime)
    last_login_ip = db.Column(db.String(50))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    sessions = db.relationship('UserSession', backref='user', lazy='dynamic', cascade='all, delete-orphan')

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        if not self.password_hash or not password:
            return False
        if self.has_legacy_hash():
            return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))
        return check_password_hash(self.password_hash, password)

    def has_legacy_hash(self):
        """bcrypt hash carried over from an imported account"""
        return bool(self.password_hash) and self.password_hash.startswith(BCRYPT_PREFIXES)

    def refresh_full_name(self):
        """Derive full_name from first/last name"""
        self.full_name = f"{self.first_name or ''} {self.last_name or ''}".strip() or None

    def to_record(self):
        """Raw column values, snake_case, without the password hash"""
        return {
            'id': self.id,
            'email': self.email,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'full_name': self.full_name,
            'birthday': self.birthday,
            'occupation': self.occupation,
            'street': self.street,
            'city': self.city,
            'state': self.state,
            'zip': self.zip,
            'college': self.college,
            'certificate': self.certificate,
            'grad_date': self.grad_date,
            'profile_pic_path': self.profile_pic_path,
        }

    def to_dict(self, fallback=None):
        data = map_db_user(self.to_record(), fallback)
        data['createdAt'] = self.created_at.isoformat() if self.created_at else None
        return data


class UserSession(db.Model):
    __tablename__ = 'user_sessions'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    session_token = db.Column(db.String(500), unique=True, nullable=False, index=True)
    device_info = db.Column(db.String(255))
    ip_address = db.Column(db.String(50))
    is_active = db.Column(db.Boolean, default=True)
    expires_at = db.Column(db.DateTime, nullable=False)
    last_activity = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def __init__(self, user_id, expires_at, device_info=None, ip_address=None):
        self.user_id = user_id
        self.session_token = secrets.token_urlsafe(64)
        self.device_info = device_info
        self.ip_address = ip_address
        self.expires_at = expires_at
        self.is_active = True

    def is_valid(self):
        """Check if session is still valid"""
        return bool(self.is_active) and self.expires_at > datetime.utcnow()

    def revoke(self):
        self.is_active = False

    def to_dict(self):
        return {
            'id': self.id,
            'device_info': self.device_info,
            'ip_address': self.ip_address,
            'is_active': self.is_active,
            'last_activity': self.last_activity.isoformat() if self.last_activity else None,
            'expires_at': self.expires_at.isoformat() if self.expires_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None
        }
