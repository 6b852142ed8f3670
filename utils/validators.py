import re
from datetime import datetime

EMAIL_PATTERN = re.compile(r'^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$')
DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}$')
TIME_PATTERN = re.compile(r'^\d{2}:\d{2}$')


def validate_email(email):
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def validate_password(password):
    """At least 8 characters with uppercase, lowercase, digit and special character"""
    if not password or len(password) < 8:
        return False
    if not re.search(r'[A-Z]', password):
        return False
    if not re.search(r'[a-z]', password):
        return False
    if not re.search(r'\d', password):
        return False
    if not re.search(r'[^A-Za-z0-9]', password):
        return False
    return True


def validate_date(value):
    """Check a YYYY-MM-DD date string"""
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        return False
    try:
        datetime.strptime(value, '%Y-%m-%d')
        return True
    except (TypeError, ValueError):
        return False


def validate_time(value):
    """Check a HH:MM time string"""
    if not isinstance(value, str) or not TIME_PATTERN.match(value):
        return False
    try:
        datetime.strptime(value, '%H:%M')
        return True
    except (TypeError, ValueError):
        return False


def allowed_file(filename, extensions):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in extensions
