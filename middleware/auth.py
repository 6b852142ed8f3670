from functools import wraps
from datetime import datetime
from flask import request, jsonify
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from extensions import db
from models.user import User, UserSession

ACTIVITY_UPDATE_SECONDS = 300


def _load_session(user_id, session_token):
    """Return (user, session) when both are valid, else (None, None)"""
    if not user_id or not session_token:
        return None, None

    session = UserSession.query.filter_by(
        session_token=session_token,
        user_id=int(user_id)
    ).first()
    if not session or not session.is_valid():
        return None, None

    user = db.session.get(User, int(user_id))
    if not user or not user.is_active:
        return None, None

    # Throttle last-activity writes
    if not session.last_activity or \
       (datetime.utcnow() - session.last_activity).total_seconds() > ACTIVITY_UPDATE_SECONDS:
        session.last_activity = datetime.utcnow()
        db.session.commit()

    return user, session


def require_session():
    """
    Hybrid authentication decorator
    - Validates the JWT access token (stateless)
    - Validates the X-Session-Token against the database (revocable)
    Sets request.current_user and request.current_session.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                verify_jwt_in_request()
            except (JWTExtendedException, PyJWTError) as e:
                return jsonify({'error': f'Not logged in: {str(e)}', 'authenticated': False}), 401

            session_token = request.headers.get('X-Session-Token')
            if not session_token:
                return jsonify({
                    'error': 'Session token required in X-Session-Token header',
                    'authenticated': False
                }), 401

            user, session = _load_session(get_jwt_identity(), session_token)
            if not user:
                return jsonify({
                    'error': 'Session expired or revoked',
                    'authenticated': False
                }), 401

            request.current_user = user
            request.current_session = session
            return f(*args, **kwargs)

        return decorated_function
    return decorator


def optional_session():
    """
    Optional authentication - never fails.
    request.current_user is None unless a valid token and session are sent.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            request.current_user = None
            request.current_session = None
            try:
                verify_jwt_in_request(optional=True)
                user_id = get_jwt_identity()
            except (JWTExtendedException, PyJWTError):
                user_id = None

            if user_id:
                user, session = _load_session(user_id, request.headers.get('X-Session-Token'))
                request.current_user = user
                request.current_session = session

            return f(*args, **kwargs)

        return decorated_function
    return decorator
