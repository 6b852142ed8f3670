from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import create_access_token, create_refresh_token, jwt_required, get_jwt_identity
from models.user import User, UserSession
from extensions import db, cache_delete
from middleware.auth import require_session, optional_session
from utils.request_body import json_body
from utils.field_mapping import to_db_columns
from utils.validators import validate_email, validate_password
from datetime import datetime
import logging

auth_bp = Blueprint('auth', __name__)
logger = logging.getLogger(__name__)


def _open_session(user):
    """Issue tokens and a database session for a freshly authenticated user"""
    access_token = create_access_token(identity=str(user.id))
    refresh_token = create_refresh_token(identity=str(user.id))

    user.last_login = datetime.utcnow()
    user.last_login_ip = request.remote_addr

    # Keep at most MAX_ACTIVE_SESSIONS, revoking the oldest
    max_sessions = current_app.config['MAX_ACTIVE_SESSIONS']
    active_sessions = UserSession.query.filter_by(user_id=user.id, is_active=True) \
        .order_by(UserSession.created_at.desc()).all()
    for old_session in active_sessions[max_sessions - 1:]:
        old_session.revoke()

    session = UserSession(
        user_id=user.id,
        device_info=request.headers.get('User-Agent', 'Unknown'),
        ip_address=request.remote_addr,
        expires_at=datetime.utcnow() + current_app.config['SESSION_LIFETIME']
    )
    db.session.add(session)
    db.session.commit()

    return {
        'access_token': access_token,
        'refresh_token': refresh_token,
        'session_token': session.session_token,
        'expires_at': session.expires_at.isoformat()
    }


@auth_bp.route('/register', methods=['POST'])
def register():
    try:
        data = json_body()
        if data is None:
            return jsonify({'error': 'Request body must be a JSON object'}), 400

        email = (data.get('email') or '').strip().lower()
        password = data.get('password') or ''

        if not email or not password:
            return jsonify({'error': 'Email and password required'}), 400

        if not validate_email(email):
            return jsonify({'error': 'Invalid email address'}), 400

        if not validate_password(password):
            return jsonify({'error': 'Password must be at least 8 characters with uppercase, lowercase, digit, and special character'}), 400

        if User.query.filter_by(email=email).first():
            return jsonify({'error': 'Email already registered'}), 409

        columns = to_db_columns(data)
        columns.pop('profile_pic_path', None)
        user = User(email=email, **columns)
        if not user.full_name:
            user.refresh_full_name()
        user.set_password(password)

        db.session.add(user)
        db.session.commit()

        logger.info(f"New user registered: ID={user.id}")

        return jsonify({
            'message': 'Registration successful',
            'user': user.to_dict()
        }), 201

    except Exception as e:
        db.session.rollback()
        logger.error(f"Register error: {str(e)}")
        return jsonify({'error': 'Registration failed'}), 500


@auth_bp.route('/login', methods=['POST'])
def login():
    try:
        data = json_body()
        if data is None:
            return jsonify({'error': 'Request body must be a JSON object'}), 400
        email = (data.get('email') or '').strip().lower()
        password = data.get('password') or ''

        if not email or not password:
            return jsonify({'error': 'Email and password required'}), 400

        user = User.query.filter_by(email=email).first()

        if not user or not user.check_password(password):
            logger.info(f"Failed login for {email}")
            return jsonify({'error': 'Invalid credentials'}), 401

        if not user.is_active:
            return jsonify({'error': 'Account is inactive'}), 403

        # Imported accounts still on bcrypt move to the current hash on first login
        if user.has_legacy_hash():
            user.set_password(password)

        tokens = _open_session(user)

        return jsonify({
            'message': 'Login successful',
            'user': user.to_dict(),
            **tokens
        }), 200

    except Exception as e:
        db.session.rollback()
        logger.error(f"Login error: {str(e)}")
        return jsonify({'error': 'Server error'}), 500


@auth_bp.route('/session', methods=['GET'])
@optional_session()
def check_session():
    """Report whether the caller is logged in, with the full profile if so"""
    user = request.current_user
    if not user:
        return jsonify({'loggedIn': False}), 200
    return jsonify({'loggedIn': True, 'user': user.to_dict()}), 200


@auth_bp.route('/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh():
    user_id = get_jwt_identity()
    user = db.session.get(User, int(user_id))
    if not user or not user.is_active:
        return jsonify({'error': 'User not found or inactive'}), 401
    return jsonify({'access_token': create_access_token(identity=user_id)}), 200


@auth_bp.route('/logout', methods=['POST'])
@require_session()
def logout():
    try:
        user = request.current_user

        UserSession.query.filter_by(user_id=user.id, is_active=True).update({'is_active': False})
        db.session.commit()
        cache_delete(f"user_profile:{user.id}")

        return jsonify({'message': 'Logged out successfully'}), 200

    except Exception as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 500


@auth_bp.route('/sessions', methods=['GET'])
@require_session()
def get_sessions():
    sessions = UserSession.query.filter_by(user_id=request.current_user.id) \
        .order_by(UserSession.created_at.desc()).all()
    return jsonify({'sessions': [session.to_dict() for session in sessions]}), 200
