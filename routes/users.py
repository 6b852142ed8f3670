from flask import Blueprint, request, jsonify, current_app, send_from_directory
from PIL import Image, UnidentifiedImageError
from models.user import User
from middleware.auth import require_session
from utils.request_body import json_body
from extensions import db, cache_get, cache_set, cache_delete
from utils.field_mapping import to_db_columns
from utils.validators import allowed_file, validate_email
import os
import time

users_bp = Blueprint('users', __name__)
profile_files_bp = Blueprint('profile_files', __name__)

PROFILE_URL_PREFIX = '/profile/'


def _profile_folder():
    return os.path.join(current_app.config['UPLOAD_FOLDER'], 'profiles')


@users_bp.route('/profile', methods=['GET'])
@require_session()
def get_profile():
    """Get current user's profile"""
    user = request.current_user

    cache_key = f"user_profile:{user.id}"
    cached_profile = cache_get(cache_key)
    if cached_profile:
        return jsonify({'profile': cached_profile, 'cached': True}), 200

    profile = user.to_dict()
    cache_set(cache_key, profile, expire=current_app.config['CACHE_TTL'])
    return jsonify({'profile': profile}), 200


@users_bp.route('/profile', methods=['PUT'])
@require_session()
def update_profile():
    """Update profile fields; accepts camelCase or snake_case keys"""
    try:
        user = request.current_user
        data = json_body()
        if data is None:
            return jsonify({'error': 'Request body must be a JSON object'}), 400

        if 'email' in data:
            email = (data.get('email') or '').strip().lower()
            if not validate_email(email):
                return jsonify({'error': 'Invalid email address'}), 400
            existing_user = User.query.filter(User.email == email, User.id != user.id).first()
            if existing_user:
                return jsonify({'error': 'Email already in use'}), 409
            user.email = email

        columns = to_db_columns(data)
        columns.pop('profile_pic_path', None)  # set through the upload endpoint only
        for column, value in columns.items():
            setattr(user, column, value)

        if ('first_name' in columns or 'last_name' in columns) and 'full_name' not in columns:
            user.refresh_full_name()

        db.session.commit()
        cache_delete(f"user_profile:{user.id}")

        return jsonify({
            'message': 'Profile updated successfully',
            'profile': user.to_dict()
        }), 200

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Error in update_profile: {str(e)}")
        return jsonify({'error': str(e)}), 500


@users_bp.route('/profile-picture', methods=['POST'])
@require_session()
def upload_profile_picture():
    """Store a new avatar as a bounded RGB JPEG"""
    user = request.current_user

    file = request.files.get('avatar')
    if not file or not file.filename:
        return jsonify({'error': 'No image file provided'}), 400

    if not allowed_file(file.filename, current_app.config['ALLOWED_IMAGE_EXTENSIONS']):
        allowed = ', '.join(sorted(current_app.config['ALLOWED_IMAGE_EXTENSIONS']))
        return jsonify({'error': f'Invalid file type. Allowed: {allowed}'}), 400

    try:
        img = Image.open(file.stream)

        # Flatten transparency onto white for JPEG
        if img.mode in ('RGBA', 'LA', 'P'):
            if img.mode != 'RGBA':
                img = img.convert('RGBA')
            background = Image.new('RGB', img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            img = background
        elif img.mode != 'RGB':
            img = img.convert('RGB')

        img.thumbnail(current_app.config['PROFILE_PICTURE_SIZE'], Image.Resampling.LANCZOS)
    except (UnidentifiedImageError, OSError) as img_error:
        return jsonify({'error': f'Failed to process image: {str(img_error)}'}), 400

    try:
        upload_folder = _profile_folder()
        os.makedirs(upload_folder, exist_ok=True)

        filename = f"{int(time.time() * 1000)}-user{user.id}.jpg"
        img.save(os.path.join(upload_folder, filename), 'JPEG', quality=90, optimize=True)

        old_path = user.profile_pic_path
        user.profile_pic_path = PROFILE_URL_PREFIX + filename
        db.session.commit()
        cache_delete(f"user_profile:{user.id}")

        if old_path and old_path.startswith(PROFILE_URL_PREFIX):
            old_file = os.path.join(upload_folder, os.path.basename(old_path))
            if os.path.exists(old_file):
                try:
                    os.remove(old_file)
                except OSError as e:
                    current_app.logger.warning(f"Could not remove old profile picture: {e}")

        return jsonify({
            'message': 'Profile picture updated',
            'path': user.profile_pic_path
        }), 200

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"profile-picture error: {str(e)}")
        return jsonify({'error': 'Server error'}), 500


@profile_files_bp.route('/profile/<path:filename>', methods=['GET'])
def serve_profile_picture(filename):
    return send_from_directory(_profile_folder(), filename)
