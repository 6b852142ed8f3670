import logging
from flask import jsonify
from werkzeug.exceptions import HTTPException
from extensions import db, jwt

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    """JSON error responses for framework-level errors"""

    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({'error': 'Bad request'}), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(413)
    def too_large(e):
        max_mb = app.config.get('MAX_CONTENT_LENGTH', 0) // (1024 * 1024)
        return jsonify({'error': f'File too large (max {max_mb}MB)'}), 413

    @app.errorhandler(Exception)
    def handle_uncaught(e):
        if isinstance(e, HTTPException):
            return jsonify({'error': e.description}), e.code
        db.session.rollback()
        logger.exception("Unhandled exception", exc_info=e)
        return jsonify({'error': 'Server error'}), 500


@jwt.unauthorized_loader
def missing_token(reason):
    return jsonify({'error': f'Not logged in: {reason}', 'authenticated': False}), 401


@jwt.invalid_token_loader
def invalid_token(reason):
    return jsonify({'error': f'Invalid token: {reason}', 'authenticated': False}), 401


@jwt.expired_token_loader
def expired_token(jwt_header, jwt_payload):
    return jsonify({'error': 'Token has expired', 'authenticated': False}), 401
