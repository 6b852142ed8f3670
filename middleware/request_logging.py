"""
Request logging middleware
"""
from flask import request, g
import time
import logging

logger = logging.getLogger(__name__)

SENSITIVE_FIELDS = {'password', 'token', 'secret', 'access_token', 'refresh_token', 'session_token'}
SLOW_REQUEST_SECONDS = 1.0


def redact(body):
    """Copy of a JSON body with sensitive values masked"""
    if not isinstance(body, dict):
        return body
    return {k: '***' if k.lower() in SENSITIVE_FIELDS else v for k, v in body.items()}


def request_logger(app):
    """Log every request with its status and duration"""

    @app.before_request
    def before_request():
        g.start_time = time.time()

        logger.info(
            f"Incoming: {request.method} {request.path} | "
            f"IP: {request.remote_addr}"
        )

        if request.method in ['POST', 'PUT', 'PATCH'] and request.is_json:
            body = request.get_json(silent=True)
            logger.debug(f"Request body: {redact(body)}")

    @app.after_request
    def after_request(response):
        if hasattr(g, 'start_time'):
            duration = time.time() - g.start_time

            logger.info(
                f"Response: {request.method} {request.path} | "
                f"Status: {response.status_code} | "
                f"Duration: {duration:.3f}s"
            )
            if duration > SLOW_REQUEST_SECONDS:
                logger.warning(f"SLOW REQUEST: {request.method} {request.path} took {duration:.3f}s")

            response.headers['X-Response-Time'] = f"{duration:.3f}s"

        return response
