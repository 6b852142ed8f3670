from middleware.error_handlers import register_error_handlers
from middleware.request_logging import request_logger

__all__ = ['register_error_handlers', 'request_logger']
