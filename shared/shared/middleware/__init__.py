from shared.middleware.error_handler import install_error_handlers
from shared.middleware.request_id import request_id_middleware
from shared.middleware.security_headers import security_headers_middleware

__all__ = ["install_error_handlers", "request_id_middleware", "security_headers_middleware"]
