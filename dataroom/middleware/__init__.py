"""HTTP middleware: timeout, request size limit, request ID, security headers.

Applied in create_app(); order matters (last added = outermost).
"""

from dataroom.middleware.request_id import RequestIDMiddleware
from dataroom.middleware.request_size_limit import RequestSizeLimitMiddleware
from dataroom.middleware.security_headers import SecurityHeadersMiddleware
from dataroom.middleware.timeout import TimeoutMiddleware

__all__ = [
    "RequestIDMiddleware",
    "RequestSizeLimitMiddleware",
    "SecurityHeadersMiddleware",
    "TimeoutMiddleware",
]
