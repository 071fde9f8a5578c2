"""HTTP middleware: timeout, request ID, access log, security headers.

Applied in entitystore.main; order matters (last added = outermost).
"""

from entitystore.middleware.access_log import AccessLogMiddleware
from entitystore.middleware.request_id import RequestIDMiddleware
from entitystore.middleware.security_headers import SecurityHeadersMiddleware
from entitystore.middleware.timeout import TimeoutMiddleware

__all__ = [
    "AccessLogMiddleware",
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
    "TimeoutMiddleware",
]
