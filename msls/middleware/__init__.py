"""HTTP middleware: timeout, request ID, security headers.

Applied in msls.main; order matters (last added = outermost).
"""

from msls.middleware.request_id import RequestIDMiddleware
from msls.middleware.security_headers import SecurityHeadersMiddleware
from msls.middleware.timeout import TimeoutMiddleware

__all__ = [
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
    "TimeoutMiddleware",
]
