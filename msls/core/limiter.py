"""SlowAPI limiter and the per-route limits.

main.py installs the limiter on app.state; endpoint modules import the
decorators from here.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

# Requests per client address.
RATE_LIMITS = {
    "login": "10/minute",
    "refresh": "30/minute",
    "tenant_create": "5/minute",
    "photo_upload": "30/minute",
}

limit_auth = limiter.limit(RATE_LIMITS["login"])
limit_refresh = limiter.limit(RATE_LIMITS["refresh"])
limit_create_tenant = limiter.limit(RATE_LIMITS["tenant_create"])
limit_upload = limiter.limit(RATE_LIMITS["photo_upload"])
