from slowapi import Limiter
from slowapi.util import get_remote_address

from reunitems.core.config import RATE_LIMIT_DEFAULT, RATE_LIMIT_ENABLED, AUTH_RATE_LIMIT

# Shared limiter; main.py registers it on app.state and handles RateLimitExceeded.
# Decorated endpoints must take a `request: Request` argument.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[RATE_LIMIT_DEFAULT],
    enabled=RATE_LIMIT_ENABLED,
)

auth_limit = limiter.limit(AUTH_RATE_LIMIT)
