"""Rate limiter instance for SlowAPI.

Shared so both main (app.state.limiter) and route modules can use the same
instance without circular imports. Central limit strings and decorators
keep rate limits in one place.
"""

import time
from collections import defaultdict
from threading import Lock

from fastapi import HTTPException
from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

LOGIN_LIMIT = "10/minute"
CREATE_ORGANIZATION_LIMIT = "5/minute"
TENANT_SWITCH_LIMIT = "60/minute"
WRITE_ENDPOINT_LIMIT = "120/minute"
LOGIN_PER_USERNAME_LIMIT = 20  # attempts per window per username
LOGIN_PER_USERNAME_WINDOW_SEC = 60

limit_auth = limiter.limit(LOGIN_LIMIT)
limit_create_organization = limiter.limit(CREATE_ORGANIZATION_LIMIT)
limit_tenant_switch = limiter.limit(TENANT_SWITCH_LIMIT)
limit_writes = limiter.limit(WRITE_ENDPOINT_LIMIT)

# In-memory sliding window so one account cannot be brute-forced from many IPs.
_login_attempts: defaultdict[str, list[float]] = defaultdict(list)
_login_attempts_lock = Lock()


def check_login_rate_per_username(username: str) -> None:
    """Raise 429 if too many login attempts for this username in the window."""
    if not username:
        return
    now = time.monotonic()
    cutoff = now - LOGIN_PER_USERNAME_WINDOW_SEC
    key = username.strip().lower()
    with _login_attempts_lock:
        _login_attempts[key] = [t for t in _login_attempts[key] if t > cutoff]
        if len(_login_attempts[key]) >= LOGIN_PER_USERNAME_LIMIT:
            raise HTTPException(
                status_code=429,
                detail="Too many login attempts; try again later",
            )
        _login_attempts[key].append(now)
