from slowapi import Limiter
from slowapi.util import get_remote_address

from residential_api.config import get_config

config = get_config()

# Rate limiter (limit by IP). Default limit applies to every route via
# SlowAPIMiddleware; login routes add a tighter one.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[config.rate_limit.default],
    enabled=config.rate_limit.enabled,
)
LOGIN_LIMIT = config.rate_limit.login
