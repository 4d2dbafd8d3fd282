"""Rate limiting middleware using slowapi."""

from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from ..config import settings

# Initialize rate limiter
limiter = Limiter(
    key_func=get_remote_address,
    enabled=settings.rate_limit_enabled,
)

# Rate limit exceeded handler
rate_limit_exceeded_handler = _rate_limit_exceeded_handler
