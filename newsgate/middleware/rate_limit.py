"""Rate limiting using slowapi."""

from slowapi import Limiter
from slowapi.util import get_remote_address

# IP-keyed; limits are applied per endpoint with @limiter.limit.
limiter = Limiter(key_func=get_remote_address)


def reset_limiter() -> None:
    """Reset the limiter storage. Used in tests to clear rate limit state."""
    limiter.reset()
