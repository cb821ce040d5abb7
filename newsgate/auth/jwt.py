"""Bearer token creation and validation.

Tokens are issued by the identity provider; ``create_access_token`` mints
equivalent tokens for local tooling and tests.
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from newsgate.config import settings


def create_access_token(subject: str, expires_minutes: int | None = None) -> str:
    """Create an access token for an identity-provider subject."""
    minutes = expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    payload = {
        "sub": subject,
        "exp": expire,
        "aud": settings.jwt_audience,
        "role": "authenticated",
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict | None:
    """
    Decode and validate a bearer token.

    Returns the payload if valid, None if malformed, expired, or issued for
    another audience.
    """
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
        )
    except JWTError:
        return None
