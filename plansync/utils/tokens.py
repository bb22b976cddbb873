"""Bearer token inspection utilities.

The device never holds the signing secret, so tokens are only decoded to
read their claims. Verification stays with the remote store.
"""
from datetime import datetime, timezone
from typing import Optional

from jose import JWTError, jwt

from plansync.utils.dates import to_utc, utc_now


def read_claims(token: str) -> Optional[dict]:
    """
    Decode a JWT's claims without verifying its signature.

    Args:
        token: Bearer token

    Returns:
        Claims dict, or None if the token is not a JWT

    Example:
        >>> read_claims("not-a-jwt") is None
        True
    """
    try:
        return jwt.get_unverified_claims(token)
    except JWTError:
        return None


def token_expiry(token: str) -> Optional[datetime]:
    """Expiry time from the ``exp`` claim, or None if absent or unreadable."""
    claims = read_claims(token)
    if not claims or "exp" not in claims:
        return None
    try:
        return datetime.fromtimestamp(float(claims["exp"]), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return None


def token_subject(token: str) -> Optional[str]:
    """User id from the ``sub`` claim."""
    claims = read_claims(token)
    if not claims:
        return None
    return claims.get("sub")


def is_token_expired(token: str, now: Optional[datetime] = None) -> bool:
    """
    Check whether a token is past its expiry.

    Opaque (non-JWT) tokens and tokens without ``exp`` never count as
    expired here; the remote store has the final say on those.
    """
    expiry = token_expiry(token)
    if expiry is None:
        return False
    return expiry <= to_utc(now or utc_now())
