"""Entity id generation utilities."""
import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase


def to_base36(number: int) -> str:
    """
    Encode a non-negative integer in base 36.

    Examples:
        >>> to_base36(0)
        '0'
        >>> to_base36(35)
        'z'
        >>> to_base36(36)
        '10'
    """
    if number < 0:
        raise ValueError("number must be non-negative")
    if number == 0:
        return "0"

    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_id() -> str:
    """
    Generate a globally unique id for a locally created entity.

    The id is the creation time in milliseconds (base 36) followed by eight
    random base-36 characters, so ids sort roughly by creation time.

    Returns:
        Id string such as ``'m2x1k9q0-4fj2k1zq'``
    """
    timestamp = to_base36(time.time_ns() // 1_000_000)
    random_part = "".join(secrets.choice(_ALPHABET) for _ in range(8))
    return f"{timestamp}-{random_part}"
