"""Random string generation."""

import secrets
import string

ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase


def random_string(length: int = 6) -> str:
    """Return ``length`` random characters drawn from digits and ASCII letters."""
    return "".join(secrets.choice(ALPHABET) for _ in range(max(length, 0)))