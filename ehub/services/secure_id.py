"""
Human-readable identifiers.
Secure ids are role-prefixed and random; uniqueness is enforced by the backend.
"""
import random
import string
from datetime import datetime
from typing import Optional

from ..errors import UnknownRoleError


SECURE_ID_PREFIXES = {
    "admin": "ADMID",
    "supervisor": "SUPID",
    "fabricator": "FABID",
}
SECURE_ID_ALPHABET = string.ascii_uppercase + string.digits
SECURE_ID_LENGTH = 8


def generate_secure_id(role: str, rng: Optional[random.Random] = None) -> str:
    """
    Generate a secure id such as ``FABID-7K2M9QXA``.

    Args:
        role: admin|supervisor|fabricator
        rng: Random source (non-cryptographic), defaults to the module RNG

    Returns:
        Prefix, dash and 8 characters from [A-Z0-9]
    """
    prefix = SECURE_ID_PREFIXES.get(role)
    if prefix is None:
        raise UnknownRoleError(role)
    rng = rng or random
    suffix = "".join(rng.choice(SECURE_ID_ALPHABET) for _ in range(SECURE_ID_LENGTH))
    return f"{prefix}-{suffix}"


def generate_employee_number(now: Optional[datetime] = None, rng: Optional[random.Random] = None) -> str:
    """EMP + two-digit year + zero-padded random number in [0, 9999]."""
    now = now or datetime.now()
    rng = rng or random
    year = now.strftime("%y")
    return f"EMP{year}{rng.randint(0, 9999):04d}"
