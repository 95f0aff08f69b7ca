"""
Password strength validation.

Example:
    from common.utils import validate_password

    is_valid, errors = validate_password("weakpass")
    if not is_valid:
        print("Password errors:", errors)
"""

import re
from typing import List, Tuple, Optional

COMMON_PASSWORDS = frozenset({
    "123456",
    "password",
    "12345678",
    "qwerty",
    "123456789",
    "111111",
    "iloveyou",
    "sunshine",
    "football",
    "welcome",
    "password1",
    "password123",
    "letmein",
    "abc123",
})


def validate_password(
    password: str,
    min_length: int = 8,
    max_length: int = 128,
    require_uppercase: bool = True,
    require_lowercase: bool = True,
    require_digit: bool = True,
    disallow_common: bool = True,
    common_passwords: Optional[frozenset] = None,
) -> Tuple[bool, List[str]]:
    """
    Validate password strength.

    Args:
        password: The password to validate
        min_length: Minimum password length
        max_length: Maximum password length
        require_uppercase: Require at least one uppercase letter
        require_lowercase: Require at least one lowercase letter
        require_digit: Require at least one digit
        disallow_common: Reject passwords from the common-password list
        common_passwords: Override for the common-password list

    Returns:
        Tuple of (is_valid, errors)

    Examples:
        >>> validate_password("weak")[0]
        False
        >>> validate_password("StrongPass123")
        (True, [])
    """
    errors: List[str] = []

    if len(password) < min_length:
        errors.append(f"Password must be at least {min_length} characters")

    if len(password) > max_length:
        errors.append(f"Password must be no more than {max_length} characters")

    if require_uppercase and not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")

    if require_lowercase and not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")

    if require_digit and not re.search(r"\d", password):
        errors.append("Password must contain at least one digit")

    if disallow_common:
        blocked = common_passwords if common_passwords is not None else COMMON_PASSWORDS
        if password.lower() in blocked:
            errors.append("Password is too common")

    return len(errors) == 0, errors
