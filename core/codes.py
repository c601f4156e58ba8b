# core/codes.py
from __future__ import annotations

import secrets
import string

FACULTY_CODE_LENGTH = 6
FACULTY_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_faculty_code(length: int = FACULTY_CODE_LENGTH) -> str:
    """Random enrollment code, e.g. 'K7Q2ZD'. Knows nothing about existing codes."""
    return "".join(secrets.choice(FACULTY_CODE_ALPHABET) for _ in range(length))
