# screens/institutions/utils.py
from __future__ import annotations

import unicodedata
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from core.codes import FACULTY_CODE_LENGTH, generate_faculty_code
from screens.institutions.db import Institution

NAME_REQUIRED_MSG = "Institution name is required"
CODE_LENGTH_MSG = f"The code must be exactly {FACULTY_CODE_LENGTH} characters"
CODE_TAKEN_MSG = "This code is already in use"


class SortOption(str, Enum):
    ALPHABETICAL = "alphabetical"
    REVERSE_ALPHABETICAL = "reverse-alphabetical"
    CODE_ASC = "code-asc"
    CODE_DESC = "code-desc"


DEFAULT_SORT = SortOption.ALPHABETICAL

SORT_LABELS = {
    SortOption.ALPHABETICAL: "A-Z",
    SortOption.REVERSE_ALPHABETICAL: "Z-A",
    SortOption.CODE_ASC: "Code ↑",
    SortOption.CODE_DESC: "Code ↓",
}

# option -> (field, descending)
_SORT_FIELDS = {
    SortOption.ALPHABETICAL: ("institution", False),
    SortOption.REVERSE_ALPHABETICAL: ("institution", True),
    SortOption.CODE_ASC: ("faculty_code", False),
    SortOption.CODE_DESC: ("faculty_code", True),
}


def collation_key(value: Optional[str]) -> Tuple[str, str, str]:
    """
    Locale-style comparison key: base letters first (accents and case ignored),
    then accents, then case with lowercase before uppercase.
    """
    value = value or ""
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return base.casefold(), decomposed.casefold(), value.swapcase()


def filter_institutions(institutions: List[Institution], search: str) -> List[Institution]:
    """Case-insensitive substring match on name or code."""
    if not (search or "").strip():
        return institutions
    needle = search.lower()
    return [
        inst for inst in institutions
        if needle in (inst.institution or "").lower()
        or needle in (inst.faculty_code or "").lower()
    ]


def sort_institutions(institutions: Sequence[Institution], option) -> List[Institution]:
    try:
        option = SortOption(option)
    except ValueError:
        return list(institutions)
    field, descending = _SORT_FIELDS[option]
    return sorted(
        institutions,
        key=lambda inst: collation_key(getattr(inst, field)),
        reverse=descending,
    )


def normalize_code(value: Optional[str]) -> str:
    return (value or "").strip().upper()


def is_code_unique(code: str, institutions: Iterable[Institution], exclude_id: Optional[str] = None) -> bool:
    return not any(
        inst.faculty_code == code and inst.id != exclude_id
        for inst in institutions
    )


def generate_unique_code(
    institutions: Sequence[Institution],
    generator: Callable[[], str] = generate_faculty_code,
) -> str:
    """Draw codes until one is not used by any loaded institution."""
    code = generator()
    while not is_code_unique(code, institutions):
        code = generator()
    return code


def validate_institution_form(
    name: Optional[str],
    code: Optional[str],
    institutions: Iterable[Institution],
    exclude_id: Optional[str] = None,
) -> Optional[str]:
    """Returns the first validation message, or None when the form is valid."""
    if not (name or "").strip():
        return NAME_REQUIRED_MSG
    normalized = normalize_code(code)
    if not normalized or len(normalized) != FACULTY_CODE_LENGTH:
        return CODE_LENGTH_MSG
    if not is_code_unique(normalized, institutions, exclude_id):
        return CODE_TAKEN_MSG
    return None
