from typing import Any, Optional


def normalize_text(s: Optional[Any]) -> str:
    if not isinstance(s, str):
        return ""
    return s.strip().lower()


def normalize_gender(gender: Optional[str]) -> str:
    g = normalize_text(gender)
    return g or "any"


def same_text(a: Optional[str], b: Optional[str]) -> bool:
    """Case-insensitive equality; blank values never match."""
    na = normalize_text(a)
    nb = normalize_text(b)
    return bool(na) and na == nb


def overlaps(a: Optional[str], b: Optional[str]) -> bool:
    """True when either normalized value contains the other."""
    na = normalize_text(a)
    nb = normalize_text(b)
    if not na or not nb:
        return False
    return na in nb or nb in na
