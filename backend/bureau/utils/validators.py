"""
Validators — Normalisation and rule-based checks for payment references and form input.
"""
import re
from datetime import date

_UTR_PATTERN = re.compile(r"^[A-Z0-9]+$")


def normalize_utr(utr: str | None) -> str:
    """Canonical form of a UTR / transaction reference: trimmed, uppercase."""
    if not utr:
        return ""
    return utr.strip().upper()


def validate_utr(utr: str, min_length: int = 12) -> bool:
    """A normalized UTR is at least ``min_length`` characters of A-Z and 0-9 only."""
    return len(utr) >= min_length and bool(_UTR_PATTERN.match(utr))


def validate_upi_vpa(vpa: str | None) -> bool:
    """Validate UPI VPA format: user@provider."""
    if not vpa:
        return False
    return bool(re.match(r"^[\w.-]+@[\w]+$", vpa.strip()))


def age_from_dob(dob: date, today: date | None = None) -> int:
    """Completed years between ``dob`` and ``today``."""
    today = today or date.today()
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


def sanitize_name(name: str | None) -> str:
    """Collapse internal whitespace and strip the ends."""
    if not name:
        return ""
    return re.sub(r"\s+", " ", name.strip())
