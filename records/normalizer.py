"""
Performance text normalisation
- free-text performance ("12,45m", "3 pts", " 7 kg ") to a number
- federation code to the record scopes it displays
"""
import re
from typing import Optional, List


# =============================================================================
# Mapping tables
# =============================================================================

# Federation context -> scopes of official records it shows.
# EU (or an unknown code) shows every scope.
FEDERATION_SCOPE_MAP = {
    "FR": ["France", "Europe"],
    "NL": ["Hollande", "Pays-Bas", "Europe"],
    "BE": ["Belgique", "Europe"],
    "DE": ["Allemagne", "Europe"],
    "CH": ["Suisse", "Europe"],
}

# Any letter, accented ones included
_LETTERS_RE = re.compile(r"[^\W\d_]+")

# Leading decimal number, read the way a lenient float parser does
_LEADING_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)")


# =============================================================================
# Performance parsing
# =============================================================================

def clean_performance_text(raw: Optional[str]) -> str:
    """Lower-case, drop letters, first decimal comma to a period, trim"""
    if raw is None:
        return ""
    text = _LETTERS_RE.sub("", str(raw).lower())
    return text.replace(",", ".", 1).strip()


def parse_performance_or_none(raw: Optional[str]) -> Optional[float]:
    """
    Read the magnitude of a free-text performance.

    Returns None when nothing numeric is left after cleaning, so callers can
    tell an unparseable entry from a genuine zero.

    >>> parse_performance_or_none("12,45m")
    12.45
    >>> parse_performance_or_none("n/a") is None
    True
    """
    match = _LEADING_NUMBER_RE.match(clean_performance_text(raw))
    if not match:
        return None
    return float(match.group(0))


def parse_performance(raw: Optional[str]) -> float:
    """Performance magnitude, 0.0 when unparseable (never raises)"""
    value = parse_performance_or_none(raw)
    return 0.0 if value is None else value


# =============================================================================
# Scope helpers
# =============================================================================

def scopes_for_federation(federation: Optional[str]) -> Optional[List[str]]:
    """Scopes visible from a federation context; None means no filter"""
    if not federation:
        return None
    scopes = FEDERATION_SCOPE_MAP.get(federation.strip().upper())
    return list(scopes) if scopes else None
