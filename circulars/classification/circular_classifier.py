"""Cheap admission gate for uploads that should look like regulatory circulars.

Any single indicator is enough: the gate favors recall over precision, so a
news article that mentions "RBI" and "banking" passes too.
"""

import re

SAMPLE_CHARS = 2000

_INDICATORS: dict[str, re.Pattern[str]] = {
    "circular": re.compile(r"circular", re.IGNORECASE),
    "reference_no": re.compile(r"reference no\.?", re.IGNORECASE),
    "regulator": re.compile(
        r"rbi|sebi|irdai|pfrda|nbfc|banking|regulation|compliance", re.IGNORECASE
    ),
    "salutation": re.compile(r"dear sir.?madam", re.IGNORECASE),
    "addressee": re.compile(
        r"all scheduled commercial banks|all banks|all nbfcs?", re.IGNORECASE
    ),
    "master_direction": re.compile(
        r"master circular|master direction|regulatory framework", re.IGNORECASE
    ),
}

# Matches codes like RBI/2025/01 or DOR/2024-12. Case-sensitive,
# so it runs on the original-case sample.
_REFERENCE_CODE = re.compile(r"[A-Z]{2,4}/\d{2,4}[-/]\d{2,4}")


def matched_indicators(text: str) -> list[str]:
    """Names of the indicators that fire on the first 2000 characters."""
    if not text:
        return []
    sample = text[:SAMPLE_CHARS]
    lowered = sample.lower()
    matches = [name for name, pattern in _INDICATORS.items() if pattern.search(lowered)]
    if _REFERENCE_CODE.search(sample):
        matches.append("reference_code")
    return matches


def is_likely_circular(text: str) -> bool:
    """True if the text resembles a regulatory circular."""
    if not text:
        return False
    sample = text[:SAMPLE_CHARS]
    lowered = sample.lower()
    if any(pattern.search(lowered) for pattern in _INDICATORS.values()):
        return True
    return _REFERENCE_CODE.search(sample) is not None
