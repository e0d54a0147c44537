"""
Country tables.

``EU_MEMBER_STATES`` is the only set the classifier consults. ``COUNTRIES`` is
a display list for country pickers and carries no VAT meaning.
"""
from __future__ import annotations

EU_MEMBER_STATES: frozenset[str] = frozenset({
    "AT", "BE", "BG", "HR", "CY", "CZ", "DK", "EE", "FI",
    "FR", "DE", "GR", "HU", "IE", "IT", "LV", "LT", "LU",
    "MT", "NL", "PL", "PT", "RO", "SK", "SI", "ES", "SE",
})

# (ISO 3166-1 alpha-2, display name)
COUNTRIES: list[tuple[str, str]] = [
    ("AT", "Austria"),
    ("AU", "Australia"),
    ("BE", "Belgium"),
    ("BG", "Bulgaria"),
    ("CA", "Canada"),
    ("CH", "Switzerland"),
    ("CY", "Cyprus"),
    ("CZ", "Czech Republic"),
    ("DE", "Germany"),
    ("DK", "Denmark"),
    ("EE", "Estonia"),
    ("ES", "Spain"),
    ("FI", "Finland"),
    ("FR", "France"),
    ("GB", "United Kingdom"),
    ("GR", "Greece"),
    ("HR", "Croatia"),
    ("HU", "Hungary"),
    ("IE", "Ireland"),
    ("IT", "Italy"),
    ("JP", "Japan"),
    ("LT", "Lithuania"),
    ("LU", "Luxembourg"),
    ("LV", "Latvia"),
    ("MT", "Malta"),
    ("NL", "Netherlands"),
    ("NO", "Norway"),
    ("PL", "Poland"),
    ("PT", "Portugal"),
    ("RO", "Romania"),
    ("SE", "Sweden"),
    ("SG", "Singapore"),
    ("SI", "Slovenia"),
    ("SK", "Slovakia"),
    ("US", "United States"),
]


def normalize_country_code(code: str) -> str:
    """Strip and uppercase a country code. Raises ``ValueError`` unless it is two letters."""
    normalized = code.strip().upper()
    if len(normalized) != 2 or not normalized.isalpha():
        raise ValueError(f"Invalid ISO 3166-1 alpha-2 country code: {code!r}")
    return normalized


def is_eu_member(code: str) -> bool:
    return code in EU_MEMBER_STATES
