"""Text and date helpers for ordering catalog records."""

import re
import unicodedata
from datetime import date

# Missing or unparseable release dates sort as this value
EPOCH = date(1970, 1, 1)


def title_sort_key(title: str) -> tuple[str, str]:
    """
    Build a locale-aware collation key for a film title.

    Accents and case are ignored at the primary level so that
    "amadeus" < "Amélie" < "Apollo 13". The original title is the
    secondary level so equal primaries still order deterministically.

    Examples:
        "Amélie"  → ("amelie", "Amélie")
        "  The   Film " → ("the film", "  The   Film ")

    Args:
        title: Raw film title

    Returns:
        Tuple usable as a sort key
    """
    # Decompose so accents become separate combining marks, then drop them
    decomposed = unicodedata.normalize("NFKD", title)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))

    # Collapse whitespace so spacing variants compare equal
    primary = re.sub(r"\s+", " ", stripped).strip().casefold()

    return primary, title


def parse_release_date(value: str | None) -> date | None:
    """
    Parse a catalog release date.

    The catalog sends "YYYY-MM-DD" or an empty string. Anything else,
    including impossible dates like "2024-02-30", yields None.

    Args:
        value: Raw release date

    Returns:
        Parsed date or None
    """
    if not value:
        return None

    m = re.match(r"^\s*(\d{4})-(\d{1,2})-(\d{1,2})", value)
    if not m:
        return None

    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def release_sort_key(value: str | None) -> date:
    """Release date for ordering, with the epoch standing in for unknowns."""
    return parse_release_date(value) or EPOCH
