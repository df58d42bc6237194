"""Guards for text written into CSV files and workbooks."""

from typing import Optional

# A cell starting with one of these is evaluated by spreadsheet apps
_FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r", "\n", "|")


def sanitize_for_csv(value: Optional[str]) -> Optional[str]:
    """Quote account names, ids and filters that would open as formulas.

    Returns None and empty strings unchanged.
    """
    if value and value.startswith(_FORMULA_PREFIXES):
        return f"'{value}"
    return value
