"""Spreadsheet formula guards for exported text."""

# A cell starting with one of these is evaluated by spreadsheet applications
FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r", "|")


def is_formula_like(text: str) -> bool:
    """Return True if a spreadsheet would treat ``text`` as a formula."""
    return text.startswith(FORMULA_PREFIXES)


def neutralize_formula(text: str) -> str:
    """Prefix formula-like text with a single quote.

    >>> neutralize_formula("=SUM(A1:A9)")
    "'=SUM(A1:A9)"
    >>> neutralize_formula("Coffee")
    'Coffee'
    """
    return f"'{text}" if is_formula_like(text) else text
