"""Index level extraction from free-form table cell text."""

import re

_DIGITS = re.compile(r"[0-9]+")


def level_of(text: str | None) -> float:
    """Return the first run of digits in ``text`` as a number, or 0.

    Upstream cells look like "7", "8 Good" or "Low"; anything without a
    digit run degrades to 0 rather than raising.
    """
    if not text:
        return 0.0
    match = _DIGITS.search(text)
    if match is None:
        return 0.0
    try:
        return float(int(match.group(0)))
    except ValueError:
        return 0.0
