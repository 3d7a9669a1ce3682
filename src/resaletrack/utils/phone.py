"""Phone number display formatting."""

import re
from typing import Optional

CZECH_PREFIX = "420"


def _group_digits(digits: str) -> str:
    return " ".join(digits[i : i + 3] for i in range(0, len(digits), 3))


def format_phone(raw: Optional[str]) -> str:
    """Format a phone number in groups of three digits.

    Non-digits are dropped. Numbers starting with the Czech country code
    are shown as ``+420 ...``. Empty input renders as ``-``.
    """
    digits = re.sub(r"\D+", "", str(raw or ""))
    if not digits:
        return "-"
    if digits.startswith(CZECH_PREFIX):
        return f"+{CZECH_PREFIX} {_group_digits(digits[len(CZECH_PREFIX):])}".rstrip()
    return _group_digits(digits)
