"""Month keys — validation, seeding and calendar arithmetic.

A month key is a ``YYYY-MM`` string.  It is the only source of entropy for
every generated figure, so :func:`month_seed` must never change: switching
the checksum silently rewrites all historical outputs.
"""

from __future__ import annotations

import re
import zlib

MONTH_PATTERN = re.compile(r"\d{4}-(0[1-9]|1[0-2])")

# Fixed English abbreviations; strftime("%b") would follow the process locale.
_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def is_valid_month(month: str) -> bool:
    """True when *month* is a well-formed ``YYYY-MM`` key."""
    return bool(MONTH_PATTERN.fullmatch(month))


def month_seed(month: str) -> int:
    """31-bit seed: CRC-32 of the month key with the sign bit cleared."""
    return zlib.crc32(month.encode("utf-8")) & 0x7FFFFFFF


def split_month(month: str) -> tuple[int, int]:
    """``"2024-06"`` → ``(2024, 6)``."""
    return int(month[:4]), int(month[5:7])


def shift_month(month: str, months: int) -> str:
    """Month key *months* calendar months after *month* (negative = earlier)."""
    year, mon = split_month(month)
    index = year * 12 + (mon - 1) + months
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def previous_month(month: str) -> str:
    return shift_month(month, -1)


def month_label(month: str) -> str:
    """Short display label, e.g. ``"Aug 2023"``."""
    year, mon = split_month(month)
    return f"{_MONTH_ABBR[mon - 1]} {year}"


def trailing_months(month: str, count: int = 6) -> list[str]:
    """The *count* months ending at *month*, oldest first."""
    return [shift_month(month, -offset) for offset in range(count - 1, -1, -1)]
