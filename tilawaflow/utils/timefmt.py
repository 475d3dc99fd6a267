"""Time formatting for the transport display."""

from __future__ import annotations

import math


def format_clock(seconds: float) -> str:
    """Format *seconds* as ``mm:ss``.

    Non-finite or negative values (an unloaded source reports no
    duration yet) render as ``00:00``.
    """
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        return "00:00"
    total = int(seconds)
    return f"{total // 60:02d}:{total % 60:02d}"
