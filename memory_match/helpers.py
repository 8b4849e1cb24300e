# memory_match/helpers.py
from __future__ import annotations
from typing import Optional


def get_time_str(seconds: Optional[float]) -> str:
    """Format seconds as MM:SS, or "N/A" when there is no value."""
    if seconds is None:
        return "N/A"
    total = int(seconds)
    minutes, secs = divmod(total, 60)
    return f"{minutes:02d}:{secs:02d}"
