"""Scale-down debounce.

Scale-up is always accepted immediately. A scale-down is held back until
``scale_down_delay`` has passed since the last successful scale-out, which
keeps a workload from flapping when demand briefly dips after a burst.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional


def accept_candidate(
    previous_desired: Optional[int],
    candidate: int,
    last_scale_out_time: Optional[datetime],
    scale_down_delay: timedelta,
    now: datetime,
) -> int:
    """Return ``candidate`` when it may replace ``previous_desired``, else ``previous_desired``."""
    if previous_desired is None or candidate > previous_desired:
        return candidate
    if last_scale_out_time is None or last_scale_out_time + scale_down_delay <= now:
        return candidate
    return previous_desired


def is_scale_out(previous_desired: Optional[int], new_desired: int) -> bool:
    """True when publishing ``new_desired`` counts as growth.

    With nothing published yet, growth means exceeding the single default replica.
    """
    if previous_desired is None:
        return new_desired > 1
    return new_desired > previous_desired
