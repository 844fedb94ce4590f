"""
Relative date cutoffs used by the roster views.

Re-derived on every request; pass ``now`` (or a clock) to pin time in tests.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional


@dataclass(frozen=True)
class TemporalWindows:
    now: datetime
    past60: datetime
    past180: datetime
    past365: datetime
    tomorrow: datetime


def compute_windows(
    now: Optional[datetime] = None,
    clock: Callable[[], datetime] = datetime.utcnow,
) -> TemporalWindows:
    """Derive the 60/180/365-day cutoffs (and tomorrow) from ``now``."""
    if now is None:
        now = clock()
    return TemporalWindows(
        now=now,
        past60=now - timedelta(days=60),
        past180=now - timedelta(days=180),
        past365=now - timedelta(days=365),
        tomorrow=now + timedelta(days=1),
    )
