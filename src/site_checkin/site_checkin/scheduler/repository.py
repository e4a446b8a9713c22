from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol


class SweepMarkerRepository(Protocol):
    """Persisted "last swept cutoff" per site.

    Lets any scheduler process, after any restart, work out which cutoffs are
    still due from stored state alone.
    """

    def get(self, site_id: str) -> Optional[datetime]:
        raise NotImplementedError

    def advance(self, *, site_id: str, cutoff: datetime, now: datetime) -> None:
        """Move the marker forward to ``cutoff``. Never moves it backwards."""

        raise NotImplementedError
