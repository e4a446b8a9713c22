from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional


@dataclass(frozen=True)
class Site:
    site_id: str
    name: str
    address: Optional[str]
    auto_signout_time: time
    created_by: str
    created_at: datetime
