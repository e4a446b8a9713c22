from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Worker:
    """Domain entity: worker profile.

    ``worker_id`` equals the principal id, so there is exactly one profile per
    principal. Only ``phone`` changes after registration.
    """

    worker_id: str
    name: str
    company: str
    phone: Optional[str]
    credential: str
    created_at: datetime
