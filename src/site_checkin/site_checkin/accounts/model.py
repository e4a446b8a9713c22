from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Principal:
    """Authenticated actor. Its id is shared with the worker profile, if any."""

    principal_id: str
    email: str
    password_hash: str
    display_name: str
    created_at: datetime
