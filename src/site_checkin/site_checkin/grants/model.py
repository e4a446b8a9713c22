from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import SiteRole


@dataclass(frozen=True)
class SiteGrant:
    """Admin grant: (site, principal, role). At most one per (site, principal)."""

    site_id: str
    principal_id: str
    role: SiteRole
    granted_at: datetime
