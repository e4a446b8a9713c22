from __future__ import annotations

from datetime import datetime, time
from typing import Optional, Protocol, Sequence

from ..core.enums import SiteRole
from .model import Site


class SiteRepository(Protocol):
    def get_by_id(self, site_id: str) -> Optional[Site]:
        raise NotImplementedError

    def list_by_ids(self, site_ids: Sequence[str]) -> Sequence[Site]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Site]:
        raise NotImplementedError

    def create_with_admin(
        self,
        *,
        site_id: str,
        name: str,
        address: Optional[str],
        auto_signout_time: time,
        creator_id: str,
        role: SiteRole,
        created_at: datetime,
    ) -> Site:
        """Insert the site and the creator's grant in one transaction.

        Either both rows exist afterwards or neither does.
        """

        raise NotImplementedError

    def update(
        self,
        *,
        site_id: str,
        name: str,
        address: Optional[str],
        auto_signout_time: time,
    ) -> bool:
        raise NotImplementedError
