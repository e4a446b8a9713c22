from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import SiteRole
from .model import SiteGrant


class GrantRepository(Protocol):
    def get(self, *, site_id: str, principal_id: str) -> Optional[SiteGrant]:
        raise NotImplementedError

    def list_for_principal(self, principal_id: str) -> Sequence[SiteGrant]:
        raise NotImplementedError

    def list_for_site(self, site_id: str) -> Sequence[SiteGrant]:
        raise NotImplementedError

    def insert(self, *, site_id: str, principal_id: str, role: SiteRole, granted_at: datetime) -> bool:
        """Insert a grant.

        Returns False, without raising, when a grant for (site, principal)
        already exists. Uniqueness is the store's unique constraint. Raises
        SiteNotFound when the site does not exist.
        """

        raise NotImplementedError

    def delete_keeping_an_admin(self, *, site_id: str, principal_id: str) -> Optional[bool]:
        """Delete a grant unless it is the last ADMIN grant of the site.

        Returns True when deleted, False when no such grant exists and None
        when the delete was refused to keep the site administered. Runs in a
        single transaction.
        """

        raise NotImplementedError
