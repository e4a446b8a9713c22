from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import Principal


class PrincipalRepository(Protocol):
    def get_by_id(self, principal_id: str) -> Optional[Principal]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Principal]:
        raise NotImplementedError

    def create(
        self,
        *,
        principal_id: str,
        email: str,
        password_hash: str,
        display_name: str,
        created_at: datetime,
    ) -> Principal:
        """Insert a principal. Raises DuplicateAccount if the email is taken."""

        raise NotImplementedError
