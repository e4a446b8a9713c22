from __future__ import annotations

import hashlib
import logging
from typing import Callable, Optional

from werkzeug.security import gen_salt

from ..common.validators import require_non_empty
from ..core.constants import (
    CREDENTIAL_DIGEST_LENGTH,
    CREDENTIAL_PREFIX,
    CREDENTIAL_SALT_LENGTH,
    DEFAULT_CREDENTIAL_MAX_ATTEMPTS,
)
from ..core.exceptions import DuplicateCredential
from .model import Credential

logger = logging.getLogger(__name__)


class CredentialIssuer:
    """Derive a worker credential from the worker id plus a server-side salt.

    The salt is never stored, so the credential cannot be recomputed from the
    (guessable) worker id: possession of the printed value is what counts.
    Each attempt draws a fresh salt. ``taken`` lets the caller report values
    already present in storage; the storage unique constraint stays the final
    arbiter.
    """

    def __init__(
        self,
        *,
        max_attempts: int = DEFAULT_CREDENTIAL_MAX_ATTEMPTS,
        salt_factory: Optional[Callable[[], str]] = None,
    ):
        if int(max_attempts) < 1:
            raise ValueError("max_attempts must be >= 1")
        self._max_attempts = int(max_attempts)
        self._salt_factory = salt_factory or (lambda: gen_salt(CREDENTIAL_SALT_LENGTH))

    def derive(self, worker_id: str, salt: str) -> Credential:
        digest = hashlib.sha256(f"{worker_id}:{salt}".encode("utf-8")).hexdigest()
        return Credential(CREDENTIAL_PREFIX + digest[:CREDENTIAL_DIGEST_LENGTH])

    def issue(self, worker_id: str, *, taken: Optional[Callable[[str], bool]] = None) -> Credential:
        worker_id = require_non_empty(worker_id, "Worker id")

        for attempt in range(1, self._max_attempts + 1):
            credential = self.derive(worker_id, self._salt_factory())
            if taken is None or not taken(credential.value):
                return credential
            logger.warning("Credential collision for worker %s (attempt %d)", worker_id, attempt)

        raise DuplicateCredential("Could not issue a unique credential, please retry")

    @staticmethod
    def is_well_formed(value: str) -> bool:
        if not value or not value.startswith(CREDENTIAL_PREFIX):
            return False
        digest = value[len(CREDENTIAL_PREFIX):]
        return len(digest) == CREDENTIAL_DIGEST_LENGTH and all(c in "0123456789abcdef" for c in digest)
