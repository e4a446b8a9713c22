class DomainError(Exception):
    """Base exception for business rule violations."""

    kind = "domain_error"


class NotAuthorized(DomainError):
    """Raised when the caller lacks the grant required for an action."""

    kind = "not_authorized"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    kind = "authentication_failed"


class Conflict(DomainError):
    """Expected business conflict. Shown to the user, never retried."""

    kind = "conflict"


class DuplicateCredential(Conflict):
    kind = "duplicate_credential"


class ConflictingGrant(Conflict):
    kind = "conflicting_grant"


class AlreadyOnSite(Conflict):
    kind = "already_on_site"


class NotOpen(Conflict):
    kind = "not_open"


class DuplicateWorker(Conflict):
    kind = "duplicate_worker"


class DuplicateAccount(Conflict):
    kind = "duplicate_account"


class LastAdmin(Conflict):
    kind = "last_admin"


class NotFound(DomainError):
    kind = "not_found"


class UnknownCredential(NotFound):
    kind = "unknown_credential"


class SiteNotFound(NotFound):
    kind = "site_not_found"


class WorkerNotFound(NotFound):
    kind = "worker_not_found"


class RecordNotFound(NotFound):
    kind = "record_not_found"


class InvalidInput(DomainError):
    """Raised when input data is malformed or violates domain rules."""

    kind = "invalid_input"


class InvalidCutoff(InvalidInput):
    kind = "invalid_cutoff"


class InvalidTimestamp(InvalidInput):
    kind = "invalid_timestamp"


class StoreUnavailable(DomainError):
    """Transient persistence failure. The only retryable error kind."""

    kind = "store_unavailable"
