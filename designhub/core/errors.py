"""Domain errors raised by services and mapped to HTTP responses by the app."""


class MarketplaceError(Exception):
    """Base class for expected, caller-visible failures."""

    kind = "error"
    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnauthenticatedError(MarketplaceError):
    """No caller identity could be resolved (or credentials were rejected)."""

    kind = "unauthenticated"
    status_code = 401


class ForbiddenError(MarketplaceError):
    """Caller is known but lacks the role or relationship required."""

    kind = "forbidden"
    status_code = 403


class NotFoundError(MarketplaceError):
    kind = "not_found"
    status_code = 404


class ConflictError(MarketplaceError):
    """Duplicate unique key (e.g. email already registered)."""

    kind = "conflict"
    status_code = 409


class BadRequestError(MarketplaceError):
    """Invalid state transition, used or expired token, malformed upload."""

    kind = "bad_request"
    status_code = 400


class StorageError(MarketplaceError):
    """Object storage rejected or failed a request."""

    kind = "storage_error"
    status_code = 502

    def __init__(self, message: str, upstream_status: int | None = None) -> None:
        self.upstream_status = upstream_status
        super().__init__(message)
