"""Exception hierarchy for schedule sync operations."""


class ScheduleSyncError(Exception):
    """Base exception for schedule sync operations."""

    pass


class ParseError(ScheduleSyncError):
    """Schedule text could not be parsed.

    The parser absorbs malformed lines itself; this exists for callers
    that want to signal unusable input explicitly.
    """

    pass


class DocumentNotFoundError(ScheduleSyncError):
    """Document not found in the vault."""

    pass


class ConfigurationError(ScheduleSyncError):
    """Settings are incomplete or invalid for the requested operation."""

    pass


class PersistenceError(ScheduleSyncError):
    """Settings blob (and the sync map in it) could not be read or written."""

    pass


class _HTTPStatusError(ScheduleSyncError):
    """Error carrying an optional HTTP status code and response body."""

    def __init__(
        self, message: str, status_code: int | None = None, body: str = ""
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class AuthError(_HTTPStatusError):
    """Credential exchange failed or the API rejected the bearer token."""

    pass


class GatewayError(_HTTPStatusError):
    """Calendar API returned a non-auth error or the transport failed."""

    pass
