# ABOUTME: Error taxonomy shared by the store, services and HTTP layer.
# ABOUTME: Each error carries a stable code, an HTTP status and a caller-safe message.


class SiteError(Exception):
    """Base exception for all expected failures.

    Attributes:
        code: Standardized error code returned to callers
        http_status: Status code used by the HTTP layer
        message: Human-readable, caller-safe message
    """

    code: str = "INTERNAL_SERVER_ERROR"
    http_status: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}


class ValidationFailed(SiteError):
    """Malformed input: empty required field, bad email syntax, invalid enum value."""

    code = "BAD_REQUEST"
    http_status = 400
    default_message = "Invalid input"


class Unauthorized(SiteError):
    """Caller is not signed in."""

    code = "UNAUTHORIZED"
    http_status = 401
    default_message = "Please login"


class Forbidden(Unauthorized):
    """Caller is signed in but is not the site owner."""

    code = "FORBIDDEN"
    http_status = 403
    default_message = "Unauthorized: Admin access only"


class Conflict(SiteError):
    """A uniqueness constraint would be violated."""

    code = "CONFLICT"
    http_status = 409
    default_message = "Record already exists"


class NotFound(SiteError):
    code = "NOT_FOUND"
    http_status = 404
    default_message = "Not found"


class StoreUnavailable(SiteError):
    """The live store could not be reached."""

    code = "SERVICE_UNAVAILABLE"
    http_status = 503
    default_message = "Service temporarily unavailable"
