"""Error taxonomy shared by the services and the HTTP layer.

Learn: Services raise these; the global handlers in
taskhub.api.error_handlers turn them into responses. The message is the
whole response body, so it must be safe to show to the caller.
"""


class AppError(Exception):
    """Base class for errors that map to a stable HTTP status."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(AppError):
    """Missing, malformed, expired or forged token."""

    status_code = 401
    default_message = "Unauthorized"


class InvalidCredentials(AppError):
    """Login failed. Same message whether the user or the password was wrong."""

    status_code = 401
    default_message = "Invalid username or password"


class Forbidden(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(AppError):
    """Entity absent, or owned by another organization."""

    status_code = 404
    default_message = "Not found"


class OrganizationNotFound(NotFound):
    default_message = "Organization not found"


class MembershipNotFound(NotFound):
    default_message = "Membership not found"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict"


class InternalError(AppError):
    pass
