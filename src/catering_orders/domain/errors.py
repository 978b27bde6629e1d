"""Domain errors."""


class InvalidInputError(ValueError):
    """Raised when operator input fails validation before any API call."""


class AccessDeniedError(PermissionError):
    """Raised when a session's role does not allow an action."""
