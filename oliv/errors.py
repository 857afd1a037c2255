class OlivError(Exception):
    """Base error rendered as ``{"error": message}`` with ``status_code``."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(OlivError):
    status_code = 400
    default_message = "Missing required parameters"


class NotFoundError(OlivError):
    status_code = 404
    default_message = "Supermarket not supported or no products found"


class InternalError(OlivError):
    status_code = 500
    default_message = "Internal server error"
