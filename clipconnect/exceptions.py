"""Domain errors raised by the session registry and clipboard relay.

Each error carries the HTTP status it maps to and a public message that is
safe to return to clients. Storage details never end up in the message;
they are logged where the failure happens.
"""


class ClipConnectError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class InvalidInput(ClipConnectError):
    status_code = 400
    message = "Invalid input"


class NotFound(ClipConnectError):
    status_code = 404
    message = "No data found"


class SessionNotFound(NotFound):
    message = "Session not found"


class CodeGenerationExhausted(ClipConnectError):
    status_code = 500
    message = "Code generation failed"

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__()


class StorageError(ClipConnectError):
    status_code = 500
    message = "Storage operation failed"


class UniqueViolation(StorageError):
    """Insert rejected by a uniqueness constraint."""
