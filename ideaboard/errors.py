"""Domain exceptions raised by the services and mapped to HTTP in ``main``."""


class IdeaBoardError(Exception):
    """Base class for errors surfaced to API callers."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(IdeaBoardError):
    """Missing or oversized input; nothing was written."""


class NotFoundError(IdeaBoardError):
    """The targeted idea or product does not exist."""


class StoreError(IdeaBoardError):
    """The underlying database operation failed."""

    def __init__(self, message: str, operation: str, target_id=None):
        super().__init__(message)
        self.operation = operation
        self.target_id = target_id
