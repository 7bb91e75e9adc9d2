"""Exceptions raised by the LIFX bridge."""


class LifxAPIError(Exception):
    """Raised when a call to the LIFX cloud API fails.

    Covers transport errors, timeouts, non-2xx responses and undecodable
    bodies. The underlying exception is chained as __cause__.
    """

    def __init__(self, operation: str, message: str, status_code: int | None = None):
        self.operation = operation
        self.status_code = status_code
        super().__init__(f"{operation}: {message}")
