"""
Error types shared by the transport client and the schema layer.
"""

from typing import Any


class BubbleError(Exception):
    """Base class for every failure raised at the remote store boundary."""


class ApiError(BubbleError):
    """The remote store answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int, response_body: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_body = response_body

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    def __repr__(self) -> str:
        return f"ApiError(status_code={self.status_code}, message={self.message!r})"


class NetworkError(BubbleError):
    """No HTTP response at all (DNS failure, refused connection, timeout)."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(BubbleError):
    """A payload does not conform to its declared schema."""

    def __init__(self, message: str, issues: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.issues = issues or []

    def __str__(self) -> str:
        if not self.issues:
            return self.message
        return self.message + "\n" + "\n".join(f"  - {issue}" for issue in self.issues)
