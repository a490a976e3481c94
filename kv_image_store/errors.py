"""Error taxonomy shared by every fallible key-value store operation."""

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Classification of a failure, valued by the HTTP status it maps to."""

    BAD_REQUEST = 400
    FORBIDDEN = 403
    NOT_FOUND = 404
    INTERNAL_ERROR = 500


class KVError(Exception):
    """The single failure type raised by stores, the codec and handlers.

    The classification is chosen where the failure happens; the HTTP layer
    only reads ``status_code`` and ``message`` back out of it.

    Args:
        kind: Classification of the failure.
        message: Human readable description. Non-string values are
            converted with ``str()``.
    """

    LOCK_ERROR_MESSAGE = "error writing to store"
    IMAGE_ERROR_MESSAGE = "error processing image"

    def __init__(self, kind: ErrorKind, message: Any):
        self.kind = kind
        self.message = message if isinstance(message, str) else str(message)
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        """HTTP status code for this error."""
        return self.kind.value

    @classmethod
    def not_found(cls, message: Any = "Key not found") -> "KVError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def forbidden(cls, message: Any = "Operation not allowed") -> "KVError":
        return cls(ErrorKind.FORBIDDEN, message)

    @classmethod
    def bad_request(cls, message: Any = "Bad request") -> "KVError":
        return cls(ErrorKind.BAD_REQUEST, message)

    @classmethod
    def internal(cls, message: Any = "Internal server error") -> "KVError":
        return cls(ErrorKind.INTERNAL_ERROR, message)

    @classmethod
    def from_lock_error(cls, exc: BaseException) -> "KVError":
        """Convert a failed lock acquisition into an internal error."""
        return cls(ErrorKind.INTERNAL_ERROR, cls.LOCK_ERROR_MESSAGE)

    @classmethod
    def from_image_error(cls, exc: BaseException) -> "KVError":
        """Convert an image decode/encode failure into a bad request."""
        return cls(ErrorKind.BAD_REQUEST, cls.IMAGE_ERROR_MESSAGE)

    def __str__(self) -> str:
        return f"{self.status_code}: {self.message}"

    def __repr__(self) -> str:
        return f"KVError(kind={self.kind.name}, message={self.message!r})"
