from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

T = TypeVar("T")

TIMEOUT_ERROR_CODE = 408


class ApiError(Exception):
    """
    Base class for all errors surfaced to API callers.
    """

    def __init__(self, code: int, message: str, payload: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.payload = payload

    def to_response_object(self) -> dict[str, Any]:
        obj: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.payload is not None:
            obj["payload"] = self.payload
        return obj

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class NetworkError(ApiError):
    """
    Transport failure, timeout or abort. No response was received.
    """

    def __init__(self, message: str, code: int = 0, payload: Any = None):
        super().__init__(code, message, payload)

    @property
    def is_timeout(self) -> bool:
        return self.code == TIMEOUT_ERROR_CODE


class ApplicationError(ApiError):
    """
    Well-formed response whose status code is outside the success range.
    """

    pass


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: ApiError

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self):
        raise self.error


Result = Ok[T] | Err


def stringify_pydantic_error(validation_error: ValidationError) -> str:
    return "\n".join(
        f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
        for e in validation_error.errors()
    )
