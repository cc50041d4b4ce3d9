from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict

DataT = TypeVar("DataT")

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

QueryValue = str | int | float | bool | None


def is_success_code(code: int) -> bool:
    return 200 <= code < 300


class ApiResponse(BaseModel, Generic[DataT]):
    """
    Envelope shared by every backend response: ``{code, message, data?}``.

    ``code`` is an application-level status, independent of the HTTP status line.
    """

    code: int
    message: str = ""
    data: DataT | None = None

    model_config = ConfigDict(extra="allow")

    @property
    def ok(self) -> bool:
        return is_success_code(self.code)
