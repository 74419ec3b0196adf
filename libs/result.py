"""Result type for use case return values

Use cases return Result[T] instead of raising for expected failures.
Callers check is_ok()/is_err() and read .value or .error.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class Error(BaseModel):
    """
    Structured error carried by a failed Result

    code identifies the failure class (e.g. TEMPLATE_NOT_FOUND),
    message is human readable, reason holds diagnostic detail.
    """

    code: str
    message: str
    reason: Optional[str] = None
    retryable: bool = False


@dataclass
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[Error] = None

    def is_ok(self) -> bool:
        return self.error is None

    def is_err(self) -> bool:
        return self.error is not None


class Return:
    """Constructors for Result values"""

    @staticmethod
    def ok(value: T) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def err(error: Error) -> Result:
        return Result(error=error)
