from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorCode:
    INVALID = "invalid"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    TRANSACTION_FAILED = "transaction_failed"


@dataclass
class ServiceResult(Generic[T]):
    """Success/failure outcome returned by membership operations.

    `error` is a short user-facing reason, `details` carries the underlying
    message for diagnostics.
    """

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    details: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def ok(cls, data: T = None) -> "ServiceResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls,
        error: str,
        details: Optional[str] = None,
        error_code: str = ErrorCode.INVALID,
    ) -> "ServiceResult[T]":
        return cls(success=False, error=error, details=details, error_code=error_code)

    @property
    def not_found(self) -> bool:
        return self.error_code == ErrorCode.NOT_FOUND

