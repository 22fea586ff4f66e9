from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from tableflow.application.errors import ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class OperationError:
    kind: ErrorKind
    code: str
    message: str
    details: dict[str, object]


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    success: bool
    data: T | None = None
    error: OperationError | None = None

    @classmethod
    def ok(cls, data: T) -> OperationResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        code: str,
        message: str,
        details: dict[str, object] | None = None,
    ) -> OperationResult[T]:
        return cls(
            success=False,
            error=OperationError(kind=kind, code=code, message=message, details=details or {}),
        )

    def unwrap(self) -> T:
        if not self.success or self.data is None:
            raise ValueError(f"cannot unwrap failed result: {self.error}")
        return self.data
