"""Result slots that carry either a value or a typed error descriptor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from civic_snapshot.lib.upstream.errors import CivicDataError, ErrorCode

T = TypeVar("T")


@dataclass(frozen=True)
class ErrorDescriptor:
    """Serializable description of a failure, safe to hand to callers."""

    code: ErrorCode
    message: str
    source: str | None = None
    status_code: int | None = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> ErrorDescriptor:
        """Describe an exception raised while fetching civic data.

        Typed CivicDataErrors keep their code, source and status; a
        ValueError is a rejected caller input; anything else is internal.
        """
        if isinstance(exc, CivicDataError):
            return cls(
                code=exc.code,
                message=exc.message,
                source=exc.source,
                status_code=getattr(exc, "status_code", None),
            )
        if isinstance(exc, ValueError):
            return cls(code=ErrorCode.INVALID_INPUT, message=str(exc))
        return cls(code=ErrorCode.INTERNAL_ERROR, message="Unexpected internal error")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a successful value or an error descriptor.

    Failed list outcomes still carry an empty list as ``value`` so callers
    can render them without special-casing.
    """

    value: T | None = None
    error: ErrorDescriptor | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: ErrorDescriptor, value: T | None = None) -> Outcome[T]:
        return cls(value=value, error=error)
