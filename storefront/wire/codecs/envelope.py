"""
The {success, message, data} body every storefront route answers with.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from kungfu import Result, Ok, Error
from pydantic import BaseModel

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    success: bool
    message: str = ""
    data: T | None = None

    @classmethod
    def ok(cls, data: T, message: str = "ok") -> Envelope[T]:
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, message: str) -> Envelope[T]:
        return cls(success=False, message=message)

    @classmethod
    def of(cls, result: Result[Any, Any], render: Callable[[Any], T]) -> Envelope[T]:
        """Successful values go through render; errors contribute their message."""
        match result:
            case Ok(value):
                return cls.ok(render(value))
            case Error(err):
                return cls.fail(getattr(err, "message", str(err)))


__all__ = ("Envelope",)
