"""Tiny success/failure values for per-user work inside background jobs.

Background jobs must keep going when one user's work fails, so per-user calls
are wrapped with :func:`capture` and inspected instead of relying on
try/except blocks scattered through the workflow.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: BaseException

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err]


def capture(fn: Callable[..., T], *args, **kwargs) -> Result[T]:
    """Call ``fn`` and wrap its return value or raised exception."""
    try:
        return Ok(fn(*args, **kwargs))
    except Exception as exc:
        return Err(exc)


def map_result(result: Result[T], fn: Callable[[T], U]) -> Result[U]:
    if isinstance(result, Ok):
        return capture(fn, result.value)
    return result


def unwrap_or(result: Result[T], default: U) -> Union[T, U]:
    if isinstance(result, Ok):
        return result.value
    return default


def on_error(result: Result[T], handler: Callable[[BaseException], None]) -> Result[T]:
    """Run ``handler`` for a failed result and pass the result through."""
    if isinstance(result, Err):
        handler(result.error)
    return result
