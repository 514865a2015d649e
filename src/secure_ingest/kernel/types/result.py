"""Result[T, E] – tagged success/failure values for pipeline steps.

Both variants are frozen dataclasses, so callers can dispatch with
structural pattern matching::

    match await step(session):
        case Ok(value=digest):
            ...
        case Err(error=error):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeAlias, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result variant."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Error result variant."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise self.error


Result: TypeAlias = Union[Ok[T], Err[E]]

__all__ = ["Err", "Ok", "Result"]
