"""Ok/Err values for operations whose failure is routine.

Removing a plant that is already gone is not exceptional, so the session
returns ``Err`` with a message instead of raising and leaves it to the
caller (a UI click handler, the CLI) whether to care.

Usage:
------
    result = session.remove_plant("root-7")
    if result.is_err():
        logger.debug(result.error)

    match session.remove_plant("root-2"):
        case Ok(root):
            ...
        case Err(message):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying ``value``."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    @property
    def error(self) -> None:
        return None

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        """Apply ``f`` to the carried value, e.g. ``Ok(root).map(lambda r: r.id)``."""
        return Ok(f(self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying an ``error`` description."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        """Raise ValueError; check ``is_ok()`` or use ``unwrap_or`` instead."""
        raise ValueError(f"unwrap() on Err: {self.error}")

    def unwrap_or(self, default):
        return default

    @property
    def value(self) -> None:
        return None

    def map(self, f: Callable) -> Err[E]:
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Union[Ok[T], Err[E]]


__all__ = ["Err", "Ok", "Result"]
