"""
Explicit success/failure results.

Configuration loading, fetching and the cleanup pipeline return a
``Result`` instead of raising, so the orchestrator's control flow stays
visible at every step:

    match load_config():
        case Ok(value=config):
            ...
        case Err(error=error):
            ...
"""

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful result carrying a value."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Return the wrapped value."""
        return self.value

    def map(self, func: Callable[[T], U]) -> "Ok[U]":
        """Apply ``func`` to the value."""
        return Ok(func(self.value))


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed result carrying an exception instance (never raised here)."""

    error: E

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self):
        """Raise the wrapped error."""
        raise self.error

    def map(self, func: Callable) -> "Err[E]":
        return self


Result = Union[Ok[T], Err[E]]
