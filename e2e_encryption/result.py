"""
Non-throwing outcome type used by every public operation.

A fallible operation returns either ``Ok(value)`` or ``Err(error)``. Callers
branch on ``is_ok`` (or ``isinstance``) instead of catching exceptions:

```python
result = await service.generate()
if result.is_err:
    log.warning("handshake aborted: %s", result.error)
    return
key_pair = result.value
```
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, NoReturn, Type, TypeVar, Union

from .errors import E2EError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    @property
    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        return Ok(fn(self.value))


@dataclass(frozen=True)
class Err:
    """Failed outcome carrying a typed error."""

    error: E2EError

    @property
    def is_ok(self) -> bool:
        return False

    @property
    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Raise the carried error."""
        raise self.error

    def map(self, fn: Callable[[object], object]) -> Err:
        return self


Result = Union[Ok[T], Err]


def ok(value: T) -> Ok[T]:
    return Ok(value)


def err(error: E2EError) -> Err:
    return Err(error)


async def capture(
    awaitable: Awaitable[T],
    error_type: Type[E2EError],
    message: str,
    **error_kwargs: object,
) -> Result[T]:
    """
    Await an engine call and convert any failure into an ``Err``.

    Only ``Exception`` subclasses are converted; cancellation and interpreter
    exits propagate.

    Args:
        awaitable: The pending engine call
        error_type: Error class to wrap the failure in
        message: Contextual message for the wrapped error
        **error_kwargs: Extra constructor arguments (e.g. ``role``)

    Returns:
        Ok with the awaited value, or Err wrapping the original exception
    """
    try:
        return Ok(await awaitable)
    except Exception as e:
        return Err(error_type(message, cause=e, **error_kwargs))
