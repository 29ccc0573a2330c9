#  Copyright 2025 Hathor Labs
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#  http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.

"""
A small `Result` type inspired by Rust, used where a failure is an expected outcome that the caller must handle
instead of an exception (for instance a buffer that is too small).

>>> r: Result[int, str] = Ok(4)
>>> r.unwrap()
4
>>> Err('too small').unwrap_or(0)
0
>>> Ok(4).map(lambda n: n * 2)
Ok(8)
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Generic, Literal, NoReturn, ParamSpec, TypeAlias, TypeVar

from typing_extensions import TypeIs

T = TypeVar('T', covariant=True)  # Success type
E = TypeVar('E', covariant=True)  # Error type
U = TypeVar('U')
F = TypeVar('F')
P = ParamSpec('P')


class Ok(Generic[T]):
    """Success variant, holds the return value."""

    __slots__ = ('_value',)
    __match_args__ = ('_value',)

    def __init__(self, value: T) -> None:
        self._value = value

    def __repr__(self) -> str:
        return f'Ok({self._value!r})'

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Ok) and self._value == other._value

    def __hash__(self) -> int:
        return hash((True, self._value))

    def is_ok(self) -> Literal[True]:
        return True

    def is_err(self) -> Literal[False]:
        return False

    def ok(self) -> T:
        return self._value

    def err(self) -> None:
        return None

    def expect(self, _message: str) -> T:
        return self._value

    def unwrap(self) -> T:
        return self._value

    def unwrap_err(self) -> NoReturn:
        raise UnwrapError(self, 'Called `Result.unwrap_err()` on an `Ok` value')

    def unwrap_or(self, _default: U) -> T:
        return self._value

    def unwrap_or_raise(self) -> T:
        return self._value

    def unwrap_or_propagate(self) -> T:
        return self._value

    def map(self, op: Callable[[T], U]) -> Ok[U]:
        """Return `Ok` with the value mapped by `op`."""
        return Ok(op(self._value))

    def map_err(self, _op: Callable[[E], F]) -> Ok[T]:
        return self


class Err(Generic[E]):
    """Failure variant, holds the error value (usually an exception instance that was not raised)."""

    __slots__ = ('_value',)
    __match_args__ = ('_value',)

    def __init__(self, value: E) -> None:
        self._value = value

    def __repr__(self) -> str:
        return f'Err({self._value!r})'

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Err) and self._value == other._value

    def __hash__(self) -> int:
        return hash((False, self._value))

    def is_ok(self) -> Literal[False]:
        return False

    def is_err(self) -> Literal[True]:
        return True

    def ok(self) -> None:
        return None

    def err(self) -> E:
        return self._value

    def expect(self, message: str) -> NoReturn:
        self._raise_unwrap_error(f'{message}: {self._value!r}')

    def unwrap(self) -> NoReturn:
        self._raise_unwrap_error(f'Called `Result.unwrap()` on an `Err` value: {self._value!r}')

    def _raise_unwrap_error(self, message: str) -> NoReturn:
        exc = UnwrapError(self, message)
        if isinstance(self._value, BaseException):
            raise exc from self._value
        raise exc

    def unwrap_err(self) -> E:
        return self._value

    def unwrap_or(self, default: U) -> U:
        return default

    def unwrap_or_raise(self) -> NoReturn:
        """Raise the contained error, it must be an exception instance."""
        assert isinstance(self._value, Exception), (
            f'called `Result.unwrap_or_raise()` on non-exception value: {self._value}'
        )
        raise self._value

    def unwrap_or_propagate(self) -> NoReturn:
        """Return this `Err` from the enclosing function, which must be decorated with `propagate_result`."""
        raise _ResultPropagationException(self)

    def map(self, _op: Callable[[T], U]) -> Err[E]:
        return self

    def map_err(self, op: Callable[[E], F]) -> Err[F]:
        """Return `Err` with the error mapped by `op`."""
        return Err(op(self._value))


Result: TypeAlias = Ok[T] | Err[E]


class UnwrapError(Exception):
    """Raised by `unwrap`/`expect` on an `Err` (and `unwrap_err` on an `Ok`), the result is kept in `.result`."""

    def __init__(self, result: Result[Any, Any], message: str) -> None:
        super().__init__(message)
        self._result = result

    @property
    def result(self) -> Result[Any, Any]:
        return self._result


class _ResultPropagationException(Exception):
    def __init__(self, err: Err[E]) -> None:
        super().__init__('did you forget to annotate the function/method with `@propagate_result`?')
        self.err = err


def propagate_result(f: Callable[P, Result[T, E]]) -> Callable[P, Result[T, E]]:
    """
    Decorator to turn a function into one that allows using unwrap_or_propagate.
    """
    @functools.wraps(f)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T, E]:
        try:
            return f(*args, **kwargs)
        except _ResultPropagationException as e:
            return e.err  # type: ignore[return-value]

    return wrapper


def is_ok(result: Result[T, E]) -> TypeIs[Ok[T]]:
    """Type guard for the `Ok` variant."""
    return result.is_ok()


def is_err(result: Result[T, E]) -> TypeIs[Err[E]]:
    """Type guard for the `Err` variant."""
    return result.is_err()
