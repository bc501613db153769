#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from typing import TYPE_CHECKING, Generic, TypeVar

from ._mutex import Mutex
from ._utils import call_maybe_async
from .lowlevel import CancellationToken

if sys.version_info >= (3, 9):
    from collections.abc import Awaitable, Callable
else:
    from typing import Awaitable, Callable

if TYPE_CHECKING:
    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

_T = TypeVar("_T")
_R = TypeVar("_R")


class Lock(Generic[_T]):
    """
    A mutex that guards one value.

    The value is reachable only through :meth:`lock`, which passes it to a
    callback while the mutex is held. There is deliberately no getter or
    setter: callers must not keep the value beyond the callback.

    Example:
      >>> async def increment(counter: Lock[list[int]]) -> None:
      ...     def inc(value: list[int]) -> None:
      ...         value[0] += 1
      ...     await counter.lock(inc)
    """

    __slots__ = (
        "__weakref__",
        "_mutex",
        "_value",
    )

    def __new__(cls, value: _T, /) -> Self:
        """..."""

        self = object.__new__(cls)

        self._mutex = Mutex()
        self._value = value

        return self

    def __getstate__(self, /) -> None:
        """
        Disables the use of internal state for pickling and copying.
        """

        return None

    def __repr__(self, /) -> str:
        """..."""

        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        if self._mutex.locked:
            extra = f"locked, waiting={self._mutex.waiting}"
        else:
            extra = "unlocked"

        return f"<{cls_repr} object at {id(self):#x} [{extra}]>"

    async def lock(
        self,
        fn: Callable[[_T], Awaitable[_R] | _R],
        /,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> _R:
        """
        Call *fn* with the guarded value while holding exclusive access.

        The result of *fn* is awaited if it is awaitable and then returned.
        The mutex is released on every exit path, including an exception
        raised by *fn*.

        Raises:
          WaitCancelled:
            if *cancel_token* fires before access is granted.
        """

        with await self._mutex.acquire(cancel_token=cancel_token):
            return await call_maybe_async(fn, self._value)

    @property
    def locked(self, /) -> bool:
        return self._mutex.locked

    @property
    def waiting(self, /) -> int:
        return self._mutex.waiting
