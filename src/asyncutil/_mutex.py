#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from typing import TYPE_CHECKING, Any, TypeVar

from ._semaphore import Semaphore, SemaphoreGuard
from ._utils import call_maybe_async
from .lowlevel import CancellationToken

if sys.version_info >= (3, 9):
    from collections.abc import Awaitable, Callable
else:
    from typing import Awaitable, Callable

if TYPE_CHECKING:
    from types import TracebackType

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

_R = TypeVar("_R")


class MutexGuard(SemaphoreGuard):
    """
    A scoped-acquisition handle returned by :meth:`Mutex.acquire`.

    Releasing it hands the mutex to the next waiter or marks it free. The
    release fires at most once; releasing the same handle again is a no-op.
    """

    __slots__ = ()


class Mutex:
    """
    A mutual exclusion lock: a semaphore with exactly one permit.

    Waiters are granted the mutex in strict FIFO order. The mutex has no
    notion of an owner task, so any task may release it; use the handle
    returned by :meth:`acquire` (or ``async with``) to tie the release to a
    scope.

    Example:
      >>> async def increment(mutex, counter):
      ...     with await mutex.acquire():
      ...         counter[0] += 1
    """

    __slots__ = (
        "__weakref__",
        "_semaphore",
    )

    def __new__(cls, /) -> Self:
        """..."""

        self = object.__new__(cls)

        self._semaphore = Semaphore(1, overflow="error")

        return self

    def __getnewargs__(self, /) -> tuple[Any, ...]:
        """..."""

        return ()

    def __getstate__(self, /) -> None:
        """
        Disables the use of internal state for pickling and copying.
        """

        return None

    def __copy__(self, /) -> Self:
        """..."""

        return self.__class__()

    def __repr__(self, /) -> str:
        """..."""

        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        if self._semaphore.locked:
            extra = f"locked, waiting={self._semaphore.waiting}"
        else:
            extra = "unlocked"

        return f"<{cls_repr}() at {id(self):#x} [{extra}]>"

    async def __aenter__(self, /) -> Self:
        """..."""

        await self._semaphore._acquire()

        return self

    async def __aexit__(
        self,
        /,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """..."""

        self.release()

    async def acquire(
        self,
        /,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> MutexGuard:
        """
        Acquire the mutex, suspending until it is free.

        Raises:
          WaitCancelled:
            if *cancel_token* has fired (before the call or while waiting).
        """

        await self._semaphore._acquire(cancel_token=cancel_token)

        return MutexGuard(self)

    def release(self, /) -> None:
        """
        Release the mutex, handing it to the oldest waiter if there is one.

        Raises:
          RuntimeError:
            if the mutex is not locked.
        """

        if not self._semaphore.locked:
            msg = "release unlocked lock"
            raise RuntimeError(msg)

        self._semaphore.release()

    async def lock(
        self,
        fn: Callable[..., Awaitable[_R] | _R],
        /,
        *args: Any,
        **kwargs: Any,
    ) -> _R:
        """
        Call *fn* (awaiting its result if needed) while holding the mutex.
        """

        with await self.acquire():
            return await call_maybe_async(fn, *args, **kwargs)

    @property
    def locked(self, /) -> bool:
        """
        :data:`True` if the mutex is held.
        """

        return self._semaphore.locked

    @property
    def waiting(self, /) -> int:
        """
        The current number of tasks waiting to acquire.
        """

        return self._semaphore.waiting
