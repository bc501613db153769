#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from asyncio import CancelledError
from logging import Logger, getLogger
from typing import TYPE_CHECKING, Final, TypeVar

from ._mutex import Mutex, MutexGuard
from ._notify import Notify
from .lowlevel import CancellationToken
from .meta import DEFAULT, DefaultType

if sys.version_info >= (3, 9):
    from collections.abc import Callable
else:
    from typing import Callable

if TYPE_CHECKING:
    from types import TracebackType

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

LOGGER: Final[Logger] = getLogger(__name__)

_T = TypeVar("_T")


class Condition:
    """
    A condition variable: a mutex paired with a FIFO list of waiters.

    A task that holds the lock can :meth:`wait` for a state change, which
    atomically registers it as a waiter and releases the lock; once woken by
    :meth:`notify` or :meth:`notify_all`, it re-acquires the lock before
    returning. Several conditions may share one :class:`Mutex`, so that tasks
    interested in different states of the same resource can coordinate.

    Since :class:`Mutex` has no owner, "holding the lock" is checked as "the
    lock is locked".

    Example:
      >>> async def consume(cond, items):
      ...     async with cond:
      ...         await cond.wait_for(lambda: items)
      ...         return items.pop()
    """

    __slots__ = (
        "__weakref__",
        "_lock",
        "_waiters",
    )

    def __new__(cls, /, lock: Mutex | DefaultType = DEFAULT) -> Self:
        """..."""

        if lock is DEFAULT:
            lock = Mutex()

        self = object.__new__(cls)

        self._lock = lock
        self._waiters = Notify(on_lost=self._pass_on)

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

        object_repr = f"{cls_repr}({self._lock!r})"

        extra = f"waiting={self._waiters.waiting}"

        return f"<{object_repr} at {id(self):#x} [{extra}]>"

    async def __aenter__(self, /) -> Self:
        """..."""

        await self._lock.acquire()

        return self

    async def __aexit__(
        self,
        /,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        """..."""

        self._lock.release()

    async def acquire(
        self,
        /,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> MutexGuard:
        """
        Acquire the underlying lock.
        """

        return await self._lock.acquire(cancel_token=cancel_token)

    def release(self, /) -> None:
        """
        Release the underlying lock.

        Raises:
          RuntimeError:
            if the lock is not acquired.
        """

        self._lock.release()

    def _pass_on(self, /) -> None:
        LOGGER.debug(
            "passing on a notification of a cancelled waiter for %r",
            self,
        )

        self._waiters.notify()

    def notify(self, /, n: int = 1) -> int:
        """
        Wake up to *n* tasks waiting on this condition (a no-op if nobody is
        waiting).

        Returns the number of woken tasks.

        Raises:
          RuntimeError:
            if the lock is not acquired.
          ValueError:
            if *n* is not a positive whole number.
        """

        if not self._lock.locked:
            msg = "cannot notify on un-acquired lock"
            raise RuntimeError(msg)

        return self._waiters.notify(n)

    def notify_all(self, /) -> int:
        """
        Wake all tasks waiting on this condition.

        Raises:
          RuntimeError:
            if the lock is not acquired.
        """

        if not self._lock.locked:
            msg = "cannot notify on un-acquired lock"
            raise RuntimeError(msg)

        return self._waiters.notify_all()

    async def wait(
        self,
        /,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> bool:
        """
        Release the lock, wait until notified, and re-acquire the lock.

        There is no suspension point between releasing the lock and
        registering as a waiter, so a notification cannot be lost. The lock
        is re-acquired on every exit path, including cancellation.

        Raises:
          RuntimeError:
            if the lock is not acquired.
          WaitCancelled:
            if *cancel_token* has fired (the lock is held again on raise).
        """

        if not self._lock.locked:
            msg = "cannot wait on un-acquired lock"
            raise RuntimeError(msg)

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        self._lock.release()

        try:
            await self._waiters.notified(cancel_token=cancel_token)
        finally:
            exc = None

            while True:
                try:
                    await self._lock.acquire()
                except CancelledError as err:
                    exc = err
                else:
                    break

            if exc is not None:
                try:
                    raise exc
                finally:
                    del exc  # break reference cycles

        return True

    async def wait_for(
        self,
        /,
        predicate: Callable[[], _T],
        *,
        cancel_token: CancellationToken | None = None,
    ) -> _T:
        """
        Wait until *predicate* becomes true and return its last result.

        The predicate is re-checked after every wakeup: a wakeup alone never
        implies that the condition holds.
        """

        result = predicate()

        while not result:
            await self.wait(cancel_token=cancel_token)

            result = predicate()

        return result

    @property
    def lock(self, /) -> Mutex:
        """
        The underlying lock.
        """

        return self._lock

    @property
    def locked(self, /) -> bool:
        return self._lock.locked

    @property
    def waiting(self, /) -> int:
        """
        The current number of tasks waiting on this condition.
        """

        return self._waiters.waiting
