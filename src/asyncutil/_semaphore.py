#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import os
import sys

from typing import TYPE_CHECKING, Any, Final, TypeVar

from ._notify import Notify
from ._utils import call_maybe_async, check_positive_whole
from .lowlevel import CancellationToken, async_checkpoint
from .meta import DEFAULT, DefaultType

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

OVERFLOW_POLICIES: Final[tuple[str, ...]] = ("error", "cap", "grow")

_DEFAULT_OVERFLOW: Final[str] = os.getenv(
    "ASYNCUTIL_SEMAPHORE_OVERFLOW",
    "error",
)


def _check_overflow(overflow: str, /) -> str:
    if overflow not in OVERFLOW_POLICIES:
        msg = f"overflow must be one of {OVERFLOW_POLICIES!r}"
        raise ValueError(msg)

    return overflow


class SemaphoreGuard:
    """
    A scoped-acquisition handle returned by :meth:`Semaphore.acquire`.

    Its release action fires at most once: either by an explicit
    :meth:`release` call or on leaving a ``with`` block. Any further release
    through the same handle is a silent no-op, so a handle can never release
    a permit that it does not own.

    Example:
      >>> async def worker(sem):
      ...     with await sem.acquire():
      ...         ...  # at most `sem.size` workers run here
    """

    __slots__ = (
        "__weakref__",
        "_owner",
        "_released",
    )

    def __init__(self, /, owner: Semaphore | Any) -> None:
        self._owner = owner
        self._released = False

    def __repr__(self, /) -> str:
        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        state = "released" if self._released else "held"

        return f"<{cls_repr} for {self._owner!r} at {id(self):#x} [{state}]>"

    def __enter__(self, /) -> Self:
        return self

    def __exit__(
        self,
        /,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.release()

    def release(self, /) -> bool:
        """
        Release the acquired permit.

        Returns :data:`True` if this call released it and :data:`False` if
        the handle had already been released.
        """

        if self._released:
            return False

        self._released = True
        self._owner.release()

        return True

    @property
    def released(self, /) -> bool:
        return self._released


class Semaphore:
    """
    A bounded pool of permits with strictly FIFO-fair waiters.

    :meth:`acquire` takes a permit without suspension if one is free and
    nobody is queued; otherwise it suspends until :meth:`release` hands a
    permit directly to it. A later :meth:`acquire` call can never overtake an
    earlier pending one.

    *overflow* decides what a :meth:`release` beyond the capacity does:

    * ``"error"`` raises :exc:`RuntimeError` (a programming error);
    * ``"cap"`` silently ignores the extra release;
    * ``"grow"`` adds a permit, so the pool grows past *size*.

    The default comes from the ``ASYNCUTIL_SEMAPHORE_OVERFLOW`` environment
    variable (``"error"`` if unset).

    Like every primitive in this package, the internal bookkeeping is not
    protected by any lock: it is safe only within one event loop thread.
    """

    __slots__ = (
        "__weakref__",
        "_overflow",
        "_size",
        "_value",
        "_waiters",
    )

    def __new__(
        cls,
        /,
        size: int = 1,
        *,
        overflow: str | DefaultType = DEFAULT,
    ) -> Self:
        """..."""

        size = check_positive_whole(size, "size")

        if overflow is DEFAULT:
            overflow = _DEFAULT_OVERFLOW

        self = object.__new__(cls)

        self._overflow = _check_overflow(overflow)
        self._size = size
        self._value = size
        self._waiters = Notify(on_lost=self._release)

        return self

    def __getnewargs_ex__(self, /) -> tuple[tuple[Any, ...], dict[str, Any]]:
        """
        Returns arguments that can be used to create new instances with the
        same initial values.

        The current state does not affect the arguments.

        Example:
            >>> orig = Semaphore(2, overflow='cap')
            >>> args, kwargs = orig.__getnewargs_ex__()
            >>> copy = Semaphore(*args, **kwargs)
            >>> copy.size, copy.overflow
            (2, 'cap')
        """

        return ((self._size,), {"overflow": self._overflow})

    def __getstate__(self, /) -> None:
        """
        Disables the use of internal state for pickling and copying.
        """

        return None

    def __copy__(self, /) -> Self:
        """..."""

        return self.__class__(self._size, overflow=self._overflow)

    def __repr__(self, /) -> str:
        """..."""

        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        if self._overflow == _DEFAULT_OVERFLOW:
            object_repr = f"{cls_repr}({self._size!r})"
        else:
            object_repr = (
                f"{cls_repr}({self._size!r}, overflow={self._overflow!r})"
            )

        value = self._value

        if value > 0:
            extra = f"value={value}"
        else:
            extra = f"value={value}, waiting={self._waiters.waiting}"

        return f"<{object_repr} at {id(self):#x} [{extra}]>"

    async def __aenter__(self, /) -> Self:
        """..."""

        await self._acquire()

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

    async def _acquire(
        self,
        /,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> None:
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        if self._value > 0 and not self._waiters.waiting:
            self._value -= 1

            try:
                await async_checkpoint()
            except BaseException:
                self._release()
                raise

            return

        # The permit is transferred by `_release()` before the wakeup, so
        # there is nothing to take here.
        await self._waiters.notified(cancel_token=cancel_token)

    async def acquire(
        self,
        /,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> SemaphoreGuard:
        """
        Acquire a permit, suspending until one is available.

        Returns a :class:`SemaphoreGuard` that releases the permit exactly
        once.

        Raises:
          WaitCancelled:
            if *cancel_token* has fired (before the call or while waiting).
        """

        await self._acquire(cancel_token=cancel_token)

        return SemaphoreGuard(self)

    def _release(self, /) -> None:
        if not self._waiters.notify():
            self._value += 1

    def release(self, /) -> None:
        """
        Release a permit: hand it to the oldest waiter, if any, or return it
        to the pool.

        Raises:
          RuntimeError:
            if the pool is full and the overflow policy is ``"error"``.
        """

        if self._value >= self._size and not self._waiters.waiting:
            if self._overflow == "error":
                msg = "semaphore released too many times"
                raise RuntimeError(msg)

            if self._overflow == "cap":
                return

        self._release()

    async def lock(
        self,
        fn: Callable[..., Awaitable[_R] | _R],
        /,
        *args: Any,
        **kwargs: Any,
    ) -> _R:
        """
        Acquire a permit, call *fn* (awaiting its result if needed), and
        release the permit whether *fn* succeeds or fails.
        """

        with await self.acquire():
            return await call_maybe_async(fn, *args, **kwargs)

    @property
    def size(self, /) -> int:
        """
        The number of permits the semaphore was created with.
        """

        return self._size

    @property
    def overflow(self, /) -> str:
        """
        The release policy beyond the capacity.
        """

        return self._overflow

    @property
    def value(self, /) -> int:
        """
        The current number of free permits.

        It does not change on release if the permit has been handed directly
        to a waiting task.
        """

        return self._value

    @property
    def waiting(self, /) -> int:
        """
        The current number of tasks waiting to acquire.
        """

        return self._waiters.waiting

    @property
    def locked(self, /) -> bool:
        """
        :data:`True` if no permit is free.
        """

        return self._value == 0
