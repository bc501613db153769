#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from inspect import iscoroutinefunction
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

from wrapt import decorator

from ._mutex import Mutex

if sys.version_info >= (3, 11):
    from typing import overload
else:
    from typing_extensions import overload

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

_CallableT = TypeVar("_CallableT", bound=Callable[..., Any])


class _AsyncLock(Protocol):
    __slots__ = ()

    async def __aenter__(self, /) -> object: ...
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
        /,
    ) -> object: ...


class _Synchronizer:
    __slots__ = (
        "_async_synchronized",
        "_lock",
    )

    def __init__(self, /, lock: _AsyncLock) -> None:
        self._lock = lock

        @decorator
        async def _async_synchronized(wrapped, instance, args, kwargs, /):
            async with lock:
                return await wrapped(*args, **kwargs)

        self._async_synchronized = _async_synchronized

    async def __aenter__(self, /) -> Self:
        await self._lock.__aenter__()

        return self

    async def __aexit__(
        self,
        /,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        await self._lock.__aexit__(exc_type, exc_value, traceback)

    def __call__(self, wrapped: _CallableT, /) -> _CallableT:
        if not iscoroutinefunction(wrapped):
            msg = f"a coroutine function was expected, got {wrapped!r}"
            raise TypeError(msg)

        return self._async_synchronized(wrapped)


def _synchronized_lock(context: Any, /) -> Mutex:
    # There is no suspension point between the lookup and the assignment,
    # so two tasks cannot create two locks for the same context.
    try:
        return context._synchronized_lock
    except AttributeError:
        pass

    lock = Mutex()

    try:
        context._synchronized_lock = lock
    except AttributeError:  # `__slots__` without `_synchronized_lock`
        msg = (
            f"{context!r} cannot store its lock: add '_synchronized_lock'"
            " to `__slots__` or use `synchronized(lock)` instead"
        )
        raise TypeError(msg) from None

    return lock


@decorator
async def _synchronized_wrapper(wrapped, instance, args, kwargs, /):
    if instance is not None:
        context = instance
    else:
        context = wrapped

    async with _synchronized_lock(context):
        return await wrapped(*args, **kwargs)


@overload
def synchronized(wrapped: _AsyncLock, /) -> _Synchronizer: ...
@overload
def synchronized(wrapped: _CallableT, /) -> _CallableT: ...
def synchronized(wrapped, /):
    """
    Serialize calls to a coroutine function.

    Given an object that supports ``async with`` (such as :class:`Mutex` or
    :class:`Semaphore`), returns a decorator that runs every call of the
    decorated coroutine function under that object. The returned decorator
    can also be used in ``async with`` statements.

    Given a coroutine function, decorates it directly: calls are serialized
    by a :class:`Mutex` created lazily per instance for methods (stored in
    the instance's ``_synchronized_lock`` attribute) and per function
    otherwise. The mutex is not reentrant, so a synchronized method must not
    call itself (or another synchronized method of the same instance).

    Example:
      >>> mutex = Mutex()
      >>> @synchronized(mutex)
      ... async def update(state):
      ...     ...
      >>> class Account:
      ...     @synchronized
      ...     async def withdraw(self, amount):
      ...         ...

    Raises:
      TypeError:
        if the decorated object is not a coroutine function, or (on the
        first call) if the instance defines ``__slots__`` without a
        ``_synchronized_lock`` slot.
    """

    if hasattr(wrapped, "__aenter__") and hasattr(wrapped, "__aexit__"):
        return _Synchronizer(wrapped)

    if not iscoroutinefunction(wrapped):
        msg = f"a coroutine function was expected, got {wrapped!r}"
        raise TypeError(msg)

    return _synchronized_wrapper(wrapped)
