#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Final, Literal, NoReturn, final

from ._checkpoints import async_checkpoint
from ._libraries import current_asyncio_loop

if TYPE_CHECKING:
    from asyncio import Future

    if sys.version_info >= (3, 9):
        from collections.abc import Generator
    else:
        from typing import Generator


class AsyncEvent(ABC):
    """
    A one-shot deferred completion handle.

    An event starts unset and is settled exactly once: either set (the waiter
    proceeds normally) or cancelled (the waiter proceeds with a failure).
    Both :meth:`set` and :meth:`cancel` report whether the call was the one
    that settled the event, which is what makes notification and cancellation
    safe to race on the same waiter.

    Awaiting an event evaluates to :data:`True` if it was set and to
    :data:`False` if it was cancelled.
    """

    __slots__ = ()

    @abstractmethod
    def __await__(self, /) -> Generator[Any, Any, bool]:
        """..."""

        raise NotImplementedError

    def __bool__(self, /) -> bool:
        """..."""

        return self.is_set()

    @abstractmethod
    def set(self, /) -> bool:
        """..."""

        raise NotImplementedError

    @abstractmethod
    def cancel(self, /) -> bool:
        """..."""

        raise NotImplementedError

    @abstractmethod
    def is_set(self, /) -> bool:
        """..."""

        raise NotImplementedError

    @abstractmethod
    def cancelled(self, /) -> bool:
        """..."""

        raise NotImplementedError


@final
class SetEvent(AsyncEvent):
    __slots__ = ()

    def __new__(cls, /) -> SetEvent:
        return SET_EVENT

    def __init_subclass__(cls, /, **kwargs: Any) -> NoReturn:
        msg = "type 'SetEvent' is not an acceptable base type"
        raise TypeError(msg)

    def __reduce__(self, /) -> str:
        return "SET_EVENT"

    def __repr__(self, /) -> str:
        return f"{self.__class__.__module__}.SET_EVENT"

    def __await__(self, /) -> Generator[Any, Any, Literal[True]]:
        yield from async_checkpoint().__await__()

        return True

    def set(self, /) -> Literal[False]:
        return False

    def cancel(self, /) -> Literal[False]:
        return False

    def is_set(self, /) -> Literal[True]:
        return True

    def cancelled(self, /) -> Literal[False]:
        return False


@final
class CancelledEvent(AsyncEvent):
    __slots__ = ()

    def __new__(cls, /) -> CancelledEvent:
        return CANCELLED_EVENT

    def __init_subclass__(cls, /, **kwargs: Any) -> NoReturn:
        msg = "type 'CancelledEvent' is not an acceptable base type"
        raise TypeError(msg)

    def __reduce__(self, /) -> str:
        return "CANCELLED_EVENT"

    def __repr__(self, /) -> str:
        return f"{self.__class__.__module__}.CANCELLED_EVENT"

    def __await__(self, /) -> Generator[Any, Any, Literal[False]]:
        yield from async_checkpoint().__await__()

        return False

    def set(self, /) -> Literal[False]:
        return False

    def cancel(self, /) -> Literal[False]:
        return False

    def is_set(self, /) -> Literal[False]:
        return False

    def cancelled(self, /) -> Literal[True]:
        return True


SET_EVENT: Final[SetEvent] = object.__new__(SetEvent)
CANCELLED_EVENT: Final[CancelledEvent] = object.__new__(CancelledEvent)


class _AsyncEventImpl(AsyncEvent):
    __slots__ = (
        "_future",
        "_is_cancelled",
        "_is_pending",
        "_is_set",
        "force",
    )

    _future: Future[bool] | None
    force: bool

    def __init__(self, /, force: bool = False) -> None:
        self._future = None
        self._is_cancelled = False
        self._is_pending = True
        self._is_set = False

        self.force = force

    def __reduce__(self, /) -> NoReturn:
        msg = f"cannot reduce {self!r}"
        raise TypeError(msg)

    def __repr__(self, /) -> str:
        cls_repr = f"{AsyncEvent.__module__}.AsyncEvent"

        if self._is_set:
            state = "set"
        elif self._is_cancelled:
            state = "cancelled"
        else:
            state = "unset"

        return f"<{cls_repr} object at {id(self):#x}: {state}>"

    def __await__(self, /) -> Generator[Any, Any, bool]:
        if self._is_set:
            yield from async_checkpoint(force=self.force).__await__()

            return True

        if self._is_cancelled:
            yield from async_checkpoint(force=self.force).__await__()

            return False

        if not self._is_pending:
            msg = "this event is already in use"
            raise RuntimeError(msg)

        loop = current_asyncio_loop()  # may raise, so no state is changed yet

        self._is_pending = False
        self._future = future = loop.create_future()

        try:
            return (yield from future.__await__())
        finally:
            # Neither side has settled the event, so the task itself was
            # cancelled while waiting.
            if not self._is_set and not self._is_cancelled:
                self._is_cancelled = True

            self._future = None

    def _wake(self, /, value: bool) -> None:
        future = self._future

        if future is not None and not future.done():
            future.set_result(value)

    def set(self, /) -> bool:
        if self._is_set or self._is_cancelled:
            return False

        self._is_set = True
        self._wake(True)

        return True

    def cancel(self, /) -> bool:
        if self._is_set or self._is_cancelled:
            return False

        self._is_cancelled = True
        self._wake(False)

        return True

    def is_set(self, /) -> bool:
        return self._is_set

    def cancelled(self, /) -> bool:
        return self._is_cancelled


def create_async_event(*, force: bool = False) -> AsyncEvent:
    """
    Create a new unset :class:`AsyncEvent`.

    The event is bound to the loop that awaits it. If *force* is
    :data:`True`, awaiting an already settled event always yields to the
    event loop.
    """

    return _AsyncEventImpl(force)
