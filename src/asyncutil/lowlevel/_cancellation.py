#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from logging import Logger, getLogger
from typing import TYPE_CHECKING, Any, Final

from ._libraries import current_asyncio_loop

if sys.version_info >= (3, 9):
    from collections.abc import Callable
else:
    from typing import Callable

if TYPE_CHECKING:
    from asyncio import TimerHandle

    from ._events import AsyncEvent

LOGGER: Final[Logger] = getLogger(__name__)


class WaitCancelled(Exception):
    """
    Raised by a suspending operation whose cancellation token has fired.

    It is not a subclass of :exc:`asyncio.CancelledError`: abandoning a wait
    is a recoverable outcome for the caller and does not mean that the task
    itself is being cancelled.
    """

    def __init__(self, /, reason: object = None) -> None:
        super().__init__(reason)

        self.reason = reason


class CancellationToken:
    """
    An object signaling that pending waits should be abandoned.

    A token fires once. Operations that accept ``cancel_token=`` check it
    before registering a waiter (an already fired token short-circuits) and
    subscribe to it while suspended (a token that fires later wakes them up
    with :exc:`WaitCancelled`).

    Example:
      >>> token = CancellationToken()
      >>> token.cancelled
      False
      >>> token.cancel('stop')
      True
      >>> token.cancel('again')
      False
      >>> token.reason
      'stop'
    """

    __slots__ = (
        "__weakref__",
        "_callbacks",
        "_cancelled",
        "_reason",
    )

    def __init__(self, /) -> None:
        self._callbacks: list[Callable[[], Any]] = []
        self._cancelled = False
        self._reason = None

    def __repr__(self, /) -> str:
        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        if self._cancelled:
            extra = f"cancelled, reason={self._reason!r}"
        else:
            extra = f"pending, callbacks={len(self._callbacks)}"

        return f"<{cls_repr}() at {id(self):#x} [{extra}]>"

    def __bool__(self, /) -> bool:
        """
        Returns :data:`True` if the token has fired.
        """

        return self._cancelled

    def cancel(self, /, reason: object = None) -> bool:
        """
        Fire the token.

        Subscribed callbacks are invoked synchronously in subscription order.
        An exception raised by a callback is logged and does not prevent the
        remaining callbacks from running.

        Returns :data:`True` only for the call that actually fired the token.
        """

        if self._cancelled:
            return False

        self._cancelled = True
        self._reason = reason

        callbacks, self._callbacks = self._callbacks, []

        for callback in callbacks:
            try:
                callback()
            except Exception:
                LOGGER.exception(
                    "exception calling cancellation callback %r for %r",
                    callback,
                    self,
                )

        return True

    def cancel_after(self, /, delay: float) -> TimerHandle:
        """
        Schedule :meth:`cancel` on the running event loop after *delay*
        seconds.
        """

        return current_asyncio_loop().call_later(delay, self.cancel, "timeout")

    def add_callback(self, /, callback: Callable[[], Any]) -> None:
        """
        Subscribe *callback* to the token. If the token has already fired,
        *callback* is invoked immediately.
        """

        if self._cancelled:
            callback()
        else:
            self._callbacks.append(callback)

    def remove_callback(self, /, callback: Callable[[], Any]) -> bool:
        try:
            self._callbacks.remove(callback)
        except ValueError:
            return False
        else:
            return True

    def raise_if_cancelled(self, /) -> None:
        if self._cancelled:
            raise WaitCancelled(self._reason)

    @property
    def cancelled(self, /) -> bool:
        return self._cancelled

    @property
    def reason(self, /) -> object:
        return self._reason


async def wait_event(
    event: AsyncEvent,
    /,
    cancel_token: CancellationToken | None = None,
    on_cancel: Callable[[], Any] | None = None,
) -> bool:
    """
    Await *event* while subscribed to *cancel_token*.

    When the token fires, *event* is cancelled and, if that actually settled
    it, *on_cancel* is called right away, so that the waiter can be removed
    from its waiter list before any other task observes it.

    Returns :data:`True` if the event was set and :data:`False` if it was
    cancelled by the token.
    """

    if cancel_token is None:
        return await event

    def callback() -> None:
        if event.cancel() and on_cancel is not None:
            on_cancel()

    cancel_token.add_callback(callback)

    try:
        return await event
    finally:
        cancel_token.remove_callback(callback)
