#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from collections import deque
from typing import TYPE_CHECKING, Any

from ._utils import check_positive_whole
from .lowlevel import (
    AsyncEvent,
    CancellationToken,
    WaitCancelled,
    create_async_event,
    wait_event,
)
from .meta import DEFAULT, DefaultType

if sys.version_info >= (3, 9):
    from collections.abc import Callable
else:
    from typing import Callable

if TYPE_CHECKING:
    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self


class Notify:
    """
    A FIFO registry of suspended waiters.

    Waiters register with :meth:`notified` and are woken in registration
    order by :meth:`notify` or all at once by :meth:`notify_all`. Each waiter
    is settled exactly once: either it is woken, or it is cancelled (by its
    cancellation token) and removed from the registry before any subsequent
    :meth:`notify` call can count it.

    A waiter woken by :meth:`notify` whose task is cancelled before it resumes
    has not consumed the wakeup, so the wakeup is handed to *on_lost*, which
    defaults to waking the next pending waiter. Wakeups from
    :meth:`notify_all` are broadcasts and are never handed on.

    Example:
      >>> notify = Notify()
      >>> notify.waiting
      0
      >>> notify.notify()  # no-op without waiters
      0
    """

    __slots__ = (
        "__weakref__",
        "_on_lost",
        "_waiters",
    )

    def __new__(
        cls,
        /,
        *,
        on_lost: Callable[[], Any] | DefaultType = DEFAULT,
    ) -> Self:
        """..."""

        self = object.__new__(cls)

        if on_lost is DEFAULT:
            self._on_lost = self.notify
        else:
            self._on_lost = on_lost

        self._waiters = deque()

        return self

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

        extra = f"waiting={len(self._waiters)}"

        return f"<{cls_repr}() at {id(self):#x} [{extra}]>"

    def _remove(self, /, token: list[Any]) -> None:
        try:
            self._waiters.remove(token)
        except ValueError:  # already popped by a notifier
            pass

    async def notified(
        self,
        /,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> None:
        """
        Suspend until woken by :meth:`notify` or :meth:`notify_all`.

        Raises:
          WaitCancelled:
            if *cancel_token* has fired (before the call or while waiting).
        """

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        self._waiters.append(
            token := [
                event := create_async_event(),
                False,  # woken by a broadcast
            ]
        )

        success = False

        try:
            success = await wait_event(
                event,
                cancel_token,
                lambda: self._remove(token),
            )
        finally:
            if not success:
                if not event.is_set():
                    self._remove(token)
                elif not token[1]:
                    self._on_lost()

        if not success:
            raise WaitCancelled(cancel_token.reason)

    def _wakeup(self, /, count: int, broadcast: bool) -> int:
        waiters = self._waiters
        notified = 0

        while waiters and notified < count:
            token = waiters.popleft()
            event: AsyncEvent = token[0]

            token[1] = broadcast

            if event.set():
                notified += 1

        return notified

    def notify(self, /, n: int = 1) -> int:
        """
        Wake the oldest *n* pending waiters (or all of them if fewer are
        pending).

        Returns the number of waiters that were actually woken.

        Raises:
          ValueError:
            if *n* is not a positive whole number.
        """

        return self._wakeup(check_positive_whole(n, "n"), False)

    def notify_all(self, /) -> int:
        """
        Wake every pending waiter.

        Returns the number of waiters that were actually woken.
        """

        return self._wakeup(len(self._waiters), True)

    @property
    def waiting(self, /) -> int:
        """
        The current number of pending waiters.

        Cancelled waiters are removed immediately, so it never counts them.
        """

        return len(self._waiters)

    @property
    def waiter_count(self, /) -> int:
        """
        An alias of :attr:`waiting`.
        """

        return len(self._waiters)
