#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from typing import TYPE_CHECKING, Literal

from ._notify import Notify
from .lowlevel import CancellationToken, async_checkpoint

if TYPE_CHECKING:
    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self


class Event:
    """
    A resettable flag that tasks can wait for.

    Setting the flag wakes every waiter; waiting on a set flag returns
    without suspension (apart from a checkpoint).
    """

    __slots__ = (
        "__weakref__",
        "_is_set",
        "_waiters",
    )

    def __new__(cls, /) -> Self:
        """..."""

        self = object.__new__(cls)

        self._is_set = False
        self._waiters = Notify()

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

        if self._is_set:
            extra = "set"
        else:
            extra = f"unset, waiting={self._waiters.waiting}"

        return f"<{cls_repr}() at {id(self):#x} [{extra}]>"

    def __bool__(self, /) -> bool:
        """
        Returns :data:`True` if the event is set.
        """

        return self._is_set

    def set(self, /) -> None:
        """..."""

        if not self._is_set:
            self._is_set = True
            self._waiters.notify_all()

    def clear(self, /) -> None:
        """..."""

        self._is_set = False

    def is_set(self, /) -> bool:
        return self._is_set

    async def wait(
        self,
        /,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> Literal[True]:
        """
        Wait until the event is set.

        Raises:
          WaitCancelled:
            if *cancel_token* has fired (before the call or while waiting).
        """

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        if self._is_set:
            await async_checkpoint()
        else:
            await self._waiters.notified(cancel_token=cancel_token)

        return True

    @property
    def waiting(self, /) -> int:
        return self._waiters.waiting
