#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from typing import TYPE_CHECKING

from ._notify import Notify
from ._utils import check_whole
from .lowlevel import CancellationToken, async_checkpoint

if TYPE_CHECKING:
    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self


class WaitGroup:
    """
    A counter of outstanding tasks that releases its waiters at zero.

    Example:
      >>> async def main(group, jobs):
      ...     for job in jobs:
      ...         group.add()
      ...         asyncio.create_task(run(job, group))  # calls group.done()
      ...     await group.wait()
    """

    __slots__ = (
        "__weakref__",
        "_counter",
        "_waiters",
    )

    def __new__(cls, /) -> Self:
        """..."""

        self = object.__new__(cls)

        self._counter = 0
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

        extra = f"counter={self._counter}, waiting={self._waiters.waiting}"

        return f"<{cls_repr}() at {id(self):#x} [{extra}]>"

    def add(self, /, delta: int = 1) -> None:
        """
        Add *delta* (which may be negative) to the counter.

        If the counter becomes exactly zero, all current waiters are
        released.

        Raises:
          ValueError:
            if *delta* is not a whole number.
          RuntimeError:
            if the counter would become negative (it is left unchanged).
        """

        delta = check_whole(delta, "delta")

        counter = self._counter + delta

        if counter < 0:
            msg = "the counter cannot become negative"
            raise RuntimeError(msg)

        self._counter = counter

        if not counter:
            self._waiters.notify_all()

    def done(self, /) -> None:
        """
        Decrement the counter by one.
        """

        self.add(-1)

    async def wait(
        self,
        /,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> None:
        """
        Wait until the counter is zero.

        Returns at once (apart from a checkpoint) if it is already zero.

        Raises:
          WaitCancelled:
            if *cancel_token* has fired (before the call or while waiting).
        """

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        if not self._counter:
            await async_checkpoint()

            return

        await self._waiters.notified(cancel_token=cancel_token)

    @property
    def counter(self, /) -> int:
        return self._counter

    @property
    def waiting(self, /) -> int:
        """
        The current number of tasks waiting for the counter to reach zero.
        """

        return self._waiters.waiting
