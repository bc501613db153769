#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from typing import TYPE_CHECKING, Any

from ._notify import Notify
from ._utils import check_positive_whole
from .lowlevel import CancellationToken, async_checkpoint

if TYPE_CHECKING:
    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self


class Barrier:
    """
    A cyclic rendezvous point for a fixed number of tasks.

    Each :meth:`wait` call counts as one arrival. The arrival that brings the
    count to *size* trips the barrier: every task of the current generation
    is released at once, and the barrier resets for the next generation.

    Arrivals are counted on entry, so a waiter that is cancelled still
    contributes to tripping the barrier.

    Example:
      >>> async def phase(barrier, results, i):
      ...     results.append(i)
      ...     await barrier.wait()  # all parties have appended here
    """

    __slots__ = (
        "__weakref__",
        "_remaining",
        "_size",
        "_waiters",
    )

    def __new__(cls, /, size: int) -> Self:
        """..."""

        size = check_positive_whole(size, "size")

        self = object.__new__(cls)

        self._remaining = size
        self._size = size
        self._waiters = Notify()

        return self

    def __getnewargs__(self, /) -> tuple[Any, ...]:
        """
        Returns arguments that can be used to create new instances with the
        same initial values.

        The current state does not affect the arguments.

        Example:
            >>> orig = Barrier(4)
            >>> copy = Barrier(*orig.__getnewargs__())
            >>> copy.size
            4
        """

        return (self._size,)

    def __getstate__(self, /) -> None:
        """
        Disables the use of internal state for pickling and copying.
        """

        return None

    def __copy__(self, /) -> Self:
        """..."""

        return self.__class__(self._size)

    def __repr__(self, /) -> str:
        """..."""

        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        extra = (
            f"remaining={self._remaining}, waiting={self._waiters.waiting}"
        )

        return f"<{cls_repr}({self._size!r}) at {id(self):#x} [{extra}]>"

    async def wait(
        self,
        /,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> int:
        """
        Arrive at the barrier and wait until all parties have arrived.

        Returns the arrival index within the current generation: ``0`` for
        the first arrival and ``size - 1`` for the one that tripped the
        barrier.

        Raises:
          WaitCancelled:
            if *cancel_token* has fired (before the call or while waiting).
        """

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        index = self._size - self._remaining

        self._remaining -= 1

        if not self._remaining:
            self._remaining = self._size
            self._waiters.notify_all()

            await async_checkpoint()

            return index

        await self._waiters.notified(cancel_token=cancel_token)

        return index

    @property
    def size(self, /) -> int:
        """
        The number of parties required to trip the barrier.
        """

        return self._size

    @property
    def remaining(self, /) -> int:
        """
        The number of arrivals still missing in the current generation.
        """

        return self._remaining

    @property
    def waiting(self, /) -> int:
        return self._waiters.waiting
