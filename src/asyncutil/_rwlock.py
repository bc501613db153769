#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from typing import TYPE_CHECKING, Generic, TypeVar

from ._mutex import Mutex
from ._notify import Notify
from ._utils import call_maybe_async
from .lowlevel import CancellationToken

if sys.version_info >= (3, 9):
    from collections.abc import Awaitable, Callable
else:
    from typing import Awaitable, Callable

if TYPE_CHECKING:
    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

_T = TypeVar("_T")
_R = TypeVar("_R")


class RwLock(Generic[_T]):
    """
    A reader-writer lock that guards one value.

    Any number of readers may run :meth:`rlock` callbacks at the same time,
    while a :meth:`lock` (writer) callback runs alone.

    It is composed of two mutexes. The write gate orders writers among
    themselves and announces a writer to readers: a reader that finds the gate
    held or contended queues on it (taking and immediately releasing it), so
    new readers line up behind every writer that arrived before them. The
    read gate is held by a reader only while it registers itself, and by a
    writer for the whole write, after which the writer waits for the readers
    that entered before it to drain.

    The resulting policy is fair FIFO at the write gate: writers cannot be
    starved by a stream of new readers, and readers cannot be starved by a
    stream of writers.
    """

    __slots__ = (
        "__weakref__",
        "_drained",
        "_read_gate",
        "_readers",
        "_value",
        "_write_gate",
    )

    def __new__(cls, value: _T, /) -> Self:
        """..."""

        self = object.__new__(cls)

        self._drained = Notify()
        self._read_gate = Mutex()
        self._readers = 0
        self._value = value
        self._write_gate = Mutex()

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

        if self._write_gate.locked:
            extra = f"writing, waiting={self._write_gate.waiting}"
        elif self._readers:
            extra = f"reading, readers={self._readers}"
        else:
            extra = "unlocked"

        return f"<{cls_repr} object at {id(self):#x} [{extra}]>"

    async def lock(
        self,
        fn: Callable[[_T], Awaitable[_R] | _R],
        /,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> _R:
        """
        Call *fn* with the guarded value while holding exclusive access.

        All other readers and writers are blocked until *fn* completes.

        Raises:
          WaitCancelled:
            if *cancel_token* fires before access is granted.
        """

        with await self._write_gate.acquire(cancel_token=cancel_token):
            with await self._read_gate.acquire(cancel_token=cancel_token):
                while self._readers:
                    await self._drained.notified(cancel_token=cancel_token)

                return await call_maybe_async(fn, self._value)

    async def rlock(
        self,
        fn: Callable[[_T], Awaitable[_R] | _R],
        /,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> _R:
        """
        Call *fn* with the guarded value while holding shared access.

        Other readers may run at the same time; writers are blocked until *fn*
        completes.

        Raises:
          WaitCancelled:
            if *cancel_token* fires before access is granted.
        """

        if self._write_gate.locked or self._write_gate.waiting:
            guard = await self._write_gate.acquire(cancel_token=cancel_token)
            guard.release()

        with await self._read_gate.acquire(cancel_token=cancel_token):
            self._readers += 1

        try:
            return await call_maybe_async(fn, self._value)
        finally:
            self._readers -= 1

            if not self._readers:
                self._drained.notify_all()

    @property
    def readers(self, /) -> int:
        """
        The current number of readers inside :meth:`rlock` callbacks.
        """

        return self._readers

    @property
    def writing(self, /) -> bool:
        """
        :data:`True` if a writer holds the write gate (it may still be
        waiting for earlier readers to drain).
        """

        return self._write_gate.locked

    @property
    def locked(self, /) -> bool:
        """
        :data:`True` if there is a writer or any active reader.
        """

        return self._write_gate.locked or self._readers > 0
