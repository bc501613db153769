#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from collections import deque
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ._notify import Notify
from ._utils import check_whole
from .lowlevel import CancellationToken, async_checkpoint

if TYPE_CHECKING:
    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

_T = TypeVar("_T")


class QueueEmpty(Exception):
    """..."""


class QueueFull(Exception):
    """..."""


class Queue(Generic[_T]):
    """
    A FIFO queue, unbounded or bounded by *maxsize*.

    :meth:`get` suspends while the queue is empty and :meth:`put` suspends
    while it is full; the ``*_nowait`` variants raise :exc:`QueueEmpty` and
    :exc:`QueueFull` instead. Every insertion wakes one pending getter and
    every removal wakes one pending putter.

    A woken task re-checks the queue in a loop, so an item taken by a
    non-waiting caller in the meantime only makes it wait again.
    """

    __slots__ = (
        "__weakref__",
        "_data",
        "_getters",
        "_maxsize",
        "_putters",
    )

    def __new__(cls, /, maxsize: int = 0) -> Self:
        """..."""

        maxsize = check_whole(maxsize, "maxsize")

        if maxsize < 0:
            maxsize = 0

        self = object.__new__(cls)

        self._init(maxsize)

        self._getters = Notify()
        self._putters = Notify()

        self._maxsize = maxsize

        return self

    def __getnewargs__(self, /) -> tuple[Any, ...]:
        """
        Returns arguments that can be used to create new instances with the
        same initial values.

        The current state does not affect the arguments.

        Example:
            >>> orig = Queue(4)
            >>> copy = Queue(*orig.__getnewargs__())
            >>> copy.maxsize
            4
        """

        maxsize = self._maxsize

        if not maxsize:
            return ()

        return (maxsize,)

    def __getstate__(self, /) -> None:
        """
        Disables the use of internal state for pickling and copying.
        """

        return None

    def __copy__(self, /) -> Self:
        """..."""

        return self.__class__(*self.__getnewargs__())

    def __repr__(self, /) -> str:
        """..."""

        cls = self.__class__
        cls_repr = f"{cls.__module__}.{cls.__qualname__}"

        maxsize = self._maxsize

        if maxsize > 0:
            object_repr = f"{cls_repr}({maxsize!r})"
        else:
            object_repr = f"{cls_repr}()"

        length = len(self._data)

        if length >= maxsize > 0:
            extra = f"length={length}, putting={self._putters.waiting}"
        elif length > 0:
            extra = f"length={length}"
        else:
            extra = f"length={length}, getting={self._getters.waiting}"

        return f"<{object_repr} at {id(self):#x} [{extra}]>"

    def __bool__(self, /) -> bool:
        """
        Returns :data:`True` if the queue is not empty.

        Example:
            >>> items = Queue()  # queue is empty
            >>> bool(items)
            False
            >>> items.put_nowait('spam')  # queue is not empty
            >>> bool(items)
            True
        """

        return bool(self._data)

    def __len__(self) -> int:
        """
        Returns the number of items in the queue.
        """

        return len(self._data)

    async def put(
        self,
        /,
        item: _T,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> None:
        """
        Put *item* into the queue, suspending while it is full.

        Raises:
          WaitCancelled:
            if *cancel_token* has fired (before the call or while waiting).
        """

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        if not self.full() and not self._putters.waiting:
            await async_checkpoint()
        else:
            await self._putters.notified(cancel_token=cancel_token)

        while self.full():
            await self._putters.notified(cancel_token=cancel_token)

        self._put(item)
        self._getters.notify()

    def put_nowait(self, /, item: _T) -> None:
        """
        Put *item* into the queue without suspension.

        Raises:
          QueueFull:
            if the queue is full.
        """

        if self.full():
            raise QueueFull

        self._put(item)
        self._getters.notify()

    async def get(
        self,
        /,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> _T:
        """
        Remove and return the next item, suspending while the queue is empty.

        Raises:
          WaitCancelled:
            if *cancel_token* has fired (before the call or while waiting).
        """

        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        if self._data and not self._getters.waiting:
            await async_checkpoint()
        else:
            await self._getters.notified(cancel_token=cancel_token)

        while not self._data:
            await self._getters.notified(cancel_token=cancel_token)

        item = self._get()
        self._putters.notify()

        return item

    def get_nowait(self, /) -> _T:
        """
        Remove and return the next item without suspension.

        Raises:
          QueueEmpty:
            if the queue is empty.
        """

        if not self._data:
            raise QueueEmpty

        item = self._get()
        self._putters.notify()

        return item

    def qsize(self, /) -> int:
        return len(self._data)

    def empty(self, /) -> bool:
        return not self._data

    def full(self, /) -> bool:
        """
        Returns :data:`True` if the queue is bounded and holds *maxsize*
        items.
        """

        return len(self._data) >= self._maxsize > 0

    def _init(self, /, maxsize: int) -> None:
        self._data = deque()

    def _put(self, /, item: _T) -> None:
        self._data.append(item)

    def _get(self, /) -> _T:
        return self._data.popleft()

    @property
    def maxsize(self, /) -> int:
        """
        The maximum number of items which the queue can hold (``0`` if
        unbounded).
        """

        return self._maxsize

    @property
    def putting(self, /) -> int:
        """
        The current number of tasks waiting to put.
        """

        return self._putters.waiting

    @property
    def getting(self, /) -> int:
        """
        The current number of tasks waiting to get.
        """

        return self._getters.waiting


class Stack(Queue[_T]):
    """
    A LIFO variant of :class:`Queue`: the most recently pushed item is
    removed first.

    Example:
      >>> stack = Stack()
      >>> for item in (1, 2, 3):
      ...     stack.push(item)
      >>> [stack.pop_nowait() for _ in range(3)]
      [3, 2, 1]
    """

    __slots__ = ()

    def push(self, /, item: _T) -> None:
        """
        Push *item* onto the stack without suspension.

        Raises:
          QueueFull:
            if the stack is bounded and full.
        """

        self.put_nowait(item)

    async def pop(
        self,
        /,
        *,
        cancel_token: CancellationToken | None = None,
    ) -> _T:
        """
        Remove and return the top item, suspending while the stack is empty.
        """

        return await self.get(cancel_token=cancel_token)

    def pop_nowait(self, /) -> _T:
        """..."""

        return self.get_nowait()

    def _get(self, /) -> _T:
        return self._data.pop()

    @property
    def size(self, /) -> int:
        """
        The current number of items on the stack.
        """

        return len(self._data)

    @property
    def locked(self, /) -> bool:
        """
        :data:`True` if any task is waiting to pop.
        """

        return self._getters.waiting > 0
