#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

"""
Cooperative concurrency primitives for asyncio

This package provides synchronization and communication primitives for tasks
of one asyncio event loop:

* :class:`Notify`, the FIFO waiter registry that everything else is built on
* :class:`Semaphore` and :class:`Mutex`, with scoped-acquisition guards
* :class:`Lock` and :class:`RwLock`, which guard a value instead of a section
* :class:`Condition`, :class:`Barrier`, :class:`WaitGroup` and :class:`Event`
* :class:`Queue` and :class:`Stack`

Every waiting operation is strictly FIFO-fair and accepts a
:class:`CancellationToken` to abandon the wait with :exc:`WaitCancelled`.

The internal bookkeeping of the primitives is not protected by any lock: it
is valid only because all tasks run in one event loop thread. Do not share
the primitives between threads or event loops.
"""

from __future__ import annotations

__author__: str = "Ilya Egorov <0x42005e1f@gmail.com>"
__version__: str = "0.1.0"

from . import (  # noqa: F401
    lowlevel,
    meta,
)
from ._barrier import (
    Barrier as Barrier,
)
from ._condition import (
    Condition as Condition,
)
from ._decorator import (
    synchronized as synchronized,
)
from ._event import (
    Event as Event,
)
from ._lock import (
    Lock as Lock,
)
from ._mutex import (
    Mutex as Mutex,
    MutexGuard as MutexGuard,
)
from ._notify import (
    Notify as Notify,
)
from ._queue import (
    Queue as Queue,
    QueueEmpty as QueueEmpty,
    QueueFull as QueueFull,
    Stack as Stack,
)
from ._rwlock import (
    RwLock as RwLock,
)
from ._semaphore import (
    Semaphore as Semaphore,
    SemaphoreGuard as SemaphoreGuard,
)
from ._wait_group import (
    WaitGroup as WaitGroup,
)
from .lowlevel import (
    CancellationToken as CancellationToken,
    WaitCancelled as WaitCancelled,
)

__all__ = (
    "Barrier",
    "CancellationToken",
    "Condition",
    "Event",
    "Lock",
    "Mutex",
    "MutexGuard",
    "Notify",
    "Queue",
    "QueueEmpty",
    "QueueFull",
    "RwLock",
    "Semaphore",
    "SemaphoreGuard",
    "Stack",
    "WaitCancelled",
    "WaitGroup",
    "synchronized",
)

# modify __module__ for shorter repr() and better pickle support
meta.publish(globals())
