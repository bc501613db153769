#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

"""
Low-level building blocks of the package: one-shot events that serve as
deferred completion handles, cancellation tokens, checkpoints and runtime
detection. The public primitives are composed of these.
"""

from ._cancellation import (
    CancellationToken as CancellationToken,
    WaitCancelled as WaitCancelled,
    wait_event as wait_event,
)
from ._checkpoints import (
    async_checkpoint as async_checkpoint,
    async_checkpoints_enabled as async_checkpoints_enabled,
    disable_checkpoints as disable_checkpoints,
    enable_checkpoints as enable_checkpoints,
)
from ._events import (
    CANCELLED_EVENT as CANCELLED_EVENT,
    SET_EVENT as SET_EVENT,
    AsyncEvent as AsyncEvent,
    CancelledEvent as CancelledEvent,
    SetEvent as SetEvent,
    create_async_event as create_async_event,
)
from ._libraries import (
    current_asyncio_loop as current_asyncio_loop,
)
from ..meta import publish

__all__ = (
    "CANCELLED_EVENT",
    "SET_EVENT",
    "AsyncEvent",
    "CancellationToken",
    "CancelledEvent",
    "SetEvent",
    "WaitCancelled",
    "async_checkpoint",
    "async_checkpoints_enabled",
    "create_async_event",
    "current_asyncio_loop",
    "disable_checkpoints",
    "enable_checkpoints",
    "wait_event",
)

# modify __module__ for shorter repr() and better pickle support
publish(globals())
