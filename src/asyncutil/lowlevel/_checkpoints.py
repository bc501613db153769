#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import os

from asyncio import sleep
from typing import Final

_ASYNC_CHECKPOINTS_ENABLED_BY_DEFAULT: Final[bool] = bool(
    os.getenv(
        "ASYNCUTIL_ASYNC_CHECKPOINTS",
        "",
    )
)

_async_checkpoints_enabled: bool = _ASYNC_CHECKPOINTS_ENABLED_BY_DEFAULT


def enable_checkpoints() -> None:
    """
    Make :func:`async_checkpoint` yield to the event loop.

    Overrides the ``ASYNCUTIL_ASYNC_CHECKPOINTS`` environment variable.
    """

    global _async_checkpoints_enabled

    _async_checkpoints_enabled = True


def disable_checkpoints() -> None:
    """
    Make :func:`async_checkpoint` a no-op unless forced.

    Overrides the ``ASYNCUTIL_ASYNC_CHECKPOINTS`` environment variable.
    """

    global _async_checkpoints_enabled

    _async_checkpoints_enabled = False


def async_checkpoints_enabled() -> bool:
    return _async_checkpoints_enabled


async def async_checkpoint(*, force: bool = False) -> None:
    """
    Yield control to the event loop once if checkpoints are enabled.

    Primitives call it on their non-blocking fast paths, so that a task that
    acquires an uncontended primitive in a loop still lets other tasks run.
    Disabled by default to keep fast paths free of suspension points.
    """

    if force or _async_checkpoints_enabled:
        await sleep(0)
