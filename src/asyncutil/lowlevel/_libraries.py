#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

from asyncio import AbstractEventLoop, get_running_loop

from sniffio import AsyncLibraryNotFoundError, current_async_library


def current_asyncio_loop() -> AbstractEventLoop:
    """
    Return the running asyncio event loop.

    All primitives of this package are bound to asyncio: they suspend on
    futures of the running loop. The current library is detected via
    :mod:`sniffio`, so that a call from another framework (for example, from a
    trio task) fails with a clear message instead of an obscure one.

    Raises:
      RuntimeError:
        if there is no running event loop or it is not an asyncio one.
    """

    try:
        library = current_async_library()
    except AsyncLibraryNotFoundError:
        msg = "no running event loop"
        raise RuntimeError(msg) from None

    if library != "asyncio":
        msg = f"asyncio is required, but the current library is {library!r}"
        raise RuntimeError(msg)

    return get_running_loop()
