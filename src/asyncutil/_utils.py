#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import inspect

from operator import index


def check_whole(value: object, name: str, /) -> int:
    if isinstance(value, float) and value.is_integer():
        return int(value)

    try:
        return index(value)
    except TypeError:
        msg = f"{name} must be a whole number, got {value!r}"
        raise ValueError(msg) from None


def check_positive_whole(value: object, name: str, /) -> int:
    value = check_whole(value, name)

    if value <= 0:
        msg = f"{name} must be a positive whole number, got {value!r}"
        raise ValueError(msg)

    return value


async def call_maybe_async(func, /, *args, **kwargs):
    result = func(*args, **kwargs)

    if inspect.isawaitable(result):
        result = await result

    return result
