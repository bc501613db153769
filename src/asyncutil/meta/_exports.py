#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

from __future__ import annotations

import sys

from types import FunctionType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    if sys.version_info >= (3, 9):  # PEP 585
        from collections.abc import MutableMapping
    else:
        from typing import MutableMapping


def publish(namespace: MutableMapping[str, object], /) -> None:
    """
    Make the names listed in ``__all__`` of *namespace* look as if they were
    defined directly in its package.

    Classes and functions that come from private modules of the package
    (those whose names start with the underscore character) get the package
    name as their ``__module__``: ``asyncutil._semaphore.Semaphore`` reads as
    ``asyncutil.Semaphore`` in reprs, tracebacks and pickles. Re-exports from
    public subpackages keep their own module.

    Typically, the usage is as follows: ``publish(globals())`` at the end of
    ``__init__.py``.
    """

    package_name = namespace["__name__"]
    private_prefix = f"{package_name}._"

    for name in namespace["__all__"]:
        value = namespace[name]

        if not isinstance(value, (type, FunctionType)):
            continue  # constants are covered by their types

        if value.__module__.startswith(private_prefix):
            value.__module__ = package_name
