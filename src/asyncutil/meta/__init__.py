#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2025 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: ISC

"""
This package implements a few metaprogramming helpers that are used for the
library's own needs: sentinel markers for optional arguments and the helper
that makes public objects look as if they were defined directly in their
package.
"""

from ._exports import (
    publish as publish,
)
from ._markers import (
    DEFAULT as DEFAULT,
    DefaultType as DefaultType,
    SingletonEnum as SingletonEnum,
)

__all__ = (
    "DEFAULT",
    "DefaultType",
    "SingletonEnum",
    "publish",
)

publish(globals())
