#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import asyncio

from collections import defaultdict
from functools import partial
from itertools import chain
from pathlib import Path

import pytest

import asyncutil.lowlevel


async def _settle(iterations=20):
    # let every ready task run until it suspends on something else
    for _ in range(iterations):
        await asyncio.sleep(0)


@pytest.fixture
def settle():
    return _settle


@pytest.fixture(autouse=True)
def _restore_checkpoints():
    enabled = asyncutil.lowlevel.async_checkpoints_enabled()

    try:
        yield
    finally:
        if enabled:
            asyncutil.lowlevel.enable_checkpoints()
        else:
            asyncutil.lowlevel.disable_checkpoints()


@pytest.fixture(params=[False, True], ids=["plain", "checkpoints"])
def checkpoints(request):
    if request.param:
        asyncutil.lowlevel.enable_checkpoints()
    else:
        asyncutil.lowlevel.disable_checkpoints()

    return request.param


def pytest_collection_modifyitems(config, items):
    directory = Path(__file__).parent
    ordered_tests = defaultdict(
        partial(defaultdict, list),
        {
            "asyncutil.test_markers": defaultdict(list),
            "asyncutil.lowlevel.test_checkpoints": defaultdict(list),
            "asyncutil.lowlevel.test_events": defaultdict(list),
            "asyncutil.lowlevel.test_cancellation": defaultdict(list),
            "asyncutil.test_notify": defaultdict(list),
        },
    )

    for item in items:
        module_name = ".".join(item.path.relative_to(directory).parts)[:-3]
        ordered_tests[module_name][item.obj].append(item)

    items[:] = chain.from_iterable(
        chain.from_iterable(mapping.values())
        for mapping in ordered_tests.values()
    )
