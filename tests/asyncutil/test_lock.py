#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import asyncio

import pytest

import asyncutil


class TestLock:
    factory = asyncutil.Lock

    def test_base(self, /):
        lock = self.factory([])

        assert not lock.locked
        assert lock.waiting == 0

        pkg = "asyncutil"
        assert repr(lock) == (
            f"<{pkg}.Lock object at {id(lock):#x} [unlocked]>"
        )

        with pytest.raises(AttributeError):
            lock.value  # noqa: B018

    def test_lock(self, /):
        async def main():
            lock = self.factory({"count": 0})

            def increment(state):
                state["count"] += 1

                return state["count"]

            async def read(state):
                await asyncio.sleep(0)

                assert lock.locked

                return state["count"]

            assert await lock.lock(increment) == 1
            assert await lock.lock(read) == 1
            assert not lock.locked

        asyncio.run(main())

    def test_exclusion(self, /):
        async def main():
            lock = self.factory([0])

            async def increment(value):
                current = value[0]

                await asyncio.sleep(0)

                value[0] = current + 1

            await asyncio.gather(*(lock.lock(increment) for _ in range(50)))

            assert await lock.lock(lambda value: value[0]) == 50

        asyncio.run(main())

    def test_error(self, /):
        async def main():
            lock = self.factory(None)

            def fail(value):
                raise ZeroDivisionError

            with pytest.raises(ZeroDivisionError):
                await lock.lock(fail)

            assert not lock.locked

        asyncio.run(main())

    def test_cancellation(self, /, settle):
        async def main():
            lock = self.factory(None)
            token = asyncutil.CancellationToken()
            release = asyncio.Event()

            async def hold(value):
                await release.wait()

            holder = asyncio.create_task(lock.lock(hold))

            await settle()

            waiter = asyncio.create_task(
                lock.lock(lambda value: "never", cancel_token=token)
            )

            await settle()

            assert lock.waiting == 1

            token.cancel()

            with pytest.raises(asyncutil.WaitCancelled):
                await waiter

            assert lock.waiting == 0

            release.set()

            await holder

            assert not lock.locked

        asyncio.run(main())
