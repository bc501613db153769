#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import asyncio
import pickle

from copy import copy

import pytest

import asyncutil


class TestMutex:
    factory = asyncutil.Mutex

    def test_base(self, /):
        mutex = self.factory()

        assert not mutex.locked
        assert mutex.waiting == 0

        pkg = "asyncutil"
        assert repr(mutex) == f"<{pkg}.Mutex() at {id(mutex):#x} [unlocked]>"

    def test_copying(self, /):
        async def main():
            mutex = self.factory()

            await mutex.acquire()

            for clone in (copy(mutex), pickle.loads(pickle.dumps(mutex))):
                assert isinstance(clone, asyncutil.Mutex)
                assert not clone.locked  # the state is not copied

        asyncio.run(main())

    def test_release_unlocked(self, /):
        with pytest.raises(RuntimeError, match="release unlocked lock"):
            self.factory().release()

    def test_guard(self, /):
        async def main():
            mutex = self.factory()

            guard = await mutex.acquire()

            assert isinstance(guard, asyncutil.MutexGuard)
            assert mutex.locked

            pkg = "asyncutil"
            assert repr(mutex) == (
                f"<{pkg}.Mutex() at {id(mutex):#x} [locked, waiting=0]>"
            )

            assert guard.release()
            assert not guard.release()  # a no-op, not a RuntimeError

            assert not mutex.locked

            with await mutex.acquire():
                assert mutex.locked

            assert not mutex.locked

        asyncio.run(main())

    def test_context_manager(self, /):
        async def main():
            mutex = self.factory()

            async with mutex:
                assert mutex.locked

            assert not mutex.locked

        asyncio.run(main())

    def test_exclusion(self, /, checkpoints):
        async def main():
            mutex = self.factory()
            counter = 0

            async def increment():
                nonlocal counter

                for _ in range(100):
                    with await mutex.acquire():
                        value = counter

                        await asyncio.sleep(0)

                        counter = value + 1

            await asyncio.gather(*(increment() for _ in range(10)))

            assert counter == 1000
            assert not mutex.locked

        asyncio.run(main())

    def test_fifo(self, /, settle):
        async def main():
            mutex = self.factory()
            order = []

            async def waiter(i):
                async with mutex:
                    order.append(i)

            async with mutex:
                tasks = [asyncio.create_task(waiter(i)) for i in range(5)]

                await settle()

                assert mutex.waiting == 5

            await asyncio.gather(*tasks)

            assert order == [0, 1, 2, 3, 4]

        asyncio.run(main())

    def test_lock(self, /):
        async def main():
            mutex = self.factory()

            async def locked():
                await asyncio.sleep(0)

                return mutex.locked

            assert await mutex.lock(locked)
            assert not mutex.locked

        asyncio.run(main())

    def test_cancellation(self, /, settle):
        async def main():
            mutex = self.factory()
            fired = asyncutil.CancellationToken()
            fired.cancel()

            with pytest.raises(asyncutil.WaitCancelled):
                await mutex.acquire(cancel_token=fired)

            assert not mutex.locked

            token = asyncutil.CancellationToken()

            async with mutex:
                task1 = asyncio.create_task(mutex.acquire(cancel_token=token))
                task2 = asyncio.create_task(mutex.acquire())

                await settle()

                token.cancel()

                with pytest.raises(asyncutil.WaitCancelled):
                    await task1

                assert mutex.waiting == 1

            guard = await task2

            assert mutex.locked

            guard.release()

            assert not mutex.locked

        asyncio.run(main())
