#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import asyncio
import pickle

from copy import copy

import pytest

import asyncutil


class TestQueue:
    factory = asyncutil.Queue

    def test_base(self, /):
        queue = self.factory()

        assert queue.maxsize == 0
        assert queue.empty()
        assert not queue.full()
        assert not queue
        assert len(queue) == 0
        assert queue.qsize() == 0
        assert queue.getting == 0
        assert queue.putting == 0

        pkg = "asyncutil"
        assert repr(queue) == (
            f"<{pkg}.Queue() at {id(queue):#x} [length=0, getting=0]>"
        )

        queue = self.factory(2)
        queue.put_nowait(1)
        queue.put_nowait(2)

        assert queue.full()
        assert len(queue) == 2
        assert repr(queue) == (
            f"<{pkg}.Queue(2) at {id(queue):#x} [length=2, putting=0]>"
        )

    @pytest.mark.parametrize("maxsize", [0, -1, -10])
    def test_unbounded(self, /, maxsize):
        queue = self.factory(maxsize)

        assert queue.maxsize == 0

        for i in range(100):
            queue.put_nowait(i)

        assert not queue.full()

    def test_invalid_maxsize(self, /):
        with pytest.raises(ValueError):
            self.factory(1.5)

    def test_copying(self, /):
        queue = self.factory(3)
        queue.put_nowait("item")

        for clone in (copy(queue), pickle.loads(pickle.dumps(queue))):
            assert clone.maxsize == 3
            assert clone.empty()

    def test_order(self, /):
        async def main():
            queue = self.factory()

            for item in (1, 2, 3):
                await queue.put(item)

            assert [await queue.get() for _ in range(3)] == [1, 2, 3]

        asyncio.run(main())

    def test_nowait(self, /):
        queue = self.factory(1)

        with pytest.raises(asyncutil.QueueEmpty):
            queue.get_nowait()

        queue.put_nowait("spam")

        with pytest.raises(asyncutil.QueueFull):
            queue.put_nowait("ham")

        assert queue.get_nowait() == "spam"
        assert not issubclass(asyncutil.QueueEmpty, asyncutil.QueueFull)
        assert not issubclass(asyncutil.QueueFull, asyncutil.QueueEmpty)

    def test_get_waits(self, /, settle):
        async def main():
            queue = self.factory()
            results = []

            async def getter(i):
                results.append((i, await queue.get()))

            tasks = [asyncio.create_task(getter(i)) for i in range(3)]

            await settle()

            assert queue.getting == 3

            for item in "abc":
                queue.put_nowait(item)

            await asyncio.gather(*tasks)

            assert results == [(0, "a"), (1, "b"), (2, "c")]

        asyncio.run(main())

    def test_put_waits(self, /, settle):
        async def main():
            queue = self.factory(1)

            await queue.put(1)

            task = asyncio.create_task(queue.put(2))

            await settle()

            assert not task.done()
            assert queue.putting == 1

            assert await queue.get() == 1

            await task

            assert queue.get_nowait() == 2

        asyncio.run(main())

    def test_producer_consumer(self, /, checkpoints):
        async def main():
            queue = self.factory(2)

            async def producer():
                for i in range(20):
                    await queue.put(i)

            async def consumer():
                return [await queue.get() for _ in range(20)]

            _, items = await asyncio.gather(producer(), consumer())

            assert items == list(range(20))

        asyncio.run(main())

    def test_cancellation(self, /, settle):
        async def main():
            queue = self.factory(1)
            fired = asyncutil.CancellationToken()
            fired.cancel()

            with pytest.raises(asyncutil.WaitCancelled):
                await queue.get(cancel_token=fired)

            with pytest.raises(asyncutil.WaitCancelled):
                await queue.put(1, cancel_token=fired)

            assert queue.empty()

            token = asyncutil.CancellationToken()

            task1 = asyncio.create_task(queue.get(cancel_token=token))
            task2 = asyncio.create_task(queue.get())

            await settle()

            token.cancel()

            with pytest.raises(asyncutil.WaitCancelled):
                await task1

            queue.put_nowait("item")

            assert await task2 == "item"

        asyncio.run(main())

    def test_lost_item_is_passed_on(self, /, settle):
        async def main():
            queue = self.factory()

            task1 = asyncio.create_task(queue.get())
            task2 = asyncio.create_task(queue.get())

            await settle()

            queue.put_nowait("item")
            task1.cancel()

            await settle()

            assert task1.cancelled()
            assert task2.done()
            assert task2.result() == "item"

        asyncio.run(main())


class TestStack:
    factory = asyncutil.Stack

    def test_base(self, /):
        stack = self.factory()

        assert stack.size == 0
        assert not stack.locked

        pkg = "asyncutil"
        assert repr(stack) == (
            f"<{pkg}.Stack() at {id(stack):#x} [length=0, getting=0]>"
        )

    def test_order(self, /):
        async def main():
            stack = self.factory()

            for item in (1, 2, 3):
                stack.push(item)

            assert stack.size == 3
            assert [await stack.pop() for _ in range(3)] == [3, 2, 1]

        asyncio.run(main())

    def test_bounded(self, /):
        stack = self.factory(1)
        stack.push("spam")

        with pytest.raises(asyncutil.QueueFull):
            stack.push("ham")

        assert stack.pop_nowait() == "spam"

        with pytest.raises(asyncutil.QueueEmpty):
            stack.pop_nowait()

    def test_pop_waits(self, /, settle):
        async def main():
            stack = self.factory()

            task = asyncio.create_task(stack.pop())

            await settle()

            assert stack.locked

            stack.push("item")

            assert await task == "item"
            assert not stack.locked

        asyncio.run(main())

    def test_cancellation(self, /, settle):
        async def main():
            stack = self.factory()
            token = asyncutil.CancellationToken()

            task = asyncio.create_task(stack.pop(cancel_token=token))

            await settle()

            token.cancel()

            with pytest.raises(asyncutil.WaitCancelled):
                await task

            assert not stack.locked

            stack.push("item")

            assert stack.size == 1

        asyncio.run(main())
