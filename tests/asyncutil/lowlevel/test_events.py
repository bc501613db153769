#!/usr/bin/env python3

# SPDX-FileCopyrightText: 2024 Ilya Egorov <0x42005e1f@gmail.com>
# SPDX-License-Identifier: 0BSD

import asyncio
import pickle

import pytest

import asyncutil.lowlevel


async def _wait(event):
    return await event


class _TestConstantEvent:
    def test_base(self, /):
        assert type(self.value)() is self.value  # singleton
        assert repr(self.value) == self.name

    def test_pickling(self, /):
        assert pickle.loads(pickle.dumps(self.value)) is self.value

    def test_inheritance(self, /):
        with pytest.raises(TypeError):

            class EventType(type(self.value)):
                pass

    def test_await(self, /):
        async def main():
            return await self.value

        assert asyncio.run(main()) is self.is_set


class TestSetEvent(_TestConstantEvent):
    name = "asyncutil.lowlevel.SET_EVENT"
    value = asyncutil.lowlevel.SET_EVENT
    is_set = True

    def test_state(self, /):
        assert self.value
        assert self.value.is_set()
        assert not self.value.cancelled()
        assert not self.value.set()
        assert not self.value.cancel()


class TestCancelledEvent(_TestConstantEvent):
    name = "asyncutil.lowlevel.CANCELLED_EVENT"
    value = asyncutil.lowlevel.CANCELLED_EVENT
    is_set = False

    def test_state(self, /):
        assert not self.value
        assert not self.value.is_set()
        assert self.value.cancelled()
        assert not self.value.set()
        assert not self.value.cancel()


class TestAsyncEvent:
    factory = staticmethod(asyncutil.lowlevel.create_async_event)

    def test_base(self, /):
        event = self.factory()

        assert isinstance(event, asyncutil.lowlevel.AsyncEvent)
        assert not event
        assert not event.is_set()
        assert not event.cancelled()
        assert repr(event).endswith(": unset>")

        with pytest.raises(TypeError):
            pickle.dumps(event)

    def test_settled_once(self, /):
        event = self.factory()

        assert event.set()
        assert not event.set()
        assert not event.cancel()
        assert event.is_set()
        assert not event.cancelled()

        event = self.factory()

        assert event.cancel()
        assert not event.cancel()
        assert not event.set()
        assert event.cancelled()
        assert not event.is_set()

    def test_await(self, /, settle):
        async def main():
            event = self.factory()
            task = asyncio.create_task(_wait(event))

            await settle()

            assert not task.done()

            assert event.set()
            assert await task is True

            event = self.factory()
            task = asyncio.create_task(_wait(event))

            await settle()

            assert event.cancel()
            assert await task is False

            event = self.factory()
            event.set()

            assert await event is True

        asyncio.run(main())

    def test_in_use(self, /, settle):
        async def main():
            event = self.factory()
            task = asyncio.create_task(_wait(event))

            await settle()

            with pytest.raises(RuntimeError):
                await event

            event.set()

            await task

        asyncio.run(main())

    def test_task_cancellation(self, /, settle):
        async def main():
            event = self.factory()
            task = asyncio.create_task(_wait(event))

            await settle()

            task.cancel()

            await settle()

            assert task.cancelled()
            assert event.cancelled()
            assert not event.set()

        asyncio.run(main())

    def test_no_running_loop(self, /):
        with pytest.raises(RuntimeError):
            asyncutil.lowlevel.current_asyncio_loop()

    def test_await_without_running_loop(self, /):
        event = self.factory()
        coro = _wait(event)

        with pytest.raises(RuntimeError):
            coro.send(None)

        assert not event.is_set()
        assert not event.cancelled()

        async def main():
            task = asyncio.create_task(_wait(event))

            await asyncio.sleep(0)

            assert event.set()

            return await task

        assert asyncio.run(main()) is True
