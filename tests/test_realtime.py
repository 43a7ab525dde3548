"""Unit tests for the in-process change feed."""
from __future__ import annotations

import asyncio

from portalhub.services.realtime import ChangeFeed


def test_publish_without_running_loop_is_dropped():
    feed = ChangeFeed()
    assert feed.publish_insert("messages", "g1", {"id": "m1"}) is False


def test_subscribers_receive_only_their_channel():
    async def scenario() -> tuple[list, list]:
        feed = ChangeFeed()
        first: list = []
        second: list = []

        async def _first(record):
            first.append(record)

        async def _second(record):
            second.append(record)

        await feed.subscribe("messages", "g1", _first)
        await feed.subscribe("messages", "g2", _second)
        assert feed.publish_insert("messages", "g1", {"id": "m1"}) is True
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        return first, second

    first, second = asyncio.run(scenario())
    assert first == [{"id": "m1"}]
    assert second == []


def test_unsubscribe_stops_delivery_and_updates_counts():
    async def scenario() -> list:
        feed = ChangeFeed()
        received: list = []

        async def _callback(record):
            received.append(record)

        subscription = await feed.subscribe("follows", 42, _callback)
        assert feed.subscriber_count("follows", "42") == 1
        assert feed.total_subscribers() == 1

        await feed.unsubscribe(subscription)
        assert feed.subscriber_count("follows", 42) == 0
        assert feed.total_subscribers() == 0

        feed.publish_insert("follows", 42, {"id": "f1"})
        await asyncio.sleep(0)
        return received

    assert asyncio.run(scenario()) == []


def test_failing_subscriber_is_dropped():
    async def scenario() -> tuple[int, list]:
        feed = ChangeFeed()
        healthy: list = []

        async def _broken(record):
            raise RuntimeError("socket closed")

        async def _healthy(record):
            healthy.append(record)

        await feed.subscribe("messages", "g1", _broken)
        await feed.subscribe("messages", "g1", _healthy)
        await feed._dispatch("messages", "g1", {"id": "m1"})
        return feed.subscriber_count("messages", "g1"), healthy

    remaining, healthy = asyncio.run(scenario())
    assert remaining == 1
    assert healthy == [{"id": "m1"}]
