"""
Tests for the aggregate count fetcher.
"""

import pytest

from courtsync.models import BOOKINGS, EVENT_BOOKINGS, USERS
from courtsync.services.stats_service import StatsFetcher


async def _fill(store, collection, n):
    for i in range(n):
        await store.add(collection, {"seq": i})


@pytest.mark.asyncio
async def test_counts_all_three_collections(store):
    await _fill(store, BOOKINGS, 12)
    await _fill(store, EVENT_BOOKINGS, 3)
    await _fill(store, USERS, 40)

    stats = await StatsFetcher().fetch(store)

    assert (stats.bookings, stats.events, stats.users) == (12, 3, 40)


@pytest.mark.asyncio
async def test_one_failing_count_does_not_blank_the_others(store):
    await _fill(store, BOOKINGS, 12)
    await _fill(store, USERS, 40)
    store.fail("count", EVENT_BOOKINGS)

    stats = await StatsFetcher().fetch(store)

    assert stats.bookings == 12
    assert stats.users == 40
    assert stats.events == 0


@pytest.mark.asyncio
async def test_failed_count_keeps_last_known_value(store):
    fetcher = StatsFetcher()
    await _fill(store, EVENT_BOOKINGS, 5)
    await fetcher.fetch(store)

    await _fill(store, EVENT_BOOKINGS, 2)
    await _fill(store, BOOKINGS, 1)
    store.fail("count", EVENT_BOOKINGS)
    stats = await fetcher.fetch(store)

    assert stats.events == 5
    assert stats.bookings == 1


@pytest.mark.asyncio
async def test_counts_are_point_in_time(store):
    fetcher = StatsFetcher()
    first = await fetcher.fetch(store)
    await _fill(store, USERS, 2)

    assert first.users == 0
    assert fetcher.last.users == 0
    assert (await fetcher.fetch(store)).users == 2
