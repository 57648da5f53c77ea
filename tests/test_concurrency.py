"""
Concurrency safety tests.

Demonstrates:
1. Distributed lock prevents simultaneous acquire of one booking ID.
2. A submission that cannot take the lock is refused with 409 and
   writes nothing.
3. Resubmitting with the same readable ID updates one booking instead of
   creating a second.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from rydeit.infrastructure.locks import DistributedLock, LockNotAcquired
from rydeit.infrastructure.repositories import BookingRepository
from tests.conftest import make_lock_client


def nx_store() -> AsyncMock:
    """Mocked Redis that honours SET NX and the compare-and-delete script."""
    data: dict[str, str] = {}

    async def _set(key, value, nx=False, ex=None):
        if nx and key in data:
            return None
        data[key] = value
        return True

    async def _eval(script, numkeys, key, token):
        if data.get(key) == token:
            del data[key]
            return 1
        return 0

    client = AsyncMock()
    client.set = AsyncMock(side_effect=_set)
    client.eval = AsyncMock(side_effect=_eval)
    client.data = data
    return client


def booking_body(**overrides):
    body = {
        "readable_id": "RD-654321",
        "bike_id": 16,
        "pickup_date": "2024-01-15",
        "pickup_time": "10:00",
        "return_date": "2024-01-15",
        "return_time": "14:00",
        "customer_name": "Asha Roy",
        "customer_phone": "9876543210",
        "accepted_terms": True,
    }
    body.update(overrides)
    return body


class TestDistributedLock:
    """Tests the Redis distributed lock logic (mocked Redis)."""

    @pytest.mark.asyncio
    async def test_acquire_succeeds(self):
        mock_redis = make_lock_client(acquired=True)

        lock = DistributedLock(mock_redis, "booking:RD-000001", ttl_seconds=10)
        assert await lock.acquire() is True
        mock_redis.set.assert_called_once_with(
            "lock:booking:RD-000001", lock.token, nx=True, ex=10
        )

    @pytest.mark.asyncio
    async def test_acquire_fails_if_held(self):
        mock_redis = make_lock_client(acquired=False)

        lock = DistributedLock(mock_redis, "booking:RD-000001", ttl_seconds=10)
        assert await lock.acquire() is False

    @pytest.mark.asyncio
    async def test_release_calls_eval(self):
        mock_redis = make_lock_client()

        lock = DistributedLock(mock_redis, "booking:RD-000001", ttl_seconds=10)
        await lock.acquire()
        await lock.release()

        mock_redis.eval.assert_called_once()

    @pytest.mark.asyncio
    async def test_context_manager_acquire_fail_raises(self):
        mock_redis = make_lock_client(acquired=False)

        lock = DistributedLock(mock_redis, "booking:RD-000001", ttl_seconds=10)
        with pytest.raises(LockNotAcquired, match="Could not acquire lock"):
            async with lock:
                pass
        mock_redis.eval.assert_not_called()

    @pytest.mark.asyncio
    async def test_context_manager_releases_on_error(self):
        store = nx_store()

        with pytest.raises(ValueError):
            async with DistributedLock(store, "booking:RD-000001"):
                raise ValueError("boom")
        assert store.data == {}

    @pytest.mark.asyncio
    async def test_second_holder_waits_for_release(self):
        store = nx_store()
        first = DistributedLock(store, "booking:RD-000001")
        second = DistributedLock(store, "booking:RD-000001")

        assert await first.acquire()
        assert not await second.acquire()
        await first.release()
        assert await second.acquire()

    @pytest.mark.asyncio
    async def test_stale_holder_cannot_release_new_owner(self):
        store = nx_store()
        stale = DistributedLock(store, "booking:RD-000001")
        owner = DistributedLock(store, "booking:RD-000001")

        await owner.acquire()
        await stale.release()
        assert store.data["lock:booking:RD-000001"] == owner.token

    @pytest.mark.asyncio
    async def test_only_one_of_many_concurrent_acquires_wins(self):
        store = nx_store()
        locks = [DistributedLock(store, "booking:RD-000001") for _ in range(10)]

        results = await asyncio.gather(*(lock.acquire() for lock in locks))
        assert results.count(True) == 1


@pytest.mark.asyncio
async def test_submission_refused_while_lock_held(client: AsyncClient, lock_client):
    lock_client.set.return_value = False

    resp = await client.post("/api/v1/bookings", json=booking_body())
    assert resp.status_code == 409

    lock_client.set.return_value = True
    resp = await client.get("/api/v1/bookings/RD-654321")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_resubmission_updates_single_booking(client: AsyncClient):
    first = await client.post("/api/v1/bookings", json=booking_body())
    second = await client.post(
        "/api/v1/bookings", json=booking_body(return_time="18:00")
    )
    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["id"] == second.json()["id"]
    assert second.json()["total_rent"] == 700

    resp = await client.get("/api/v1/admin/bookings")
    assert [b["readable_id"] for b in resp.json()] == ["RD-654321"]


@pytest.mark.asyncio
async def test_resubmission_after_payment_is_refused(client: AsyncClient):
    await client.post("/api/v1/bookings", json=booking_body())
    await client.post("/api/v1/bookings/RD-654321/payment", json={"method": "upi"})

    resp = await client.post("/api/v1/bookings", json=booking_body())
    assert resp.status_code == 409
    booking = (await client.get("/api/v1/bookings/RD-654321")).json()
    assert booking["status"] == "verifying_payment"


@pytest.mark.asyncio
async def test_insert_race_on_same_id_conflicts(client: AsyncClient):
    await client.post("/api/v1/bookings", json=booking_body())

    # The pre-insert lookup misses the row another submission just committed
    with patch.object(
        BookingRepository, "get_by_readable_id", AsyncMock(return_value=None)
    ):
        resp = await client.post(
            "/api/v1/bookings", json=booking_body(return_time="18:00")
        )
    assert resp.status_code == 409

    booking = (await client.get("/api/v1/bookings/RD-654321")).json()
    assert booking["total_rent"] == 560
