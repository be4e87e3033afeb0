import datetime
from types import SimpleNamespace

import pytest

from cadocr.errors import ExternalServiceError, ValidationError
from cadocr.quota import QuotaService, UserQuota

TODAY = datetime.date(2026, 2, 27)


class FakeDb:
    def __init__(self, fail=False):
        self.fail = fail
        self.records = {}
        self.set_calls = []

    def _record(self, user_id):
        return self.records.setdefault(
            user_id,
            SimpleNamespace(user_id=user_id, daily_limit=10, used_today=0, last_reset_date=TODAY),
        )

    async def consume_and_get_quota(self, user_id, amount):
        if self.fail:
            raise RuntimeError("db down")
        rec = self._record(user_id)
        rec.used_today += amount
        return rec

    async def get_user_quota(self, user_id):
        if self.fail:
            raise RuntimeError("db down")
        return self._record(user_id)

    async def set_user_quota(self, user_id, daily_limit):
        if self.fail:
            raise RuntimeError("db down")
        self.set_calls.append((user_id, daily_limit))
        self._record(user_id).daily_limit = daily_limit


def test_default_limit():
    service = QuotaService(FakeDb(), 100)
    assert service.default_limit() == 100


@pytest.mark.asyncio
async def test_check_and_consume_increments_usage():
    service = QuotaService(FakeDb(), 100)
    first = await service.check_and_consume("alice")
    second = await service.check_and_consume("alice")
    assert first == UserQuota("alice", 10, 1, TODAY)
    assert second.used_today == first.used_today + 1
    assert second.user_id == "alice"
    assert second.last_reset_date == TODAY


@pytest.mark.asyncio
async def test_get_quota_maps_fields():
    service = QuotaService(FakeDb(), 100)
    quota = await service.get_quota("bob")
    assert quota == UserQuota("bob", 10, 0, TODAY)


@pytest.mark.asyncio
async def test_set_quota_stores_limit():
    db = FakeDb()
    service = QuotaService(db, 100)
    await service.set_quota("carol", 42)
    assert db.set_calls == [("carol", 42)]
    assert (await service.get_quota("carol")).daily_limit == 42


@pytest.mark.asyncio
async def test_set_quota_zero_rejected():
    db = FakeDb()
    service = QuotaService(db, 100)
    with pytest.raises(ValidationError) as info:
        await service.set_quota("carol", 0)
    assert info.value.field == "daily_limit"
    assert db.set_calls == []


@pytest.mark.asyncio
async def test_check_and_consume_failure_is_wrapped():
    service = QuotaService(FakeDb(fail=True), 100)
    with pytest.raises(ExternalServiceError) as info:
        await service.check_and_consume("x")
    assert info.value.service == "database"
    assert info.value.operation == "consume_and_get_quota"
    assert info.value.message == "db down"


@pytest.mark.asyncio
async def test_get_quota_failure_is_wrapped():
    service = QuotaService(FakeDb(fail=True), 100)
    with pytest.raises(ExternalServiceError) as info:
        await service.get_quota("x")
    assert info.value.service == "database"
    assert info.value.operation == "get_user_quota"
    assert info.value.message == "db down"


@pytest.mark.asyncio
async def test_set_quota_failure_is_wrapped():
    service = QuotaService(FakeDb(fail=True), 100)
    with pytest.raises(ExternalServiceError) as info:
        await service.set_quota("x", 5)
    assert info.value.service == "database"
    assert info.value.operation == "set_user_quota"
    assert info.value.message == "db down"