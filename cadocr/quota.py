"""Daily request quota service backed by a database."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from .errors import ExternalServiceError, ValidationError


@dataclass
class UserQuota:
    """A user's daily quota and how much of it has been used."""

    user_id: str
    daily_limit: int
    used_today: int
    last_reset_date: Any


class QuotaDatabase(Protocol):
    async def consume_and_get_quota(self, user_id: str, amount: int) -> Any: ...

    async def get_user_quota(self, user_id: str) -> Any: ...

    async def set_user_quota(self, user_id: str, daily_limit: int) -> None: ...


def _to_user_quota(record: Any) -> UserQuota:
    return UserQuota(
        user_id=record.user_id,
        daily_limit=record.daily_limit,
        used_today=record.used_today,
        last_reset_date=record.last_reset_date,
    )


class QuotaService:
    """Thin wrapper over the database offering atomic quota operations."""

    def __init__(self, db: QuotaDatabase, default_daily_limit: int) -> None:
        self._db = db
        self._default_daily_limit = default_daily_limit

    async def check_and_consume(self, user_id: str) -> UserQuota:
        """Consume one unit of quota in a single database operation."""
        try:
            record = await self._db.consume_and_get_quota(user_id, 1)
        except Exception as exc:
            raise ExternalServiceError("database", "consume_and_get_quota", str(exc)) from exc
        return _to_user_quota(record)

    async def get_quota(self, user_id: str) -> UserQuota:
        try:
            record = await self._db.get_user_quota(user_id)
        except Exception as exc:
            raise ExternalServiceError("database", "get_user_quota", str(exc)) from exc
        return _to_user_quota(record)

    async def set_quota(self, user_id: str, daily_limit: int) -> None:
        """Set a user's daily limit; zero is rejected."""
        if daily_limit == 0:
            raise ValidationError("daily_limit", "daily_limit 不能为 0")
        try:
            await self._db.set_user_quota(user_id, daily_limit)
        except Exception as exc:
            raise ExternalServiceError("database", "set_user_quota", str(exc)) from exc

    def default_limit(self) -> int:
        return self._default_daily_limit