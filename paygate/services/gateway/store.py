"""Best-effort email -> customer cache.

Stripe's own customer list stays the source of truth and is re-queried on
every request. Entries here are advisory: they are lost on restart (memory
backend), and concurrent writers for one email may overwrite each other.
"""

from typing import Protocol

import redis
from pydantic import BaseModel


class CustomerRecord(BaseModel):
    """Last known Stripe customer + card for an email."""

    email: str
    customer_id: str
    payment_method_id: str


class CustomerStore(Protocol):
    def get(self, email: str) -> CustomerRecord | None: ...

    def put(self, record: CustomerRecord) -> None: ...


class InMemoryCustomerStore:
    """Process-local store; not synchronized."""

    def __init__(self) -> None:
        self._records: dict[str, CustomerRecord] = {}

    def get(self, email: str) -> CustomerRecord | None:
        return self._records.get(email)

    def put(self, record: CustomerRecord) -> None:
        self._records[record.email] = record


class RedisCustomerStore:
    """Shared store backed by one Redis hash per email."""

    def __init__(self, client: redis.Redis, ttl_seconds: int | None = None) -> None:
        self.client = client
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def _key(email: str) -> str:
        return f"customer:{email}"

    def get(self, email: str) -> CustomerRecord | None:
        values = self.client.hgetall(self._key(email))
        if not values:
            return None
        return CustomerRecord(email=email, **values)

    def put(self, record: CustomerRecord) -> None:
        key = self._key(record.email)
        self.client.hset(
            key,
            mapping={"customer_id": record.customer_id, "payment_method_id": record.payment_method_id},
        )
        if self.ttl_seconds:
            self.client.expire(key, self.ttl_seconds)


def build_customer_store(url: str, ttl_seconds: int | None = None) -> CustomerStore:
    """Memory store when `url` is empty, Redis store with expiring keys otherwise."""

    if not url:
        return InMemoryCustomerStore()
    return RedisCustomerStore(redis.Redis.from_url(url, decode_responses=True), ttl_seconds=ttl_seconds)
