"""Async smoke/load generator for the gateway payment and save-card endpoints.

Use Stripe test-mode payment methods (e.g. `pm_card_visa`) against a gateway
configured with an `sk_test_...` key.
"""

import argparse
import asyncio
import statistics
import time
from uuid import uuid4

import httpx


async def send_one(client: httpx.AsyncClient, base_url: str, path: str, payment_method: str, idx: int):
    """Send one request and return (status_code, latency_ms)."""

    started = time.perf_counter()
    payload = {
        "paymentMethodId": payment_method,
        "email": f"smoke-{idx}@example.com",
        "profileId": f"profile-{idx}",
    }
    try:
        resp = await client.post(
            f"{base_url}{path}",
            json=payload,
            headers={"x-correlation-id": str(uuid4())},
        )
        latency = (time.perf_counter() - started) * 1000
        return resp.status_code, latency
    except httpx.HTTPError:
        latency = (time.perf_counter() - started) * 1000
        return 599, latency


async def run(total: int, concurrency: int, base_url: str, path: str, payment_method: str):
    """Execute a bounded-concurrency run and print summary stats."""

    sem = asyncio.Semaphore(concurrency)
    results = []

    async with httpx.AsyncClient(timeout=30.0) as client:
        async def worker(i: int):
            async with sem:
                return await send_one(client, base_url, path, payment_method, i)

        tasks = [asyncio.create_task(worker(i)) for i in range(total)]
        for task in asyncio.as_completed(tasks):
            results.append(await task)

    codes = [c for c, _ in results]
    lats = [latency for _, latency in results]
    success = sum(1 for c in codes if 200 <= c < 300)
    errors = total - success

    def pct(values, p):
        if not values:
            return 0.0
        idx = min(len(values) - 1, max(0, int((p / 100.0) * len(values)) - 1))
        return sorted(values)[idx]

    print(f"total={total}")
    print(f"success={success}")
    print(f"errors={errors}")
    print(f"status_codes={sorted(set(codes))}")
    print(f"p50_ms={pct(lats, 50):.2f}")
    print(f"p95_ms={pct(lats, 95):.2f}")
    print(f"avg_ms={statistics.mean(lats) if lats else 0.0:.2f}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--total", type=int, default=10)
    parser.add_argument("--concurrency", type=int, default=2)
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--path", default="/api/stripe/payment", choices=["/api/stripe/payment", "/api/stripe/save-card"])
    parser.add_argument("--payment-method", default="pm_card_visa")
    args = parser.parse_args()
    asyncio.run(run(args.total, args.concurrency, args.base_url, args.path, args.payment_method))
