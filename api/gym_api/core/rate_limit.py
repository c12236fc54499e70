"""Per-client daily quota for the plan generation endpoint.

Counts reset at the start of each UTC calendar day (not a sliding 24h
window). State lives in process memory and is owned by whoever constructs the
limiter, normally the application (``app.state.rate_limiter``).

The read-modify-write in ``check`` has no await inside it, so under a single
event loop no other request can interleave. Running several worker processes
gives each one its own independent counters.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Dict

from loguru import logger
from starlette.requests import HTTPConnection

DAILY_LIMIT = 10
DAY_MS = 24 * 60 * 60 * 1000
SWEEP_INTERVAL_SECONDS = 60 * 60

UNKNOWN_CLIENT = "unknown"


@dataclass
class RateLimitRecord:
    count: int
    reset_time: int  # epoch-ms of the UTC day the count belongs to


class DailyRateLimiter:
    """Fixed daily quota per client identifier."""

    def __init__(self, limit: int = DAILY_LIMIT, clock: Callable[[], float] = time.time) -> None:
        self.limit = limit
        self._clock = clock
        self._records: Dict[str, RateLimitRecord] = {}

    def current_day_start(self) -> int:
        now_ms = int(self._clock() * 1000)
        return (now_ms // DAY_MS) * DAY_MS

    def check(self, client_id: str) -> bool:
        """Count one request for ``client_id``; False once the quota is used."""
        today = self.current_day_start()
        record = self._records.get(client_id)

        if record is None or record.reset_time != today:
            self._records[client_id] = RateLimitRecord(count=1, reset_time=today)
            return True

        if record.count >= self.limit:
            logger.bind(client=client_id, limit=self.limit).info(f"Daily quota exhausted for {client_id}")
            return False

        record.count += 1
        return True

    def get(self, client_id: str):
        return self._records.get(client_id)

    def sweep(self) -> int:
        """Drop records from previous days. Returns how many were removed."""
        today = self.current_day_start()
        stale = [cid for cid, rec in self._records.items() if rec.reset_time < today]
        for cid in stale:
            del self._records[cid]
        if stale:
            logger.debug(f"Rate limiter sweep removed {len(stale)} stale records")
        return len(stale)

    def __len__(self) -> int:
        return len(self._records)


async def run_sweeper(limiter: DailyRateLimiter, interval_seconds: float = SWEEP_INTERVAL_SECONDS) -> None:
    """Periodically sweep ``limiter`` until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        limiter.sweep()


def get_client_id(request: HTTPConnection) -> str:
    """First address in X-Forwarded-For, or a shared sentinel bucket."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        client_id = forwarded.split(",")[0].strip()
        if client_id:
            return client_id
    return UNKNOWN_CLIENT
