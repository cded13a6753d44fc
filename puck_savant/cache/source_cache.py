import asyncio
import time
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from loguru import logger
from pydantic import BaseModel, ConfigDict

from puck_savant.config.settings import AppSettings
from puck_savant.models.season import SeasonStatsTable
from puck_savant.sources.base_client import SourceError

T = TypeVar("T")

Clock = Callable[[], float]
FetchFn = Callable[[], Awaitable[Any]]


class Snapshot(BaseModel, Generic[T]):
    """A complete payload from one successful fetch, with its fetch time."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    payload: T
    fetched_at: float

    def age(self, now: float) -> float:
        return now - self.fetched_at


class SourceCache(Generic[T]):
    """Lazily refreshed cache for one upstream source.

    ``get_or_refresh`` refreshes when the snapshot is older than the TTL (or
    missing). A failed refresh keeps the previous snapshot and its timestamp,
    so callers keep getting stale-but-available data, or None if the source
    has never been fetched successfully. While a refresh is in flight other
    callers get the current snapshot instead of fetching again.
    """

    def __init__(
        self,
        name: str,
        ttl_seconds: float,
        fetch: Callable[[], Awaitable[T]],
        clock: Clock = time.monotonic,
    ):
        self.name = name
        self.ttl_seconds = ttl_seconds
        self._fetch = fetch
        self._clock = clock
        self._snapshot: Optional[Snapshot[T]] = None
        self._lock = asyncio.Lock()
        self.last_error: Optional[BaseException] = None
        self._attempts = 0

    @property
    def snapshot(self) -> Optional[Snapshot[T]]:
        return self._snapshot

    def is_stale(self, now: Optional[float] = None) -> bool:
        if self._snapshot is None:
            return True
        now = self._clock() if now is None else now
        return self._snapshot.age(now) > self.ttl_seconds

    async def get_or_refresh(self) -> Optional[Snapshot[T]]:
        if not self.is_stale():
            return self._snapshot
        if self._snapshot is not None and self._lock.locked():
            # A refresh is already in flight; serve the current snapshot meanwhile
            return self._snapshot

        attempts_seen = self._attempts
        async with self._lock:
            # Another request refreshed, or tried to, while we waited
            if not self.is_stale() or self._attempts != attempts_seen:
                return self._snapshot
            await self._refresh()
        return self._snapshot

    async def _refresh(self) -> None:
        logger.info(f"Refreshing {self.name} cache")
        try:
            payload = await self._fetch()
        except SourceError as e:
            self._record_failure(e)
            return
        except Exception as e:
            logger.exception(f"Unexpected error refreshing {self.name}: {e}")
            self._record_failure(e)
            return
        finally:
            self._attempts += 1

        self._snapshot = Snapshot(payload=payload, fetched_at=self._clock())
        self.last_error = None
        logger.success(f"{self.name} cache refreshed")

    def _record_failure(self, error: BaseException) -> None:
        self.last_error = error
        if self._snapshot is not None:
            logger.warning(
                f"{self.name} refresh failed ({error}); serving snapshot from "
                f"{self._snapshot.age(self._clock()):.0f}s ago"
            )
        else:
            logger.warning(f"{self.name} refresh failed ({error}); no data available")


class SourceCacheManager:
    """Holds the three independently aged source caches for the process."""

    def __init__(
        self,
        season_stats: SourceCache[SeasonStatsTable],
        live_odds: SourceCache,
        starters: SourceCache,
    ):
        self.season_stats = season_stats
        self.live_odds = live_odds
        self.starters = starters

    @classmethod
    def from_fetchers(
        cls,
        settings: AppSettings,
        fetch_season_stats: FetchFn,
        fetch_live_odds: FetchFn,
        fetch_starters: FetchFn,
        clock: Clock = time.monotonic,
    ) -> "SourceCacheManager":
        return cls(
            season_stats=SourceCache(
                "season stats", settings.stats_ttl_seconds, fetch_season_stats, clock
            ),
            live_odds=SourceCache(
                "live odds", settings.odds_ttl_seconds, fetch_live_odds, clock
            ),
            starters=SourceCache(
                "starting goalies", settings.starter_ttl_seconds, fetch_starters, clock
            ),
        )

    async def refresh_all(self):
        """Brings every source up to date concurrently; returns the three snapshots."""
        return await asyncio.gather(
            self.season_stats.get_or_refresh(),
            self.live_odds.get_or_refresh(),
            self.starters.get_or_refresh(),
        )
