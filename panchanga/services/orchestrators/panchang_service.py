"""Cached daily computation and bulk seeding of the daily store."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date as date_cls, timedelta
from typing import Dict, List, Optional

from ...schemas.panchanga import DailyPanchanga, Location
from ..cache import PanchangaCache
from ..daily_store import DailyInfoRow, DailyPanchangaStore
from ..provider import EphemerisProvider
from .panchang_full import compute_daily

logger = logging.getLogger(__name__)


@dataclass
class SeedReport:
    inserted: int = 0
    updated: int = 0
    failed: int = 0
    errors: Dict[str, str] = field(default_factory=dict)


def _days(start: date_cls, end: date_cls) -> List[date_cls]:
    if end < start:
        raise ValueError("end date precedes start date")
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


class PanchangaService:
    def __init__(self, provider: EphemerisProvider, cache: Optional[PanchangaCache] = None) -> None:
        self.provider = provider
        self.cache = cache if cache is not None else PanchangaCache()

    async def calculate_daily(self, day: date_cls, location: Location) -> DailyPanchanga:
        cached = self.cache.get(day, location)
        if cached is not None:
            return cached
        record = await compute_daily(day, location, self.provider)
        self.cache.put(day, location, record)
        return record

    async def calculate_range(
        self, start: date_cls, end: date_cls, location: Location
    ) -> List[DailyPanchanga]:
        return [await self.calculate_daily(day, location) for day in _days(start, end)]

    async def seed_range(
        self,
        start: date_cls,
        end: date_cls,
        location: Location,
        store: DailyPanchangaStore,
        concurrency: int = 1,
    ) -> SeedReport:
        """Compute every day in ``[start, end]`` and upsert its row into ``store``.

        A day that fails is logged and counted; the rest of the range is
        still processed.
        """

        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")

        report = SeedReport()
        semaphore = asyncio.Semaphore(concurrency)

        async def _seed_day(day: date_cls) -> None:
            async with semaphore:
                try:
                    record = await self.calculate_daily(day, location)
                except Exception as exc:
                    logger.exception(
                        "panchanga.seed.day_failed",
                        extra={"date": day.isoformat(), "location": location.name},
                    )
                    report.failed += 1
                    report.errors[day.isoformat()] = str(exc)
                    return
                if store.upsert(DailyInfoRow.from_panchanga(record)):
                    report.inserted += 1
                else:
                    report.updated += 1

        await asyncio.gather(*(_seed_day(day) for day in _days(start, end)))
        logger.info(
            "panchanga.seed.completed",
            extra={
                "start": start.isoformat(),
                "end": end.isoformat(),
                "location": location.name,
                "inserted": report.inserted,
                "updated": report.updated,
                "failed": report.failed,
            },
        )
        return report

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_stats(self) -> Dict[str, float]:
        return self.cache.stats()
