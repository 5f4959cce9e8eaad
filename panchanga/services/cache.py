"""In-process cache of computed daily Panchanga records.

Entries are keyed by civil date and coordinates rounded to four decimals and
expire after a TTL. The cache is protected by a threading lock so it can be
shared between the event loop and worker threads.
"""

import logging
import threading
import time
from collections import OrderedDict
from datetime import date as date_cls
from typing import Callable, Dict, Optional, Tuple

from .. import config
from ..schemas.panchanga import DailyPanchanga, Location

logger = logging.getLogger(__name__)


def cache_key(day: date_cls, location: Location) -> str:
    return f"{day.isoformat()}:{location.lat:.4f}:{location.lon:.4f}"


class PanchangaCache:
    def __init__(
        self,
        max_size: Optional[int] = None,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_size = max_size if max_size is not None else config.cache_max_size()
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else config.cache_ttl_seconds()
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[DailyPanchanga, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, day: date_cls, location: Location) -> Optional[DailyPanchanga]:
        key = cache_key(day, location)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            record, computed_at = entry
            if self._clock() - computed_at > self.ttl_seconds:
                del self._entries[key]
                logger.debug("panchanga.cache.expired", extra={"key": key})
                return None
        logger.debug("panchanga.cache.hit", extra={"key": key})
        return record

    def put(self, day: date_cls, location: Location, record: DailyPanchanga) -> None:
        key = cache_key(day, location)
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = (record, self._clock())
            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("panchanga.cache.evicted", extra={"key": evicted})

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> Dict[str, float]:
        with self._lock:
            return {"size": len(self._entries), "max_size": self.max_size, "ttl": self.ttl_seconds}
