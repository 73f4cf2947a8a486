"""Food database lookups with caching."""

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from calorie_tracker.domain.library import FoodMatch
from calorie_tracker.services.cache import Cache

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

_logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
MIN_RELEVANCE = 0.3
SHORT_NAME_LENGTH = 20

# (relevance above, resulting match confidence), best first
_MATCH_CONFIDENCE: tuple[tuple[float, float], ...] = (
    (0.85, 0.95),
    (0.6, 0.7),
    (0.4, 0.5),
)


class FoodDatabase(Protocol):
    """Interface for food name search."""

    async def search(self, query: str, limit: int) -> list[FoodMatch]:
        """Return matches sorted by relevance, best first."""


@dataclass(frozen=True)
class ResolvedFood:
    """A database match accepted for an item name."""

    match: FoodMatch
    confidence: float


@dataclass
class FoodLookupService:
    """Search the food database with caching and a short retry."""

    database: FoodDatabase
    cache: Cache
    search_ttl_seconds: int = 3600
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    async def search(self, query: str, limit: int = 10) -> list[FoodMatch]:
        """Search foods by name."""
        cleaned = query.strip().lower()
        if len(cleaned) < MIN_QUERY_LENGTH:
            return []
        cache_key = f"food:search:{cleaned}:{limit}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return cached

        matches = await self._call_with_retry(
            lambda: self.database.search(cleaned, limit), action="search"
        )
        self.cache.set(cache_key, matches, ttl_seconds=self.search_ttl_seconds)
        _logger.debug("Food search: query=%s results=%s", cleaned, len(matches))
        return matches

    async def match(self, name: str) -> ResolvedFood | None:
        """Map a detected item name to its best database entry, if close enough."""
        results = await self.search(name, limit=3)
        if not results:
            return None
        best = results[0]
        for threshold, confidence in _MATCH_CONFIDENCE:
            if best.relevance > threshold:
                return ResolvedFood(match=best, confidence=confidence)
        return None

    async def _call_with_retry(
        self, func: "Callable[[], Awaitable[list[FoodMatch]]]", *, action: str
    ) -> list[FoodMatch]:
        attempt = 0
        while True:
            try:
                return await func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Food %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def name_similarity(first: str, second: str) -> float:
    """Score how alike two food names are, from 0 to 1."""
    a = first.lower().strip()
    b = second.lower().strip()
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    if a in b or b in a:
        return 0.9

    words_a = re.split(r"\s+", a)
    words_b = re.split(r"\s+", b)
    overlap = [w for w in words_a if any(w in other or other in w for other in words_b)]
    if overlap:
        return 0.5 + len(overlap) / max(len(words_a), len(words_b)) * 0.4

    if len(a) < SHORT_NAME_LENGTH and len(b) < SHORT_NAME_LENGTH:
        shorter, longer = (a, b) if len(a) < len(b) else (b, a)
        matches = sum(1 for char in shorter if char in longer)
        return matches / len(longer) * 0.5
    return 0.0
