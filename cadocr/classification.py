"""Template classification with caching, timeouts and bounded batch concurrency."""

from __future__ import annotations

import abc
import asyncio
import hashlib
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Hashable, List, Optional

from .errors import ExternalServiceError

log = logging.getLogger(__name__)


@dataclass
class ClassificationResult:
    """Outcome of classifying one drawing image."""

    template_type: Hashable
    confidence: float
    needs_review: bool
    source: str


class TemplateClassifier(abc.ABC):
    """Classifies a single image into a template type."""

    @abc.abstractmethod
    async def classify(self, image_data: bytes) -> ClassificationResult:
        """Return the classification of ``image_data``."""


@dataclass
class CacheStats:
    entries: int
    hits: int
    misses: int
    hit_rate: float


class ClassificationCache:
    """LRU cache from image content to template type, with hit/miss counters."""

    def __init__(self, max_entries: int = 1000) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._max_entries = max_entries
        self._entries: "OrderedDict[str, Any]" = OrderedDict()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def _key(image_data: bytes) -> str:
        return hashlib.sha256(image_data).hexdigest()

    def get(self, image_data: bytes) -> Optional[Any]:
        key = self._key(image_data)
        if key in self._entries:
            self._entries.move_to_end(key)
            self._hits += 1
            return self._entries[key]
        self._misses += 1
        return None

    def insert(self, image_data: bytes, template_type: Any) -> None:
        key = self._key(image_data)
        self._entries[key] = template_type
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)

    def stats(self) -> CacheStats:
        return CacheStats(len(self._entries), self._hits, self._misses, self.hit_rate())

    def hit_rate(self) -> float:
        total = self._hits + self._misses
        return self._hits / total if total else 0.0

    def clear(self) -> None:
        self._entries.clear()


@dataclass
class TemplateClassificationAppConfig:
    batch_max_concurrency: int = 10
    classification_timeout_secs: float = 60
    enable_cache: bool = True
    cache_max_entries: int = 1000


@dataclass
class BatchClassificationRequest:
    images: List[bytes]
    max_concurrency: Optional[int] = None


@dataclass
class BatchClassificationResponse:
    results: List[ClassificationResult] = field(default_factory=list)
    cache_hits: int = 0
    cache_misses: int = 0
    total_duration_ms: int = 0


class TemplateClassificationAppService:
    """Runs a classifier with caching, a per-call timeout and batch concurrency limits."""

    def __init__(
        self,
        classifier: TemplateClassifier,
        config: Optional[TemplateClassificationAppConfig] = None,
        cache: Optional[ClassificationCache] = None,
    ) -> None:
        self._classifier = classifier
        self._config = config or TemplateClassificationAppConfig()
        self._cache = cache if cache is not None else ClassificationCache(self._config.cache_max_entries)

    async def classify(self, image_data: bytes) -> ClassificationResult:
        """Classify one image, answering from the cache when possible."""
        if self._config.enable_cache:
            cached = self._cache.get(image_data)
            if cached is not None:
                log.debug("cache hit, type: %r", cached)
                return ClassificationResult(cached, 1.0, False, "cache")

        timeout = self._config.classification_timeout_secs
        try:
            result = await asyncio.wait_for(self._classifier.classify(image_data), timeout)
        except asyncio.TimeoutError as exc:
            raise ExternalServiceError(
                "TemplateClassificationAppService", "classify", f"分类超时 (>{timeout})"
            ) from exc
        except Exception as exc:
            log.warning("classification failed: %s", exc)
            raise

        if self._config.enable_cache:
            self._cache.insert(image_data, result.template_type)
        return result

    async def classify_batch(self, request: BatchClassificationRequest) -> BatchClassificationResponse:
        """Classify many images, keeping their order; the first failure is raised."""
        start = time.monotonic()
        limit = request.max_concurrency or self._config.batch_max_concurrency
        semaphore = asyncio.Semaphore(max(1, limit))
        log.info("batch classification: %d images, concurrency %d", len(request.images), limit)

        initial = self._cache.stats()

        async def run(image: bytes) -> ClassificationResult:
            async with semaphore:
                return await self.classify(image)

        outcomes = await asyncio.gather(*(run(img) for img in request.images), return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                log.warning("batch classification partly failed: %s", outcome)
                raise outcome

        final = self._cache.stats()
        duration_ms = int((time.monotonic() - start) * 1000)
        return BatchClassificationResponse(
            results=list(outcomes),
            cache_hits=final.hits - initial.hits,
            cache_misses=final.misses - initial.misses,
            total_duration_ms=duration_ms,
        )

    def cache_stats(self) -> CacheStats:
        return self._cache.stats()

    def clear_cache(self) -> None:
        self._cache.clear()
        log.info("classification cache cleared")

    def hit_rate(self) -> float:
        return self._cache.hit_rate()