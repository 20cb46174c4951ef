"""HTTP-backed catalog with a one-way fallback to the bundled mock catalog.

Policy: every fetch is bounded by ``timeout_seconds``. The first failure trips a
fuse and all later calls are served from ``fallback`` for the lifetime of the
process. There is no retry and no periodic re-probe.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx
from pydantic import TypeAdapter

from episodic_feed.models.schemas import EpisodeWithShow, FeedType
from episodic_feed.services.catalog import MockCatalog
from episodic_feed.tools.normalization import (
    coerce_feed_type,
    normalize_episode_with_show,
    select_resume_items,
)

logger = logging.getLogger(__name__)

_FEED_PAYLOAD = TypeAdapter(list[EpisodeWithShow])


@dataclass
class RemoteCatalog:
    """Fetches ``GET {base_url}/feeds/{feed_type}``."""

    base_url: str
    timeout_seconds: float = 6.0
    fallback: MockCatalog = field(default_factory=MockCatalog)
    transport: httpx.AsyncBaseTransport | None = None
    _fuse_tripped: bool = field(init=False, default=False)

    @property
    def fuse_tripped(self) -> bool:
        return self._fuse_tripped

    async def get_feed(self, feed_type: FeedType | str) -> list[EpisodeWithShow]:
        resolved = coerce_feed_type(feed_type)
        if resolved is None:
            return []
        if self._fuse_tripped or not self.base_url:
            return await self.fallback.get_feed(resolved)

        try:
            items = await self._fetch(resolved)
        except (httpx.HTTPError, ValueError) as exc:
            # Concurrent fetches may fail together; only the first one reports
            if not self._fuse_tripped:
                self._fuse_tripped = True
                logger.warning(
                    f"Catalog backend unavailable ({type(exc).__name__}: {exc}); serving mock catalog from now on"
                )
            return await self.fallback.get_feed(resolved)

        if resolved == FeedType.CONTINUE:
            items = select_resume_items(items)
        return [normalize_episode_with_show(item) for item in items]

    async def _fetch(self, feed_type: FeedType) -> list[EpisodeWithShow]:
        url = f"{self.base_url.rstrip('/')}/feeds/{feed_type.value}"
        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self.transport) as client:
            response = await client.get(url, follow_redirects=True)
            response.raise_for_status()
            payload = response.json()
        items = _FEED_PAYLOAD.validate_python(payload)
        logger.debug(f"Fetched {len(items)} items for {feed_type.value} feed")
        return items
