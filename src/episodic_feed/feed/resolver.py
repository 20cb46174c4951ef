"""Feed aggregation: catalog + local publications, filtered and ordered.

Flow for a show page:
    new + library + continue (concurrent) → local published → creator published
      → filter by show → normalize → dedupe (first wins) → sort (trailers first)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from episodic_feed.feed.context import FeedContext
from episodic_feed.models.schemas import (
    EpisodeKind,
    EpisodeWithShow,
    FeedItem,
    FeedMode,
    FeedType,
    Special,
    TimelineEntry,
)
from episodic_feed.services.catalog import get_specials
from episodic_feed.tools.normalization import (
    coerce_feed_type,
    dedupe_by_key,
    episode_key,
    episode_sort_key,
    feed_item_key,
    is_published,
    is_trailer,
    normalize_episode_with_show,
)

logger = logging.getLogger(__name__)

# Feed types that also surface everything published on this device
_LOCAL_PUBLISH_FEEDS = {FeedType.NEW, FeedType.LOCAL}

SHOW_EPISODE_FEEDS = (FeedType.NEW, FeedType.LIBRARY, FeedType.CONTINUE)


async def get_feed(ctx: FeedContext, feed_type: FeedType | str) -> list[EpisodeWithShow]:
    """Catalog feed for ``feed_type``; unknown types yield an empty list."""
    resolved = coerce_feed_type(feed_type)
    if resolved is None:
        logger.debug(f"Unknown feed type {feed_type!r}")
        return []

    items = list(await ctx.catalog.get_feed(resolved))
    if resolved in _LOCAL_PUBLISH_FEEDS:
        items.extend(ctx.store.iter_local_published())
    return [normalize_episode_with_show(item) for item in items]


async def get_show_episodes(ctx: FeedContext, show_id: str) -> list[EpisodeWithShow]:
    """Canonical, deduplicated and ordered episode list for one show."""
    feeds = await asyncio.gather(*(get_feed(ctx, feed_type) for feed_type in SHOW_EPISODE_FEEDS))

    candidates: list[EpisodeWithShow] = [item for feed in feeds for item in feed]
    candidates.extend(ctx.store.get_local_published_by_show_id(show_id))
    candidates.extend(ctx.store.published_items_for_show(show_id))

    normalized = [normalize_episode_with_show(item) for item in candidates if item.show.id == show_id]
    episodes = dedupe_by_key(normalized, episode_key)
    episodes.sort(key=episode_sort_key)
    return episodes


def _published_show_ids(items: Iterable[EpisodeWithShow]) -> set[str]:
    return {item.show.id for item in items if is_published(item.episode)}


def _eligible_show_ids(ctx: FeedContext, feed_items: Iterable[EpisodeWithShow]) -> set[str]:
    """Shows with at least one published episode or trailer."""
    pool = list(feed_items)
    pool.extend(ctx.store.iter_local_published())
    eligible = _published_show_ids(pool)
    eligible.update(ep.show_id for ep in ctx.store.published_episodes if is_published(ep))
    return eligible


async def is_show_eligible_for_public_feeds(ctx: FeedContext, show_id: str) -> bool:
    episodes = await get_show_episodes(ctx, show_id)
    return show_id in _eligible_show_ids(ctx, episodes)


def _is_visible(ctx: FeedContext, item: EpisodeWithShow) -> bool:
    if ctx.visibility is None:
        return True
    if ctx.visibility.is_show_hidden(item.show.id):
        return False
    return not ctx.visibility.is_episode_hidden(item.episode.id)


async def get_mixed_feed(ctx: FeedContext, feed_type: FeedType | str) -> list[FeedItem]:
    """Public feed: eligible, visible episodes followed by specials."""
    episodes = await get_feed(ctx, feed_type)
    eligible = _eligible_show_ids(ctx, episodes)

    filtered = [item for item in episodes if item.show.id in eligible and _is_visible(ctx, item)]
    dropped = len(episodes) - len(filtered)
    if dropped:
        logger.debug(f"Mixed feed {feed_type}: dropped {dropped} ineligible or hidden items")

    items: list[FeedItem] = list(filtered)
    items.extend(get_specials(feed_type))
    return items


async def get_home_feed(
    ctx: FeedContext,
    feed_type: FeedType | str,
    mode: FeedMode = FeedMode.DISCOVERY,
) -> list[FeedItem]:
    """Mixed feed plus episodes of the creator's own eligible shows.

    In ``following`` mode only followed shows, and specials attached to them,
    are kept.
    """
    items: list[FeedItem] = list(await get_mixed_feed(ctx, feed_type))

    for show in ctx.store.shows:
        show_episodes = await get_show_episodes(ctx, show.id)
        if show.id not in _eligible_show_ids(ctx, show_episodes):
            continue
        items.extend(item for item in show_episodes if _is_visible(ctx, item))

    items = dedupe_by_key(items, feed_item_key)

    if mode == FeedMode.FOLLOWING:
        followed = set(ctx.follows.followed_show_ids) if ctx.follows else set()
        items = [item for item in items if _attached_to(item, followed)]
    return items


def _attached_to(item: FeedItem, show_ids: set[str]) -> bool:
    if isinstance(item, Special):
        return any(show_id in show_ids for show_id in item.attached_show_ids or [])
    return item.show.id in show_ids


async def get_show_timeline(ctx: FeedContext, show_id: str) -> list[TimelineEntry]:
    """Published episodes overlaid with the show's drafts.

    On id conflicts the published record wins. Trailers sort first.
    """
    published = [
        TimelineEntry(
            id=item.episode.id,
            title=item.episode.title or "",
            season_number=item.episode.season_number,
            episode_number=item.episode.episode_number,
            is_draft=False,
            is_trailer=is_trailer(item.episode),
            trailer_for_episode_number=item.episode.trailer_for_episode_number,
        )
        for item in await get_show_episodes(ctx, show_id)
    ]
    drafts = [
        TimelineEntry(
            id=draft.id,
            title=draft.title,
            season_number=draft.season_number,
            episode_number=draft.episode_number,
            is_draft=True,
            is_trailer=draft.episode_type == EpisodeKind.TRAILER,
            trailer_for_episode_number=draft.episode_number if draft.episode_type == EpisodeKind.TRAILER else None,
        )
        for draft in ctx.store.get_draft_episodes_by_show_id(show_id)
    ]

    entries = dedupe_by_key(published + drafts, lambda entry: entry.id)
    entries.sort(key=lambda e: (0 if e.is_trailer else 1, e.season_number, e.episode_number))
    return entries


async def get_show_specials(ctx: FeedContext, show_id: str) -> list[Special]:
    feed = await get_mixed_feed(ctx, FeedType.NEW)
    return [
        item for item in feed if isinstance(item, Special) and show_id in (item.attached_show_ids or [])
    ]


async def get_topic_specials(ctx: FeedContext, topic_id: str) -> list[Special]:
    feed = await get_mixed_feed(ctx, FeedType.NEW)
    return [
        item for item in feed if isinstance(item, Special) and topic_id in (item.attached_topic_ids or [])
    ]
