"""Topic membership for shows and episodes.

The index is rebuilt from every source on each call; nothing is cached, so
there is nothing to invalidate when local state changes.
"""

from __future__ import annotations

import asyncio

from episodic_feed.feed.context import FeedContext
from episodic_feed.feed.resolver import get_feed
from episodic_feed.feed.shows import resolve_show_by_id
from episodic_feed.models.schemas import EpisodeWithShow, FeedType, Show
from episodic_feed.tools.normalization import dedupe_by_key, episode_key, normalize_episode_with_show


async def _all_feed_items(ctx: FeedContext) -> list[EpisodeWithShow]:
    feeds = await asyncio.gather(*(get_feed(ctx, feed_type) for feed_type in FeedType))
    return [item for feed in feeds for item in feed]


async def get_shows_by_topic(ctx: FeedContext, topic_id: str) -> list[Show]:
    """Resolved shows whose topic ids include ``topic_id``."""
    show_ids: dict[str, None] = {}
    for item in await _all_feed_items(ctx):
        show_ids.setdefault(item.show.id)
    for show in ctx.store.shows:
        show_ids.setdefault(show.id)
    for show_id in ctx.store.published_shows:
        show_ids.setdefault(show_id)

    shows: list[Show] = []
    for show_id in show_ids:
        resolved = await resolve_show_by_id(ctx, show_id)
        if resolved is not None and topic_id in resolved.show.topic_ids:
            shows.append(resolved.show)
    return shows


async def get_episodes_by_topic(ctx: FeedContext, topic_id: str) -> list[EpisodeWithShow]:
    """Episodes tagged with ``topic_id`` directly or through their show."""
    candidates = await _all_feed_items(ctx)
    candidates.extend(ctx.store.iter_local_published())
    for show_id in ctx.store.published_shows:
        candidates.extend(ctx.store.published_items_for_show(show_id))

    episodes = dedupe_by_key((normalize_episode_with_show(item) for item in candidates), episode_key)
    return [item for item in episodes if _has_topic(item, topic_id)]


def _has_topic(item: EpisodeWithShow, topic_id: str) -> bool:
    return topic_id in (item.episode.topic_ids or []) or topic_id in item.show.topic_ids
