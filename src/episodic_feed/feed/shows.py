"""Resolve a show id into one canonical view across creator and curated records."""

from __future__ import annotations

import logging
from typing import Literal

from episodic_feed.feed.context import FeedContext
from episodic_feed.models.schemas import (
    CreatorShow,
    FeedType,
    ResolveDebug,
    ResolvedShow,
    Show,
    ShowSource,
    Topic,
)
from episodic_feed.services import catalog

logger = logging.getLogger(__name__)

CURATED_FEEDS = tuple(FeedType)


async def find_curated_show(
    ctx: FeedContext, show_id: str
) -> tuple[Show, Literal["catalog", "published"]] | None:
    """Catalog record first, then a show registered by a local publish."""
    for feed_type in CURATED_FEEDS:
        for item in await ctx.catalog.get_feed(feed_type):
            if item.show.id == show_id:
                return item.show, "catalog"
    published = ctx.store.published_shows.get(show_id)
    if published is not None:
        return published, "published"
    return None


def _merge(creator: CreatorShow, curated: Show) -> tuple[Show, ShowSource]:
    """Creator wins on scalars; topic fields fall back to curated when the creator's are empty."""
    topics_from = ShowSource.CREATOR if creator.topic_ids else ShowSource.CURATED
    merged = {
        **curated.model_dump(),
        **creator.model_dump(),
        "topic_ids": list(creator.topic_ids or curated.topic_ids),
        "topic_name": creator.topic_name or curated.topic_name,
    }
    return Show.model_validate(merged), topics_from


def _from_creator(ctx: FeedContext, creator: CreatorShow) -> Show:
    return Show(
        id=creator.id,
        title=creator.title,
        creator_id=ctx.local_creator_id,
        topic_ids=list(creator.topic_ids),
        topic_name=creator.topic_name,
        created_at_iso=creator.created_at_iso,
    )


async def resolve_show_by_id(ctx: FeedContext, show_id: str) -> ResolvedShow | None:
    """Three-way merge of the creator and curated records for ``show_id``.

    Returns None when neither source knows the show; callers must treat that
    as "show not found" rather than an empty show.
    """
    creator = ctx.store.get_show_by_id(show_id)
    curated_hit = await find_curated_show(ctx, show_id)
    curated, curated_from = curated_hit if curated_hit else (None, None)

    debug = ResolveDebug(
        show_id=show_id,
        has_creator=creator is not None,
        has_curated=curated is not None,
        curated_from=curated_from,
    )

    if creator is not None and curated is not None:
        show, topics_from = _merge(creator, curated)
        debug.title_from = ShowSource.CREATOR
        debug.topics_from = topics_from
        resolved = ResolvedShow(show=show, source=ShowSource.MERGED, debug=debug)
    elif creator is not None:
        debug.title_from = debug.topics_from = ShowSource.CREATOR
        resolved = ResolvedShow(show=_from_creator(ctx, creator), source=ShowSource.CREATOR, debug=debug)
    elif curated is not None:
        debug.title_from = debug.topics_from = ShowSource.CURATED
        resolved = ResolvedShow(show=curated, source=ShowSource.CURATED, debug=debug)
    else:
        logger.debug(f"Show {show_id} not found in creator or curated sources")
        return None

    logger.debug(f"Resolved show {show_id} from {resolved.source.value}")
    return resolved


def get_topic_by_id(topic_id: str) -> Topic | None:
    return catalog.get_topic_by_id(topic_id)
