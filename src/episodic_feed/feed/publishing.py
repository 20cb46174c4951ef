"""Creator flow: draft creation, episode numbering and publishing."""

from __future__ import annotations

import logging
from typing import Any

from episodic_feed.config import settings
from episodic_feed.feed.context import FeedContext
from episodic_feed.feed.resolver import get_show_episodes
from episodic_feed.feed.shows import resolve_show_by_id
from episodic_feed.models.schemas import (
    DraftEpisode,
    EpisodeKind,
    EpisodeWithShow,
    PublishEpisodeInput,
    PublishedEpisode,
    PublishStatus,
    Show,
)
from episodic_feed.tools.ids import make_id, published_episode_id, to_iso
from episodic_feed.tools.normalization import is_trailer

logger = logging.getLogger(__name__)


async def next_episode_number(ctx: FeedContext, show_id: str, season_number: int) -> int:
    """One past the highest non-trailer number in the season, across published episodes and drafts."""
    published = [
        item.episode.episode_number or 0
        for item in await get_show_episodes(ctx, show_id)
        if item.episode.season_number == season_number and not is_trailer(item.episode)
    ]
    drafted = [
        draft.episode_number
        for draft in ctx.store.get_draft_episodes_by_show_id(show_id)
        if draft.season_number == season_number and draft.episode_type != EpisodeKind.TRAILER
    ]
    return max(max(published, default=0), max(drafted, default=0)) + 1


async def create_draft(
    ctx: FeedContext,
    show_id: str,
    title: str,
    season_number: int = 1,
    episode_type: EpisodeKind = EpisodeKind.EPISODE,
    **fields: Any,
) -> DraftEpisode:
    """Start a new draft numbered after everything already in the season."""
    draft = DraftEpisode(
        id=make_id("draft", ctx.clock),
        show_id=show_id,
        title=title,
        season_number=season_number,
        episode_number=await next_episode_number(ctx, show_id, season_number),
        episode_type=episode_type,
        **fields,
    )
    return ctx.store.add_draft_episode(draft)


async def _resolve_target_show(ctx: FeedContext, request: PublishEpisodeInput) -> Show:
    resolved = await resolve_show_by_id(ctx, request.show_id)
    if resolved is not None:
        return resolved.show
    return Show(
        id=request.show_id,
        title=request.show_title or ctx.default_show_title,
        creator_id=ctx.local_creator_id,
        created_at_iso=to_iso(ctx.clock()),
    )


async def _episode_numbering(
    ctx: FeedContext,
    request: PublishEpisodeInput,
    draft: DraftEpisode | None,
    season_number: int,
) -> tuple[int, int | None]:
    """Return (episode_number, trailer_for_episode_number)."""
    if request.episode_type == EpisodeKind.TRAILER:
        if request.trailer_for_episode_number is not None:
            return 0, request.trailer_for_episode_number
        return 0, draft.episode_number if draft else 1
    if request.episode_number is not None:
        return request.episode_number, None
    if draft is not None:
        return draft.episode_number, None
    return await next_episode_number(ctx, request.show_id, season_number), None


async def publish_episode(ctx: FeedContext, request: PublishEpisodeInput) -> EpisodeWithShow:
    """Publish an episode or trailer and return it as a feed record.

    The episode id is derived from show, number and season, so publishing the
    same slot twice returns the existing record instead of a duplicate.
    """
    draft = ctx.store.get_draft_episode_by_id(request.draft_id) if request.draft_id else None
    if request.draft_id and draft is None:
        logger.debug(f"Publishing without draft {request.draft_id}: not found")

    season_number = request.season_number
    if season_number is None:
        season_number = draft.season_number if draft else 1
    episode_number, trailer_for = await _episode_numbering(ctx, request, draft, season_number)
    episode_id = published_episode_id(request.show_id, episode_number, season_number)

    existing = ctx.store.get_published_episode_by_id(episode_id)
    if existing is not None:
        logger.info(f"Episode {episode_id} already published; returning existing record")
        show = ctx.store.published_shows.get(existing.show_id) or await _resolve_target_show(ctx, request)
        return EpisodeWithShow(episode=existing, show=show)

    show = await _resolve_target_show(ctx, request)
    now = ctx.clock()
    episode = PublishedEpisode(
        id=episode_id,
        show_id=show.id,
        episode_number=episode_number,
        season_number=season_number,
        title=request.title,
        video_url=request.video_url or settings.default_video_url,
        duration=request.duration if request.duration is not None else settings.default_duration_seconds,
        created_at=now,
        published_at=now,
        trailer_for_episode_number=trailer_for,
        kind=request.episode_type,
        status=PublishStatus.PUBLISHED,
    )
    item = EpisodeWithShow(episode=episode, show=show)

    ctx.store.add_published_episode(episode, show)
    ctx.store.add_local_published_episode(show.id, item)
    if draft is not None:
        ctx.store.remove_draft_episode(draft.id)
    await ctx.store.save()

    logger.info(
        f"Published {request.episode_type.value} {episode_id} as S{season_number}E{episode_number} of {show.id}"
    )
    return item
