"""Command-line entry point for inspecting and publishing to the episodic feed."""

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel

from episodic_feed.config import settings
from episodic_feed.feed import (
    FeedContext,
    create_draft,
    get_episodes_by_topic,
    get_feed,
    get_home_feed,
    get_mixed_feed,
    get_show_timeline,
    get_shows_by_topic,
    publish_episode,
    resolve_show_by_id,
)
from episodic_feed.models.schemas import EpisodeKind, FeedMode, FeedType, PublishEpisodeInput
from episodic_feed.services.catalog import Catalog, MockCatalog
from episodic_feed.services.kv_store import JsonFileStore
from episodic_feed.services.preferences import FollowStore, VisibilityStore
from episodic_feed.services.publication_store import PublicationStore
from episodic_feed.services.remote_catalog import RemoteCatalog

logger = structlog.get_logger()


def _resolve_log_level(level_name: str) -> int:
    return getattr(logging, level_name.upper(), logging.INFO)


async def build_context(store_dir: str | Path | None = None) -> FeedContext:
    """Wire the catalog and hydrated local stores from settings."""
    kv = JsonFileStore(Path(store_dir or settings.store_dir))

    catalog: Catalog
    if settings.catalog_base_url:
        catalog = RemoteCatalog(
            base_url=settings.catalog_base_url,
            timeout_seconds=settings.catalog_timeout_seconds,
        )
    else:
        catalog = MockCatalog()

    store = PublicationStore(kv=kv)
    visibility = VisibilityStore(kv=kv)
    follows = FollowStore(kv=kv)
    await asyncio.gather(store.hydrate(), visibility.hydrate(), follows.hydrate())

    return FeedContext(catalog=catalog, store=store, visibility=visibility, follows=follows)


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_to_jsonable(entry) for entry in value]
    return value


async def run_command(args: argparse.Namespace) -> Any:
    ctx = await build_context(args.store_dir)

    if args.command == "feed":
        return await get_feed(ctx, args.feed_type)
    if args.command == "mixed":
        return await get_mixed_feed(ctx, args.feed_type)
    if args.command == "home":
        return await get_home_feed(ctx, args.feed_type, FeedMode(args.mode))
    if args.command == "show":
        return await resolve_show_by_id(ctx, args.show_id)
    if args.command == "episodes":
        return await get_show_timeline(ctx, args.show_id)
    if args.command == "topic":
        shows = await get_shows_by_topic(ctx, args.topic_id)
        episodes = await get_episodes_by_topic(ctx, args.topic_id)
        return {"shows": _to_jsonable(shows), "episodes": _to_jsonable(episodes)}
    if args.command == "create-show":
        show = ctx.store.add_show(args.show_id, args.title, args.topic_id, args.topic_name)
        await ctx.store.save()
        return show
    if args.command == "draft":
        draft = await create_draft(
            ctx,
            args.show_id,
            args.title,
            season_number=args.season,
            episode_type=EpisodeKind(args.episode_type),
        )
        await ctx.store.save()
        return draft
    if args.command == "publish":
        request = PublishEpisodeInput(
            show_id=args.show_id,
            title=args.title,
            season_number=args.season,
            episode_number=args.episode,
            episode_type=EpisodeKind(args.episode_type),
            show_title=args.show_title,
            draft_id=args.draft_id,
        )
        return await publish_episode(ctx, request)
    raise ValueError(f"Unknown command: {args.command}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Episodic feed resolver")
    parser.add_argument("--store-dir", default=None, help="Directory for persisted local state")
    sub = parser.add_subparsers(dest="command", required=True)

    feed_types = [feed_type.value for feed_type in FeedType]
    for name, help_text in (("feed", "Raw catalog feed"), ("mixed", "Public feed with specials")):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("feed_type", choices=feed_types)

    home = sub.add_parser("home", help="Home feed including your own shows")
    home.add_argument("feed_type", choices=feed_types, nargs="?", default=FeedType.NEW.value)
    home.add_argument("--mode", choices=[mode.value for mode in FeedMode], default=FeedMode.DISCOVERY.value)

    show = sub.add_parser("show", help="Resolve a show")
    show.add_argument("show_id")

    episodes = sub.add_parser("episodes", help="Show timeline including drafts")
    episodes.add_argument("show_id")

    topic = sub.add_parser("topic", help="Shows and episodes for a topic")
    topic.add_argument("topic_id")

    create_show = sub.add_parser("create-show", help="Create a local show")
    create_show.add_argument("show_id")
    create_show.add_argument("title")
    create_show.add_argument("--topic-id", default=None)
    create_show.add_argument("--topic-name", default=None)

    kinds = [kind.value for kind in EpisodeKind]
    draft = sub.add_parser("draft", help="Start a draft episode")
    draft.add_argument("show_id")
    draft.add_argument("title")
    draft.add_argument("--season", type=int, default=1)
    draft.add_argument("--episode-type", choices=kinds, default=EpisodeKind.EPISODE.value)

    publish = sub.add_parser("publish", help="Publish an episode or trailer")
    publish.add_argument("show_id")
    publish.add_argument("title")
    publish.add_argument("--season", type=int, default=None)
    publish.add_argument("--episode", type=int, default=None)
    publish.add_argument("--episode-type", choices=kinds, default=EpisodeKind.EPISODE.value)
    publish.add_argument("--show-title", default=None)
    publish.add_argument("--draft-id", default=None)

    return parser


def main() -> None:
    """Main entry point."""
    args = build_parser().parse_args()

    logging.basicConfig(level=_resolve_log_level(settings.log_level))
    logging.getLogger("httpx").setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger.info("Episodic feed command", command=args.command, debug=settings.debug)
    result = asyncio.run(run_command(args))
    print(json.dumps(_to_jsonable(result), indent=2))


if __name__ == "__main__":
    main()
