"""Normalization, dedup and ordering helpers for feed records."""

from __future__ import annotations

from typing import Callable, Hashable, Iterable, TypeVar

from episodic_feed.models.schemas import (
    Episode,
    EpisodeKind,
    EpisodeWithShow,
    FeedType,
    PublishStatus,
    Special,
)

T = TypeVar("T")

DEFAULT_SEASON_NUMBER = 1
DEFAULT_EPISODE_NUMBER = 0
UNTITLED_EPISODE = "Untitled Episode"
UNKNOWN_SHOW = "Unknown Show"


def coerce_feed_type(value: FeedType | str) -> FeedType | None:
    """Return the matching FeedType, or None for values outside the closed set."""
    if isinstance(value, FeedType):
        return value
    try:
        return FeedType(value)
    except ValueError:
        return None


def normalize_episode_with_show(item: EpisodeWithShow) -> EpisodeWithShow:
    """Fill missing numbering and titles. Idempotent and non-mutating."""
    episode = item.episode.model_copy(
        update={
            "season_number": _or_default(item.episode.season_number, DEFAULT_SEASON_NUMBER),
            "episode_number": _or_default(item.episode.episode_number, DEFAULT_EPISODE_NUMBER),
            "title": item.episode.title or UNTITLED_EPISODE,
        }
    )
    show = item.show.model_copy(update={"title": item.show.title or UNKNOWN_SHOW})
    return item.model_copy(update={"episode": episode, "show": show})


def _or_default(value: int | None, default: int) -> int:
    return default if value is None else value


def dedupe_by_key(items: Iterable[T], key: Callable[[T], Hashable]) -> list[T]:
    """Keep the first occurrence of each key, preserving iteration order."""
    seen: set[Hashable] = set()
    kept: list[T] = []
    for item in items:
        item_key = key(item)
        if item_key in seen:
            continue
        seen.add(item_key)
        kept.append(item)
    return kept


def episode_key(item: EpisodeWithShow) -> str:
    return item.episode.id


def feed_item_key(item: EpisodeWithShow | Special) -> str:
    """Identity key for mixed feeds: episode id, or special id falling back to title."""
    if isinstance(item, Special):
        return item.special_id or item.title
    return item.episode.id


def is_trailer(episode: Episode) -> bool:
    return episode.kind == EpisodeKind.TRAILER or episode.episode_type == EpisodeKind.TRAILER


def is_published(episode: Episode) -> bool:
    """Local records carry an explicit status; catalog records count once they have a publish date."""
    if episode.status is not None:
        return episode.status == PublishStatus.PUBLISHED
    return episode.published_at is not None


def compare_for_resume(a: Episode, b: Episode) -> int:
    """Negative if ``a`` comes before ``b`` in (season, episode) order."""
    a_season = _or_default(a.season_number, DEFAULT_SEASON_NUMBER)
    b_season = _or_default(b.season_number, DEFAULT_SEASON_NUMBER)
    if a_season != b_season:
        return a_season - b_season
    a_episode = _or_default(a.episode_number, DEFAULT_EPISODE_NUMBER)
    b_episode = _or_default(b.episode_number, DEFAULT_EPISODE_NUMBER)
    return a_episode - b_episode


def select_resume_items(items: Iterable[EpisodeWithShow]) -> list[EpisodeWithShow]:
    """One item per show: the furthest (season, episode) wins.

    A later item replaces the kept one only when strictly greater. Output keeps
    the order in which shows were first seen.
    """
    by_show: dict[str, EpisodeWithShow] = {}
    for item in items:
        current = by_show.get(item.show.id)
        if current is None or compare_for_resume(current.episode, item.episode) < 0:
            by_show[item.show.id] = item
    return list(by_show.values())


def episode_sort_key(item: EpisodeWithShow) -> tuple[int, int, int]:
    """Trailers first, then ascending season and episode number."""
    episode = item.episode
    return (
        0 if is_trailer(episode) else 1,
        _or_default(episode.season_number, DEFAULT_SEASON_NUMBER),
        _or_default(episode.episode_number, DEFAULT_EPISODE_NUMBER),
    )
