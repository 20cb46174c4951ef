from datetime import datetime, timedelta, timezone

import pytest

from episodic_feed.feed import FeedContext
from episodic_feed.models.schemas import (
    EpisodeKind,
    EpisodeWithShow,
    PublishedEpisode,
    PublishStatus,
    Show,
)
from episodic_feed.services.catalog import MockCatalog
from episodic_feed.services.kv_store import InMemoryStore
from episodic_feed.services.preferences import FollowStore, VisibilityStore
from episodic_feed.services.publication_store import PublicationStore

START = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class TickingClock:
    """Advances one second per reading so successive stamps differ."""

    def __init__(self, start: datetime = START) -> None:
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def kv() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def store(kv: InMemoryStore, clock: TickingClock) -> PublicationStore:
    return PublicationStore(kv=kv, clock=clock)


@pytest.fixture
def ctx(kv: InMemoryStore, store: PublicationStore, clock: TickingClock) -> FeedContext:
    return FeedContext(
        catalog=MockCatalog(),
        store=store,
        visibility=VisibilityStore(kv=kv),
        follows=FollowStore(kv=kv),
        clock=clock,
    )


def make_published_item(
    show_id: str,
    episode_id: str,
    episode_number: int = 1,
    season_number: int = 1,
    title: str = "Episode",
    kind: EpisodeKind = EpisodeKind.EPISODE,
    status: PublishStatus = PublishStatus.PUBLISHED,
    show_title: str = "Local Show",
    show_topic_ids: list[str] | None = None,
) -> EpisodeWithShow:
    episode = PublishedEpisode(
        id=episode_id,
        show_id=show_id,
        episode_number=episode_number,
        season_number=season_number,
        title=title,
        video_url="mock-url-local",
        duration=30,
        created_at=START,
        published_at=START if status == PublishStatus.PUBLISHED else None,
        kind=kind,
        status=status,
    )
    show = Show(id=show_id, title=show_title, creator_id="local-creator", topic_ids=show_topic_ids or [])
    return EpisodeWithShow(episode=episode, show=show)


@pytest.fixture
def published_item():
    return make_published_item
