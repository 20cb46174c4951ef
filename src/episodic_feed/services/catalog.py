"""Static catalog of shows and episodes, keyed by feed type.

Stands in for a content backend. Each feed type maps to a fixed table; the
``continue`` feed collapses to one resume item per show.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Protocol

from episodic_feed.models.schemas import (
    Episode,
    EpisodeWithShow,
    FeedType,
    Show,
    Special,
    SpecialKind,
    Topic,
)
from episodic_feed.tools.normalization import (
    coerce_feed_type,
    normalize_episode_with_show,
    select_resume_items,
)

logger = logging.getLogger(__name__)

CATALOG_EPOCH = datetime(2025, 1, 1, tzinfo=timezone.utc)

TOPICS = {
    "topic1": Topic(id="topic1", name="Adventure"),
    "topic2": Topic(id="topic2", name="Comedy"),
    "topic3": Topic(id="topic3", name="Drama"),
    "topic4": Topic(id="topic4", name="Community"),
}

SHOWS = {
    "show1": Show(id="show1", title="New Adventures", creator_id="creator1", topic_ids=["topic1"]),
    "show2": Show(id="show2", title="Fresh Comedy", creator_id="creator2", topic_ids=["topic2"]),
    "show3": Show(id="show3", title="Ongoing Series", creator_id="creator3", topic_ids=["topic3"]),
    "show4": Show(id="show4", title="Continuing Story", creator_id="creator4", topic_ids=["topic3"]),
    "show5": Show(id="show5", title="Brand New Show", creator_id="creator5", topic_ids=["topic2"]),
    "show6": Show(id="show6", title="Debut Series", creator_id="creator6", topic_ids=["topic1"]),
    "show7": Show(id="show7", title="Local Tales", creator_id="creator7", topic_ids=["topic4"]),
    "show8": Show(id="show8", title="Neighborhood Stories", creator_id="creator8", topic_ids=["topic4"]),
}

_SHOW3_TITLES = [
    "Beginning",
    "Development",
    "Twist",
    "Rising Action",
    "Midpoint",
    "Complications",
    "Challenges",
    "Turning Point",
    "Climax Build",
    "Peak Moment",
    "Resolution",
    "Finale",
]

# (episode id, show id, season, episode, title, duration)
_EpisodeRow = tuple[str, str, Optional[int], int, str, int]

_SHOW3_ROWS: list[_EpisodeRow] = [
    (f"ep3-{n}", "show3", 1, n, f"Episode {n}: {title}", 280)
    for n, title in enumerate(_SHOW3_TITLES, start=1)
]

FEED_TABLES: dict[FeedType, tuple[list[str], list[_EpisodeRow]]] = {
    FeedType.NEW: (
        ["show1", "show2"],
        [
            ("ep1", "show1", 1, 1, "Latest Episode", 300),
            ("ep3", "show1", 1, 2, "Next Adventure", 280),
            ("ep2", "show2", None, 1, "Hot Off the Press", 250),
        ],
    ),
    FeedType.CONTINUE: (
        ["show3", "show4"],
        _SHOW3_ROWS + [("ep4", "show4", 1, 3, "Continue Watching 2", 320)],
    ),
    FeedType.LIBRARY: (["show3"], _SHOW3_ROWS[:11]),
    FeedType.NEW_SHOWS_ONLY: (
        ["show5", "show6"],
        [
            ("ep5", "show5", None, 1, "Pilot", 350),
            ("ep6", "show6", None, 1, "First Episode", 270),
        ],
    ),
    FeedType.LOCAL: (
        ["show7", "show8"],
        [
            ("ep7", "show7", None, 1, "Local Episode 1", 290),
            ("ep8", "show8", None, 2, "Local Episode 2", 310),
        ],
    ),
}

# Specials are hardcoded for the "new" feed only.
NEW_FEED_SPECIALS = [
    Special(
        special_id="special1",
        title="Behind the Scenes of New Adventures",
        kind=SpecialKind.BTS,
        attached_show_ids=["show1"],
    ),
    Special(
        special_id="special2",
        title="Q&A with Creators",
        kind=SpecialKind.QNA,
        attached_topic_ids=["topic1"],
        attached_show_ids=["show1"],
    ),
]


class Catalog(Protocol):
    """Anything that can serve catalog feeds."""

    async def get_feed(self, feed_type: FeedType | str) -> list[EpisodeWithShow]: ...


@dataclass
class MockCatalog:
    """Serves the bundled static tables."""

    epoch: datetime = CATALOG_EPOCH

    async def get_feed(self, feed_type: FeedType | str) -> list[EpisodeWithShow]:
        resolved = coerce_feed_type(feed_type)
        if resolved is None:
            logger.debug(f"Unknown feed type {feed_type!r}, returning empty feed")
            return []

        show_ids, rows = FEED_TABLES[resolved]
        shows = {show_id: SHOWS[show_id] for show_id in show_ids}
        items = [
            EpisodeWithShow(episode=self._build_episode(row), show=shows[row[1]].model_copy(deep=True))
            for row in rows
        ]
        if resolved == FeedType.CONTINUE:
            items = select_resume_items(items)
        return [normalize_episode_with_show(item) for item in items]

    def _build_episode(self, row: _EpisodeRow) -> Episode:
        episode_id, show_id, season, number, title, duration = row
        return Episode(
            id=episode_id,
            show_id=show_id,
            season_number=season,
            episode_number=number,
            title=title,
            video_url=f"mock-url-{episode_id.removeprefix('ep')}",
            duration=duration,
            created_at=self.epoch,
            published_at=self.epoch,
        )


def get_specials(feed_type: FeedType | str) -> list[Special]:
    if coerce_feed_type(feed_type) == FeedType.NEW:
        return [special.model_copy(deep=True) for special in NEW_FEED_SPECIALS]
    return []


def get_topic_by_id(topic_id: str) -> Topic | None:
    return TOPICS.get(topic_id)
