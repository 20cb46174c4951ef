"""Feed resolution layer consumed by app screens."""

from episodic_feed.feed.context import FeedContext
from episodic_feed.feed.resolver import (
    get_feed,
    get_home_feed,
    get_mixed_feed,
    get_show_episodes,
    get_show_specials,
    get_show_timeline,
    get_topic_specials,
    is_show_eligible_for_public_feeds,
)
from episodic_feed.feed.shows import get_topic_by_id, resolve_show_by_id
from episodic_feed.feed.topics import get_episodes_by_topic, get_shows_by_topic
from episodic_feed.feed.publishing import create_draft, next_episode_number, publish_episode

__all__ = [
    # Context
    "FeedContext",
    # Feeds
    "get_feed",
    "get_mixed_feed",
    "get_home_feed",
    "get_show_episodes",
    "get_show_timeline",
    "get_show_specials",
    "get_topic_specials",
    "is_show_eligible_for_public_feeds",
    # Shows and topics
    "resolve_show_by_id",
    "get_topic_by_id",
    "get_shows_by_topic",
    "get_episodes_by_topic",
    # Creator flow
    "create_draft",
    "next_episode_number",
    "publish_episode",
]
