"""Application state handed to every resolver function."""

from __future__ import annotations

from dataclasses import dataclass, field

from episodic_feed.config import settings
from episodic_feed.services.catalog import Catalog
from episodic_feed.services.preferences import FollowStore, VisibilityStore
from episodic_feed.services.publication_store import PublicationStore
from episodic_feed.tools.ids import Clock, utc_now


@dataclass
class FeedContext:
    """Data sources the resolvers read from.

    Resolvers never hold state of their own. Store mutations must happen from a
    single task at a time; the stores are not built for concurrent writers.
    """

    catalog: Catalog
    store: PublicationStore
    visibility: VisibilityStore | None = None
    follows: FollowStore | None = None
    clock: Clock = utc_now
    local_creator_id: str = field(default_factory=lambda: settings.local_creator_id)
    default_show_title: str = field(default_factory=lambda: settings.default_show_title)
