"""Record id and timestamp helpers."""

from __future__ import annotations

import secrets
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat()


def make_id(prefix: str, clock: Clock = utc_now) -> str:
    """``{prefix}-{epoch millis}-{6 hex chars}``, e.g. ``draft-1736000000000-a1b2c3``."""
    millis = int(clock().timestamp() * 1000)
    return f"{prefix}-{millis}-{secrets.token_hex(3)}"


def published_episode_id(show_id: str, episode_number: int, season_number: int) -> str:
    """Deterministic id for a published episode; republishing maps to the same id."""
    return f"pub-{show_id}-{episode_number}-{season_number}"
