"""
Utility functions for name normalization, digit sanitizing and timestamps.
"""
import re
from datetime import datetime, timezone
from typing import Optional

import pytz

from .settings import settings


def normalize_name(name: Optional[str]) -> str:
    """Identity key for product and member names: trimmed and case-folded."""
    return (name or "").strip().casefold()


def digits_only(raw: Optional[str]) -> str:
    """Strip everything that is not a digit."""
    return re.sub(r'\D', '', raw or "")


def now_local() -> datetime:
    """Current time in the configured store timezone."""
    tz = pytz.timezone(settings.TIMEZONE)
    return datetime.now(timezone.utc).astimezone(tz)


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)
