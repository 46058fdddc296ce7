"""Shared utilities: datetime and generators."""

from dataroom.shared.utils.datetime import ensure_utc, from_timestamp_utc, utc_now
from dataroom.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "from_timestamp_utc",
]
