"""Cache entry domain entity."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    """A cached value paired with its absolute expiry instant.

    Attributes:
        value: The cached tree, statistics or unit context
        expires_at: Unix timestamp after which the entry is no longer served
    """

    value: Any
    expires_at: float

    def is_valid(self, now: float) -> bool:
        """Return True while ``now`` is strictly before the expiry instant."""
        return now < self.expires_at
