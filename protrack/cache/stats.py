"""
Client cache statistics tracking.
"""
import logging
from datetime import datetime
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class CacheStats:
    """Track cache mutations, cascades and loads."""

    def __init__(self):
        self.reset()

    def reset(self):
        """Reset statistics counters."""
        self.adds = 0
        self.updates = 0
        self.update_misses = 0
        self.removes = 0
        self.cascaded_updates = 0
        self.cascaded_removals = 0
        self.loads = 0
        self.failed_loads = 0
        self.last_loaded_at: Optional[datetime] = None

    def record_add(self):
        self.adds += 1

    def record_update(self, found: bool, cascaded: int = 0):
        """Record an update; a miss is an update whose id was not cached."""
        if found:
            self.updates += 1
        else:
            self.update_misses += 1
        self.cascaded_updates += cascaded

    def record_remove(self, cascaded: int = 0):
        self.removes += 1
        self.cascaded_removals += cascaded

    def record_load(self, success: bool = True):
        if success:
            self.loads += 1
            self.last_loaded_at = datetime.now()
        else:
            self.failed_loads += 1

    def get_summary(self) -> Dict[str, Any]:
        """
        Get statistics summary.

        Returns:
            Dictionary with every counter and the last load time (ISO format)
        """
        return {
            "adds": self.adds,
            "updates": self.updates,
            "update_misses": self.update_misses,
            "removes": self.removes,
            "cascaded_updates": self.cascaded_updates,
            "cascaded_removals": self.cascaded_removals,
            "loads": self.loads,
            "failed_loads": self.failed_loads,
            "last_loaded_at": self.last_loaded_at.isoformat() if self.last_loaded_at else None,
        }
