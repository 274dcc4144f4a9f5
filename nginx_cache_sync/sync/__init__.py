"""
Sync Service - cache invalidation loop and its collaborators
"""

from .service import SyncService, CycleOutcome
from .marker_source import MarkerSource
from .cache_purger import CachePurger, PurgeResult

__all__ = ["SyncService", "CycleOutcome", "MarkerSource", "CachePurger", "PurgeResult"]
