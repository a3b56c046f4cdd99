"""
Feed synchronization: the per-feed worker and the cycle that runs one
worker per configured feed.
"""

from podcast_dl.sync.orchestrator import CycleResult, run_cycle
from podcast_dl.sync.worker import SyncOutcome, SyncResult, SyncStep, sync_feed

__all__ = [
    "CycleResult",
    "run_cycle",
    "SyncOutcome",
    "SyncResult",
    "SyncStep",
    "sync_feed",
]
