"""
Platform primitives for crawl run identity and replay.
"""

from delve.platform.replay import CrawlRun, ReplayStore, deterministic_run_id

__all__ = [
    "CrawlRun",
    "ReplayStore",
    "deterministic_run_id",
]
