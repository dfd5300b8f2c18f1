"""
Delve Crawl Package
===================

Crawl sessions over a dungeon: live event state, path search, and
traversal generation with detours for locked doors.
"""

from delve.crawl.dungeon import CrawlDoor, CrawlDungeon, CrawlLS, CrawlRoom
from delve.crawl.errors import (
    CrawlerError,
    EventTrap,
    PathNotFound,
    TraversalTooDeep,
    TraversalTooLong,
)
from delve.crawl.path import GenerationRecord, Path, PathStep, Traversal, TraversalKind
from delve.crawl.generators import MAX_DEPTH, MAX_LENGTH, PathGenerator, TraversalGenerator
from delve.crawl.crawler import CrawlResult, DungeonCrawler

__all__ = [
    # Context
    "CrawlDungeon",
    "CrawlRoom",
    "CrawlDoor",
    "CrawlLS",
    # Paths
    "Path",
    "PathStep",
    "Traversal",
    "TraversalKind",
    "GenerationRecord",
    # Generators
    "PathGenerator",
    "TraversalGenerator",
    "MAX_DEPTH",
    "MAX_LENGTH",
    # Driver
    "DungeonCrawler",
    "CrawlResult",
    # Errors
    "CrawlerError",
    "PathNotFound",
    "EventTrap",
    "TraversalTooDeep",
    "TraversalTooLong",
]
