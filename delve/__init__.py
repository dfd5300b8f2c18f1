"""
Delve: puzzle-dungeon traversal engine.

Subpackages:
- delve.core: dungeon graph model and networkx projection
- delve.crawl: crawl sessions, path search, traversal generation
- delve.platform: crawl run identity and replay
"""

__version__ = "0.1.0"
