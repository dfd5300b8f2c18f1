"""
Crawler errors raised during path fabrication and traversal generation.
"""


class CrawlerError(Exception):
    """Base class for errors raised in the context of a crawl."""

    code: str = "crawler_error"
    fatal: bool = False


class PathNotFound(CrawlerError):
    """No route exists between two rooms."""

    code = "path_not_found"

    def __init__(self, start_id: int, end_id: int):
        self.start_id = start_id
        self.end_id = end_id
        super().__init__(
            f"Path Fabrication: Could not fabricate a path between rooms "
            f"{start_id} and {end_id}"
        )


class EventTrap(CrawlerError):
    """
    The same sub-path was requested twice within one traversal.

    Generation would loop forever, so the dungeon is unsolvable by this
    algorithm in its current event configuration.
    """

    code = "event_trap"

    def __init__(self, start_id: int, end_id: int):
        self.start_id = start_id
        self.end_id = end_id
        super().__init__(
            f"Event Trap: path between rooms {start_id} and {end_id} "
            f"was requested twice"
        )


class TraversalTooDeep(CrawlerError):
    """Nested sub-traversals exceeded the depth bound."""

    code = "traversal_too_deep"
    fatal = True

    def __init__(self, depth: int, max_depth: int):
        self.depth = depth
        self.max_depth = max_depth
        super().__init__(f"Traversal nesting depth {depth} exceeds maximum {max_depth}")


class TraversalTooLong(CrawlerError):
    """A traversal path grew beyond the length bound."""

    code = "traversal_too_long"
    fatal = True

    def __init__(self, length: int, max_length: int):
        self.length = length
        self.max_length = max_length
        super().__init__(f"Traversal length {length} exceeds maximum {max_length}")
