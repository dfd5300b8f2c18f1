"""
Dungeon Crawler
===============

Top-level driver for crawling a dungeon.

The DungeonCrawler:
1. Builds a CrawlDungeon for the session
2. Fabricates a source path from the entrance to the exit
3. Generates a traversal that resolves every locked door
4. Returns a CrawlResult, recording it in a replay store if one is given

A session whose generation failed has partially-mutated event states and is
discarded; the next crawl starts from the pristine Dungeon again.
"""

from dataclasses import dataclass
from typing import Any, Optional

from delve.config import CrawlerSettings
from delve.core.graph import topology_summary
from delve.core.schema import Dungeon
from delve.crawl.dungeon import CrawlDungeon
from delve.crawl.errors import CrawlerError
from delve.crawl.generators import PathGenerator, TraversalGenerator
from delve.crawl.path import Path, Traversal, TraversalKind
from delve.platform.replay import ReplayStore, deterministic_run_id

ABORTED_CODE = "aborted"
"""Replay error code for runs ended by an exception other than a CrawlerError."""

@dataclass
class CrawlResult:
    """Outcome of a crawl."""

    run_id: str
    success: bool
    traversal: Optional[Traversal] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    fatal: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "success": self.success,
            "traversal": self.traversal.to_dict() if self.traversal is not None else None,
            "error": (
                {"code": self.error_code, "message": self.error_message, "fatal": self.fatal}
                if not self.success
                else None
            ),
        }


class DungeonCrawler:
    """
    Session driver tying the crawl context and generators together.

    Example
    -------
    ```python
    crawler = DungeonCrawler(CrawlerSettings(verbose=False))
    result = crawler.crawl(dungeon)
    if result.success:
        print(result.traversal.describe())
    ```
    """

    def __init__(
        self,
        settings: Optional[CrawlerSettings] = None,
        replay_store: Optional[ReplayStore] = None,
    ):
        self.settings = settings or CrawlerSettings()
        self.replay_store = replay_store

        self.dungeon: Optional[CrawlDungeon] = None
        self.path_generator: Optional[PathGenerator] = None
        self.traversal_generator: Optional[TraversalGenerator] = None
        self.run_id: Optional[str] = None

    def _log(self, message: str) -> None:
        if self.settings.verbose:
            print(f"[Crawler] {message}")

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    def start(self, dungeon: Dungeon) -> CrawlDungeon:
        """Begin a new crawl session over `dungeon`."""
        self.dungeon = CrawlDungeon.build(dungeon)
        self.path_generator = PathGenerator(self.dungeon, dungeon.entrance, dungeon.exit)
        self.traversal_generator = TraversalGenerator(
            self.dungeon,
            self.path_generator,
            max_depth=self.settings.max_depth,
            max_length=self.settings.max_length,
        )
        self.run_id = deterministic_run_id(
            {"dungeon": dungeon, "type": type(dungeon).__name__}
        )

        self._log(f"Started {self.run_id} on {dungeon.name or 'unnamed dungeon'!r}")
        self._log(", ".join(dungeon.size_summary()))
        return self.dungeon

    def end(self) -> None:
        """Discard the current session."""
        self.dungeon = None
        self.path_generator = None
        self.traversal_generator = None

    def _require_session(self) -> CrawlDungeon:
        if self.dungeon is None:
            raise RuntimeError("No crawl session. Call start() first.")
        return self.dungeon

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def traverse(self) -> Traversal:
        """
        Generate a traversal from the entrance to the exit.

        Raises any CrawlerError from path or traversal generation.
        """
        dungeon = self._require_session()
        self.path_generator.assign_start_end(dungeon.entrance, dungeon.exit)

        source_path = self.path_generator.make_single_path()
        self._log(f"Source path: {source_path.room_ids}")

        traversal = self.traversal_generator.make_traversal(source_path, TraversalKind.SOURCE)
        self._log(
            f"Traversal: {len(traversal)} steps, {len(traversal.records)} detours, "
            f"{len(traversal.mutation_steps())} event changes"
        )
        return traversal

    def find_paths(self) -> list[Path]:
        """Every simple path from the entrance to the exit, ignoring locks."""
        dungeon = self._require_session()
        self.path_generator.assign_start_end(dungeon.entrance, dungeon.exit)

        paths = self.path_generator.make_paths()
        self._log(f"Found {len(paths)} paths from {dungeon.entrance} to {dungeon.exit}")
        return paths

    def crawl(self, dungeon: Dungeon) -> CrawlResult:
        """
        Run a full crawl and report the outcome instead of raising.

        Only crawler errors are converted into a failed result. Anything else
        is recorded as an aborted run, the session is discarded, and the
        exception propagates.
        """
        self.start(dungeon)
        run_id = self.run_id
        if self.replay_store is not None:
            self.replay_store.start_run(run_id, dungeon.name)

        try:
            traversal = self.traverse()
        except CrawlerError as e:
            self._discard(run_id, e.code, str(e))
            return CrawlResult(
                run_id=run_id,
                success=False,
                error_code=e.code,
                error_message=str(e),
                fatal=e.fatal,
            )
        except Exception as e:
            self._discard(run_id, ABORTED_CODE, f"{type(e).__name__}: {e}")
            raise

        if self.replay_store is not None:
            self.replay_store.complete_run(
                run_id,
                traversal=traversal.to_dict(),
                rendered=traversal.describe(condensed=self.settings.condensed),
            )
        return CrawlResult(run_id=run_id, success=True, traversal=traversal)

    def _discard(self, run_id: str, code: str, message: str) -> None:
        """End a failed session and record why it failed."""
        self._log(f"Crawl failed ({code}): {message}")
        self.end()
        if self.replay_store is not None:
            self.replay_store.fail_run(run_id, code=code, message=message)

    def summary(self) -> dict[str, Any]:
        """Topology diagnostics plus the live event states of the session."""
        dungeon = self._require_session()
        return {
            "run_id": self.run_id,
            **topology_summary(dungeon.dungeon),
            "event_states": dungeon.event_states(),
        }
