"""
Crawl Generators
================

Path and traversal generation over a CrawlDungeon.

PathGenerator
    Depth-first backtracking search for one path (first door that works wins) or
    for every simple path between two rooms. Door locks are ignored.

TraversalGenerator
    Walks a source path and, whenever the next door's lock is not aligned,
    inserts a "departing" detour to the room holding the required event and
    a "returning" detour back. Detours are traversals themselves, so they are
    generated recursively.

All search state lives on the generator instances; separate crawl sessions
never share it.
"""

from typing import Iterator, Optional

from delve.config import MAX_DEPTH, MAX_LENGTH
from delve.core.schema import LockSpec
from delve.crawl.dungeon import CrawlDoor, CrawlDungeon, CrawlRoom
from delve.crawl.errors import EventTrap, PathNotFound, TraversalTooDeep, TraversalTooLong
from delve.crawl.path import GenerationRecord, Path, PathStep, Traversal, TraversalKind


# =============================================================================
# Path Generator
# =============================================================================


class PathGenerator:
    """
    Builds paths between a start and an end room.

    A mapping of room ids to lock specs can be passed to either search; the
    matching spec is attached to the step for that room, marking events to
    set when a traversal arrives there.

    Example
    -------
    >>> gen = PathGenerator(crawl_dungeon, start_id=0, end_id=2)
    >>> gen.make_single_path().room_ids
    [0, 1, 2]
    """

    def __init__(self, dungeon: CrawlDungeon, start_id: int, end_id: int):
        self.dungeon = dungeon
        self.assign_start_end(start_id, end_id)

        self._sequence: list[PathStep] = []
        self._completed: list[Path] = []
        self._visited: list[bool] = []
        self._mutations: dict[int, LockSpec] = {}

    def assign_start_end(self, start_id: int, end_id: int) -> None:
        self.start_id = start_id
        self.end_id = end_id

    def _begin(self, mutations: Optional[dict[int, LockSpec]]) -> None:
        """Reset per-search state."""
        self._sequence = []
        self._completed = []
        self._visited = [False] * len(self.dungeon.rooms)
        self._mutations = dict(mutations or {})

    def _visit(self, room: CrawlRoom) -> bool:
        """Mark a room visited, returning whether it already was."""
        seen = self._visited[room.id]
        self._visited[room.id] = True
        return seen

    def _enter(self, room: CrawlRoom, door: Optional[CrawlDoor]) -> Iterator[CrawlDoor]:
        """Append a step for `room` and return an iterator over its doors."""
        self._sequence.append(PathStep(room, door, self._mutations.get(room.id)))
        return iter(room.doors)

    # -------------------------------------------------------------------------
    # Single paths
    # -------------------------------------------------------------------------

    def make_single_path(self, mutations: Optional[dict[int, LockSpec]] = None) -> Path:
        """
        Find one path from the start room to the end room.

        Raises
        ------
        PathNotFound
            If the end room cannot be reached.
        """
        self._begin(mutations)

        if not self._search_single(self.dungeon.room_at(self.start_id)):
            raise PathNotFound(self.start_id, self.end_id)

        return Path(self._sequence)

    def _search_single(self, start: CrawlRoom) -> bool:
        # One door iterator per room on the path; rooms stay visited for the
        # whole search, even after backtracking
        self._visit(start)
        frames = [self._enter(start, None)]
        if start.id == self.end_id:
            return True

        while frames:
            door = next(frames[-1], None)
            if door is None:
                # Dead end
                frames.pop()
                self._sequence.pop()
                continue

            room = door.dest_room
            if self._visit(room):
                continue

            frames.append(self._enter(room, door))
            if room.id == self.end_id:
                return True

        return False

    # -------------------------------------------------------------------------
    # Multiple paths
    # -------------------------------------------------------------------------

    def make_paths(self, mutations: Optional[dict[int, LockSpec]] = None) -> list[Path]:
        """
        Find every simple path from the start room to the end room.

        Exhaustive and potentially exponential in the number of rooms.

        Raises
        ------
        PathNotFound
            If no path exists.
        """
        self._begin(mutations)

        self._search_multi(self.dungeon.room_at(self.start_id))

        if not self._completed:
            raise PathNotFound(self.start_id, self.end_id)

        return self._completed

    def _search_multi(self, start: CrawlRoom) -> None:
        self._visit(start)
        frames = [self._enter(start, None)]
        if start.id == self.end_id:
            self._completed.append(Path(self._sequence))

        while frames:
            door = next(frames[-1], None)
            if door is None:
                # Paths may overlap, so the room is released on the way back
                frames.pop()
                self._visited[self._sequence.pop().room.id] = False
                continue

            room = door.dest_room
            if self._visit(room):
                continue

            frames.append(self._enter(room, door))
            if room.id == self.end_id:
                self._completed.append(Path(self._sequence))


# =============================================================================
# Traversal Generator
# =============================================================================


class TraversalGenerator:
    """
    Turns a source path into a walkable traversal.

    Generation alternates between two states:
    - progression: step through the next door, or insert a departing detour
      when its lock spec is not aligned;
    - redirection: at the destination, finish; a departing detour first
      appends a returning detour back to where it began.

    Every sub-path request is logged for the duration of a top-level
    `make_traversal` call. Requesting the same departing sub-path twice means
    the walker is trapped in a loop of events, and EventTrap is raised.

    Event states are mutated in the crawl dungeon as the walk is simulated
    and are not rolled back on failure.
    """

    def __init__(
        self,
        dungeon: CrawlDungeon,
        path_generator: Optional[PathGenerator] = None,
        max_depth: int = MAX_DEPTH,
        max_length: int = MAX_LENGTH,
    ):
        self.dungeon = dungeon
        self.path_generator = path_generator or PathGenerator(
            dungeon, dungeon.entrance, dungeon.exit
        )
        self.max_depth = max_depth
        self.max_length = max_length

        self._depth = 0
        self._path_requests: list[Path] = []
        self._records: list[GenerationRecord] = []

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def path_requests(self) -> list[Path]:
        return list(self._path_requests)

    def make_traversal(self, path: Path, kind: TraversalKind = TraversalKind.SOURCE) -> Traversal:
        """
        Generate a complete traversal of `path`.

        Raises
        ------
        PathNotFound
            If a detour route cannot be fabricated.
        EventTrap
            If the same detour is requested twice.
        TraversalTooDeep / TraversalTooLong
            If the depth or length bound is exceeded.
        """
        self._depth = 0
        self._path_requests = []
        self._records = []

        result = self.make_sub_traversal(path.copy(), kind)
        return Traversal(result, kind, self._records)

    def make_sub_traversal(self, path: Path, kind: TraversalKind) -> Path:
        """
        Step along `path` until its destination, inserting detours in place.

        Returns the same Path object, extended with the detours.
        """
        self._depth += 1
        try:
            if self._depth > self.max_depth:
                raise TraversalTooDeep(self._depth, self.max_depth)

            start_id, dest_id = path.start_end_ids()
            index = 0

            while True:
                if len(path) > self.max_length:
                    raise TraversalTooLong(len(path), self.max_length)

                step = path[index]
                self.dungeon.apply_lock_spec(step.lock)

                if step.room.id == dest_id:
                    self._on_redirection(path, index, kind, start_id)
                    return path

                index = self._on_progression(path, index)
        finally:
            self._depth -= 1

    def _on_progression(self, path: Path, index: int) -> int:
        """Advance through the next door, or detour to unlock it first."""
        door = path[index + 1].door
        spec = door.lock.spec

        if self.dungeon.is_aligned(spec):
            return index + 1

        event_id, state = self.dungeon.unaligned_pairs(spec)[0]
        target = self.dungeon.room_holding_event(event_id)

        return self._append_new_traversal(
            path,
            index,
            start_id=path[index].room.id,
            end_id=target.id,
            kind=TraversalKind.DEPARTING,
            mutations={target.id: LockSpec.of((event_id, state))},
        )

    def _on_redirection(self, path: Path, index: int, kind: TraversalKind, start_id: int) -> None:
        """At the destination; a departure must find its way back."""
        if kind is TraversalKind.DEPARTING:
            self._append_new_traversal(
                path,
                index,
                start_id=path[index].room.id,
                end_id=start_id,
                kind=TraversalKind.RETURNING,
            )

    def _append_new_traversal(
        self,
        path: Path,
        index: int,
        start_id: int,
        end_id: int,
        kind: TraversalKind,
        mutations: Optional[dict[int, LockSpec]] = None,
    ) -> int:
        """
        Fabricate and traverse a sub-path, splicing it in after `index`.

        Returns the index of the last inserted step, which is back in a room
        the walker can continue from.
        """
        self.path_generator.assign_start_end(start_id, end_id)
        sub_path = self.path_generator.make_single_path(mutations)

        # Returning paths are not logged: two detours into the same room share one
        if kind is TraversalKind.DEPARTING:
            self._update_path_requests(sub_path)

        record = GenerationRecord(
            kind=kind,
            start_id=start_id,
            end_id=end_id,
            depth=self._depth,
            inserted_at=index + 1,
            mutations={room_id: list(spec.pairs) for room_id, spec in (mutations or {}).items()},
        )
        self._records.append(record)

        sub_traversal = self.make_sub_traversal(sub_path, kind)

        # The first step repeats the current room; keep it only if it sets events
        inserted = sub_traversal.steps
        if inserted[0].lock_trivial:
            inserted = inserted[1:]

        path.insert(index + 1, Path(inserted))
        record.length = len(inserted)

        return index + len(inserted)

    def _update_path_requests(self, path: Path) -> None:
        """Log a sub-path request, raising EventTrap on an exact repeat."""
        if any(previous == path for previous in self._path_requests):
            raise EventTrap(*path.start_end_ids())
        self._path_requests.append(path)
