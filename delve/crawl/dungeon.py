"""
Crawl Dungeon
=============

Crawl-scoped wrappers around an immutable Dungeon.

A CrawlDungeon is built once per crawl session. It owns working copies of
every event, indexed by id in `event_table`, and resolves every door's
destination into a direct room reference for recursive search.

The event table and the crawl rooms share the same Event instances: setting
a state through the table is visible from the owning room and vice versa.
The source Dungeon's events are never touched.
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional

from delve.core.schema import Dungeon, Event, LockSpec


@dataclass(eq=False)
class CrawlLS:
    """A lock spec bound to a crawl dungeon, able to check its alignment."""

    spec: LockSpec
    dungeon: "CrawlDungeon"

    @property
    def clear(self) -> bool:
        return self.spec.clear

    def aligned(self) -> bool:
        return self.dungeon.is_aligned(self.spec)

    def describe(self, mode: int = 3) -> str:
        return self.spec.describe(mode)


@dataclass(eq=False)
class CrawlDoor:
    """A door holding a direct reference to its destination crawl room."""

    dest: int
    lock: CrawlLS
    dest_room: Optional["CrawlRoom"] = None

    @property
    def lockable(self) -> bool:
        return not self.lock.clear

    @property
    def locked(self) -> bool:
        """Lockable and not currently aligned, i.e. impassable right now."""
        return self.lockable and not self.lock.aligned()

    def describe(self) -> str:
        if self.lock.clear:
            return "open door"
        return f"door of LS ({self.dest}-{self.lock.describe(1)})"


@dataclass(eq=False)
class CrawlRoom:
    """A room that knows its own id within the crawl dungeon."""

    id: int
    doors: list[CrawlDoor] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    unused: bool = False

    def has_event(self, event_id: int) -> bool:
        return any(event.id == event_id for event in self.events)

    def __repr__(self) -> str:
        return f"CrawlRoom(id={self.id}, doors={len(self.doors)}, events={len(self.events)})"


class CrawlDungeon:
    """
    Live crawl context over a validated Dungeon.

    Example
    -------
    >>> crawl = CrawlDungeon.build(dungeon)
    >>> crawl.apply_lock_spec(LockSpec.of((5, 1)))
    >>> crawl.is_aligned(LockSpec.of((5, 1)))
    True
    """

    def __init__(self, dungeon: Dungeon, rooms: list[CrawlRoom]):
        self.dungeon = dungeon
        self.rooms = rooms
        self.event_table: dict[int, Event] = {}

    @classmethod
    def build(cls, dungeon: Dungeon) -> "CrawlDungeon":
        """
        Wrap every room and door of `dungeon` and build the event table.

        Unused rooms keep their slot so room ids remain valid indices.
        """
        crawl = cls(dungeon, [])

        for room_id, room in enumerate(dungeon.rooms):
            if room.unused:
                crawl.rooms.append(CrawlRoom(id=room_id, unused=True))
                continue
            crawl.rooms.append(CrawlRoom(
                id=room_id,
                doors=[CrawlDoor(door.dest, CrawlLS(door.lock, crawl)) for door in room.doors],
                events=[event.model_copy() for event in room.events],
            ))

        crawl._finalize()
        return crawl

    def _finalize(self) -> None:
        """Build the event table, then resolve door destinations."""
        self.event_table = {}
        for room in self.iter_rooms():
            for event in room.events:
                self.event_table[event.id] = event

        for room in self.iter_rooms():
            for door in room.doors:
                door.dest_room = self.rooms[door.dest]

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self.dungeon.name

    @property
    def entrance(self) -> int:
        return self.dungeon.entrance

    @property
    def exit(self) -> int:
        return self.dungeon.exit

    def room_at(self, room_id: int) -> CrawlRoom:
        return self.rooms[room_id]

    def iter_rooms(self) -> Iterator[CrawlRoom]:
        """Iterate used rooms in sequence order."""
        for room in self.rooms:
            if not room.unused:
                yield room

    def event(self, event_id: int) -> Event:
        return self.event_table[event_id]

    def event_states(self) -> dict[int, int]:
        """Snapshot of every event's current state."""
        return {event_id: event.state for event_id, event in self.event_table.items()}

    # -------------------------------------------------------------------------
    # Event state
    # -------------------------------------------------------------------------

    def apply_lock_spec(self, spec: Optional[LockSpec]) -> None:
        """Set every referenced event to its specified state."""
        if spec is None or spec.clear:
            return
        for event_id, state in spec.pairs:
            self.event_table[event_id].set_state(state)

    def is_aligned(self, spec: Optional[LockSpec]) -> bool:
        """True if the spec is clear or every pair matches the live state."""
        if spec is None or spec.clear:
            return True
        return all(self.event_table[event_id].state == state for event_id, state in spec.pairs)

    def unaligned_pairs(self, spec: LockSpec) -> list[tuple[int, int]]:
        """Pairs of `spec` that do not hold right now, in spec order."""
        return [
            (event_id, state)
            for event_id, state in spec.pairs
            if self.event_table[event_id].state != state
        ]

    def room_holding_event(self, event_id: int) -> CrawlRoom:
        """
        Find the room that holds an event.

        Raises
        ------
        KeyError
            If no used room holds the event.
        """
        for room in self.iter_rooms():
            if room.has_event(event_id):
                return room
        raise KeyError(f"no room holds event {event_id}")

    def __repr__(self) -> str:
        return (
            f"CrawlDungeon(name={self.name!r}, rooms={len(self.rooms)}, "
            f"events={len(self.event_table)})"
        )
