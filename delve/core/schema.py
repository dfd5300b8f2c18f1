"""
Dungeon Schema
==============

Data models for the dungeon graph: rooms are nodes, doors are directed edges,
and events are the stateful objects that lock specifications refer to.

Model Types:
- Event / Item / Switch: stateful objects placed in rooms
- LockSpec: event-state pairs that must hold for a door to open
- Door: directed edge to another room, gated by a LockSpec
- Room: doors leading out plus the events held inside
- Dungeon: ordered rooms with entrance and exit ids

Dungeons are validated on construction and treated as read-only topology
afterwards. Event state only ever changes on crawl-scoped copies.
"""

from typing import Annotated, Any, Iterator, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# Events
# =============================================================================


class Event(BaseModel):
    """
    An object held by a room with a fixed number of states.

    An event takes exactly one state at a time. Doors are unlocked by
    bringing events into the states their lock specifications require.
    """

    id: int
    """Identifier, unique within a dungeon."""

    state_count: int = Field(ge=1)
    """Number of states this event can take."""

    state: int = 0
    """Current state, always in [0, state_count)."""

    model_config = ConfigDict(frozen=False)

    @model_validator(mode="after")
    def _validate_state(self) -> "Event":
        """Ensure the initial state is in range."""
        self._check_state(self.state)
        return self

    @property
    def collectable(self) -> bool:
        """Whether this event is consumed once its state is advanced."""
        return False

    def set_state(self, state: int) -> None:
        """Set the current state, rejecting values outside [0, state_count)."""
        self._check_state(state)
        self.state = state

    def _check_state(self, state: int) -> None:
        if state < 0 or state >= self.state_count:
            raise ValueError(
                f"state {state} out of range for event {self.id} "
                f"with {self.state_count} states"
            )

    def describe(self, mode: int = 0) -> str:
        """
        Event id followed by the current state for non-collectables.

        Mode 0 separates with '-', mode 1 with ':'.
        """
        if self.collectable:
            return str(self.id)
        sep = "-" if mode == 0 else ":"
        return f"{self.id}{sep}{self.state}"

    def describe_kind(self) -> str:
        """Type and id, with the state count for switches."""
        text = f"(ID {self.id}) {type(self).__name__}"
        if not self.collectable:
            text += f" of {self.state_count} states"
        return text

    def __str__(self) -> str:
        return self.describe()


class Switch(Event):
    """A repeatable event with two or more states that cannot be collected."""

    kind: Literal["switch"] = "switch"
    state_count: int = Field(default=2, ge=2)


class Item(Event):
    """A collectable two-state event such as a key."""

    kind: Literal["item"] = "item"
    state_count: int = 2

    @model_validator(mode="after")
    def _validate_two_states(self) -> "Item":
        if self.state_count != 2:
            raise ValueError(f"item {self.id} must have exactly 2 states")
        return self

    @property
    def collectable(self) -> bool:
        return True

    def collect(self) -> None:
        """Collecting an item moves it to state 1."""
        self.set_state(1)


RoomEvent = Annotated[Union[Item, Switch], Field(discriminator="kind")]


# =============================================================================
# Lock Specifications
# =============================================================================


class LockSpec(BaseModel):
    """
    Event-state pairs needed to open a door.

    A door needing key 2 collected and switch 3 pulled to state 2 carries
    LockSpec(pairs=((2, 1), (3, 2))). An empty LockSpec is "clear" and never
    restricts passage.
    """

    pairs: tuple[tuple[int, int], ...] = ()

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _validate_unique_events(self) -> "LockSpec":
        ids = [event_id for event_id, _ in self.pairs]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate event id in lock spec {list(self.pairs)}")
        return self

    @classmethod
    def of(cls, *pairs: tuple[int, int]) -> "LockSpec":
        """Shorthand constructor: LockSpec.of((5, 1), (6, 0))."""
        return cls(pairs=tuple(pairs))

    @property
    def clear(self) -> bool:
        return not self.pairs

    @property
    def event_ids(self) -> list[int]:
        return [event_id for event_id, _ in self.pairs]

    def has_event(self, event_id: int) -> bool:
        return any(eid == event_id for eid, _ in self.pairs)

    def required_state(self, event_id: int) -> Optional[int]:
        for eid, state in self.pairs:
            if eid == event_id:
                return state
        return None

    def reduced_to(self, event_id: int) -> "LockSpec":
        """A LockSpec carrying only the requirement for one event."""
        return LockSpec(pairs=tuple(p for p in self.pairs if p[0] == event_id))

    def __iter__(self) -> Iterator[tuple[int, int]]:  # type: ignore[override]
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def describe(self, mode: int = 0) -> str:
        """
        Format this LockSpec.

        Modes
        -----
        0 : "5-1,6-0" (door printing)
        1 : "5:1-6:0" (file writing)
        3 : "event 5 to state 1, event 6 to state 0" (traversals)
        """
        if mode == 0:
            return ",".join(f"{e}-{s}" for e, s in self.pairs)
        if mode == 1:
            return "-".join(f"{e}:{s}" for e, s in self.pairs)
        if mode == 3:
            return ", ".join(f"event {e} to state {s}" for e, s in self.pairs)
        raise ValueError(f"unsupported lock spec format mode {mode}")


# =============================================================================
# Topology
# =============================================================================


class Door(BaseModel):
    """A directed connection to another room, gated by a lock spec."""

    dest: int
    """Destination room id (index into the dungeon's rooms)."""

    lock: LockSpec = Field(default_factory=LockSpec)

    model_config = ConfigDict(frozen=True)

    @property
    def lockable(self) -> bool:
        """True when this door can ever be locked."""
        return not self.lock.clear

    def __str__(self) -> str:
        if self.lock.clear:
            return str(self.dest)
        return f"{self.dest}-{self.lock.describe(1)}"


class Room(BaseModel):
    """Building block of a dungeon: outgoing doors and the events inside."""

    doors: tuple[Door, ...] = ()
    events: tuple[RoomEvent, ...] = ()
    unused: bool = False
    """Placeholder room for irregular grids; never visited."""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def empty(cls) -> "Room":
        return cls(unused=True)

    def has_event(self, event_id: int) -> bool:
        return any(event.id == event_id for event in self.events)


class Dungeon(BaseModel):
    """
    A graph of rooms connected by doors.

    Room identity is the position index in `rooms`. Door destinations and
    the entrance/exit ids all index that sequence.
    """

    name: str = ""
    rooms: tuple[Room, ...] = ()
    entrance: int = 0
    exit: int = 0

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _validate_topology(self) -> "Dungeon":
        """
        Validate the structural contract the traversal engine relies on.

        The crawl layer never re-checks any of this.
        """
        for label, room_id in (("entrance", self.entrance), ("exit", self.exit)):
            if not self._is_used_room(room_id):
                raise ValueError(f"{label} room {room_id} is not a used room")

        state_counts: dict[int, int] = {}
        for room in self.rooms:
            for event in room.events:
                if event.id in state_counts:
                    raise ValueError(f"event id {event.id} is defined more than once")
                state_counts[event.id] = event.state_count

        for room_id, room in enumerate(self.rooms):
            if room.unused:
                continue
            for door in room.doors:
                if not self._is_used_room(door.dest):
                    raise ValueError(
                        f"door in room {room_id} leads to invalid room {door.dest}"
                    )
                missing = [e for e in door.lock.event_ids if e not in state_counts]
                if missing:
                    raise ValueError(
                        f"door {room_id}->{door.dest} references unknown events {missing}"
                    )
                for event_id, state in door.lock.pairs:
                    if state < 0 or state >= state_counts[event_id]:
                        raise ValueError(
                            f"door {room_id}->{door.dest} requires state {state} of event "
                            f"{event_id}, which has {state_counts[event_id]} states"
                        )

        return self

    def _is_used_room(self, room_id: int) -> bool:
        return 0 <= room_id < len(self.rooms) and not self.rooms[room_id].unused

    # -------------------------------------------------------------------------
    # Room access
    # -------------------------------------------------------------------------

    def room_at(self, room_id: int) -> Room:
        return self.rooms[room_id]

    def iter_rooms(self) -> Iterator[tuple[int, Room]]:
        """Yield (room_id, room) for every used room."""
        for room_id, room in enumerate(self.rooms):
            if not room.unused:
                yield room_id, room

    def used_rooms(self) -> list[Room]:
        return [room for _, room in self.iter_rooms()]

    def all_doors(self) -> list[Door]:
        return [door for _, room in self.iter_rooms() for door in room.doors]

    def all_events(self) -> list[Event]:
        return [event for _, room in self.iter_rooms() for event in room.events]

    def event_count(self) -> int:
        return len(self.all_events())

    def is_entrance(self, room_id: int) -> bool:
        return self.entrance == room_id

    def is_exit(self, room_id: int) -> bool:
        return self.exit == room_id

    def is_reciprocal(self, door: Door, from_room_id: int) -> bool:
        """
        True when the door's destination has a door back to `from_room_id`
        carrying an equal lock spec.
        """
        return any(
            back.dest == from_room_id and back.lock == door.lock
            for back in self.room_at(door.dest).doors
        )

    @property
    def visualizable(self) -> bool:
        """Only one-to-one grid dungeons can be printed."""
        return False

    def metadata(self) -> dict[str, Any]:
        return {"entrance": self.entrance, "exit": self.exit}

    def size_summary(self) -> list[str]:
        return [f"{len(self.used_rooms())} rooms", f"{self.event_count()} events"]


class EuclideanDungeon(Dungeon):
    """
    A dungeon whose rooms sit on a 3-D grid.

    Every door joins rooms at (x, y, z) and a neighbour differing by one on a
    single axis. The z-axis counts floors; rows and columns span each floor.
    Room ids map to coordinates row-major within a floor.
    """

    height: int = Field(default=1, ge=1)
    length: int = Field(default=1, ge=1)
    width: int = Field(default=1, ge=1)

    @property
    def area(self) -> int:
        """Rooms per floor."""
        return self.width * self.length

    def coordinate(self, room_id: int) -> tuple[int, int, int]:
        """Convert a room id into (floor, row, col)."""
        floor = room_id // self.area
        row = room_id % self.area // self.width
        col = room_id % self.area % self.width
        return floor, row, col

    def index(self, coord: tuple[int, int, int]) -> int:
        """Convert (floor, row, col) into a room id."""
        return coord[0] * self.area + coord[1] * self.width + coord[2]

    def coordinate_difference(self, room_id_1: int, room_id_2: int) -> tuple[int, int, int]:
        a = self.coordinate(room_id_1)
        b = self.coordinate(room_id_2)
        return a[0] - b[0], a[1] - b[1], a[2] - b[2]

    def metadata(self) -> dict[str, Any]:
        meta = super().metadata()
        meta.update(height=self.height, length=self.length, width=self.width)
        return meta

    def size_summary(self) -> list[str]:
        return [f"{self.height} floors", *super().size_summary()]


class NonQuantumDungeon(EuclideanDungeon):
    """A Euclidean dungeon where each coordinate holds at most one room."""

    @property
    def visualizable(self) -> bool:
        return True


DUNGEON_TYPES: dict[str, type[Dungeon]] = {
    "Eu": EuclideanDungeon,
    "NQ": NonQuantumDungeon,
}


def load_dungeon(data: dict[str, Any]) -> Dungeon:
    """
    Build a validated dungeon from a plain dictionary.

    The optional "type" key selects a geometry subtype from DUNGEON_TYPES;
    without it a plain Dungeon is built.

    Raises
    ------
    ValueError
        If the type code is unknown.
    pydantic.ValidationError
        If the dungeon breaks a structural contract.
    """
    payload = dict(data)
    type_code = payload.pop("type", None)
    if type_code is None:
        return Dungeon.model_validate(payload)
    try:
        dungeon_cls = DUNGEON_TYPES[type_code]
    except KeyError:
        raise ValueError(f"unknown dungeon type {type_code!r}") from None
    return dungeon_cls.model_validate(payload)
