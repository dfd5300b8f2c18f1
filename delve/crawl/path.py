"""
Paths and Traversals
====================

A Path is a mutable sequence of PathSteps produced by the path generator.
A Traversal is the frozen result of traversal generation, safe to hand to
presentation code.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional

from delve.core.schema import LockSpec
from delve.crawl.dungeon import CrawlDoor, CrawlRoom


class TraversalKind(str, Enum):
    """Role of a (sub-)traversal within a walkthrough."""

    SOURCE = "source"
    """Top-level route from start to destination."""

    DEPARTING = "departing"
    """Detour away from the route to set events."""

    RETURNING = "returning"
    """Detour back to where a departure began."""


@dataclass(frozen=True, eq=False)
class PathStep:
    """
    A room, the door used to enter it, and events to set on arrival.

    A missing door marks the start of a path.
    """

    room: CrawlRoom
    door: Optional[CrawlDoor] = None
    lock: Optional[LockSpec] = None

    @property
    def room_id(self) -> int:
        return self.room.id

    @property
    def lock_trivial(self) -> bool:
        return self.lock is None or self.lock.clear

    def key(self) -> tuple:
        """Structural identity used to compare paths."""
        door_key = None if self.door is None else (self.door.dest, self.door.lock.spec.pairs)
        lock_key = None if self.lock_trivial else self.lock.pairs
        return (self.room.id, door_key, lock_key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathStep):
            return NotImplemented
        return self.key() == other.key()

    def __hash__(self) -> int:
        return hash(self.key())

    def describe(self, with_door: bool = True) -> str:
        text = f"Visit room: {self.room.id}"
        if with_door and self.door is not None:
            text += f" via {self.door.describe()}"
        if not self.lock_trivial:
            text += f" and set {self.lock.describe(3)}"
        return text


class Path:
    """A mutable, ordered sequence of path steps."""

    def __init__(self, steps: Optional[list[PathStep]] = None):
        self.steps: list[PathStep] = list(steps) if steps is not None else []

    def __getitem__(self, index: int) -> PathStep:
        return self.steps[index]

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[PathStep]:
        return iter(self.steps)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self.steps == other.steps

    @property
    def start(self) -> PathStep:
        return self.steps[0]

    @property
    def end(self) -> PathStep:
        return self.steps[-1]

    @property
    def room_ids(self) -> list[int]:
        return [step.room.id for step in self.steps]

    def start_end_ids(self) -> tuple[int, int]:
        return self.start.room.id, self.end.room.id

    def append(self, step: PathStep) -> None:
        self.steps.append(step)

    def pop(self) -> PathStep:
        return self.steps.pop()

    def insert(self, index: int, path: "Path") -> None:
        """Insert every step of `path` before position `index`."""
        self.steps[index:index] = path.steps

    def copy(self) -> "Path":
        return Path(self.steps)

    def describe(self) -> str:
        """One line per step, with doors taken and events set."""
        return "".join(step.describe() + "\n" for step in self.steps)

    def __repr__(self) -> str:
        return f"Path({self.room_ids})"


@dataclass
class GenerationRecord:
    """One sub-traversal requested while generating a traversal."""

    kind: TraversalKind
    start_id: int
    end_id: int
    depth: int
    inserted_at: int
    length: int = 0
    mutations: dict[int, list[tuple[int, int]]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert the record to a JSON-serializable dictionary."""
        return {
            "kind": self.kind.value,
            "start_id": self.start_id,
            "end_id": self.end_id,
            "depth": self.depth,
            "inserted_at": self.inserted_at,
            "length": self.length,
            "mutations": {
                str(room_id): [list(pair) for pair in pairs]
                for room_id, pairs in self.mutations.items()
            },
        }


class Traversal:
    """
    A walkable path with every locked door resolved by detours.

    Immutable once built: the steps are held in a tuple and no mutators are
    provided.
    """

    def __init__(
        self,
        path: Path,
        kind: TraversalKind = TraversalKind.SOURCE,
        records: Optional[list[GenerationRecord]] = None,
    ):
        self._steps: tuple[PathStep, ...] = tuple(path.steps)
        self._kind = kind
        self._records: tuple[GenerationRecord, ...] = tuple(records or ())

    @property
    def steps(self) -> tuple[PathStep, ...]:
        return self._steps

    @property
    def kind(self) -> TraversalKind:
        return self._kind

    @property
    def records(self) -> tuple[GenerationRecord, ...]:
        return self._records

    @property
    def room_ids(self) -> list[int]:
        return [step.room.id for step in self._steps]

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[PathStep]:
        return iter(self._steps)

    def __getitem__(self, index: int) -> PathStep:
        return self._steps[index]

    def mutation_steps(self) -> list[PathStep]:
        """Steps that set at least one event."""
        return [step for step in self._steps if not step.lock_trivial]

    def describe(self, condensed: bool = True) -> str:
        """
        Render the traversal as a list of rooms to visit.

        In condensed mode, intermediate rooms where nothing is set are left
        out; the first and last rooms are always shown.
        """
        last = len(self._steps) - 1
        lines = []
        for index, step in enumerate(self._steps):
            if condensed and step.lock_trivial and 0 < index < last:
                continue
            lines.append(step.describe(with_door=False) + "\n")
        return "".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self._kind.value,
            "room_ids": self.room_ids,
            "mutations": [
                {"index": index, "room_id": step.room.id, "lock": [list(p) for p in step.lock.pairs]}
                for index, step in enumerate(self._steps)
                if not step.lock_trivial
            ],
            "records": [record.to_dict() for record in self._records],
        }

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"Traversal(kind={self._kind.value}, rooms={self.room_ids})"
