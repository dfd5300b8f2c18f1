"""
Delve Core: Dungeon Graph Model
===============================

This package provides the immutable dungeon topology that crawls run over:
rooms joined by doors, doors gated by lock specifications, and the events
those specifications refer to.

Public API:
- Dungeon / EuclideanDungeon / NonQuantumDungeon: dungeon topologies
- Room, Door, LockSpec: graph building blocks
- Event, Item, Switch: stateful room objects
- load_dungeon: validated construction from plain dictionaries
- dungeon_to_graph / topology_summary: networkx projection
"""

from delve.core.schema import (
    DUNGEON_TYPES,
    Door,
    Dungeon,
    EuclideanDungeon,
    Event,
    Item,
    LockSpec,
    NonQuantumDungeon,
    Room,
    Switch,
    load_dungeon,
)
from delve.core.graph import (
    dungeon_to_graph,
    exit_reachable,
    reciprocal_door_count,
    topology_summary,
    unreachable_rooms,
)

__all__ = [
    "Dungeon",
    "EuclideanDungeon",
    "NonQuantumDungeon",
    "DUNGEON_TYPES",
    "Room",
    "Door",
    "LockSpec",
    "Event",
    "Item",
    "Switch",
    "load_dungeon",
    "dungeon_to_graph",
    "exit_reachable",
    "reciprocal_door_count",
    "topology_summary",
    "unreachable_rooms",
]
