"""
Graph Projection
================

Projects a Dungeon onto a networkx MultiDiGraph for diagnostics.

Nodes are used room ids; each door becomes an edge keyed by its position in
the room's door list. Lock specifications are carried as edge attributes but
never evaluated here: reachability in this projection ignores locks.
"""

from typing import Any

import networkx as nx

from delve.core.schema import Dungeon


def dungeon_to_graph(dungeon: Dungeon) -> nx.MultiDiGraph:
    """
    Build a MultiDiGraph view of the dungeon topology.

    Node attributes: `event_ids`, `entrance`, `exit`.
    Edge attributes: `lock` (list of pairs), `lockable`.
    """
    G = nx.MultiDiGraph(name=dungeon.name)

    for room_id, room in dungeon.iter_rooms():
        G.add_node(
            room_id,
            event_ids=[event.id for event in room.events],
            entrance=dungeon.is_entrance(room_id),
            exit=dungeon.is_exit(room_id),
        )

    for room_id, room in dungeon.iter_rooms():
        for key, door in enumerate(room.doors):
            G.add_edge(
                room_id,
                door.dest,
                key=key,
                lock=[list(pair) for pair in door.lock.pairs],
                lockable=door.lockable,
            )

    return G


def unreachable_rooms(dungeon: Dungeon) -> list[int]:
    """Used rooms that no door sequence from the entrance reaches."""
    G = dungeon_to_graph(dungeon)
    reached = nx.descendants(G, dungeon.entrance) | {dungeon.entrance}
    return sorted(n for n in G.nodes if n not in reached)


def exit_reachable(dungeon: Dungeon) -> bool:
    """Whether the exit can be reached from the entrance ignoring locks."""
    return nx.has_path(dungeon_to_graph(dungeon), dungeon.entrance, dungeon.exit)


def reciprocal_door_count(dungeon: Dungeon) -> int:
    """Number of doors whose destination has a matching door back."""
    return sum(
        1
        for room_id, room in dungeon.iter_rooms()
        for door in room.doors
        if dungeon.is_reciprocal(door, room_id)
    )


def topology_summary(dungeon: Dungeon) -> dict[str, Any]:
    """Compact, JSON-serializable description of the dungeon graph."""
    G = dungeon_to_graph(dungeon)
    locked_doors = sum(1 for door in dungeon.all_doors() if door.lockable)
    return {
        "name": dungeon.name,
        "rooms": G.number_of_nodes(),
        "doors": G.number_of_edges(),
        "locked_doors": locked_doors,
        "events": dungeon.event_count(),
        "reciprocal_doors": reciprocal_door_count(dungeon),
        "unreachable_rooms": unreachable_rooms(dungeon),
        "exit_reachable": exit_reachable(dungeon),
    }
