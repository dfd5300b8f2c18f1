"""
Tests for the Dungeon Model
===========================

Tests events, lock specs, dungeon validation, geometry subtypes, and the
networkx projection.
"""

import pytest
from pydantic import ValidationError

from delve.core.graph import (
    dungeon_to_graph,
    exit_reachable,
    reciprocal_door_count,
    topology_summary,
    unreachable_rooms,
)
from delve.core.schema import (
    Door,
    Dungeon,
    EuclideanDungeon,
    Item,
    LockSpec,
    NonQuantumDungeon,
    Room,
    Switch,
    load_dungeon,
)


# =============================================================================
# Events
# =============================================================================

class TestEvents:
    """Tests for Item and Switch events."""

    def test_item_defaults(self):
        item = Item(id=5)
        assert item.state_count == 2
        assert item.state == 0
        assert item.collectable is True

    def test_item_collect(self):
        item = Item(id=5)
        item.collect()
        assert item.state == 1

    def test_item_rejects_other_state_counts(self):
        with pytest.raises(ValidationError):
            Item(id=5, state_count=3)

    def test_switch_is_not_collectable(self):
        switch = Switch(id=3, state_count=4)
        assert switch.collectable is False
        assert switch.state_count == 4

    def test_switch_needs_two_states(self):
        with pytest.raises(ValidationError):
            Switch(id=3, state_count=1)

    def test_initial_state_out_of_range(self):
        with pytest.raises(ValidationError):
            Switch(id=3, state_count=3, state=3)

    def test_set_state_out_of_range(self):
        switch = Switch(id=3, state_count=3)
        with pytest.raises(ValueError):
            switch.set_state(-1)
        with pytest.raises(ValueError):
            switch.set_state(3)
        assert switch.state == 0

    def test_describe(self):
        assert Item(id=5).describe() == "5"
        switch = Switch(id=3, state_count=3, state=2)
        assert switch.describe() == "3-2"
        assert switch.describe(1) == "3:2"
        assert switch.describe_kind() == "(ID 3) Switch of 3 states"
        assert Item(id=5).describe_kind() == "(ID 5) Item"


# =============================================================================
# Lock Specs
# =============================================================================

class TestLockSpec:
    """Tests for LockSpec."""

    def test_empty_is_clear(self):
        assert LockSpec().clear is True
        assert LockSpec.of((1, 1)).clear is False

    def test_rejects_duplicate_events(self):
        with pytest.raises(ValidationError):
            LockSpec.of((1, 1), (1, 0))

    def test_queries(self):
        spec = LockSpec.of((5, 1), (6, 0))
        assert spec.event_ids == [5, 6]
        assert spec.has_event(5)
        assert not spec.has_event(7)
        assert spec.required_state(6) == 0
        assert spec.required_state(7) is None
        assert list(spec) == [(5, 1), (6, 0)]
        assert len(spec) == 2

    def test_reduced_to(self):
        spec = LockSpec.of((5, 1), (6, 0))
        assert spec.reduced_to(6) == LockSpec.of((6, 0))

    def test_describe_modes(self):
        spec = LockSpec.of((5, 1), (6, 0))
        assert spec.describe(0) == "5-1,6-0"
        assert spec.describe(1) == "5:1-6:0"
        assert spec.describe(3) == "event 5 to state 1, event 6 to state 0"
        with pytest.raises(ValueError):
            spec.describe(7)

    def test_equality_by_pairs(self):
        assert LockSpec.of((5, 1)) == LockSpec(pairs=((5, 1),))
        assert LockSpec.of((5, 1)) != LockSpec.of((5, 0))


# =============================================================================
# Dungeon Validation
# =============================================================================

class TestDungeon:
    """Tests for dungeon topology and validation."""

    def test_door_string(self):
        assert str(Door(dest=2)) == "2"
        assert str(Door(dest=2, lock=LockSpec.of((5, 1)))) == "2-5:1"
        assert Door(dest=2).lockable is False

    def test_rejects_door_to_missing_room(self):
        with pytest.raises(ValidationError):
            Dungeon(rooms=(Room(doors=(Door(dest=4),)),), entrance=0, exit=0)

    def test_rejects_door_to_unused_room(self):
        with pytest.raises(ValidationError):
            Dungeon(rooms=(Room(doors=(Door(dest=1),)), Room.empty()), entrance=0, exit=0)

    def test_rejects_duplicate_event_ids(self):
        with pytest.raises(ValidationError):
            Dungeon(
                rooms=(Room(events=(Item(id=1),)), Room(events=(Switch(id=1),))),
                entrance=0,
                exit=1,
            )

    def test_rejects_unknown_lock_event(self):
        with pytest.raises(ValidationError):
            Dungeon(
                rooms=(Room(doors=(Door(dest=1, lock=LockSpec.of((9, 1))),)), Room()),
                entrance=0,
                exit=1,
            )

    def test_rejects_unreachable_lock_state(self):
        with pytest.raises(ValidationError, match="requires state 3 of event 5"):
            Dungeon(
                rooms=(Room(doors=(Door(dest=1, lock=LockSpec.of((5, 3))),)), Room(events=(Item(id=5),))),
                entrance=0,
                exit=1,
            )

    def test_accepts_highest_switch_state(self):
        dungeon = Dungeon(
            rooms=(
                Room(doors=(Door(dest=1, lock=LockSpec.of((9, 2))),)),
                Room(events=(Switch(id=9, state_count=3),)),
            ),
            entrance=0,
            exit=1,
        )
        assert dungeon.room_at(0).doors[0].lockable

    def test_all_doors(self, detour):
        assert [door.dest for door in detour.all_doors()] == [1, 2, 0]

    def test_rejects_unused_entrance(self):
        with pytest.raises(ValidationError):
            Dungeon(rooms=(Room.empty(), Room()), entrance=0, exit=1)

    def test_room_iteration_skips_unused(self):
        dungeon = Dungeon(
            rooms=(Room(doors=(Door(dest=2),)), Room.empty(), Room(events=(Item(id=1),))),
            entrance=0,
            exit=2,
        )
        assert [room_id for room_id, _ in dungeon.iter_rooms()] == [0, 2]
        assert len(dungeon.used_rooms()) == 2
        assert dungeon.event_count() == 1
        assert dungeon.is_entrance(0) and dungeon.is_exit(2)
        assert dungeon.size_summary() == ["2 rooms", "1 events"]

    def test_reciprocal_doors(self, detour):
        room_0 = detour.room_at(0)
        assert detour.is_reciprocal(room_0.doors[0], 0) is True
        assert detour.is_reciprocal(room_0.doors[1], 0) is False

    def test_room_has_event(self, detour):
        assert detour.room_at(1).has_event(5)
        assert not detour.room_at(0).has_event(5)


# =============================================================================
# Geometry and Loading
# =============================================================================

class TestEuclideanDungeon:
    """Tests for grid dungeons."""

    @pytest.fixture
    def grid(self) -> EuclideanDungeon:
        # 2 floors of 2 rows x 3 columns
        return EuclideanDungeon(
            rooms=tuple(Room() for _ in range(12)),
            entrance=0,
            exit=11,
            height=2,
            length=2,
            width=3,
        )

    def test_coordinates(self, grid):
        assert grid.area == 6
        assert grid.coordinate(0) == (0, 0, 0)
        assert grid.coordinate(4) == (0, 1, 1)
        assert grid.coordinate(11) == (1, 1, 2)
        assert grid.index((1, 0, 2)) == 8

    def test_coordinate_difference(self, grid):
        assert grid.coordinate_difference(11, 4) == (1, 0, 1)

    def test_metadata_and_size(self, grid):
        assert grid.metadata() == {"entrance": 0, "exit": 11, "height": 2, "length": 2, "width": 3}
        assert grid.size_summary() == ["2 floors", "12 rooms", "0 events"]
        assert grid.visualizable is False


class TestLoadDungeon:
    """Tests for dictionary loading."""

    def test_load_plain(self):
        dungeon = load_dungeon({
            "name": "plain",
            "rooms": [
                {"doors": [{"dest": 1, "lock": {"pairs": [[5, 1]]}}]},
                {"events": [{"kind": "item", "id": 5}]},
            ],
            "entrance": 0,
            "exit": 1,
        })
        assert type(dungeon) is Dungeon
        assert dungeon.room_at(0).doors[0].lock == LockSpec.of((5, 1))
        assert isinstance(dungeon.room_at(1).events[0], Item)

    def test_load_non_quantum(self):
        dungeon = load_dungeon({
            "type": "NQ",
            "rooms": [{"doors": [{"dest": 1}]}, {"events": [{"kind": "switch", "id": 2, "state_count": 3}]}],
            "entrance": 0,
            "exit": 1,
            "height": 1,
            "length": 1,
            "width": 2,
        })
        assert isinstance(dungeon, NonQuantumDungeon)
        assert dungeon.visualizable is True
        assert isinstance(dungeon.room_at(1).events[0], Switch)

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="unknown dungeon type"):
            load_dungeon({"type": "XX", "rooms": [{}]})


# =============================================================================
# Graph Projection
# =============================================================================

class TestGraphProjection:
    """Tests for the networkx view of a dungeon."""

    def test_nodes_and_edges(self, detour):
        G = dungeon_to_graph(detour)
        assert sorted(G.nodes) == [0, 1, 2]
        assert G.number_of_edges() == 3
        assert G.nodes[1]["event_ids"] == [5]
        assert G.nodes[0]["entrance"] is True
        assert G[0][2][1]["lock"] == [[5, 1]]
        assert G[0][2][1]["lockable"] is True

    def test_reachability_ignores_locks(self, trap):
        assert exit_reachable(trap) is True
        assert unreachable_rooms(trap) == []

    def test_unreachable_rooms(self):
        dungeon = Dungeon(
            rooms=(Room(doors=(Door(dest=1),)), Room(), Room(doors=(Door(dest=0),))),
            entrance=0,
            exit=1,
        )
        assert unreachable_rooms(dungeon) == [2]

    def test_summary(self, detour):
        summary = topology_summary(detour)
        assert summary["rooms"] == 3
        assert summary["doors"] == 3
        assert summary["locked_doors"] == 1
        assert summary["events"] == 1
        assert summary["reciprocal_doors"] == reciprocal_door_count(detour) == 2
        assert summary["exit_reachable"] is True
