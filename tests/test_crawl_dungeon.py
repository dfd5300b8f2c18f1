"""
Tests for the Crawl Dungeon
===========================

Tests the crawl context: event table aliasing, lock spec application and
alignment, and door resolution.
"""

import pytest

from delve.core.schema import Door, Dungeon, Item, LockSpec, Room, Switch
from delve.crawl.dungeon import CrawlDungeon


@pytest.fixture
def crawl(switchboard) -> CrawlDungeon:
    return CrawlDungeon.build(switchboard)


class TestBuild:
    """Tests for CrawlDungeon.build."""

    def test_rooms_know_their_ids(self, crawl):
        assert [room.id for room in crawl.rooms] == [0, 1, 2]
        assert crawl.entrance == 0
        assert crawl.exit == 2
        assert crawl.name == "switchboard"

    def test_event_table_aliases_room_events(self, crawl):
        room = crawl.room_at(1)
        assert crawl.event_table[4] is room.events[0]
        assert crawl.event_table[9] is room.events[1]

    def test_source_dungeon_events_are_not_shared(self, switchboard, crawl):
        assert crawl.event(4) is not switchboard.room_at(1).events[0]

    def test_doors_resolve_destination_rooms(self, crawl):
        room_0 = crawl.room_at(0)
        assert room_0.doors[0].dest_room is crawl.room_at(1)
        assert room_0.doors[1].dest_room is crawl.room_at(2)

    def test_unused_rooms_keep_their_slot(self):
        dungeon = Dungeon(
            rooms=(Room(doors=(Door(dest=2),)), Room.empty(), Room(events=(Item(id=3),))),
            entrance=0,
            exit=2,
        )
        crawl = CrawlDungeon.build(dungeon)
        assert crawl.room_at(2).id == 2
        assert crawl.room_at(1).unused is True
        assert [room.id for room in crawl.iter_rooms()] == [0, 2]
        assert crawl.room_at(0).doors[0].dest_room is crawl.room_at(2)


class TestLockSpecs:
    """Tests for applying and checking lock specs."""

    def test_apply_sets_only_referenced_events(self, crawl):
        crawl.apply_lock_spec(LockSpec.of((9, 2)))
        assert crawl.event(9).state == 2
        assert crawl.event(4).state == 0

    def test_apply_is_visible_through_room(self, crawl):
        crawl.apply_lock_spec(LockSpec.of((4, 1)))
        assert crawl.room_at(1).events[0].state == 1

    def test_room_mutation_is_visible_through_table(self, crawl):
        crawl.room_at(1).events[1].set_state(1)
        assert crawl.event(9).state == 1

    def test_apply_clear_is_noop(self, crawl):
        before = crawl.event_states()
        crawl.apply_lock_spec(LockSpec())
        crawl.apply_lock_spec(None)
        assert crawl.event_states() == before

    def test_apply_out_of_range_state(self, crawl):
        with pytest.raises(ValueError):
            crawl.apply_lock_spec(LockSpec.of((9, 5)))

    def test_clear_spec_is_always_aligned(self, crawl):
        assert crawl.is_aligned(LockSpec()) is True
        crawl.apply_lock_spec(LockSpec.of((4, 1), (9, 1)))
        assert crawl.is_aligned(LockSpec()) is True
        assert crawl.is_aligned(None) is True

    def test_alignment_follows_live_state(self, crawl):
        spec = LockSpec.of((4, 1), (9, 2))
        assert crawl.is_aligned(spec) is False
        assert crawl.unaligned_pairs(spec) == [(4, 1), (9, 2)]

        crawl.apply_lock_spec(LockSpec.of((4, 1)))
        assert crawl.is_aligned(spec) is False
        assert crawl.unaligned_pairs(spec) == [(9, 2)]

        crawl.apply_lock_spec(LockSpec.of((9, 2)))
        assert crawl.is_aligned(spec) is True

        crawl.apply_lock_spec(LockSpec.of((9, 0)))
        assert crawl.is_aligned(spec) is False

    def test_room_holding_event(self, crawl):
        assert crawl.room_holding_event(9) is crawl.room_at(1)
        with pytest.raises(KeyError):
            crawl.room_holding_event(42)


class TestCrawlDoor:
    """Tests for crawl door lock state."""

    def test_open_door(self, crawl):
        door = crawl.room_at(0).doors[0]
        assert door.lockable is False
        assert door.locked is False
        assert door.describe() == "open door"

    def test_locked_until_aligned(self, crawl):
        door = crawl.room_at(0).doors[1]
        assert door.lockable is True
        assert door.locked is True
        assert door.lock.aligned() is False
        assert door.describe() == "door of LS (2-4:1-9:2)"

        crawl.apply_lock_spec(LockSpec.of((4, 1), (9, 2)))
        assert door.locked is False
        assert door.lock.aligned() is True

    def test_switch_copies_keep_their_type(self, crawl):
        assert isinstance(crawl.event(9), Switch)
        assert isinstance(crawl.event(4), Item)
