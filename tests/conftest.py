"""
Shared dungeon fixtures.
"""

import pytest

from delve.core.schema import Door, Dungeon, Item, LockSpec, Room, Switch


@pytest.fixture
def corridor() -> Dungeon:
    """
    Open corridor:

        0 --> 1 --> 2
    """
    return Dungeon(
        name="corridor",
        rooms=(
            Room(doors=(Door(dest=1),)),
            Room(doors=(Door(dest=2),)),
            Room(),
        ),
        entrance=0,
        exit=2,
    )


@pytest.fixture
def detour() -> Dungeon:
    """
    Single detour; the door 0 -> 2 needs item 5 from room 1:

        1 <--> 0 --[5:1]--> 2
    """
    return Dungeon(
        name="detour",
        rooms=(
            Room(doors=(Door(dest=1), Door(dest=2, lock=LockSpec.of((5, 1))))),
            Room(doors=(Door(dest=0),), events=(Item(id=5),)),
            Room(),
        ),
        entrance=0,
        exit=2,
    )


@pytest.fixture
def trap() -> Dungeon:
    """
    Item 7 sits behind the very door it opens:

        0 --[7:1]--> 1 (item 7) --> 0
    """
    return Dungeon(
        name="trap",
        rooms=(
            Room(doors=(Door(dest=1, lock=LockSpec.of((7, 1))),)),
            Room(doors=(Door(dest=0),), events=(Item(id=7),)),
        ),
        entrance=0,
        exit=1,
    )


@pytest.fixture
def nested() -> Dungeon:
    """
    Key 1 (room 2) opens the exit; key 2 (room 3) opens room 2:

        0 --[1:1]--> 1 (exit)
        0 --[2:1]--> 2 (item 1) --> 0
        0 ---------> 3 (item 2) --> 0
    """
    return Dungeon(
        name="nested",
        rooms=(
            Room(doors=(
                Door(dest=1, lock=LockSpec.of((1, 1))),
                Door(dest=2, lock=LockSpec.of((2, 1))),
                Door(dest=3),
            )),
            Room(),
            Room(doors=(Door(dest=0),), events=(Item(id=1),)),
            Room(doors=(Door(dest=0),), events=(Item(id=2),)),
        ),
        entrance=0,
        exit=1,
    )


@pytest.fixture
def switchboard() -> Dungeon:
    """
    Room 1 holds item 4 and a 3-state switch 9; the exit door needs both:

        1 <--> 0 --[4:1, 9:2]--> 2
    """
    return Dungeon(
        name="switchboard",
        rooms=(
            Room(doors=(Door(dest=1), Door(dest=2, lock=LockSpec.of((4, 1), (9, 2))))),
            Room(doors=(Door(dest=0),), events=(Item(id=4), Switch(id=9, state_count=3))),
            Room(),
        ),
        entrance=0,
        exit=2,
    )
