from dataclasses import replace

from conftest import make_world

from halls.config import WorldConfig
from halls.engine import Session
from halls.entities import Creature
from halls.events import EventBus, EventKind
from halls.geometry import Direction, Point
from halls.state import Move, Wait, new_world


def paced_world(room_level, tick=0.5, **kw):
    return make_world([room_level], Point(3, 3), config=WorldConfig(level_count=1, tick_seconds=tick), **kw)


def test_actions_wait_for_the_tick(room_level):
    session = Session(paced_world(room_level))
    session.submit(Move(Direction.E))
    session.start()
    assert session.update(0.2) == []
    assert session.world.warrior.position == Point(3, 3)
    session.update(0.3)
    assert session.world.warrior.position == Point(4, 3)
    assert session.step == 1
    assert session.pending == 0


def test_one_action_per_tick(room_level):
    session = Session(paced_world(room_level, tick=0.0))
    for _ in range(3):
        session.submit(Wait())
    session.start()
    session.update(0.0)
    assert session.world.age == 1
    assert session.pending == 2


def test_update_ignored_when_not_running(room_level):
    session = Session(paced_world(room_level, tick=0.0))
    session.submit(Wait())
    assert session.update(1.0) == []
    assert session.world.age == 0


def test_events_are_published_and_death_stops_the_session(room_level):
    room_level.creatures = [Creature(cid=1, position=Point(4, 3), facing=Direction.W, hp=9, attack=50, defense=0)]
    bus = EventBus()
    kinds = []
    bus.subscribe("*", lambda e: kinds.append(e.kind))
    session = Session(paced_world(room_level, tick=0.0), bus=bus)
    session.submit(Wait())
    session.start()
    events = session.update(0.0)
    assert [e.kind for e in events] == kinds == [EventKind.DEFEND, EventKind.PLAYER_DEATH]
    assert not session.running


def test_auto_explore_runs_when_queue_is_empty(small_config):
    world = new_world(replace(small_config, tick_seconds=0.0), seed=2)
    session = Session(world, auto_explore=True, max_steps=5)
    session.start()
    for _ in range(10):
        session.update(0.0)
    assert session.step <= 5
    assert session.step >= 1
    assert world.age == session.step


def test_run_drains_the_queue(room_level):
    session = Session(paced_world(room_level, tick=0.0))
    session.submit(Move(Direction.W))
    session.submit(Move(Direction.W))
    session.run()
    assert session.world.warrior.position == Point(1, 3)
    assert not session.running
