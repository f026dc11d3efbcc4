from halls.geometry import Direction
from halls.qa import ReplayHarness, world_checksum
from halls.state import Move, UseItem, Wait, explore_step, new_world


def _play(harness, steps=12):
    for _ in range(steps):
        move = explore_step(harness.world)
        harness.apply(move if move is not None else Wait())
    harness.apply(UseItem(0))
    harness.apply(Move(Direction.N))


def test_same_seed_same_checksum(small_config):
    a, b = new_world(small_config, seed=5), new_world(small_config, seed=5)
    assert world_checksum(a) == world_checksum(b)
    assert world_checksum(a) != world_checksum(new_world(small_config, seed=6))


def test_snapshot_and_reproduce(small_config):
    harness = ReplayHarness(small_config, seed=21)
    _play(harness)
    trace = harness.snapshot()
    assert len(trace.actions) == 14
    ok, info = harness.reproduce(trace)
    assert ok, info


def test_trace_survives_json(small_config):
    harness = ReplayHarness(small_config, seed=8)
    _play(harness, steps=5)
    trace = harness.snapshot()
    restored = ReplayHarness.from_json(ReplayHarness.to_json(trace))
    assert restored == trace
    ok, info = harness.reproduce(restored)
    assert ok, info


def test_tampered_trace_is_detected(small_config):
    harness = ReplayHarness(small_config, seed=13)
    _play(harness, steps=4)
    trace = harness.snapshot()
    trace.checksum = "0" * 64
    ok, info = harness.reproduce(trace)
    assert not ok
    assert info["error"] == "checksum"

    trace = harness.snapshot()
    trace.events[0] = [{"kind": "attack", "payload": {"target": -1}}]
    ok, info = harness.reproduce(trace)
    assert not ok
    assert info["index"] == 0
