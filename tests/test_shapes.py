from voxelworld.shapes import AABB, AABB16, Timestep


def test_aabb_to_aabb16_pads_with_zero_w():
    box = AABB((1.0, 2.0, 3.0), (4.0, 5.0, 6.0))
    wide = AABB16.from_aabb(box)
    assert wide.min[:3] == box.min
    assert wide.max[:3] == box.max
    assert wide.min[3] == 0.0
    assert wide.max[3] == 0.0


def test_round_trip():
    box = AABB((-32.0, 0.0, 64.0), (0.0, 32.0, 96.0))
    assert AABB.from_aabb16(AABB16.from_aabb(box)) == box


def test_aabb16_to_aabb_drops_w():
    wide = AABB16((1.0, 1.0, 1.0, 9.0), (2.0, 2.0, 2.0, 9.0))
    assert AABB.from_aabb16(wide) == AABB((1.0, 1.0, 1.0), (2.0, 2.0, 2.0))


def test_timestep_defaults():
    ts = Timestep()
    assert (ts.dt_actual, ts.dt_effective) == (0.0, 0.0)
    ts2 = Timestep(dt_actual=0.5, dt_effective=0.25)
    assert ts2.dt_effective == 0.25