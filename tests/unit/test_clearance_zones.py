"""Unit tests for door clearance zones."""

import unittest

from floorsnap.config import EngineConfig
from floorsnap.layout.catalog import ElementCategory, FixtureType
from floorsnap.layout.clearance_zones import (
    DoorClearanceViolation,
    compute_door_clearance_violations,
    compute_door_clearance_zones,
    find_blocking_zone,
)
from floorsnap.layout.room import (
    CustomWall,
    Door,
    Element,
    RoomDimensions,
    RoomState,
)


def _door(wall_number, position=50.0, width=32.0):
    return Door(id="d1", wall_number=wall_number, position=position, width=width)


def _base(element_id, x, y):
    return Element(
        id=element_id,
        fixture_type=FixtureType.BASE,
        category=ElementCategory.CABINET,
        x=x,
        y=y,
        width=24.0,
        depth=24.0,
    )


class TestDoorClearanceZones(unittest.TestCase):
    """Test zone derivation for standard and custom walls."""

    def setUp(self):
        self.cfg = EngineConfig()
        self.state = RoomState.empty(RoomDimensions(width=144.0, depth=120.0))

    def _with_doors(self, *doors, state=None):
        return (state or self.state).replace(doors=doors)

    def test_north_door(self):
        state = self._with_doors(_door(1))
        zones = compute_door_clearance_zones(state, self.cfg)
        self.assertEqual(len(zones), 1)
        self.assertFalse(zones[0].is_rotated)
        for actual, expected in zip(zones[0].bounds, (56.0, 0.0, 88.0, 48.0)):
            self.assertAlmostEqual(actual, expected)

    def test_east_door_swaps_axes(self):
        state = self._with_doors(_door(2))
        (zone,) = compute_door_clearance_zones(state, self.cfg)
        for actual, expected in zip(zone.bounds, (96.0, 44.0, 144.0, 76.0)):
            self.assertAlmostEqual(actual, expected)

    def test_position_spans_rendered_overhang(self):
        """0% sits at the overhang beyond the corner, not at the corner."""
        state = self._with_doors(Door(id="d1", wall_number=3, position=0.0, width=32.0))
        (zone,) = compute_door_clearance_zones(state, self.cfg)
        self.assertAlmostEqual(zone.center_x, -10.0)
        self.assertAlmostEqual(zone.center_y, 120.0 - 24.0)

    def test_custom_wall_door(self):
        wall = CustomWall(
            id="w5", x1=20.0, y1=60.0, x2=100.0, y2=60.0, thickness=6.0, wall_number=5
        )
        state = self.state.replace(
            walls=(1, 2, 3, 4, 5),
            custom_walls=(wall,),
            all_available_walls=(1, 2, 3, 4, 5),
            doors=(Door(id="d1", wall_number=5, position=50.0, width=20.0),),
        )
        (zone,) = compute_door_clearance_zones(state, self.cfg)
        self.assertTrue(zone.is_rotated)
        self.assertAlmostEqual(zone.angle, 90.0)
        self.assertAlmostEqual(zone.center_x, 60.0)
        self.assertAlmostEqual(zone.center_y, 75.0)
        for actual, expected in zip(zone.bounds, (50.0, 60.0, 70.0, 90.0)):
            self.assertAlmostEqual(actual, expected)
        self.assertIn("angle", zone.to_dict())

    def test_removed_wall_has_no_zone(self):
        state = self._with_doors(
            Door(id="d1", wall_number=1, position=50.0, width=32.0)
        ).replace(walls=(2, 3, 4), removed_walls=(1,))
        self.assertEqual(compute_door_clearance_zones(state, self.cfg), [])

    def test_stale_door_is_skipped(self):
        state = self._with_doors(_door(7))
        with self.assertLogs("floorsnap.layout.clearance_zones", level="WARNING"):
            zones = compute_door_clearance_zones(state, self.cfg)
        self.assertEqual(zones, [])

    def test_multipliers_are_configurable(self):
        cfg = EngineConfig(
            clearance_depth_multiplier=1.0, clearance_width_multiplier=2.0
        )
        state = self._with_doors(_door(1))
        (zone,) = compute_door_clearance_zones(state, cfg)
        self.assertEqual((zone.width, zone.depth), (64.0, 32.0))


class TestDoorClearanceViolations(unittest.TestCase):
    """Test violation detection against element footprints."""

    def setUp(self):
        self.cfg = EngineConfig()
        self.state = RoomState.empty(RoomDimensions(width=144.0, depth=120.0)).replace(
            doors=(Door(id="d1", wall_number=1, position=50.0, width=32.0),)
        )

    def test_blocking_element(self):
        state = self.state.replace(elements=(_base("e1", 60.0, 10.0),))
        violations = compute_door_clearance_violations(state, self.cfg)
        self.assertEqual(len(violations), 1)
        self.assertIsInstance(violations[0], DoorClearanceViolation)
        self.assertEqual(violations[0].element_id, "e1")
        self.assertEqual(violations[0].door_id, "d1")
        self.assertAlmostEqual(violations[0].penetration_depth, 28.0)
        self.assertIn("blocks door d1", violations[0].to_description())

    def test_touching_edge_does_not_block(self):
        state = self.state.replace(elements=(_base("e1", 88.0, 10.0),))
        self.assertEqual(compute_door_clearance_violations(state, self.cfg), [])

    def test_find_blocking_zone(self):
        zones = compute_door_clearance_zones(self.state, self.cfg)
        self.assertIsNone(find_blocking_zone((88.0, 0.0, 112.0, 24.0), zones))
        blocking = find_blocking_zone((87.0, 0.0, 111.0, 24.0), zones)
        self.assertEqual(blocking.door_id, "d1")

    def test_no_doors(self):
        state = self.state.replace(doors=(), elements=(_base("e1", 60.0, 10.0),))
        self.assertEqual(compute_door_clearance_violations(state, self.cfg), [])


if __name__ == "__main__":
    unittest.main()
