"""Unit tests for wall endpoint snapping."""

import unittest

from floorsnap.config import EngineConfig
from floorsnap.layout.endpoint_snapping import EndpointSnapType, snap_wall_endpoint
from floorsnap.layout.room import CustomWall, RoomDimensions, RoomState


def _room_with_walls(*segments):
    walls = tuple(
        CustomWall(
            id=f"w{5 + i}",
            x1=x1,
            y1=y1,
            x2=x2,
            y2=y2,
            thickness=6.0,
            wall_number=5 + i,
        )
        for i, (x1, y1, x2, y2) in enumerate(segments)
    )
    numbers = tuple(w.wall_number for w in walls)
    return RoomState(
        dimensions=RoomDimensions(width=144.0, depth=120.0),
        walls=(1, 2, 3, 4) + numbers,
        custom_walls=walls,
        all_available_walls=(1, 2, 3, 4) + numbers,
    )


class TestSnapWallEndpoint(unittest.TestCase):
    """Test endpoint snap tiers and tie-breaking."""

    def setUp(self):
        self.cfg = EngineConfig()

    def test_corner_snap(self):
        state = _room_with_walls()
        snap = snap_wall_endpoint(state, 5.0, 5.0, self.cfg)
        self.assertEqual(snap.point, (0.0, 0.0))
        self.assertEqual(snap.snap_type, EndpointSnapType.ROOM_CORNER)
        self.assertEqual(snap.target, "top-left")

    def test_endpoint_beats_nearer_corner(self):
        """Joining an existing wall end wins even over a closer corner."""
        state = _room_with_walls((10.0, 10.0, 10.0, 80.0))
        snap = snap_wall_endpoint(state, 4.0, 4.0, self.cfg)
        self.assertEqual(snap.point, (10.0, 10.0))
        self.assertEqual(snap.snap_type, EndpointSnapType.WALL_ENDPOINT)
        self.assertEqual(snap.target, "5")

    def test_equidistant_endpoints_prefer_lower_wall_number(self):
        state = _room_with_walls(
            (20.0, 100.0, 20.0, 50.0), (40.0, 50.0, 40.0, 100.0)
        )
        snap = snap_wall_endpoint(state, 30.0, 50.0, self.cfg)
        self.assertEqual(snap.point, (20.0, 50.0))
        self.assertEqual(snap.target, "5")

    def test_edge_snap_onto_present_standard_wall(self):
        state = _room_with_walls()
        snap = snap_wall_endpoint(state, 50.0, 8.0, self.cfg)
        self.assertEqual(snap.point, (50.0, 0.0))
        self.assertEqual(snap.snap_type, EndpointSnapType.WALL_EDGE)
        self.assertEqual(snap.target, "1")

    def test_removed_standard_wall_is_not_a_target(self):
        state = _room_with_walls().replace(walls=(2, 3, 4), removed_walls=(1,))
        snap = snap_wall_endpoint(state, 50.0, 8.0, self.cfg)
        self.assertFalse(snap.snapped)
        self.assertEqual(snap.point, (50.0, 8.0))

    def test_out_of_range_uses_raw_click(self):
        state = _room_with_walls((10.0, 10.0, 10.0, 80.0))
        snap = snap_wall_endpoint(state, 70.0, 60.0, self.cfg)
        self.assertEqual(snap.snap_type, EndpointSnapType.NONE)
        self.assertEqual(snap.point, (70.0, 60.0))

    def test_excluded_wall_is_ignored(self):
        state = _room_with_walls((60.0, 40.0, 60.0, 80.0))
        snap = snap_wall_endpoint(state, 62.0, 42.0, self.cfg, exclude_wall_id="w5")
        self.assertFalse(snap.snapped)

    def test_snap_distance_is_configurable(self):
        state = _room_with_walls()
        cfg = EngineConfig(endpoint_snap_distance=4.0)
        self.assertFalse(snap_wall_endpoint(state, 5.0, 5.0, cfg).snapped)


if __name__ == "__main__":
    unittest.main()
