"""Unit tests for fixture snap resolution."""

import math
import unittest

from floorsnap.config import EngineConfig
from floorsnap.layout.catalog import DEFAULT_ENTRIES, Catalog, FixtureType
from floorsnap.layout.room import CustomWall, Element, RoomDimensions, RoomState
from floorsnap.layout.snapping import (
    SnapSource,
    clamp_to_room,
    resolve_snap,
    search_clear_of_walls,
    snap_rotation,
    snap_to_custom_wall,
)


def _element(element_id, x, y, fixture_type=FixtureType.BASE, width=24.0, depth=24.0):
    entry = DEFAULT_ENTRIES[fixture_type]
    return Element(
        id=element_id,
        fixture_type=fixture_type,
        category=entry.category,
        x=x,
        y=y,
        width=width,
        depth=depth,
    )


def _custom_wall(x1, y1, x2, y2, wall_number=5):
    return CustomWall(
        id=f"w{wall_number}",
        x1=x1,
        y1=y1,
        x2=x2,
        y2=y2,
        thickness=6.0,
        wall_number=wall_number,
    )


class TestFixtureSnap(unittest.TestCase):
    """Test fixture-to-fixture alignment."""

    def setUp(self):
        self.cfg = EngineConfig()
        self.neighbor = _element("a", 100.0, 100.0)
        self.moving = _element("b", 0.0, 0.0)
        self.state = RoomState.empty(RoomDimensions(width=240.0, depth=240.0)).replace(
            elements=(self.neighbor, self.moving)
        )

    def test_flush_against_left_edge(self):
        snap = resolve_snap(self.state, self.moving, 70.0, 102.0, self.cfg)
        self.assertEqual((snap.x, snap.y), (76.0, 102.0))
        self.assertEqual(snap.source, SnapSource.FIXTURE)
        self.assertEqual(snap.anchor, "a")

    def test_flush_against_right_edge(self):
        snap = resolve_snap(self.state, self.moving, 129.0, 95.0, self.cfg)
        self.assertEqual((snap.x, snap.y), (124.0, 95.0))

    def test_below_neighbor(self):
        snap = resolve_snap(self.state, self.moving, 110.0, 130.0, self.cfg)
        self.assertEqual((snap.x, snap.y), (110.0, 124.0))
        self.assertEqual(snap.source, SnapSource.FIXTURE)

    def test_resolving_a_snapped_position_is_stable(self):
        first = resolve_snap(self.state, self.moving, 70.0, 102.0, self.cfg)
        second = resolve_snap(self.state, self.moving, first.x, first.y, self.cfg)
        self.assertEqual((first.x, first.y), (second.x, second.y))

    def test_element_never_snaps_to_itself(self):
        snap = resolve_snap(self.state, self.neighbor, 101.0, 101.0, self.cfg)
        self.assertEqual(snap.source, SnapSource.NONE)
        self.assertEqual((snap.x, snap.y), (101.0, 101.0))

    def test_neighbor_missing_from_catalog_is_ignored(self):
        stove = _element("a", 100.0, 100.0, FixtureType.STOVE, 24.0, 24.0)
        state = self.state.replace(elements=(stove, self.moving))
        catalog = Catalog(
            {k: v for k, v in DEFAULT_ENTRIES.items() if k != FixtureType.STOVE}
        )
        snap = resolve_snap(state, self.moving, 70.0, 102.0, self.cfg, catalog)
        self.assertEqual(snap.source, SnapSource.NONE)
        self.assertEqual((snap.x, snap.y), (70.0, 102.0))

    def test_fixture_beats_standard_wall(self):
        neighbor = _element("a", 100.0, 0.0)
        state = self.state.replace(elements=(neighbor, self.moving))
        snap = resolve_snap(state, self.moving, 130.0, 5.0, self.cfg)
        self.assertEqual(snap.source, SnapSource.FIXTURE)
        self.assertEqual((snap.x, snap.y), (124.0, 5.0))


class TestWallSnap(unittest.TestCase):
    """Test standard and custom wall snapping."""

    def setUp(self):
        self.cfg = EngineConfig()
        self.moving = _element("b", 0.0, 0.0)
        self.state = RoomState.empty(RoomDimensions(width=240.0, depth=240.0)).replace(
            elements=(self.moving,)
        )

    def test_clamped_into_room(self):
        snap = resolve_snap(self.state, self.moving, 300.0, -40.0, self.cfg)
        self.assertEqual((snap.x, snap.y), (216.0, 0.0))
        clamped = clamp_to_room(self.state, -5.0, 250.0, 24.0, 24.0)
        self.assertEqual(clamped, (0.0, 216.0))

    def test_standard_wall(self):
        snap = resolve_snap(self.state, self.moving, 5.0, 100.0, self.cfg)
        self.assertEqual((snap.x, snap.y), (0.0, 100.0))
        self.assertEqual(snap.source, SnapSource.STANDARD_WALL)
        self.assertEqual(snap.anchor, "4")

    def test_corner_snaps_both_axes(self):
        snap = resolve_snap(self.state, self.moving, 5.0, 5.0, self.cfg)
        self.assertEqual((snap.x, snap.y), (0.0, 0.0))
        self.assertEqual(snap.anchor, "4,1")

    def test_removed_standard_wall_does_not_snap(self):
        state = self.state.replace(walls=(1, 2, 3), removed_walls=(4,))
        snap = resolve_snap(state, self.moving, 5.0, 100.0, self.cfg)
        self.assertEqual(snap.source, SnapSource.NONE)
        self.assertEqual((snap.x, snap.y), (5.0, 100.0))

    def _with_custom_wall(self, wall):
        return self.state.replace(
            walls=(1, 2, 3, 4, wall.wall_number),
            custom_walls=(wall,),
            all_available_walls=(1, 2, 3, 4, wall.wall_number),
        )

    def test_wall_snap_into_custom_wall_searches_nearby(self):
        # West snap puts the center 12 from the wall, inside its collision band.
        state = self._with_custom_wall(_custom_wall(24.0, 50.0, 24.0, 110.0))
        snap = resolve_snap(state, self.moving, 5.0, 40.0, self.cfg)
        self.assertEqual(snap.source, SnapSource.STANDARD_WALL)
        self.assertEqual((snap.x, snap.y), (0.0, 20.0))

    def test_nearby_search_can_come_up_empty(self):
        cfg = EngineConfig(wall_snap_search_radius=0.0)
        state = self._with_custom_wall(_custom_wall(24.0, 50.0, 24.0, 110.0))
        self.assertIsNone(search_clear_of_walls(state, 0.0, 40.0, 24.0, 24.0, cfg))
        snap = resolve_snap(state, self.moving, 5.0, 40.0, cfg)
        self.assertEqual((snap.x, snap.y), (0.0, 40.0))

    def test_custom_wall(self):
        state = self._with_custom_wall(_custom_wall(40.0, 120.0, 160.0, 120.0))
        snap = resolve_snap(state, self.moving, 100.0, 110.0, self.cfg)
        self.assertEqual(snap.source, SnapSource.CUSTOM_WALL)
        self.assertEqual(snap.anchor, "5")
        self.assertAlmostEqual(snap.x, 100.0)
        self.assertAlmostEqual(snap.y, 123.0)
        self.assertEqual(snap.rotation, 0.0)

    def test_custom_wall_other_side(self):
        state = self._with_custom_wall(_custom_wall(40.0, 120.0, 160.0, 120.0))
        snap = resolve_snap(state, self.moving, 100.0, 102.0, self.cfg)
        self.assertAlmostEqual(snap.y, 120.0 - 15.0 - 24.0)

    def test_custom_wall_rotation_rounds_to_increment(self):
        theta = math.radians(44.0)
        wall = _custom_wall(
            60.0, 100.0, 60.0 + 100.0 * math.cos(theta), 100.0 + 100.0 * math.sin(theta)
        )
        state = self._with_custom_wall(wall)
        snap = resolve_snap(state, self.moving, 80.0, 127.0, self.cfg)
        self.assertEqual(snap.source, SnapSource.CUSTOM_WALL)
        self.assertEqual(snap.rotation, 45.0)

    def test_rotation_alignment_can_be_disabled(self):
        cfg = EngineConfig(align_rotation_to_custom_walls=False)
        wall = _custom_wall(60.0, 60.0, 60.0, 180.0)
        snap = snap_to_custom_wall(
            self._with_custom_wall(wall), 52.0, 100.0, 24.0, 24.0, 0.0, cfg
        )
        self.assertEqual(snap.rotation, 0.0)
        # Center (64, 112) is east of the wall; pushed to x = 60 + 15.
        self.assertAlmostEqual(snap.x + 12.0, 75.0)

    def test_removed_custom_wall_does_not_snap(self):
        state = self._with_custom_wall(_custom_wall(40.0, 120.0, 160.0, 120.0))
        state = state.replace(walls=(1, 2, 3, 4), removed_walls=(5,))
        snap = resolve_snap(state, self.moving, 100.0, 110.0, self.cfg)
        self.assertEqual(snap.source, SnapSource.NONE)


class TestSnapRotation(unittest.TestCase):
    """Test free rotation rounding."""

    def test_rounding(self):
        self.assertEqual(snap_rotation(44.0), 45.0)
        self.assertEqual(snap_rotation(-10.0), 345.0)
        self.assertEqual(snap_rotation(float("nan")), 0.0)
        quarter_turns = EngineConfig(rotation_snap_increment_deg=90)
        self.assertEqual(snap_rotation(44.0, quarter_turns), 0.0)


if __name__ == "__main__":
    unittest.main()
