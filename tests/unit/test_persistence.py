"""Unit tests for room record persistence."""

import json
import shutil
import tempfile
import unittest

from pathlib import Path

from floorsnap.config import EngineConfig
from floorsnap.layout.catalog import DEFAULT_ENTRIES, Catalog, FixtureType
from floorsnap.layout.persistence import (
    dump_room_state,
    filter_to_catalog,
    load_room_state,
    load_room_state_file,
    save_room_state_file,
)
from floorsnap.layout.placement import add_element
from floorsnap.layout.room import RoomDimensions, RoomState


def _catalog_without(*fixture_types):
    return Catalog({k: v for k, v in DEFAULT_ENTRIES.items() if k not in fixture_types})


class TestPersistence(unittest.TestCase):
    """Test dumping, loading and catalog filtering of room records."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        state = RoomState.empty(RoomDimensions(width=144.0, depth=120.0))
        state, base = add_element(state, "base")
        state, stove = add_element(state, "stove")
        self.base_id = base.data["element_id"]
        self.stove_id = stove.data["element_id"]
        self.state = state

    def tearDown(self):
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir)

    def test_dump_then_load(self):
        record = dump_room_state(self.state)
        json.dumps(record)
        self.assertEqual(load_room_state(record), self.state)

    def test_dump_drops_retired_types(self):
        catalog = _catalog_without(FixtureType.BASE)
        with self.assertLogs("floorsnap.layout.persistence", level="WARNING"):
            record = dump_room_state(self.state, catalog)
        self.assertEqual([e["id"] for e in record["elements"]], [self.stove_id])
        self.assertNotIn(self.base_id, record["materials"])

    def test_load_drops_retired_types(self):
        record = dump_room_state(self.state)
        catalog = _catalog_without(FixtureType.STOVE)
        with self.assertLogs("floorsnap.layout.persistence", level="WARNING"):
            state = load_room_state(record, catalog=catalog)
        self.assertEqual([e.id for e in state.elements], [self.base_id])

    def test_load_recovers_unknown_category(self):
        record = dump_room_state(self.state)
        record["elements"][0]["category"] = "furniture"
        with self.assertLogs("floorsnap.layout.room", level="WARNING"):
            state = load_room_state(record)
        self.assertEqual(state.elements, self.state.elements)

    def test_filter_is_identity_when_nothing_dropped(self):
        self.assertIs(filter_to_catalog(self.state), self.state)

    def test_load_uses_configured_defaults(self):
        record = {
            "dimensions": {"width": 100, "height": 80},
            "customWalls": [
                {"id": "w", "x1": 10, "y1": 10, "x2": 60, "y2": 10, "wallNumber": 5}
            ],
        }
        cfg = EngineConfig(default_wall_height=108.0, default_custom_wall_thickness=4.0)
        state = load_room_state(record, cfg)
        self.assertEqual(state.dimensions.wall_height, 108.0)
        self.assertEqual(state.custom_wall(5).thickness, 4.0)
        self.assertEqual(state.all_available_walls, (1, 2, 3, 4, 5))

    def test_file_round_trip(self):
        path = self.temp_dir / "nested" / "room.json"
        save_room_state_file(self.state, path)
        self.assertTrue(path.exists())
        self.assertEqual(load_room_state_file(path), self.state)


if __name__ == "__main__":
    unittest.main()
