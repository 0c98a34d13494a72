"""Unit tests for engine configuration loading."""

import unittest

from pathlib import Path

from omegaconf import OmegaConf
from omegaconf.errors import ConfigKeyError, ValidationError

from floorsnap.config import EngineConfig

CONFIG_PATH = Path(__file__).parents[2] / "configurations" / "config.yaml"


class TestEngineConfig(unittest.TestCase):
    """Test EngineConfig.from_config."""

    def test_none_gives_defaults(self):
        self.assertEqual(EngineConfig.from_config(None), EngineConfig())

    def test_partial_override(self):
        cfg = EngineConfig.from_config(OmegaConf.create({"fixture_snap_distance": 4}))
        self.assertIsInstance(cfg, EngineConfig)
        self.assertEqual(cfg.fixture_snap_distance, 4.0)
        self.assertEqual(cfg.endpoint_snap_distance, 12.0)

    def test_plain_dict(self):
        cfg = EngineConfig.from_config({"align_rotation_to_custom_walls": False})
        self.assertFalse(cfg.align_rotation_to_custom_walls)

    def test_unknown_key_raises(self):
        with self.assertRaises(ConfigKeyError):
            EngineConfig.from_config({"snap_everything": True})

    def test_wrong_type_raises(self):
        with self.assertRaises(ValidationError):
            EngineConfig.from_config({"min_wall_length": "long"})

    def test_shipped_config_matches_defaults(self):
        cfg = OmegaConf.load(CONFIG_PATH)
        self.assertEqual(EngineConfig.from_config(cfg.engine), EngineConfig())
        self.assertEqual(cfg.room, "kitchen")
        self.assertIsNone(cfg.input_path)


if __name__ == "__main__":
    unittest.main()
