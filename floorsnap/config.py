"""Configuration for the layout engine."""

import logging

from dataclasses import dataclass

from omegaconf import DictConfig, OmegaConf

console_logger = logging.getLogger(__name__)


@dataclass
class EngineConfig:
    """Tolerances and constants used by the snap/collision pipeline.

    All distances are in engine units (inches), the same units as room
    dimensions and fixture footprints.
    """

    endpoint_snap_distance: float = 12.0
    """Radius for snapping a drawn wall endpoint to existing geometry."""

    fixture_snap_distance: float = 8.0
    """Maximum edge gap for fixture-to-fixture flush snapping."""

    standard_wall_snap_distance: float = 12.0
    """Maximum gap for snapping a fixture onto a standard wall."""

    wall_snap_search_radius: float = 20.0
    """How far a wall-snapped fixture may shift to get clear of a custom wall."""

    wall_snap_search_step: float = 5.0
    """Step of the nearby search after a wall snap lands inside a custom wall."""

    custom_wall_snap_distance: float = 8.0
    """Maximum center-to-wall distance for snapping onto a custom wall."""

    rotation_snap_increment_deg: float = 15.0
    """Rotation granularity when aligning a fixture to a custom wall."""

    align_rotation_to_custom_walls: bool = True
    """Whether custom-wall snapping also aligns the fixture rotation."""

    wall_collision_t_min: float = -0.1
    """Lower parametric bound of the wall collision extent."""

    wall_collision_t_max: float = 1.1
    """Upper parametric bound of the wall collision extent."""

    clearance_depth_multiplier: float = 1.5
    """Clearance zone depth as a multiple of door width."""

    clearance_width_multiplier: float = 1.0
    """Clearance zone width as a multiple of door width."""

    standard_wall_render_overhang: float = 10.0
    """How far a drawn standard wall extends past each room corner."""

    placement_grid_step: float = 50.0
    """Grid step used when searching for a clearance-free add position."""

    min_wall_length: float = 20.0
    """Shortest custom wall that can be drawn."""

    min_wall_length_for_advisory: float = 5.0
    """Shorter drag distances are treated as accidental clicks, not attempts."""

    default_custom_wall_thickness: float = 6.0
    """Thickness assigned to newly drawn custom walls."""

    wall_occupancy_threshold: float = 20.0
    """Distance from a standard wall's inner face that counts as resting on it."""

    drag_throttle_ms: float = 16.0
    """Minimum interval between published drag previews."""

    default_wall_height: float = 96.0
    """Wall height used when a record does not specify one."""

    default_door_width: float = 32.0
    """Door width used when none is given."""

    @classmethod
    def from_config(cls, cfg: DictConfig | dict | None) -> "EngineConfig":
        """Create config from a Hydra/OmegaConf subtree.

        Missing keys keep their defaults; unknown keys raise.

        Args:
            cfg: Engine config subtree (cfg.engine), a plain dict, or None.

        Returns:
            EngineConfig instance.
        """
        schema = OmegaConf.structured(cls)
        if cfg is None:
            return OmegaConf.to_object(schema)
        merged = OmegaConf.merge(schema, cfg)
        config = OmegaConf.to_object(merged)
        console_logger.debug(f"Engine config loaded: {config}")
        return config
