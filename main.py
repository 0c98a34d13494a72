"""
Command-line entry point. Loads a saved room record, reports its legality and
door clearance zones, and optionally writes the cleaned record back.
"""

import json
import logging
import os
import sys

from pathlib import Path

import hydra

from omegaconf import DictConfig, OmegaConf

from floorsnap.config import EngineConfig
from floorsnap.layout.clearance_zones import (
    compute_door_clearance_violations,
    compute_door_clearance_zones,
)
from floorsnap.layout.collision import compute_wall_collision_violations
from floorsnap.layout.interaction import DesignSession, RoomKind
from floorsnap.layout.persistence import save_room_state_file
from floorsnap.layout.room import wall_name
from floorsnap.utils.logging import FileLoggingContext

console_logger = logging.getLogger(__name__)


def run_local(cfg: DictConfig) -> int:
    engine_cfg = EngineConfig.from_config(cfg.get("engine"))

    hydra_cfg = hydra.core.hydra_config.HydraConfig.get()
    output_dir = Path(hydra_cfg.runtime.output_dir)
    log_path = output_dir / "floorsnap.log"

    with FileLoggingContext(log_file_path=log_path, suppress_stdout=False):
        console_logger.info(f"Outputs will be saved to: {output_dir}")
        console_logger.debug("Resolved configuration:\n" + OmegaConf.to_yaml(cfg))

        input_path = Path(cfg.input_path)
        with open(input_path) as f:
            data = json.load(f)

        # Accept a bare room record as well as a multi-room design record.
        if "dimensions" in data:
            data = {cfg.room: data}
        session = DesignSession.from_dict(data, cfg=engine_cfg)
        result = session.switch_room(cfg.room)
        if not result.success:
            console_logger.error(result.message)
            return 1
        state = session.state

        console_logger.info(
            f"{cfg.room}: {state.width:g} x {state.depth:g}, "
            f"{len(state.custom_walls)} custom wall(s), {len(state.doors)} door(s), "
            f"{len(state.elements)} element(s)"
        )
        present = ", ".join(wall_name(n) for n in state.walls)
        console_logger.info(f"Present walls: {present}")

        for zone in compute_door_clearance_zones(state, engine_cfg):
            min_x, min_y, max_x, max_y = zone.bounds
            console_logger.info(
                f"Clearance zone for door {zone.door_id} on "
                f"{wall_name(zone.wall_number)}: ({min_x:.1f}, {min_y:.1f}) - "
                f"({max_x:.1f}, {max_y:.1f})"
            )

        violations = [
            v.to_description()
            for v in compute_wall_collision_violations(state, engine_cfg)
        ]
        violations += [
            v.to_description()
            for v in compute_door_clearance_violations(state, engine_cfg)
        ]
        for description in violations:
            console_logger.warning(description)
        if not violations:
            console_logger.info("Layout is legal")

        if cfg.output_path:
            save_room_state_file(state, Path(cfg.output_path))

    return 1 if violations and cfg.strict else 0


@hydra.main(version_base=None, config_path="configurations", config_name="config")
def run(cfg: DictConfig):
    if not cfg.get("input_path"):
        raise ValueError(
            "Must specify a room record with command line argument "
            "'input_path=[path]'"
        )
    RoomKind(cfg.room)  # Raises on unknown room names.

    # Configure logging level from LOGLEVEL environment variable.
    log_level = os.environ.get("LOGLEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    return run_local(cfg)


if __name__ == "__main__":
    sys.exit(run())
