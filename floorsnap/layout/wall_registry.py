"""Wall registry: the single owner of every collection that names a wall.

A wall number can appear in `walls`, `removed_walls`, `all_available_walls`,
`original_walls`, `custom_walls`, and as the owner of doors. Every mutation
here rewrites all of them together into one new `RoomState`, so a partially
removed wall is never observable.
"""

import logging
import math
import uuid

from dataclasses import dataclass, replace

from floorsnap.config import EngineConfig
from floorsnap.layout.endpoint_snapping import snap_wall_endpoint
from floorsnap.layout.placement import get_elements_on_wall
from floorsnap.layout.results import InvalidGeometryError, UnknownWallError
from floorsnap.layout.room import (
    STANDARD_WALL_NUMBERS,
    CustomWall,
    RoomState,
    is_standard_wall,
    wall_name,
)
from floorsnap.utils.geometry_utils import distance, segment_angle_deg

console_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FloorPlanPreset:
    """A named arrangement of the four standard walls."""

    walls: tuple[int, ...]
    removed_walls: tuple[int, ...]
    description: str


FLOOR_PLAN_PRESETS: dict[str, FloorPlanPreset] = {
    "traditional": FloorPlanPreset(
        (1, 2, 3, 4), (), "Traditional closed kitchen with all 4 walls"
    ),
    "open-concept": FloorPlanPreset(
        (1, 2, 4), (3,), "Open concept - south wall removed"
    ),
    "galley-open": FloorPlanPreset(
        (1, 3), (2, 4), "Galley style - east and west walls removed"
    ),
    "island-focused": FloorPlanPreset(
        (1,), (2, 3, 4), "Island-focused - only north wall remains"
    ),
    "peninsula": FloorPlanPreset(
        (1, 2, 3), (4,), "Peninsula layout - west wall removed"
    ),
}


def _with(numbers: tuple[int, ...], number: int) -> tuple[int, ...]:
    if number in numbers:
        return numbers
    return tuple(sorted(numbers + (number,)))


def _without(numbers: tuple[int, ...], number: int) -> tuple[int, ...]:
    return tuple(n for n in numbers if n != number)


class WallRegistry:
    """Wall operations over one room.

    Every method is pure: it returns a new `RoomState` and leaves the
    registry's own state untouched. Failures raise `LayoutError` subclasses
    before anything is built.
    """

    def __init__(self, state: RoomState, cfg: EngineConfig | None = None):
        self.state = state
        self.cfg = cfg or EngineConfig()

    def _require_custom(self, wall_number: int) -> CustomWall:
        wall = self.state.custom_wall(wall_number)
        if wall is None:
            raise UnknownWallError(f"No custom wall numbered {wall_number}")
        return wall

    def _replace_custom(self, wall: CustomWall) -> RoomState:
        custom_walls = tuple(
            wall if w.wall_number == wall.wall_number else w
            for w in self.state.custom_walls
        )
        return self.state.replace(custom_walls=custom_walls)

    def next_wall_number(self) -> int:
        """Next free wall number, never below 5."""
        numbers = (
            set(self.state.all_available_walls)
            | set(STANDARD_WALL_NUMBERS)
            | {w.wall_number for w in self.state.custom_walls}
        )
        return max(numbers) + 1

    # Standard walls.

    def add_standard_wall(self, wall_number: int) -> RoomState:
        """Restore a removed standard wall."""
        if not is_standard_wall(wall_number):
            raise UnknownWallError(f"{wall_number} is not a standard wall")
        console_logger.info(f"Restoring {wall_name(wall_number)} wall")
        return self.state.replace(
            walls=_with(self.state.walls, wall_number),
            removed_walls=_without(self.state.removed_walls, wall_number),
        )

    def remove_standard_wall(self, wall_number: int) -> RoomState:
        """Remove a standard wall along with every element resting against it.

        The caller confirms with the user first; `elements_on_wall` previews
        what will be deleted.
        """
        if not is_standard_wall(wall_number):
            raise UnknownWallError(f"{wall_number} is not a standard wall")

        doomed = {e.id for e in self.elements_on_wall(wall_number)}
        if doomed:
            console_logger.info(
                f"Removing {len(doomed)} element(s) resting on "
                f"{wall_name(wall_number)} wall"
            )
        console_logger.info(f"Removing {wall_name(wall_number)} wall")
        return self.state.replace(
            walls=_without(self.state.walls, wall_number),
            removed_walls=_with(self.state.removed_walls, wall_number),
            elements=tuple(e for e in self.state.elements if e.id not in doomed),
            materials={
                k: v for k, v in self.state.materials.items() if k not in doomed
            },
        )

    def elements_on_wall(self, wall_number: int):
        return get_elements_on_wall(self.state, wall_number, self.cfg)

    # Custom walls.

    def add_custom_wall(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        thickness: float | None = None,
        existed_prior: bool = False,
    ) -> tuple[RoomState, CustomWall]:
        """Register a drawn wall with both endpoints snapped.

        Args:
            x1, y1: Raw start click (room-local).
            x2, y2: Raw end click (room-local).
            thickness: Wall thickness. Defaults to the configured thickness.
            existed_prior: Pricing tag for walls that predate the remodel.

        Returns:
            (new_state, new_wall).

        Raises:
            InvalidGeometryError: If the wall is shorter than the minimum
                length, before or after snapping.
        """
        raw_length = distance((x1, y1), (x2, y2))
        if raw_length < self.cfg.min_wall_length:
            raise InvalidGeometryError(
                f"Wall too short ({raw_length:.1f}); minimum length is "
                f"{self.cfg.min_wall_length:g}"
            )

        start = snap_wall_endpoint(self.state, x1, y1, self.cfg)
        end = snap_wall_endpoint(self.state, x2, y2, self.cfg)
        snapped_length = distance(start.point, end.point)
        if snapped_length < self.cfg.min_wall_length:
            raise InvalidGeometryError(
                f"Wall collapses to {snapped_length:.1f} after snapping; minimum "
                f"length is {self.cfg.min_wall_length:g}"
            )

        if thickness is None:
            thickness = self.cfg.default_custom_wall_thickness
        if thickness <= 0:
            raise InvalidGeometryError(
                f"Wall thickness must be positive, got {thickness}"
            )

        wall_number = self.next_wall_number()
        wall = CustomWall(
            id=f"custom-wall-{uuid.uuid4().hex[:12]}",
            x1=start.x,
            y1=start.y,
            x2=end.x,
            y2=end.y,
            thickness=thickness,
            wall_number=wall_number,
            existed_prior=existed_prior,
        )
        state = self.state.replace(
            custom_walls=self.state.custom_walls + (wall,),
            walls=_with(self.state.walls, wall_number),
            all_available_walls=_with(self.state.all_available_walls, wall_number),
            original_walls=(
                _with(self.state.original_walls, wall_number)
                if existed_prior
                else self.state.original_walls
            ),
        )
        console_logger.info(
            f"Added {wall_name(wall_number)} from ({wall.x1:.1f}, {wall.y1:.1f}) "
            f"to ({wall.x2:.1f}, {wall.y2:.1f}), length {wall.length:.1f}"
        )
        return state, wall

    def rotate_custom_wall(self, wall_number: int, angle_deg: float) -> RoomState:
        """Set a custom wall's absolute angle, about its midpoint, at fixed length."""
        wall = self._require_custom(wall_number)
        mx, my = wall.midpoint
        half = wall.length / 2.0
        theta = math.radians(angle_deg)
        dx = math.cos(theta) * half
        dy = math.sin(theta) * half
        rotated = CustomWall(
            id=wall.id,
            x1=mx - dx,
            y1=my - dy,
            x2=mx + dx,
            y2=my + dy,
            thickness=wall.thickness,
            wall_number=wall.wall_number,
            existed_prior=wall.existed_prior,
            door_ids=wall.door_ids,
            angle=angle_deg,
        )
        console_logger.info(f"Rotated {wall_name(wall_number)} to {angle_deg:g} deg")
        return self._replace_custom(rotated)

    def resize_custom_wall(self, wall_number: int, new_length: float) -> RoomState:
        """Change a custom wall's length, keeping its midpoint and heading."""
        wall = self._require_custom(wall_number)
        if new_length < self.cfg.min_wall_length:
            raise InvalidGeometryError(
                f"Wall length {new_length:g} is below the minimum "
                f"{self.cfg.min_wall_length:g}"
            )
        mx, my = wall.midpoint
        theta = math.radians(segment_angle_deg(wall.start, wall.end))
        dx = math.cos(theta) * new_length / 2.0
        dy = math.sin(theta) * new_length / 2.0
        resized = CustomWall(
            id=wall.id,
            x1=mx - dx,
            y1=my - dy,
            x2=mx + dx,
            y2=my + dy,
            thickness=wall.thickness,
            wall_number=wall.wall_number,
            existed_prior=wall.existed_prior,
            door_ids=wall.door_ids,
            angle=wall.angle,
        )
        console_logger.info(f"Resized {wall_name(wall_number)} to {new_length:g}")
        return self._replace_custom(resized)

    def delete_custom_wall(self, wall_number: int) -> RoomState:
        """Purge a custom wall and its doors from every collection."""
        self._require_custom(wall_number)
        doors = tuple(d for d in self.state.doors if d.wall_number != wall_number)
        removed_doors = len(self.state.doors) - len(doors)
        if removed_doors:
            console_logger.info(
                f"Deleting {removed_doors} door(s) on {wall_name(wall_number)}"
            )
        console_logger.info(f"Deleted {wall_name(wall_number)}")
        return self.state.replace(
            custom_walls=tuple(
                w for w in self.state.custom_walls if w.wall_number != wall_number
            ),
            walls=_without(self.state.walls, wall_number),
            removed_walls=_without(self.state.removed_walls, wall_number),
            all_available_walls=_without(self.state.all_available_walls, wall_number),
            original_walls=_without(self.state.original_walls, wall_number),
            doors=doors,
        )

    def mark_wall_existed_prior(self, wall_number: int) -> RoomState:
        """Tag a wall as part of the pre-remodel baseline."""
        if not self.state.wall_exists(wall_number):
            raise UnknownWallError(f"No wall numbered {wall_number}")
        state = self.state
        wall = state.custom_wall(wall_number)
        if wall is not None and not wall.existed_prior:
            state = self._replace_custom(replace(wall, existed_prior=True))
        return state.replace(original_walls=_with(state.original_walls, wall_number))

    # Registry-wide operations.

    def apply_floor_plan_preset(self, name: str) -> RoomState:
        """Apply a named standard-wall preset and clear all elements.

        Present custom walls stay present.
        """
        preset = FLOOR_PLAN_PRESETS.get(name)
        if preset is None:
            raise KeyError(f"Unknown floor plan preset: {name!r}")
        custom_present = tuple(
            n for n in self.state.walls if not is_standard_wall(n)
        )
        custom_removed = tuple(
            n for n in self.state.removed_walls if not is_standard_wall(n)
        )
        console_logger.info(
            f"Applying floor plan preset {name!r}: {preset.description}"
        )
        return self.state.replace(
            walls=tuple(sorted(preset.walls + custom_present)),
            removed_walls=tuple(sorted(preset.removed_walls + custom_removed)),
            elements=(),
            materials={},
        )

    def cleanup_available_walls(self) -> RoomState:
        """Drop custom wall numbers with no backing wall from the registry."""
        existing = {w.wall_number for w in self.state.custom_walls}
        kept = tuple(
            n
            for n in self.state.all_available_walls
            if is_standard_wall(n) or n in existing
        )
        dropped = len(self.state.all_available_walls) - len(kept)
        if dropped:
            console_logger.warning(
                f"Dropped {dropped} stale wall number(s) from registry"
            )
        return self.state.replace(all_available_walls=kept)
