"""Door clearance zone computation and violation detection.

This module provides:
- Derived clearance zones, regenerated from wall and door state on demand
- AABB-based collision checks of fixture footprints against those zones
- Violation records for reporting blocked doors
"""

import logging
import math

from dataclasses import dataclass

from floorsnap.config import EngineConfig
from floorsnap.layout.room import Door, RoomState, StandardWall, is_standard_wall
from floorsnap.utils.geometry_utils import (
    Point,
    aabb_intersects,
    rect_to_bounds,
    rotated_rect_bounds,
    segment_angle_deg,
)

console_logger = logging.getLogger(__name__)

Bounds = tuple[float, float, float, float]


@dataclass(frozen=True)
class DoorClearanceZone:
    """Protected floor rectangle in front of a door opening.

    Never persisted. Standard-wall zones are axis-aligned; custom-wall zones are
    rotated rectangles whose depth axis points along `angle`.
    """

    door_id: str
    wall_number: int

    center_x: float
    center_y: float

    width: float
    """Extent along the wall."""

    depth: float
    """Extent away from the wall, into the room."""

    angle: float | None = None
    """Heading of the depth axis in degrees (wall angle + 90). None if axis-aligned."""

    @property
    def is_rotated(self) -> bool:
        return self.angle is not None

    @property
    def center(self) -> Point:
        return (self.center_x, self.center_y)

    @property
    def bounds(self) -> Bounds:
        """Axis-aligned box used for collision.

        For rotated zones this is the bounding box of the rotated corners, a
        conservative over-approximation.
        """
        if self.angle is None:
            return self._axis_aligned_bounds()
        return rotated_rect_bounds(self.center, self.depth, self.width, self.angle)

    def _axis_aligned_bounds(self) -> Bounds:
        wall = StandardWall(self.wall_number)
        if wall.is_horizontal:
            w, h = self.width, self.depth
        else:
            w, h = self.depth, self.width
        return rect_to_bounds(self.center_x - w / 2.0, self.center_y - h / 2.0, w, h)

    def to_dict(self) -> dict:
        min_x, min_y, max_x, max_y = self.bounds
        data = {
            "doorId": self.door_id,
            "wallNumber": self.wall_number,
            "x": min_x,
            "y": min_y,
            "width": max_x - min_x,
            "height": max_y - min_y,
        }
        if self.angle is not None:
            data.update(
                {
                    "centerX": self.center_x,
                    "centerY": self.center_y,
                    "zoneWidth": self.width,
                    "zoneDepth": self.depth,
                    "angle": self.angle,
                }
            )
        return data


@dataclass
class DoorClearanceViolation:
    """Violation when a fixture blocks a door clearance zone."""

    element_id: str
    """ID of the fixture blocking the door."""

    door_id: str
    """ID of the blocked door."""

    penetration_depth: float
    """How far the fixture penetrates the clearance zone."""

    def to_description(self) -> str:
        return (
            f"Element {self.element_id} blocks door {self.door_id} "
            f"({self.penetration_depth:.1f}in penetration)"
        )


def _standard_door_center(
    state: RoomState, wall: StandardWall, position: float, cfg: EngineConfig
) -> float:
    """Door center along a standard wall, in room-local coordinates.

    Uses the drawn wall's extent (room edge plus overhang at both corners) so
    the zone lines up with the rendered opening.
    """
    overhang = cfg.standard_wall_render_overhang
    span = state.width if wall.is_horizontal else state.depth
    return -overhang + position / 100.0 * (span + 2.0 * overhang)


def _standard_zone(
    state: RoomState, door: Door, cfg: EngineConfig
) -> DoorClearanceZone:
    wall = StandardWall(door.wall_number)
    clearance_width = door.width * cfg.clearance_width_multiplier
    clearance_depth = door.width * cfg.clearance_depth_multiplier
    along = _standard_door_center(state, wall, door.position, cfg)

    # Zone extends from the wall's inner face into the room.
    if wall == StandardWall.NORTH:
        center = (along, clearance_depth / 2.0)
    elif wall == StandardWall.SOUTH:
        center = (along, state.depth - clearance_depth / 2.0)
    elif wall == StandardWall.WEST:
        center = (clearance_depth / 2.0, along)
    else:  # EAST
        center = (state.width - clearance_depth / 2.0, along)

    return DoorClearanceZone(
        door_id=door.id,
        wall_number=door.wall_number,
        center_x=center[0],
        center_y=center[1],
        width=clearance_width,
        depth=clearance_depth,
    )


def _custom_zone(
    state: RoomState, door: Door, cfg: EngineConfig
) -> DoorClearanceZone | None:
    wall = state.custom_wall(door.wall_number)
    if wall is None:
        return None
    clearance_width = door.width * cfg.clearance_width_multiplier
    clearance_depth = door.width * cfg.clearance_depth_multiplier

    t = door.position / 100.0
    door_x = wall.x1 + t * (wall.x2 - wall.x1)
    door_y = wall.y1 + t * (wall.y2 - wall.y1)

    wall_angle = segment_angle_deg(wall.start, wall.end)
    perp_angle = wall_angle + 90.0
    theta = math.radians(perp_angle)
    return DoorClearanceZone(
        door_id=door.id,
        wall_number=door.wall_number,
        center_x=door_x + math.cos(theta) * clearance_depth / 2.0,
        center_y=door_y + math.sin(theta) * clearance_depth / 2.0,
        width=clearance_width,
        depth=clearance_depth,
        angle=perp_angle,
    )


def compute_door_clearance_zones(
    state: RoomState, cfg: EngineConfig | None = None
) -> list[DoorClearanceZone]:
    """Derive the clearance zone of every door on a present wall.

    Doors on removed walls produce no zone. Doors whose wall no longer exists
    are skipped as stale references.

    Args:
        state: Room with walls and doors.
        cfg: Engine configuration (clearance multipliers, render constants).

    Returns:
        Clearance zones in door order.
    """
    cfg = cfg or EngineConfig()
    zones = []
    for door in state.doors:
        if not state.wall_exists(door.wall_number):
            console_logger.warning(
                f"Door {door.id} references missing wall {door.wall_number}, skipping"
            )
            continue
        if not state.is_wall_present(door.wall_number):
            continue

        if is_standard_wall(door.wall_number):
            zone = _standard_zone(state, door, cfg)
        else:
            zone = _custom_zone(state, door, cfg)
        if zone is not None:
            zones.append(zone)
    return zones


def find_blocking_zone(
    bounds: Bounds, zones: list[DoorClearanceZone]
) -> DoorClearanceZone | None:
    """First clearance zone that strictly overlaps the given footprint bounds."""
    for zone in zones:
        if aabb_intersects(bounds, zone.bounds):
            return zone
    return None


def _compute_penetration_depth(obj: Bounds, zone: Bounds) -> float:
    """Minimum overlap across both axes."""
    penetration_x = min(obj[2] - zone[0], zone[2] - obj[0])
    penetration_y = min(obj[3] - zone[1], zone[3] - obj[1])
    return min(penetration_x, penetration_y)


def compute_door_clearance_violations(
    state: RoomState, cfg: EngineConfig | None = None
) -> list[DoorClearanceViolation]:
    """Check every element footprint against every door clearance zone.

    Args:
        state: Room with elements and doors.
        cfg: Engine configuration.

    Returns:
        List of door clearance violations.
    """
    violations = []
    zones = compute_door_clearance_zones(state, cfg)
    if not zones:
        return violations

    for element in state.elements:
        obj_bounds = element.bounds
        for zone in zones:
            zone_bounds = zone.bounds
            if aabb_intersects(obj_bounds, zone_bounds):
                violations.append(
                    DoorClearanceViolation(
                        element_id=element.id,
                        door_id=zone.door_id,
                        penetration_depth=_compute_penetration_depth(
                            obj_bounds, zone_bounds
                        ),
                    )
                )
    return violations
