"""Legality checks that gate every committed placement."""

from dataclasses import dataclass

from floorsnap.config import EngineConfig
from floorsnap.layout.clearance_zones import (
    DoorClearanceZone,
    compute_door_clearance_zones,
    find_blocking_zone,
)
from floorsnap.layout.room import CustomWall, RoomState, wall_name
from floorsnap.utils.geometry_utils import (
    DISTANCE_EPSILON,
    point_line_distance,
    project_parameter,
    rect_to_bounds,
)


def collides_with_wall(
    x: float, y: float, w: float, h: float, wall: CustomWall, cfg: EngineConfig
) -> bool:
    """Whether a footprint overlaps a thick custom wall.

    The fixture is approximated by its center and minor half-extent: it
    collides when its center is closer to the wall's line than
    (thickness + min(w, h)) / 2 and the perpendicular foot falls within the
    wall's parametric extent [t_min, t_max]. Touching exactly is legal.

    Args:
        x: Footprint top-left X.
        y: Footprint top-left Y.
        w: Footprint width in room axes.
        h: Footprint height in room axes.
        wall: Custom wall to test.
        cfg: Engine configuration (t bounds).

    Returns:
        True if the footprint collides with the wall.
    """
    center = (x + w / 2.0, y + h / 2.0)
    t = project_parameter(center, wall.start, wall.end)
    if t is None:
        return False
    if not cfg.wall_collision_t_min <= t <= cfg.wall_collision_t_max:
        return False
    threshold = (wall.thickness + min(w, h)) / 2.0
    gap = point_line_distance(center, wall.start, wall.end)
    return gap < threshold - DISTANCE_EPSILON


def check_wall_collision(
    state: RoomState,
    x: float,
    y: float,
    w: float,
    h: float,
    cfg: EngineConfig | None = None,
) -> CustomWall | None:
    """First present custom wall the footprint collides with, or None.

    Standard walls are enforced by the room-bounds clamp instead.
    """
    cfg = cfg or EngineConfig()
    for wall in state.present_custom_walls():
        if collides_with_wall(x, y, w, h, wall, cfg):
            return wall
    return None


@dataclass(frozen=True)
class PlacementCheck:
    """Outcome of validating one candidate footprint."""

    wall: CustomWall | None = None
    """Colliding custom wall, if any."""

    zone: DoorClearanceZone | None = None
    """Intruded door clearance zone, if any."""

    @property
    def legal(self) -> bool:
        return self.wall is None and self.zone is None

    def describe(self) -> str:
        if self.wall is not None:
            return f"Collides with {wall_name(self.wall.wall_number)}"
        if self.zone is not None:
            return f"Blocks the clearance zone of door {self.zone.door_id}"
        return "Placement is clear"


def check_placement(
    state: RoomState,
    x: float,
    y: float,
    w: float,
    h: float,
    cfg: EngineConfig | None = None,
    zones: list[DoorClearanceZone] | None = None,
) -> PlacementCheck:
    """Validate a footprint against present walls and door clearance zones.

    Args:
        state: Room to validate against.
        x, y: Footprint top-left.
        w, h: Footprint size in room axes (already swapped for rotation).
        cfg: Engine configuration.
        zones: Precomputed clearance zones. Derived from `state` if omitted.

    Returns:
        A PlacementCheck naming the first obstruction found, walls first.
    """
    cfg = cfg or EngineConfig()
    wall = check_wall_collision(state, x, y, w, h, cfg)
    if wall is not None:
        return PlacementCheck(wall=wall)

    if zones is None:
        zones = compute_door_clearance_zones(state, cfg)
    zone = find_blocking_zone(rect_to_bounds(x, y, w, h), zones)
    if zone is not None:
        return PlacementCheck(zone=zone)
    return PlacementCheck()


@dataclass
class WallCollisionViolation:
    """Violation when a fixture overlaps a present custom wall."""

    element_id: str
    wall_number: int

    def to_description(self) -> str:
        return f"Element {self.element_id} overlaps {wall_name(self.wall_number)}"


def compute_wall_collision_violations(
    state: RoomState, cfg: EngineConfig | None = None
) -> list[WallCollisionViolation]:
    """Check every element against every present custom wall."""
    cfg = cfg or EngineConfig()
    violations = []
    for element in state.elements:
        w, h = element.footprint
        for wall in state.present_custom_walls():
            if collides_with_wall(element.x, element.y, w, h, wall, cfg):
                violations.append(
                    WallCollisionViolation(
                        element_id=element.id, wall_number=wall.wall_number
                    )
                )
    return violations
