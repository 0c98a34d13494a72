"""Snap resolution for dragged and added fixtures.

Given a candidate top-left and rotated footprint, `resolve_snap` clamps to the
room and then applies exactly one snap source, in priority order:

1. fixture-to-fixture flush alignment,
2. fixture-to-standard-wall, shifted by a bounded nearby search when the
   snapped footprint lands inside a custom wall,
3. fixture-to-custom-wall (position and, optionally, rotation).

Beyond that search, snapping never validates legality; callers check the result with
`collision.check_placement` before committing it.
"""

import logging
import math

from dataclasses import dataclass
from enum import Enum

from floorsnap.config import EngineConfig
from floorsnap.layout.catalog import DEFAULT_CATALOG, Catalog
from floorsnap.layout.collision import check_wall_collision
from floorsnap.layout.room import Element, RoomState, StandardWall, footprint_size
from floorsnap.utils.geometry_utils import (
    closest_point_on_segment,
    distance,
    segment_angle_deg,
    side_of_line,
    snap_angle,
    unit_normal,
)

console_logger = logging.getLogger(__name__)


class SnapSource(str, Enum):
    """Which anchor produced a snapped position."""

    NONE = "none"
    FIXTURE = "fixture"
    STANDARD_WALL = "standard_wall"
    CUSTOM_WALL = "custom_wall"


@dataclass(frozen=True)
class SnapResult:
    """A proposed position for a fixture."""

    x: float
    y: float
    rotation: float
    source: SnapSource = SnapSource.NONE

    anchor: str | None = None
    """Neighbor element id or wall number that produced the snap."""

    @property
    def snapped(self) -> bool:
        return self.source != SnapSource.NONE


def clamp_to_room(
    state: RoomState, x: float, y: float, w: float, h: float
) -> tuple[float, float]:
    """Keep a footprint inside the room rectangle."""
    x = max(0.0, min(x, state.width - w))
    y = max(0.0, min(y, state.depth - h))
    return x, y


def snap_to_fixture(
    state: RoomState,
    x: float,
    y: float,
    w: float,
    h: float,
    exclude_id: str | None,
    cfg: EngineConfig,
    catalog: Catalog = DEFAULT_CATALOG,
) -> tuple[float, float, str | None]:
    """Align flush with a neighboring fixture edge.

    A neighbor qualifies on one side when the facing edges are within
    `fixture_snap_distance` and the perpendicular extents overlap within the
    neighbor's own extent. Each neighbor contributes at most one side (right,
    left, bottom, top, in that order). The nearest X and the nearest Y snap
    are applied independently; exact ties keep the earlier neighbor.

    Returns:
        (x, y, anchor_id). anchor_id is None when nothing snapped.
    """
    snap_distance = cfg.fixture_snap_distance
    best_x: tuple[float, float, str] | None = None
    best_y: tuple[float, float, str] | None = None

    for other in state.elements:
        if other.id == exclude_id or other.fixture_type not in catalog:
            continue
        ox, oy = other.x, other.y
        ow, oh = other.footprint

        overlaps_vertically = abs(oy - y) < oh and abs((oy + oh) - (y + h)) < oh
        overlaps_horizontally = abs(ox - x) < ow and abs((ox + ow) - (x + w)) < ow

        candidate_x = candidate_y = None
        if abs((ox + ow) - x) < snap_distance and overlaps_vertically:
            # Against the neighbor's right edge.
            candidate_x = (abs((ox + ow) - x), ox + ow)
        elif abs(ox - (x + w)) < snap_distance and overlaps_vertically:
            # Against the neighbor's left edge.
            candidate_x = (abs(ox - (x + w)), ox - w)
        elif abs((oy + oh) - y) < snap_distance and overlaps_horizontally:
            # Below the neighbor.
            candidate_y = (abs((oy + oh) - y), oy + oh)
        elif abs(oy - (y + h)) < snap_distance and overlaps_horizontally:
            # Above the neighbor.
            candidate_y = (abs(oy - (y + h)), oy - h)

        if candidate_x is not None and (best_x is None or candidate_x[0] < best_x[0]):
            best_x = (candidate_x[0], candidate_x[1], other.id)
        if candidate_y is not None and (best_y is None or candidate_y[0] < best_y[0]):
            best_y = (candidate_y[0], candidate_y[1], other.id)

    anchor = None
    if best_x is not None:
        x, anchor = best_x[1], best_x[2]
    if best_y is not None:
        y = best_y[1]
        anchor = anchor or best_y[2]
    return x, y, anchor


def snap_to_standard_wall(
    state: RoomState, x: float, y: float, w: float, h: float, cfg: EngineConfig
) -> tuple[float, float, str | None]:
    """Pull a footprint onto any present standard wall within snap distance.

    Returns:
        (x, y, wall_numbers) where wall_numbers lists the walls snapped to,
        comma separated, or None.
    """
    snap_distance = cfg.standard_wall_snap_distance
    snapped_to = []
    if state.is_wall_present(StandardWall.WEST) and x < snap_distance:
        x = 0.0
        snapped_to.append(StandardWall.WEST)
    if state.is_wall_present(StandardWall.EAST) and x + w > state.width - snap_distance:
        x = state.width - w
        snapped_to.append(StandardWall.EAST)
    if state.is_wall_present(StandardWall.NORTH) and y < snap_distance:
        y = 0.0
        snapped_to.append(StandardWall.NORTH)
    if (
        state.is_wall_present(StandardWall.SOUTH)
        and y + h > state.depth - snap_distance
    ):
        y = state.depth - h
        snapped_to.append(StandardWall.SOUTH)

    if not snapped_to:
        return x, y, None
    return x, y, ",".join(str(int(n)) for n in snapped_to)


def search_clear_of_walls(
    state: RoomState, x: float, y: float, w: float, h: float, cfg: EngineConfig
) -> tuple[float, float] | None:
    """First position near (x, y) whose footprint clears every custom wall.

    Offsets up to `wall_snap_search_radius` in steps of `wall_snap_search_step`
    are tried X-major from the most negative, each clamped to the room. Returns
    None when no offset works.
    """
    if cfg.wall_snap_search_step <= 0:
        return None
    steps = int(cfg.wall_snap_search_radius // cfg.wall_snap_search_step)
    offsets = [i * cfg.wall_snap_search_step for i in range(-steps, steps + 1)]
    for dx in offsets:
        for dy in offsets:
            tx, ty = clamp_to_room(state, x + dx, y + dy, w, h)
            if check_wall_collision(state, tx, ty, w, h, cfg) is None:
                return tx, ty
    return None


def snap_to_custom_wall(
    state: RoomState,
    x: float,
    y: float,
    width: float,
    depth: float,
    rotation: float,
    cfg: EngineConfig,
) -> SnapResult | None:
    """Place a fixture flush against the nearest present custom wall.

    The fixture is moved to the side of the wall its center is on, its center
    offset from the closest wall point by (thickness + minor dimension) / 2
    along the wall normal. When `align_rotation_to_custom_walls` is set, the
    rotation becomes the wall angle rounded to the rotation increment.

    Args:
        state: Room with custom walls.
        x, y: Candidate top-left.
        width, depth: Unrotated fixture size.
        rotation: Current fixture rotation.
        cfg: Engine configuration.

    Returns:
        The snapped result, or None if no wall is within snap distance.
    """
    w, h = footprint_size(width, depth, rotation)
    center = (x + w / 2.0, y + h / 2.0)

    best = None
    best_distance = cfg.custom_wall_snap_distance
    for wall in state.present_custom_walls():
        if wall.length <= 0:
            continue
        closest, _ = closest_point_on_segment(center, wall.start, wall.end)
        d = distance(center, closest)
        if d < best_distance:
            best = (wall, closest)
            best_distance = d
    if best is None:
        return None

    wall, closest = best
    nx, ny = unit_normal(wall.start, wall.end)
    if side_of_line(center, wall.start, wall.end) < 0:
        nx, ny = -nx, -ny
    offset = (wall.thickness + min(width, depth)) / 2.0
    snapped_center = (closest[0] + nx * offset, closest[1] + ny * offset)

    new_rotation = rotation
    if cfg.align_rotation_to_custom_walls:
        new_rotation = snap_angle(
            segment_angle_deg(wall.start, wall.end), cfg.rotation_snap_increment_deg
        )
    new_w, new_h = footprint_size(width, depth, new_rotation)
    return SnapResult(
        x=snapped_center[0] - new_w / 2.0,
        y=snapped_center[1] - new_h / 2.0,
        rotation=new_rotation,
        source=SnapSource.CUSTOM_WALL,
        anchor=str(wall.wall_number),
    )


def resolve_snap(
    state: RoomState,
    element: Element,
    x: float,
    y: float,
    cfg: EngineConfig | None = None,
    catalog: Catalog = DEFAULT_CATALOG,
) -> SnapResult:
    """Resolve the snapped position of an element dropped at (x, y).

    Pure: the same state and input always produce the same output.

    Args:
        state: Room the element lives in (the element itself is excluded from
            fixture snapping by id).
        element: Element being moved or added; supplies size and rotation.
        x: Candidate top-left X.
        y: Candidate top-left Y.
        cfg: Engine configuration.
        catalog: Catalog deciding which neighbors take part in snapping.

    Returns:
        The proposed position and rotation with the snap source that applied.
    """
    cfg = cfg or EngineConfig()
    w, h = element.footprint
    x, y = clamp_to_room(state, x, y, w, h)

    fx, fy, anchor = snap_to_fixture(state, x, y, w, h, element.id, cfg, catalog)
    if anchor is not None:
        fx, fy = clamp_to_room(state, fx, fy, w, h)
        console_logger.debug(f"Element {element.id} snapped to fixture {anchor}")
        return SnapResult(fx, fy, element.rotation, SnapSource.FIXTURE, anchor)

    sx, sy, walls = snap_to_standard_wall(state, x, y, w, h, cfg)
    if walls is not None:
        sx, sy = clamp_to_room(state, sx, sy, w, h)
        if check_wall_collision(state, sx, sy, w, h, cfg) is not None:
            clear = search_clear_of_walls(state, sx, sy, w, h, cfg)
            if clear is not None:
                console_logger.debug(
                    f"Element {element.id} shifted from ({sx:.1f}, {sy:.1f}) to "
                    f"({clear[0]:.1f}, {clear[1]:.1f}) to clear a custom wall"
                )
                sx, sy = clear
        console_logger.debug(f"Element {element.id} snapped to wall(s) {walls}")
        return SnapResult(sx, sy, element.rotation, SnapSource.STANDARD_WALL, walls)

    custom = snap_to_custom_wall(
        state, x, y, element.width, element.depth, element.rotation, cfg
    )
    if custom is not None:
        cw, ch = footprint_size(element.width, element.depth, custom.rotation)
        cx, cy = clamp_to_room(state, custom.x, custom.y, cw, ch)
        console_logger.debug(
            f"Element {element.id} snapped to custom wall {custom.anchor} "
            f"at rotation {custom.rotation:g}"
        )
        return SnapResult(
            cx, cy, custom.rotation, SnapSource.CUSTOM_WALL, custom.anchor
        )

    return SnapResult(x, y, element.rotation)


def snap_rotation(rotation: float, cfg: EngineConfig | None = None) -> float:
    """Round a free rotation to the configured increment."""
    cfg = cfg or EngineConfig()
    if not math.isfinite(rotation):
        return 0.0
    return snap_angle(rotation, cfg.rotation_snap_increment_deg)
