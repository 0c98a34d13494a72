"""Endpoint snapping for wall authoring.

A freshly clicked wall endpoint snaps, in strict priority order, to:

1. the nearest endpoint of an existing custom wall,
2. the nearest room corner,
3. the nearest point on the inner face of a present standard wall,

each within `EngineConfig.endpoint_snap_distance`. Otherwise the raw click is
used. Endpoint-to-endpoint joins are preferred over T-junctions so that drawn
walls form continuous networks.

Within a tier the strictly nearest candidate wins. Exact ties keep the first
candidate in a fixed order: custom walls by ascending wall number (start
before end), corners clockwise from top-left, standard walls N, E, S, W.
"""

import logging

from dataclasses import dataclass
from enum import Enum

from floorsnap.config import EngineConfig
from floorsnap.layout.room import RoomState, StandardWall
from floorsnap.utils.geometry_utils import Point, closest_point_on_segment, distance

console_logger = logging.getLogger(__name__)


class EndpointSnapType(str, Enum):
    """What a drawn endpoint snapped to."""

    NONE = "none"
    WALL_ENDPOINT = "wall-endpoint"
    ROOM_CORNER = "room-corner"
    WALL_EDGE = "wall-edge"


@dataclass(frozen=True)
class EndpointSnap:
    """Result of snapping one wall endpoint."""

    x: float
    y: float
    snap_type: EndpointSnapType = EndpointSnapType.NONE

    target: str | None = None
    """Wall number, corner name, or None."""

    @property
    def snapped(self) -> bool:
        return self.snap_type != EndpointSnapType.NONE

    @property
    def point(self) -> Point:
        return (self.x, self.y)


def _nearest(
    point: Point, candidates: list[tuple[Point, str]], radius: float
) -> tuple[Point, str] | None:
    """Strictly nearest candidate within radius; first wins on exact ties."""
    best = None
    best_distance = radius
    for candidate, label in candidates:
        d = distance(point, candidate)
        if d < best_distance:
            best = (candidate, label)
            best_distance = d
    return best


def _room_corners(state: RoomState) -> list[tuple[Point, str]]:
    w, h = state.width, state.depth
    return [
        ((0.0, 0.0), "top-left"),
        ((w, 0.0), "top-right"),
        ((w, h), "bottom-right"),
        ((0.0, h), "bottom-left"),
    ]


def snap_wall_endpoint(
    state: RoomState,
    x: float,
    y: float,
    cfg: EngineConfig,
    exclude_wall_id: str | None = None,
) -> EndpointSnap:
    """Snap a clicked wall endpoint to nearby wall geometry.

    Args:
        state: Room whose walls provide snap targets.
        x: Raw click X (room-local).
        y: Raw click Y (room-local).
        cfg: Engine configuration (endpoint_snap_distance).
        exclude_wall_id: Custom wall to ignore (e.g., the wall being edited).

    Returns:
        The snapped endpoint, or the raw click with snap_type NONE.
    """
    point = (x, y)
    radius = cfg.endpoint_snap_distance

    endpoints = []
    for wall in sorted(state.custom_walls, key=lambda w: w.wall_number):
        if wall.id == exclude_wall_id:
            continue
        endpoints.append((wall.start, str(wall.wall_number)))
        endpoints.append((wall.end, str(wall.wall_number)))
    match = _nearest(point, endpoints, radius)
    if match is not None:
        (sx, sy), label = match
        console_logger.debug(f"Endpoint ({x:.1f}, {y:.1f}) snapped to wall {label} end")
        return EndpointSnap(sx, sy, EndpointSnapType.WALL_ENDPOINT, label)

    match = _nearest(point, _room_corners(state), radius)
    if match is not None:
        (sx, sy), label = match
        console_logger.debug(f"Endpoint ({x:.1f}, {y:.1f}) snapped to {label} corner")
        return EndpointSnap(sx, sy, EndpointSnapType.ROOM_CORNER, label)

    edges = []
    for wall in StandardWall:
        if not state.is_wall_present(int(wall)):
            continue
        a, b = wall.inner_face(state.width, state.depth)
        foot, _ = closest_point_on_segment(point, a, b)
        edges.append((foot, str(int(wall))))
    match = _nearest(point, edges, radius)
    if match is not None:
        (sx, sy), label = match
        console_logger.debug(f"Endpoint ({x:.1f}, {y:.1f}) snapped onto wall {label}")
        return EndpointSnap(sx, sy, EndpointSnapType.WALL_EDGE, label)

    return EndpointSnap(x, y)
