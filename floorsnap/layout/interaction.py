"""Interaction state machines and the multi-room design session.

Drags and wall drawing are explicit state machines expressed as pure
functions over immutable records:

    Idle -> Dragging(element_id, preview) -> Committed | Cancelled
    Idle -> Drawing(start) -> Idle  (wall added, or rejected)

Input plumbing (pointer events, timers) belongs to the caller; timestamps are
passed in explicitly so throttling is deterministic.

`DesignSession` ties these together for an editor front end. It owns one
`RoomState` per room, replaces it atomically on every committed change, and
never lets a `LayoutError` escape: failures come back as `OperationResult`.
"""

import logging

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable

from floorsnap.config import EngineConfig
from floorsnap.layout import doors as door_ops
from floorsnap.layout import placement
from floorsnap.layout.catalog import DEFAULT_CATALOG, Catalog
from floorsnap.layout.clearance_zones import (
    DoorClearanceZone,
    compute_door_clearance_zones,
)
from floorsnap.layout.collision import check_placement
from floorsnap.layout.endpoint_snapping import EndpointSnap, snap_wall_endpoint
from floorsnap.layout.persistence import dump_room_state, load_room_state
from floorsnap.layout.results import (
    InvalidGeometryError,
    LayoutError,
    LayoutErrorType,
    OperationResult,
    UnknownWallError,
)
from floorsnap.layout.room import RoomDimensions, RoomState, wall_name
from floorsnap.layout.snapping import SnapResult, resolve_snap
from floorsnap.layout.wall_registry import WallRegistry
from floorsnap.utils.geometry_utils import distance

console_logger = logging.getLogger(__name__)


class DragPhase(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class DragState:
    """Transient drag record. Never persisted."""

    phase: DragPhase = DragPhase.IDLE

    element_id: str | None = None

    start: tuple[float, float, float] | None = None
    """Element (x, y, rotation) when the drag began."""

    grab_offset: tuple[float, float] = (0.0, 0.0)
    """Pointer position minus element top-left at pointer-down."""

    preview: SnapResult | None = None
    """Last legal snapped position. Distinct from the committed position."""

    @property
    def active(self) -> bool:
        return self.phase == DragPhase.DRAGGING


IDLE_DRAG = DragState()


def begin_drag(
    state: RoomState, element_id: str, pointer_x: float, pointer_y: float
) -> DragState:
    """Pointer-down on an element. Unknown ids leave the machine idle."""
    element = state.element(element_id)
    if element is None:
        console_logger.warning(f"Cannot drag missing element {element_id}")
        return IDLE_DRAG
    return DragState(
        phase=DragPhase.DRAGGING,
        element_id=element_id,
        start=(element.x, element.y, element.rotation),
        grab_offset=(pointer_x - element.x, pointer_y - element.y),
    )


def drag_move(
    state: RoomState,
    drag: DragState,
    pointer_x: float,
    pointer_y: float,
    cfg: EngineConfig | None = None,
    catalog: Catalog = DEFAULT_CATALOG,
    zones: list[DoorClearanceZone] | None = None,
) -> DragState:
    """Recompute the preview for a pointer position.

    Illegal snapped positions are ignored, so the preview never advances into
    a wall or a clearance zone. The room state is not touched.
    """
    if not drag.active:
        return drag
    cfg = cfg or EngineConfig()
    element = state.element(drag.element_id)
    if element is None or element.fixture_type not in catalog:
        console_logger.warning(f"Drag target {drag.element_id} vanished, cancelling")
        return replace(drag, phase=DragPhase.CANCELLED, preview=None)

    candidate_x = pointer_x - drag.grab_offset[0]
    candidate_y = pointer_y - drag.grab_offset[1]
    snap = resolve_snap(state, element, candidate_x, candidate_y, cfg, catalog)
    w, h = replace(element, rotation=snap.rotation).footprint
    check = check_placement(state, snap.x, snap.y, w, h, cfg, zones)
    if not check.legal:
        console_logger.debug(f"Preview of {element.id} held: {check.describe()}")
        return drag
    return replace(drag, preview=snap)


def end_drag(
    state: RoomState, drag: DragState, cfg: EngineConfig | None = None
) -> tuple[RoomState, DragState, OperationResult]:
    """Pointer-up: commit the preview, or cancel if nothing moved."""
    if not drag.active:
        return state, drag, OperationResult.failure(
            LayoutErrorType.STALE_REFERENCE, "No drag in progress"
        )
    cfg = cfg or EngineConfig()
    element = state.element(drag.element_id)
    preview = drag.preview
    if (
        element is None
        or preview is None
        or (preview.x, preview.y, preview.rotation) == drag.start
    ):
        return state, replace(drag, phase=DragPhase.CANCELLED), OperationResult.ok(
            "Drag cancelled"
        )

    moved = replace(element, x=preview.x, y=preview.y, rotation=preview.rotation)
    w, h = moved.footprint
    check = check_placement(state, moved.x, moved.y, w, h, cfg)
    if not check.legal:
        # Walls or doors changed under the drag.
        return state, replace(drag, phase=DragPhase.CANCELLED), OperationResult.failure(
            LayoutErrorType.ILLEGAL_PLACEMENT, check.describe()
        )

    new_state = state.replace(
        elements=tuple(moved if e.id == moved.id else e for e in state.elements)
    )
    console_logger.debug(
        f"Committed {moved.id} at ({moved.x:.1f}, {moved.y:.1f}) rot {moved.rotation:g}"
    )
    return new_state, replace(drag, phase=DragPhase.COMMITTED), OperationResult.ok(
        x=moved.x, y=moved.y, rotation=moved.rotation, snap_source=preview.source.value
    )


def cancel_drag(drag: DragState) -> DragState:
    if not drag.active:
        return drag
    return replace(drag, phase=DragPhase.CANCELLED, preview=None)


class DragThrottle:
    """Limits drag preview publication to one per interval.

    Samples arriving inside an interval are held, never dropped. When the
    interval elapses (or on `flush`) the held samples are released together
    and folded in arrival order, so a throttled drag ends in exactly the state
    an unthrottled one would.

    Only publication is throttled. Every released sample is still snapped and
    checked, so no snap or collision work is saved.
    """

    def __init__(self, interval_ms: float = 16.0):
        self.interval_ms = interval_ms
        self._last_ms: float | None = None
        self._pending: list[tuple[float, float]] = []

    def offer(self, x: float, y: float, now_ms: float) -> list[tuple[float, float]]:
        """Queue a sample. Returns the samples to process now (maybe none)."""
        self._pending.append((x, y))
        return self.tick(now_ms)

    def tick(self, now_ms: float) -> list[tuple[float, float]]:
        """Release held samples if the interval has elapsed."""
        if not self._pending:
            return []
        if self._last_ms is not None and now_ms - self._last_ms < self.interval_ms:
            return []
        self._last_ms = now_ms
        return self.flush()

    def flush(self) -> list[tuple[float, float]]:
        """Release held samples unconditionally (e.g., on pointer-up)."""
        samples, self._pending = self._pending, []
        return samples

    @property
    def pending(self) -> int:
        return len(self._pending)

    def reset(self) -> None:
        self._last_ms = None
        self._pending = []


@dataclass(frozen=True)
class WallDrawState:
    """Two-click custom wall authoring. Never persisted."""

    start: EndpointSnap | None = None
    """Snapped first click, or None while idle."""

    preview_end: EndpointSnap | None = None
    """Snapped hover position for the rubber-band preview."""

    @property
    def drawing(self) -> bool:
        return self.start is not None


IDLE_WALL_DRAW = WallDrawState()


def wall_draw_hover(
    state: RoomState,
    draw: WallDrawState,
    x: float,
    y: float,
    cfg: EngineConfig | None = None,
) -> WallDrawState:
    """Update the rubber-band preview while a wall is being drawn."""
    if not draw.drawing:
        return draw
    preview_end = snap_wall_endpoint(state, x, y, cfg or EngineConfig())
    return replace(draw, preview_end=preview_end)


def wall_draw_click(
    state: RoomState,
    draw: WallDrawState,
    x: float,
    y: float,
    cfg: EngineConfig | None = None,
) -> tuple[RoomState, WallDrawState, OperationResult]:
    """Handle one wall-drawing click.

    The first click records the snapped start point. The second click adds
    the wall, or rejects it when shorter than `min_wall_length`. Drawing
    resets to idle after the second click either way. Very short drags are
    treated as accidental and rejected without advisory text.
    """
    cfg = cfg or EngineConfig()
    if not draw.drawing:
        start = snap_wall_endpoint(state, x, y, cfg)
        return state, WallDrawState(start=start), OperationResult.ok(
            x=start.x, y=start.y, snap_type=start.snap_type.value
        )

    length = distance(draw.start.point, (x, y))
    if length < cfg.min_wall_length:
        message = ""
        if length > cfg.min_wall_length_for_advisory:
            message = (
                f"Wall is too short ({length:.0f}). Minimum length is "
                f"{cfg.min_wall_length:g}. Please try again."
            )
        return state, IDLE_WALL_DRAW, OperationResult.failure(
            LayoutErrorType.INVALID_GEOMETRY, message, length=length
        )

    try:
        new_state, wall = WallRegistry(state, cfg).add_custom_wall(
            draw.start.x, draw.start.y, x, y
        )
    except InvalidGeometryError as e:
        return state, IDLE_WALL_DRAW, OperationResult.failure(
            LayoutErrorType.INVALID_GEOMETRY, str(e)
        )
    return new_state, IDLE_WALL_DRAW, OperationResult.ok(
        wall_number=wall.wall_number, wall_id=wall.id
    )


class RoomKind(str, Enum):
    KITCHEN = "kitchen"
    BATHROOM = "bathroom"


def _error_type_for(error: Exception) -> LayoutErrorType:
    if isinstance(error, (UnknownWallError, KeyError)):
        return LayoutErrorType.STALE_REFERENCE
    return LayoutErrorType.INVALID_GEOMETRY


class DesignSession:
    """Editing session over independent kitchen and bathroom rooms.

    Every method runs one interaction to completion and returns an
    `OperationResult`. The active room's state is replaced only when the
    interaction commits.
    """

    def __init__(
        self,
        rooms: dict[RoomKind, RoomState],
        cfg: EngineConfig | None = None,
        catalog: Catalog = DEFAULT_CATALOG,
        active: RoomKind = RoomKind.KITCHEN,
    ):
        if active not in rooms:
            raise ValueError(f"Active room {active.value!r} has no state")
        self.rooms = dict(rooms)
        self.cfg = cfg or EngineConfig()
        self.catalog = catalog
        self.active = active
        self.drag = IDLE_DRAG
        self.wall_draw = IDLE_WALL_DRAW
        self.throttle = DragThrottle(self.cfg.drag_throttle_ms)
        self._zones: list[DoorClearanceZone] | None = None

    @classmethod
    def create(
        cls,
        kitchen: RoomDimensions,
        bathroom: RoomDimensions | None = None,
        cfg: EngineConfig | None = None,
        catalog: Catalog = DEFAULT_CATALOG,
    ) -> "DesignSession":
        rooms = {RoomKind.KITCHEN: RoomState.empty(kitchen)}
        if bathroom is not None:
            rooms[RoomKind.BATHROOM] = RoomState.empty(bathroom)
        return cls(rooms, cfg=cfg, catalog=catalog)

    @property
    def state(self) -> RoomState:
        return self.rooms[self.active]

    def _commit(self, new_state: RoomState) -> None:
        self.rooms[self.active] = new_state
        self._zones = None

    def _apply(
        self, operation: Callable[[], RoomState], **data: Any
    ) -> OperationResult:
        """Run a registry operation, committing on success."""
        try:
            new_state = operation()
        except (LayoutError, KeyError) as e:
            console_logger.warning(f"Operation rejected: {e}")
            return OperationResult.failure(_error_type_for(e), str(e))
        self._commit(new_state)
        return OperationResult.ok(**data)

    def _apply_placement(
        self, outcome: tuple[RoomState, OperationResult]
    ) -> OperationResult:
        new_state, result = outcome
        if result.success:
            self._commit(new_state)
        return result

    def _reset_transients(self) -> None:
        self.drag = IDLE_DRAG
        self.wall_draw = IDLE_WALL_DRAW
        self.throttle.reset()

    # Rooms.

    def switch_room(self, room: RoomKind | str) -> OperationResult:
        """Make another room active, discarding any preview state."""
        try:
            room = RoomKind(room)
        except ValueError:
            return OperationResult.failure(
                LayoutErrorType.STALE_REFERENCE, f"Unknown room {room!r}"
            )
        if room not in self.rooms:
            return OperationResult.failure(
                LayoutErrorType.STALE_REFERENCE, f"No {room.value} room in this design"
            )
        self._reset_transients()
        self.active = room
        self._zones = None
        console_logger.info(f"Switched to {room.value}")
        return OperationResult.ok(room=room.value)

    def set_room(self, room: RoomKind | str, state: RoomState) -> None:
        room = RoomKind(room)
        self.rooms[room] = state
        if room == self.active:
            self._reset_transients()
            self._zones = None

    def reset_room(self) -> OperationResult:
        """Clear the active room back to four standard walls, keeping its size."""
        self._reset_transients()
        self._commit(RoomState.empty(self.state.dimensions))
        console_logger.info(f"Reset {self.active.value}")
        return OperationResult.ok()

    def clearance_zones(self) -> list[DoorClearanceZone]:
        if self._zones is None:
            self._zones = compute_door_clearance_zones(self.state, self.cfg)
        return self._zones

    # Walls.

    def _registry(self) -> WallRegistry:
        return WallRegistry(self.state, self.cfg)

    def add_standard_wall(self, wall_number: int) -> OperationResult:
        return self._apply(lambda: self._registry().add_standard_wall(wall_number))

    def remove_standard_wall(self, wall_number: int) -> OperationResult:
        """Remove a standard wall. Callers confirm using `elements_on_wall`."""
        removed = [e.id for e in self.elements_on_wall(wall_number)]
        return self._apply(
            lambda: self._registry().remove_standard_wall(wall_number),
            removed_elements=removed,
        )

    def elements_on_wall(self, wall_number: int):
        return placement.get_elements_on_wall(self.state, wall_number, self.cfg)

    def add_custom_wall(
        self,
        x1: float,
        y1: float,
        x2: float,
        y2: float,
        thickness: float | None = None,
        existed_prior: bool = False,
    ) -> OperationResult:
        try:
            new_state, wall = self._registry().add_custom_wall(
                x1, y1, x2, y2, thickness=thickness, existed_prior=existed_prior
            )
        except LayoutError as e:
            return OperationResult.failure(_error_type_for(e), str(e))
        self._commit(new_state)
        return OperationResult.ok(wall_number=wall.wall_number, wall_id=wall.id)

    def rotate_custom_wall(self, wall_number: int, angle_deg: float) -> OperationResult:
        return self._apply(
            lambda: self._registry().rotate_custom_wall(wall_number, angle_deg)
        )

    def resize_custom_wall(
        self, wall_number: int, new_length: float
    ) -> OperationResult:
        return self._apply(
            lambda: self._registry().resize_custom_wall(wall_number, new_length)
        )

    def delete_custom_wall(self, wall_number: int) -> OperationResult:
        return self._apply(lambda: self._registry().delete_custom_wall(wall_number))

    def mark_wall_existed_prior(self, wall_number: int) -> OperationResult:
        return self._apply(
            lambda: self._registry().mark_wall_existed_prior(wall_number)
        )

    def apply_floor_plan_preset(self, name: str) -> OperationResult:
        self._reset_transients()
        return self._apply(lambda: self._registry().apply_floor_plan_preset(name))

    def cleanup_available_walls(self) -> OperationResult:
        return self._apply(lambda: self._registry().cleanup_available_walls())

    def wall_click(self, x: float, y: float) -> OperationResult:
        new_state, self.wall_draw, result = wall_draw_click(
            self.state, self.wall_draw, x, y, self.cfg
        )
        if new_state is not self.state:
            self._commit(new_state)
        return result

    def wall_hover(self, x: float, y: float) -> EndpointSnap | None:
        self.wall_draw = wall_draw_hover(self.state, self.wall_draw, x, y, self.cfg)
        return self.wall_draw.preview_end

    def cancel_wall_draw(self) -> None:
        self.wall_draw = IDLE_WALL_DRAW

    # Doors.

    def add_door(
        self,
        wall_number: int,
        position: float = 50.0,
        width: float | None = None,
        door_type: str = "standard",
    ) -> OperationResult:
        try:
            new_state, door = door_ops.add_door(
                self.state, wall_number, position, width, door_type, self.cfg
            )
        except (LayoutError, ValueError) as e:
            return OperationResult.failure(_error_type_for(e), str(e))
        self._commit(new_state)
        console_logger.debug(f"Door {door.id} on {wall_name(wall_number)}")
        return OperationResult.ok(door_id=door.id)

    def update_door(self, door_id: str, **changes: Any) -> OperationResult:
        return self._apply(lambda: door_ops.update_door(self.state, door_id, **changes))

    def remove_door(self, door_id: str) -> OperationResult:
        return self._apply(lambda: door_ops.remove_door(self.state, door_id))

    # Elements.

    def add_element(self, fixture_type: str) -> OperationResult:
        return self._apply_placement(
            placement.add_element(self.state, fixture_type, self.cfg, self.catalog)
        )

    def move_element(self, element_id: str, x: float, y: float) -> OperationResult:
        return self._apply_placement(
            placement.move_element(self.state, element_id, x, y, self.cfg, self.catalog)
        )

    def rotate_element(
        self, element_id: str, delta_deg: float = 90.0
    ) -> OperationResult:
        return self._apply_placement(
            placement.rotate_element(
                self.state, element_id, delta_deg, self.cfg, self.catalog
            )
        )

    def set_element_rotation(self, element_id: str, rotation: float) -> OperationResult:
        return self._apply_placement(
            placement.set_element_rotation(
                self.state, element_id, rotation, self.cfg, self.catalog
            )
        )

    def resize_element(
        self, element_id: str, width: float | None = None, depth: float | None = None
    ) -> OperationResult:
        return self._apply_placement(
            placement.resize_element(
                self.state, element_id, width, depth, self.cfg, self.catalog
            )
        )

    def set_mount_height(self, element_id: str, mount_height: float) -> OperationResult:
        return self._apply_placement(
            placement.set_mount_height(self.state, element_id, mount_height)
        )

    def set_element_material(self, element_id: str, material: str) -> OperationResult:
        return self._apply_placement(
            placement.set_element_material(self.state, element_id, material)
        )

    def delete_element(self, element_id: str) -> OperationResult:
        if self.drag.element_id == element_id:
            self.drag = cancel_drag(self.drag)
        return self._apply(lambda: placement.delete_element(self.state, element_id))

    # Dragging.

    def pointer_down(self, element_id: str, x: float, y: float) -> OperationResult:
        self.throttle.reset()
        self.drag = begin_drag(self.state, element_id, x, y)
        if not self.drag.active:
            return OperationResult.failure(
                LayoutErrorType.STALE_REFERENCE, f"Element {element_id} not found"
            )
        return OperationResult.ok()

    def _process_samples(self, samples: list[tuple[float, float]]) -> None:
        zones = self.clearance_zones()
        for x, y in samples:
            self.drag = drag_move(
                self.state, self.drag, x, y, self.cfg, self.catalog, zones
            )

    def pointer_move(self, x: float, y: float, now_ms: float) -> SnapResult | None:
        """Feed a pointer sample. Returns the current preview."""
        if not self.drag.active:
            return None
        self._process_samples(self.throttle.offer(x, y, now_ms))
        return self.drag.preview

    def tick(self, now_ms: float) -> SnapResult | None:
        if not self.drag.active:
            return None
        self._process_samples(self.throttle.tick(now_ms))
        return self.drag.preview

    def pointer_up(self) -> OperationResult:
        """Commit the drag preview, or cancel a drag with no net displacement."""
        if not self.drag.active:
            return OperationResult.failure(
                LayoutErrorType.STALE_REFERENCE, "No drag in progress"
            )
        self._process_samples(self.throttle.flush())
        new_state, self.drag, result = end_drag(self.state, self.drag, self.cfg)
        if new_state is not self.state:
            self._commit(new_state)
        self.throttle.reset()
        return result

    def cancel_drag(self) -> None:
        self.drag = IDLE_DRAG
        self.throttle.reset()

    # Persistence.

    def to_dict(self) -> dict:
        return {
            room.value: dump_room_state(state, self.catalog)
            for room, state in self.rooms.items()
        }

    @classmethod
    def from_dict(
        cls,
        data: dict,
        cfg: EngineConfig | None = None,
        catalog: Catalog = DEFAULT_CATALOG,
    ) -> "DesignSession":
        """Load a design record holding one room record per room kind."""
        rooms = {}
        for room in RoomKind:
            record = data.get(room.value)
            if record is None:
                continue
            try:
                rooms[room] = load_room_state(record, cfg, catalog)
            except (KeyError, ValueError) as e:
                console_logger.warning(f"Skipping {room.value} room: {e}")
        if not rooms:
            raise InvalidGeometryError("Design record contains no usable room")
        active = RoomKind.KITCHEN if RoomKind.KITCHEN in rooms else next(iter(rooms))
        return cls(rooms, cfg=cfg, catalog=catalog, active=active)
