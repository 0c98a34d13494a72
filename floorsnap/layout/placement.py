"""Element placement: add, move, rotate, resize, and delete fixtures.

Every operation takes a `RoomState` and returns `(new_state, OperationResult)`.
Rejected operations return the input state unchanged, so the room is always
left valid.
"""

import logging
import uuid

from dataclasses import replace

from floorsnap.config import EngineConfig
from floorsnap.layout.catalog import (
    DEFAULT_CATALOG,
    Catalog,
    ElementCategory,
    FixtureType,
)
from floorsnap.layout.clearance_zones import compute_door_clearance_zones
from floorsnap.layout.collision import check_placement
from floorsnap.layout.results import LayoutErrorType, OperationResult
from floorsnap.layout.room import (
    Element,
    RoomState,
    StandardWall,
    footprint_size,
    is_standard_wall,
)
from floorsnap.layout.snapping import clamp_to_room, resolve_snap, snap_rotation
from floorsnap.utils.geometry_utils import normalize_angle

console_logger = logging.getLogger(__name__)

DEFAULT_CABINET_MATERIAL = "laminate"


def _replace_element(state: RoomState, element: Element) -> RoomState:
    return state.replace(
        elements=tuple(element if e.id == element.id else e for e in state.elements)
    )


def _lookup(
    state: RoomState, element_id: str, catalog: Catalog
) -> tuple[Element | None, OperationResult | None]:
    """Find an element that may take part in placement, or explain why not."""
    element = state.element(element_id)
    if element is None:
        console_logger.warning(f"Element {element_id} not found, ignoring")
        return None, OperationResult.failure(
            LayoutErrorType.STALE_REFERENCE, f"Element {element_id} no longer exists"
        )
    if element.fixture_type not in catalog:
        console_logger.warning(
            f"Element {element_id} has type {element.fixture_type.value!r} "
            "missing from the catalog, ignoring"
        )
        return None, OperationResult.failure(
            LayoutErrorType.MISSING_CATALOG_ENTRY,
            f"{element.fixture_type.value} is not in the catalog",
        )
    return element, None


def add_element(
    state: RoomState,
    fixture_type: str,
    cfg: EngineConfig | None = None,
    catalog: Catalog = DEFAULT_CATALOG,
) -> tuple[RoomState, OperationResult]:
    """Add a fixture at the room center, or the first clear grid cell.

    If the centered footprint is blocked by a wall or a door clearance zone,
    a coarse grid of `placement_grid_step` is scanned row by row from the
    top-left corner. If no cell is clear of both, the element goes to the
    center when that is clear of walls, else to the first scanned cell that
    is, and the result carries a warning. If every candidate collides with a
    wall the add is rejected.

    Args:
        state: Room to add to.
        fixture_type: Catalog key of the fixture.
        cfg: Engine configuration.
        catalog: Catalog providing default size and category.

    Returns:
        (new_state, result). result.data holds `element_id`, `x` and `y`.
    """
    cfg = cfg or EngineConfig()
    entry = catalog.resolve(fixture_type)
    if entry is None:
        console_logger.warning(
            f"Cannot add element: no catalog entry for {fixture_type!r}"
        )
        return state, OperationResult.failure(
            LayoutErrorType.MISSING_CATALOG_ENTRY,
            f"Unknown fixture type: {fixture_type}",
        )

    w, h = entry.default_width, entry.default_depth
    zones = compute_door_clearance_zones(state, cfg)
    x = state.width / 2.0 - w / 2.0
    y = state.depth / 2.0 - h / 2.0

    message = ""
    error_type = None
    center = check_placement(state, x, y, w, h, cfg, zones)
    if not center.legal:
        found = None
        wall_clear = (x, y) if center.wall is None else None
        offset_y = 0.0
        while offset_y < state.depth - h and found is None:
            offset_x = 0.0
            while offset_x < state.width - w and found is None:
                check = check_placement(state, offset_x, offset_y, w, h, cfg, zones)
                if check.legal:
                    found = (offset_x, offset_y)
                elif check.wall is None and wall_clear is None:
                    wall_clear = (offset_x, offset_y)
                offset_x += cfg.placement_grid_step
            offset_y += cfg.placement_grid_step

        if found is not None:
            x, y = found
            console_logger.debug(
                f"Center blocked, placing {fixture_type} at ({x}, {y})"
            )
        elif wall_clear is not None:
            x, y = wall_clear
            message = (
                "Element placed in a door clearance area. "
                "Please move it to ensure proper door access."
            )
            error_type = LayoutErrorType.ILLEGAL_PLACEMENT
            console_logger.warning(f"No clear position for {fixture_type}: {message}")
        else:
            console_logger.warning(
                f"Cannot add {fixture_type}: every position collides with a wall"
            )
            return state, OperationResult.failure(
                LayoutErrorType.ILLEGAL_PLACEMENT,
                f"No room for {entry.name} clear of the walls",
            )

    parsed_type = FixtureType.parse(fixture_type)
    element = Element(
        id=f"{parsed_type.value}-{uuid.uuid4().hex[:12]}",
        fixture_type=parsed_type,
        category=entry.category,
        x=x,
        y=y,
        width=entry.default_width,
        depth=entry.default_depth,
        mount_height=entry.mount_height,
    )
    materials = dict(state.materials)
    if element.category == ElementCategory.CABINET:
        materials[element.id] = DEFAULT_CABINET_MATERIAL

    console_logger.info(f"Added {entry.name} ({element.id}) at ({x:.1f}, {y:.1f})")
    result = OperationResult(
        success=True,
        message=message,
        error_type=error_type,
        data={"element_id": element.id, "x": x, "y": y},
    )
    new_state = state.replace(
        elements=state.elements + (element,), materials=materials
    )
    return new_state, result


def move_element(
    state: RoomState,
    element_id: str,
    x: float,
    y: float,
    cfg: EngineConfig | None = None,
    catalog: Catalog = DEFAULT_CATALOG,
) -> tuple[RoomState, OperationResult]:
    """Snap an element dropped at (x, y) and commit it if legal.

    An illegal snapped position leaves the element where it was.
    """
    cfg = cfg or EngineConfig()
    element, failure = _lookup(state, element_id, catalog)
    if failure is not None:
        return state, failure

    snap = resolve_snap(state, element, x, y, cfg, catalog)
    w, h = footprint_size(element.width, element.depth, snap.rotation)
    check = check_placement(state, snap.x, snap.y, w, h, cfg)
    if not check.legal:
        console_logger.debug(f"Rejected move of {element_id}: {check.describe()}")
        return state, OperationResult.failure(
            LayoutErrorType.ILLEGAL_PLACEMENT,
            check.describe(),
            x=element.x,
            y=element.y,
            rotation=element.rotation,
        )

    moved = replace(element, x=snap.x, y=snap.y, rotation=snap.rotation)
    return _replace_element(state, moved), OperationResult.ok(
        x=snap.x, y=snap.y, rotation=snap.rotation, snap_source=snap.source.value
    )


def _commit_if_legal(
    state: RoomState, updated: Element, cfg: EngineConfig, what: str
) -> tuple[RoomState, OperationResult]:
    w, h = updated.footprint
    x, y = clamp_to_room(state, updated.x, updated.y, w, h)
    updated = replace(updated, x=x, y=y)
    check = check_placement(state, x, y, w, h, cfg)
    if not check.legal:
        console_logger.debug(f"Rejected {what} of {updated.id}: {check.describe()}")
        return state, OperationResult.failure(
            LayoutErrorType.ILLEGAL_PLACEMENT, check.describe()
        )
    return _replace_element(state, updated), OperationResult.ok(
        x=x, y=y, rotation=updated.rotation
    )


def rotate_element(
    state: RoomState,
    element_id: str,
    delta_deg: float = 90.0,
    cfg: EngineConfig | None = None,
    catalog: Catalog = DEFAULT_CATALOG,
) -> tuple[RoomState, OperationResult]:
    """Rotate an element by a relative angle, keeping its top-left corner."""
    cfg = cfg or EngineConfig()
    element, failure = _lookup(state, element_id, catalog)
    if failure is not None:
        return state, failure
    rotation = normalize_angle(element.rotation + delta_deg)
    return _commit_if_legal(state, replace(element, rotation=rotation), cfg, "rotation")


def set_element_rotation(
    state: RoomState,
    element_id: str,
    rotation: float,
    cfg: EngineConfig | None = None,
    catalog: Catalog = DEFAULT_CATALOG,
) -> tuple[RoomState, OperationResult]:
    """Set an absolute rotation, rounded to the rotation increment."""
    cfg = cfg or EngineConfig()
    element, failure = _lookup(state, element_id, catalog)
    if failure is not None:
        return state, failure
    updated = replace(element, rotation=snap_rotation(rotation, cfg))
    return _commit_if_legal(state, updated, cfg, "rotation")


def resize_element(
    state: RoomState,
    element_id: str,
    width: float | None = None,
    depth: float | None = None,
    cfg: EngineConfig | None = None,
    catalog: Catalog = DEFAULT_CATALOG,
) -> tuple[RoomState, OperationResult]:
    """Change an element's width and/or depth."""
    cfg = cfg or EngineConfig()
    element, failure = _lookup(state, element_id, catalog)
    if failure is not None:
        return state, failure
    new_width = element.width if width is None else float(width)
    new_depth = element.depth if depth is None else float(depth)
    if new_width <= 0 or new_depth <= 0:
        return state, OperationResult.failure(
            LayoutErrorType.INVALID_GEOMETRY,
            f"Size must be positive, got {new_width:g} x {new_depth:g}",
        )
    updated = replace(element, width=new_width, depth=new_depth)
    return _commit_if_legal(state, updated, cfg, "resize")


def set_mount_height(
    state: RoomState, element_id: str, mount_height: float
) -> tuple[RoomState, OperationResult]:
    """Set the distance from floor to element bottom, clamped to the wall height."""
    element = state.element(element_id)
    if element is None:
        console_logger.warning(f"Element {element_id} not found, ignoring")
        return state, OperationResult.failure(
            LayoutErrorType.STALE_REFERENCE, f"Element {element_id} no longer exists"
        )
    clamped = max(0.0, min(float(mount_height), state.dimensions.wall_height))
    updated = replace(element, mount_height=clamped)
    return _replace_element(state, updated), OperationResult.ok(mount_height=clamped)


def set_element_material(
    state: RoomState, element_id: str, material: str
) -> tuple[RoomState, OperationResult]:
    if state.element(element_id) is None:
        return state, OperationResult.failure(
            LayoutErrorType.STALE_REFERENCE, f"Element {element_id} no longer exists"
        )
    materials = dict(state.materials)
    materials[element_id] = material
    return state.replace(materials=materials), OperationResult.ok()


def delete_element(state: RoomState, element_id: str) -> RoomState:
    """Delete an element and its side-table entries. Unknown ids are ignored."""
    if state.element(element_id) is None:
        console_logger.warning(f"Element {element_id} not found, nothing to delete")
        return state
    console_logger.info(f"Deleted element {element_id}")
    return state.replace(
        elements=tuple(e for e in state.elements if e.id != element_id),
        materials={k: v for k, v in state.materials.items() if k != element_id},
    )


def get_elements_on_wall(
    state: RoomState, wall_number: int, cfg: EngineConfig | None = None
) -> list[Element]:
    """Elements within `wall_occupancy_threshold` of a standard wall's inner face.

    Custom wall numbers have no resting elements.
    """
    cfg = cfg or EngineConfig()
    if not is_standard_wall(wall_number):
        return []
    threshold = cfg.wall_occupancy_threshold
    wall = StandardWall(wall_number)

    on_wall = []
    for element in state.elements:
        min_x, min_y, max_x, max_y = element.bounds
        if wall == StandardWall.NORTH:
            resting = min_y < threshold
        elif wall == StandardWall.SOUTH:
            resting = max_y > state.depth - threshold
        elif wall == StandardWall.WEST:
            resting = min_x < threshold
        else:  # EAST
            resting = max_x > state.width - threshold
        if resting:
            on_wall.append(element)
    return on_wall
