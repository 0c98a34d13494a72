"""Door add/update/remove on standard and custom walls."""

import logging
import uuid

from dataclasses import replace
from typing import Any

from floorsnap.config import EngineConfig
from floorsnap.layout.results import InvalidGeometryError, UnknownWallError
from floorsnap.layout.room import (
    CustomWall,
    Door,
    DoorType,
    RoomState,
    StandardWall,
    is_standard_wall,
    wall_name,
)

console_logger = logging.getLogger(__name__)


def wall_length(state: RoomState, wall_number: int) -> float:
    """Length of a wall's inner face.

    Raises:
        UnknownWallError: If the wall does not exist.
    """
    if is_standard_wall(wall_number):
        if StandardWall(wall_number).is_horizontal:
            return state.width
        return state.depth
    wall = state.custom_wall(wall_number)
    if wall is None:
        raise UnknownWallError(f"No wall numbered {wall_number}")
    return wall.length


def _validate(state: RoomState, door: Door) -> None:
    length = wall_length(state, door.wall_number)
    if door.width > length:
        raise InvalidGeometryError(
            f"Door width {door.width:g} exceeds the length {length:g} of "
            f"{wall_name(door.wall_number)}"
        )


def _sync_wall_door_ids(
    custom_walls: tuple[CustomWall, ...], doors: tuple[Door, ...]
) -> tuple[CustomWall, ...]:
    synced = []
    for wall in custom_walls:
        door_ids = tuple(d.id for d in doors if d.wall_number == wall.wall_number)
        synced.append(
            wall if door_ids == wall.door_ids else replace(wall, door_ids=door_ids)
        )
    return tuple(synced)


def _commit(state: RoomState, doors: tuple[Door, ...]) -> RoomState:
    return state.replace(
        doors=doors, custom_walls=_sync_wall_door_ids(state.custom_walls, doors)
    )


def add_door(
    state: RoomState,
    wall_number: int,
    position: float = 50.0,
    width: float | None = None,
    door_type: DoorType | str = DoorType.STANDARD,
    cfg: EngineConfig | None = None,
) -> tuple[RoomState, Door]:
    """Cut a door into a wall.

    Args:
        state: Room to modify.
        wall_number: Owning wall (1-4 or a custom wall number).
        position: Door center as a percentage of the wall length.
        width: Opening width. Defaults to the configured default door width.
        door_type: Door style.
        cfg: Engine configuration.

    Returns:
        (new_state, new_door).

    Raises:
        UnknownWallError: If the wall does not exist.
        InvalidGeometryError: For a position outside 0-100 or a door wider
            than its wall.
    """
    cfg = cfg or EngineConfig()
    door = Door(
        id=f"door-{uuid.uuid4().hex[:12]}",
        wall_number=wall_number,
        position=float(position),
        width=float(cfg.default_door_width if width is None else width),
        door_type=DoorType(door_type),
    )
    _validate(state, door)
    console_logger.info(
        f"Added {door.width:g}in door at {door.position:g}% of {wall_name(wall_number)}"
    )
    return _commit(state, state.doors + (door,)), door


_DOOR_FIELDS = {
    "wall_number": int,
    "position": float,
    "width": float,
    "door_type": DoorType,
}
"""Door fields `update_door` may change, with their coercions."""


def update_door(state: RoomState, door_id: str, **changes: Any) -> RoomState:
    """Change a door's position, width, type, or owning wall.

    Raises:
        KeyError: If the door does not exist.
        UnknownWallError: If the new owning wall does not exist.
        InvalidGeometryError: If a field is unknown or a value does not parse,
            or if the updated door is invalid.
    """
    door = state.door(door_id)
    if door is None:
        raise KeyError(f"No door with id {door_id!r}")
    unknown = sorted(set(changes) - set(_DOOR_FIELDS))
    if unknown:
        raise InvalidGeometryError(f"Doors have no field(s) {', '.join(unknown)}")
    try:
        changes = {name: _DOOR_FIELDS[name](value) for name, value in changes.items()}
    except (TypeError, ValueError) as e:
        raise InvalidGeometryError(f"Invalid door update {changes!r}: {e}") from e
    updated = replace(door, **changes)
    _validate(state, updated)
    doors = tuple(updated if d.id == door_id else d for d in state.doors)
    console_logger.debug(f"Updated door {door_id}: {changes}")
    return _commit(state, doors)


def remove_door(state: RoomState, door_id: str) -> RoomState:
    """Remove a door. Unknown ids are ignored with a warning."""
    if state.door(door_id) is None:
        console_logger.warning(f"Door {door_id} not found, nothing to remove")
        return state
    console_logger.info(f"Removed door {door_id}")
    return _commit(state, tuple(d for d in state.doors if d.id != door_id))
