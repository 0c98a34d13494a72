"""Room state data structures.

`RoomState` is the single persistence unit and the only thing the engine
mutates. It is immutable: every committed change produces a new instance via
`RoomState.replace`, so a half-applied change is never observable.

Coordinates are room-local: origin at the room's top-left inner corner, X to
the right, Y downward. Standard walls sit on the room rectangle's edges;
custom walls are arbitrary segments inside it.
"""

import logging
import math

from dataclasses import dataclass, field, replace
from enum import Enum, IntEnum
from typing import Any

from floorsnap.layout.catalog import DEFAULT_ENTRIES, ElementCategory, FixtureType
from floorsnap.layout.results import InvalidGeometryError
from floorsnap.utils.geometry_utils import Point, segment_angle_deg, segment_length

console_logger = logging.getLogger(__name__)


class StandardWall(IntEnum):
    """The four fixed boundary walls. Values are their wall numbers."""

    NORTH = 1
    EAST = 2
    SOUTH = 3
    WEST = 4

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @property
    def is_horizontal(self) -> bool:
        return self in (StandardWall.NORTH, StandardWall.SOUTH)

    def get_inward_normal(self) -> tuple[float, float]:
        """Get unit normal vector pointing INTO the room (Y grows downward)."""
        if self == StandardWall.NORTH:
            return (0.0, 1.0)
        elif self == StandardWall.SOUTH:
            return (0.0, -1.0)
        elif self == StandardWall.EAST:
            return (-1.0, 0.0)
        else:  # WEST
            return (1.0, 0.0)

    def inner_face(self, width: float, depth: float) -> tuple[Point, Point]:
        """Segment along the wall's room-facing edge."""
        if self == StandardWall.NORTH:
            return (0.0, 0.0), (width, 0.0)
        elif self == StandardWall.EAST:
            return (width, 0.0), (width, depth)
        elif self == StandardWall.SOUTH:
            return (0.0, depth), (width, depth)
        else:  # WEST
            return (0.0, 0.0), (0.0, depth)


STANDARD_WALL_NUMBERS: tuple[int, ...] = tuple(int(w) for w in StandardWall)
"""Wall numbers 1-4. Custom walls are numbered from 5 upward."""


def is_standard_wall(wall_number: int) -> bool:
    return wall_number in STANDARD_WALL_NUMBERS


def wall_name(wall_number: int) -> str:
    """Human-readable wall name (North/East/South/West or Custom Wall N)."""
    if is_standard_wall(wall_number):
        return StandardWall(wall_number).display_name
    return f"Custom Wall {wall_number}"


@dataclass(frozen=True)
class RoomDimensions:
    """Room size in engine units (inches)."""

    width: float
    """Extent along X."""

    depth: float
    """Extent along Y."""

    wall_height: float = 96.0
    """Ceiling height. Only used to bound mount heights."""

    def __post_init__(self) -> None:
        for name in ("width", "depth", "wall_height"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise InvalidGeometryError(
                    f"Room {name} must be a number, got {value!r}"
                )
            if value <= 0:
                raise InvalidGeometryError(f"Room {name} must be positive, got {value}")

    def to_dict(self) -> dict:
        """Serialize to the external {width, height, wallHeight} record."""
        return {
            "width": self.width,
            "height": self.depth,
            "wallHeight": self.wall_height,
        }

    @classmethod
    def from_dict(
        cls, data: dict, default_wall_height: float = 96.0
    ) -> "RoomDimensions":
        """Deserialize, accepting numeric strings as older records stored them."""
        try:
            return cls(
                width=float(data["width"]),
                depth=float(data["height"]),
                wall_height=float(data.get("wallHeight", default_wall_height)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidGeometryError(f"Invalid room dimensions {data!r}: {e}") from e


@dataclass(frozen=True)
class CustomWall:
    """A user-drawn wall segment with thickness."""

    id: str
    """Unique wall identifier."""

    x1: float
    y1: float
    x2: float
    y2: float

    thickness: float
    """Wall thickness, centered on the segment."""

    wall_number: int
    """Number > 4, shared namespace with the standard walls."""

    existed_prior: bool = False
    """Whether the wall existed before the remodel. Pricing only."""

    door_ids: tuple[str, ...] = ()
    """Doors cut into this wall."""

    angle: float | None = None
    """Last absolute angle set by a rotation, kept for display."""

    @property
    def start(self) -> Point:
        return (self.x1, self.y1)

    @property
    def end(self) -> Point:
        return (self.x2, self.y2)

    @property
    def midpoint(self) -> Point:
        return ((self.x1 + self.x2) / 2.0, (self.y1 + self.y2) / 2.0)

    @property
    def length(self) -> float:
        return segment_length(self.start, self.end)

    @property
    def angle_deg(self) -> float:
        """Stored display angle if set, else the segment heading."""
        if self.angle is not None:
            return self.angle
        return segment_angle_deg(self.start, self.end)

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "x1": self.x1,
            "y1": self.y1,
            "x2": self.x2,
            "y2": self.y2,
            "thickness": self.thickness,
            "isCustom": True,
            "existedPrior": self.existed_prior,
            "wallNumber": self.wall_number,
            "doors": list(self.door_ids),
        }
        if self.angle is not None:
            data["angle"] = self.angle
        return data

    @classmethod
    def from_dict(cls, data: dict, default_thickness: float = 6.0) -> "CustomWall":
        return cls(
            id=str(data["id"]),
            x1=float(data["x1"]),
            y1=float(data["y1"]),
            x2=float(data["x2"]),
            y2=float(data["y2"]),
            thickness=float(data.get("thickness", default_thickness)),
            wall_number=int(data["wallNumber"]),
            existed_prior=bool(data.get("existedPrior", False)),
            door_ids=tuple(str(d) for d in data.get("doors", [])),
            angle=data.get("angle"),
        )


class DoorType(str, Enum):
    """Door styles and their default widths."""

    STANDARD = "standard"
    PANTRY = "pantry"
    ROOM = "room"
    DOUBLE = "double"
    SLIDING = "sliding"

    @property
    def default_width(self) -> float:
        return _DOOR_DEFAULT_WIDTHS[self]

    @property
    def label(self) -> str:
        return _DOOR_LABELS[self]


_DOOR_DEFAULT_WIDTHS = {
    DoorType.STANDARD: 32.0,
    DoorType.PANTRY: 24.0,
    DoorType.ROOM: 36.0,
    DoorType.DOUBLE: 64.0,
    DoorType.SLIDING: 48.0,
}

_DOOR_LABELS = {
    DoorType.STANDARD: "Standard Door",
    DoorType.PANTRY: "Pantry Door",
    DoorType.ROOM: "Room Connection",
    DoorType.DOUBLE: "Double Door",
    DoorType.SLIDING: "Sliding Door",
}


def door_types() -> list[dict]:
    """Door style options with labels and default widths."""
    return [
        {"value": t.value, "label": t.label, "width": t.default_width}
        for t in DoorType
    ]


@dataclass(frozen=True)
class Door:
    """A door opening on a wall.

    Exists only while its wall exists; `wall_number` is a value lookup, not a
    handle.
    """

    id: str
    wall_number: int

    position: float
    """Door center as a percentage (0-100) of the wall's length."""

    width: float
    """Opening width."""

    door_type: DoorType = DoorType.STANDARD

    def __post_init__(self) -> None:
        if not 0.0 <= self.position <= 100.0:
            raise InvalidGeometryError(
                f"Door position must be within 0-100%, got {self.position}"
            )
        if self.width <= 0:
            raise InvalidGeometryError(f"Door width must be positive, got {self.width}")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "wallNumber": self.wall_number,
            "position": self.position,
            "width": self.width,
            "type": self.door_type.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Door":
        type_str = data.get("type", DoorType.STANDARD.value)
        try:
            door_type = DoorType(type_str)
        except ValueError:
            console_logger.warning(
                f"Unknown door type {type_str!r} on door {data.get('id')}, "
                "using standard"
            )
            door_type = DoorType.STANDARD
        return cls(
            id=str(data["id"]),
            wall_number=int(data["wallNumber"]),
            position=float(data["position"]),
            width=float(data.get("width", door_type.default_width)),
            door_type=door_type,
        )


def footprint_is_swapped(rotation: float) -> bool:
    """Whether a rotation swaps width and depth in 2D.

    Rotations are bucketed to the nearest quarter turn; 90 and 270 swap.
    """
    quarter_turns = math.floor(rotation / 90.0 + 0.5)
    return quarter_turns % 2 == 1


@dataclass(frozen=True)
class Element:
    """A placed fixture (cabinet or appliance)."""

    id: str
    fixture_type: FixtureType
    category: ElementCategory

    x: float
    """Top-left X of the rotated footprint."""

    y: float
    """Top-left Y of the rotated footprint."""

    width: float
    depth: float

    rotation: float = 0.0
    """Degrees in [0, 360), quarter turns or 15-degree steps."""

    mount_height: float = 0.0
    """Distance from floor to bottom. Irrelevant to 2D collision."""

    hinge_direction: str = "left"
    """Corner-cabinet hinge side."""

    @property
    def footprint(self) -> tuple[float, float]:
        """Effective (width, height) in room axes after rotation."""
        return footprint_size(self.width, self.depth, self.rotation)

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        w, h = self.footprint
        return self.x, self.y, self.x + w, self.y + h

    @property
    def center(self) -> Point:
        w, h = self.footprint
        return self.x + w / 2.0, self.y + h / 2.0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.fixture_type.value,
            "category": self.category.value,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "depth": self.depth,
            "rotation": self.rotation,
            "mountHeight": self.mount_height,
            "hingeDirection": self.hinge_direction,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Element":
        """Deserialize an element.

        Raises:
            KeyError: If the stored type is not a known fixture type.
        """
        fixture_type = FixtureType.parse(data["type"])
        if fixture_type is None:
            raise KeyError(f"Unknown fixture type: {data['type']!r}")
        category = DEFAULT_ENTRIES[fixture_type].category
        stored = data.get("category")
        if stored is not None:
            try:
                category = ElementCategory(stored)
            except ValueError:
                console_logger.warning(
                    f"Unknown category {stored!r} on element {data.get('id')}, "
                    f"using {category.value}"
                )
        return cls(
            id=str(data["id"]),
            fixture_type=fixture_type,
            category=category,
            x=float(data["x"]),
            y=float(data["y"]),
            width=float(data["width"]),
            depth=float(data["depth"]),
            rotation=float(data.get("rotation", 0.0)),
            mount_height=float(data.get("mountHeight", 0.0)),
            hinge_direction=data.get("hingeDirection", "left"),
        )


def footprint_size(width: float, depth: float, rotation: float) -> tuple[float, float]:
    """Effective (width, height) in room axes for a given rotation."""
    if footprint_is_swapped(rotation):
        return depth, width
    return width, depth


def _field_or(data: dict, key: str, default: Any) -> Any:
    """Record field, or default when absent or null. Empty lists are kept."""
    value = data.get(key)
    return default if value is None else value


# Keys of the serialized record that RoomState models explicitly.
_RECORD_KEYS = {
    "dimensions",
    "walls",
    "removedWalls",
    "customWalls",
    "allAvailableWalls",
    "originalWalls",
    "doors",
    "elements",
    "materials",
}


@dataclass(frozen=True)
class RoomState:
    """Complete state of one room: walls, doors, and placed fixtures."""

    dimensions: RoomDimensions

    walls: tuple[int, ...] = STANDARD_WALL_NUMBERS
    """Active (present) wall numbers, standard and custom, sorted."""

    removed_walls: tuple[int, ...] = ()
    """Wall numbers removed by the user."""

    custom_walls: tuple[CustomWall, ...] = ()

    all_available_walls: tuple[int, ...] = STANDARD_WALL_NUMBERS
    """Every wall number that has been registered (standard + custom)."""

    original_walls: tuple[int, ...] = STANDARD_WALL_NUMBERS
    """Pricing baseline: walls that existed before the remodel."""

    doors: tuple[Door, ...] = ()

    elements: tuple[Element, ...] = ()

    materials: dict[str, str] = field(default_factory=dict)
    """Element-id keyed material side table."""

    extras: dict[str, Any] = field(default_factory=dict)
    """Unmodelled record fields, carried through untouched."""

    @property
    def width(self) -> float:
        return self.dimensions.width

    @property
    def depth(self) -> float:
        return self.dimensions.depth

    def replace(self, **changes: Any) -> "RoomState":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def is_wall_present(self, wall_number: int) -> bool:
        return wall_number in self.walls

    def custom_wall(self, wall_number: int) -> CustomWall | None:
        for wall in self.custom_walls:
            if wall.wall_number == wall_number:
                return wall
        return None

    def present_custom_walls(self) -> list[CustomWall]:
        """Custom walls that are currently active."""
        return [w for w in self.custom_walls if w.wall_number in self.walls]

    def wall_exists(self, wall_number: int) -> bool:
        """Whether the wall number refers to a standard or existing custom wall."""
        if is_standard_wall(wall_number):
            return True
        return self.custom_wall(wall_number) is not None

    def door(self, door_id: str) -> Door | None:
        for door in self.doors:
            if door.id == door_id:
                return door
        return None

    def element(self, element_id: str) -> Element | None:
        for element in self.elements:
            if element.id == element_id:
                return element
        return None

    def to_dict(self) -> dict:
        """Serialize to a plain JSON-compatible record."""
        data = dict(self.extras)
        data.update(
            {
                "dimensions": self.dimensions.to_dict(),
                "walls": list(self.walls),
                "removedWalls": list(self.removed_walls),
                "customWalls": [w.to_dict() for w in self.custom_walls],
                "allAvailableWalls": list(self.all_available_walls),
                "originalWalls": list(self.original_walls),
                "doors": [d.to_dict() for d in self.doors],
                "elements": [e.to_dict() for e in self.elements],
                "materials": dict(self.materials),
            }
        )
        return data

    @classmethod
    def from_dict(
        cls,
        data: dict,
        default_wall_height: float = 96.0,
        default_wall_thickness: float = 6.0,
    ) -> "RoomState":
        """Deserialize a record, backfilling fields missing from older saves.

        Elements whose type is not a known fixture type, and doors that fail
        validation, are dropped with a warning. Catalog-level filtering is done
        by `persistence.load_room_state`.
        """
        elements = []
        dropped_elements = set()
        for raw in _field_or(data, "elements", ()):
            try:
                elements.append(Element.from_dict(raw))
            except (KeyError, ValueError) as e:
                console_logger.warning(f"Removing invalid element from saved data: {e}")
                dropped_elements.add(str(raw.get("id")))

        doors = []
        dropped_doors = set()
        for raw in _field_or(data, "doors", ()):
            try:
                doors.append(Door.from_dict(raw))
            except (KeyError, ValueError) as e:
                console_logger.warning(f"Removing invalid door from saved data: {e}")
                dropped_doors.add(str(raw.get("id")))

        custom_walls = tuple(
            CustomWall.from_dict(w, default_thickness=default_wall_thickness)
            for w in _field_or(data, "customWalls", ())
        )
        if dropped_doors:
            custom_walls = tuple(
                replace(
                    w, door_ids=tuple(d for d in w.door_ids if d not in dropped_doors)
                )
                for w in custom_walls
            )
        # Older records lack the registry; rebuild it from the walls we know.
        known = set(STANDARD_WALL_NUMBERS) | {w.wall_number for w in custom_walls}

        return cls(
            dimensions=RoomDimensions.from_dict(
                data["dimensions"], default_wall_height=default_wall_height
            ),
            walls=tuple(
                sorted(int(w) for w in _field_or(data, "walls", STANDARD_WALL_NUMBERS))
            ),
            removed_walls=tuple(int(w) for w in _field_or(data, "removedWalls", ())),
            custom_walls=custom_walls,
            all_available_walls=tuple(
                int(w) for w in _field_or(data, "allAvailableWalls", sorted(known))
            ),
            original_walls=tuple(
                int(w) for w in _field_or(data, "originalWalls", STANDARD_WALL_NUMBERS)
            ),
            doors=tuple(doors),
            elements=tuple(elements),
            materials={
                str(k): v
                for k, v in _field_or(data, "materials", {}).items()
                if str(k) not in dropped_elements
            },
            extras={k: v for k, v in data.items() if k not in _RECORD_KEYS},
        )

    @classmethod
    def empty(cls, dimensions: RoomDimensions) -> "RoomState":
        """Fresh room with all four standard walls present."""
        return cls(dimensions=dimensions)
