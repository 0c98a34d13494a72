"""Fixture catalog: the only fixture facts the layout engine needs.

A fixture type is resolved to its `CatalogEntry` once, when an element is
created or loaded. Geometry code only ever sees the element's own width,
depth, and category.
"""

from dataclasses import dataclass
from enum import Enum


class ElementCategory(str, Enum):
    """Coarse fixture category."""

    CABINET = "cabinet"
    APPLIANCE = "appliance"


class FixtureType(str, Enum):
    """Catalog keys for every fixture the designer can place."""

    # Kitchen cabinets.
    BASE = "base"
    SINK_BASE = "sink-base"
    WALL = "wall"
    TALL = "tall"
    CORNER = "corner"
    DRAWER_BASE = "drawer-base"
    DOUBLE_DRAWER_BASE = "double-drawer-base"
    GLASS_WALL = "glass-wall"
    OPEN_SHELF = "open-shelf"
    ISLAND_BASE = "island-base"
    PENINSULA_BASE = "peninsula-base"
    PANTRY = "pantry"
    CORNER_WALL = "corner-wall"
    # Bathroom cabinets.
    VANITY = "vanity"
    VANITY_SINK = "vanity-sink"
    MEDICINE = "medicine"
    LINEN = "linen"
    DOUBLE_VANITY = "double-vanity"
    FLOATING_VANITY = "floating-vanity"
    CORNER_VANITY = "corner-vanity"
    VANITY_TOWER = "vanity-tower"
    MEDICINE_MIRROR = "medicine-mirror"
    LINEN_TOWER = "linen-tower"
    # Kitchen appliances.
    REFRIGERATOR = "refrigerator"
    STOVE = "stove"
    DISHWASHER = "dishwasher"
    MICROWAVE = "microwave"
    WINE_COOLER = "wine-cooler"
    RANGE_HOOD = "range-hood"
    DOUBLE_OVEN = "double-oven"
    # Bathroom fixtures.
    TOILET = "toilet"
    BATHTUB = "bathtub"
    SHOWER = "shower"

    @classmethod
    def parse(cls, value: "str | FixtureType") -> "FixtureType | None":
        """Parse a stored type key. Returns None for unknown keys."""
        if isinstance(value, FixtureType):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class CatalogEntry:
    """Default footprint and category of a fixture type."""

    name: str
    """Display name."""

    default_width: float
    """Default width (inches)."""

    default_depth: float
    """Default depth (inches)."""

    category: ElementCategory
    """Cabinet or appliance."""

    mount_height: float = 0.0
    """Default distance from floor to bottom. Irrelevant to 2D collision."""


def _cabinet(name: str, width: float, depth: float, mount: float = 0.0) -> CatalogEntry:
    return CatalogEntry(name, width, depth, ElementCategory.CABINET, mount)


def _appliance(
    name: str, width: float, depth: float, mount: float = 0.0
) -> CatalogEntry:
    return CatalogEntry(name, width, depth, ElementCategory.APPLIANCE, mount)


DEFAULT_ENTRIES: dict[FixtureType, CatalogEntry] = {
    FixtureType.BASE: _cabinet("Base Cabinet", 24, 24),
    FixtureType.SINK_BASE: _cabinet("Sink Base Cabinet", 33, 24),
    FixtureType.WALL: _cabinet("Wall Cabinet", 24, 12, mount=54),
    FixtureType.TALL: _cabinet("Tall Cabinet", 24, 24),
    FixtureType.CORNER: _cabinet("Corner Cabinet (Lazy Susan)", 36, 36),
    FixtureType.DRAWER_BASE: _cabinet("Drawer Base Cabinet", 18, 24),
    FixtureType.DOUBLE_DRAWER_BASE: _cabinet("Double Drawer Base", 30, 24),
    FixtureType.GLASS_WALL: _cabinet("Glass Front Wall Cabinet", 24, 12, mount=54),
    FixtureType.OPEN_SHELF: _cabinet("Open Shelf Cabinet", 30, 12, mount=54),
    FixtureType.ISLAND_BASE: _cabinet("Kitchen Island", 48, 36),
    FixtureType.PENINSULA_BASE: _cabinet("Peninsula Cabinet", 36, 24),
    FixtureType.PANTRY: _cabinet("Pantry Cabinet", 24, 24),
    FixtureType.CORNER_WALL: _cabinet("Corner Wall Cabinet", 24, 24, mount=54),
    FixtureType.VANITY: _cabinet("Vanity Cabinet", 30, 21),
    FixtureType.VANITY_SINK: _cabinet("Vanity with Sink", 36, 21),
    FixtureType.MEDICINE: _cabinet("Medicine Cabinet", 24, 6, mount=48),
    FixtureType.LINEN: _cabinet("Linen Cabinet", 18, 21),
    FixtureType.DOUBLE_VANITY: _cabinet("Double Vanity", 60, 21),
    FixtureType.FLOATING_VANITY: _cabinet("Floating Vanity", 48, 18),
    FixtureType.CORNER_VANITY: _cabinet("Corner Vanity", 30, 30),
    FixtureType.VANITY_TOWER: _cabinet("Vanity Tower", 12, 21),
    FixtureType.MEDICINE_MIRROR: _cabinet("Medicine Cabinet w/ Mirror", 30, 6, 48),
    FixtureType.LINEN_TOWER: _cabinet("Linen Tower", 24, 18),
    FixtureType.REFRIGERATOR: _appliance("Refrigerator", 36, 30),
    FixtureType.STOVE: _appliance("Stove/Range", 30, 26),
    FixtureType.DISHWASHER: _appliance("Dishwasher", 24, 24),
    FixtureType.MICROWAVE: _appliance("Microwave", 30, 15, mount=54),
    FixtureType.WINE_COOLER: _appliance("Wine Cooler", 24, 24),
    FixtureType.RANGE_HOOD: _appliance("Range Hood", 36, 18, mount=66),
    FixtureType.DOUBLE_OVEN: _appliance("Double Wall Oven", 30, 25),
    FixtureType.TOILET: _appliance("Toilet", 20, 28),
    FixtureType.BATHTUB: _appliance("Bathtub", 60, 30),
    FixtureType.SHOWER: _appliance("Shower", 36, 36),
}


class Catalog:
    """Lookup table from fixture type to catalog entry.

    A catalog may cover only a subset of `FixtureType` (e.g., after a product
    is retired); elements of uncovered types are treated as missing entries.
    """

    def __init__(self, entries: dict[FixtureType, CatalogEntry] | None = None):
        self._entries = dict(DEFAULT_ENTRIES if entries is None else entries)

    def __contains__(self, fixture_type: object) -> bool:
        if not isinstance(fixture_type, str):
            return False
        parsed = FixtureType.parse(fixture_type)
        return parsed is not None and parsed in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def types(self) -> list[FixtureType]:
        return list(self._entries)

    def resolve(self, fixture_type: "str | FixtureType") -> CatalogEntry | None:
        """Look up the entry for a fixture type.

        Args:
            fixture_type: Enum member or stored string key.

        Returns:
            The catalog entry, or None if the type is unknown to this catalog.
        """
        parsed = FixtureType.parse(fixture_type)
        if parsed is None:
            return None
        return self._entries.get(parsed)


DEFAULT_CATALOG = Catalog()
