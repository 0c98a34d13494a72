"""Serialization of room states to and from plain records.

The record is the sole persistence unit. Loading backfills fields that older
saves lack and drops elements whose type the current catalog no longer
offers; dumping drops them too, so catalog-invalid elements disappear on the
next save.
"""

import json
import logging

from pathlib import Path

from floorsnap.config import EngineConfig
from floorsnap.layout.catalog import DEFAULT_CATALOG, Catalog
from floorsnap.layout.room import RoomState

console_logger = logging.getLogger(__name__)


def filter_to_catalog(
    state: RoomState, catalog: Catalog = DEFAULT_CATALOG
) -> RoomState:
    """Drop elements whose fixture type has no catalog entry."""
    kept = []
    dropped = set()
    for element in state.elements:
        if element.fixture_type in catalog:
            kept.append(element)
        else:
            console_logger.warning(
                f"Removing element {element.id}: type {element.fixture_type.value!r} "
                "is not in the catalog"
            )
            dropped.add(element.id)
    if not dropped:
        return state
    return state.replace(
        elements=tuple(kept),
        materials={k: v for k, v in state.materials.items() if k not in dropped},
    )


def dump_room_state(state: RoomState, catalog: Catalog = DEFAULT_CATALOG) -> dict:
    """Serialize a room state to a JSON-compatible record."""
    return filter_to_catalog(state, catalog).to_dict()


def load_room_state(
    data: dict,
    cfg: EngineConfig | None = None,
    catalog: Catalog = DEFAULT_CATALOG,
) -> RoomState:
    """Deserialize a record, backfilling missing fields.

    Args:
        data: Saved record.
        cfg: Engine configuration supplying default wall height and thickness.
        catalog: Catalog used to discard retired fixture types.

    Returns:
        The loaded room state.

    Raises:
        InvalidGeometryError: If the record's dimensions are unusable.
    """
    cfg = cfg or EngineConfig()
    state = RoomState.from_dict(
        data,
        default_wall_height=cfg.default_wall_height,
        default_wall_thickness=cfg.default_custom_wall_thickness,
    )
    return filter_to_catalog(state, catalog)


def save_room_state_file(
    state: RoomState, path: Path | str, catalog: Catalog = DEFAULT_CATALOG
) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(dump_room_state(state, catalog), f, indent=2)
    console_logger.info(f"Saved room state to {path}")


def load_room_state_file(
    path: Path | str,
    cfg: EngineConfig | None = None,
    catalog: Catalog = DEFAULT_CATALOG,
) -> RoomState:
    path = Path(path)
    with open(path) as f:
        data = json.load(f)
    console_logger.info(f"Loaded room state from {path}")
    return load_room_state(data, cfg, catalog)
