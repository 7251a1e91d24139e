"""
ID Card Layout Editor - Position Store

Typed map from card elements to card-space positions.

Every element always has an entry: the store starts from the default layout
and entries are replaced one at a time through set(). Each set() notifies all
subscribers synchronously with the full snapshot; subscribers never diff.
"""

import logging
import math
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping

from models.card_elements import ELEMENT_ORDER, ElementId, default_positions
from models.transform import Vec2

logger = logging.getLogger(__name__)

PositionMap = Mapping[ElementId, Vec2]
PositionListener = Callable[[PositionMap], None]


def coerce_position(value):
    """Convert host data into a Vec2.

    Accepts Vec2, {'x': .., 'y': ..} dicts and (x, y) pairs.

    Returns:
        Vec2, or None when the value is malformed or not finite
    """
    if isinstance(value, Vec2):
        x, y = value.x, value.y
    elif isinstance(value, Mapping):
        x, y = value.get('x'), value.get('y')
    elif isinstance(value, (list, tuple)) and len(value) == 2:
        x, y = value
    else:
        return None

    try:
        x, y = float(x), float(y)
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return Vec2(x, y)


class PositionStore:
    """Mutable position map for one card editing session."""

    def __init__(self, positions: Dict[ElementId, Vec2] = None):
        self._positions = default_positions()
        if positions:
            for element_id, position in positions.items():
                self._positions[ElementId(element_id)] = position
        self._listeners: List[PositionListener] = []

    @classmethod
    def from_mapping(cls, raw):
        """Build a store from persisted/host data.

        Missing, unknown or malformed entries never fail the load: the
        affected element keeps its default position.
        """
        positions = {}
        raw = raw or {}
        if not isinstance(raw, Mapping):
            logger.warning("Ignoring position data of type %s, using defaults", type(raw).__name__)
            raw = {}

        for key, value in raw.items():
            try:
                element_id = ElementId(key)
            except ValueError:
                logger.warning("Ignoring position for unknown element %r", key)
                continue
            position = coerce_position(value)
            if position is None:
                logger.warning("Malformed position for %s: %r, using default", element_id.value, value)
                continue
            positions[element_id] = position

        for element_id in ELEMENT_ORDER:
            if element_id not in positions:
                logger.debug("No stored position for %s, using default", element_id.value)
        return cls(positions)

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def get(self, element_id) -> Vec2:
        return self._positions[ElementId(element_id)]

    def set(self, element_id, position: Vec2):
        """Replace one entry and notify subscribers with the full snapshot"""
        element_id = ElementId(element_id)
        position = coerce_position(position)
        if position is None:
            raise ValueError(f"Invalid position for {element_id.value}")
        self._positions[element_id] = position
        logger.debug("Position of %s set to (%.1f, %.1f)", element_id.value, position.x, position.y)

        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    def snapshot(self) -> PositionMap:
        """Immutable copy of every entry"""
        return MappingProxyType(dict(self._positions))

    def subscribe(self, listener: PositionListener):
        """Register a change listener.

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self):
        return snapshot_to_dict(self._positions)

    def __len__(self):
        return len(self._positions)

    def __iter__(self):
        return iter(ELEMENT_ORDER)


def snapshot_to_dict(positions: PositionMap):
    """Serialize a position map to plain JSON-friendly data"""
    return {ElementId(k).value: Vec2(*v).to_dict() for k, v in positions.items()}
