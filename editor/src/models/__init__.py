"""
ID Card Layout Editor - Data Models

Element catalogue, position store, profile values and geometry value types.
"""

from .card_elements import ELEMENT_ORDER, ELEMENT_SPECS, ElementId, ElementKind, ElementSpec, ImageFit
from .position_store import PositionStore
from .profile import Absent, CardContent, CardProfile, Present
from .transform import Vec2, ViewportTransform

__all__ = [
    'Absent', 'CardContent', 'CardProfile', 'ELEMENT_ORDER', 'ELEMENT_SPECS',
    'ElementId', 'ElementKind', 'ElementSpec', 'ImageFit', 'PositionStore',
    'Present', 'Vec2', 'ViewportTransform',
]
