"""UI components and interaction controllers for the ID card layout editor

Controllers (pure Python, no widgets):
- drag_context: shared drag state and gesture leases
- element_controller: tap/drag of one card element
- viewport_controller: pinch zoom and two-finger pan
- flip_controller: two-sided card flip
- editor_session: one editing session wiring the controllers together

Widgets (PyQt5) live in card_canvas and card_flip_widget and are imported
directly by the application.
"""

from .drag_context import DragState, DragStateError
from .editor_session import CardEditorSession
from .element_controller import ElementController, ElementState
from .flip_controller import CardFace, FlipController, FlipState
from .viewport_controller import ViewportController

__all__ = [
    'CardEditorSession',
    'CardFace',
    'DragState',
    'DragStateError',
    'ElementController',
    'ElementState',
    'FlipController',
    'FlipState',
    'ViewportController',
]
