"""Shared drag state for the card editor.

One DragState is shared by every element controller and the viewport
controller of an editor session. It replaces loose "is dragging" booleans
with leases that are always released through a context manager, so at most
one of {element drag, viewport gesture} is active at any instant.
"""

import logging
from contextlib import contextmanager

logger = logging.getLogger(__name__)


class DragStateError(RuntimeError):
    """Raised when the drag state is acquired twice by conflicting owners"""


class DragState:
    """Gesture arbitration between element drags and viewport gestures.

    Attributes:
        element_owner: Controller currently dragging an element, or None
        viewport_gestures: Number of active viewport gestures (pinch, pan)
    """

    def __init__(self):
        self.element_owner = None
        self.viewport_gestures = 0

    @property
    def is_element_dragging(self):
        return self.element_owner is not None

    @property
    def is_viewport_active(self):
        return self.viewport_gestures > 0

    def can_drag_element(self):
        return not self.is_viewport_active and self.element_owner is None

    def can_move_viewport(self):
        return self.element_owner is None

    @contextmanager
    def element_drag(self, owner):
        """Hold the element-drag lease for the duration of the block."""
        if self.is_viewport_active:
            raise DragStateError("Element drag requested while a viewport gesture is active")
        if self.element_owner is not None:
            raise DragStateError(f"Element drag already held by {self.element_owner!r}")
        self.element_owner = owner
        logger.debug("Element drag acquired by %r", owner)
        try:
            yield self
        finally:
            self.element_owner = None
            logger.debug("Element drag released by %r", owner)

    @contextmanager
    def viewport_gesture(self):
        """Mark a viewport gesture as active for the duration of the block."""
        if self.element_owner is not None:
            raise DragStateError("Viewport gesture requested while an element is being dragged")
        self.viewport_gestures += 1
        try:
            yield self
        finally:
            self.viewport_gestures -= 1
