"""
Viewport Controller - pinch-to-zoom and two-finger pan of the card preview

The viewport transform is visual only: element positions are never stored
with it applied. Every gesture here is suppressed while an element is being
dragged, and while one is active element drags cannot start.
"""

import logging
import math
from contextlib import ExitStack

from constants import (
    DEFAULT_ANIMATION_MS, VIEWPORT_PAN_MIN_POINTERS, VIEWPORT_SCALE_MAX,
    VIEWPORT_SCALE_MIN,
)
from models.transform import ViewportTransform
from utils.animation import AnimatedValue
from utils.coordinate_transforms import clamp

logger = logging.getLogger(__name__)


class ViewportController:
    """Zoom/pan state for the whole card preview.

    Pinch and pan may run at the same time; each holds its own viewport
    lease on the shared DragState until it ends.
    """

    def __init__(self, drag_state, clock=None):
        self.drag_state = drag_state
        self._scale = AnimatedValue(1.0, clock)
        self._saved_scale = 1.0
        self.translate_x = 0.0
        self.translate_y = 0.0
        self._saved_translate_x = 0.0
        self._saved_translate_y = 0.0
        self._pinch_lease = None
        self._pan_lease = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def scale(self):
        return self._scale.value

    @property
    def transform(self):
        return ViewportTransform(self.scale, self.translate_x, self.translate_y)

    @property
    def is_pinching(self):
        return self._pinch_lease is not None

    @property
    def is_panning(self):
        return self._pan_lease is not None

    @property
    def is_animating(self):
        return self._scale.is_animating

    def tick(self):
        """Advance the clamp animation; True while still animating"""
        return self._scale.tick()

    def reset(self):
        """Snap back to identity (editor session opened)"""
        self._end_lease('_pinch_lease')
        self._end_lease('_pan_lease')
        self._scale.value = 1.0
        self._saved_scale = 1.0
        self.translate_x = self.translate_y = 0.0
        self._saved_translate_x = self._saved_translate_y = 0.0

    # ------------------------------------------------------------------
    # Pinch
    # ------------------------------------------------------------------

    def pinch_begin(self):
        """Returns True when the pinch was accepted"""
        if self._pinch_lease is not None:
            self._end_lease('_pinch_lease')
        if not self.drag_state.can_move_viewport():
            logger.debug("Pinch ignored, element drag in progress")
            return False
        self._scale.cancel()
        self._saved_scale = self._scale.value
        self._pinch_lease = self._acquire()
        return True

    def pinch_update(self, factor):
        """Scale relative to the scale at pinch_begin()"""
        if self._pinch_lease is None:
            return self.scale
        if factor is None or not math.isfinite(factor) or factor <= 0:
            return self.scale
        self._scale.value = self._saved_scale * factor
        return self.scale

    def pinch_end(self):
        """Commit the pinch, animating back into [1, 3] when outside it"""
        if self._pinch_lease is None:
            return self.scale
        try:
            scale = self._scale.value
            target = clamp(scale, VIEWPORT_SCALE_MIN, VIEWPORT_SCALE_MAX)
            self._saved_scale = target
            if target != scale:
                logger.debug("Viewport scale %.2f out of range, animating to %.2f", scale, target)
                self._scale.animate_to(target, DEFAULT_ANIMATION_MS)
        finally:
            self._end_lease('_pinch_lease')
        return self._scale.target

    # ------------------------------------------------------------------
    # Pan
    # ------------------------------------------------------------------

    def pan_begin(self, pointer_count):
        """Start a pan; needs at least two pointers.

        Returns True when the pan was accepted
        """
        if self._pan_lease is not None:
            self._end_lease('_pan_lease')
        if pointer_count < VIEWPORT_PAN_MIN_POINTERS:
            return False
        if not self.drag_state.can_move_viewport():
            logger.debug("Pan ignored, element drag in progress")
            return False
        self._saved_translate_x = self.translate_x
        self._saved_translate_y = self.translate_y
        self._pan_lease = self._acquire()
        return True

    def pan_update(self, dx, dy):
        """Translate relative to the translation at pan_begin()"""
        if self._pan_lease is None:
            return self.translate_x, self.translate_y
        self.translate_x = self._saved_translate_x + dx
        self.translate_y = self._saved_translate_y + dy
        return self.translate_x, self.translate_y

    def pan_end(self):
        if self._pan_lease is None:
            return
        try:
            self._saved_translate_x = self.translate_x
            self._saved_translate_y = self.translate_y
        finally:
            self._end_lease('_pan_lease')

    # ------------------------------------------------------------------
    # Leases
    # ------------------------------------------------------------------

    def _acquire(self):
        lease = ExitStack()
        lease.enter_context(self.drag_state.viewport_gesture())
        return lease

    def _end_lease(self, name):
        lease = getattr(self, name)
        setattr(self, name, None)
        if lease is not None:
            lease.close()
