"""
Flip Controller - two-sided card flip driven by tap or horizontal drag

The rotation is unbounded while a drag is in progress and is only
normalized to (-180, 180] once the card settles. Face visibility is derived
from the rotation every frame, never from the discrete state.
"""

import logging
from enum import Enum

from constants import (
    FLIP_DRAG_SPAN_PX, FLIP_FACE_THRESHOLD, FLIP_RELEASE_DURATION_MS,
    FLIP_TAP_DURATION_MS, FLIP_VELOCITY_DEGREES,
)
from utils.animation import AnimatedValue, ease_in_out
from utils.coordinate_transforms import gesture_delta_to_rotation, normalize_angle

logger = logging.getLogger(__name__)


class FlipState(Enum):
    FRONT_RESTING = 'front_resting'
    BACK_RESTING = 'back_resting'
    DRAGGING = 'dragging'
    ANIMATING = 'animating'


class CardFace(Enum):
    FRONT = 'front'
    BACK = 'back'


def is_front_visible(rotation):
    """Front is visible while the normalized rotation magnitude is below 90.

    Exactly +-90 and +-180 count as back.
    """
    return abs(normalize_angle(rotation)) < FLIP_FACE_THRESHOLD


class FlipController:
    """Rotation state of the card preview.

    Args:
        clock: Millisecond clock used by the animations
        drag_span: Drag distance (px) for a full 180 degree flip
    """

    def __init__(self, clock=None, drag_span=FLIP_DRAG_SPAN_PX):
        self.drag_span = drag_span
        self._rotation = AnimatedValue(0.0, clock)
        self._dragging = False
        self._drag_base = 0.0

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def rotation(self):
        return self._rotation.value

    @property
    def normalized_rotation(self):
        return normalize_angle(self.rotation)

    @property
    def is_animating(self):
        return self._rotation.is_animating

    @property
    def is_dragging(self):
        return self._dragging

    @property
    def state(self):
        if self._dragging:
            return FlipState.DRAGGING
        if self.is_animating:
            return FlipState.ANIMATING
        return FlipState.FRONT_RESTING if is_front_visible(self.rotation) else FlipState.BACK_RESTING

    @property
    def face(self):
        return CardFace.FRONT if is_front_visible(self.rotation) else CardFace.BACK

    @property
    def front_opacity(self):
        return 1.0 if is_front_visible(self.rotation) else 0.0

    @property
    def back_opacity(self):
        return 1.0 - self.front_opacity

    def tick(self):
        """Advance the running animation; True while still animating"""
        return self._rotation.tick()

    # ------------------------------------------------------------------
    # Tap
    # ------------------------------------------------------------------

    def tap(self):
        """Flip by +180 degrees. Ignored unless resting.

        Returns:
            True when a flip started
        """
        if self._dragging or self.is_animating:
            return False
        target = self._rotation.value + 180.0
        logger.debug("Flip tap: %.1f -> %.1f", self._rotation.value, target)
        self._rotation.animate_to(target, FLIP_TAP_DURATION_MS, ease_in_out(), on_complete=self._settle)
        return True

    # ------------------------------------------------------------------
    # Drag
    # ------------------------------------------------------------------

    def drag_begin(self):
        """Start tracking a drag; interrupts any running animation"""
        self._rotation.cancel()
        self._drag_base = self._rotation.value
        self._dragging = True

    def drag_update(self, translation_x):
        """Follow the drag translation since drag_begin()"""
        if not self._dragging:
            return self.rotation
        self._rotation.value = self._drag_base + gesture_delta_to_rotation(translation_x, self.drag_span)
        return self.rotation

    def drag_end(self, velocity_x=0.0):
        """Release the drag and complete the flip.

        The direction is the sign of the rotation delta plus the fling
        contribution (velocity_x / 1000 * 45 degrees); ties go forward. The
        flip always lands on the face opposite to the one the drag started
        from.

        Returns:
            Target rotation of the completing animation
        """
        if not self._dragging:
            return self._rotation.target
        self._dragging = False

        delta = self._rotation.value - self._drag_base
        velocity_contribution = (velocity_x / 1000.0) * FLIP_VELOCITY_DEGREES
        direction = 1.0 if delta + velocity_contribution >= 0 else -1.0

        # Resting angle of the face the drag started from
        start_rest = round(self._drag_base / 180.0) * 180.0
        target = start_rest + 180.0 * direction
        logger.debug("Flip release: delta=%.1f velocity=%.1f target=%.1f", delta, velocity_x, target)
        self._rotation.animate_to(target, FLIP_RELEASE_DURATION_MS, ease_in_out(), on_complete=self._settle)
        return target

    def _settle(self):
        self._rotation.value = normalize_angle(self._rotation.value)
