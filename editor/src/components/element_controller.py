"""
Element Controller - drag/tap state machine for one card element

Translates pointer gestures on a single element into position updates:

- IDLE: no active gesture
- TAP_CANDIDATE: pointer down, movement so far within TAP_SLOP_PX
- DRAGGING: movement exceeded the slop and the shared drag state was acquired
- REJECTED: movement exceeded the slop while a viewport gesture held the
  canvas; the interaction is ignored until release

Tap and drag are exclusive for one pointer interaction: the tap must fail
(movement beyond the slop) before the drag may claim the gesture.
"""

import logging
import math
from contextlib import ExitStack, contextmanager
from enum import Enum

from constants import POSITION_EPSILON, TAP_SLOP_PX
from models.card_elements import ElementId, get_spec
from models.transform import ZERO, Vec2
from utils.coordinate_transforms import screen_delta_to_card_local

logger = logging.getLogger(__name__)


class ElementState(Enum):
    IDLE = 'idle'
    TAP_CANDIDATE = 'tap_candidate'
    DRAGGING = 'dragging'
    REJECTED = 'rejected'


class ElementController:
    """Drag session state for one positioned element.

    The live position is always ``base_offset + translation``; translation
    is kept in card units (screen translation divided by the viewport scale
    at the time of the update).

    Args:
        element_id: Element this controller moves
        store: PositionStore receiving committed positions
        drag_state: DragState shared with siblings and the viewport
        scale_provider: Callable returning the current viewport scale
        on_tap: Optional callable(element_id, x, y) for taps without drag
        tap_slop: Movement allowed before a tap turns into a drag
    """

    def __init__(self, element_id, store, drag_state, scale_provider=None, on_tap=None, tap_slop=TAP_SLOP_PX):
        self.element_id = ElementId(element_id)
        self.spec = get_spec(self.element_id)
        self.store = store
        self.drag_state = drag_state
        self.scale_provider = scale_provider or (lambda: 1.0)
        self.on_tap = on_tap
        self.tap_slop = tap_slop

        self.state = ElementState.IDLE
        self._base = store.get(self.element_id)
        self._last_initial = self._base
        self._translation = ZERO
        self._raw = ZERO           # screen translation of the current gesture
        self._raw_origin = ZERO    # screen translation at the last external snap
        self._lease = None

    def __repr__(self):
        return f"ElementController({self.element_id.value})"

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def position(self) -> Vec2:
        """Live position (base + in-flight translation)"""
        return self._base + self._translation

    @property
    def base_offset(self) -> Vec2:
        return self._base

    @property
    def translation(self) -> Vec2:
        return self._translation

    @property
    def is_dragging(self):
        return self.state is ElementState.DRAGGING

    # ------------------------------------------------------------------
    # Gesture commands
    # ------------------------------------------------------------------

    def pointer_down(self):
        """Start a new interaction; supersedes any unfinished one"""
        if self.state is not ElementState.IDLE:
            self.cancel()
        self.state = ElementState.TAP_CANDIDATE
        self._translation = ZERO
        self._raw = ZERO
        self._raw_origin = ZERO

    def pointer_move(self, dx, dy):
        """Update with the screen translation since pointer_down().

        Returns:
            Live position
        """
        if self.state in (ElementState.IDLE, ElementState.REJECTED):
            return self.position

        self._raw = Vec2(float(dx), float(dy))

        if self.state is ElementState.TAP_CANDIDATE:
            if math.hypot(self._raw.x, self._raw.y) <= self.tap_slop:
                return self.position
            if not self._claim():
                logger.debug("%s drag refused, viewport gesture active", self.element_id.value)
                self.state = ElementState.REJECTED
                return self.position
            self.state = ElementState.DRAGGING

        self._translation = screen_delta_to_card_local(self._raw - self._raw_origin, self.scale_provider())
        return self.position

    def pointer_up(self):
        """Finish the interaction.

        A tap reports the current coordinates; a drag commits its position to
        the store (one notification).

        Returns:
            Committed position, or None when nothing was committed
        """
        state = self.state
        self.state = ElementState.IDLE

        if state is ElementState.TAP_CANDIDATE:
            position = self.position
            logger.debug("%s tapped at (%.1f, %.1f)", self.element_id.value, position.x, position.y)
            if self.on_tap is not None:
                self.on_tap(self.element_id, position.x, position.y)
            return None

        if state is ElementState.DRAGGING:
            return self._commit()

        return None

    def cancel(self):
        """Abandon the interaction without committing anything"""
        try:
            self._translation = ZERO
            self._raw = ZERO
            self._raw_origin = ZERO
        finally:
            self.state = ElementState.IDLE
            self._release()

    @contextmanager
    def interaction(self):
        """Run a whole pointer interaction inside a with-block.

        The pointer is released on normal exit; any exception cancels the
        interaction so the shared drag state is never left held.
        """
        self.pointer_down()
        try:
            yield self
        except BaseException:
            self.cancel()
            raise
        self.pointer_up()

    # ------------------------------------------------------------------
    # External position changes
    # ------------------------------------------------------------------

    def sync_initial_position(self, position):
        """Follow a position supplied from outside.

        Changes within POSITION_EPSILON of the last known position are our
        own commits echoing back and are ignored. Anything else snaps the
        element to the new position and drops in-flight translation.

        Returns:
            True when the element snapped
        """
        last = self._last_initial
        if abs(position.x - last.x) <= POSITION_EPSILON and abs(position.y - last.y) <= POSITION_EPSILON:
            return False

        logger.debug("%s moved externally to (%.1f, %.1f)", self.element_id.value, position.x, position.y)
        self._base = Vec2(position.x, position.y)
        self._last_initial = self._base
        self._translation = ZERO
        self._raw_origin = self._raw
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _claim(self):
        if not self.drag_state.can_drag_element():
            return False
        lease = ExitStack()
        lease.enter_context(self.drag_state.element_drag(self))
        self._lease = lease
        return True

    def _release(self):
        lease, self._lease = self._lease, None
        if lease is not None:
            lease.close()

    def _commit(self):
        try:
            position = self._base + self._translation
            self._base = position
            self._last_initial = position
            self._translation = ZERO
            self._raw = ZERO
            self._raw_origin = ZERO
        finally:
            self._release()

        logger.debug("%s committed at (%.1f, %.1f)", self.element_id.value, position.x, position.y)
        self.store.set(self.element_id, position)
        return position
