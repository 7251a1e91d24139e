"""
Editor Session - one interactive card layout editing session

Owns the position store, the shared drag state, the viewport controller and
one element controller per card element, and routes single-pointer
gestures to the element under the pointer.
"""

import logging

from components.drag_context import DragState
from components.element_controller import ElementController
from components.viewport_controller import ViewportController
from models.card_elements import ELEMENT_ORDER, ElementId
from models.position_store import PositionStore
from models.profile import CardContent
from services.card_layout import build_layout, element_at
from utils.coordinate_transforms import screen_point_to_card_local

logger = logging.getLogger(__name__)


class CardEditorSession:
    """Interactive layout state behind the card editor canvas.

    Args:
        store: PositionStore to edit (defaults when None)
        content: CardContent shown on the card
        clock: Millisecond clock for viewport animations
        show_absent: Keep elements without data grabbable as empty boxes
    """

    def __init__(self, store=None, content=None, clock=None, show_absent=False):
        self.store = store or PositionStore()
        self.content = content or CardContent()
        self.show_absent = show_absent
        self.drag_state = DragState()
        self.viewport = ViewportController(self.drag_state, clock)
        self._tap_listeners = []
        self.active_controller = None
        self.is_open = False

        self.controllers = {
            element_id: ElementController(
                element_id,
                self.store,
                self.drag_state,
                scale_provider=lambda: self.viewport.scale,
                on_tap=self._handle_tap,
            )
            for element_id in ELEMENT_ORDER
        }
        self._unsubscribe = self.store.subscribe(self._sync_controllers)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self):
        """(Re)open the editor: viewport back to identity, no gesture in flight"""
        self.pointer_cancel()
        self.viewport.reset()
        self.is_open = True

    def close(self):
        self.pointer_cancel()
        self.viewport.reset()
        self.is_open = False

    def dispose(self):
        """Detach from the store"""
        self.close()
        self._unsubscribe()

    def tick(self):
        return self.viewport.tick()

    # ------------------------------------------------------------------
    # Host contract
    # ------------------------------------------------------------------

    def subscribe(self, listener):
        """Listener(snapshot) called on every committed position change"""
        return self.store.subscribe(listener)

    def on_tap(self, listener):
        """Listener(element_id, x, y) called on taps without drag"""
        self._tap_listeners.append(listener)

    def set_content(self, content: CardContent):
        self.content = content

    def set_position(self, element_id, position):
        """Move an element from outside the editor (e.g. a restored layout)"""
        self.store.set(element_id, position)

    def snapshot(self):
        return self.store.snapshot()

    def live_positions(self):
        """Positions including in-flight drags"""
        return {element_id: controller.position for element_id, controller in self.controllers.items()}

    def layout(self, include_absent=None):
        if include_absent is None:
            include_absent = self.show_absent
        return build_layout(self.live_positions(), self.content, include_absent=include_absent)

    def resting_layout(self):
        """Layout as drawn with no gesture in flight (what the renderer sees)"""
        return build_layout(self.store.snapshot(), self.content)

    # ------------------------------------------------------------------
    # Pointer routing
    # ------------------------------------------------------------------

    def element_at(self, screen_point):
        """Element under a pointer position (viewport applied), or None"""
        local = screen_point_to_card_local(screen_point, self.viewport.transform)
        placed = element_at(self.layout(), local)
        return placed.element_id if placed is not None else None

    def pointer_down(self, screen_point):
        """Start a single-pointer interaction.

        Returns:
            ElementId under the pointer, or None when the card background
            was hit
        """
        self.pointer_cancel()
        element_id = self.element_at(screen_point)
        if element_id is None:
            return None
        self.active_controller = self.controllers[element_id]
        self.active_controller.pointer_down()
        return element_id

    def pointer_move(self, dx, dy):
        if self.active_controller is None:
            return None
        return self.active_controller.pointer_move(dx, dy)

    def pointer_up(self):
        controller, self.active_controller = self.active_controller, None
        if controller is None:
            return None
        return controller.pointer_up()

    def pointer_cancel(self):
        controller, self.active_controller = self.active_controller, None
        if controller is not None:
            controller.cancel()

    def controller(self, element_id):
        return self.controllers[ElementId(element_id)]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _sync_controllers(self, snapshot):
        for element_id, controller in self.controllers.items():
            controller.sync_initial_position(snapshot[element_id])

    def _handle_tap(self, element_id, x, y):
        for listener in list(self._tap_listeners):
            listener(element_id, x, y)
