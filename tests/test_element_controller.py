"""
Tests for the element drag/tap state machine and the shared drag state.
"""
import pytest

from components.drag_context import DragState, DragStateError
from components.element_controller import ElementController, ElementState
from models.card_elements import ElementId
from models.transform import Vec2


@pytest.fixture
def notifications(store):
    received = []
    store.subscribe(received.append)
    return received


@pytest.fixture
def photo(store, drag_state):
    return ElementController(ElementId.PHOTO, store, drag_state)


# ══════════════════════════════════════════════════════════════════════════
# Drag state leases
# ══════════════════════════════════════════════════════════════════════════

class TestDragState:

    def test_element_lease_released_on_exit(self, drag_state):
        with drag_state.element_drag('a'):
            assert drag_state.is_element_dragging
            assert not drag_state.can_move_viewport()
        assert not drag_state.is_element_dragging

    def test_element_lease_released_on_exception(self, drag_state):
        with pytest.raises(KeyError):
            with drag_state.element_drag('a'):
                raise KeyError('boom')
        assert drag_state.element_owner is None

    def test_double_acquire_raises(self, drag_state):
        with drag_state.element_drag('a'):
            with pytest.raises(DragStateError):
                with drag_state.element_drag('b'):
                    pass
            assert drag_state.element_owner == 'a'

    def test_viewport_and_element_exclusive(self, drag_state):
        with drag_state.viewport_gesture():
            assert not drag_state.can_drag_element()
            with pytest.raises(DragStateError):
                with drag_state.element_drag('a'):
                    pass
        with drag_state.element_drag('a'):
            with pytest.raises(DragStateError):
                with drag_state.viewport_gesture():
                    pass

    def test_pinch_and_pan_can_overlap(self, drag_state):
        with drag_state.viewport_gesture():
            with drag_state.viewport_gesture():
                assert drag_state.viewport_gestures == 2
        assert not drag_state.is_viewport_active


# ══════════════════════════════════════════════════════════════════════════
# Drag
# ══════════════════════════════════════════════════════════════════════════

class TestDrag:

    def test_photo_drag_commits_once(self, photo, store, notifications):
        photo.pointer_down()
        live = photo.pointer_move(50, 0)
        assert live == Vec2(520, 6)
        assert photo.is_dragging
        assert notifications == []

        committed = photo.pointer_up()
        assert committed == Vec2(520, 6)
        assert store.get(ElementId.PHOTO) == Vec2(520, 6)
        assert len(notifications) == 1
        assert notifications[0][ElementId.PHOTO] == Vec2(520, 6)
        assert photo.state is ElementState.IDLE
        assert photo.position == Vec2(520, 6)

    def test_committed_equals_base_plus_translation(self, photo, store):
        photo.pointer_down()
        photo.pointer_move(20, 0)
        photo.pointer_move(-33, 71)
        expected = photo.base_offset + photo.translation
        assert photo.pointer_up() == expected
        assert expected == Vec2(437, 77)

    def test_translation_divided_by_scale(self, store, drag_state):
        controller = ElementController(ElementId.MAJOR, store, drag_state, scale_provider=lambda: 2.0)
        controller.pointer_down()
        controller.pointer_move(40, -20)
        assert controller.translation == Vec2(20, -10)
        assert controller.pointer_up() == Vec2(535, 239)

    def test_drag_holds_shared_flag(self, photo, drag_state):
        photo.pointer_down()
        photo.pointer_move(30, 0)
        assert drag_state.element_owner is photo
        photo.pointer_up()
        assert drag_state.element_owner is None

    def test_second_element_cannot_drag(self, photo, store, drag_state):
        other = ElementController(ElementId.LOGO1, store, drag_state)
        photo.pointer_down()
        photo.pointer_move(30, 0)
        other.pointer_down()
        other.pointer_move(30, 0)
        assert other.state is ElementState.REJECTED
        assert photo.is_dragging

    def test_move_while_idle_is_ignored(self, photo):
        assert photo.pointer_move(100, 100) == Vec2(470, 6)
        assert photo.state is ElementState.IDLE


# ══════════════════════════════════════════════════════════════════════════
# Tap
# ══════════════════════════════════════════════════════════════════════════

class TestTap:

    def test_tap_reports_coordinates_without_commit(self, store, drag_state, notifications):
        taps = []
        controller = ElementController(
            ElementId.PHOTO, store, drag_state,
            on_tap=lambda element_id, x, y: taps.append((element_id, x, y)),
        )
        controller.pointer_down()
        controller.pointer_move(5, 5)
        assert controller.pointer_up() is None

        assert taps == [(ElementId.PHOTO, 470, 6)]
        assert notifications == []
        assert drag_state.element_owner is None

    def test_slop_boundary(self, photo):
        photo.pointer_down()
        photo.pointer_move(15, 0)
        assert photo.state is ElementState.TAP_CANDIDATE
        photo.pointer_move(15.5, 0)
        assert photo.state is ElementState.DRAGGING


# ══════════════════════════════════════════════════════════════════════════
# Rejection, cancel and cleanup
# ══════════════════════════════════════════════════════════════════════════

class TestRejectAndCancel:

    def test_rejected_while_viewport_active(self, photo, drag_state, notifications):
        with drag_state.viewport_gesture():
            photo.pointer_down()
            photo.pointer_move(40, 0)
            assert photo.state is ElementState.REJECTED
            photo.pointer_move(80, 0)
            assert photo.position == Vec2(470, 6)
            assert photo.pointer_up() is None
        assert notifications == []

    def test_cancel_releases_flag(self, photo, drag_state, notifications):
        photo.pointer_down()
        photo.pointer_move(40, 0)
        photo.cancel()
        assert drag_state.element_owner is None
        assert photo.position == Vec2(470, 6)
        assert notifications == []

    def test_exception_inside_interaction_releases_flag(self, photo, drag_state, notifications):
        with pytest.raises(RuntimeError):
            with photo.interaction() as controller:
                controller.pointer_move(40, 0)
                assert drag_state.is_element_dragging
                raise RuntimeError('pointer lost')
        assert drag_state.element_owner is None
        assert photo.state is ElementState.IDLE
        assert notifications == []

    def test_interaction_commits_on_exit(self, photo, store):
        with photo.interaction() as controller:
            controller.pointer_move(0, 30)
        assert store.get(ElementId.PHOTO) == Vec2(470, 36)

    def test_pointer_down_supersedes_unfinished_drag(self, photo, drag_state):
        photo.pointer_down()
        photo.pointer_move(40, 0)
        photo.pointer_down()
        assert drag_state.element_owner is None
        assert photo.state is ElementState.TAP_CANDIDATE
        assert photo.position == Vec2(470, 6)


# ══════════════════════════════════════════════════════════════════════════
# External position sync
# ══════════════════════════════════════════════════════════════════════════

class TestExternalSync:

    def test_small_change_ignored(self, photo):
        assert not photo.sync_initial_position(Vec2(470.05, 6.05))
        assert photo.base_offset == Vec2(470, 6)

    def test_external_move_snaps(self, photo):
        assert photo.sync_initial_position(Vec2(100, 200))
        assert photo.position == Vec2(100, 200)

    def test_snap_during_drag_drops_translation(self, photo):
        photo.pointer_down()
        photo.pointer_move(40, 0)
        photo.sync_initial_position(Vec2(100, 200))
        assert photo.position == Vec2(100, 200)
        # Further movement is measured from the snap
        photo.pointer_move(50, 0)
        assert photo.position == Vec2(110, 200)
        assert photo.pointer_up() == Vec2(110, 200)

    def test_own_commit_echo_is_ignored(self, photo, store):
        photo.pointer_down()
        photo.pointer_move(50, 0)
        photo.pointer_up()
        assert not photo.sync_initial_position(store.get(ElementId.PHOTO))
