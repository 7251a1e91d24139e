"""
Tests for the editor session: pointer routing, viewport/element arbitration
and the host contract (subscribe, tap callback, external positions).
"""
import pytest

from components.editor_session import CardEditorSession
from models.card_elements import ElementId
from models.position_store import PositionStore
from models.transform import Vec2
from utils.coordinate_transforms import card_local_to_screen


@pytest.fixture
def session(full_content, clock):
    return CardEditorSession(content=full_content, clock=clock)


PHOTO_CENTER = Vec2(550, 102)
EMPTY_SPOT = Vec2(5, 740)


class TestPointerRouting:

    def test_pointer_down_picks_element(self, session):
        assert session.pointer_down(PHOTO_CENTER) is ElementId.PHOTO
        assert session.active_controller is session.controller('photo')

    def test_background_hit(self, session):
        assert session.pointer_down(EMPTY_SPOT) is None
        assert session.pointer_move(100, 0) is None
        assert session.pointer_up() is None

    def test_drag_photo(self, session):
        received = []
        session.subscribe(received.append)
        session.pointer_down(PHOTO_CENTER)
        session.pointer_move(50, 0)
        assert session.live_positions()[ElementId.PHOTO] == Vec2(520, 6)
        assert session.pointer_up() == Vec2(520, 6)
        assert len(received) == 1
        assert session.snapshot()[ElementId.PHOTO] == Vec2(520, 6)

    def test_resting_layout_ignores_in_flight_drag(self, session):
        session.pointer_down(PHOTO_CENTER)
        session.pointer_move(50, 0)
        live = {e.element_id: e.position for e in session.layout()}
        resting = {e.element_id: e.position for e in session.resting_layout()}
        assert live[ElementId.PHOTO] == Vec2(520, 6)
        assert resting[ElementId.PHOTO] == Vec2(470, 6)
        session.pointer_up()
        resting = {e.element_id: e.position for e in session.resting_layout()}
        assert resting[ElementId.PHOTO] == Vec2(520, 6)

    def test_hit_test_follows_viewport(self, session):
        viewport = session.viewport
        viewport.pan_begin(2)
        viewport.pan_update(100, 0)
        viewport.pan_end()
        assert session.element_at(PHOTO_CENTER) is not ElementId.PHOTO
        assert session.element_at(Vec2(650, 102)) is ElementId.PHOTO

    def test_drag_divides_by_zoom(self, session):
        viewport = session.viewport
        viewport.pinch_begin()
        viewport.pinch_update(2.0)
        viewport.pinch_end()
        assert session.viewport.scale == 2.0

        screen = card_local_to_screen(PHOTO_CENTER, session.viewport.transform)
        assert session.pointer_down(screen) is ElementId.PHOTO
        session.pointer_move(100, 0)
        assert session.pointer_up() == Vec2(520, 6)

    def test_absent_elements_not_grabbable_by_default(self, clock):
        session = CardEditorSession(clock=clock)
        assert session.pointer_down(PHOTO_CENTER) is None

    def test_show_absent_makes_empty_elements_grabbable(self, clock):
        session = CardEditorSession(clock=clock, show_absent=True)
        assert session.pointer_down(PHOTO_CENTER) is ElementId.PHOTO


class TestTapCallback:

    def test_tap_reports_position(self, session):
        taps = []
        commits = []
        session.on_tap(lambda element_id, x, y: taps.append((element_id, x, y)))
        session.subscribe(commits.append)
        session.pointer_down(PHOTO_CENTER)
        session.pointer_move(3, -4)
        session.pointer_up()
        assert taps == [(ElementId.PHOTO, 470, 6)]
        assert commits == []


class TestMutualExclusion:

    def test_viewport_blocks_element_drag(self, session):
        session.viewport.pan_begin(2)
        session.pointer_down(PHOTO_CENTER)
        session.pointer_move(50, 0)
        assert not session.drag_state.is_element_dragging
        assert session.pointer_up() is None
        session.viewport.pan_end()
        assert session.snapshot()[ElementId.PHOTO] == Vec2(470, 6)

    def test_element_drag_blocks_viewport(self, session):
        session.pointer_down(PHOTO_CENTER)
        session.pointer_move(50, 0)
        assert not session.viewport.pan_begin(2)
        assert not session.viewport.pinch_begin()
        session.viewport.pan_update(30, 0)
        assert session.viewport.transform.translate_x == 0
        session.pointer_up()
        assert session.viewport.pan_begin(2)

    def test_never_both_active(self, session):
        drag_state = session.drag_state
        steps = [
            lambda: session.pointer_down(PHOTO_CENTER),
            lambda: session.viewport.pan_begin(2),
            lambda: session.pointer_move(60, 0),
            lambda: session.viewport.pinch_begin(),
            lambda: session.pointer_up(),
            lambda: session.viewport.pan_begin(2),
            lambda: session.pointer_down(PHOTO_CENTER),
            lambda: session.pointer_move(60, 0),
            lambda: session.viewport.pan_end(),
            lambda: session.pointer_move(80, 0),
            lambda: session.pointer_up(),
        ]
        for step in steps:
            step()
            assert not (drag_state.is_element_dragging and drag_state.is_viewport_active)


class TestLifecycle:

    def test_open_resets_viewport_and_cancels_drag(self, session):
        session.viewport.pinch_begin()
        session.viewport.pinch_update(2.0)
        session.viewport.pinch_end()
        session.open()
        assert session.is_open
        assert session.viewport.transform.is_identity

        session.pointer_down(PHOTO_CENTER)
        session.pointer_move(50, 0)
        session.open()
        assert not session.drag_state.is_element_dragging
        assert session.snapshot()[ElementId.PHOTO] == Vec2(470, 6)

    def test_external_position_snaps_controller(self, session):
        session.set_position(ElementId.LOGO1, Vec2(10, 10))
        assert session.controller(ElementId.LOGO1).position == Vec2(10, 10)

    def test_dispose_detaches_from_store(self, full_content, clock):
        store = PositionStore()
        session = CardEditorSession(store=store, content=full_content, clock=clock)
        session.dispose()
        store.set(ElementId.LOGO1, Vec2(10, 10))
        assert session.controller(ElementId.LOGO1).position == Vec2(342, 56)
