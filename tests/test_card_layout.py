"""
Tests for the layout pass shared by the editor and the static renderer,
and for the Present/Absent profile values feeding it.
"""
import pytest

from constants import (
    PLACEHOLDER_BIRTH_DATE, PLACEHOLDER_BIRTH_PLACE, PLACEHOLDER_FIRST_NAME,
    PLACEHOLDER_MAJOR,
)
from models.card_elements import ELEMENT_ORDER, ElementId, ElementKind, ImageFit, default_position
from models.position_store import PositionStore
from models.profile import Absent, CardContent, CardProfile, Present, resolve, value_or
from models.transform import Vec2
from services.card_layout import build_layout, element_at, element_content

from conftest import SAMPLE_PROFILE_CAMEL


# ══════════════════════════════════════════════════════════════════════════
# Profile values
# ══════════════════════════════════════════════════════════════════════════

class TestProfileValues:

    @pytest.mark.parametrize("raw", [None, '', '   '])
    def test_absent(self, raw):
        assert resolve(raw) is Absent
        assert not resolve(raw)

    def test_present(self):
        assert resolve('Batna') == Present('Batna')
        assert value_or(Present('x'), 'fallback') == 'x'
        assert value_or(Absent, 'fallback') == 'fallback'

    def test_camel_case_keys(self):
        profile = CardProfile.from_dict(SAMPLE_PROFILE_CAMEL)
        assert profile.first_name == 'Amina'
        assert profile.place_of_birth == 'Batna'
        assert profile.get('profile_picture') is Absent

    def test_round_trip(self, profile):
        assert CardProfile.from_dict(profile.to_dict()) == profile

    def test_from_none(self):
        assert CardProfile.from_dict(None) == CardProfile()


class TestPhotoSource:

    def test_card_photo_preferred(self):
        content = CardContent(profile=CardProfile(profile_picture='p.png'), photo='c.png')
        assert content.photo_source() == Present('c.png')

    def test_falls_back_to_profile_picture(self):
        content = CardContent(profile=CardProfile(profile_picture='p.png'))
        assert content.photo_source() == Present('p.png')

    def test_use_profile_photo(self):
        content = CardContent(profile=CardProfile(), photo='c.png', use_profile_photo=True)
        assert content.photo_source() is Absent


# ══════════════════════════════════════════════════════════════════════════
# Element content
# ══════════════════════════════════════════════════════════════════════════

class TestElementContent:

    def test_required_fields_use_placeholders(self):
        content = CardContent()
        assert element_content(ElementId.FIRST_NAME, content) == Present(PLACEHOLDER_FIRST_NAME)
        assert element_content(ElementId.MAJOR, content) == Present(PLACEHOLDER_MAJOR)

    def test_optional_fields_absent(self):
        content = CardContent()
        for element_id in (ElementId.ARABIC_FIRST_NAME, ElementId.UNIVERSITY, ElementId.LOGO1, ElementId.PHOTO):
            assert element_content(element_id, content) is Absent

    def test_birth_combines_date_and_place(self, content):
        assert element_content(ElementId.BIRTH, content) == Present('14/03/2003 Batna')

    def test_birth_placeholders_per_part(self):
        content = CardContent(profile=CardProfile(date_of_birth='01/01/2001'))
        assert element_content(ElementId.BIRTH, content) == Present(f'01/01/2001 {PLACEHOLDER_BIRTH_PLACE}')
        assert element_content(ElementId.BIRTH, CardContent()) == Present(
            f'{PLACEHOLDER_BIRTH_DATE} {PLACEHOLDER_BIRTH_PLACE}'
        )


# ══════════════════════════════════════════════════════════════════════════
# Layout
# ══════════════════════════════════════════════════════════════════════════

class TestBuildLayout:

    def test_absent_optional_elements_skipped(self, store):
        layout = build_layout(store.snapshot(), CardContent())
        ids = [element.element_id for element in layout]
        assert ids == [
            ElementId.LAST_NAME, ElementId.FIRST_NAME, ElementId.BIRTH,
            ElementId.MAJOR, ElementId.BRANCH,
        ]

    def test_include_absent_keeps_every_element(self, store):
        layout = build_layout(store.snapshot(), CardContent(), include_absent=True)
        assert [element.element_id for element in layout] == list(ELEMENT_ORDER)
        logo = layout[-1]
        assert logo.is_empty
        assert logo.kind is ElementKind.IMAGE

    def test_full_content(self, store, full_content):
        layout = build_layout(store.snapshot(), full_content)
        assert len(layout) == 12
        photo = layout[0]
        assert photo.element_id is ElementId.PHOTO
        assert photo.image == full_content.photo
        assert photo.fit is ImageFit.COVER
        assert photo.rotation == -90
        assert photo.position == Vec2(470, 6)
        university = next(e for e in layout if e.element_id is ElementId.UNIVERSITY)
        assert university.text == 'University of Batna 2'

    def test_positions_come_from_snapshot(self, full_content):
        store = PositionStore.from_mapping({'logo1': {'x': 1, 'y': 2}})
        layout = build_layout(store.snapshot(), full_content)
        logo1 = next(e for e in layout if e.element_id is ElementId.LOGO1)
        assert logo1.position == Vec2(1, 2)

    def test_missing_entries_use_default_layout(self, full_content):
        layout = build_layout({ElementId.PHOTO: Vec2(1, 2)}, full_content)
        placed = {e.element_id: e.position for e in layout}
        assert placed[ElementId.PHOTO] == Vec2(1, 2)
        assert placed[ElementId.LAST_NAME] == default_position(ElementId.LAST_NAME)
        assert placed[ElementId.LOGO1] == default_position(ElementId.LOGO1)

    def test_bounds_cover_rotated_box(self, store, full_content):
        photo = build_layout(store.snapshot(), full_content)[0]
        assert photo.bounds == pytest.approx((454, 22, 646, 182))


class TestElementAt:

    def test_hit_uses_rotated_box(self, store, full_content):
        layout = build_layout(store.snapshot(), full_content)
        # Centre of the photo box
        assert element_at(layout, Vec2(550, 102)).element_id is ElementId.PHOTO
        assert element_at(layout, Vec2(5, 740)) is None

    def test_topmost_wins(self, full_content):
        store = PositionStore.from_mapping({
            'photo': {'x': 100, 'y': 100},
            'logo2': {'x': 140, 'y': 140},
        })
        layout = build_layout(store.snapshot(), full_content)
        # logo2 (80x80, centre 180,180) overlaps the photo and is painted later
        assert element_at(layout, Vec2(180, 180)).element_id is ElementId.LOGO2

    def test_hit_outside_unrotated_box(self, store, full_content):
        layout = build_layout(store.snapshot(), full_content)
        # Inside the rotated photo, outside its unrotated 160x192 box
        assert element_at(layout, Vec2(640, 100)).element_id is ElementId.PHOTO
        # Inside the unrotated box only
        hit = element_at(layout, Vec2(550, 10))
        assert hit is None or hit.element_id is not ElementId.PHOTO
