"""
Shared fixtures for ID card layout editor tests.

Provides a fake millisecond clock, position stores, profiles, card content
and small temporary images created with Pillow.
"""
import sys
import os
import pytest

# Ensure editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'editor', 'src'))

# Widget tests run without a display
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')


# ── Sample profile data ─────────────────────────────────────────────────

SAMPLE_PROFILE = {
    'first_name': 'Amina',
    'last_name': 'Benali',
    'arabic_first_name': 'أمينة',
    'arabic_last_name': 'بن علي',
    'date_of_birth': '14/03/2003',
    'place_of_birth': 'Batna',
    'major': 'Computer Science',
    'branch': 'Software Engineering',
    'academic_year': '2024/2025',
    'university': 'University of Batna 2',
}

SAMPLE_PROFILE_CAMEL = {
    'firstName': 'Amina',
    'lastName': 'Benali',
    'dateOfBirth': '14/03/2003',
    'placeOfBirth': 'Batna',
    'major': 'Computer Science',
    'branch': 'Software Engineering',
    'profilePicture': None,
    'email': 'amina@example.org',
}


class FakeClock:
    """Manually advanced millisecond clock for animation tests."""

    def __init__(self, start=0.0):
        self.now = float(start)

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms
        return self.now


# ── Fixtures ────────────────────────────────────────────────────────────

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    """PositionStore on the default layout."""
    from models.position_store import PositionStore
    return PositionStore()


@pytest.fixture
def drag_state():
    from components.drag_context import DragState
    return DragState()


@pytest.fixture
def profile():
    from models.profile import CardProfile
    return CardProfile.from_dict(SAMPLE_PROFILE)


@pytest.fixture
def empty_profile():
    from models.profile import CardProfile
    return CardProfile()


@pytest.fixture
def make_image(tmp_path):
    """Factory writing a solid-colour PNG and returning its path."""
    from PIL import Image

    def _make(name='image.png', size=(40, 30), color=(200, 30, 30, 255)):
        path = tmp_path / name
        Image.new('RGBA', size, color).save(path)
        return str(path)
    return _make


@pytest.fixture
def content(profile):
    """CardContent with a profile but no images."""
    from models.profile import CardContent
    return CardContent(profile=profile)


@pytest.fixture
def full_content(profile, make_image):
    """CardContent with template, logos and a photo on disk."""
    from models.profile import CardContent
    return CardContent(
        profile=profile,
        template=make_image('template.png', (238, 150), (240, 240, 250, 255)),
        logo1=make_image('logo1.png', (50, 50), (0, 120, 0, 255)),
        logo2=make_image('logo2.png', (50, 50), (0, 0, 160, 255)),
        photo=make_image('photo.png', (60, 80), (120, 80, 40, 255)),
    )
