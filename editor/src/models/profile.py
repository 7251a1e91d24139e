"""
ID Card Layout Editor - Profile Model

Student profile data shown on the card. Nullable fields are evaluated once
into a Present(value) | Absent variant, so the layout never repeats
truthiness checks.
"""

from dataclasses import dataclass, field, fields
from typing import Optional, Union


@dataclass(frozen=True)
class Present:
    value: str


class _Absent:
    """Singleton marker for missing profile data"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return 'Absent'

    def __bool__(self):
        return False


Absent = _Absent()

FieldValue = Union[Present, _Absent]


def resolve(value) -> FieldValue:
    """Map a raw profile value to Present/Absent.

    None and blank strings are Absent.
    """
    if value is None:
        return Absent
    text = str(value)
    if not text.strip():
        return Absent
    return Present(text)


def value_or(field_value: FieldValue, fallback: str) -> str:
    if isinstance(field_value, Present):
        return field_value.value
    return fallback


# Host data keys (camelCase as stored by the mobile profile screen) -> attribute
_CAMEL_KEYS = {
    'firstName': 'first_name',
    'lastName': 'last_name',
    'arabicFirstName': 'arabic_first_name',
    'arabicLastName': 'arabic_last_name',
    'dateOfBirth': 'date_of_birth',
    'placeOfBirth': 'place_of_birth',
    'major': 'major',
    'branch': 'branch',
    'academicYear': 'academic_year',
    'university': 'university',
    'profilePicture': 'profile_picture',
}


@dataclass(frozen=True)
class CardProfile:
    first_name: str = ''
    last_name: str = ''
    arabic_first_name: Optional[str] = None
    arabic_last_name: Optional[str] = None
    date_of_birth: str = ''
    place_of_birth: Optional[str] = None
    major: str = ''
    branch: str = ''
    academic_year: Optional[str] = None
    university: Optional[str] = None
    profile_picture: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        """Build a profile from snake_case or camelCase keys, ignoring extras"""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in (data or {}).items():
            name = _CAMEL_KEYS.get(key, key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self):
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def get(self, name) -> FieldValue:
        """Resolved Present/Absent value of a profile attribute"""
        return resolve(getattr(self, name))


@dataclass(frozen=True)
class CardContent:
    """Everything the card layout needs besides positions.

    Image references are opaque URIs; only the image loader interprets them.

    Attributes:
        profile: Student profile
        template: Card template image (background)
        logo1, logo2: University logos
        photo: Photo imported for the card
        use_profile_photo: Use the profile picture instead of ``photo``
    """
    profile: CardProfile = field(default_factory=CardProfile)
    template: Optional[str] = None
    logo1: Optional[str] = None
    logo2: Optional[str] = None
    photo: Optional[str] = None
    use_profile_photo: bool = False

    def photo_source(self) -> FieldValue:
        if self.use_profile_photo:
            return resolve(self.profile.profile_picture)
        photo = resolve(self.photo)
        if isinstance(photo, Present):
            return photo
        return resolve(self.profile.profile_picture)
