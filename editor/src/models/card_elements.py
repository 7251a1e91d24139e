"""
ID Card Layout Editor - Card Element Definitions

The closed set of positioned card elements and their descriptors.
Elements are declared in paint order: later entries draw on top and win
hit tests.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from constants import (
    BIRTH_FIELD_WIDTH, DEFAULT_POSITIONS, ELEMENT_ROTATION, LOGO_SIZE,
    PHOTO_SIZE, PLACEHOLDER_BRANCH, PLACEHOLDER_FIRST_NAME,
    PLACEHOLDER_LAST_NAME, PLACEHOLDER_MAJOR, TEXT_FIELD_WIDTH,
    TEXT_LINE_HEIGHT,
)
from models.transform import Vec2


class ElementId(str, Enum):
    """Identifier of a positioned card element."""
    PHOTO = 'photo'
    LAST_NAME = 'last_name'
    FIRST_NAME = 'first_name'
    ARABIC_FIRST_NAME = 'arabic_first_name'
    ARABIC_LAST_NAME = 'arabic_last_name'
    BIRTH = 'birth'
    MAJOR = 'major'
    BRANCH = 'branch'
    ACADEMIC_YEAR = 'academic_year'
    UNIVERSITY = 'university'
    LOGO1 = 'logo1'
    LOGO2 = 'logo2'


class ElementKind(str, Enum):
    TEXT = 'text'
    IMAGE = 'image'


class ImageFit(str, Enum):
    COVER = 'cover'
    CONTAIN = 'contain'


@dataclass(frozen=True)
class ElementSpec:
    """Static descriptor of one card element.

    Attributes:
        element_id: Which element this describes
        label: Human readable name (coordinate dialogs, status bar)
        kind: Text or image element
        size: (width, height) of the unrotated box in card units
        rotation: Degrees, applied about the box centre
        optional: Optional elements are skipped when their data is absent
        placeholder: Text used when a required text field is absent
        fit: How an image fills its box
    """
    element_id: ElementId
    label: str
    kind: ElementKind
    size: Tuple[float, float]
    rotation: float = ELEMENT_ROTATION
    optional: bool = True
    placeholder: Optional[str] = None
    fit: Optional[ImageFit] = None

    @property
    def width(self) -> float:
        return self.size[0]

    @property
    def height(self) -> float:
        return self.size[1]


def _text(element_id, label, width=TEXT_FIELD_WIDTH, placeholder=None):
    return ElementSpec(
        element_id=element_id,
        label=label,
        kind=ElementKind.TEXT,
        size=(width, TEXT_LINE_HEIGHT),
        optional=placeholder is None,
        placeholder=placeholder,
    )


def _image(element_id, label, size, fit):
    return ElementSpec(
        element_id=element_id,
        label=label,
        kind=ElementKind.IMAGE,
        size=size,
        fit=fit,
    )


ELEMENT_SPECS: Dict[ElementId, ElementSpec] = {
    spec.element_id: spec for spec in (
        _image(ElementId.PHOTO, 'Profile Picture', PHOTO_SIZE, ImageFit.COVER),
        _text(ElementId.LAST_NAME, 'Last Name (اللقب)', placeholder=PLACEHOLDER_LAST_NAME),
        _text(ElementId.FIRST_NAME, 'First Name (الإسم)', placeholder=PLACEHOLDER_FIRST_NAME),
        _text(ElementId.ARABIC_FIRST_NAME, 'Arabic First Name (الاسم بالعربية)'),
        _text(ElementId.ARABIC_LAST_NAME, 'Arabic Last Name (اللقب بالعربية)'),
        # Birth placeholders are resolved per part (date, place) by the layout
        ElementSpec(
            element_id=ElementId.BIRTH,
            label='Birth Date/Place (تاريخ و محال الميلاد)',
            kind=ElementKind.TEXT,
            size=(BIRTH_FIELD_WIDTH, TEXT_LINE_HEIGHT),
            optional=False,
        ),
        _text(ElementId.MAJOR, 'Major (الميدان)', placeholder=PLACEHOLDER_MAJOR),
        _text(ElementId.BRANCH, 'Branch (الفرع)', placeholder=PLACEHOLDER_BRANCH),
        _text(ElementId.ACADEMIC_YEAR, 'Academic Year (السنة الدراسية)'),
        _text(ElementId.UNIVERSITY, 'University'),
        _image(ElementId.LOGO1, 'University Logo 1', LOGO_SIZE, ImageFit.CONTAIN),
        _image(ElementId.LOGO2, 'University Logo 2', LOGO_SIZE, ImageFit.CONTAIN),
    )
}

# Paint order (back to front)
ELEMENT_ORDER = tuple(ELEMENT_SPECS)


def get_spec(element_id) -> ElementSpec:
    """Look up the descriptor for an element id or its string value"""
    return ELEMENT_SPECS[ElementId(element_id)]


def default_position(element_id) -> Vec2:
    """Default card-space position of an element"""
    x, y = DEFAULT_POSITIONS[ElementId(element_id).value]
    return Vec2(x, y)


def default_positions() -> Dict[ElementId, Vec2]:
    return {element_id: default_position(element_id) for element_id in ELEMENT_ORDER}
