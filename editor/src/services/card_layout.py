"""Card layout pass shared by the interactive editor and the static renderer.

Given a position map and card content, decides which elements appear and
what each one shows. The editor canvas and the renderer both consume this
list, so an editor at rest and a rendered card place every element on the
same card-space coordinates.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from constants import PLACEHOLDER_BIRTH_DATE, PLACEHOLDER_BIRTH_PLACE
from models.card_elements import (
    ELEMENT_ORDER, ElementId, ElementKind, ImageFit, default_position, get_spec,
)
from models.profile import Absent, Present, resolve, value_or
from models.transform import Vec2
from utils.coordinate_transforms import point_in_rotated_box, rotated_bounds

# Element -> profile attribute for plain text fields
_TEXT_FIELDS = {
    ElementId.LAST_NAME: 'last_name',
    ElementId.FIRST_NAME: 'first_name',
    ElementId.ARABIC_FIRST_NAME: 'arabic_first_name',
    ElementId.ARABIC_LAST_NAME: 'arabic_last_name',
    ElementId.MAJOR: 'major',
    ElementId.BRANCH: 'branch',
    ElementId.ACADEMIC_YEAR: 'academic_year',
    ElementId.UNIVERSITY: 'university',
}


@dataclass(frozen=True)
class PlacedElement:
    """One element positioned on the card.

    ``text`` is set for text elements, ``image`` (an opaque URI) for image
    elements; both are None for absent elements kept as placeholders.
    """
    element_id: ElementId
    position: Vec2
    size: Tuple[float, float]
    rotation: float
    kind: ElementKind
    text: Optional[str] = None
    image: Optional[str] = None
    fit: Optional[ImageFit] = None

    @property
    def is_empty(self):
        return self.text is None and self.image is None

    @property
    def bounds(self):
        """Axis-aligned (left, top, right, bottom) of the rotated box"""
        return rotated_bounds(self.position, self.size, self.rotation)

    def contains(self, point):
        return point_in_rotated_box(point, self.position, self.size, self.rotation)


def element_content(element_id, content):
    """Resolve what an element shows.

    Required text fields fall back to their placeholder text, so they are
    always Present; optional fields are Absent without data.
    """
    element_id = ElementId(element_id)
    spec = get_spec(element_id)
    profile = content.profile

    if element_id is ElementId.PHOTO:
        return content.photo_source()
    if element_id is ElementId.LOGO1:
        return resolve(content.logo1)
    if element_id is ElementId.LOGO2:
        return resolve(content.logo2)
    if element_id is ElementId.BIRTH:
        date = value_or(profile.get('date_of_birth'), PLACEHOLDER_BIRTH_DATE)
        place = value_or(profile.get('place_of_birth'), PLACEHOLDER_BIRTH_PLACE)
        return Present(f"{date} {place}")

    value = profile.get(_TEXT_FIELDS[element_id])
    if value is Absent and spec.placeholder is not None:
        return Present(spec.placeholder)
    return value


def place_element(element_id, position, content_value):
    spec = get_spec(element_id)
    text = image = None
    if isinstance(content_value, Present):
        if spec.kind is ElementKind.TEXT:
            text = content_value.value
        else:
            image = content_value.value
    return PlacedElement(
        element_id=spec.element_id,
        position=Vec2(position.x, position.y),
        size=spec.size,
        rotation=spec.rotation,
        kind=spec.kind,
        text=text,
        image=image,
        fit=spec.fit,
    )


def build_layout(positions, content, include_absent=False) -> List[PlacedElement]:
    """Lay out every element with backing data, in paint order.

    Args:
        positions: Mapping of ElementId -> Vec2 (a store snapshot); missing
            entries use the default layout
        content: CardContent
        include_absent: Keep elements without data as empty placeholders
            (the editor uses this to let users position missing logos)

    Returns:
        List of PlacedElement, back to front
    """
    placed = []
    for element_id in ELEMENT_ORDER:
        value = element_content(element_id, content)
        if value is Absent and not include_absent:
            continue
        position = positions.get(element_id)
        if position is None:
            position = default_position(element_id)
        placed.append(place_element(element_id, position, value))
    return placed


def element_at(layout, point):
    """Topmost placed element containing a card-space point, or None"""
    for element in reversed(layout):
        left, top, right, bottom = element.bounds
        if not (left <= point.x <= right and top <= point.y <= bottom):
            continue
        if element.contains(point):
            return element
    return None
