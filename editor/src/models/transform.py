"""Transform data structures for coordinate and state representation."""
from dataclasses import dataclass


@dataclass(frozen=True)
class Vec2:
    """2D vector for coordinate pairs.

    Used for any x/y coordinate pair across different spaces:
    - Card space positions (top-left of the unscaled card)
    - Screen/widget pixels
    - Gesture translations
    """
    x: float
    y: float

    def __iter__(self):
        """Allow tuple unpacking: x, y = vec2"""
        return iter((self.x, self.y))

    def __add__(self, other):
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other):
        return Vec2(self.x - other.x, self.y - other.y)

    def to_dict(self):
        return {'x': self.x, 'y': self.y}


ZERO = Vec2(0.0, 0.0)


@dataclass(frozen=True)
class ViewportTransform:
    """Visual-only zoom/pan of the card preview.

    Never folded into stored element positions.
    """
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    @property
    def translation(self):
        return Vec2(self.translate_x, self.translate_y)

    @property
    def is_identity(self):
        return self.scale == 1.0 and self.translate_x == 0.0 and self.translate_y == 0.0


IDENTITY = ViewportTransform()
