"""Coordinate transformation utilities for the card editor.

Provides conversion between different coordinate systems:
- Card space (unscaled, unrotated card, 0,0 = top-left)
- Screen space (card widget pixels with viewport zoom/pan applied)
- Gesture space (pointer translations, flip rotations)

Plus rotation-aware geometry for element boxes.
"""
import math

import numpy as np

from constants import CARD_HEIGHT, CARD_WIDTH, MIN_SAFE_SCALE
from models.transform import Vec2


def clamp(value, lo, hi):
	"""Clamp value into [lo, hi]"""
	return max(lo, min(hi, value))


def safe_scale(scale):
	"""Scale clamped to a positive minimum so it can be used as a divisor."""
	if scale is None or not math.isfinite(scale):
		return 1.0
	return max(MIN_SAFE_SCALE, scale)


# ========================================
# Rotation
# ========================================

def normalize_angle(degrees):
	"""Reduce any rotation to the canonical range (-180, 180].

	Idempotent: normalize_angle(normalize_angle(x)) == normalize_angle(x).

	Args:
		degrees: Unbounded rotation in degrees

	Returns:
		float in (-180, 180]
	"""
	result = math.fmod(degrees, 360.0)
	if result <= -180.0:
		result += 360.0
	elif result > 180.0:
		result -= 360.0
	# fmod keeps the sign of the input, so -0.0 can show up
	return result + 0.0


def gesture_delta_to_rotation(translation_px, drag_span_px):
	"""Map a horizontal drag distance to a flip rotation.

	Dragging drag_span_px pixels flips the card by 180 degrees.

	Args:
		translation_px: Drag translation since gesture start
		drag_span_px: Distance required for a full 180 degree flip

	Returns:
		Rotation delta in degrees (unbounded)
	"""
	span = drag_span_px if abs(drag_span_px) > MIN_SAFE_SCALE else MIN_SAFE_SCALE
	return (translation_px / span) * 180.0


# ========================================
# Viewport (screen <-> card)
# ========================================

def card_center():
	return Vec2(CARD_WIDTH / 2.0, CARD_HEIGHT / 2.0)


def screen_point_to_card_local(point, viewport, origin=None):
	"""Convert a raw pointer position to card space.

	The viewport scales about ``origin`` (card centre by default) and then
	translates. Both points are expressed relative to the top-left of the
	un-zoomed card.

	Args:
		point: Vec2 pointer position
		viewport: ViewportTransform in effect
		origin: Vec2 scale origin, card centre when None

	Returns:
		Vec2 in card space
	"""
	origin = origin or card_center()
	scale = safe_scale(viewport.scale)
	return Vec2(
		(point.x - viewport.translate_x - origin.x) / scale + origin.x,
		(point.y - viewport.translate_y - origin.y) / scale + origin.y,
	)


def card_local_to_screen(point, viewport, origin=None):
	"""Inverse of screen_point_to_card_local()"""
	origin = origin or card_center()
	scale = safe_scale(viewport.scale)
	return Vec2(
		(point.x - origin.x) * scale + origin.x + viewport.translate_x,
		(point.y - origin.y) * scale + origin.y + viewport.translate_y,
	)


def screen_delta_to_card_local(delta, scale):
	"""Convert a pointer translation to card units: delta / scale"""
	scale = safe_scale(scale)
	return Vec2(delta.x / scale, delta.y / scale)


# ========================================
# Rotated element boxes
# ========================================

def rotated_corners(pos, size, rotation):
	"""Corners of an element box rotated about its centre.

	Args:
		pos: Vec2 top-left of the unrotated box
		size: (width, height)
		rotation: Degrees, positive = clockwise on screen (Y-down)

	Returns:
		numpy array of shape (4, 2): TL, TR, BR, BL after rotation
	"""
	width, height = size
	center = np.array([pos.x + width / 2.0, pos.y + height / 2.0])
	half = np.array([
		[-width / 2.0, -height / 2.0],
		[width / 2.0, -height / 2.0],
		[width / 2.0, height / 2.0],
		[-width / 2.0, height / 2.0],
	])
	theta = math.radians(rotation)
	cos_t, sin_t = math.cos(theta), math.sin(theta)
	rot = np.array([[cos_t, -sin_t], [sin_t, cos_t]])
	return half @ rot.T + center


def rotated_bounds(pos, size, rotation):
	"""Axis-aligned bounds of a rotated element box.

	Returns:
		(left, top, right, bottom) in the same space as pos
	"""
	corners = rotated_corners(pos, size, rotation)
	left, top = corners.min(axis=0)
	right, bottom = corners.max(axis=0)
	return float(left), float(top), float(right), float(bottom)


def point_in_rotated_box(point, pos, size, rotation):
	"""Hit test a point against a rotated element box.

	The point is rotated into the box's own frame, then tested against the
	unrotated rectangle.
	"""
	width, height = size
	cx = pos.x + width / 2.0
	cy = pos.y + height / 2.0
	theta = math.radians(-rotation)
	dx = point.x - cx
	dy = point.y - cy
	local_x = dx * math.cos(theta) - dy * math.sin(theta)
	local_y = dx * math.sin(theta) + dy * math.cos(theta)
	return abs(local_x) <= width / 2.0 and abs(local_y) <= height / 2.0


# ========================================
# Debug grid
# ========================================

def grid_lines(width, height, divisions):
	"""Debug grid lines with labels.

	Rows are numbered from 1, columns lettered from A.

	Returns:
		(horizontal, vertical): lists of (offset, label)
	"""
	horizontal = [((height / divisions) * i, str(i + 1)) for i in range(divisions)]
	vertical = [((width / divisions) * i, _column_label(i)) for i in range(divisions)]
	return horizontal, vertical


def _column_label(index):
	label = ''
	index += 1
	while index:
		index, rem = divmod(index - 1, 26)
		label = chr(65 + rem) + label
	return label
