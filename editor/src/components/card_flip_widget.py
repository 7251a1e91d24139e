"""
Card Flip Widget - two-sided preview of the generated card

Tap flips the card by half a turn; a horizontal drag turns it with the
pointer and completes the flip on release. The Y-axis turn is drawn as a
horizontal squash by |cos(rotation)|.
"""

import math

from PyQt5.QtWidgets import QWidget, QSizePolicy
from PyQt5.QtCore import Qt, QRectF, QTimer
from PyQt5.QtGui import QColor, QPainter, QPen, QPixmap

from constants import CARD_ASPECT_RATIO, FLIP_FLING_IDLE_MS, FRAME_INTERVAL_MS, TAP_SLOP_PX
from components.flip_controller import FlipController
from services.image_loader import uri_to_path
from utils.animation import monotonic_ms


class CardFlipWidget(QWidget):
	"""Flippable card preview.

	Args:
		card_image: URI/path of the rendered card (front and back show it)
		back_image: Optional separate image for the back face
		clock: Millisecond clock for the flip animations
	"""

	FACE_PLACEHOLDER_COLOR = '#F8F8F8'

	def __init__(self, card_image=None, back_image=None, clock=None, parent=None):
		super().__init__(parent)
		self._clock = clock or monotonic_ms
		self.flip = FlipController(self._clock)
		self._front = None
		self._back = None
		self.set_card_image(card_image, back_image)

		self.setMinimumSize(320, int(320 * CARD_ASPECT_RATIO))
		self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)

		self._press_x = None
		self._drag_started = False
		self._last_x = None
		self._velocity_x = 0.0
		self._last_move_ms = None

		self._frame_timer = QTimer(self)
		self._frame_timer.setInterval(FRAME_INTERVAL_MS)
		self._frame_timer.timeout.connect(self._on_frame)

	def set_card_image(self, card_image, back_image=None):
		self._front = _load_pixmap(card_image)
		self._back = _load_pixmap(back_image) if back_image else self._front
		self.update()

	def _on_frame(self):
		if not self.flip.tick():
			self._frame_timer.stop()
		self.update()

	def _start_animation_tick(self):
		if self.flip.is_animating and not self._frame_timer.isActive():
			self._frame_timer.start()

	# ========================================
	# Mouse Event Handlers
	# ========================================

	def mousePressEvent(self, event):
		if event.button() != Qt.LeftButton:
			super().mousePressEvent(event)
			return
		self._press_x = event.x()
		self._last_x = event.x()
		self._drag_started = False
		self._velocity_x = 0.0
		self._last_move_ms = self._clock()

	def mouseMoveEvent(self, event):
		if self._press_x is None:
			return
		translation = event.x() - self._press_x
		if not self._drag_started:
			if abs(translation) <= TAP_SLOP_PX:
				return
			self._drag_started = True
			self.flip.drag_begin()

		now = self._clock()
		elapsed = now - self._last_move_ms
		self._last_move_ms = now
		if elapsed > 0:
			self._velocity_x = (event.x() - self._last_x) * 1000.0 / elapsed
		self._last_x = event.x()
		self.flip.drag_update(translation)
		self.update()

	def mouseReleaseEvent(self, event):
		if event.button() != Qt.LeftButton or self._press_x is None:
			super().mouseReleaseEvent(event)
			return
		self._press_x = None
		if self._drag_started:
			if self._clock() - self._last_move_ms > FLIP_FLING_IDLE_MS:
				self._velocity_x = 0.0
			self.flip.drag_end(self._velocity_x)
		else:
			self.flip.tap()
		self._drag_started = False
		self._start_animation_tick()
		self.update()

	# ========================================
	# Painting
	# ========================================

	def _card_rect(self):
		width = float(self.width())
		height = width * CARD_ASPECT_RATIO
		if height > self.height():
			height = float(self.height())
			width = height / CARD_ASPECT_RATIO
		return QRectF((self.width() - width) / 2.0, (self.height() - height) / 2.0, width, height)

	def paintEvent(self, event):
		painter = QPainter(self)
		painter.setRenderHint(QPainter.Antialiasing)
		painter.setRenderHint(QPainter.SmoothPixmapTransform)

		rect = self._card_rect()
		squash = abs(math.cos(math.radians(self.flip.rotation)))
		center = rect.center()
		painter.translate(center)
		painter.scale(max(squash, 0.001), 1.0)
		painter.translate(-center)

		if self.flip.front_opacity > 0:
			painter.setOpacity(self.flip.front_opacity)
			self._paint_face(painter, rect, self._front)
		if self.flip.back_opacity > 0:
			painter.setOpacity(self.flip.back_opacity)
			self._paint_face(painter, rect, self._back)
		painter.end()

	def _paint_face(self, painter, rect, pixmap):
		if pixmap is None:
			painter.fillRect(rect, QColor(self.FACE_PLACEHOLDER_COLOR))
			painter.setPen(QPen(QColor(1, 149, 119), 1, Qt.DashLine))
			painter.drawRect(rect)
			painter.drawText(rect, Qt.AlignCenter, "No card generated yet")
			return
		painter.drawPixmap(rect, pixmap, QRectF(pixmap.rect()))


def _load_pixmap(uri):
	if not uri:
		return None
	path = uri_to_path(uri)
	if path is None:
		return None
	pixmap = QPixmap(str(path))
	return None if pixmap.isNull() else pixmap
