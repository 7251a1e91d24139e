"""
Card Canvas - interactive card layout editor widget

Paints the card template and every positioned element, and translates Qt
mouse/touch input into editor session commands:
- Left button / single touch: tap or drag the element under the pointer
- Two-finger touch: pinch to zoom and pan the card
- Right button drag: pan (desktop stand-in for a two-finger pan)
- Ctrl+wheel: zoom (one notch = one pinch step)
"""

import logging
import math

from PyQt5.QtWidgets import QWidget
from PyQt5.QtCore import Qt, QEvent, QPointF, QRectF, QTimer, pyqtSignal
from PyQt5.QtGui import QColor, QFont, QPainter, QPen, QPixmap

from constants import (
	CARD_BACKGROUND_COLOR, CARD_HEIGHT, CARD_WIDTH, DEBUG_GRID_COLOR, DEBUG_GRID_DIVISIONS,
	FRAME_INTERVAL_MS, TEMPLATE_PLACEHOLDER_COLOR, TEXT_COLOR, TEXT_FONT_SIZE,
	WHEEL_ZOOM_STEP,
)
from models.card_elements import ElementKind, ImageFit
from models.position_store import snapshot_to_dict
from models.transform import Vec2
from services.image_loader import uri_to_path
from utils.coordinate_transforms import card_center, grid_lines

logger = logging.getLogger(__name__)


class CardCanvasWidget(QWidget):
	"""Interactive card preview bound to a CardEditorSession"""

	# Signals
	positionsChanged = pyqtSignal(dict)  # {element: {'x':.., 'y':..}} on every commit
	coordinatesQueried = pyqtSignal(str, float, float)  # element, x, y on tap

	def __init__(self, session, parent=None):
		super().__init__(parent)
		self.session = session
		self.show_grid = True
		self._pixmaps = {}

		self.setMouseTracking(True)
		self.setAttribute(Qt.WA_AcceptTouchEvents)
		self.setFixedSize(int(round(CARD_WIDTH)), int(round(CARD_HEIGHT)))

		# Pointer state
		self._press_pos = None
		self._pan_press_pos = None
		self._touch_mode = None  # 'element' or 'viewport'

		session.subscribe(self._on_positions_committed)
		session.on_tap(self._on_element_tapped)

		# Frame tick for viewport animations
		self._frame_timer = QTimer(self)
		self._frame_timer.setInterval(FRAME_INTERVAL_MS)
		self._frame_timer.timeout.connect(self._on_frame)

	# ========================================
	# Session
	# ========================================

	def open_session(self):
		"""Reset zoom/pan and repaint (editor (re)opened)"""
		self.session.open()
		self.update()

	def set_show_grid(self, show):
		self.show_grid = show
		self.update()

	def _on_positions_committed(self, snapshot):
		self.positionsChanged.emit(snapshot_to_dict(snapshot))
		self.update()

	def _on_element_tapped(self, element_id, x, y):
		self.coordinatesQueried.emit(element_id.value, x, y)

	def _on_frame(self):
		if not self.session.tick():
			self._frame_timer.stop()
		self.update()

	def _start_animation_tick(self):
		if self.session.viewport.is_animating and not self._frame_timer.isActive():
			self._frame_timer.start()

	# ========================================
	# Mouse Event Handlers
	# ========================================

	def mousePressEvent(self, event):
		if event.button() == Qt.LeftButton:
			self._press_pos = QPointF(event.localPos())
			self.session.pointer_down(Vec2(self._press_pos.x(), self._press_pos.y()))
			event.accept()
			return
		if event.button() == Qt.RightButton:
			if self.session.viewport.pan_begin(pointer_count=2):
				self._pan_press_pos = QPointF(event.localPos())
				self.setCursor(Qt.ClosedHandCursor)
			event.accept()
			return
		super().mousePressEvent(event)

	def mouseMoveEvent(self, event):
		if self._press_pos is not None and event.buttons() & Qt.LeftButton:
			delta = QPointF(event.localPos()) - self._press_pos
			self.session.pointer_move(delta.x(), delta.y())
			self.update()
			return
		if self._pan_press_pos is not None and event.buttons() & Qt.RightButton:
			delta = QPointF(event.localPos()) - self._pan_press_pos
			self.session.viewport.pan_update(delta.x(), delta.y())
			self.update()
			return
		super().mouseMoveEvent(event)

	def mouseReleaseEvent(self, event):
		if event.button() == Qt.LeftButton and self._press_pos is not None:
			self._press_pos = None
			self.session.pointer_up()
			self.update()
			return
		if event.button() == Qt.RightButton and self._pan_press_pos is not None:
			self._pan_press_pos = None
			self.session.viewport.pan_end()
			self.setCursor(Qt.ArrowCursor)
			self.update()
			return
		super().mouseReleaseEvent(event)

	def wheelEvent(self, event):
		"""Ctrl+wheel zooms the card in pinch-sized steps"""
		if not event.modifiers() & Qt.ControlModifier:
			super().wheelEvent(event)
			return
		delta = event.angleDelta().y()
		if delta == 0:
			return
		factor = WHEEL_ZOOM_STEP if delta > 0 else 1.0 / WHEEL_ZOOM_STEP
		viewport = self.session.viewport
		if viewport.pinch_begin():
			viewport.pinch_update(factor)
			viewport.pinch_end()
			self._start_animation_tick()
		self.update()
		event.accept()

	def hideEvent(self, event):
		# A hidden widget gets no release events; drop any held lease
		self._press_pos = None
		self._pan_press_pos = None
		self.session.pointer_cancel()
		self.session.viewport.pan_end()
		self.session.viewport.pinch_end()
		super().hideEvent(event)

	# ========================================
	# Touch
	# ========================================

	def event(self, event):
		if event.type() in (QEvent.TouchBegin, QEvent.TouchUpdate, QEvent.TouchEnd, QEvent.TouchCancel):
			self._handle_touch(event)
			event.accept()
			return True
		return super().event(event)

	def _handle_touch(self, event):
		points = event.touchPoints()
		etype = event.type()

		if etype in (QEvent.TouchEnd, QEvent.TouchCancel):
			self._end_touch(cancelled=etype == QEvent.TouchCancel)
			self.update()
			return

		if len(points) >= 2:
			self._touch_viewport(points)
		elif self._touch_mode != 'viewport' and points:
			self._touch_element(points[0], begin=self._touch_mode is None)
		self.update()

	def _touch_element(self, point, begin):
		if begin:
			self._touch_mode = 'element'
			start = point.startPos()
			self.session.pointer_down(Vec2(start.x(), start.y()))
			return
		delta = point.pos() - point.startPos()
		self.session.pointer_move(delta.x(), delta.y())

	def _touch_viewport(self, points):
		viewport = self.session.viewport
		first, second = points[0], points[1]

		if self._touch_mode != 'viewport':
			active = self.session.active_controller
			if active is not None and active.is_dragging:
				# Element drag owns the gesture until release
				return
			self.session.pointer_cancel()
			self._touch_mode = 'viewport'
			viewport.pinch_begin()
			viewport.pan_begin(pointer_count=len(points))

		start_distance = _distance(first.startPos(), second.startPos())
		distance = _distance(first.pos(), second.pos())
		if start_distance > 0:
			viewport.pinch_update(distance / start_distance)

		start_mid = (first.startPos() + second.startPos()) / 2.0
		mid = (first.pos() + second.pos()) / 2.0
		viewport.pan_update(mid.x() - start_mid.x(), mid.y() - start_mid.y())

	def _end_touch(self, cancelled=False):
		mode, self._touch_mode = self._touch_mode, None
		if mode == 'element':
			if cancelled:
				self.session.pointer_cancel()
			else:
				self.session.pointer_up()
		elif mode == 'viewport':
			self.session.viewport.pinch_end()
			self.session.viewport.pan_end()
			self._start_animation_tick()

	# ========================================
	# Painting
	# ========================================

	def paintEvent(self, event):
		painter = QPainter(self)
		painter.setRenderHint(QPainter.Antialiasing)
		painter.setRenderHint(QPainter.SmoothPixmapTransform)

		viewport = self.session.viewport.transform
		center = card_center()
		painter.translate(viewport.translate_x, viewport.translate_y)
		painter.translate(center.x, center.y)
		painter.scale(viewport.scale, viewport.scale)
		painter.translate(-center.x, -center.y)

		card_rect = QRectF(0, 0, CARD_WIDTH, CARD_HEIGHT)
		painter.fillRect(card_rect, QColor(CARD_BACKGROUND_COLOR))
		self._paint_template(painter, card_rect)

		if self.show_grid:
			self._paint_grid(painter)

		for element in self.session.layout(include_absent=True):
			self._paint_element(painter, element)

		painter.end()

	def _paint_template(self, painter, card_rect):
		pixmap = self._pixmap(self.session.content.template)
		if pixmap is None:
			painter.fillRect(card_rect, QColor(TEMPLATE_PLACEHOLDER_COLOR))
			return
		painter.drawPixmap(_fit_rect(pixmap, card_rect, ImageFit.CONTAIN), pixmap, QRectF(pixmap.rect()))

	def _paint_grid(self, painter):
		horizontal, vertical = grid_lines(CARD_WIDTH, CARD_HEIGHT, DEBUG_GRID_DIVISIONS)
		painter.save()
		painter.setPen(QPen(QColor(*DEBUG_GRID_COLOR), 1))
		painter.setFont(QFont(self.font().family(), 8))
		for y, label in horizontal:
			painter.drawLine(QPointF(0, y), QPointF(CARD_WIDTH, y))
			painter.drawText(QPointF(2, y + 10), label)
		for x, label in vertical:
			painter.drawLine(QPointF(x, 0), QPointF(x, CARD_HEIGHT))
			painter.drawText(QPointF(x + 2, 10), label)
		painter.restore()

	def _paint_element(self, painter, element):
		width, height = element.size
		painter.save()
		painter.translate(element.position.x + width / 2.0, element.position.y + height / 2.0)
		painter.rotate(element.rotation)
		box = QRectF(-width / 2.0, -height / 2.0, width, height)

		if element.is_empty:
			painter.setPen(QPen(QColor(1, 149, 119, 160), 1, Qt.DashLine))
			painter.drawRect(box)
		elif element.kind is ElementKind.TEXT:
			font = QFont(self.font().family(), TEXT_FONT_SIZE)
			font.setPixelSize(TEXT_FONT_SIZE)
			font.setBold(True)
			painter.setFont(font)
			painter.setPen(QColor(TEXT_COLOR))
			painter.drawText(box, Qt.AlignLeft | Qt.AlignVCenter, element.text)
		else:
			pixmap = self._pixmap(element.image)
			if pixmap is not None:
				painter.setClipRect(box)
				painter.drawPixmap(_fit_rect(pixmap, box, element.fit), pixmap, QRectF(pixmap.rect()))

		controller = self.session.controllers[element.element_id]
		if controller.is_dragging:
			painter.setClipping(False)
			painter.setPen(QPen(QColor(90, 141, 191, 200), 2))
			painter.drawRect(box)
		painter.restore()

	def _pixmap(self, uri):
		if not uri:
			return None
		if uri not in self._pixmaps:
			path = uri_to_path(uri)
			pixmap = QPixmap(str(path)) if path is not None else QPixmap()
			if pixmap.isNull():
				logger.warning("Could not load image for canvas: %s", uri)
				pixmap = None
			self._pixmaps[uri] = pixmap
		return self._pixmaps[uri]


def _distance(a, b):
	return math.hypot(a.x() - b.x(), a.y() - b.y())


def _fit_rect(pixmap, box, fit):
	"""Target rect for drawing a pixmap into box with cover/contain fit"""
	pw, ph = pixmap.width(), pixmap.height()
	if pw <= 0 or ph <= 0:
		return box
	sx = box.width() / pw
	sy = box.height() / ph
	scale = max(sx, sy) if fit == ImageFit.COVER else min(sx, sy)
	w, h = pw * scale, ph * scale
	return QRectF(box.center().x() - w / 2.0, box.center().y() - h / 2.0, w, h)
