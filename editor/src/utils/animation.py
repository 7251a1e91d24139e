"""Timed animation primitives for gesture-driven controllers.

Controllers own plain state and advance it from an injectable millisecond
clock; a Qt host calls tick() from a QTimer, tests drive a fake clock.
Easing curves come from QEasingCurve so the desktop widgets and the
controllers animate identically.
"""
import time

from PyQt5.QtCore import QEasingCurve

from constants import DEFAULT_ANIMATION_MS


def monotonic_ms():
	"""Default clock: monotonic time in milliseconds"""
	return time.monotonic() * 1000.0


def ease_in_out():
	return QEasingCurve(QEasingCurve.InOutQuad)


class TimedAnimation:
	"""Animates a single float from ``start`` to ``end`` over a duration.

	The value is a pure function of the clock time, so sampling at any
	rate (or not at all) gives consistent results.
	"""

	def __init__(self, start, end, started_at, duration_ms=DEFAULT_ANIMATION_MS, easing=None, on_complete=None):
		self.start = float(start)
		self.end = float(end)
		self.started_at = started_at
		self.duration_ms = max(0.0, float(duration_ms))
		self.easing = easing or ease_in_out()
		self.on_complete = on_complete

	def progress(self, now):
		if self.duration_ms <= 0:
			return 1.0
		return max(0.0, min(1.0, (now - self.started_at) / self.duration_ms))

	def value_at(self, now):
		t = self.progress(now)
		if t >= 1.0:
			return self.end
		eased = self.easing.valueForProgress(t)
		return self.start + (self.end - self.start) * eased

	def finished(self, now):
		return self.progress(now) >= 1.0


class AnimatedValue:
	"""A float that is either at rest or following a TimedAnimation.

	Assigning ``value`` directly cancels any running animation (last
	writer wins). Completion callbacks run from tick() once the animation
	has reached its end value.
	"""

	def __init__(self, value=0.0, clock=None):
		self._value = float(value)
		self._animation = None
		self._clock = clock or monotonic_ms

	@property
	def value(self):
		if self._animation is not None:
			return self._animation.value_at(self._clock())
		return self._value

	@value.setter
	def value(self, new_value):
		self._animation = None
		self._value = float(new_value)

	@property
	def is_animating(self):
		return self._animation is not None

	@property
	def target(self):
		"""Value this will settle at"""
		if self._animation is not None:
			return self._animation.end
		return self._value

	def animate_to(self, end, duration_ms=DEFAULT_ANIMATION_MS, easing=None, on_complete=None):
		"""Start animating from the current value, replacing any running animation"""
		start = self.value
		self._animation = TimedAnimation(start, end, self._clock(), duration_ms, easing, on_complete)

	def cancel(self):
		"""Freeze at the current animated value"""
		if self._animation is not None:
			self._value = self._animation.value_at(self._clock())
			self._animation = None

	def tick(self):
		"""Advance; finish the animation when its time is up.

		Returns:
			True while still animating
		"""
		animation = self._animation
		if animation is None:
			return False
		if not animation.finished(self._clock()):
			return True
		self._animation = None
		self._value = animation.end
		if animation.on_complete is not None:
			animation.on_complete()
		return self._animation is not None
