"""Editor settings persisted between sessions and the Recent Cards menu"""

import os
import json
from PyQt5.QtWidgets import QMessageBox
from utils.logger import loggerRaise

from constants import MAX_RECENT_EXPORTS


class ConfigMixin:
	"""Settings stored in ``config_file``.

	Expects the host window to define ``config_dir``, ``config_file``,
	``storage_file``, ``show_debug_grid`` and ``recent_exports`` before
	``_load_config()`` runs, and a ``recent_menu`` once the menu bar exists.
	"""

	def _load_config(self):
		if not os.path.exists(self.config_file):
			return
		try:
			with open(self.config_file, 'r', encoding='utf-8') as f:
				config = json.load(f)
		except (OSError, ValueError) as e:
			loggerRaise(e, "Error loading config")
			return

		self.recent_exports = _existing_files(config.get('recent_exports', []))
		self.show_debug_grid = bool(config.get('show_debug_grid', self.show_debug_grid))
		self.storage_file = config.get('storage_file') or self.storage_file

	def _save_config(self):
		config = {
			'recent_exports': self.recent_exports[:MAX_RECENT_EXPORTS],
			'show_debug_grid': self.show_debug_grid,
			'storage_file': self.storage_file,
		}
		try:
			os.makedirs(self.config_dir, exist_ok=True)
			with open(self.config_file, 'w', encoding='utf-8') as f:
				json.dump(config, f, indent=2)
		except OSError as e:
			loggerRaise(e, "Error saving config")

	# ========================================
	# Recent Cards
	# ========================================

	def _add_to_recent_exports(self, filepath):
		"""Move a generated card to the top of Recent Cards"""
		others = [f for f in self.recent_exports if f != filepath]
		self.recent_exports = ([filepath] + others)[:MAX_RECENT_EXPORTS]
		self._recent_exports_changed()

	def _clear_recent_exports(self):
		self.recent_exports = []
		self._recent_exports_changed()

	def _recent_exports_changed(self):
		if getattr(self, 'recent_menu', None) is not None:
			self._update_recent_exports_menu()
		self._save_config()

	def _update_recent_exports_menu(self):
		"""Rebuild Recent Cards as numbered entries, newest first"""
		self.recent_menu.clear()
		entries = _existing_files(self.recent_exports)
		for number, filepath in enumerate(entries, start=1):
			action = self.recent_menu.addAction(f"&{number} {os.path.basename(filepath)}")
			action.setToolTip(filepath)
			action.triggered.connect(lambda checked, path=filepath: self._open_recent_export(path))

		if not entries:
			self.recent_menu.addAction("No recent cards").setEnabled(False)
			return
		self.recent_menu.addSeparator()
		self.recent_menu.addAction("Clear Recent Cards").triggered.connect(self._clear_recent_exports)

	def _open_recent_export(self, filepath):
		"""Show a previously generated card in the flip preview"""
		if os.path.exists(filepath):
			self.show_flip_preview(filepath)
			return
		QMessageBox.warning(self, "Card Not Found", f"The card image no longer exists:\n{filepath}")
		self.recent_exports = [f for f in self.recent_exports if f != filepath]
		self._recent_exports_changed()


def _existing_files(paths):
	return [path for path in paths if os.path.exists(path)]
