"""
ID Card Layout Editor - Layout Storage Service

Small JSON key-value store used by the host to keep the card layout between
sessions: the position map snapshot, image references (template, logos,
card photo), the profile and the last generated card image.
"""

import json
import logging
import os

from constants import (
    STORAGE_KEY_CARD_IMAGE, STORAGE_KEY_CARD_PHOTO, STORAGE_KEY_LOGO1,
    STORAGE_KEY_LOGO2, STORAGE_KEY_POSITIONS, STORAGE_KEY_PROFILE,
    STORAGE_KEY_TEMPLATE,
)
from models.position_store import PositionStore, snapshot_to_dict
from models.profile import CardContent, CardProfile
from utils.logger import loggerRaise

logger = logging.getLogger(__name__)


class LayoutStorage:
    """JSON file backed key-value storage.

    Every write is flushed to disk immediately. A missing or unreadable
    file starts an empty store; write failures are reported through
    loggerRaise.
    """

    def __init__(self, path):
        self.path = str(path)
        self._data = self._read()

    def _read(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not read layout storage %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Layout storage %s is not a JSON object, ignoring it", self.path)
            return {}
        return data

    def _write(self):
        try:
            directory = os.path.dirname(self.path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(self._data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            loggerRaise(e, "Error saving card layout")

    # ------------------------------------------------------------------
    # Key-value API
    # ------------------------------------------------------------------

    def get_item(self, key, default=None):
        return self._data.get(key, default)

    def set_item(self, key, value):
        self._data[key] = value
        self._write()

    def remove_item(self, key):
        if key in self._data:
            del self._data[key]
            self._write()

    def keys(self):
        return list(self._data)

    # ------------------------------------------------------------------
    # Typed helpers
    # ------------------------------------------------------------------

    def load_positions(self):
        """PositionStore from the saved snapshot (defaults where missing)"""
        return PositionStore.from_mapping(self.get_item(STORAGE_KEY_POSITIONS))

    def save_positions(self, snapshot):
        """Persist a position map snapshot; usable directly as a store listener"""
        self.set_item(STORAGE_KEY_POSITIONS, snapshot_to_dict(snapshot))

    def load_content(self, use_profile_photo=False):
        return CardContent(
            profile=CardProfile.from_dict(self.get_item(STORAGE_KEY_PROFILE)),
            template=self.get_item(STORAGE_KEY_TEMPLATE),
            logo1=self.get_item(STORAGE_KEY_LOGO1),
            logo2=self.get_item(STORAGE_KEY_LOGO2),
            photo=self.get_item(STORAGE_KEY_CARD_PHOTO),
            use_profile_photo=use_profile_photo,
        )

    def save_profile(self, profile):
        self.set_item(STORAGE_KEY_PROFILE, profile.to_dict())

    def set_image(self, key, uri):
        """Store an image reference, or remove it when uri is None"""
        if uri is None:
            self.remove_item(key)
        else:
            self.set_item(key, str(uri))

    @property
    def card_image(self):
        return self.get_item(STORAGE_KEY_CARD_IMAGE)

    @card_image.setter
    def card_image(self, uri):
        self.set_image(STORAGE_KEY_CARD_IMAGE, uri)
