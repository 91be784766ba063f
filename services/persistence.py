# services/persistence.py
"""
Robust JSON persistence for the pet.

- Three independent keys (petName, petStats, petAvatar), one file each, so a
  damaged file only resets its own value.
- Uses Kivy's App to place the files under the app's user_data_dir.
- Falls back to a local ./.userdata path when no app is running.
- Writes are atomic: data is written to a temporary file in the same directory
  and then os.replace() swaps it into place.
"""

from __future__ import annotations

import json
import logging
import os
from tempfile import NamedTemporaryFile
from typing import Any, Optional

from models.pet import PetStats, normalize_avatar, normalize_name

logger = logging.getLogger(__name__)

KEY_NAME = "petName"
KEY_STATS = "petStats"
KEY_AVATAR = "petAvatar"

_MISSING = object()


class Persistence:
    """JSON-backed key/value persistence with atomic writes."""

    def __init__(self, base_dir: Optional[str] = None) -> None:
        """Initialize and cache the computed save directory."""
        self._base_dir: str = base_dir or self._compute_dir()

    @staticmethod
    def _compute_dir() -> str:
        """Compute the save directory based on running Kivy app or local fallback."""
        from kivy.app import App

        app = App.get_running_app()
        if app is not None and getattr(app, "user_data_dir", None):
            return app.user_data_dir
        return os.path.join(".", ".userdata")

    @property
    def base_dir(self) -> str:
        return self._base_dir

    def path_for(self, key: str) -> str:
        """
        Return the file path for key and ensure its parent directory exists.

        Returns:
            str: Absolute or relative path to <key>.json.
        """
        os.makedirs(self._base_dir, exist_ok=True)
        return os.path.join(self._base_dir, f"{key}.json")

    # --- Raw key access ---
    def write(self, key: str, value: Any) -> bool:
        """
        Serialize and atomically persist one value.

        Writes UTF-8 JSON to a temp file in the save directory, then replaces
        the final file in a single operation.

        Returns:
            bool: True on success, False if any error occurs.
        """
        temp_name = None
        try:
            path = self.path_for(key)
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._base_dir,
                prefix=f".{key}-",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                temp_name = tmp.name
                json.dump(value, tmp, ensure_ascii=False)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(temp_name, path)
            return True
        except (OSError, TypeError, ValueError):
            logger.exception("could not save %s", key)
            if temp_name and os.path.exists(temp_name):
                try:
                    os.remove(temp_name)
                except OSError:
                    logger.warning("could not remove temp file %s", temp_name)
            return False

    def read(self, key: str, default: Any = None) -> Any:
        """
        Load one value, or default when the file is missing or unparseable.
        """
        path = os.path.join(self._base_dir, f"{key}.json")
        if not os.path.exists(path):
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError):
            logger.warning("ignoring unreadable %s at %s", key, path)
            return default

    # --- Typed accessors ---
    def load_name(self) -> Optional[str]:
        return normalize_name(self.read(KEY_NAME))

    def load_avatar(self) -> str:
        return normalize_avatar(self.read(KEY_AVATAR))

    def load_stats(self) -> PetStats:
        raw = self.read(KEY_STATS, _MISSING)
        if raw is _MISSING:
            return PetStats()
        try:
            return PetStats.from_dict(raw)
        except ValueError:
            logger.warning("ignoring malformed %s: %r", KEY_STATS, raw)
            return PetStats()

    def save_name(self, name: str) -> bool:
        return self.write(KEY_NAME, name)

    def save_avatar(self, avatar: str) -> bool:
        return self.write(KEY_AVATAR, avatar)

    def save_stats(self, stats: PetStats) -> bool:
        return self.write(KEY_STATS, stats.to_dict())
