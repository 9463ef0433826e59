"""Persisted editor preferences (last mode, preset and language)."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

log = logging.getLogger(__name__)

APP_NAME = "cardbuilder"

DEFAULTS: Dict[str, str] = {
    "mode": "notification",
    "notification_preset": "default",
    "chat_lang": "en",
    "preview_lang": "en",
    "last_export_dir": "",
}


def app_data_dir() -> Path:
    """Return the platform-specific application data directory."""
    override = os.getenv("CARDBUILDER_HOME")
    if override:
        target = Path(override)
    elif os.name == "nt":
        target = Path(os.getenv("APPDATA", Path.home())) / APP_NAME
    else:
        target = Path.home() / f".{APP_NAME}"
    target.mkdir(parents=True, exist_ok=True)
    return target


class SettingsManager:
    """Very small settings helper storing JSON data."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else app_data_dir() / "settings.json"
        self._settings: Dict[str, str] = {}
        self.load()

    def load(self) -> None:
        changed = False
        if self.path.exists():
            try:
                loaded = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                log.warning("Could not read settings from %s: %s", self.path, exc)
                loaded = {}
            self._settings = loaded if isinstance(loaded, dict) else {}
        else:
            self._settings = {}

        for key, value in DEFAULTS.items():
            if self._settings.get(key, "") == "" and value != "":
                self._settings[key] = value
                changed = True

        if changed:
            try:
                self.save()
            except OSError as exc:
                log.warning("Could not write settings to %s: %s", self.path, exc)

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._settings, indent=2), encoding="utf-8")

    def get(self, key: str, default: str = "") -> str:
        return self._settings.get(key, default)

    def set(self, key: str, value: str) -> None:
        self._settings[key] = value
        self.save()
