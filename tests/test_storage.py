from __future__ import annotations

import json
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from cardbuilder.core import storage
from cardbuilder.core.models import ChatNowConfig, Position, TemplateConfig
from cardbuilder.settings import DEFAULTS, SettingsManager, app_data_dir


def test_save_html_adds_suffix_and_parents(tmp_path: Path) -> None:
    out = storage.save_html(tmp_path / "nested" / "card", "<p>x</p>")
    assert out.name == "card.html"
    assert out.read_text(encoding="utf-8") == "<p>x</p>"


def test_positions_file_round_trip(tmp_path: Path) -> None:
    config = TemplateConfig().with_global_drag_mode(True).with_button_positions({"cta": {"x": 70, "y": 80}})
    path = storage.save_positions(tmp_path / "positions.json", config, timestamp="t")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["timestamp"] == "t"
    assert set(data["elements"]) == {"header", "badgeElement", "subtitle", "out"}
    restored = storage.load_positions(path, TemplateConfig().with_global_drag_mode(True))
    assert restored.buttons[-1].position == Position(70, 80)


def test_config_files(tmp_path: Path) -> None:
    chat = ChatNowConfig().with_texts(header_text="Hi")
    storage.save_config(tmp_path / "chat.json", chat)
    assert storage.load_config(tmp_path / "chat.json", ChatNowConfig) == chat


def test_settings_defaults_are_persisted(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    settings = SettingsManager(path)
    assert settings.get("mode") == DEFAULTS["mode"]
    assert json.loads(path.read_text(encoding="utf-8"))["chat_lang"] == "en"
    settings.set("chat_lang", "ja")
    assert SettingsManager(path).get("chat_lang") == "ja"


def test_corrupt_settings_fall_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{nope", encoding="utf-8")
    settings = SettingsManager(path)
    assert settings.get("notification_preset") == "default"
    assert settings.get("missing", "fallback") == "fallback"


def test_app_data_dir_honours_override(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("CARDBUILDER_HOME", str(tmp_path / "home"))
    assert app_data_dir() == tmp_path / "home"
    assert (tmp_path / "home").is_dir()
