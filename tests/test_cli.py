from __future__ import annotations

import json
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from cardbuilder.main import main


def test_export_notification_with_positions(tmp_path: Path) -> None:
    out = tmp_path / "card.html"
    positions = tmp_path / "positions.json"
    code = main(["export", "notification", "--preset", "dark", "--global-drag", "--out", str(out), "--positions", str(positions)])
    assert code == 0
    html = out.read_text(encoding="utf-8")
    assert 'id="mainCard"' in html
    assert "#1a1a1a" in html
    assert json.loads(positions.read_text(encoding="utf-8"))["buttons"][0]["position"] == {"x": 10, "y": 140}


def test_export_chat_language(tmp_path: Path) -> None:
    out = tmp_path / "chat.html"
    assert main(["export", "chat", "--lang", "zh", "--bg-image", "https://x/bg.png", "--out", str(out)]) == 0
    html = out.read_text(encoding="utf-8")
    assert "立即聊天" in html
    assert "background-color" not in html


def test_unknown_preset_fails(tmp_path: Path) -> None:
    assert main(["export", "notification", "--preset", "nope", "--out", str(tmp_path / "x.html")]) == 2
    assert not (tmp_path / "x.html").exists()


def test_validation_failure_returns_error(tmp_path: Path) -> None:
    code = main(["export", "notification", "--title", "", "--validate", "--out", str(tmp_path / "x.html")])
    assert code == 1


def test_load_positions_file(tmp_path: Path) -> None:
    positions = tmp_path / "in.json"
    positions.write_text(json.dumps({"buttons": [{"id": "cta", "position": {"x": 33, "y": 44}}]}), encoding="utf-8")
    out = tmp_path / "card.html"
    assert main(["export", "notification", "--draggable-buttons", "--load-positions", str(positions), "--out", str(out)]) == 0
    assert 'id="cta" class="draggable" draggable="true" data-x="33" data-y="44"' in out.read_text(encoding="utf-8")


def test_presets_listing(capsys) -> None:
    assert main(["presets"]) == 0
    printed = capsys.readouterr().out
    assert "gaming" in printed
    assert "fr" in printed


def test_missing_positions_file_returns_error(tmp_path: Path) -> None:
    out = tmp_path / "card.html"
    code = main(["export", "notification", "--load-positions", str(tmp_path / "missing.json"), "--out", str(out)])
    assert code == 1
    assert not out.exists()


def test_unparseable_config_returns_error(tmp_path: Path) -> None:
    config = tmp_path / "chat.json"
    config.write_text("{not json", encoding="utf-8")
    out = tmp_path / "chat.html"
    assert main(["export", "chat", "--config", str(config), "--out", str(out)]) == 1
    assert not out.exists()
