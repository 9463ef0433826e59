import json
from pathlib import Path

from .models import TemplateConfig
from .positions import import_positions, positions_to_json


def save_html(path: str | Path, html: str) -> Path:
    path = Path(path)
    if path.suffix.lower() not in (".html", ".htm"):
        path = path.with_suffix(".html")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html, encoding="utf-8")
    return path


def save_positions(path: str | Path, config: TemplateConfig, timestamp: str | None = None) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(positions_to_json(config, timestamp), encoding="utf-8")
    return path


def load_positions(path: str | Path, config: TemplateConfig) -> TemplateConfig:
    path = Path(path)
    return import_positions(config, path.read_text(encoding="utf-8"))


def save_config(path: str | Path, config) -> None:
    path = Path(path)
    path.write_text(json.dumps(config.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")


def load_config(path: str | Path, cls):
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    return cls.from_dict(data)
