"""Command line entry point: export templates or start the editor window."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .core import storage
from .core.chat import build_chat
from .core.models import ChatNowConfig, TemplateConfig
from .core.notification import build_notification
from .core.positions import PositionsFormatError
from .core.presets import (
    CHAT_LANGUAGES,
    assemble_chat,
    notification_preset,
    notification_preset_names,
)
from .core.validation import TemplateValidationError, build_validated

log = logging.getLogger("cardbuilder")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cardbuilder", description="Build embeddable HTML card templates")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    export = sub.add_parser("export", help="Compile a template to an HTML file")
    export.add_argument("kind", choices=["notification", "chat"])
    export.add_argument("--out", required=True, type=Path, help="Output .html file")
    export.add_argument("--preset", default="default", help="Notification preset name")
    export.add_argument("--lang", default=None, help="Default language (notification) or text preset (chat)")
    export.add_argument("--config", type=Path, help="JSON config to start from instead of a preset")
    export.add_argument("--title", help="Override the title")
    export.add_argument("--subtitle", help="Override the subtitle")
    export.add_argument("--draggable-buttons", action="store_true", help="Per-button drag layout")
    export.add_argument("--global-drag", action="store_true", help="Global drag layout")
    export.add_argument("--load-positions", type=Path, help="Apply a positions JSON file before export")
    export.add_argument("--positions", type=Path, help="Also write the layout positions JSON here")
    export.add_argument("--bg-image", help="Chat background image URL (overrides the color)")
    export.add_argument("--bg-color", help="Chat background color")
    export.add_argument("--validate", action="store_true", help="Reject configs that fail validation")

    sub.add_parser("presets", help="List notification presets and chat languages")
    sub.add_parser("preview", help="Open the editor window")
    return parser


def _notification_config(args: argparse.Namespace) -> TemplateConfig:
    if args.config:
        config = storage.load_config(args.config, TemplateConfig)
    else:
        config = notification_preset(args.preset)
    if args.title is not None:
        config = config.with_title(args.title)
    if args.subtitle is not None:
        config = config.with_subtitle(args.subtitle)
    if args.lang:
        config = config.with_default_lang(args.lang)
    if args.draggable_buttons:
        config = config.with_draggable_buttons(True)
    if args.global_drag:
        config = config.with_global_drag_mode(True)
    if args.load_positions:
        config = storage.load_positions(args.load_positions, config)
    return config


def _chat_config(args: argparse.Namespace) -> ChatNowConfig:
    if args.config:
        config = storage.load_config(args.config, ChatNowConfig)
    else:
        config = assemble_chat(args.lang or "en")
    if args.title is not None:
        config = config.with_texts(main_title=args.title)
    if args.subtitle is not None:
        config = config.with_texts(description=args.subtitle)
    if args.bg_color:
        config = config.with_background_color(args.bg_color)
    if args.bg_image:
        config = config.with_background_image(args.bg_image)
    return config


def _export(args: argparse.Namespace) -> int:
    try:
        if args.kind == "notification":
            config = _notification_config(args)
            html = build_validated(config) if args.validate else build_notification(config)
        else:
            config = _chat_config(args)
            html = build_validated(config) if args.validate else build_chat(config)
    except KeyError as exc:
        log.error("%s", exc.args[0] if exc.args else exc)
        return 2
    except (PositionsFormatError, TemplateValidationError) as exc:
        log.error("%s", exc)
        return 1
    except OSError as exc:
        log.error("Cannot read %s: %s", exc.filename, exc.strerror)
        return 1
    except json.JSONDecodeError as exc:
        log.error("Invalid JSON input: %s", exc)
        return 1

    out = storage.save_html(args.out, html)
    log.info("Wrote %s (%d bytes)", out, len(html.encode("utf-8")))
    if args.positions:
        if args.kind != "notification":
            log.warning("--positions only applies to notification templates; skipped")
        else:
            pos_path = storage.save_positions(args.positions, config)
            log.info("Wrote %s", pos_path)
    return 0


def _list_presets() -> int:
    print("Notification presets:")
    for name in notification_preset_names():
        print(f"  {name}")
    print("Chat languages:")
    for code, preset in CHAT_LANGUAGES.items():
        print(f"  {code}  {preset['name']}")
    return 0


def _preview() -> int:
    # Imported lazily so exports work without a display or Qt installed.
    from PyQt6 import QtWidgets

    from .ui.main_window import MainWindow

    app = QtWidgets.QApplication(sys.argv)
    win = MainWindow()
    win.show()
    return app.exec()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.command == "export":
        return _export(args)
    if args.command == "presets":
        return _list_presets()
    return _preview()


if __name__ == "__main__":
    raise SystemExit(main())
