"""Layout positions: JSON export/import and the preview's position messages."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from .models import ButtonConfig, Position, TemplateConfig, position_or_none
from .notification import default_button_position

log = logging.getLogger(__name__)

BUTTON_POSITIONS_UPDATE = "buttonPositionsUpdate"
ELEMENT_POSITIONS_UPDATE = "elementPositionsUpdate"


class PositionsFormatError(ValueError):
    """Raised when an imported positions document has the wrong shape."""


def effective_button_position(config: TemplateConfig, index: int, button: ButtonConfig) -> Optional[Position]:
    """The position a button is rendered at, or ``None`` in the static layout."""
    if button.position is not None:
        return button.position
    mode = config.layout_mode
    if mode == "global":
        return default_button_position(index)
    if mode == "buttons":
        return Position(0, 0)
    return None


def export_positions(config: TemplateConfig, timestamp: Optional[str] = None) -> Dict[str, Any]:
    buttons: List[Dict[str, Any]] = []
    for index, btn in enumerate(config.buttons):
        entry: Dict[str, Any] = {"id": btn.id, "label": btn.label}
        pos = effective_button_position(config, index, btn)
        if pos is not None:
            entry["position"] = pos.to_dict()
        buttons.append(entry)
    elements = {
        element_id: pos.to_dict()
        for element_id, pos in config.element_positions.resolve(config.badge.show).items()
    }
    return {
        "buttons": buttons,
        "elements": elements,
        "timestamp": timestamp or datetime.now(timezone.utc).isoformat(),
    }


def positions_to_json(config: TemplateConfig, timestamp: Optional[str] = None) -> str:
    return json.dumps(export_positions(config, timestamp), indent=2, ensure_ascii=False)


def import_positions(config: TemplateConfig, data: Union[str, bytes, Mapping[str, Any]]) -> TemplateConfig:
    """Fold an exported positions document into ``config``.

    Buttons are matched by id; ids that do not exist in ``config`` are
    skipped. Buttons missing from the document keep their current position.
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as exc:
            raise PositionsFormatError(f"Positions file is not valid JSON: {exc}") from exc
    if not isinstance(data, Mapping):
        raise PositionsFormatError("Positions document must be a JSON object")

    raw_buttons = data.get("buttons", [])
    if not isinstance(raw_buttons, list):
        raise PositionsFormatError("'buttons' must be a list")
    by_id: Dict[str, Position] = {}
    for entry in raw_buttons:
        if not isinstance(entry, Mapping):
            continue
        pos = position_or_none(entry.get("position"))
        if pos is not None and "id" in entry:
            by_id[str(entry["id"])] = pos

    known = {btn.id for btn in config.buttons}
    for unknown in sorted(set(by_id) - known):
        log.warning("Ignoring position for unknown button %r", unknown)

    buttons = tuple(
        replace(btn, position=by_id[btn.id]) if btn.id in by_id else btn
        for btn in config.buttons
    )
    config = config.with_buttons(buttons)

    elements = data.get("elements")
    if isinstance(elements, Mapping):
        config = config.with_element_positions(elements)
    return config


def apply_position_message(config: TemplateConfig, message: Any) -> TemplateConfig:
    """Apply a ``buttonPositionsUpdate`` / ``elementPositionsUpdate`` message.

    Anything else, including malformed messages, leaves ``config`` unchanged.
    """
    if not isinstance(message, Mapping):
        log.debug("Ignoring non-object message %r", message)
        return config
    kind = message.get("type")
    positions = message.get("positions")
    if kind not in (BUTTON_POSITIONS_UPDATE, ELEMENT_POSITIONS_UPDATE):
        return config
    if not isinstance(positions, Mapping):
        log.warning("Malformed %s message: positions=%r", kind, positions)
        return config

    if kind == BUTTON_POSITIONS_UPDATE:
        return config.with_button_positions(positions)

    buttons = positions.get("buttons")
    if isinstance(buttons, Mapping):
        config = config.with_button_positions(buttons)
    elements = positions.get("elements")
    if isinstance(elements, Mapping):
        config = config.with_element_positions(elements)
    return config
