"""Configuration models for the card templates.

Every value here is an immutable snapshot. The ``with_*`` helpers return a new
value instead of mutating, so a chain of edits reads like the setter chain of a
builder without sharing state between callers.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional, Tuple

from .i18n import merge_i18n

log = logging.getLogger(__name__)

LayoutMode = Literal["global", "buttons", "static"]
TemplateField = Literal["title", "description", "chatlink", "checkbox"]
CustomBlockType = Literal["button", "text", "title", "checkbox", "input", "image"]
TextAlign = Literal["left", "center", "right"]

TEMPLATE_FIELDS: Tuple[str, ...] = ("title", "description", "chatlink", "checkbox")
CUSTOM_BLOCK_TYPES: Tuple[str, ...] = ("button", "text", "title", "checkbox", "input", "image")
TEXT_ALIGNMENTS: Tuple[str, ...] = ("left", "center", "right")


def _number(value: Any) -> float | int:
    """Coerce JSON-ish numbers, keeping integral values as ``int``."""
    try:
        num = float(value)
    except (TypeError, ValueError):
        return 0
    if num != num or num in (float("inf"), float("-inf")):
        return 0
    return int(num) if num.is_integer() else num


@dataclass(frozen=True)
class Position:
    x: float = 0
    y: float = 0

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Position":
        return cls(x=_number(data.get("x", 0)), y=_number(data.get("y", 0)))


def position_or_none(data: Any) -> Optional[Position]:
    if isinstance(data, Position):
        return data
    if isinstance(data, Mapping) and ("x" in data or "y" in data):
        return Position.from_dict(data)
    return None


# ---------------------------------------------------------------------------
# Notification family
# ---------------------------------------------------------------------------

DEFAULT_COLORS: Dict[str, str] = {
    "background": "transparent",
    "card_background": "white",
    "text_color": "black",
    "subtitle_color": "#333",
    "border_color": "#ddd",
    "button_bg": "#f0f0f0",
    "button_border": "#ccc",
    "badge_bg": "#efefef",
    "dot_color_active": "#10b04a",
    "dot_color_danger": "#ff3b30",
    "debug_bg": "#f6f6f6",
}

_COLOR_JSON_KEYS: Dict[str, str] = {
    "background": "background",
    "card_background": "cardBackground",
    "text_color": "textColor",
    "subtitle_color": "subtitleColor",
    "border_color": "borderColor",
    "button_bg": "buttonBg",
    "button_border": "buttonBorder",
    "badge_bg": "badgeBg",
    "dot_color_active": "dotColorActive",
    "dot_color_danger": "dotColorDanger",
    "debug_bg": "debugBg",
}


@dataclass(frozen=True)
class TemplateColors:
    """Named color slots. Blank slots fall back to the defaults."""

    background: str = DEFAULT_COLORS["background"]
    card_background: str = DEFAULT_COLORS["card_background"]
    text_color: str = DEFAULT_COLORS["text_color"]
    subtitle_color: str = DEFAULT_COLORS["subtitle_color"]
    border_color: str = DEFAULT_COLORS["border_color"]
    button_bg: str = DEFAULT_COLORS["button_bg"]
    button_border: str = DEFAULT_COLORS["button_border"]
    badge_bg: str = DEFAULT_COLORS["badge_bg"]
    dot_color_active: str = DEFAULT_COLORS["dot_color_active"]
    dot_color_danger: str = DEFAULT_COLORS["dot_color_danger"]
    debug_bg: str = DEFAULT_COLORS["debug_bg"]

    def __post_init__(self) -> None:
        for name, default in DEFAULT_COLORS.items():
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                object.__setattr__(self, name, default)

    def merged(self, overrides: "TemplateColors | Mapping[str, Any] | None") -> "TemplateColors":
        if overrides is None:
            return self
        if isinstance(overrides, TemplateColors):
            overrides = {name: getattr(overrides, name) for name in DEFAULT_COLORS}
        changes = {
            name: value
            for name, value in _normalize_color_keys(overrides).items()
            if isinstance(value, str) and value.strip()
        }
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {json_key: getattr(self, name) for name, json_key in _COLOR_JSON_KEYS.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TemplateColors":
        return cls().merged(data)


def _normalize_color_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    reverse = {json_key: name for name, json_key in _COLOR_JSON_KEYS.items()}
    result: Dict[str, Any] = {}
    for key, value in data.items():
        name = reverse.get(key, key)
        if name in DEFAULT_COLORS:
            result[name] = value
    return result


@dataclass(frozen=True)
class ButtonConfig:
    id: str
    label: str
    action: Optional[str] = None
    position: Optional[Position] = None
    draggable: bool = False

    def to_dict(self) -> dict:
        data: Dict[str, Any] = {"id": self.id, "label": self.label}
        if self.action is not None:
            data["action"] = self.action
        if self.position is not None:
            data["position"] = self.position.to_dict()
        if self.draggable:
            data["draggable"] = True
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ButtonConfig":
        return cls(
            id=str(data.get("id", "")),
            label=str(data.get("label", "")),
            action=data.get("action"),
            position=position_or_none(data.get("position")),
            draggable=bool(data.get("draggable", False)),
        )


@dataclass(frozen=True)
class BadgeConfig:
    show: bool = True
    label: Optional[str] = None
    dot_color: Optional[str] = None

    def merged(self, overrides: Mapping[str, Any]) -> "BadgeConfig":
        changes: Dict[str, Any] = {}
        if "show" in overrides:
            changes["show"] = bool(overrides["show"])
        if "label" in overrides:
            changes["label"] = overrides["label"]
        for key in ("dot_color", "dotColor"):
            if key in overrides:
                changes["dot_color"] = overrides[key]
        return replace(self, **changes)

    def to_dict(self) -> dict:
        data: Dict[str, Any] = {"show": self.show}
        if self.label is not None:
            data["label"] = self.label
        if self.dot_color is not None:
            data["dotColor"] = self.dot_color
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BadgeConfig":
        return cls(show=True).merged(data)


ELEMENT_IDS: Tuple[str, ...] = ("header", "badgeElement", "subtitle", "out")


@dataclass(frozen=True)
class ElementPositions:
    """Absolute positions of the non-button elements in global drag mode."""

    header: Optional[Position] = None
    badge_element: Optional[Position] = None
    subtitle: Optional[Position] = None
    out: Optional[Position] = None

    def resolve(self, badge_shown: bool = True) -> Dict[str, Position]:
        """Return every element position, filling the fixed defaults."""
        return {
            "header": self.header or Position(10, 10),
            "badgeElement": self.badge_element or Position(10, 50),
            "subtitle": self.subtitle or Position(10, 90 if badge_shown else 50),
            "out": self.out or Position(10, 400),
        }

    def merged(self, positions: "ElementPositions | Mapping[str, Any]") -> "ElementPositions":
        if isinstance(positions, ElementPositions):
            positions = positions.to_dict()
        changes: Dict[str, Position] = {}
        for element_id, attr in _ELEMENT_ATTRS.items():
            pos = position_or_none(positions.get(element_id))
            if pos is not None:
                changes[attr] = pos
        return replace(self, **changes)

    def to_dict(self) -> dict:
        data: Dict[str, dict] = {}
        for element_id, attr in _ELEMENT_ATTRS.items():
            pos = getattr(self, attr)
            if pos is not None:
                data[element_id] = pos.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ElementPositions":
        return cls().merged(data)


_ELEMENT_ATTRS: Dict[str, str] = {
    "header": "header",
    "badgeElement": "badge_element",
    "subtitle": "subtitle",
    "out": "out",
}


def _default_i18n() -> Dict[str, Dict[str, str]]:
    return {
        "en": {
            "title": "Program removed: {programName}",
            "subtitle": "Leftover files: {count}",
            "counter": "Live counter",
            "switch": "Switch language",
        },
        "uk": {
            "title": "Програму видалено: {programName}",
            "subtitle": "Залишкових файлів: {count}",
            "counter": "Лічильник",
            "switch": "Змінити мову",
        },
        "ru": {
            "title": "Программа удалена: {programName}",
            "subtitle": "Остаточных файлов: {count}",
            "counter": "Счётчик",
            "switch": "Сменить язык",
        },
    }


def _default_buttons() -> Tuple[ButtonConfig, ...]:
    return (
        ButtonConfig(id="switchLang", label="Switch language"),
        ButtonConfig(id="applyPayload", label="Apply payload"),
        ButtonConfig(id="closeWebview", label="Close WebView"),
        ButtonConfig(id="cta", label="CTA", action="cta_click"),
    )


@dataclass(frozen=True)
class TemplateConfig:
    """Everything the notification compiler needs for one build."""

    width: int = 450
    min_height: int = 420
    colors: TemplateColors = field(default_factory=TemplateColors)
    title: str = "Notification Title"
    subtitle: str = "Notification subtitle"
    badge: BadgeConfig = field(default_factory=lambda: BadgeConfig(show=True, label="Counter"))
    buttons: Tuple[ButtonConfig, ...] = field(default_factory=_default_buttons)
    show_debug_area: bool = True
    default_lang: str = "en"
    i18n: Dict[str, Dict[str, str]] = field(default_factory=_default_i18n)
    initial_payload: Dict[str, Any] = field(default_factory=lambda: {"programName": "WinZip", "count": 12})
    counter_interval: int = 1000
    global_drag_mode: bool = False
    element_positions: ElementPositions = field(default_factory=ElementPositions)
    # Dot turns to the danger color when payload[danger_field] > danger_threshold.
    danger_field: str = "count"
    danger_threshold: float = 20
    sample_payload: Dict[str, Any] = field(
        default_factory=lambda: {"programName": "Adobe Reader", "count": 27}
    )

    def __post_init__(self) -> None:
        if not isinstance(self.buttons, tuple):
            object.__setattr__(self, "buttons", tuple(self.buttons))

    @property
    def layout_mode(self) -> LayoutMode:
        if self.global_drag_mode:
            return "global"
        if any(btn.draggable for btn in self.buttons):
            return "buttons"
        return "static"

    # -- pure edits -------------------------------------------------------
    def with_dimensions(self, width: int, min_height: int) -> "TemplateConfig":
        return replace(self, width=width, min_height=min_height)

    def with_colors(self, colors: "TemplateColors | Mapping[str, Any]") -> "TemplateConfig":
        return replace(self, colors=self.colors.merged(colors))

    def with_title(self, title: str) -> "TemplateConfig":
        return replace(self, title=title)

    def with_subtitle(self, subtitle: str) -> "TemplateConfig":
        return replace(self, subtitle=subtitle)

    def with_badge(self, **changes: Any) -> "TemplateConfig":
        return replace(self, badge=self.badge.merged(changes))

    def with_buttons(self, buttons: Iterable[ButtonConfig]) -> "TemplateConfig":
        return replace(self, buttons=tuple(buttons))

    def with_button(self, button: ButtonConfig) -> "TemplateConfig":
        return replace(self, buttons=self.buttons + (button,))

    def with_debug_area(self, show: bool) -> "TemplateConfig":
        return replace(self, show_debug_area=show)

    def with_i18n(self, i18n: Mapping[str, Mapping[str, str]]) -> "TemplateConfig":
        return replace(self, i18n=merge_i18n(self.i18n, i18n))

    def with_default_lang(self, lang: str) -> "TemplateConfig":
        return replace(self, default_lang=lang)

    def with_initial_payload(self, payload: Mapping[str, Any]) -> "TemplateConfig":
        return replace(self, initial_payload={**self.initial_payload, **payload})

    def with_counter_interval(self, interval: int) -> "TemplateConfig":
        return replace(self, counter_interval=interval)

    def with_draggable_buttons(self, draggable: bool = True) -> "TemplateConfig":
        return replace(self, buttons=tuple(replace(btn, draggable=draggable) for btn in self.buttons))

    def with_global_drag_mode(self, enabled: bool) -> "TemplateConfig":
        return replace(self, global_drag_mode=enabled)

    def with_element_positions(self, positions: "ElementPositions | Mapping[str, Any]") -> "TemplateConfig":
        return replace(self, element_positions=self.element_positions.merged(positions))

    def with_button_positions(self, positions: Mapping[str, Any]) -> "TemplateConfig":
        """Apply an ``id -> {x, y}`` mapping; unlisted buttons keep theirs or get (0, 0)."""
        updated: List[ButtonConfig] = []
        for btn in self.buttons:
            pos = position_or_none(positions.get(btn.id)) or btn.position or Position(0, 0)
            updated.append(replace(btn, position=pos))
        return replace(self, buttons=tuple(updated))

    def with_danger_threshold(self, threshold: float, field_name: Optional[str] = None) -> "TemplateConfig":
        return replace(self, danger_threshold=threshold, danger_field=field_name or self.danger_field)

    # -- serialization ----------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "minHeight": self.min_height,
            "colors": self.colors.to_dict(),
            "title": self.title,
            "subtitle": self.subtitle,
            "badge": self.badge.to_dict(),
            "buttons": [btn.to_dict() for btn in self.buttons],
            "showDebugArea": self.show_debug_area,
            "defaultLang": self.default_lang,
            "i18n": copy.deepcopy(self.i18n),
            "initialPayload": copy.deepcopy(self.initial_payload),
            "counterInterval": self.counter_interval,
            "globalDragMode": self.global_drag_mode,
            "elementPositions": self.element_positions.to_dict(),
            "dangerField": self.danger_field,
            "dangerThreshold": self.danger_threshold,
            "samplePayload": copy.deepcopy(self.sample_payload),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TemplateConfig":
        base = cls()
        buttons = data.get("buttons")
        i18n = data.get("i18n")
        return cls(
            width=int(_number(data.get("width", base.width))) or base.width,
            min_height=int(_number(data.get("minHeight", base.min_height))) or base.min_height,
            colors=TemplateColors.from_dict(data.get("colors") or {}),
            title=str(data.get("title", base.title)),
            subtitle=str(data.get("subtitle", base.subtitle)),
            badge=base.badge.merged(data.get("badge") or {}),
            buttons=(
                tuple(ButtonConfig.from_dict(b) for b in buttons if isinstance(b, Mapping))
                if isinstance(buttons, list)
                else base.buttons
            ),
            show_debug_area=bool(data.get("showDebugArea", base.show_debug_area)),
            default_lang=str(data.get("defaultLang", base.default_lang)),
            i18n=copy.deepcopy(dict(i18n)) if isinstance(i18n, Mapping) else base.i18n,
            initial_payload=dict(data.get("initialPayload") or base.initial_payload),
            counter_interval=int(_number(data.get("counterInterval", base.counter_interval)))
            or base.counter_interval,
            global_drag_mode=bool(data.get("globalDragMode", False)),
            element_positions=ElementPositions.from_dict(data.get("elementPositions") or {}),
            danger_field=str(data.get("dangerField", base.danger_field)),
            danger_threshold=_number(data.get("dangerThreshold", base.danger_threshold)),
            sample_payload=dict(data.get("samplePayload") or base.sample_payload),
        )


# ---------------------------------------------------------------------------
# Chat family
# ---------------------------------------------------------------------------

# field name -> (json key, css property)
BLOCK_STYLE_FIELDS: Dict[str, Tuple[str, str]] = {
    "font_size": ("fontSize", "font-size"),
    "color": ("color", "color"),
    "background": ("background", "background"),
    "padding": ("padding", "padding"),
    "border_radius": ("borderRadius", "border-radius"),
    "border": ("border", "border"),
    "text_align": ("textAlign", "text-align"),
}


@dataclass(frozen=True)
class BlockStyle:
    """The closed set of style options a canvas block may override.

    ``text_align`` is not emitted verbatim everywhere: buttons and the chat
    link turn it into flex self-alignment, text blocks into ``text-align``.
    """

    font_size: Optional[str] = None
    color: Optional[str] = None
    background: Optional[str] = None
    padding: Optional[str] = None
    border_radius: Optional[str] = None
    border: Optional[str] = None
    text_align: Optional[TextAlign] = None

    def __post_init__(self) -> None:
        if self.text_align is not None and self.text_align not in TEXT_ALIGNMENTS:
            log.debug("Dropping unsupported text_align %r", self.text_align)
            object.__setattr__(self, "text_align", None)

    def is_empty(self) -> bool:
        return all(getattr(self, name) in (None, "") for name in BLOCK_STYLE_FIELDS)

    def merged(self, changes: Mapping[str, Any]) -> "BlockStyle":
        return replace(self, **_normalize_style_keys(changes))

    def to_dict(self) -> dict:
        return {
            json_key: getattr(self, name)
            for name, (json_key, _css) in BLOCK_STYLE_FIELDS.items()
            if getattr(self, name) is not None
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BlockStyle":
        return cls(**_normalize_style_keys(data))


def _normalize_style_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    reverse = {json_key: name for name, (json_key, _css) in BLOCK_STYLE_FIELDS.items()}
    result: Dict[str, Any] = {}
    for key, value in data.items():
        name = reverse.get(key, key)
        if name not in BLOCK_STYLE_FIELDS:
            log.debug("Ignoring unrecognized block style option %r", key)
            continue
        result[name] = None if value is None else str(value)
    return result


@dataclass(frozen=True)
class CanvasBlock:
    id: str
    is_template: bool
    template_field: Optional[TemplateField] = None
    custom_type: Optional[CustomBlockType] = None
    label: Optional[str] = None
    svg_content: Optional[str] = None
    style: Optional[BlockStyle] = None

    @classmethod
    def template(cls, block_id: str, template_field: TemplateField, style: Optional[BlockStyle] = None) -> "CanvasBlock":
        return cls(id=block_id, is_template=True, template_field=template_field, style=style)

    @classmethod
    def custom(
        cls,
        block_id: str,
        custom_type: CustomBlockType,
        label: Optional[str] = None,
        svg_content: Optional[str] = None,
        style: Optional[BlockStyle] = None,
    ) -> "CanvasBlock":
        return cls(
            id=block_id,
            is_template=False,
            custom_type=custom_type,
            label=label,
            svg_content=svg_content,
            style=style,
        )

    def to_dict(self) -> dict:
        data: Dict[str, Any] = {"id": self.id, "isTemplate": self.is_template}
        if self.template_field is not None:
            data["templateField"] = self.template_field
        if self.custom_type is not None:
            data["customType"] = self.custom_type
        if self.label is not None:
            data["label"] = self.label
        if self.svg_content is not None:
            data["svgContent"] = self.svg_content
        if self.style is not None:
            data["style"] = self.style.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CanvasBlock":
        style = data.get("style")
        return cls(
            id=str(data.get("id", "")),
            is_template=bool(data.get("isTemplate", False)),
            template_field=data.get("templateField"),
            custom_type=data.get("customType"),
            label=data.get("label"),
            svg_content=data.get("svgContent"),
            style=BlockStyle.from_dict(style) if isinstance(style, Mapping) else None,
        )


DEFAULT_CANVAS_BLOCKS: Tuple[CanvasBlock, ...] = (
    CanvasBlock.template("tpl-title", "title"),
    CanvasBlock.template("tpl-description", "description"),
    CanvasBlock.template("tpl-chatlink", "chatlink"),
    CanvasBlock.template("tpl-checkbox", "checkbox"),
)


@dataclass(frozen=True)
class ChatNowConfig:
    width: int = 480
    header_bg: str = "#546e7a"
    header_text: str = "PC Helpsoft PC Cleaner Recommends"
    content_bg: str = "#ffffff"
    content_bg_image: str = ""
    # main_title and description are trusted markup and may contain <br>.
    main_title: str = "Still having performance problems<br>with your computer?"
    description: str = (
        "Our agents are standing by. Chat with us now to see how we<br>"
        "can help resolve your PC issues."
    )
    chat_link_text: str = "CHAT NOW"
    checkbox_label: str = "Do not show this window again"
    show_checkbox: bool = True
    canvas_blocks: Tuple[CanvasBlock, ...] = DEFAULT_CANVAS_BLOCKS

    def __post_init__(self) -> None:
        if not isinstance(self.canvas_blocks, tuple):
            object.__setattr__(self, "canvas_blocks", tuple(self.canvas_blocks))

    @property
    def uses_background_image(self) -> bool:
        return bool(self.content_bg_image)

    def with_background_color(self, color: str) -> "ChatNowConfig":
        """Switch the content area to a flat color, dropping any image."""
        return replace(self, content_bg=color, content_bg_image="")

    def with_background_image(self, url: str) -> "ChatNowConfig":
        return replace(self, content_bg_image=url)

    def with_canvas_blocks(self, blocks: Iterable[CanvasBlock]) -> "ChatNowConfig":
        return replace(self, canvas_blocks=tuple(blocks))

    def with_texts(self, **texts: str) -> "ChatNowConfig":
        allowed = {"header_text", "main_title", "description", "chat_link_text", "checkbox_label"}
        unknown = set(texts) - allowed
        if unknown:
            raise TypeError(f"Unknown text fields: {', '.join(sorted(unknown))}")
        return replace(self, **texts)

    def with_checkbox(self, show: bool) -> "ChatNowConfig":
        return replace(self, show_checkbox=show)

    def to_dict(self) -> dict:
        return {
            "width": self.width,
            "headerBg": self.header_bg,
            "headerText": self.header_text,
            "contentBg": self.content_bg,
            "contentBgImage": self.content_bg_image,
            "mainTitle": self.main_title,
            "description": self.description,
            "chatLinkText": self.chat_link_text,
            "checkboxLabel": self.checkbox_label,
            "showCheckbox": self.show_checkbox,
            "canvasBlocks": [block.to_dict() for block in self.canvas_blocks],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChatNowConfig":
        base = cls()
        blocks = data.get("canvasBlocks")
        return cls(
            width=int(_number(data.get("width", base.width))) or base.width,
            header_bg=str(data.get("headerBg") or base.header_bg),
            header_text=str(data.get("headerText", base.header_text)),
            content_bg=str(data.get("contentBg") or base.content_bg),
            content_bg_image=str(data.get("contentBgImage") or ""),
            main_title=str(data.get("mainTitle", base.main_title)),
            description=str(data.get("description", base.description)),
            chat_link_text=str(data.get("chatLinkText", base.chat_link_text)),
            checkbox_label=str(data.get("checkboxLabel", base.checkbox_label)),
            show_checkbox=bool(data.get("showCheckbox", True)),
            canvas_blocks=(
                tuple(CanvasBlock.from_dict(b) for b in blocks if isinstance(b, Mapping))
                if isinstance(blocks, list)
                else base.canvas_blocks
            ),
        )
