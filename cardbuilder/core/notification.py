"""Notification card compiler.

``build_notification(config)`` turns a :class:`TemplateConfig` into one HTML
document with inline CSS and script. Exactly one layout mode applies per
build:

* ``global``  - every element is absolutely positioned and draggable;
* ``buttons`` - buttons sit in a bounded container, draggable ones movable;
* ``static``  - buttons flow in rows of two.

The markup and the embedded script are generated from the same mode, so the
script never looks up elements the markup does not contain.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from markupsafe import Markup

from .models import ButtonConfig, Position, TemplateConfig
from .nodes import Element, Node, fragment, fragment_of, h
from .styles import px
from .templates import render_template

log = logging.getLogger(__name__)

GRID_SIZE = 20
EDGE_PADDING = 10
CARD_PADDING = 16
DOCUMENT_TITLE = "Template"


def default_button_position(index: int) -> Position:
    """Grid placement used in global mode for buttons without a stored position."""
    return Position(x=10 + (index % 2) * 200, y=140 + (index // 2) * 50)


def _absolute(pos: Position, **extra_style: str) -> Dict[str, Any]:
    style = {"position": "absolute", "left": px(pos.x), "top": px(pos.y)}
    style.update(extra_style)
    return {"data_x": pos.x, "data_y": pos.y, "style": style}


def _badge_content(config: TemplateConfig) -> List[Element]:
    return [
        h("span", class_="dot", id="dot"),
        h("span", config.badge.label or "", id="counterLabel"),
        h("b", "0", id="counter"),
    ]


def render_badge(config: TemplateConfig, position: Optional[Position] = None) -> Optional[Element]:
    """Badge node, or ``None`` when hidden so no badge markup is emitted at all."""
    if not config.badge.show:
        return None
    if config.layout_mode == "global":
        pos = position or config.element_positions.resolve(True)["badgeElement"]
        return h("div", *_badge_content(config), class_="badge draggable-element", id="badgeElement", **_absolute(pos))
    return h("div", *_badge_content(config), class_="badge")


def render_buttons(config: TemplateConfig) -> Node:
    buttons = config.buttons
    mode = config.layout_mode
    if not buttons:
        return fragment()

    if mode == "global":
        return fragment_of(
            h(
                "button",
                btn.label,
                id=btn.id,
                class_="draggable-element",
                **_absolute(btn.position or default_button_position(index)),
            )
            for index, btn in enumerate(buttons)
        )

    if mode == "buttons":
        return h(
            "div",
            *(_positioned_button(btn) for btn in buttons),
            class_="buttons-container",
            id="buttonsContainer",
        )

    rows = [buttons[i:i + 2] for i in range(0, len(buttons), 2)]
    return fragment_of(
        h("div", *(h("button", btn.label, id=btn.id) for btn in row), class_="row")
        for row in rows
    )


def _positioned_button(btn: ButtonConfig) -> Element:
    return h(
        "button",
        btn.label,
        id=btn.id,
        class_="draggable" if btn.draggable else None,
        draggable="true" if btn.draggable else None,
        **_absolute(btn.position or Position(0, 0)),
    )


def render_card(config: TemplateConfig) -> Element:
    if config.layout_mode == "global":
        positions = config.element_positions.resolve(config.badge.show)
        debug = None
        if config.show_debug_area:
            debug = h(
                "pre",
                id="out",
                class_="draggable-element",
                **_absolute(positions["out"], **{"max-width": "calc(100% - 40px)"}),
            )
        return h(
            "div",
            h("h3", config.title, class_="title draggable-element", id="header", **_absolute(positions["header"])),
            render_badge(config, positions["badgeElement"]),
            h("p", config.subtitle, class_="subtitle draggable-element", id="subtitle", **_absolute(positions["subtitle"])),
            render_buttons(config),
            debug,
            class_="card",
            id="mainCard",
        )

    return h(
        "div",
        h("h3", config.title, class_="title", id="header"),
        render_badge(config),
        h("p", config.subtitle, class_="subtitle", id="subtitle"),
        render_buttons(config),
        h("pre", id="out") if config.show_debug_area else None,
        class_="card",
    )


def _dot_colors(config: TemplateConfig) -> Dict[str, str]:
    return {
        "dot_active": config.badge.dot_color or config.colors.dot_color_active,
        "dot_danger": config.colors.dot_color_danger,
    }


def render_styles(config: TemplateConfig) -> str:
    return render_template(
        "notification.css.j2",
        colors=config.colors,
        width=config.width,
        min_height=config.min_height,
        mode=config.layout_mode,
        badge_shown=config.badge.show,
        show_debug=config.show_debug_area,
        grid_size=GRID_SIZE,
        **_dot_colors(config),
    )


def render_script(config: TemplateConfig) -> str:
    return render_template(
        "notification.js.j2",
        lang=config.default_lang,
        payload=config.initial_payload,
        i18n=config.i18n,
        buttons=[{"id": btn.id, "action": btn.action} for btn in config.buttons],
        sample_payload=config.sample_payload,
        danger_field=config.danger_field,
        danger_threshold=config.danger_threshold,
        counter_interval=max(1, int(config.counter_interval)),
        mode=config.layout_mode,
        badge_shown=config.badge.show,
        show_debug=config.show_debug_area,
        grid_size=GRID_SIZE,
        edge_padding=EDGE_PADDING,
        card_padding=CARD_PADDING,
        **_dot_colors(config),
    )


def build_notification(config: Union[TemplateConfig, Mapping[str, Any], None] = None) -> str:
    """Compile a notification card document. Pure and deterministic."""
    if config is None:
        config = TemplateConfig()
    elif not isinstance(config, TemplateConfig):
        config = TemplateConfig.from_dict(config)

    html = render_template(
        "notification.html",
        document_title=DOCUMENT_TITLE,
        styles=render_styles(config),
        body=Markup(render_card(config).render(level=2)),
        script=render_script(config),
    )
    log.debug(
        "Compiled notification template: mode=%s buttons=%d bytes=%d",
        config.layout_mode,
        len(config.buttons),
        len(html),
    )
    return html


class NotificationTemplateCompiler:
    """Stateless compiler object for callers that want something to pass around."""

    def build(self, config: Union[TemplateConfig, Mapping[str, Any], None] = None) -> str:
        return build_notification(config)

    __call__ = build


__all__ = [
    "NotificationTemplateCompiler",
    "build_notification",
    "default_button_position",
    "render_badge",
    "render_buttons",
    "render_card",
    "render_script",
    "render_styles",
]
