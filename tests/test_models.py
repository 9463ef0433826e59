from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from cardbuilder.core.models import (
    DEFAULT_CANVAS_BLOCKS,
    BlockStyle,
    ButtonConfig,
    CanvasBlock,
    ChatNowConfig,
    ElementPositions,
    Position,
    TemplateColors,
    TemplateConfig,
)


def test_template_defaults() -> None:
    config = TemplateConfig()
    assert (config.width, config.min_height) == (450, 420)
    assert config.title == "Notification Title"
    assert config.badge.show is True
    assert [btn.id for btn in config.buttons] == ["switchLang", "applyPayload", "closeWebview", "cta"]
    assert config.buttons[-1].action == "cta_click"
    assert list(config.i18n) == ["en", "uk", "ru"]
    assert config.initial_payload == {"programName": "WinZip", "count": 12}
    assert config.counter_interval == 1000
    assert config.layout_mode == "static"


def test_layout_mode_is_derived() -> None:
    config = TemplateConfig()
    assert config.with_draggable_buttons(True).layout_mode == "buttons"
    assert config.with_global_drag_mode(True).layout_mode == "global"
    assert config.with_draggable_buttons(True).with_draggable_buttons(False).layout_mode == "static"


def test_transforms_do_not_mutate() -> None:
    base = TemplateConfig()
    edited = (
        base.with_title("New")
        .with_colors({"textColor": "#111"})
        .with_badge(show=False)
        .with_button(ButtonConfig(id="extra", label="Extra"))
        .with_initial_payload({"count": 3})
    )
    assert base.title == "Notification Title"
    assert base.colors.text_color == "black"
    assert base.badge.show is True
    assert len(base.buttons) == 4
    assert edited.colors.text_color == "#111"
    assert edited.badge.show is False
    assert edited.badge.label == "Counter"
    assert edited.buttons[-1].id == "extra"
    assert edited.initial_payload == {"programName": "WinZip", "count": 3}


def test_with_i18n_merges_per_language() -> None:
    config = TemplateConfig().with_i18n({"uk": {"extra": "x"}, "es": {"title": "Hola"}})
    assert config.i18n["uk"]["extra"] == "x"
    assert config.i18n["uk"]["title"].startswith("Програму")
    assert list(config.i18n) == ["en", "uk", "ru", "es"]


def test_with_button_positions_fills_missing_with_origin() -> None:
    config = TemplateConfig().with_button_positions({"cta": {"x": 30, "y": 40}})
    positions = {btn.id: btn.position for btn in config.buttons}
    assert positions["cta"] == Position(30, 40)
    assert positions["switchLang"] == Position(0, 0)


def test_colors_accept_either_key_style_and_ignore_blanks() -> None:
    colors = TemplateColors().merged({"card_background": "#eee", "borderColor": "#123", "textColor": " "})
    assert colors.card_background == "#eee"
    assert colors.border_color == "#123"
    assert colors.text_color == "black"
    assert TemplateColors(button_bg="").button_bg == "#f0f0f0"


def test_element_positions_resolve_defaults() -> None:
    resolved = ElementPositions(header=Position(30, 30)).resolve(badge_shown=True)
    assert resolved["header"] == Position(30, 30)
    assert resolved["badgeElement"] == Position(10, 50)
    assert resolved["subtitle"] == Position(10, 90)
    assert resolved["out"] == Position(10, 400)
    assert ElementPositions().resolve(badge_shown=False)["subtitle"] == Position(10, 50)


def test_template_dict_round_trip_keeps_everything() -> None:
    config = (
        TemplateConfig()
        .with_title("T")
        .with_global_drag_mode(True)
        .with_element_positions({"header": {"x": 20, "y": 20}})
        .with_button_positions({"cta": {"x": 5.5, "y": 6}})
        .with_danger_threshold(5)
    )
    assert TemplateConfig.from_dict(config.to_dict()) == config


def test_template_from_dict_tolerates_junk() -> None:
    config = TemplateConfig.from_dict({"width": "abc", "buttons": "nope", "badge": {"show": False}})
    assert config.width == 450
    assert len(config.buttons) == 4
    assert config.badge.show is False


def test_block_style_closed_set() -> None:
    style = BlockStyle.from_dict({"fontSize": "12px", "textAlign": "justify", "boxShadow": "x"})
    assert style.font_size == "12px"
    assert style.text_align is None
    assert not hasattr(style, "box_shadow")
    assert BlockStyle().is_empty()
    assert style.merged({"font_size": None}).is_empty()


def test_canvas_block_constructors() -> None:
    tpl = CanvasBlock.template("t", "title")
    custom = CanvasBlock.custom("b", "button", label="Go")
    assert tpl.is_template and tpl.template_field == "title" and tpl.custom_type is None
    assert not custom.is_template and custom.custom_type == "button"
    assert CanvasBlock.from_dict(custom.to_dict()) == custom


def test_chat_defaults() -> None:
    config = ChatNowConfig()
    assert config.width == 480
    assert config.header_bg == "#546e7a"
    assert config.content_bg == "#ffffff"
    assert config.chat_link_text == "CHAT NOW"
    assert config.canvas_blocks == DEFAULT_CANVAS_BLOCKS
    assert [b.id for b in config.canvas_blocks] == ["tpl-title", "tpl-description", "tpl-chatlink", "tpl-checkbox"]


def test_chat_background_helpers() -> None:
    with_image = ChatNowConfig().with_background_image("https://x/bg.png")
    assert with_image.uses_background_image
    back_to_color = with_image.with_background_color("#000")
    assert not back_to_color.uses_background_image
    assert back_to_color.content_bg == "#000"


def test_chat_with_texts_rejects_unknown_fields() -> None:
    with pytest.raises(TypeError):
        ChatNowConfig().with_texts(width="1")


def test_chat_dict_round_trip() -> None:
    config = ChatNowConfig().with_background_image("https://x/bg.png").with_checkbox(False)
    assert ChatNowConfig.from_dict(config.to_dict()) == config
