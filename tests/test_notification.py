from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from cardbuilder.core.models import ButtonConfig, TemplateConfig
from cardbuilder.core.notification import (
    NotificationTemplateCompiler,
    build_notification,
    default_button_position,
)


def test_build_is_deterministic() -> None:
    config = TemplateConfig().with_title("Same").with_global_drag_mode(True)
    assert build_notification(config) == build_notification(config)
    assert NotificationTemplateCompiler().build(config) == build_notification(config)


def test_default_build_is_a_full_document() -> None:
    html = build_notification()
    assert html.startswith("<!doctype html>")
    assert "<title>Template</title>" in html
    assert html.count("<style>") == 1
    assert html.count("<script>") == 1
    assert html.rstrip().endswith("</html>")


def test_accepts_plain_mapping_config() -> None:
    html = build_notification({"title": "From dict", "width": 500})
    assert "From dict" in html
    assert "width: 500px;" in html


def test_static_layout_uses_rows_of_two() -> None:
    html = build_notification(TemplateConfig())
    assert html.count('class="row"') == 2
    assert ".row {" in html
    assert '<button id="switchLang">Switch language</button>' in html
    assert "buttonsContainer" not in html
    assert "buttons-container" not in html
    assert "draggable-element" not in html
    assert "grid-visible" not in html
    assert "mousedown" not in html


def test_per_button_layout_uses_bounded_container() -> None:
    config = TemplateConfig().with_draggable_buttons(True)
    html = build_notification(config)
    assert 'id="buttonsContainer"' in html
    assert ".buttons-container {" in html
    assert "button.draggable {" in html
    assert 'class="row"' not in html
    assert ".row {" not in html
    assert 'id="mainCard"' not in html
    assert (
        '<button id="cta" class="draggable" draggable="true" data-x="0" data-y="0" '
        'style="position: absolute; left: 0px; top: 0px">CTA</button>'
    ) in html
    assert '"buttonPositionsUpdate"' in html
    assert '"elementPositionsUpdate"' not in html


def test_per_button_layout_keeps_stored_positions() -> None:
    config = TemplateConfig().with_buttons(
        [
            ButtonConfig(id="a", label="A", draggable=True),
            ButtonConfig(id="b", label="B"),
        ]
    ).with_button_positions({"a": {"x": 40, "y": 60}})
    html = build_notification(config)
    assert 'id="a" class="draggable" draggable="true" data-x="40" data-y="60"' in html
    assert '<button id="b" data-x="0" data-y="0"' in html


def test_global_layout_positions_every_element() -> None:
    html = build_notification(TemplateConfig().with_global_drag_mode(True))
    assert '<div class="card" id="mainCard">' in html
    assert 'id="header" data-x="10" data-y="10"' in html
    assert 'id="badgeElement" data-x="10" data-y="50"' in html
    assert 'id="subtitle" data-x="10" data-y="90"' in html
    assert 'id="out" class="draggable-element" data-x="10" data-y="400"' in html
    assert "max-width: calc(100% - 40px)" in html
    assert ".card.grid-visible" in html
    assert "position: relative;" in html
    assert '"elementPositionsUpdate"' in html
    assert "buttonsContainer" not in html
    assert 'class="row"' not in html


def test_global_layout_default_button_grid() -> None:
    html = build_notification(TemplateConfig().with_global_drag_mode(True))
    for index, btn in enumerate(TemplateConfig().buttons):
        pos = default_button_position(index)
        assert f'id="{btn.id}" class="draggable-element" data-x="{pos.x}" data-y="{pos.y}"' in html
    assert default_button_position(1).x == 210
    assert default_button_position(2).y == 190


def test_global_mode_wins_over_draggable_buttons() -> None:
    config = TemplateConfig().with_draggable_buttons(True).with_global_drag_mode(True)
    assert config.layout_mode == "global"
    html = build_notification(config)
    assert "buttonsContainer" not in html
    assert 'draggable="true"' not in html


def test_global_layout_without_badge_moves_subtitle_up() -> None:
    config = TemplateConfig().with_global_drag_mode(True).with_badge(show=False)
    html = build_notification(config)
    assert 'id="subtitle" data-x="10" data-y="50"' in html
    assert "badgeElement" not in html


def test_hidden_badge_emits_no_badge_markup_css_or_script() -> None:
    html = build_notification(TemplateConfig().with_badge(show=False))
    assert 'class="badge' not in html
    assert 'id="dot"' not in html
    assert ".badge {" not in html
    assert ".dot {" not in html
    assert "dotEl" not in html
    assert "counterLabel" not in html
    assert "DOT_COLORS" not in html


def test_badge_shows_label_and_zero_counter() -> None:
    html = build_notification(TemplateConfig().with_badge(label="Files"))
    assert '<div class="badge">' in html
    assert '<span class="dot" id="dot"></span>' in html
    assert '<span id="counterLabel">Files</span>' in html
    assert '<b id="counter">0</b>' in html


def test_debug_area_toggle() -> None:
    with_debug = build_notification(TemplateConfig())
    without_debug = build_notification(TemplateConfig().with_debug_area(False))
    assert '<pre id="out"></pre>' in with_debug
    assert "pre {" in with_debug
    assert 'id="out"' not in without_debug
    assert "pre {" not in without_debug
    assert 'getElementById("out")' not in without_debug


def test_colors_and_dimensions_reach_the_stylesheet() -> None:
    config = TemplateConfig().with_dimensions(600, 500).with_colors({"cardBackground": "#123456"})
    html = build_notification(config)
    assert "width: 600px;" in html
    assert "min-height: 500px;" in html
    assert "background: #123456;" in html


def test_blank_color_falls_back_to_default() -> None:
    html = build_notification(TemplateConfig().with_colors({"cardBackground": "  ", "borderColor": ""}))
    assert "background: white;" in html
    assert "border: 1px solid #ddd;" in html


def test_css_values_cannot_close_the_style_block() -> None:
    html = build_notification(TemplateConfig().with_colors({"background": "red;}</style><script>x()</script>"}))
    assert html.count("</style>") == 1
    assert "<script>x()" not in html


def test_text_is_escaped() -> None:
    html = build_notification(TemplateConfig().with_title("<b>Hi</b> & bye"))
    assert "&lt;b&gt;Hi&lt;/b&gt; &amp; bye" in html
    assert "<b>Hi</b>" not in html


def test_script_data_cannot_break_out_of_script_tag() -> None:
    config = TemplateConfig().with_i18n({"en": {"title": "</script><script>alert(1)</script>"}})
    html = build_notification(config)
    assert html.count("</script>") == 1


def test_script_carries_i18n_payload_and_buttons() -> None:
    html = build_notification(TemplateConfig())
    assert 'lang: "en"' in html
    assert '"programName": "WinZip"' in html
    assert html.index('"uk": {') < html.index('"ru": {')
    assert '{"id": "cta", "action": "cta_click"}' in html
    assert 'const SAMPLE_PAYLOAD = {"programName": "Adobe Reader", "count": 27};' in html
    assert "}, 1000);" in html


def test_script_runtime_contract() -> None:
    html = build_notification(TemplateConfig().with_draggable_buttons(True))
    assert "state.i18n[state.lang]?.[key] ?? state.i18n.en?.[key] ?? key" in html
    assert "/\\{(\\w+)\\}/g" in html
    assert 'typeof window.jsBridgeCall !== "function"' in html
    assert '"template:onReady"' in html
    assert '"template:onSize"' in html
    assert '"template:onAction"' in html
    assert "window.receive = receive;" in html
    assert "window.__fromHost = receive;" in html
    for kind in ("init", "setI18n", "setLang", "update"):
        assert f'msg.type === "{kind}"' in html
    assert 'drag = { state: "idle" };' in html
    assert 'e.key.toLowerCase() === "g"' in html


def test_danger_threshold_is_configurable() -> None:
    default_html = build_notification(TemplateConfig())
    assert 'const DANGER = { field: "count", threshold: 20 };' in default_html
    html = build_notification(TemplateConfig().with_danger_threshold(50, "errors"))
    assert 'const DANGER = { field: "errors", threshold: 50 };' in html


def test_badge_dot_color_override() -> None:
    html = build_notification(TemplateConfig().with_badge(dot_color="#00ff00"))
    assert 'active: "#00ff00"' in html
    assert "background: #00ff00;" in html


def test_no_buttons_renders_no_button_markup() -> None:
    html = build_notification(TemplateConfig().with_buttons([]))
    assert "<button" not in html
    assert "const BUTTONS = [];" in html
