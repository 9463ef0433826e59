from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from cardbuilder.core.canvas import move_block
from cardbuilder.core.chat import ChatTemplateCompiler, build_chat
from cardbuilder.core.models import BlockStyle, CanvasBlock, ChatNowConfig

SVG = '<svg viewBox="0 0 10 10"><circle cx="5" cy="5" r="4"/></svg>'


def test_build_is_deterministic() -> None:
    config = ChatNowConfig()
    assert build_chat(config) == build_chat(config)
    assert ChatTemplateCompiler()(config) == build_chat(config)


def test_header_and_close_button_always_present() -> None:
    html = build_chat(ChatNowConfig().with_canvas_blocks([]))
    assert '<p class="header-text">PC Helpsoft PC Cleaner Recommends</p>' in html
    assert 'id="closeButton"' in html
    assert 'aria-label="Close"' in html
    assert "<title>Chat Now</title>" in html


def test_default_blocks_render_in_order_with_data_ids() -> None:
    html = build_chat(ChatNowConfig())
    ids = ["tpl-title", "tpl-description", "tpl-chatlink", "tpl-checkbox"]
    positions = [html.index(f'data-id="{block_id}"') for block_id in ids]
    assert positions == sorted(positions)


def test_reordered_blocks_render_in_new_order() -> None:
    config = ChatNowConfig()
    blocks = move_block(config.canvas_blocks, "tpl-checkbox", 0)
    html = build_chat(config.with_canvas_blocks(blocks))
    assert html.index('data-id="tpl-checkbox"') < html.index('data-id="tpl-title"')


def test_title_and_description_are_trusted_markup() -> None:
    html = build_chat(ChatNowConfig())
    assert (
        '<h1 class="main-title" data-id="tpl-title">Still having performance problems<br>with your computer?</h1>'
        in html
    )
    assert "can help resolve your PC issues.</p>" in html


def test_labels_and_header_are_escaped() -> None:
    config = ChatNowConfig().with_texts(header_text="<i>x</i>", chat_link_text="A & B")
    html = build_chat(config)
    assert "&lt;i&gt;x&lt;/i&gt;" in html
    assert ">A &amp; B</button>" in html


def test_hidden_checkbox_renders_nothing() -> None:
    html = build_chat(ChatNowConfig().with_checkbox(False))
    assert 'data-id="tpl-checkbox"' not in html
    assert 'id="doNotShowAgain"' not in html
    assert "checkbox-container\"" not in html


def test_visible_checkbox_markup() -> None:
    html = build_chat(ChatNowConfig())
    assert '<input type="checkbox" class="checkbox" id="doNotShowAgain">' in html
    assert 'for="doNotShowAgain"' in html
    assert "Do not show this window again</label>" in html


def test_background_color_mode() -> None:
    html = build_chat(ChatNowConfig().with_background_color("#fafafa"))
    assert "background-color: #fafafa;" in html
    assert "background: #fafafa;" in html
    assert "background-image" not in html


def test_background_image_wins_over_color() -> None:
    config = ChatNowConfig().with_background_color("#fafafa").with_background_image("https://example.com/bg.png")
    html = build_chat(config)
    assert 'background-image: url("https://example.com/bg.png");' in html
    assert "background-size: cover;" in html
    assert "#fafafa" not in html
    assert "background-color" not in html


def test_background_image_url_is_quoted() -> None:
    html = build_chat(ChatNowConfig().with_background_image('x");}</style><script>'))
    assert html.count("</style>") == 1
    assert "<script>" in html
    assert html.count("<script>") == 1


def test_chatlink_alignment_applies_to_wrapper_only() -> None:
    blocks = [CanvasBlock.template("link", "chatlink", style=BlockStyle(text_align="right", color="red"))]
    html = build_chat(ChatNowConfig().with_canvas_blocks(blocks))
    assert '<div class="chat-link-wrapper" data-id="link" style="align-self: flex-end">' in html
    assert '<button class="chat-link" id="chatButton" style="color: red">CHAT NOW</button>' in html


def test_chatlink_without_style_has_no_inline_alignment() -> None:
    html = build_chat(ChatNowConfig())
    assert '<div class="chat-link-wrapper" data-id="tpl-chatlink">' in html


def test_custom_button_alignment_defaults_to_left() -> None:
    blocks = [
        CanvasBlock.custom("b1", "button", label="Go", style=BlockStyle(background="#667eea")),
        CanvasBlock.custom("b2", "button", label="Centered", style=BlockStyle(text_align="center")),
    ]
    html = build_chat(ChatNowConfig().with_canvas_blocks(blocks))
    assert (
        '<button class="custom-element custom-button" data-id="b1" '
        'style="background: #667eea; align-self: flex-start">Go</button>'
    ) in html
    assert 'data-id="b2" style="align-self: center">Centered</button>' in html


def test_custom_text_blocks_keep_text_align() -> None:
    blocks = [CanvasBlock.custom("t1", "text", label="Hello", style=BlockStyle(text_align="center", font_size="14px"))]
    html = build_chat(ChatNowConfig().with_canvas_blocks(blocks))
    assert '<p class="custom-element custom-text" data-id="t1" style="font-size: 14px; text-align: center">Hello</p>' in html


def test_custom_checkbox_and_input() -> None:
    blocks = [
        CanvasBlock.custom("c1", "checkbox", label="Agree"),
        CanvasBlock.custom("i1", "input", label="Your email"),
        CanvasBlock.custom("h1", "title", label="Heading"),
    ]
    html = build_chat(ChatNowConfig().with_canvas_blocks(blocks))
    assert '<input type="checkbox" id="cb-c1">' in html
    assert '<label for="cb-c1">Agree</label>' in html
    assert 'class="custom-element custom-checkbox" data-id="c1"' in html
    assert '<input type="text" class="custom-element custom-input" data-id="i1" placeholder="Your email">' in html
    assert '<h2 class="custom-element custom-title" data-id="h1">Heading</h2>' in html


def test_image_block_without_svg_renders_nothing() -> None:
    blocks = [CanvasBlock.custom("img1", "image", label="Logo"), CanvasBlock.custom("img2", "image", svg_content="  ")]
    html = build_chat(ChatNowConfig().with_canvas_blocks(blocks))
    assert 'data-id="img1"' not in html
    assert 'data-id="img2"' not in html


def test_image_block_embeds_svg_verbatim() -> None:
    blocks = [CanvasBlock.custom("img1", "image", svg_content=SVG)]
    html = build_chat(ChatNowConfig().with_canvas_blocks(blocks))
    assert f'<div class="custom-element custom-image" data-id="img1">{SVG}</div>' in html


def test_unknown_template_field_is_skipped() -> None:
    blocks = [CanvasBlock(id="weird", is_template=True, template_field=None)]
    html = build_chat(ChatNowConfig().with_canvas_blocks(blocks))
    assert 'data-id="weird"' not in html


def test_script_contract() -> None:
    html = build_chat(ChatNowConfig())
    assert 'type: "chat_now"' in html
    assert '"template:onReady"' in html
    assert "}), 100);" in html
    assert 'action: "close_webview"' in html
    assert 'action: "chat_now", doNotShowAgain: cb ? cb.checked : false' in html
    assert 'action: "checkbox_changed"' in html


def test_width_reaches_stylesheet() -> None:
    html = build_chat({"width": 520})
    assert ".chat-dialog { width: 520px;" in html
