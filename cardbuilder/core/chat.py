"""Chat dialog compiler.

The content area is the ordered ``canvas_blocks`` list: template fields pull
their text from the config, custom blocks carry their own label and style.
A renderer returns ``None`` when its block has nothing to show (hidden
checkbox, image without SVG), and that block then contributes no markup.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Union

from markupsafe import Markup

from .models import CanvasBlock, ChatNowConfig
from .nodes import Element, Raw, fragment_of, h, void
from .styles import align_self, block_declarations
from .templates import render_template

log = logging.getLogger(__name__)

DOCUMENT_TITLE = "Chat Now"
TEMPLATE_TYPE = "chat_now"
CONTENT_PADDING = "30px 35px 25px 35px"
BLOCK_GAP = 18
SIZE_REPORT_DELAY_MS = 100

CLOSE_ICON = (
    '<svg viewBox="0 0 14 14" fill="none" xmlns="http://www.w3.org/2000/svg">'
    '<path d="M1 1L13 13M13 1L1 13" stroke="currentColor" stroke-width="2" stroke-linecap="round"/>'
    "</svg>"
)

BlockRenderer = Callable[[CanvasBlock, ChatNowConfig], Optional[Element]]


# -- template fields ------------------------------------------------------

def _template_title(block: CanvasBlock, config: ChatNowConfig) -> Element:
    return h("h1", Raw(config.main_title), class_="main-title", data_id=block.id, style=block_declarations(block.style))


def _template_description(block: CanvasBlock, config: ChatNowConfig) -> Element:
    return h("p", Raw(config.description), class_="description", data_id=block.id, style=block_declarations(block.style))


def _template_chatlink(block: CanvasBlock, config: ChatNowConfig) -> Element:
    # Alignment positions the wrapper; the link text itself is not re-aligned.
    alignment = align_self(block.style.text_align if block.style else None)
    return h(
        "div",
        h(
            "button",
            config.chat_link_text,
            class_="chat-link",
            id="chatButton",
            style=block_declarations(block.style, include_align=False),
        ),
        class_="chat-link-wrapper",
        data_id=block.id,
        style={"align-self": alignment},
    )


def _template_checkbox(block: CanvasBlock, config: ChatNowConfig) -> Optional[Element]:
    if not config.show_checkbox:
        return None
    return h(
        "div",
        void("input", type="checkbox", class_="checkbox", id="doNotShowAgain"),
        h(
            "label",
            config.checkbox_label,
            class_="checkbox-label",
            for_="doNotShowAgain",
            style=block_declarations(block.style),
        ),
        class_="checkbox-container",
        data_id=block.id,
    )


TEMPLATE_RENDERERS: Dict[str, BlockRenderer] = {
    "title": _template_title,
    "description": _template_description,
    "chatlink": _template_chatlink,
    "checkbox": _template_checkbox,
}


# -- custom blocks --------------------------------------------------------

def _custom_button(block: CanvasBlock, config: ChatNowConfig) -> Element:
    style = block_declarations(block.style, include_align=False)
    style["align-self"] = align_self(block.style.text_align if block.style else None, default="left")
    return h("button", block.label or "", class_="custom-element custom-button", data_id=block.id, style=style)


def _custom_text(block: CanvasBlock, config: ChatNowConfig) -> Element:
    return h("p", block.label or "", class_="custom-element custom-text", data_id=block.id, style=block_declarations(block.style))


def _custom_title(block: CanvasBlock, config: ChatNowConfig) -> Element:
    return h("h2", block.label or "", class_="custom-element custom-title", data_id=block.id, style=block_declarations(block.style))


def _custom_checkbox(block: CanvasBlock, config: ChatNowConfig) -> Element:
    input_id = f"cb-{block.id}"
    return h(
        "div",
        void("input", type="checkbox", id=input_id),
        h("label", block.label or "", for_=input_id, style=block_declarations(block.style)),
        class_="custom-element custom-checkbox",
        data_id=block.id,
    )


def _custom_input(block: CanvasBlock, config: ChatNowConfig) -> Element:
    return void(
        "input",
        type="text",
        class_="custom-element custom-input",
        data_id=block.id,
        placeholder=block.label or "",
        style=block_declarations(block.style),
    )


def _custom_image(block: CanvasBlock, config: ChatNowConfig) -> Optional[Element]:
    if not block.svg_content or not block.svg_content.strip():
        return None
    return h(
        "div",
        Raw(block.svg_content),
        class_="custom-element custom-image",
        data_id=block.id,
        style=block_declarations(block.style),
    )


CUSTOM_RENDERERS: Dict[str, BlockRenderer] = {
    "button": _custom_button,
    "text": _custom_text,
    "title": _custom_title,
    "checkbox": _custom_checkbox,
    "input": _custom_input,
    "image": _custom_image,
}


def render_block(block: CanvasBlock, config: ChatNowConfig) -> Optional[Element]:
    if block.is_template:
        renderer = TEMPLATE_RENDERERS.get(block.template_field or "")
    else:
        renderer = CUSTOM_RENDERERS.get(block.custom_type or "")
    if renderer is None:
        log.debug("No renderer for canvas block %r, skipping", block.id)
        return None
    return renderer(block, config)


def render_dialog(config: ChatNowConfig) -> Element:
    header = h(
        "div",
        h("p", config.header_text, class_="header-text"),
        h("button", Raw(CLOSE_ICON), class_="close-button", id="closeButton", aria_label="Close"),
        class_="header",
    )
    content = h(
        "div",
        fragment_of(render_block(block, config) for block in config.canvas_blocks),
        class_="content",
    )
    return h("div", header, content, class_="chat-dialog")


def render_styles(config: ChatNowConfig) -> str:
    return render_template(
        "chat.css.j2",
        width=config.width,
        header_bg=config.header_bg,
        content_bg=config.content_bg,
        # An image always wins; the flat color is then not emitted at all.
        bg_image=config.content_bg_image or None,
        content_padding=CONTENT_PADDING,
        block_gap=BLOCK_GAP,
    )


def render_script(config: ChatNowConfig) -> str:
    return render_template(
        "chat.js.j2",
        template_type=TEMPLATE_TYPE,
        size_report_delay=SIZE_REPORT_DELAY_MS,
    )


def build_chat(config: Union[ChatNowConfig, Mapping[str, Any], None] = None) -> str:
    """Compile a chat dialog document. Pure and deterministic."""
    if config is None:
        config = ChatNowConfig()
    elif not isinstance(config, ChatNowConfig):
        config = ChatNowConfig.from_dict(config)

    html = render_template(
        "chat.html",
        document_title=DOCUMENT_TITLE,
        styles=render_styles(config),
        body=Markup(render_dialog(config).render(level=2)),
        script=render_script(config),
    )
    log.debug("Compiled chat template: blocks=%d bytes=%d", len(config.canvas_blocks), len(html))
    return html


class ChatTemplateCompiler:
    """Stateless counterpart of :class:`NotificationTemplateCompiler`."""

    def build(self, config: Union[ChatNowConfig, Mapping[str, Any], None] = None) -> str:
        return build_chat(config)

    __call__ = build
