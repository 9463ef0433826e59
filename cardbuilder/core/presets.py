"""Ready-made configurations for both template families."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping

from .models import ButtonConfig, ChatNowConfig, TemplateConfig


# ---------------------------------------------------------------------------
# Notification presets
# ---------------------------------------------------------------------------

def _light() -> TemplateConfig:
    return TemplateConfig()


def _dark() -> TemplateConfig:
    return TemplateConfig().with_colors(
        {
            "background": "transparent",
            "cardBackground": "#1a1a1a",
            "textColor": "#ffffff",
            "subtitleColor": "#cccccc",
            "borderColor": "#333333",
            "buttonBg": "#2a2a2a",
            "buttonBorder": "#444444",
            "badgeBg": "#2a2a2a",
            "debugBg": "#0a0a0a",
        }
    )


def _minimal() -> TemplateConfig:
    return (
        TemplateConfig()
        .with_debug_area(False)
        .with_buttons([ButtonConfig(id="cta", label="OK", action="cta_click")])
        .with_badge(show=False)
    )


def _compact() -> TemplateConfig:
    return TemplateConfig().with_dimensions(350, 300).with_debug_area(False)


def _modern() -> TemplateConfig:
    return (
        TemplateConfig()
        .with_dimensions(500, 400)
        .with_colors(
            {
                "cardBackground": "linear-gradient(135deg, #667eea 0%, #764ba2 100%)",
                "textColor": "#ffffff",
                "subtitleColor": "rgba(255, 255, 255, 0.8)",
                "borderColor": "rgba(255, 255, 255, 0.2)",
                "buttonBg": "rgba(255, 255, 255, 0.2)",
                "buttonBorder": "rgba(255, 255, 255, 0.3)",
                "badgeBg": "rgba(255, 255, 255, 0.2)",
            }
        )
        .with_debug_area(False)
    )


def _corporate() -> TemplateConfig:
    return (
        TemplateConfig()
        .with_colors(
            {
                "cardBackground": "#ffffff",
                "borderColor": "#0066cc",
                "textColor": "#003366",
                "subtitleColor": "#666666",
                "buttonBg": "#0066cc",
                "buttonBorder": "#0066cc",
            }
        )
        .with_buttons(
            [
                ButtonConfig(id="confirm", label="Confirm", action="confirm"),
                ButtonConfig(id="cancel", label="Cancel", action="cancel"),
            ]
        )
        .with_debug_area(False)
    )


def _minimalist() -> TemplateConfig:
    return _minimal().with_dimensions(400, 250).with_colors(
        {"cardBackground": "#fafafa", "borderColor": "#e0e0e0"}
    )


def _gaming() -> TemplateConfig:
    return (
        TemplateConfig()
        .with_colors(
            {
                "background": "transparent",
                "cardBackground": "#1a1a2e",
                "textColor": "#eee",
                "subtitleColor": "#16213e",
                "borderColor": "#0f3460",
                "buttonBg": "#e94560",
                "buttonBorder": "#e94560",
                "badgeBg": "#0f3460",
                "dotColorActive": "#00ff88",
            }
        )
        .with_debug_area(False)
    )


def _eco() -> TemplateConfig:
    return (
        TemplateConfig()
        .with_colors(
            {
                "cardBackground": "#e8f5e9",
                "borderColor": "#4caf50",
                "textColor": "#1b5e20",
                "subtitleColor": "#2e7d32",
                "buttonBg": "#66bb6a",
                "buttonBorder": "#4caf50",
                "badgeBg": "#c8e6c9",
                "dotColorActive": "#4caf50",
            }
        )
        .with_debug_area(False)
    )


NOTIFICATION_THEMES: Dict[str, Dict[str, str]] = {
    "success": {
        "cardBackground": "#d4edda",
        "borderColor": "#28a745",
        "textColor": "#155724",
        "subtitleColor": "#155724",
        "buttonBg": "#c3e6cb",
        "buttonBorder": "#28a745",
    },
    "error": {
        "cardBackground": "#f8d7da",
        "borderColor": "#dc3545",
        "textColor": "#721c24",
        "subtitleColor": "#721c24",
        "buttonBg": "#f5c6cb",
        "buttonBorder": "#dc3545",
    },
    "warning": {
        "cardBackground": "#fff3cd",
        "borderColor": "#ffc107",
        "textColor": "#856404",
        "subtitleColor": "#856404",
        "buttonBg": "#ffeeba",
        "buttonBorder": "#ffc107",
    },
    "info": {
        "cardBackground": "#d1ecf1",
        "borderColor": "#17a2b8",
        "textColor": "#0c5460",
        "subtitleColor": "#0c5460",
        "buttonBg": "#bee5eb",
        "buttonBorder": "#17a2b8",
    },
}

SCREEN_SIZES: Dict[str, tuple] = {
    "mobile": (320, 300),
    "tablet": (450, 400),
    "desktop": (600, 500),
}


def create_notification(kind: str, title: str, subtitle: str) -> TemplateConfig:
    """A themed single-button alert: no badge, no debug area, one OK button."""
    try:
        colors = NOTIFICATION_THEMES[kind]
    except KeyError:
        raise KeyError(f"Unknown notification kind: {kind!r}") from None
    return (
        TemplateConfig()
        .with_title(title)
        .with_subtitle(subtitle)
        .with_colors(colors)
        .with_buttons([ButtonConfig(id="ok", label="OK", action="confirm")])
        .with_badge(show=False)
        .with_debug_area(False)
    )


def _themed(kind: str) -> Callable[[], TemplateConfig]:
    def factory() -> TemplateConfig:
        base = TemplateConfig()
        return create_notification(kind, base.title, base.subtitle)

    return factory


def _sized(screen: str) -> Callable[[], TemplateConfig]:
    def factory() -> TemplateConfig:
        width, min_height = SCREEN_SIZES[screen]
        return TemplateConfig().with_dimensions(width, min_height)

    return factory


NOTIFICATION_PRESETS: Dict[str, Callable[[], TemplateConfig]] = {
    "default": _light,
    "light": _light,
    "dark": _dark,
    "minimal": _minimal,
    "compact": _compact,
    "modern": _modern,
    "corporate": _corporate,
    "minimalist": _minimalist,
    "gaming": _gaming,
    "eco": _eco,
    **{kind: _themed(kind) for kind in NOTIFICATION_THEMES},
    **{screen: _sized(screen) for screen in SCREEN_SIZES},
}


def notification_preset_names() -> List[str]:
    return list(NOTIFICATION_PRESETS)


def notification_preset(name: str) -> TemplateConfig:
    try:
        factory = NOTIFICATION_PRESETS[name]
    except KeyError:
        raise KeyError(f"Unknown notification preset: {name!r}") from None
    return factory()


def assemble_notification(preset: str = "default", **edits: Any) -> TemplateConfig:
    """Start from a preset and apply ``with_<name>`` edits in keyword order.

    ``assemble_notification("dark", title="Hi", badge={"show": False})``
    """
    config = notification_preset(preset)
    for name, value in edits.items():
        method = getattr(config, f"with_{name}", None)
        if method is None:
            raise TypeError(f"Unknown notification edit: {name!r}")
        if isinstance(value, Mapping) and name == "badge":
            config = method(**value)
        elif isinstance(value, tuple) and name in ("dimensions", "danger_threshold"):
            config = method(*value)
        else:
            config = method(value)
    return config


# ---------------------------------------------------------------------------
# Chat dialog presets
# ---------------------------------------------------------------------------

CHAT_LANGUAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "flag": "\U0001F1FA\U0001F1F8",
        "name": "EN",
        "main_title": "Still having performance problems<br>with your computer?",
        "description": "Our agents are standing by. Chat with us now to see how we<br>can help resolve your PC issues.",
        "chat_link_text": "CHAT NOW",
        "checkbox_label": "Do not show this window again",
    },
    "ja": {
        "flag": "\U0001F1EF\U0001F1F5",
        "name": "JP",
        "main_title": "まだコンピューターのパフォーマンスに<br>問題がありますか？",
        "description": "エージェントが待機中です。今すぐチャットして<br>PC の問題を解決しましょう。",
        "chat_link_text": "今すぐチャット",
        "checkbox_label": "このウィンドウを再表示しない",
    },
    "zh": {
        "flag": "\U0001F1E8\U0001F1F3",
        "name": "ZH",
        "main_title": "您的计算机仍有<br>性能问题吗？",
        "description": "我们的代理随时为您服务。立即聊天<br>了解我们如何解决您的电脑问题。",
        "chat_link_text": "立即聊天",
        "checkbox_label": "不再显示此窗口",
    },
    "fr": {
        "flag": "\U0001F1EB\U0001F1F7",
        "name": "FR",
        "main_title": "Vous avez encore des problèmes de<br>performance sur votre PC ?",
        "description": "Nos agents sont disponibles. Chattez maintenant<br>pour résoudre vos problèmes informatiques.",
        "chat_link_text": "DISCUTER MAINTENANT",
        "checkbox_label": "Ne plus afficher cette fenêtre",
    },
}

_CHAT_TEXT_FIELDS = ("main_title", "description", "chat_link_text", "checkbox_label")


def apply_chat_language(config: ChatNowConfig, lang: str) -> ChatNowConfig:
    """Replace the dialog texts with a language preset; unknown codes raise ``KeyError``."""
    try:
        preset = CHAT_LANGUAGES[lang]
    except KeyError:
        raise KeyError(f"Unknown chat language: {lang!r}") from None
    return config.with_texts(**{name: preset[name] for name in _CHAT_TEXT_FIELDS})


def assemble_chat(lang: str = "en", **edits: Any) -> ChatNowConfig:
    """Language preset plus edits.

    Text fields go through ``with_texts``; ``background_color``,
    ``background_image``, ``checkbox`` and ``canvas_blocks`` map to the
    matching ``with_*`` helpers.
    """
    config = apply_chat_language(ChatNowConfig(), lang)
    texts = {name: edits.pop(name) for name in list(edits) if name in _CHAT_TEXT_FIELDS or name == "header_text"}
    if texts:
        config = config.with_texts(**texts)
    for name, value in edits.items():
        method = getattr(config, f"with_{name}", None)
        if method is None:
            raise TypeError(f"Unknown chat edit: {name!r}")
        config = method(value)
    return config


# ---------------------------------------------------------------------------
# Component library
# ---------------------------------------------------------------------------

COMPONENT_LIBRARY: List[Dict[str, Any]] = [
    {
        "id": "btn-primary",
        "type": "button",
        "label": "Primary Button",
        "defaultStyle": {
            "background": "#667eea",
            "color": "white",
            "padding": "12px 24px",
            "borderRadius": "8px",
            "border": "none",
            "fontSize": "14px",
        },
    },
    {
        "id": "btn-secondary",
        "type": "button",
        "label": "Secondary Button",
        "defaultStyle": {
            "background": "white",
            "color": "#667eea",
            "padding": "12px 24px",
            "borderRadius": "8px",
            "border": "2px solid #667eea",
            "fontSize": "14px",
        },
    },
    {
        "id": "btn-success",
        "type": "button",
        "label": "Success Button",
        "defaultStyle": {
            "background": "#10b981",
            "color": "white",
            "padding": "12px 24px",
            "borderRadius": "8px",
            "border": "none",
            "fontSize": "14px",
        },
    },
    {
        "id": "btn-danger",
        "type": "button",
        "label": "Danger Button",
        "defaultStyle": {
            "background": "#ef4444",
            "color": "white",
            "padding": "12px 24px",
            "borderRadius": "8px",
            "border": "none",
            "fontSize": "14px",
        },
    },
    {
        "id": "btn-link",
        "type": "button",
        "label": "Link Button",
        "defaultStyle": {
            "background": "transparent",
            "color": "#0111e0",
            "padding": "8px 16px",
            "borderRadius": "4px",
            "border": "none",
            "fontSize": "16px",
        },
    },
    {
        "id": "text-heading",
        "type": "title",
        "label": "Heading",
        "defaultStyle": {"fontSize": "24px", "color": "#1a1a1a", "padding": "0"},
    },
    {
        "id": "text-paragraph",
        "type": "text",
        "label": "Paragraph",
        "defaultStyle": {"fontSize": "14px", "color": "#4b5563", "padding": "0"},
    },
    {
        "id": "checkbox",
        "type": "checkbox",
        "label": "Checkbox",
        "defaultStyle": {"fontSize": "13px", "color": "#374151"},
    },
    {
        "id": "input-text",
        "type": "input",
        "label": "Text Input",
        "defaultStyle": {
            "padding": "10px 14px",
            "borderRadius": "8px",
            "border": "1px solid #d1d5db",
            "fontSize": "14px",
        },
    },
]


def find_component(component_id: str) -> Dict[str, Any]:
    for component in COMPONENT_LIBRARY:
        if component["id"] == component_id:
            return dict(component)
    raise KeyError(f"Unknown component: {component_id!r}")


def search_components(term: str) -> List[Dict[str, Any]]:
    """Case-insensitive match on label or type, like the library's search box."""
    needle = term.lower()
    return [c for c in COMPONENT_LIBRARY if needle in c["label"].lower() or needle in c["type"].lower()]
