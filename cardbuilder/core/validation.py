"""Optional checks layered over the compilers.

The compilers accept any config. These helpers are for callers (the CLI,
the editor window) that want to reject obviously broken input first.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from .chat import build_chat
from .i18n import FALLBACK_LANG
from .models import ChatNowConfig, TemplateConfig
from .notification import build_notification

MAX_TITLE_LENGTH = 100
WIDTH_RANGE = (300, 1000)
HEIGHT_RANGE = (200, 800)


class TemplateValidationError(ValueError):
    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("Validation failed:\n" + "\n".join(self.errors))


@dataclass(slots=True)
class ValidationResult:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise TemplateValidationError(self.errors)


def _duplicates(values) -> list[str]:
    return sorted(value for value, count in Counter(values).items() if count > 1)


def validate_template_config(config: TemplateConfig) -> ValidationResult:
    result = ValidationResult()

    title = config.title or ""
    if not title.strip():
        result.errors.append("Title cannot be empty")
    elif len(title) > MAX_TITLE_LENGTH:
        result.errors.append(f"Title is too long (max {MAX_TITLE_LENGTH} characters)")

    low, high = WIDTH_RANGE
    if not low <= config.width <= high:
        result.errors.append(f"Width must be between {low} and {high}")
    low, high = HEIGHT_RANGE
    if not low <= config.min_height <= high:
        result.errors.append(f"Height must be between {low} and {high}")

    for dup in _duplicates(btn.id for btn in config.buttons):
        result.errors.append(f"Duplicate button id: {dup}")

    if FALLBACK_LANG not in config.i18n:
        result.warnings.append(f"No '{FALLBACK_LANG}' dictionary; missing keys will show as raw keys")
    if config.default_lang not in config.i18n:
        result.warnings.append(f"Default language '{config.default_lang}' has no dictionary")
    return result


def validate_chat_config(config: ChatNowConfig) -> ValidationResult:
    result = ValidationResult()
    for dup in _duplicates(block.id for block in config.canvas_blocks):
        result.errors.append(f"Duplicate block id: {dup}")
    fields = (block.template_field for block in config.canvas_blocks if block.is_template and block.template_field)
    for dup in _duplicates(fields):
        result.warnings.append(f"Template field {dup!r} appears more than once; its element ids will repeat")
    for block in config.canvas_blocks:
        if block.is_template and not block.template_field:
            result.errors.append(f"Template block {block.id!r} has no template field")
        elif not block.is_template and not block.custom_type:
            result.errors.append(f"Custom block {block.id!r} has no custom type")
        if not block.is_template and block.custom_type == "image" and not (block.svg_content or "").strip():
            result.warnings.append(f"Image block {block.id!r} has no SVG content and will not render")
    return result


def build_validated(config: Union[TemplateConfig, ChatNowConfig, Mapping[str, Any]]) -> str:
    """Validate, then compile. Raises :class:`TemplateValidationError` on errors.

    A plain mapping is treated as a notification config.
    """
    if isinstance(config, ChatNowConfig):
        validate_chat_config(config).raise_for_errors()
        return build_chat(config)
    if not isinstance(config, TemplateConfig):
        config = TemplateConfig.from_dict(config)
    validate_template_config(config).raise_for_errors()
    return build_notification(config)
