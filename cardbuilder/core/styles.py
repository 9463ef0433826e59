"""Shared styling helpers for both compilers."""

from __future__ import annotations

import re
from typing import Dict, Mapping, Optional

from .models import BLOCK_STYLE_FIELDS, BlockStyle

_UNSAFE_CSS = re.compile(r"[<>{};\r\n\x00]")

ALIGN_SELF: Dict[str, str] = {
    "left": "flex-start",
    "center": "center",
    "right": "flex-end",
}


def css_value(value: object) -> str:
    """Make a value safe to drop into a declaration (no new rules, no tag close)."""
    return _UNSAFE_CSS.sub("", str(value)).strip()


def css_url(url: str) -> str:
    cleaned = str(url).replace("\\", "\\\\").replace('"', '\\"')
    cleaned = cleaned.replace("<", "%3C").replace(">", "%3E")
    cleaned = re.sub(r"[\r\n\x00]", "", cleaned)
    return f'url("{cleaned}")'


def px(value: object) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value}px"


def declarations(props: Mapping[str, object]) -> str:
    """Serialize ``{property: value}`` as ``a: b; c: d``, skipping empty values."""
    parts = []
    for prop, value in props.items():
        if value is None or value == "":
            continue
        cleaned = css_value(value)
        if cleaned:
            parts.append(f"{prop}: {cleaned}")
    return "; ".join(parts)


def align_self(text_align: Optional[str], default: Optional[str] = None) -> Optional[str]:
    """Map left/center/right to flex self-alignment.

    Used by every block renderer so template and custom blocks line up the
    same way.
    """
    if text_align in ALIGN_SELF:
        return ALIGN_SELF[text_align]
    if default is not None:
        return ALIGN_SELF.get(default)
    return None


def block_declarations(style: Optional[BlockStyle], include_align: bool = True) -> Dict[str, str]:
    """CSS properties for a block style, in declaration order."""
    if style is None:
        return {}
    props: Dict[str, str] = {}
    for name, (_json_key, css_prop) in BLOCK_STYLE_FIELDS.items():
        if name == "text_align" and not include_align:
            continue
        value = getattr(style, name)
        if value not in (None, ""):
            props[css_prop] = value
    return props
