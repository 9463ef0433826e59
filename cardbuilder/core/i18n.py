"""Localization helpers.

These mirror what the emitted card script does at runtime so the host side
(validation, the preview window, tests) can resolve strings the same way:
current language, then ``en``, then the key itself.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional

FALLBACK_LANG = "en"
PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")

I18nDictionary = Dict[str, Dict[str, str]]


def lookup(i18n: Mapping[str, Mapping[str, Any]], lang: str, key: str) -> str:
    """Resolve ``key`` for ``lang``. Never raises."""
    for candidate in (lang, FALLBACK_LANG):
        table = i18n.get(candidate)
        if isinstance(table, Mapping) and table.get(key) is not None:
            return str(table[key])
    return key


def _js_string(value: Any) -> str:
    """Stringify ``value`` the way the card script's ``String(value)`` does."""
    if value is None:
        return ""
    if isinstance(value, Mapping):
        return "[object Object]"
    if isinstance(value, (list, tuple)):
        return ",".join(_js_string(item) for item in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_message(template: str, payload: Mapping[str, Any]) -> str:
    """Replace ``{name}`` tokens with payload values; unknown tokens become ''."""

    def _sub(match: "re.Match[str]") -> str:
        value = payload.get(match.group(1))
        return "" if value is None else _js_string(value)

    return PLACEHOLDER_RE.sub(_sub, str(template))


def translate(
    i18n: Mapping[str, Mapping[str, Any]],
    lang: str,
    key: str,
    payload: Optional[Mapping[str, Any]] = None,
) -> str:
    return format_message(lookup(i18n, lang, key), payload or {})


def merge_i18n(base: Mapping[str, Mapping[str, str]], incoming: Any) -> I18nDictionary:
    """Per-language merge; later keys win. Non-dict entries are skipped."""
    merged: I18nDictionary = {lang: dict(table) for lang, table in base.items()}
    if not isinstance(incoming, Mapping):
        return merged
    for lang, table in incoming.items():
        if not isinstance(table, Mapping):
            continue
        merged[lang] = {**merged.get(lang, {}), **table}
    return merged


def next_language(i18n: Mapping[str, Any], current: str) -> str:
    """Language after ``current`` in dictionary order, wrapping around."""
    order: List[str] = list(i18n.keys())
    if not order:
        return current
    try:
        idx = order.index(current)
    except ValueError:
        idx = -1
    return order[(idx + 1) % len(order)]


def placeholders(template: str) -> List[str]:
    return PLACEHOLDER_RE.findall(str(template))
