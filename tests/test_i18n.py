from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from cardbuilder.core.i18n import (
    format_message,
    lookup,
    merge_i18n,
    next_language,
    placeholders,
    translate,
)

I18N = {
    "en": {"title": "Removed: {programName}", "counter": "Live counter"},
    "uk": {"title": "Видалено: {programName}"},
}


def test_lookup_prefers_current_language() -> None:
    assert lookup(I18N, "uk", "title") == "Видалено: {programName}"


def test_lookup_falls_back_to_english_then_key() -> None:
    assert lookup(I18N, "uk", "counter") == "Live counter"
    assert lookup(I18N, "de", "counter") == "Live counter"
    assert lookup(I18N, "uk", "missing") == "missing"
    assert lookup({}, "en", "title") == "title"


def test_format_message_substitutes_and_blanks_unknown() -> None:
    payload = {"programName": "WinZip", "count": 12, "none": None}
    assert format_message("{programName} has {count} files", payload) == "WinZip has 12 files"
    assert format_message("x{unknown}y{none}z", payload) == "xyz"
    assert format_message("no tokens", payload) == "no tokens"


def test_format_message_matches_script_number_formatting() -> None:
    assert format_message("{n}", {"n": 27.0}) == "27"
    assert format_message("{flag}", {"flag": True}) == "true"


def test_format_message_stringifies_collections_like_the_script() -> None:
    assert format_message("{names}", {"names": ["a", "b", None, 3.0]}) == "a,b,,3"
    assert format_message("{nested}", {"nested": [["a"], ("b", "c")]}) == "a,b,c"
    assert format_message("{obj}", {"obj": {"k": 1}}) == "[object Object]"
    assert format_message("{empty}", {"empty": []}) == ""


def test_translate_combines_lookup_and_format() -> None:
    assert translate(I18N, "uk", "title", {"programName": "Adobe Reader"}) == "Видалено: Adobe Reader"


def test_merge_i18n_is_per_language() -> None:
    merged = merge_i18n(I18N, {"uk": {"counter": "Лічильник"}, "es": {"title": "Hola"}, "bad": "x"})
    assert merged["uk"] == {"title": "Видалено: {programName}", "counter": "Лічильник"}
    assert merged["es"] == {"title": "Hola"}
    assert "bad" not in merged
    assert "counter" not in I18N["uk"]


def test_next_language_cycles_in_dictionary_order() -> None:
    assert next_language(I18N, "en") == "uk"
    assert next_language(I18N, "uk") == "en"
    assert next_language(I18N, "zz") == "en"
    assert next_language({}, "en") == "en"


def test_placeholders_lists_tokens() -> None:
    assert placeholders("{a} and {b_c}") == ["a", "b_c"]
