from __future__ import annotations

import json
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from cardbuilder.core.canvas import (
    insert_block,
    insert_from_payload,
    move_block,
    remove_block,
    update_block,
    update_block_style,
)
from cardbuilder.core.models import DEFAULT_CANVAS_BLOCKS, CanvasBlock
from cardbuilder.core.presets import find_component


def _ids(blocks) -> list[str]:
    return [block.id for block in blocks]


ABCD = tuple(CanvasBlock.custom(name, "text", label=name) for name in "abcd")


def test_move_up_inserts_at_zone() -> None:
    assert _ids(move_block(ABCD, "c", 0)) == ["c", "a", "b", "d"]
    assert _ids(move_block(ABCD, "c", 2)) == ["a", "b", "c", "d"]


def test_move_down_accounts_for_removed_source() -> None:
    assert _ids(move_block(ABCD, "a", 2)) == ["b", "a", "c", "d"]
    assert _ids(move_block(ABCD, "a", 4)) == ["b", "c", "d", "a"]
    assert _ids(move_block(ABCD, "b", 3)) == ["a", "c", "b", "d"]


def test_move_unknown_block_is_a_no_op() -> None:
    assert move_block(ABCD, "zz", 0) == ABCD


def test_insert_and_remove() -> None:
    new = CanvasBlock.custom("x", "button", label="X")
    assert _ids(insert_block(ABCD, new, 1)) == ["a", "x", "b", "c", "d"]
    assert _ids(insert_block(ABCD, new)) == ["a", "b", "c", "d", "x"]
    assert _ids(insert_block(ABCD, new, 99)) == ["a", "b", "c", "d", "x"]
    assert _ids(remove_block(ABCD, "b")) == ["a", "c", "d"]
    assert len(ABCD) == 4


def test_update_block_and_style() -> None:
    blocks = update_block(ABCD, "a", label="Alpha")
    assert blocks[0].label == "Alpha"
    styled = update_block_style(blocks, "a", color="red", textAlign="center")
    assert styled[0].style.color == "red"
    assert styled[0].style.text_align == "center"
    cleared = update_block_style(styled, "a", color=None, text_align=None)
    assert cleared[0].style is None


def test_insert_from_library_payload() -> None:
    payload = json.dumps(find_component("btn-primary"))
    blocks = insert_from_payload(DEFAULT_CANVAS_BLOCKS, payload, 2, block_id="button-1")
    block = blocks[2]
    assert block.id == "button-1"
    assert not block.is_template
    assert block.custom_type == "button"
    assert block.label == "Primary Button"
    assert block.style.background == "#667eea"
    assert block.style.border_radius == "8px"


def test_insert_from_payload_generates_ids() -> None:
    blocks = insert_from_payload((), {"type": "text", "label": "P"})
    assert blocks[0].id.startswith("text-")


def test_malformed_payload_leaves_blocks_unchanged() -> None:
    for payload in ("{oops", "[]", json.dumps({"type": "video"}), json.dumps({"label": "no type"})):
        assert insert_from_payload(DEFAULT_CANVAS_BLOCKS, payload, 0) == DEFAULT_CANVAS_BLOCKS
