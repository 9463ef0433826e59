"""Editing operations over the chat dialog's ordered block list.

All functions take a sequence of :class:`CanvasBlock` and return a new tuple;
the input is never modified.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

from .models import CUSTOM_BLOCK_TYPES, BlockStyle, CanvasBlock

log = logging.getLogger(__name__)

Blocks = Tuple[CanvasBlock, ...]


def index_of(blocks: Sequence[CanvasBlock], block_id: str) -> int:
    for index, block in enumerate(blocks):
        if block.id == block_id:
            return index
    return -1


def _clamp_index(index: int, length: int) -> int:
    return max(0, min(index, length))


def insert_block(blocks: Sequence[CanvasBlock], block: CanvasBlock, index: Optional[int] = None) -> Blocks:
    """Insert ``block`` at ``index`` (appended when ``index`` is None)."""
    updated = list(blocks)
    if index is None:
        updated.append(block)
    else:
        updated.insert(_clamp_index(index, len(updated)), block)
    return tuple(updated)


def move_block(blocks: Sequence[CanvasBlock], block_id: str, zone_index: int) -> Blocks:
    """Move a block to the drop zone ``zone_index``.

    Drop zones sit between blocks: zone ``0`` is above the first block and
    zone ``len(blocks)`` below the last. Removing the block first shifts every
    later zone up by one, hence the adjustment when dropping below the source.
    """
    source = index_of(blocks, block_id)
    if source == -1:
        log.warning("Cannot move unknown block %r", block_id)
        return tuple(blocks)
    updated = list(blocks)
    moved = updated.pop(source)
    insert_at = zone_index if zone_index <= source else zone_index - 1
    updated.insert(_clamp_index(insert_at, len(updated)), moved)
    return tuple(updated)


def remove_block(blocks: Sequence[CanvasBlock], block_id: str) -> Blocks:
    return tuple(block for block in blocks if block.id != block_id)


def update_block(blocks: Sequence[CanvasBlock], block_id: str, **changes: Any) -> Blocks:
    """Replace fields on one block, e.g. ``update_block(blocks, "b1", label="Hi")``."""
    if index_of(blocks, block_id) == -1:
        log.warning("Cannot update unknown block %r", block_id)
        return tuple(blocks)
    return tuple(replace(block, **changes) if block.id == block_id else block for block in blocks)


def update_block_style(blocks: Sequence[CanvasBlock], block_id: str, **style_changes: Any) -> Blocks:
    """Merge style options into one block; ``None`` clears an option."""
    updated = []
    for block in blocks:
        if block.id == block_id:
            style = (block.style or BlockStyle()).merged(style_changes)
            block = replace(block, style=None if style.is_empty() else style)
        updated.append(block)
    return tuple(updated)


def block_from_component(component: Mapping[str, Any], block_id: Optional[str] = None) -> CanvasBlock:
    """Build a custom block from a component-library entry.

    Raises ``ValueError`` when the entry has no usable ``type``.
    """
    custom_type = component.get("type")
    if custom_type not in CUSTOM_BLOCK_TYPES:
        raise ValueError(f"Unsupported component type: {custom_type!r}")
    style = component.get("defaultStyle")
    return CanvasBlock.custom(
        block_id or f"{custom_type}-{int(time.time() * 1000)}",
        custom_type,
        label=component.get("label"),
        svg_content=component.get("svgContent"),
        style=BlockStyle.from_dict(style) if isinstance(style, Mapping) else None,
    )


def insert_from_payload(
    blocks: Sequence[CanvasBlock],
    payload: Union[str, bytes, Mapping[str, Any]],
    index: Optional[int] = None,
    block_id: Optional[str] = None,
) -> Blocks:
    """Insert a block described by a dropped component payload.

    A payload that is not valid JSON or not a supported component is logged
    and the blocks come back unchanged.
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as exc:
            log.warning("Drop failed: payload is not valid JSON (%s)", exc)
            return tuple(blocks)
    if not isinstance(payload, Mapping):
        log.warning("Drop failed: payload must be a JSON object, got %s", type(payload).__name__)
        return tuple(blocks)
    try:
        block = block_from_component(payload, block_id)
    except ValueError as exc:
        log.warning("Drop failed: %s", exc)
        return tuple(blocks)
    return insert_block(blocks, block, index)
