"""A tiny document-fragment tree used by the compilers.

Renderers return nodes (or ``None`` to contribute nothing) instead of strings,
so omitted blocks cannot leave empty wrappers behind and attribute values are
always escaped in one place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional, Union

from markupsafe import Markup, escape

from .styles import declarations

INDENT = "  "

AttrValue = Union[str, int, float, bool, None, Mapping[str, object]]


class Node:
    def render(self, level: int = 0) -> str:
        raise NotImplementedError

    def is_empty(self) -> bool:
        return False

    def __html__(self) -> str:
        return self.render()


@dataclass
class Text(Node):
    """Escaped text content."""

    value: str

    def render(self, level: int = 0) -> str:
        return str(escape(self.value))

    def is_empty(self) -> bool:
        return self.value == ""


@dataclass
class Raw(Node):
    """Trusted markup, emitted verbatim (inline SVG, titles with <br>)."""

    markup: str

    def render(self, level: int = 0) -> str:
        return str(Markup(self.markup))

    def is_empty(self) -> bool:
        return not self.markup.strip()


Child = Union[Node, str, None]


def _coerce(children: Iterable[Child]) -> List[Node]:
    nodes: List[Node] = []
    for child in children:
        if child is None:
            continue
        node = Text(child) if isinstance(child, str) else child
        if node.is_empty():
            continue
        nodes.append(node)
    return nodes


def _attr_name(name: str) -> str:
    name = name.rstrip("_")
    return name.replace("_", "-")


def render_attrs(attrs: Mapping[str, AttrValue]) -> str:
    parts: List[str] = []
    for name, value in attrs.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(f" {name}")
            continue
        if isinstance(value, Mapping):
            value = declarations(value)
            if not value:
                continue
        parts.append(f' {name}="{escape(_format_value(value))}"')
    return "".join(parts)


def _format_value(value: object) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass
class Element(Node):
    tag: str
    attrs: dict = field(default_factory=dict)
    children: List[Node] = field(default_factory=list)
    void: bool = False

    def render(self, level: int = 0) -> str:
        open_tag = f"<{self.tag}{render_attrs(self.attrs)}>"
        if self.void:
            return open_tag
        if not any(isinstance(child, (Element, Fragment)) for child in self.children):
            inner = "".join(child.render() for child in self.children)
            return f"{open_tag}{inner}</{self.tag}>"
        pad = INDENT * (level + 1)
        lines = [open_tag]
        for child in self.children:
            lines.append(pad + child.render(level + 1))
        lines.append(INDENT * level + f"</{self.tag}>")
        return "\n".join(lines)


@dataclass
class Fragment(Node):
    """An ordered group of sibling nodes with no wrapper of its own."""

    children: List[Node] = field(default_factory=list)

    def render(self, level: int = 0) -> str:
        pad = "\n" + INDENT * level
        return pad.join(child.render(level) for child in self.children)

    def is_empty(self) -> bool:
        return not self.children


def h(tag: str, *children: Child, **attrs: AttrValue) -> Element:
    """Build an element; ``class_`` becomes ``class`` and ``data_x`` becomes ``data-x``."""
    return Element(tag=tag, attrs={_attr_name(k): v for k, v in attrs.items()}, children=_coerce(children))


def void(tag: str, **attrs: AttrValue) -> Element:
    return Element(tag=tag, attrs={_attr_name(k): v for k, v in attrs.items()}, void=True)


def fragment(*children: Child) -> Fragment:
    return Fragment(children=_coerce(children))


def fragment_of(children: Iterable[Child]) -> Fragment:
    return Fragment(children=_coerce(children))


def render(node: Optional[Node], level: int = 0) -> str:
    if node is None or node.is_empty():
        return ""
    return node.render(level)
