"""
Intermediate node tree — immutable snapshot of a styled element tree.

Box / Text / Icon nodes share one coordinate space whose origin is the
top-left corner of the captured root element.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, is_dataclass
from typing import ClassVar, Optional, Union


# ════════════════════════════════════════════════════════════
# Style records
# ════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Color:
    color: str
    opacity: float = 1.0


@dataclass(frozen=True)
class GradientStop:
    color: str
    opacity: float
    offset: float


@dataclass(frozen=True)
class SolidFill:
    kind: ClassVar[str] = "solid"
    color: str
    opacity: float = 1.0


@dataclass(frozen=True)
class LinearGradientFill:
    kind: ClassVar[str] = "linear-gradient"
    angle: float
    stops: tuple[GradientStop, ...]


Fill = Union[SolidFill, LinearGradientFill]


@dataclass(frozen=True)
class BorderSide:
    width: float
    color: str
    opacity: float
    style: str


DEFAULT_BORDER_SIDE = BorderSide(width=0, color="#000000", opacity=1, style="solid")


@dataclass(frozen=True)
class BorderSet:
    top: BorderSide = DEFAULT_BORDER_SIDE
    right: BorderSide = DEFAULT_BORDER_SIDE
    bottom: BorderSide = DEFAULT_BORDER_SIDE
    left: BorderSide = DEFAULT_BORDER_SIDE

    def sides(self) -> tuple[BorderSide, ...]:
        return (self.top, self.right, self.bottom, self.left)

    def is_uniform(self) -> bool:
        """四邊寬度、顏色、透明度都相同才算 uniform（可以用單一 stroke 表示）。"""
        first = self.top
        return all(
            side.width == first.width and side.color == first.color and side.opacity == first.opacity
            for side in self.sides()
        )


@dataclass(frozen=True)
class BorderRadius:
    top_left: float = 0
    top_right: float = 0
    bottom_right: float = 0
    bottom_left: float = 0

    def clamped(self, width: float, height: float) -> "BorderRadius":
        limit = max(min(width / 2, height / 2), 0)
        return BorderRadius(
            top_left=min(max(self.top_left, 0), limit),
            top_right=min(max(self.top_right, 0), limit),
            bottom_right=min(max(self.bottom_right, 0), limit),
            bottom_left=min(max(self.bottom_left, 0), limit),
        )


@dataclass(frozen=True)
class BoxShadow:
    inset: bool
    offset_x: float
    offset_y: float
    blur: float
    spread: float
    color: str
    opacity: float


@dataclass(frozen=True)
class TextPayload:
    content: str
    color: str
    opacity: float
    font_family: str
    font_size: float
    font_weight: str
    font_style: str
    letter_spacing: float
    line_height: float
    text_anchor: str  # "start" | "middle" | "end"


# ════════════════════════════════════════════════════════════
# Nodes
# ════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class _BaseNode:
    id: str
    tag_name: str
    x: float
    y: float
    width: float
    height: float
    opacity: float
    class_name: Optional[str]


@dataclass(frozen=True)
class BoxNode(_BaseNode):
    kind: ClassVar[str] = "box"
    background: Optional[Fill] = None
    border_radius: BorderRadius = field(default_factory=BorderRadius)
    borders: Optional[BorderSet] = None
    shadows: tuple[BoxShadow, ...] = ()
    overflow_hidden: bool = False
    children: tuple["Node", ...] = ()


@dataclass(frozen=True)
class TextNode(_BaseNode):
    kind: ClassVar[str] = "text"
    text: Optional[TextPayload] = None


@dataclass(frozen=True)
class IconNode(_BaseNode):
    kind: ClassVar[str] = "icon"
    icon_name: str = ""
    color: str = "#000000"
    svg_path: str = ""
    view_box: str = "0 0 24 24"


Node = Union[BoxNode, TextNode, IconNode]


# ════════════════════════════════════════════════════════════
# Export helpers
# ════════════════════════════════════════════════════════════

def _to_plain(value):
    if isinstance(value, tuple):
        return [_to_plain(v) for v in value]
    if is_dataclass(value):
        data = {}
        kind = getattr(type(value), "kind", None)
        if kind:
            data["kind"] = kind
        for f in fields(value):
            data[f.name] = _to_plain(getattr(value, f.name))
        return data
    return value


def node_to_dict(node: Node) -> dict:
    """把節點樹轉成可 json.dump 的 dict（含 kind 標籤）。"""
    return _to_plain(node)


def count_nodes(node: Optional[Node]) -> int:
    if node is None:
        return 0
    n = 1
    for child in getattr(node, "children", ()):
        n += count_nodes(child)
    return n


def preview_tree(node: Node, indent: int = 0) -> str:
    """產生縮排文字大綱，方便在終端機檢視擷取結果。"""
    pad = "  " * indent
    geometry = f"({node.x:.0f},{node.y:.0f} {node.width:.0f}×{node.height:.0f})"
    if isinstance(node, TextNode):
        label = f'"{node.text.content}"' if node.text else ""
        line = f"{pad}📝 {node.id} {geometry} {label}"
    elif isinstance(node, IconNode):
        line = f"{pad}🔣 {node.id} {geometry} [{node.icon_name}]"
    else:
        line = f"{pad}📦 {node.id} <{node.tag_name}> {geometry}"
    lines = [line]
    for child in getattr(node, "children", ()):
        lines.append(preview_tree(child, indent + 1))
    return "\n".join(lines)
