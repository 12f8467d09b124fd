"""
Tree snapshotter — styled element tree → immutable Box/Text/Icon node tree.

座標一律相對於 root 左上角（攤平成單一座標系），emitter 因此不需要堆疊 transform。
"""

from typing import Optional

from .dom import DomElement, DomText, Rect
from .icons import GLYPHS, ICON_CLASS, lookup_glyph
from .nodes import BoxNode, IconNode, Node, TextNode, TextPayload
from .segmenter import anchor_x, baseline_y, collapse_whitespace, split_visual_lines
from .styles import (
    is_overflow_clipped,
    is_renderable,
    normalize_font_weight,
    parse_border_radius,
    parse_borders,
    parse_box_shadows,
    parse_color,
    parse_fill,
    parse_font_shorthand,
    parse_line_height,
    parse_opacity,
    parse_px,
    sanitize_font_family,
    to_text_anchor,
)

IGNORED_TAGS = frozenset({"script", "style", "meta", "title", "link", "noscript"})


def _warn(msg: str) -> None:
    print(f"   ⚠️  [snapshot] {msg}")


class Snapshotter:

    def __init__(
        self,
        icon_table: Optional[dict] = None,
        icon_class: str = ICON_CLASS,
        ignored_tags=IGNORED_TAGS,
    ):
        self.icon_table = GLYPHS if icon_table is None else icon_table
        self.icon_class = icon_class
        self.ignored_tags = frozenset(t.lower() for t in ignored_tags)
        self.warnings: list[str] = []
        self._node_count = 0
        self._origin = Rect(0, 0, 0, 0)

    def snapshot(self, root: DomElement, allow_hidden: bool = True) -> Optional[Node]:
        """擷取整棵樹；root 不論可見性都會被擷取，allow_hidden 決定子孫是否也略過可見性檢查。"""
        self.warnings = []
        self._node_count = 0
        self._origin = root.rect
        return self._capture(root, allow_hidden, is_root=True)

    def _next_id(self, prefix: str) -> str:
        node_id = f"{prefix}-{self._node_count}"
        self._node_count += 1
        return node_id

    # ════════════════════════════════════════════════════════════
    # Elements
    # ════════════════════════════════════════════════════════════

    def _capture(self, element: DomElement, allow_hidden: bool, is_root: bool = False) -> Optional[Node]:
        rect = element.rect
        if rect is None or rect.is_empty:
            return None

        style = element.style
        if not (is_root or allow_hidden) and not is_renderable(style):
            return None

        if self.icon_class and self.icon_class in element.class_list:
            return self._capture_icon(element)

        node_id = element.element_id or self._next_id(element.tag_name)
        x, y = self._relative(rect)

        children: list[Node] = list(self._collect_text(element))
        for child in element.children:
            if child.tag_name in self.ignored_tags:
                continue
            child_node = self._capture(child, allow_hidden)
            if child_node:
                children.append(child_node)

        return BoxNode(
            id=node_id,
            tag_name=element.tag_name,
            x=x,
            y=y,
            width=rect.width,
            height=rect.height,
            opacity=parse_opacity(style.get("opacity")),
            class_name=element.class_name or None,
            background=parse_fill(style),
            border_radius=parse_border_radius(style),
            borders=parse_borders(style),
            shadows=tuple(parse_box_shadows(style.get("box-shadow"))),
            overflow_hidden=is_overflow_clipped(style),
            children=tuple(children),
        )

    def _capture_icon(self, element: DomElement) -> Optional[IconNode]:
        icon_name = element.text_content.strip()
        glyph = lookup_glyph(icon_name, self.icon_table)
        if glyph is None:
            message = f'Material Symbol icon "{icon_name}" not found in mapping'
            self.warnings.append(message)
            _warn(message)
            return None

        rect = element.rect
        x, y = self._relative(rect)
        return IconNode(
            id=self._next_id("icon"),
            tag_name=element.tag_name,
            x=x,
            y=y,
            width=rect.width,
            height=rect.height,
            opacity=parse_opacity(element.style.get("opacity")),
            class_name=element.class_name or None,
            icon_name=icon_name,
            color=parse_color(element.style.get("color")).color,
            svg_path=glyph.path,
            view_box=glyph.view_box,
        )

    # ════════════════════════════════════════════════════════════
    # Text
    # ════════════════════════════════════════════════════════════

    def _collect_text(self, element: DomElement):
        style = element.style
        runs = [c for c in element.child_nodes if isinstance(c, DomText) and collapse_whitespace(c.text)]
        if not runs:
            return

        shorthand = parse_font_shorthand(style.get("font"))
        font_size = parse_px(style.get("font-size"), shorthand.size)
        color = parse_color(style.get("color"))
        letter_spacing = style.get("letter-spacing")
        text_anchor = to_text_anchor(style.get("text-align"))
        opacity = parse_opacity(style.get("opacity"))
        font_family = style.get("font-family")

        for run in runs:
            for line in split_visual_lines(run):
                yield TextNode(
                    id=self._next_id("text"),
                    tag_name=element.tag_name,
                    x=anchor_x(line.rect, text_anchor) - self._origin.left,
                    y=baseline_y(line.rect, font_size) - self._origin.top,
                    width=line.rect.width,
                    height=line.rect.height,
                    opacity=opacity,
                    class_name=element.class_name or None,
                    text=TextPayload(
                        content=line.text,
                        color=color.color,
                        opacity=color.opacity,
                        font_family=sanitize_font_family(font_family) if font_family else shorthand.family,
                        font_size=font_size,
                        font_weight=normalize_font_weight(style.get("font-weight") or shorthand.weight),
                        font_style=style.get("font-style") or shorthand.style,
                        letter_spacing=0.0 if letter_spacing in (None, "", "normal") else parse_px(letter_spacing, 0),
                        line_height=parse_line_height(style.get("line-height") or shorthand.line_height, font_size),
                        text_anchor=text_anchor,
                    ),
                )

    def _relative(self, rect: Rect) -> tuple[float, float]:
        return rect.left - self._origin.left, rect.top - self._origin.top
