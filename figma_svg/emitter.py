"""
Document emitter — node tree → SVG markup.

Shared resources (gradients, drop-shadow filters, clip paths) are
registered on a RenderContext while rendering and written into a single
<defs> block ahead of the content, in registration order.
"""

from dataclasses import dataclass, field
from typing import Optional

from .geometry import format_number, format_percentage, gradient_vector, rounded_rect_path
from .icons import view_box_size
from .nodes import (
    BorderSet,
    BoxNode,
    BoxShadow,
    Fill,
    IconNode,
    LinearGradientFill,
    Node,
    SolidFill,
    TextNode,
)
from .styles import normalize_font_weight

SVG_NS = "http://www.w3.org/2000/svg"


@dataclass
class RenderContext:
    """單次轉換專用：累積 defs 與各類 id 計數器，轉換完即丟棄。"""
    defs: list = field(default_factory=list)
    gradient_index: int = 0
    filter_index: int = 0
    clip_index: int = 0


# ════════════════════════════════════════════════════════════
# Escaping
# ════════════════════════════════════════════════════════════

def escape_text(value: str) -> str:
    return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_attribute(value: str) -> str:
    return escape_text(str(value)).replace('"', "&quot;")


# ════════════════════════════════════════════════════════════
# Dispatch
# ════════════════════════════════════════════════════════════

def render_node(node: Node, context: RenderContext) -> str:
    if isinstance(node, BoxNode):
        return render_box_node(node, context)
    if isinstance(node, TextNode):
        return render_text_node(node)
    if isinstance(node, IconNode):
        return render_icon_node(node)
    raise TypeError(f"Unsupported node type: {type(node).__name__}")


def _common_attrs(node: Node) -> str:
    class_attr = f' class="{escape_attribute(node.class_name)}"' if node.class_name else ""
    return f'{class_attr} data-tag="{escape_attribute(node.tag_name)}"'


def render_box_node(node: BoxNode, context: RenderContext) -> str:
    path = rounded_rect_path(node.x, node.y, node.width, node.height, node.border_radius)
    fill = resolve_fill(node.background, context)
    stroke = resolve_stroke(node.borders)
    filter_id = resolve_shadows(node.shadows, context)
    clip_id = ensure_clip_path(node, context) if node.overflow_hidden else None

    opacity_attr = f' opacity="{format_number(node.opacity)}"' if node.opacity != 1 else ""
    clip_attr = f' clip-path="url(#{clip_id})"' if clip_id else ""
    stroke_attr = f" {stroke}" if stroke else ""
    filter_attr = f' filter="url(#{filter_id})"' if filter_id else ""
    # shape 也帶 class，讓 class selector 能直接作用在幾何上
    shape_class = f' class="{escape_attribute(node.class_name)}"' if node.class_name else ""

    children = "".join(render_node(child, context) for child in node.children)
    return (
        f"<g{opacity_attr}{_common_attrs(node)}{clip_attr}>"
        f'<path d="{path}" fill="{escape_attribute(fill)}"{stroke_attr}{filter_attr}{shape_class} />'
        f"{children}</g>"
    )


def render_text_node(node: TextNode) -> str:
    text = node.text
    if text is None:
        return ""
    combined = node.opacity * text.opacity
    opacity_attr = f' fill-opacity="{format_number(combined)}"' if combined != 1 else ""
    spacing_attr = f' letter-spacing="{format_number(text.letter_spacing)}"' if text.letter_spacing else ""
    return (
        f'<text x="{format_number(node.x)}" y="{format_number(node.y)}"'
        f' font-family="{escape_attribute(text.font_family)}"'
        f' font-size="{format_number(text.font_size)}"'
        f' font-weight="{escape_attribute(normalize_font_weight(text.font_weight))}"'
        f' font-style="{escape_attribute(text.font_style)}"'
        f' text-anchor="{text.text_anchor}" dominant-baseline="alphabetic" xml:space="preserve"'
        f' fill="{escape_attribute(text.color)}"{opacity_attr}{spacing_attr}{_common_attrs(node)}>'
        f"{escape_text(text.content)}</text>"
    )


def render_icon_node(node: IconNode) -> str:
    view_width, view_height = view_box_size(node.view_box)
    scale = min(node.width / view_width, node.height / view_height)
    offset_x = node.x + (node.width - view_width * scale) / 2
    offset_y = node.y + (node.height - view_height * scale) / 2

    opacity_attr = f' opacity="{format_number(node.opacity)}"' if node.opacity != 1 else ""
    return (
        f'<g transform="translate({format_number(offset_x)},{format_number(offset_y)})'
        f' scale({format_number(scale)})"{opacity_attr}{_common_attrs(node)}'
        f' data-icon="{escape_attribute(node.icon_name)}">'
        f'<path d="{escape_attribute(node.svg_path)}" fill="{escape_attribute(node.color)}"/></g>'
    )


# ════════════════════════════════════════════════════════════
# Paint resolution
# ════════════════════════════════════════════════════════════

def apply_alpha(hex_color: str, alpha: float) -> str:
    if hex_color.startswith("#") and len(hex_color) >= 7:
        try:
            r = int(hex_color[1:3], 16)
            g = int(hex_color[3:5], 16)
            b = int(hex_color[5:7], 16)
        except ValueError:
            return hex_color
        return f"rgba({r}, {g}, {b}, {format_number(alpha)})"
    return hex_color


def resolve_fill(fill: Optional[Fill], context: RenderContext) -> str:
    if fill is None:
        return "transparent"
    if isinstance(fill, SolidFill):
        return fill.color if fill.opacity == 1 else apply_alpha(fill.color, fill.opacity)
    if isinstance(fill, LinearGradientFill):
        return f"url(#{ensure_gradient(fill, context)})"
    return "transparent"


def resolve_stroke(borders: Optional[BorderSet]) -> str:
    # 只處理四邊一致的邊框；不一致時不畫 stroke
    if borders is None or not borders.is_uniform():
        return ""
    side = borders.top
    if side.width == 0:
        return ""
    color = side.color if side.opacity == 1 else apply_alpha(side.color, side.opacity)
    return (
        f'stroke="{escape_attribute(color)}" stroke-width="{format_number(side.width)}"'
        ' shape-rendering="geometricPrecision"'
    )


# ════════════════════════════════════════════════════════════
# Definitions
# ════════════════════════════════════════════════════════════

def resolve_shadows(shadows: tuple[BoxShadow, ...], context: RenderContext) -> Optional[str]:
    usable = [s for s in shadows if not s.inset]
    if not usable:
        return None
    filter_id = f"shadow-{context.filter_index}"
    context.filter_index += 1
    primitives = "".join(
        f'<feDropShadow dx="{format_number(s.offset_x)}" dy="{format_number(s.offset_y)}"'
        f' stdDeviation="{format_number(max(s.blur, 0) / 2)}"'
        f' flood-color="{escape_attribute(s.color)}" flood-opacity="{format_number(s.opacity)}" />'
        for s in usable
    )
    context.defs.append(
        f'<filter id="{filter_id}" x="-50%" y="-50%" width="200%" height="200%"'
        f' color-interpolation-filters="sRGB">{primitives}</filter>'
    )
    return filter_id


def ensure_gradient(gradient: LinearGradientFill, context: RenderContext) -> str:
    gradient_id = f"gradient-{context.gradient_index}"
    context.gradient_index += 1
    x1, y1, x2, y2 = gradient_vector(gradient.angle)
    stops = "".join(
        f'<stop offset="{format_percentage(stop.offset)}" stop-color="{escape_attribute(stop.color)}"'
        f' stop-opacity="{format_number(stop.opacity)}" />'
        for stop in gradient.stops
    )
    context.defs.append(
        f'<linearGradient id="{gradient_id}" gradientUnits="objectBoundingBox"'
        f' x1="{format_number(x1)}" y1="{format_number(y1)}" x2="{format_number(x2)}" y2="{format_number(y2)}">'
        f"{stops}</linearGradient>"
    )
    return gradient_id


def ensure_clip_path(node: BoxNode, context: RenderContext) -> str:
    clip_id = f"clip-{context.clip_index}"
    context.clip_index += 1
    d = rounded_rect_path(node.x, node.y, node.width, node.height, node.border_radius)
    context.defs.append(f'<clipPath id="{clip_id}" clipPathUnits="userSpaceOnUse"><path d="{d}" /></clipPath>')
    return clip_id


def create_style_def(css: str) -> str:
    safe_css = css.replace("]]>", "]]]]><![CDATA[>")
    return f'<style type="text/css"><![CDATA[{safe_css}]]></style>'


# ════════════════════════════════════════════════════════════
# Document
# ════════════════════════════════════════════════════════════

def render_document(tree: Node, width: float, height: float, inline_css: Optional[str] = None) -> str:
    context = RenderContext()
    content = render_node(tree, context)

    entries = list(context.defs)
    css = (inline_css or "").strip()
    if css:
        entries.insert(0, create_style_def(css))
    defs = f"<defs>{''.join(entries)}</defs>" if entries else ""

    w = format_number(width)
    h = format_number(height)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<svg xmlns="{SVG_NS}" width="{w}" height="{h}" viewBox="0 0 {w} {h}" role="presentation">'
        f"{defs}{content}</svg>"
    )
