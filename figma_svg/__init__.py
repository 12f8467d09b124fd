"""
figma-svg — HTML → 可直接貼進 Figma 的 SVG（Python 管線）

瀏覽器擷取版面後建立不可變節點樹，再輸出自包含的 SVG 文件。
"""

__version__ = "0.1.0"

from .nodes import (
    BoxNode,
    TextNode,
    IconNode,
    Node,
    count_nodes,
    node_to_dict,
    preview_tree,
)
from .dom import DomElement, DomText, Rect
from .snapshot import Snapshotter
from .emitter import RenderContext, render_document, render_node
from .converter import ConversionError, ConvertOptions, convert, convert_with_tree, snapshot
from .sanitizer import sanitize_html_input, rewrite_css_for_svg
from .dom_capture import CaptureConfig, capture_markup, capture_markup_sync, capture_url, capture_url_sync, save_capture
from .config import load_config, validate_config
from .icons import GLYPHS, lookup_glyph

__all__ = [
    "__version__",
    "BoxNode",
    "TextNode",
    "IconNode",
    "Node",
    "count_nodes",
    "node_to_dict",
    "preview_tree",
    "DomElement",
    "DomText",
    "Rect",
    "Snapshotter",
    "RenderContext",
    "render_document",
    "render_node",
    "ConversionError",
    "ConvertOptions",
    "convert",
    "convert_with_tree",
    "snapshot",
    "sanitize_html_input",
    "rewrite_css_for_svg",
    "CaptureConfig",
    "capture_markup",
    "capture_markup_sync",
    "capture_url",
    "capture_url_sync",
    "save_capture",
    "load_config",
    "validate_config",
    "GLYPHS",
    "lookup_glyph",
]
