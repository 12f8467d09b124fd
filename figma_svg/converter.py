"""
Entry point — convert(root, options) → SVG 字串。

流程：驗證 root → Snapshotter 建立節點樹 → emitter 輸出 SVG。
每次呼叫都建立新的 Snapshotter / RenderContext，不同轉換之間不共用 id 計數器。
"""

from dataclasses import dataclass
from typing import Optional, Union

from .dom import DomElement
from .emitter import render_document
from .icons import ICON_CLASS
from .nodes import Node
from .snapshot import Snapshotter


class ConversionError(ValueError):
    """致命輸入錯誤：整個轉換中止，訊息可直接顯示給使用者。"""


@dataclass
class ConvertOptions:
    """轉換設定."""
    inline_css: Optional[str] = None
    allow_hidden: bool = True
    icon_table: Optional[dict] = None
    icon_class: str = ICON_CLASS


def _as_element(root: Union[DomElement, dict, None]) -> Optional[DomElement]:
    if isinstance(root, dict):
        return DomElement.from_raw(root) if root else None
    return root


def _snapshot(root, options: ConvertOptions) -> tuple[Node, DomElement]:
    element = _as_element(root)
    if element is None:
        raise ConversionError("A root element is required to generate SVG.")
    if element.rect is None or element.rect.is_empty:
        raise ConversionError("Root element has no measurable layout.")

    snapshotter = Snapshotter(icon_table=options.icon_table, icon_class=options.icon_class)
    tree = snapshotter.snapshot(element, allow_hidden=options.allow_hidden)
    if tree is None:
        raise ConversionError("Unable to capture layout from the provided HTML.")
    return tree, element


def snapshot(root, options: Optional[ConvertOptions] = None) -> Node:
    """只做擷取，回傳不可變節點樹（供 --dump-tree / preview 使用）。"""
    tree, _ = _snapshot(root, options or ConvertOptions())
    return tree


def convert_with_tree(root, options: Optional[ConvertOptions] = None) -> tuple[Node, str]:
    """同一次擷取同時回傳節點樹與 SVG（CLI 需要兩者時避免重複走訪）。"""
    options = options or ConvertOptions()
    tree, element = _snapshot(root, options)
    return tree, render_document(tree, element.rect.width, element.rect.height, options.inline_css)


def convert(root, options: Optional[ConvertOptions] = None) -> str:
    _, svg = convert_with_tree(root, options)
    return svg
