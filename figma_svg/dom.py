"""
Styled element tree — 由瀏覽器端擷取的 raw dict 樹包成可查詢的元素物件。

Snapshotter 只透過這裡的介面讀資料：
  - element.rect / element.style / element.child_nodes
  - text.text / text.char_rect(i)

raw 格式（dom_capture.CAPTURE_JS 產生）：
  {"type": "element", "tag": "div", "id": "", "className": "", "classList": [],
   "rect": {"x", "y", "width", "height"}, "style": {css-property: value},
   "children": [element | {"type": "text", "text": "...", "charRects": [rect | null]}]}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    @classmethod
    def from_raw(cls, raw: Optional[dict]) -> Optional["Rect"]:
        if not raw:
            return None
        left = raw.get("x", raw.get("left", 0)) or 0
        top = raw.get("y", raw.get("top", 0)) or 0
        return cls(left=float(left), top=float(top),
                   width=float(raw.get("width", 0) or 0), height=float(raw.get("height", 0) or 0))

    @classmethod
    def from_edges(cls, left: float, top: float, right: float, bottom: float) -> "Rect":
        return cls(left=left, top=top, width=max(0.0, right - left), height=max(0.0, bottom - top))


class DomText:
    """一段連續文字（單一 text node），附上每個字元的量測矩形。"""

    def __init__(self, text: str, char_rects: Optional[list] = None):
        self.text = text or ""
        self._char_rects = list(char_rects or [])

    def char_rect(self, index: int) -> Optional[Rect]:
        if index >= len(self._char_rects):
            return None
        value = self._char_rects[index]
        if isinstance(value, Rect):
            return value
        return Rect.from_raw(value)

    @classmethod
    def from_raw(cls, raw: dict) -> "DomText":
        return cls(raw.get("text", ""), raw.get("charRects"))


class DomElement:
    """擷取當下的元素：tag、量測矩形、computed style 與子節點。"""

    def __init__(
        self,
        tag_name: str,
        rect: Rect,
        style: Optional[dict] = None,
        child_nodes: Optional[list] = None,
        element_id: str = "",
        class_name: str = "",
        class_list: Optional[list] = None,
    ):
        self.tag_name = (tag_name or "div").lower()
        self.rect = rect
        self.style = dict(style or {})
        self.child_nodes: list[Union[DomElement, DomText]] = list(child_nodes or [])
        self.element_id = element_id or ""
        self.class_name = class_name or ""
        self.class_list = list(class_list) if class_list is not None else self.class_name.split()

    @property
    def children(self) -> list["DomElement"]:
        return [c for c in self.child_nodes if isinstance(c, DomElement)]

    @property
    def text_content(self) -> str:
        parts = []
        for child in self.child_nodes:
            if isinstance(child, DomText):
                parts.append(child.text)
            else:
                parts.append(child.text_content)
        return "".join(parts)

    @classmethod
    def from_raw(cls, raw: dict) -> "DomElement":
        children = []
        for child in raw.get("children", []) or []:
            if child.get("type") == "text":
                children.append(DomText.from_raw(child))
            else:
                children.append(cls.from_raw(child))
        class_name = raw.get("className") or ""
        return cls(
            tag_name=raw.get("tag", "div"),
            rect=Rect.from_raw(raw.get("rect")) or Rect(0, 0, 0, 0),
            style=raw.get("style"),
            child_nodes=children,
            element_id=raw.get("id", ""),
            class_name=class_name if isinstance(class_name, str) else "",
            class_list=raw.get("classList"),
        )
