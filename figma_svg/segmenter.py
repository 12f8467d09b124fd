"""
Visual line segmenter.

A text run is split into the rows the browser actually laid out by measuring
every character's rectangle: a row ends as soon as a character box's top edge moves
by more than the tolerance. Cost is one rect lookup per character.
"""

import math
import re
from dataclasses import dataclass

from .dom import Rect

LINE_TOLERANCE = 0.5
BASELINE_RATIO = 0.85

_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class VisualLine:
    text: str
    rect: Rect


def collapse_whitespace(value: str) -> str:
    return _WS_RE.sub(" ", value or "").strip()


def split_visual_lines(run, tolerance: float = LINE_TOLERANCE) -> list[VisualLine]:
    """把 run（需有 `.text` 與 `.char_rect(i)`）切成視覺行，依閱讀順序回傳。"""
    content = run.text or ""
    lines: list[VisualLine] = []
    if not content:
        return lines

    current_top = None
    line_start = 0
    left = top = math.inf
    right = bottom = -math.inf

    def commit(end: int) -> None:
        if end <= line_start or not all(math.isfinite(v) for v in (left, top, right, bottom)):
            return
        text = collapse_whitespace(content[line_start:end])
        rect = Rect.from_edges(left, top, right, bottom)
        if text and not rect.is_empty:
            lines.append(VisualLine(text, rect))

    for i in range(len(content)):
        box = run.char_rect(i)
        # 折疊掉的空白量不到面積：不參與聚合，也不觸發換行
        if box is None or box.is_empty:
            continue
        if current_top is None or abs(box.top - current_top) > tolerance:
            if current_top is not None:
                commit(i)
            current_top = box.top
            line_start = i
            left, top, right, bottom = box.left, box.top, box.right, box.bottom
        else:
            left = min(left, box.left)
            top = min(top, box.top)
            right = max(right, box.right)
            bottom = max(bottom, box.bottom)

    commit(len(content))
    return lines


def anchor_x(rect: Rect, text_anchor: str) -> float:
    if text_anchor == "middle":
        return rect.left + rect.width / 2
    if text_anchor == "end":
        return rect.right
    return rect.left


def baseline_y(rect: Rect, font_size: float) -> float:
    """字型 metrics 拿不到，用 line box 高度近似 alphabetic baseline。"""
    return rect.top + (rect.height - font_size) / 2 + font_size * BASELINE_RATIO
