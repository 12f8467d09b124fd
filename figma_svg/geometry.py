"""幾何工具：圓角矩形 path、漸層角度 → 向量、數值格式化。"""

import math

from .nodes import BorderRadius


def format_number(value: float) -> str:
    """四捨五入到小數 3 位，去掉多餘的 0（`1.500` → `1.5`、`2.0` → `2`）。"""
    if value is None or not math.isfinite(value):
        return "0"
    rounded = math.floor(value * 1000 + 0.5) / 1000
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.3f}".rstrip("0").rstrip(".")


def format_percentage(value: float) -> str:
    if value is None or not math.isfinite(value):
        return "0%"
    return f"{format_number(math.floor(value * 10000 + 0.5) / 100)}%"


def gradient_vector(angle: float) -> tuple[float, float, float, float]:
    """CSS 角度 → objectBoundingBox 內的 (x1, y1, x2, y2)。"""
    rad = math.radians(angle)
    x = math.cos(rad)
    y = math.sin(rad)
    return (1 - x) / 2, (1 - y) / 2, (1 + x) / 2, (1 + y) / 2


def rounded_rect_path(x: float, y: float, width: float, height: float, radii: BorderRadius) -> str:
    r = radii.clamped(width, height)
    tl, tr, br, bl = r.top_left, r.top_right, r.bottom_right, r.bottom_left
    f = format_number
    return " ".join([
        f"M {f(x + tl)} {f(y)}",
        f"H {f(x + width - tr)}",
        f"Q {f(x + width)} {f(y)} {f(x + width)} {f(y + tr)}",
        f"V {f(y + height - br)}",
        f"Q {f(x + width)} {f(y + height)} {f(x + width - br)} {f(y + height)}",
        f"H {f(x + bl)}",
        f"Q {f(x)} {f(y + height)} {f(x)} {f(y + height - bl)}",
        f"V {f(y + tl)}",
        f"Q {f(x)} {f(y)} {f(x + tl)} {f(y)}",
        "Z",
    ])
