"""
Style value parsers — computed CSS strings → structured records.

Every parser here is total: malformed or empty input degrades to a
documented fallback instead of raising, so one odd value never aborts
a whole conversion.
"""

import math
import re
from dataclasses import dataclass
from typing import Mapping, Optional

from .nodes import (
    DEFAULT_BORDER_SIDE,
    BorderRadius,
    BorderSet,
    BorderSide,
    BoxShadow,
    Color,
    Fill,
    GradientStop,
    LinearGradientFill,
    SolidFill,
)

BLACK = Color("#000000", 1.0)
DEFAULT_SHADOW_COLOR = "rgba(0, 0, 0, 0.25)"

_PX_RE = re.compile(r"([-+]?(?:\d+\.?\d*|\.\d+))px")
_FLOAT_PREFIX_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")
_RGB_RE = re.compile(r"rgba?\(([^()]*)\)", re.IGNORECASE)
_HEX_RE = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{4}|[0-9a-f]{6}|[0-9a-f]{8})$", re.IGNORECASE)
_INSET_RE = re.compile(r"(^|\s)inset(?=\s|$)", re.IGNORECASE)
_COLOR_TOKEN_RE = re.compile(r"^(?:(?:rgba?|hsla?)\(.*\)|#[0-9a-f]{3,8}|[a-z]+)$", re.IGNORECASE)

_DIRECTION_ANGLES = {
    "to top": 0,
    "to right": 90,
    "to bottom": 180,
    "to left": 270,
    "to top right": 45,
    "to right top": 45,
    "to top left": 315,
    "to left top": 315,
    "to bottom right": 135,
    "to right bottom": 135,
    "to bottom left": 225,
    "to left bottom": 225,
}


# ════════════════════════════════════════════════════════════
# Tokenizers
# ════════════════════════════════════════════════════════════

def split_top_level(value: str, separator: str = ",") -> list[str]:
    """依分隔字元切開，但忽略括號內的分隔字元（`rgba(0, 0, 0, .5)` 不會被拆）。"""
    result = []
    buffer = []
    depth = 0
    for char in value or "":
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        if char == separator and depth == 0:
            result.append("".join(buffer).strip())
            buffer = []
            continue
        buffer.append(char)
    tail = "".join(buffer).strip()
    if tail:
        result.append(tail)
    return result


def _tokenize_whitespace(value: str) -> list[str]:
    tokens = []
    buffer = []
    depth = 0
    for char in value or "":
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        if char.isspace() and depth == 0:
            if buffer:
                tokens.append("".join(buffer))
                buffer = []
            continue
        buffer.append(char)
    if buffer:
        tokens.append("".join(buffer))
    return tokens


# ════════════════════════════════════════════════════════════
# Numbers & lengths
# ════════════════════════════════════════════════════════════

def parse_float(value, fallback: Optional[float] = None) -> Optional[float]:
    """等同 JS parseFloat：只讀開頭的數字部分。"""
    if value is None:
        return fallback
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else fallback
    match = _FLOAT_PREFIX_RE.match(str(value))
    if not match:
        return fallback
    number = float(match.group(1))
    return number if math.isfinite(number) else fallback


def parse_px(value, fallback: float = 0) -> float:
    if value is None or value == "":
        return fallback
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else fallback
    match = _PX_RE.search(value)
    if match:
        return float(match.group(1))
    return parse_float(value, fallback)


def parse_opacity(value, fallback: float = 1.0) -> float:
    opacity = parse_float(value, fallback)
    return min(max(opacity, 0.0), 1.0)


def parse_line_height(value: Optional[str], font_size: float) -> float:
    if not value or value == "normal":
        return font_size * 1.2
    value = value.strip()
    if value.endswith("%"):
        percent = parse_float(value)
        return font_size * 1.2 if percent is None else percent / 100 * font_size
    if value.endswith("px"):
        return parse_px(value, font_size)
    multiplier = parse_float(value)
    if multiplier is not None:
        return multiplier * font_size
    return font_size * 1.2


# ════════════════════════════════════════════════════════════
# Colors
# ════════════════════════════════════════════════════════════

def _rgb_to_hex(r: int, g: int, b: int) -> str:
    return f"#{r:02x}{g:02x}{b:02x}"


def _parse_rgb_args(inner: str) -> Optional[Color]:
    alpha_token = None
    if "/" in inner:
        inner, alpha_token = inner.split("/", 1)
    parts = [p for p in re.split(r"[\s,]+", inner.strip()) if p]
    if len(parts) == 4 and alpha_token is None:
        alpha_token = parts.pop()
    if len(parts) != 3:
        return None
    channels = []
    for part in parts:
        if part.endswith("%"):
            number = parse_float(part)
            number = None if number is None else number * 2.55
        else:
            number = parse_float(part)
        if number is None:
            return None
        channels.append(min(255, max(0, int(round(number)))))
    opacity = 1.0
    if alpha_token is not None:
        alpha_token = alpha_token.strip()
        alpha = parse_float(alpha_token)
        if alpha is not None and alpha_token.endswith("%"):
            alpha /= 100
        opacity = 1.0 if alpha is None else min(max(alpha, 0.0), 1.0)
    return Color(_rgb_to_hex(*channels), opacity)


def _expand_hex(digits: str) -> str:
    if len(digits) in (3, 4):
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) == 6:
        digits += "ff"
    return digits.lower()


def parse_color(value: Optional[str]) -> Color:
    """rgb()/rgba()/hex → (#rrggbb, opacity)；其他字串（named color、currentColor）原樣保留。"""
    if not value or not value.strip():
        return BLACK
    trimmed = value.strip()

    rgb_match = _RGB_RE.search(trimmed)
    if rgb_match:
        parsed = _parse_rgb_args(rgb_match.group(1))
        if parsed:
            return parsed

    hex_match = _HEX_RE.match(trimmed)
    if hex_match:
        digits = _expand_hex(hex_match.group(1))
        return Color(f"#{digits[:6]}", int(digits[6:], 16) / 255)

    return Color(trimmed, 1.0)


def is_transparent(value: Optional[str]) -> bool:
    if not value:
        return True
    compact = re.sub(r"\s+", "", value.strip().lower())
    return compact in ("transparent", "rgba(0,0,0,0)", "none")


# ════════════════════════════════════════════════════════════
# Fills & gradients
# ════════════════════════════════════════════════════════════

def parse_fill(style: Mapping[str, str]) -> Optional[Fill]:
    background_image = style.get("background-image")
    if background_image and background_image != "none":
        gradient = parse_linear_gradient(background_image)
        if gradient:
            return gradient

    background_color = style.get("background-color")
    if background_color and not is_transparent(background_color):
        color = parse_color(background_color)
        if color.opacity <= 0:
            return None
        return SolidFill(color.color, color.opacity)
    return None


def _extract_linear_gradient(value: str) -> Optional[str]:
    index = value.find("linear-gradient")
    if index == -1:
        return None
    start = value.find("(", index)
    if start == -1:
        return None
    depth = 1
    for i in range(start + 1, len(value)):
        char = value[i]
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return value[start + 1:i]
    return None


def _is_angle_token(token: str) -> bool:
    lowered = token.strip().lower()
    return lowered.startswith("to ") or lowered.endswith(("deg", "rad", "turn", "grad"))


def parse_gradient_angle(token: str) -> float:
    lowered = " ".join(token.strip().lower().split())
    number = parse_float(lowered)
    if lowered.endswith("grad"):
        return 180.0 if number is None else number * 0.9
    if lowered.endswith("deg"):
        return 180.0 if number is None else number
    if lowered.endswith("rad"):
        return 180.0 if number is None else math.degrees(number)
    if lowered.endswith("turn"):
        return 180.0 if number is None else number * 360
    return float(_DIRECTION_ANGLES.get(lowered, 180))


def parse_gradient_stop(token: str, index: int, total: int) -> Optional[GradientStop]:
    token = token.strip()
    if not token:
        return None
    default_offset = index / max(total - 1, 1)
    offset = default_offset
    color_token = token

    parts = _tokenize_whitespace(token)
    if len(parts) > 1:
        last = parts[-1]
        if last.endswith("%") and "(" not in last:
            percent = parse_float(last)
            if percent is not None:
                offset = min(max(percent / 100, 0.0), 1.0)
            color_token = " ".join(parts[:-1])

    color = parse_color(color_token)
    return GradientStop(color=color.color, opacity=color.opacity, offset=offset)


def parse_linear_gradient(value: Optional[str]) -> Optional[LinearGradientFill]:
    """取第一個 linear-gradient(...) 並解析角度與色標；少於 2 個色標視為無效（回傳 None）。"""
    if not value:
        return None
    inner = _extract_linear_gradient(value)
    if inner is None:
        return None
    tokens = split_top_level(inner)
    if not tokens:
        return None

    angle = 180.0
    start = 0
    if _is_angle_token(tokens[0]):
        angle = parse_gradient_angle(tokens[0])
        start = 1

    stop_tokens = tokens[start:]
    if len(stop_tokens) < 2:
        return None
    stops = []
    for index, token in enumerate(stop_tokens):
        stop = parse_gradient_stop(token, index, len(stop_tokens))
        if stop:
            stops.append(stop)
    if len(stops) < 2:
        return None
    return LinearGradientFill(angle=angle, stops=tuple(stops))


# ════════════════════════════════════════════════════════════
# Borders & radii
# ════════════════════════════════════════════════════════════

_SIDES = ("top", "right", "bottom", "left")


def parse_borders(style: Mapping[str, str]) -> Optional[BorderSet]:
    kept = {}
    for side in _SIDES:
        width = parse_px(style.get(f"border-{side}-width"), 0)
        border_style = style.get(f"border-{side}-style") or "solid"
        if width <= 0 or border_style in ("none", "hidden"):
            continue
        color = parse_color(style.get(f"border-{side}-color") or "#000000")
        kept[side] = BorderSide(width=width, color=color.color, opacity=color.opacity, style=border_style)

    if not kept:
        return None
    return BorderSet(**{side: kept.get(side, DEFAULT_BORDER_SIDE) for side in _SIDES})


def parse_border_radius(style: Mapping[str, str]) -> BorderRadius:
    def radius(key: str) -> float:
        value = style.get(key)
        if not value or value == "0px":
            return 0.0
        return max(parse_px(value, 0), 0.0)

    return BorderRadius(
        top_left=radius("border-top-left-radius"),
        top_right=radius("border-top-right-radius"),
        bottom_right=radius("border-bottom-right-radius"),
        bottom_left=radius("border-bottom-left-radius"),
    )


# ════════════════════════════════════════════════════════════
# Shadows
# ════════════════════════════════════════════════════════════

def _is_color_token(token: str) -> bool:
    return bool(_COLOR_TOKEN_RE.match(token))


def parse_single_shadow(value: str) -> Optional[BoxShadow]:
    value = (value or "").strip()
    if not value:
        return None
    inset = bool(_INSET_RE.search(value))
    cleaned = _INSET_RE.sub(" ", value).strip()
    tokens = _tokenize_whitespace(cleaned)

    color_token = DEFAULT_SHADOW_COLOR
    # 作者寫法通常顏色在最後；瀏覽器 computed style 則把顏色放最前面
    if tokens and _is_color_token(tokens[-1]):
        color_token = tokens.pop()
    elif tokens and _is_color_token(tokens[0]):
        color_token = tokens.pop(0)

    if len(tokens) < 2:
        return None
    offset_x, offset_y = tokens[0], tokens[1]
    blur = tokens[2] if len(tokens) > 2 else "0px"
    spread = tokens[3] if len(tokens) > 3 else "0px"
    color = parse_color(color_token)
    return BoxShadow(
        inset=inset,
        offset_x=parse_px(offset_x, 0),
        offset_y=parse_px(offset_y, 0),
        blur=max(0.0, parse_px(blur, 0)),
        spread=parse_px(spread, 0),
        color=color.color,
        opacity=color.opacity,
    )


def parse_box_shadows(value: Optional[str]) -> list[BoxShadow]:
    if not value or value.strip() == "none":
        return []
    shadows = []
    for entry in split_top_level(value):
        shadow = parse_single_shadow(entry)
        if shadow:
            shadows.append(shadow)
    return shadows


# ════════════════════════════════════════════════════════════
# Typography
# ════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class FontSpec:
    style: str = "normal"
    weight: str = "400"
    size: float = 16.0
    line_height: Optional[str] = None
    family: str = "sans-serif"


_FONT_STYLES = {"italic", "oblique"}
_FONT_WEIGHTS = {"bold", "bolder", "lighter"}


def parse_font_shorthand(value: Optional[str]) -> FontSpec:
    """解析 `font` shorthand，例如 `italic 700 16px/1.5 "Inter", sans-serif`。"""
    if not value or not value.strip():
        return FontSpec()
    tokens = _tokenize_whitespace(re.sub(r"\s*/\s*", "/", value.strip()))
    font_style = "normal"
    weight = "400"
    for i, token in enumerate(tokens):
        lowered = token.lower()
        if lowered[:1].isdigit() or lowered[:1] == ".":
            if lowered.isdigit():
                weight = lowered
                continue
            size_part, _, line_part = token.partition("/")
            family = sanitize_font_family(" ".join(tokens[i + 1:]))
            return FontSpec(font_style, weight, parse_px(size_part, 16), line_part or None, family)
        if lowered in _FONT_STYLES:
            font_style = lowered
        elif lowered in _FONT_WEIGHTS:
            weight = lowered
    return FontSpec(style=font_style, weight=weight)


def sanitize_font_family(value: Optional[str]) -> str:
    if not value or not value.strip():
        return "sans-serif"
    families = [f.strip().replace('"', "").replace("'", "") for f in value.split(",")]
    return ", ".join(f for f in families if f) or "sans-serif"


def normalize_font_weight(weight) -> str:
    w = str(weight).strip().lower()
    if w in ("100", "200", "300", "400", "500", "600", "700", "800", "900"):
        return w
    if w == "bold":
        return "700"
    if w in ("normal", ""):
        return "400"
    return str(weight).strip()


def to_text_anchor(text_align: Optional[str]) -> str:
    if text_align == "center":
        return "middle"
    if text_align in ("right", "end"):
        return "end"
    return "start"


# ════════════════════════════════════════════════════════════
# Visibility
# ════════════════════════════════════════════════════════════

def is_renderable(style: Mapping[str, str]) -> bool:
    if style.get("display") == "none":
        return False
    if style.get("visibility") in ("hidden", "collapse"):
        return False
    return parse_float(style.get("opacity"), 1.0) > 0


def is_overflow_clipped(style: Mapping[str, str]) -> bool:
    return any(style.get(key) in ("hidden", "clip") for key in ("overflow", "overflow-x", "overflow-y"))
