"""
Style value parsers 單元測試
涵蓋顏色、漸層、邊框、圓角、陰影、字型 shorthand 與可見性判斷。
"""
import pytest

from figma_svg.nodes import DEFAULT_BORDER_SIDE, LinearGradientFill, SolidFill
from figma_svg.styles import (
    is_overflow_clipped,
    is_renderable,
    is_transparent,
    normalize_font_weight,
    parse_border_radius,
    parse_borders,
    parse_box_shadows,
    parse_color,
    parse_fill,
    parse_font_shorthand,
    parse_gradient_angle,
    parse_line_height,
    parse_linear_gradient,
    parse_px,
    parse_single_shadow,
    sanitize_font_family,
    split_top_level,
    to_text_anchor,
)


# ─── split_top_level ────────────────────────────────────────────────────────

def test_split_top_level_ignores_nested_commas():
    assert split_top_level("45deg, rgba(0, 0, 0, 0.5), red") == ["45deg", "rgba(0, 0, 0, 0.5)", "red"]


def test_split_top_level_empty():
    assert split_top_level("") == []


# ─── parse_color ────────────────────────────────────────────────────────────

class TestParseColor:

    def test_hex_passthrough(self):
        color = parse_color("#336699")
        assert color.color == "#336699"
        assert color.opacity == 1.0

    def test_short_hex_expanded(self):
        assert parse_color("#fff").color == "#ffffff"

    def test_hex_with_alpha(self):
        color = parse_color("#ff000080")
        assert color.color == "#ff0000"
        assert color.opacity == pytest.approx(128 / 255, abs=1e-3)

    def test_rgba(self):
        color = parse_color("rgba(255, 0, 0, 0.5)")
        assert color.color == "#ff0000"
        assert color.opacity == pytest.approx(0.5)

    def test_rgb_space_separated_with_slash_alpha(self):
        color = parse_color("rgb(0 128 255 / 25%)")
        assert color.color == "#0080ff"
        assert color.opacity == pytest.approx(0.25)

    def test_rgb_no_alpha(self):
        color = parse_color("rgb(51, 102, 153)")
        assert color.color == "#336699"
        assert color.opacity == 1.0

    def test_named_color_passthrough(self):
        color = parse_color("red")
        assert color.color == "red"
        assert color.opacity == 1.0

    def test_empty_is_black(self):
        assert parse_color("").color == "#000000"
        assert parse_color(None).color == "#000000"


def test_is_transparent_variants():
    assert is_transparent("transparent")
    assert is_transparent("rgba(0, 0, 0, 0)")
    assert is_transparent("rgba(0,0,0,0)")
    assert is_transparent("")
    assert not is_transparent("rgb(0, 0, 0)")


# ─── parse_fill / gradients ─────────────────────────────────────────────────

class TestParseFill:

    def test_transparent_background_has_no_fill(self):
        assert parse_fill({"background-color": "rgba(0, 0, 0, 0)"}) is None

    def test_zero_alpha_background_has_no_fill(self):
        assert parse_fill({"background-color": "rgba(10, 20, 30, 0)"}) is None

    def test_solid_fill(self):
        fill = parse_fill({"background-color": "rgb(51, 102, 153)"})
        assert isinstance(fill, SolidFill)
        assert fill.color == "#336699"

    def test_gradient_takes_precedence(self):
        fill = parse_fill({
            "background-color": "rgb(255, 255, 255)",
            "background-image": "linear-gradient(45deg, red, blue)",
        })
        assert isinstance(fill, LinearGradientFill)

    def test_single_stop_gradient_falls_back_to_color(self):
        fill = parse_fill({
            "background-color": "rgb(255, 255, 255)",
            "background-image": "linear-gradient(45deg, red)",
        })
        assert isinstance(fill, SolidFill)
        assert fill.color == "#ffffff"


class TestLinearGradient:

    def test_angle_and_even_offsets(self):
        gradient = parse_linear_gradient("linear-gradient(45deg, red, blue)")
        assert gradient.angle == 45
        assert [s.offset for s in gradient.stops] == [0, 1]
        assert [s.color for s in gradient.stops] == ["red", "blue"]

    def test_single_stop_is_discarded(self):
        assert parse_linear_gradient("linear-gradient(45deg, red)") is None

    def test_default_angle(self):
        gradient = parse_linear_gradient("linear-gradient(red, blue)")
        assert gradient.angle == 180

    def test_direction_keyword(self):
        gradient = parse_linear_gradient("linear-gradient(to right, red, blue)")
        assert gradient.angle == 90

    def test_explicit_percentages_and_nested_color(self):
        gradient = parse_linear_gradient(
            "linear-gradient(90deg, rgba(255, 0, 0, 0.5) 10%, rgb(0, 0, 255) 80%)"
        )
        assert [s.offset for s in gradient.stops] == pytest.approx([0.1, 0.8])
        assert gradient.stops[0].color == "#ff0000"
        assert gradient.stops[0].opacity == pytest.approx(0.5)

    def test_first_gradient_in_multi_layer_value(self):
        gradient = parse_linear_gradient(
            "url(a.png), linear-gradient(180deg, rgb(0, 0, 0), rgb(255, 255, 255))"
        )
        assert gradient.angle == 180
        assert len(gradient.stops) == 2

    def test_no_gradient(self):
        assert parse_linear_gradient("url(a.png)") is None
        assert parse_linear_gradient("") is None

    def test_angle_units(self):
        assert parse_gradient_angle("0.5turn") == pytest.approx(180)
        assert parse_gradient_angle("100grad") == pytest.approx(90)
        assert parse_gradient_angle("3.14159265rad") == pytest.approx(180, abs=1e-3)


# ─── borders & radius ───────────────────────────────────────────────────────

def _uniform_border(width="1px", style="solid", color="rgb(0, 0, 0)"):
    out = {}
    for side in ("top", "right", "bottom", "left"):
        out[f"border-{side}-width"] = width
        out[f"border-{side}-style"] = style
        out[f"border-{side}-color"] = color
    return out


class TestBorders:

    def test_uniform_border(self):
        borders = parse_borders(_uniform_border("2px", color="rgb(255, 0, 0)"))
        assert borders.is_uniform()
        assert borders.top.width == 2
        assert borders.top.color == "#ff0000"

    def test_no_border(self):
        assert parse_borders(_uniform_border("0px")) is None
        assert parse_borders(_uniform_border("1px", style="none")) is None

    def test_partial_border_fills_default(self):
        style = _uniform_border("0px")
        style["border-bottom-width"] = "1px"
        borders = parse_borders(style)
        assert borders.bottom.width == 1
        assert borders.top == DEFAULT_BORDER_SIDE
        assert not borders.is_uniform()


def test_border_radius_parsing():
    radius = parse_border_radius({
        "border-top-left-radius": "8px",
        "border-top-right-radius": "0px",
        "border-bottom-right-radius": "4px",
    })
    assert radius.top_left == 8
    assert radius.top_right == 0
    assert radius.bottom_right == 4
    assert radius.bottom_left == 0


# ─── shadows ────────────────────────────────────────────────────────────────

class TestShadows:

    def test_author_order_color_last(self):
        shadow = parse_single_shadow("0 4px 8px rgba(0,0,0,0.3)")
        assert (shadow.offset_x, shadow.offset_y, shadow.blur, shadow.spread) == (0, 4, 8, 0)
        assert shadow.color == "#000000"
        assert shadow.opacity == pytest.approx(0.3)
        assert shadow.inset is False

    def test_computed_order_color_first(self):
        shadow = parse_single_shadow("rgba(0, 0, 0, 0.3) 0px 4px 8px 2px")
        assert shadow.offset_y == 4
        assert shadow.spread == 2
        assert shadow.opacity == pytest.approx(0.3)

    def test_inset(self):
        shadow = parse_single_shadow("inset 0 1px 2px black")
        assert shadow.inset is True
        assert shadow.color == "black"

    def test_default_color(self):
        shadow = parse_single_shadow("1px 2px")
        assert shadow.opacity == pytest.approx(0.25)

    def test_too_few_lengths(self):
        assert parse_single_shadow("4px") is None

    def test_multiple_shadows(self):
        shadows = parse_box_shadows("0 1px 2px rgba(0, 0, 0, 0.1), 0 4px 8px rgba(0, 0, 0, 0.2)")
        assert len(shadows) == 2
        assert shadows[1].blur == 8

    def test_none(self):
        assert parse_box_shadows("none") == []
        assert parse_box_shadows(None) == []


# ─── lengths & typography ───────────────────────────────────────────────────

def test_parse_px():
    assert parse_px("12px") == 12
    assert parse_px("1.5px") == 1.5
    assert parse_px("auto", 3) == 3
    assert parse_px(None, 7) == 7


def test_parse_px_leading_dot_decimal():
    assert parse_px(".5px") == 0.5
    assert parse_px("-.25px") == -0.25
    assert parse_px("calc(.5px)") == 0.5


@pytest.mark.parametrize("value,expected", [
    ("normal", 19.2),
    ("24px", 24),
    ("150%", 24),
    ("1.5", 24),
    ("", 19.2),
])
def test_parse_line_height(value, expected):
    assert parse_line_height(value, 16) == pytest.approx(expected)


class TestFontShorthand:

    def test_full_shorthand(self):
        spec = parse_font_shorthand('italic 700 16px/1.5 "Inter", sans-serif')
        assert spec.style == "italic"
        assert spec.weight == "700"
        assert spec.size == 16
        assert spec.line_height == "1.5"
        assert spec.family == "Inter, sans-serif"

    def test_size_and_family_only(self):
        spec = parse_font_shorthand("14px Arial")
        assert spec.size == 14
        assert spec.weight == "400"
        assert spec.line_height is None
        assert spec.family == "Arial"

    def test_empty(self):
        spec = parse_font_shorthand("")
        assert spec.size == 16
        assert spec.family == "sans-serif"


def test_sanitize_font_family_strips_quotes():
    assert sanitize_font_family('"Noto Sans TC", \'Inter\', sans-serif') == "Noto Sans TC, Inter, sans-serif"
    assert sanitize_font_family("") == "sans-serif"


def test_normalize_font_weight():
    assert normalize_font_weight("bold") == "700"
    assert normalize_font_weight("normal") == "400"
    assert normalize_font_weight(600) == "600"


def test_to_text_anchor():
    assert to_text_anchor("center") == "middle"
    assert to_text_anchor("right") == "end"
    assert to_text_anchor("left") == "start"
    assert to_text_anchor(None) == "start"


# ─── visibility ─────────────────────────────────────────────────────────────

def test_is_renderable():
    assert is_renderable({})
    assert not is_renderable({"display": "none"})
    assert not is_renderable({"visibility": "hidden"})
    assert not is_renderable({"opacity": "0"})


def test_is_overflow_clipped():
    assert is_overflow_clipped({"overflow": "hidden"})
    assert is_overflow_clipped({"overflow-y": "clip"})
    assert not is_overflow_clipped({"overflow": "visible"})
