"""
Visual line segmenter 單元測試
用假的逐字元矩形模擬瀏覽器排版結果（單行、換行、折疊空白）。
"""
import pytest

from figma_svg.dom import DomText, Rect
from figma_svg.segmenter import anchor_x, baseline_y, collapse_whitespace, split_visual_lines


def make_run(lines, char_width=8.0, line_height=20.0, left=0.0, top=0.0):
    """lines: 每一行的文字；逐字元產生矩形，行與行之間 top 相差 line_height。"""
    text = "".join(lines)
    rects = []
    for row, line in enumerate(lines):
        for col, _ in enumerate(line):
            rects.append({"x": left + col * char_width, "y": top + row * line_height,
                          "width": char_width, "height": line_height})
    return DomText(text, rects)


# ─── split_visual_lines ─────────────────────────────────────────────────────

class TestSplitVisualLines:

    def test_single_line(self):
        run = make_run(["Hello"], left=80, top=40)
        lines = split_visual_lines(run)
        assert len(lines) == 1
        assert lines[0].text == "Hello"
        assert lines[0].rect == Rect(80, 40, 40, 20)

    def test_wrapped_text_splits_on_top_change(self):
        run = make_run(["Hello ", "world"])
        lines = split_visual_lines(run)
        assert [l.text for l in lines] == ["Hello", "world"]
        assert lines[1].rect.top == 20
        assert lines[1].rect.left == 0

    def test_sub_tolerance_jitter_stays_on_line(self):
        run = DomText("ab", [
            {"x": 0, "y": 10.0, "width": 8, "height": 20},
            {"x": 8, "y": 10.4, "width": 8, "height": 20},
        ])
        lines = split_visual_lines(run)
        assert len(lines) == 1
        assert lines[0].rect.bottom == pytest.approx(30.4)

    def test_zero_area_char_does_not_break_line(self):
        run = DomText("a b", [
            {"x": 0, "y": 0, "width": 8, "height": 20},
            {"x": 0, "y": 500, "width": 0, "height": 0},
            {"x": 16, "y": 0, "width": 8, "height": 20},
        ])
        lines = split_visual_lines(run)
        assert [l.text for l in lines] == ["a b"]

    def test_missing_char_rects_skipped(self):
        run = DomText("abc", [{"x": 0, "y": 0, "width": 8, "height": 20}, None])
        lines = split_visual_lines(run)
        assert len(lines) == 1
        assert lines[0].rect.width == 8

    def test_whitespace_only_line_suppressed(self):
        run = DomText("  ", [
            {"x": 0, "y": 0, "width": 4, "height": 20},
            {"x": 4, "y": 0, "width": 4, "height": 20},
        ])
        assert split_visual_lines(run) == []

    def test_empty_run(self):
        assert split_visual_lines(DomText("", [])) == []


# ─── helpers ────────────────────────────────────────────────────────────────

def test_collapse_whitespace():
    assert collapse_whitespace("  Hello \n\t world ") == "Hello world"


def test_anchor_x():
    rect = Rect(80, 40, 40, 20)
    assert anchor_x(rect, "start") == 80
    assert anchor_x(rect, "middle") == 100
    assert anchor_x(rect, "end") == 120


def test_baseline_y():
    # top + (h - fs) / 2 + fs * 0.85
    assert baseline_y(Rect(0, 40, 40, 20), 16) == pytest.approx(55.6)
