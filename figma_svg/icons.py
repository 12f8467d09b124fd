"""
Material Symbols glyph table — icon name → SVG path + viewBox.

Lookups are exact and case-sensitive; names missing here simply render
no icon for that element.
"""

from dataclasses import dataclass

ICON_CLASS = "material-symbols-outlined"


@dataclass(frozen=True)
class Glyph:
    path: str
    view_box: str = "0 0 24 24"


GLYPHS: dict[str, Glyph] = {
    "dashboard": Glyph("M13 9V3h8v6h-8zm-2 0H3V3h8v6zm2 2h8v10h-8V11zm-2 0v10H3V11h8z"),
    "calendar_month": Glyph(
        "M9 11H7v2h2v-2zm4 0h-2v2h2v-2zm4 0h-2v2h2v-2zm2-7h-1V2h-2v2H8V2H6v2H5c-1.11 0-1.99.9-1.99 2L3 20"
        "c0 1.1.89 2 2 2h14c1.1 0 2-.9 2-2V6c0-1.1-.9-2-2-2zm0 16H5V9h14v11z"
    ),
    "bed": Glyph(
        "M7 13c1.66 0 3-1.34 3-3S8.66 7 7 7s-3 1.34-3 3 1.34 3 3 3zm12-6h-8v7H3V5H1v15h2v-3h18v3h2v-9"
        "c0-2.21-1.79-4-4-4z"
    ),
    "bar_chart": Glyph("M5 9.2h3V19H5V9.2zM10.6 5h2.8v14h-2.8V5zm5.6 8H19v6h-2.8v-6z"),
    "settings": Glyph(
        "M19.14 12.94c.04-.3.06-.61.06-.94 0-.32-.02-.64-.07-.94l2.03-1.58c.18-.14.23-.41.12-.61"
        "l-1.92-3.32c-.12-.22-.37-.29-.59-.22l-2.39.96c-.5-.38-1.03-.7-1.62-.94l-.36-2.54"
        "c-.04-.24-.24-.41-.48-.41h-3.84c-.24 0-.43.17-.47.41l-.36 2.54c-.59.24-1.13.57-1.62.94"
        "l-2.39-.96c-.22-.08-.47 0-.59.22L2.74 8.87c-.12.21-.08.47.12.61l2.03 1.58"
        "c-.05.3-.09.63-.09.94s.02.64.07.94l-2.03 1.58c-.18.14-.23.41-.12.61l1.92 3.32"
        "c.12.22.37.29.59.22l2.39-.96c.5.38 1.03.7 1.62.94l.36 2.54c.05.24.24.41.48.41h3.84"
        "c.24 0 .44-.17.47-.41l.36-2.54c.59-.24 1.13-.56 1.62-.94l2.39.96c.22.08.47 0 .59-.22"
        "l1.92-3.32c.12-.22.07-.47-.12-.61l-2.01-1.58zM12 15.6c-1.98 0-3.6-1.62-3.6-3.6"
        "s1.62-3.6 3.6-3.6 3.6 1.62 3.6 3.6-1.62 3.6-3.6 3.6z"
    ),
    "help_center": Glyph(
        "M19 3H5c-1.1 0-2 .9-2 2v14c0 1.1.9 2 2 2h14c1.1 0 2-.9 2-2V5c0-1.1-.9-2-2-2zm-7 15h-2v-2h2v2z"
        "m1.07-7.75l-.9.92C11.45 11.9 11 12.5 11 14h-2v-.5c0-1.1.45-2.1 1.17-2.83l1.24-1.26"
        "c.37-.36.59-.86.59-1.41 0-1.1-.9-2-2-2s-2 .9-2 2H6c0-2.21 1.79-4 4-4s4 1.79 4 4"
        "c0 .88-.36 1.68-.93 2.25z"
    ),
    "logout": Glyph("M17 7l-1.41 1.41L18.17 11H8v2h10.17l-2.58 2.58L17 17l5-5zM4 5h8V3H4c-1.1 0-2 .9-2 2v14c0 1.1.9 2 2 2h8v-2H4V5z"),
    "search": Glyph(
        "M15.5 14h-.79l-.28-.27C15.41 12.59 16 11.11 16 9.5 16 5.91 13.09 3 9.5 3S3 5.91 3 9.5 5.91 16 9.5 16"
        "c1.61 0 3.09-.59 4.23-1.57l.27.28v.79l5 4.99L20.49 19l-4.99-5zm-6 0C7.01 14 5 11.99 5 9.5"
        "S7.01 5 9.5 5 14 7.01 14 9.5 11.99 14 9.5 14z"
    ),
    "expand_more": Glyph("M16.59 8.59L12 13.17 7.41 8.59 6 10l6 6 6-6z"),
    "add": Glyph("M19 13h-6v6h-2v-6H5v-2h6V5h2v6h6v2z"),
    "edit": Glyph(
        "M3 17.25V21h3.75L17.81 9.94l-3.75-3.75L3 17.25zM20.71 7.04c.39-.39.39-1.02 0-1.41l-2.34-2.34"
        "c-.39-.39-1.02-.39-1.41 0l-1.83 1.83 3.75 3.75 1.83-1.83z"
    ),
    "content_copy": Glyph(
        "M16 1H4c-1.1 0-2 .9-2 2v14h2V3h12V1zm3 4H8c-1.1 0-2 .9-2 2v14c0 1.1.9 2 2 2h11c1.1 0 2-.9 2-2V7"
        "c0-1.1-.9-2-2-2zm0 16H8V7h11v14z"
    ),
    "delete": Glyph("M6 19c0 1.1.9 2 2 2h8c1.1 0 2-.9 2-2V7H6v12zM19 4h-3.5l-1-1h-5l-1 1H5v2h14V4z"),
    "chevron_left": Glyph("M15.41 7.41L14 6l-6 6 6 6 1.41-1.41L10.83 12z"),
    "chevron_right": Glyph("M10 6L8.59 7.41 13.17 12l-4.58 4.59L10 18l6-6z"),
}


def lookup_glyph(name: str, table=None):
    """回傳 Glyph；找不到則回傳 None（呼叫端負責發出警告）。"""
    return (GLYPHS if table is None else table).get(name)


def view_box_size(view_box: str) -> tuple[float, float]:
    """viewBox → (寬, 高)；格式錯誤時退回 24×24。"""
    parts = view_box.replace(",", " ").split()
    try:
        width = float(parts[2]) if len(parts) > 2 else 0
        height = float(parts[3]) if len(parts) > 3 else 0
    except ValueError:
        width = height = 0
    return (width or 24.0, height or 24.0)
