"""
DOM 擷取 — Playwright 無頭瀏覽器把 markup / URL 擷取成 raw 樹

在瀏覽器端一次走訪：元素邊界、computed style、每個字元的 Range 矩形。
回傳的 raw 樹交給 dom.DomElement.from_raw → converter.convert。
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Optional

from .converter import ConversionError
from .sanitizer import collect_css, rewrite_css_for_svg, sanitize_html_input

CONTAINER_ID = "figma-svg-hidden-renderer"
ROOT_CLASS = "hidden-renderer-root"


@dataclass
class CaptureConfig:
    """DOM 擷取設定."""
    viewport_width: int = 1440
    viewport_height: int = 900
    wait_timeout_ms: int = 10000
    settle_ms: int = 500
    dark_mode: bool = True
    load_tailwind: bool = True
    fetch_stylesheets: bool = True
    root_selector: Optional[str] = None


# 只擷取 core 會讀到的 computed style 屬性
STYLE_PROPS = [
    "display", "visibility", "opacity", "overflow", "overflow-x", "overflow-y",
    "background-color", "background-image",
    "border-top-width", "border-right-width", "border-bottom-width", "border-left-width",
    "border-top-style", "border-right-style", "border-bottom-style", "border-left-style",
    "border-top-color", "border-right-color", "border-bottom-color", "border-left-color",
    "border-top-left-radius", "border-top-right-radius",
    "border-bottom-right-radius", "border-bottom-left-radius",
    "box-shadow", "color", "font", "font-family", "font-size", "font-weight", "font-style",
    "letter-spacing", "line-height", "text-align",
]

CAPTURE_JS = """
({ selector, styleProps }) => {
    const root = document.querySelector(selector);
    if (!root) return null;
    const range = document.createRange();

    function toRect(r) {
        return { x: r.left, y: r.top, width: r.width, height: r.height };
    }

    function captureText(node) {
        const text = node.textContent || '';
        const charRects = [];
        for (let i = 0; i < text.length; i++) {
            range.setStart(node, i);
            range.setEnd(node, i + 1);
            const r = range.getBoundingClientRect();
            charRects.push(r ? toRect(r) : null);
        }
        return { type: 'text', text, charRects };
    }

    function captureElement(el) {
        const cs = window.getComputedStyle(el);
        const style = {};
        for (const prop of styleProps) style[prop] = cs.getPropertyValue(prop);
        const children = [];
        for (const child of el.childNodes) {
            if (child.nodeType === Node.TEXT_NODE) {
                if (child.textContent && child.textContent.trim()) children.push(captureText(child));
            } else if (child.nodeType === Node.ELEMENT_NODE) {
                children.push(captureElement(child));
            }
        }
        const className = typeof el.className === 'string' ? el.className : (el.getAttribute('class') || '');
        return {
            type: 'element',
            tag: el.tagName.toLowerCase(),
            id: el.id || '',
            className,
            classList: Array.from(el.classList || []),
            rect: toRect(el.getBoundingClientRect()),
            style,
            children,
        };
    }

    const tree = captureElement(root);
    range.detach && range.detach();
    return tree;
}
"""

COLLECT_STYLES_JS = """
(excludeAttr) => Array.from(document.querySelectorAll('style'))
    .filter((el) => !el.hasAttribute(excludeAttr))
    .map((el) => el.textContent || '')
    .filter(Boolean)
"""


def _import_playwright():
    try:
        from playwright.async_api import async_playwright
    except ImportError:
        raise ImportError(
            "請先安裝 playwright： pip install playwright && playwright install chromium"
        )
    return async_playwright


def build_host_page(markup: str, inline_css: str, dark_mode: bool = True) -> str:
    """產生離屏容器頁面：markup 掛在畫面外但仍參與排版。"""
    root_classes = f"{ROOT_CLASS} dark" if dark_mode else ROOT_CLASS
    style_block = f'<style data-inline-css="true">{inline_css}</style>' if inline_css else ""
    return (
        "<!doctype html><html><head><meta charset=\"utf-8\"></head><body>"
        f'<div id="{CONTAINER_ID}" aria-hidden="true" '
        'style="position:absolute;left:-100000px;top:0;width:100%;">'
        f'<div class="{root_classes}">{style_block}{markup}</div>'
        "</div></body></html>"
    )


async def capture_markup(html: str, config: Optional[CaptureConfig] = None) -> dict:
    """整頁 HTML → 清理 → 離屏掛載 →（可選）載入 Tailwind → 擷取 raw 樹。"""
    config = config or CaptureConfig()
    sanitized = sanitize_html_input(html)
    if not sanitized.markup:
        raise ConversionError("Markup could not be parsed.")

    css = rewrite_css_for_svg(collect_css(sanitized, fetch=config.fetch_stylesheets))
    async_playwright = _import_playwright()

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=True)
        context = await browser.new_context(
            viewport={"width": config.viewport_width, "height": config.viewport_height}
        )
        page = await context.new_page()
        await page.set_content(build_host_page(sanitized.markup, css, config.dark_mode),
                               timeout=config.wait_timeout_ms)

        if config.load_tailwind and sanitized.tailwind_cdn_url:
            if sanitized.tailwind_config_inline:
                await page.add_script_tag(content=sanitized.tailwind_config_inline)
            try:
                await page.add_script_tag(url=sanitized.tailwind_cdn_url)
                # 等 Tailwind 掃描 DOM 並產生 utility 規則
                await page.wait_for_timeout(config.settle_ms)
            except Exception as e:
                print(f"   ⚠️  Tailwind CDN 載入失敗，略過：{e}")
            generated = await page.evaluate(COLLECT_STYLES_JS, "data-inline-css")
            if generated:
                css = "\n".join(part for part in [css, rewrite_css_for_svg("\n".join(generated))] if part)

        selector = config.root_selector or f"#{CONTAINER_ID} > .{ROOT_CLASS}"
        raw_tree = await page.evaluate(CAPTURE_JS, {"selector": selector, "styleProps": STYLE_PROPS})
        await browser.close()

    return {
        "tree": raw_tree,
        "inlineCss": css,
        "viewport": {"width": config.viewport_width, "height": config.viewport_height},
    }


async def capture_url(url: str, config: Optional[CaptureConfig] = None) -> dict:
    """開啟 URL 並擷取 root_selector 對應的元素（預設 body）。"""
    config = config or CaptureConfig()
    async_playwright = _import_playwright()

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=True)
        context = await browser.new_context(
            viewport={"width": config.viewport_width, "height": config.viewport_height}
        )
        page = await context.new_page()
        await page.goto(url, wait_until="networkidle", timeout=config.wait_timeout_ms)
        await page.wait_for_timeout(config.settle_ms)

        styles = await page.evaluate(COLLECT_STYLES_JS, "data-figma-svg-ignore")
        selector = config.root_selector or "body"
        raw_tree = await page.evaluate(CAPTURE_JS, {"selector": selector, "styleProps": STYLE_PROPS})
        await browser.close()

    return {
        "tree": raw_tree,
        "inlineCss": rewrite_css_for_svg("\n".join(styles)),
        "viewport": {"width": config.viewport_width, "height": config.viewport_height},
    }


def capture_markup_sync(html: str, config: Optional[CaptureConfig] = None) -> dict:
    """capture_markup 的同步包裝."""
    return asyncio.run(capture_markup(html, config))


def capture_url_sync(url: str, config: Optional[CaptureConfig] = None) -> dict:
    """capture_url 的同步包裝."""
    return asyncio.run(capture_url(url, config))


def save_capture(result: dict, path: str) -> str:
    """把 raw 擷取結果存成 JSON（可離線重跑 convert）。"""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(result, f, indent=2, ensure_ascii=False)
    return path
