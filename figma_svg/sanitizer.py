"""
Markup sanitizer — 貼上的整頁 HTML → 可掛載的 markup + 收集到的 CSS。

移除 doctype / script / style / stylesheet link，保留 Tailwind CDN 位址與
inline tailwind.config，之後由 dom_capture 在瀏覽器中重新載入。
"""

import re
from dataclasses import dataclass, field
from typing import Optional

import requests
from bs4 import BeautifulSoup, Comment, Doctype

TAILWIND_CDN_PREFIX = "https://cdn.tailwindcss.com"
TAILWIND_CONFIG_RE = re.compile(r"tailwind\.config\s*=\s*\{[\s\S]*?\}", re.IGNORECASE)

# CSS 改寫時要對應到 SVG 群組的 HTML tag
REWRITE_TAGS = (
    "div", "span", "p", "h1", "h2", "h3", "h4", "h5", "h6", "section", "article",
    "header", "footer", "nav", "main", "aside", "ul", "ol", "li", "button", "a",
)


@dataclass
class SanitizedMarkup:
    markup: str = ""
    inline_css: str = ""
    stylesheet_links: list = field(default_factory=list)
    tailwind_cdn_url: Optional[str] = None
    tailwind_config_inline: Optional[str] = None


def sanitize_html_input(value: str) -> SanitizedMarkup:
    trimmed = (value or "").strip()
    if not trimmed:
        return SanitizedMarkup()

    result = SanitizedMarkup()
    soup = BeautifulSoup(trimmed, "html.parser")

    # doctype 與註解不參與排版
    for node in list(soup.descendants):
        if isinstance(node, (Comment, Doctype)):
            node.extract()

    for script in soup.find_all("script"):
        src = (script.get("src") or "").strip()
        if src.startswith(TAILWIND_CDN_PREFIX):
            result.tailwind_cdn_url = src
        else:
            config = TAILWIND_CONFIG_RE.search(script.string or "")
            if config:
                result.tailwind_config_inline = config.group(0)
        script.decompose()

    style_blocks = []
    for style in soup.find_all("style"):
        css = (style.string or "").strip()
        if css:
            style_blocks.append(css)
        style.decompose()

    for link in soup.find_all("link", rel="stylesheet"):
        href = (link.get("href") or "").strip()
        if href:
            result.stylesheet_links.append(href)
        link.decompose()

    if soup.body:
        result.markup = soup.body.decode_contents().strip()
    elif soup.html:
        result.markup = soup.html.decode_contents().strip()
    else:
        result.markup = soup.decode_contents().strip()

    imports = [f"@import url('{href}');" for href in result.stylesheet_links]
    result.inline_css = "\n".join(part for part in imports + style_blocks if part)
    return result


def fetch_stylesheets(links: list, timeout: float = 10) -> str:
    """逐一下載外部樣式表；單一連結失敗只當作空內容，不中止整個轉換。"""
    fetched = []
    for href in links:
        try:
            resp = requests.get(href, timeout=timeout)
        except requests.RequestException as e:
            print(f"   ⚠️  [css] 無法下載 {href}: {e}")
            continue
        if resp.status_code != 200:
            print(f"   ⚠️  [css] {href} 回應 {resp.status_code}，略過")
            continue
        if resp.text:
            fetched.append(resp.text)
    return "\n".join(fetched)


def collect_css(sanitized: SanitizedMarkup, fetch: bool = True, timeout: float = 10) -> str:
    """外部樣式表能下載就直接內嵌，否則沿用 inline_css 中的 @import。"""
    css = sanitized.inline_css
    if fetch and sanitized.stylesheet_links:
        inlined = fetch_stylesheets(sanitized.stylesheet_links, timeout=timeout)
        if inlined:
            css = "\n".join(part for part in (inlined, sanitized.inline_css) if part)
    return css


def rewrite_css_for_svg(css: str) -> str:
    """把 HTML 導向的 CSS 改寫成能作用在輸出 SVG 結構上的規則。"""
    if not css:
        return css
    out = css
    for tag in REWRITE_TAGS:
        pattern = re.compile(rf"(^|[\n\r\s,{{]){tag}(?=[\n\r\s,{{.:#\[]|$)", re.IGNORECASE)
        out = pattern.sub(
            lambda m, t=tag: f'{m.group(1)}g[data-tag="{t}"], text[data-tag="{t}"]',
            out,
        )
    # border-color / outline-color 要比 color 先處理
    out = re.sub(r"border-color\s*:\s*([^;]+);", r"stroke: \1;", out, flags=re.IGNORECASE)
    out = re.sub(r"border-width\s*:\s*([^;]+);", r"stroke-width: \1;", out, flags=re.IGNORECASE)
    out = re.sub(r"outline-color\s*:\s*([^;]+);", r"stroke: \1;", out, flags=re.IGNORECASE)
    out = re.sub(r"outline-width\s*:\s*([^;]+);", r"stroke-width: \1;", out, flags=re.IGNORECASE)
    out = re.sub(r"background-color\s*:\s*([^;]+);", r"fill: \1;", out, flags=re.IGNORECASE)
    out = re.sub(r"(?<![-\w])color\s*:\s*([^;]+);", r"fill: \1;", out, flags=re.IGNORECASE)
    out = re.sub(r"text-align\s*:\s*center\s*;", "text-anchor: middle;", out, flags=re.IGNORECASE)
    out = re.sub(r"text-align\s*:\s*right\s*;", "text-anchor: end;", out, flags=re.IGNORECASE)
    return out
