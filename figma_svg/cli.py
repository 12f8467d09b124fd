#!/usr/bin/env python3
"""
figma-svg CLI — HTML → Figma 可貼上的 SVG

  python -m figma_svg.cli convert page.html -o page.svg     # 轉換
  python -m figma_svg.cli convert http://localhost:5173 --selector '#app'
  python -m figma_svg.cli preview page.html                 # 預覽節點樹
  python -m figma_svg.cli watch page.html -o page.svg       # 檔案變更時自動轉換
"""

import argparse
import asyncio
import json
import os
import sys
import threading
import time
from dataclasses import replace
from pathlib import Path
from typing import Optional

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from figma_svg import __version__
from .config import DEFAULT_CONFIG_PATH, capture_config_from, load_config, output_options_from, watch_debounce_from
from .converter import ConversionError, ConvertOptions, convert_with_tree, snapshot
from .dom_capture import capture_markup, capture_url, save_capture
from .nodes import count_nodes, node_to_dict, preview_tree


def _viewport(value: str) -> tuple[int, int]:
    try:
        w, h = value.lower().split("x")
        return int(w), int(h)
    except ValueError:
        raise argparse.ArgumentTypeError(f"viewport 格式應為 WxH（例如 1280x800），收到 '{value}'")


def _capture_config(args, config: dict):
    capture_cfg = capture_config_from(config)
    if getattr(args, "viewport", None):
        w, h = args.viewport
        capture_cfg = replace(capture_cfg, viewport_width=w, viewport_height=h)
    if getattr(args, "selector", None):
        capture_cfg = replace(capture_cfg, root_selector=args.selector)
    if getattr(args, "no_tailwind", False):
        capture_cfg = replace(capture_cfg, load_tailwind=False)
    return capture_cfg


async def load_capture(source: str, args, config: dict) -> dict:
    """依來源類型取得 raw 擷取結果：.json 擷取檔 / URL / HTML 檔 / stdin。"""
    if source.endswith(".json") and Path(source).is_file():
        with open(source, "r", encoding="utf-8") as f:
            data = json.load(f)
        # 接受 save_capture 的完整輸出，或單純的 raw 樹
        return data if "tree" in data else {"tree": data, "inlineCss": ""}

    capture_cfg = _capture_config(args, config)
    if source.startswith(("http://", "https://")):
        return await capture_url(source, capture_cfg)

    if source == "-":
        html = sys.stdin.read()
    else:
        with open(source, "r", encoding="utf-8") as f:
            html = f.read()
    return await capture_markup(html, capture_cfg)


def _default_output(source: str, out_dir: str) -> str:
    if source == "-" or source.startswith(("http://", "https://")):
        stem = "output"
    else:
        stem = Path(source).stem
    return os.path.join(out_dir, f"{stem}.svg")


async def perform_convert(source: str, args, config: dict) -> bool:
    """Core convert logic, shared by convert and watch commands."""
    print(f"🚀 Converting: {source}")
    output_cfg = output_options_from(config)

    try:
        result = await load_capture(source, args, config)
    except ConversionError as e:
        print(f"   ❌ {e}")
        return False
    except Exception as e:
        print(f"   ❌ Capture failed for {source}: {e}")
        return False

    inline_css = None
    if output_cfg["inline_css"] and not getattr(args, "no_css", False):
        inline_css = result.get("inlineCss") or None
    options = ConvertOptions(inline_css=inline_css)

    try:
        tree, svg = convert_with_tree(result.get("tree"), options)
    except ConversionError as e:
        print(f"   ❌ {e}")
        return False
    print(f"   ✅ Captured {count_nodes(tree)} nodes")

    out_path = getattr(args, "output", None) or _default_output(source, output_cfg["out_dir"])
    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(svg)
    print(f"   ✅ Saved SVG to {out_path}")

    dump_path = getattr(args, "dump_tree", None)
    if not dump_path and output_cfg["dump_tree"]:
        dump_path = str(Path(out_path).with_suffix(".tree.json"))
    if dump_path:
        with open(dump_path, "w", encoding="utf-8") as f:
            json.dump(node_to_dict(tree), f, indent=2, ensure_ascii=False)
        print(f"   📄 Node tree saved to {dump_path}")

    capture_path = getattr(args, "save_capture", None)
    if capture_path:
        save_capture(result, capture_path)
        print(f"   📸 Raw capture saved to {capture_path}")
    return True


def cmd_convert(args, config: dict) -> int:
    """Convert: 擷取 → 節點樹 → SVG."""
    ok = asyncio.run(perform_convert(args.source, args, config))
    return 0 if ok else 1


def cmd_preview(args, config: dict) -> int:
    """預覽節點樹."""
    print(f"👁️  Preview node tree: {args.source}")
    try:
        result = asyncio.run(load_capture(args.source, args, config))
        tree = snapshot(result.get("tree"))
    except ConversionError as e:
        print(f"❌ {e}")
        return 1
    except Exception as e:
        print(f"❌ Capture failed for {args.source}: {e}")
        return 1
    print(preview_tree(tree))
    print(f"\nTotal nodes: {count_nodes(tree)}")
    return 0


class SourceChangeHandler(FileSystemEventHandler):
    """只在來源檔本身或同目錄的 .css 變更時重新轉換，帶 debounce。

    編輯器常用「寫暫存檔再 rename」存檔，所以 moved / created 事件也要看。
    """

    def __init__(self, source: str, callback, loop: asyncio.AbstractEventLoop, debounce: float = 1.0):
        self.source = Path(source).resolve()
        self.callback = callback
        self.loop = loop
        self.debounce_seconds = debounce
        self.last_trigger = 0.0

    def is_relevant(self, path: str) -> bool:
        changed = Path(path).resolve()
        if changed == self.source:
            return True
        return changed.parent == self.source.parent and changed.suffix.lower() == ".css"

    def _handle(self, path: str) -> None:
        if not self.is_relevant(path):
            return
        now = time.time()
        if now - self.last_trigger < self.debounce_seconds:
            return
        self.last_trigger = now
        print(f"\n🔄 {Path(path).name} changed, re-converting...")
        asyncio.run_coroutine_threadsafe(self.callback(), self.loop)

    def on_modified(self, event):
        if not event.is_directory:
            self._handle(event.src_path)

    def on_created(self, event):
        if not event.is_directory:
            self._handle(event.src_path)

    def on_moved(self, event):
        if not event.is_directory:
            self._handle(event.dest_path)


def _watchable_source(source: str) -> Optional[str]:
    """watch 只接受本機檔案；URL 與 stdin 無法監聽，回傳錯誤訊息。"""
    if source == "-":
        return "watch 不支援 stdin（'-'），請指定 HTML 檔案"
    if source.startswith(("http://", "https://")):
        return f"watch 不支援 URL：{source}，請改用 convert"
    if not Path(source).is_file():
        return f"找不到檔案：{source}"
    return None


def _start_background_loop() -> asyncio.AbstractEventLoop:
    """event loop 在 daemon 執行緒 run_forever；watchdog 執行緒透過 threadsafe 排程。"""
    loop = asyncio.new_event_loop()

    def run():
        asyncio.set_event_loop(loop)
        loop.run_forever()

    threading.Thread(target=run, daemon=True).start()
    return loop


def cmd_watch(args, config: dict) -> int:
    """Watch: 來源檔或旁邊的 CSS 存檔時自動重新轉換."""
    error = _watchable_source(args.source)
    if error:
        print(f"❌ {error}")
        return 1

    source = args.source
    loop = _start_background_loop()

    async def reconvert():
        await perform_convert(source, args, config)

    # 先轉一次，之後才開始監聽
    try:
        asyncio.run_coroutine_threadsafe(reconvert(), loop).result(timeout=120)
    except Exception as e:
        print(f"   ⚠️  Initial convert failed: {e}")

    handler = SourceChangeHandler(source, reconvert, loop, debounce=watch_debounce_from(config))
    observer = Observer()
    observer.schedule(handler, path=str(handler.source.parent), recursive=False)
    observer.start()
    print(f"👀 Watching {handler.source.name} (+ *.css in {handler.source.parent})")
    print("   Press Ctrl+C to stop.")

    try:
        while observer.is_alive():
            observer.join(1)
    except KeyboardInterrupt:
        print("\n👋 Stopping watch...")
    finally:
        observer.stop()
        observer.join()
        loop.call_soon_threadsafe(loop.stop)
    return 0


def _add_capture_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("source", help="HTML file, '-' for stdin, http(s) URL, or a saved .json capture")
    p.add_argument("--viewport", type=_viewport, help="WxH e.g. 1280x800")
    p.add_argument("--selector", help="CSS selector of the element to capture")
    p.add_argument("--no-tailwind", action="store_true", help="Do not load the Tailwind CDN runtime")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="figma-svg",
        description="figma-svg: HTML → self-contained SVG",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Config path")
    parser.add_argument("--version", "-v", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command")

    convert_p = sub.add_parser("convert", help="HTML → SVG",
        epilog="Examples:\n  figma-svg convert page.html -o page.svg\n  figma-svg convert http://localhost:5173 --selector '#app'",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    _add_capture_args(convert_p)
    convert_p.add_argument("--output", "-o", help="Output SVG path")
    convert_p.add_argument("--no-css", action="store_true", help="Do not embed collected CSS in <defs>")
    convert_p.add_argument("--dump-tree", help="Write the captured node tree as JSON")
    convert_p.add_argument("--save-capture", help="Write the raw browser capture as JSON")

    preview_p = sub.add_parser("preview", help="Preview node tree",
        epilog="Examples:\n  figma-svg preview page.html\n  figma-svg preview capture.json",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    _add_capture_args(preview_p)

    watch_p = sub.add_parser("watch", help="Watch an HTML file and re-convert on change",
        epilog="Examples:\n  figma-svg watch page.html -o page.svg",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    _add_capture_args(watch_p)
    watch_p.add_argument("--output", "-o", help="Output SVG path")
    watch_p.add_argument("--no-css", action="store_true", help="Do not embed collected CSS in <defs>")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = load_config(args.config)

    if args.command == "convert":
        return cmd_convert(args, config)
    if args.command == "preview":
        return cmd_preview(args, config)
    if args.command == "watch":
        return cmd_watch(args, config)
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
