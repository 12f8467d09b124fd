"""設定檔載入與基本驗證."""

import json
from pathlib import Path
from typing import Any

from .dom_capture import CaptureConfig

DEFAULT_CONFIG_PATH = "figma-svg.config.json"

# 已知有效的頂層欄位
_KNOWN_TOP_KEYS = {"capture", "output", "watch"}

# 各區塊已知欄位（用於拼字提示）
_KNOWN_SECTION_KEYS = {
    "capture": {
        "viewportWidth", "viewportHeight", "waitTimeoutMs", "settleMs",
        "darkMode", "tailwind", "fetchStylesheets", "selector",
    },
    "output": {"outDir", "inlineCss", "dumpTree"},
    "watch": {"debounce"},
}

_NUMERIC_KEYS = {
    "capture": ("viewportWidth", "viewportHeight", "waitTimeoutMs", "settleMs"),
    "watch": ("debounce",),
}
_BOOLEAN_KEYS = {
    "capture": ("darkMode", "tailwind", "fetchStylesheets"),
    "output": ("inlineCss",),
}


def _warn(msg: str) -> None:
    print(f"   ⚠️  [config] {msg}")


def validate_config(cfg: dict) -> None:
    """對 config 做基本欄位驗證，印出警告但不拋例外。"""
    if not cfg:
        return

    # 頂層未知欄位
    for key in cfg:
        if key not in _KNOWN_TOP_KEYS:
            known = ", ".join(sorted(_KNOWN_TOP_KEYS))
            _warn(f"未知頂層欄位 '{key}'（已知欄位：{known}）")

    # 各區塊欄位
    for section, known_keys in _KNOWN_SECTION_KEYS.items():
        section_cfg = cfg.get(section, {})
        if not isinstance(section_cfg, dict):
            _warn(f"'{section}' 應為 JSON 物件，目前是 {type(section_cfg).__name__}")
            continue
        for key in section_cfg:
            if key not in known_keys:
                known = ", ".join(sorted(known_keys))
                _warn(f"[{section}] 未知欄位 '{key}'（已知欄位：{known}）")

    # 值類型（bool 也是 int，要先排除）
    for section, keys in _NUMERIC_KEYS.items():
        section_cfg = cfg.get(section, {})
        if not isinstance(section_cfg, dict):
            continue
        for key in keys:
            val = section_cfg.get(key)
            if val is not None and (isinstance(val, bool) or not isinstance(val, (int, float))):
                _warn(f"{section}.{key} 應為數字，目前是 {type(val).__name__}")

    for section, keys in _BOOLEAN_KEYS.items():
        section_cfg = cfg.get(section, {})
        if not isinstance(section_cfg, dict):
            continue
        for key in keys:
            val = section_cfg.get(key)
            if val is not None and not isinstance(val, bool):
                _warn(f"{section}.{key} 應為 true/false，目前是 {type(val).__name__}")

    # outDir 存在性提示（不強制，convert 時會自動建立）
    out_dir = cfg.get("output", {}).get("outDir") if isinstance(cfg.get("output"), dict) else None
    if out_dir and not Path(out_dir).exists():
        _warn(f"output.outDir '{out_dir}' 目錄不存在，輸出時會自動建立")


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> dict:
    """載入 JSON 設定檔，不存在則回傳空 dict；存在則做基本驗證。"""
    path = Path(config_path)
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        cfg: Any = json.load(f)
    if not isinstance(cfg, dict):
        print(f"   ⚠️  [config] '{config_path}' 格式錯誤，應為 JSON 物件，回傳空設定。")
        return {}
    validate_config(cfg)
    return cfg


def _section(cfg: dict, name: str) -> dict:
    section = cfg.get(name, {})
    return section if isinstance(section, dict) else {}


def _int(value, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return int(value)


def capture_config_from(cfg: dict) -> CaptureConfig:
    """config['capture'] → CaptureConfig；缺的欄位沿用預設值。"""
    capture = _section(cfg, "capture")
    defaults = CaptureConfig()
    return CaptureConfig(
        viewport_width=_int(capture.get("viewportWidth"), defaults.viewport_width),
        viewport_height=_int(capture.get("viewportHeight"), defaults.viewport_height),
        wait_timeout_ms=_int(capture.get("waitTimeoutMs"), defaults.wait_timeout_ms),
        settle_ms=_int(capture.get("settleMs"), defaults.settle_ms),
        dark_mode=bool(capture.get("darkMode", defaults.dark_mode)),
        load_tailwind=bool(capture.get("tailwind", defaults.load_tailwind)),
        fetch_stylesheets=bool(capture.get("fetchStylesheets", defaults.fetch_stylesheets)),
        root_selector=capture.get("selector") or defaults.root_selector,
    )


def output_options_from(cfg: dict) -> dict:
    output = _section(cfg, "output")
    return {
        "out_dir": output.get("outDir") or ".",
        "inline_css": bool(output.get("inlineCss", True)),
        "dump_tree": bool(output.get("dumpTree", False)),
    }


def watch_debounce_from(cfg: dict) -> float:
    debounce = _section(cfg, "watch").get("debounce", 1.0)
    return float(debounce) if isinstance(debounce, (int, float)) and not isinstance(debounce, bool) else 1.0
