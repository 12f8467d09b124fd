"""
Watch Mode / SourceChangeHandler 單元測試
只有來源檔本身與同目錄的 .css 會觸發重新轉換；用 mock event 測試，不啟動 Observer。
"""
import asyncio
import time
from unittest.mock import MagicMock, patch

import pytest

from figma_svg.cli import SourceChangeHandler, main


def make_event(src_path, is_directory=False, dest_path=None):
    ev = MagicMock()
    ev.is_directory = is_directory
    ev.src_path = str(src_path)
    ev.dest_path = str(dest_path) if dest_path is not None else ""
    return ev


@pytest.fixture
def loop():
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


def make_handler(source, loop, debounce=0.0):
    async def reconvert():
        pass

    return SourceChangeHandler(str(source), reconvert, loop, debounce=debounce)


def fired(handler, method, event) -> bool:
    with patch("asyncio.run_coroutine_threadsafe") as mock_run:
        getattr(handler, method)(event)
        if mock_run.called:
            # 送出的 coroutine 沒有真的跑，關掉避免 never-awaited 警告
            mock_run.call_args[0][0].close()
        return mock_run.called


# ─── 哪些檔案算「相關」 ─────────────────────────────────────────────────────

class TestRelevantPaths:

    def setup_method(self):
        self.loop = asyncio.new_event_loop()

    def teardown_method(self):
        self.loop.close()

    def test_source_file_triggers(self, tmp_path):
        handler = make_handler(tmp_path / "page.html", self.loop)
        assert fired(handler, "on_modified", make_event(tmp_path / "page.html"))

    def test_relative_source_matches_absolute_event(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        handler = make_handler("page.html", self.loop)
        assert fired(handler, "on_modified", make_event(tmp_path / "page.html"))

    def test_sibling_css_triggers(self, tmp_path):
        handler = make_handler(tmp_path / "page.html", self.loop)
        assert fired(handler, "on_modified", make_event(tmp_path / "theme.CSS"))

    def test_other_html_in_same_dir_ignored(self, tmp_path):
        handler = make_handler(tmp_path / "page.html", self.loop)
        assert not fired(handler, "on_modified", make_event(tmp_path / "other.html"))

    def test_css_in_other_directory_ignored(self, tmp_path):
        handler = make_handler(tmp_path / "page.html", self.loop)
        assert not fired(handler, "on_modified", make_event(tmp_path / "vendor" / "lib.css"))

    def test_own_outputs_ignored(self, tmp_path):
        handler = make_handler(tmp_path / "page.html", self.loop)
        for name in ("page.svg", "page.tree.json", "capture.json"):
            assert not fired(handler, "on_modified", make_event(tmp_path / name)), name

    def test_directory_event_ignored(self, tmp_path):
        handler = make_handler(tmp_path / "page.html", self.loop)
        assert not fired(handler, "on_modified", make_event(tmp_path, is_directory=True))


# ─── 編輯器的存檔方式 ───────────────────────────────────────────────────────

class TestEditorSaves:

    def test_atomic_rename_onto_source_triggers(self, tmp_path, loop):
        handler = make_handler(tmp_path / "page.html", loop)
        ev = make_event(tmp_path / ".page.html.swp", dest_path=tmp_path / "page.html")
        assert fired(handler, "on_moved", ev)

    def test_rename_away_from_source_ignored(self, tmp_path, loop):
        handler = make_handler(tmp_path / "page.html", loop)
        ev = make_event(tmp_path / "page.html", dest_path=tmp_path / "page.html.bak")
        assert not fired(handler, "on_moved", ev)

    def test_recreated_source_triggers(self, tmp_path, loop):
        handler = make_handler(tmp_path / "page.html", loop)
        assert fired(handler, "on_created", make_event(tmp_path / "page.html"))

    def test_callback_scheduled_on_handler_loop(self, tmp_path, loop):
        handler = make_handler(tmp_path / "page.html", loop)
        with patch("asyncio.run_coroutine_threadsafe") as mock_run:
            handler.on_modified(make_event(tmp_path / "page.html"))
            assert mock_run.call_args[0][1] is loop
            mock_run.call_args[0][0].close()


# ─── debounce ───────────────────────────────────────────────────────────────

class TestDebounce:
    """同一次存檔常連發 modified + moved，debounce 視窗內只轉一次。"""

    def test_burst_of_events_converts_once(self, tmp_path, loop):
        handler = make_handler(tmp_path / "page.html", loop, debounce=0.5)
        with patch("asyncio.run_coroutine_threadsafe") as mock_run:
            handler.on_modified(make_event(tmp_path / "page.html"))
            handler.on_modified(make_event(tmp_path / "theme.css"))
            handler.on_moved(make_event(tmp_path / "x.tmp", dest_path=tmp_path / "page.html"))
            assert mock_run.call_count == 1
            mock_run.call_args[0][0].close()

    def test_irrelevant_event_does_not_consume_window(self, tmp_path, loop):
        handler = make_handler(tmp_path / "page.html", loop, debounce=0.5)
        with patch("asyncio.run_coroutine_threadsafe") as mock_run:
            handler.on_modified(make_event(tmp_path / "page.svg"))
            handler.on_modified(make_event(tmp_path / "page.html"))
            assert mock_run.call_count == 1
            mock_run.call_args[0][0].close()

    def test_event_after_window_converts_again(self, tmp_path, loop):
        handler = make_handler(tmp_path / "page.html", loop, debounce=0.5)
        with patch("asyncio.run_coroutine_threadsafe") as mock_run:
            handler.on_modified(make_event(tmp_path / "page.html"))
            handler.last_trigger = time.time() - 1.0
            handler.on_modified(make_event(tmp_path / "page.html"))
            assert mock_run.call_count == 2
            for call in mock_run.call_args_list:
                call[0][0].close()


# ─── watch 來源檢查 ─────────────────────────────────────────────────────────

class TestWatchSource:
    """watch 只能監聽本機檔案，其他來源直接回報錯誤，不啟動 Observer。"""

    def run_watch(self, tmp_path, source):
        config = ["--config", str(tmp_path / "missing.config.json")]
        with patch("figma_svg.cli.Observer") as mock_observer:
            code = main(config + ["watch", source])
            mock_observer.assert_not_called()
        return code

    def test_stdin_rejected(self, tmp_path, capsys):
        assert self.run_watch(tmp_path, "-") == 1
        assert "❌" in capsys.readouterr().out

    def test_url_rejected(self, tmp_path, capsys):
        assert self.run_watch(tmp_path, "http://localhost:5173") == 1
        out = capsys.readouterr().out
        assert "❌" in out
        assert "http://localhost:5173" in out

    def test_missing_file_rejected(self, tmp_path, capsys):
        assert self.run_watch(tmp_path, str(tmp_path / "nope.html")) == 1
        assert "❌" in capsys.readouterr().out
