import json
from pathlib import Path

from core.clipboard import ClipboardHistory
from utils.platform_utils import FileOperationError


def make_history(tmp_path: Path, **kwargs) -> ClipboardHistory:
    written = []
    kwargs.setdefault("read_clipboard", lambda: "")
    kwargs.setdefault("write_clipboard", written.append)
    history = ClipboardHistory(tmp_path / "clipboard.json", **kwargs)
    history.written = written
    return history


def test_add_is_most_recent_first(tmp_path: Path) -> None:
    history = make_history(tmp_path)
    history.add("first")
    history.add("second")
    assert [e.content for e in history.entries()] == ["second", "first"]


def test_add_ignores_empty_and_immediate_repeat(tmp_path: Path) -> None:
    history = make_history(tmp_path)
    assert history.add("same")
    assert not history.add("same")
    assert not history.add("")
    history.add("other")
    assert history.add("same")
    assert [e.content for e in history.entries()] == ["same", "other", "same"]


def test_history_is_bounded(tmp_path: Path) -> None:
    history = make_history(tmp_path, max_size=3)
    for i in range(5):
        history.add(f"item {i}")
    assert [e.content for e in history.entries()] == ["item 4", "item 3", "item 2"]


def test_copy_to_clipboard(tmp_path: Path) -> None:
    history = make_history(tmp_path)
    history.add("hello")
    assert history.copy_to_clipboard(0)
    assert history.written == ["hello"]
    assert not history.copy_to_clipboard(1)
    assert not history.copy_to_clipboard(-1)


def test_copy_failure_reports_false(tmp_path: Path) -> None:
    def broken(text):
        raise FileOperationError("no clipboard")

    history = make_history(tmp_path, write_clipboard=broken)
    history.add("hello")
    assert not history.copy_to_clipboard(0)


def test_persistence_round_trip(tmp_path: Path) -> None:
    history = make_history(tmp_path)
    history.add("a")
    history.add("b")
    history.save()

    data = json.loads((tmp_path / "clipboard.json").read_text(encoding="utf-8"))
    assert [item["content"] for item in data] == ["b", "a"]
    assert all(isinstance(item["timestamp"], int) for item in data)
    assert [e.content for e in make_history(tmp_path).entries()] == ["b", "a"]


def test_corrupt_file_gives_empty_history(tmp_path: Path) -> None:
    (tmp_path / "clipboard.json").write_text("[{]", encoding="utf-8")
    assert make_history(tmp_path).entries() == []

    (tmp_path / "clipboard.json").write_text(json.dumps([{"nope": 1}, {"content": "ok", "timestamp": 5}]),
                                             encoding="utf-8")
    assert [e.content for e in make_history(tmp_path).entries()] == ["ok"]


def test_poll_once_captures_changes(tmp_path: Path) -> None:
    current = {"text": "copied text"}
    history = make_history(tmp_path, read_clipboard=lambda: current["text"])

    last = history.poll_once("")
    assert last == "copied text"
    assert history.poll_once(last) == last
    assert len(history.entries()) == 1

    current["text"] = ""
    assert history.poll_once(last) == last
    assert len(history.entries()) == 1
