import threading
from types import SimpleNamespace
from pathlib import Path

import core.file_index as file_index_module
from core.data_structures import STATE_IDLE, STATE_INDEXING, STATE_READY
from core.file_index import (
    ESTIMATE_DIR_WEIGHT, PROGRESS_INTERVAL, FileIndex, default_scan_roots, estimate_count,
    should_skip_dir, walk_files
)
from tests.conftest import make_files

DOC_FILES = [
    "report.txt",
    "notes.md",
    "sub/Report-Final.PDF",
    "node_modules/pkg/report.js",
    ".git/objects/report",
    "build/report.o",
    "deep/er/still/photo.jpg",
]


def build_index(root: Path, **kwargs) -> FileIndex:
    index = FileIndex(roots=[root], **kwargs)
    thread = index.start()
    thread.join(timeout=10)
    assert not thread.is_alive()
    return index


def test_should_skip_dir() -> None:
    assert should_skip_dir(".git")
    assert should_skip_dir(".venv")
    assert should_skip_dir("node_modules")
    assert should_skip_dir("$RECYCLE.BIN")
    assert not should_skip_dir("Documents")
    assert not should_skip_dir("src")


def test_walk_prunes_skipped_directories(tmp_path: Path) -> None:
    make_files(tmp_path, DOC_FILES)
    paths = {Path(e.path).relative_to(tmp_path).as_posix() for e in walk_files(tmp_path)}
    assert paths == {"report.txt", "notes.md", "sub/Report-Final.PDF", "deep/er/still/photo.jpg"}


def test_walk_does_not_descend_into_skipped_directories(tmp_path: Path, monkeypatch) -> None:
    make_files(tmp_path, DOC_FILES)
    visited = []
    real_walk = file_index_module.os.walk

    def tracking_walk(top, *args, **kwargs):
        for dirpath, dirnames, filenames in real_walk(top, *args, **kwargs):
            visited.append(Path(dirpath).name)
            yield dirpath, dirnames, filenames

    monkeypatch.setattr(file_index_module.os, "walk", tracking_walk)
    list(walk_files(tmp_path))
    assert "node_modules" not in visited
    assert "pkg" not in visited
    assert ".git" not in visited
    assert "still" in visited


def test_file_entry_fields(tmp_path: Path) -> None:
    make_files(tmp_path, ["sub/Report-Final.PDF"])
    (entry,) = list(walk_files(tmp_path))
    assert entry.name == "Report-Final.PDF"
    assert entry.ext == ".pdf"
    assert entry.directory == str(tmp_path / "sub")
    assert entry.size == 1


def test_estimate_count_weights_directories(tmp_path: Path) -> None:
    make_files(tmp_path, ["a.txt", "b.txt", "sub/c.txt"])
    assert estimate_count(tmp_path) == 2 + ESTIMATE_DIR_WEIGHT
    assert estimate_count(tmp_path / "missing") == 0


def test_default_scan_roots(tmp_path: Path) -> None:
    roots = default_scan_roots(home=tmp_path)
    assert [r.name for r in roots] == ["Desktop", "Documents", "Downloads", "Pictures", "Videos", "Music"]

    (tmp_path / "Projects").mkdir()
    extra = tmp_path / "elsewhere"
    extra.mkdir()
    roots = default_scan_roots(home=tmp_path, extra_roots=[str(extra), str(tmp_path / "gone")])
    assert roots[-2:] == [tmp_path / "Projects", extra]


def test_initial_status_is_idle() -> None:
    index = FileIndex(roots=[])
    assert index.status().state == STATE_IDLE
    assert index.search_files("anything") == []


def test_scan_builds_snapshot(tmp_path: Path) -> None:
    make_files(tmp_path, DOC_FILES)
    index = build_index(tmp_path)

    status = index.status()
    assert status.state == STATE_READY
    assert status.count == status.total == 4
    assert len(index.files()) == 4
    assert sorted(index.names()) == ["Report-Final.PDF", "notes.md", "photo.jpg", "report.txt"]


def test_search_is_case_insensitive_on_name_or_path(tmp_path: Path) -> None:
    make_files(tmp_path, DOC_FILES)
    index = build_index(tmp_path)

    assert {e.name for e in index.search_files("REPORT")} == {"report.txt", "Report-Final.PDF"}
    # matches through a directory name in the path
    assert [e.name for e in index.search_files("er/still")] == ["photo.jpg"]
    assert index.search_files("") == []


def test_search_caps_results_in_snapshot_order(tmp_path: Path) -> None:
    make_files(tmp_path, [f"file_{i:02d}.txt" for i in range(20)])
    index = build_index(tmp_path)

    results = index.search_files("file_")
    assert len(results) == 15
    assert results == [f for f in index.files() if "file_" in f.name][:15]
    assert len(index.search_files("file_", limit=3)) == 3


def test_clear_index(tmp_path: Path) -> None:
    make_files(tmp_path, DOC_FILES)
    index = build_index(tmp_path)
    assert index.search_files("report")

    index.clear_index()
    assert index.status().state == STATE_IDLE
    assert index.search_files("report") == []
    assert index.files() == []


def test_reindex_replaces_snapshot(tmp_path: Path) -> None:
    make_files(tmp_path, ["one.txt"])
    index = build_index(tmp_path)
    assert index.status().count == 1

    make_files(tmp_path, ["two.txt"])
    index.reindex().join(timeout=10)
    assert index.status().count == 2
    assert {e.name for e in index.search_files(".txt")} == {"one.txt", "two.txt"}


def test_observers_receive_transitions_in_order(tmp_path: Path) -> None:
    make_files(tmp_path, ["a.txt"])
    seen = []
    ready = threading.Event()

    def on_status(status):
        seen.append(status)
        if status.state == STATE_READY:
            ready.set()

    build_index(tmp_path, on_status=on_status)
    assert ready.wait(timeout=5)
    assert seen[0].state == STATE_INDEXING
    assert seen[-1].state == STATE_READY
    assert seen[-1].count == 1


def test_slow_observer_does_not_block_scan(tmp_path: Path) -> None:
    make_files(tmp_path, ["a.txt"])
    release = threading.Event()
    index = FileIndex(roots=[tmp_path], on_status=lambda status: release.wait(timeout=10))

    thread = index.start()
    thread.join(timeout=5)
    try:
        assert not thread.is_alive()
        assert index.status().state == STATE_READY
    finally:
        release.set()


def test_failing_observer_does_not_stop_delivery(tmp_path: Path) -> None:
    make_files(tmp_path, ["a.txt"])
    ready = threading.Event()

    def broken(status):
        raise RuntimeError("boom")

    index = FileIndex(roots=[tmp_path], on_status=broken)
    index.subscribe(lambda s: s.state == STATE_READY and ready.set())
    index.start().join(timeout=10)
    assert ready.wait(timeout=5)


def _block_first_estimate(monkeypatch):
    """Make the first scan pause in its estimate step until released."""
    gate = threading.Event()
    entered = threading.Event()
    calls = []
    real_estimate = file_index_module.estimate_count

    def estimate(directory):
        calls.append(directory)
        if len(calls) == 1:
            entered.set()
            gate.wait(timeout=10)
        return real_estimate(directory)

    monkeypatch.setattr(file_index_module, "estimate_count", estimate)
    return entered, gate


def test_clear_discards_scan_in_flight(tmp_path: Path, monkeypatch) -> None:
    make_files(tmp_path, ["a.txt"])
    entered, gate = _block_first_estimate(monkeypatch)
    index = FileIndex(roots=[tmp_path])

    thread = index.start()
    assert entered.wait(timeout=5)
    index.clear_index()
    gate.set()
    thread.join(timeout=10)

    assert index.status().state == STATE_IDLE
    assert index.files() == []


def test_superseded_scan_does_not_overwrite_newer_snapshot(tmp_path: Path, monkeypatch) -> None:
    make_files(tmp_path, ["a.txt"])
    entered, gate = _block_first_estimate(monkeypatch)
    index = FileIndex(roots=[tmp_path])

    first = index.start()
    assert entered.wait(timeout=5)
    second = index.reindex()
    second.join(timeout=10)
    assert index.status().count == 1

    # the stale scan would now see two files
    make_files(tmp_path, ["b.txt"])
    gate.set()
    first.join(timeout=10)

    assert index.status().state == STATE_READY
    assert [e.name for e in index.files()] == ["a.txt"]


def test_progress_updates_are_throttled(tmp_path: Path, monkeypatch) -> None:
    make_files(tmp_path, [f"file{i:02d}.txt" for i in range(20)])
    step = 0.06
    ticks = []

    def monotonic():
        ticks.append(len(ticks) * step)
        return ticks[-1]

    monkeypatch.setattr(file_index_module, "time", SimpleNamespace(monotonic=monotonic))

    seen = []
    ready = threading.Event()

    def on_status(status):
        seen.append(status)
        if status.state == STATE_READY:
            ready.set()

    build_index(tmp_path, on_status=on_status)
    assert ready.wait(timeout=5)

    assert [s.state for s in seen].count(STATE_READY) == 1
    assert seen[-1].state == STATE_READY
    assert seen[-1].count == 20

    # one clock reading per walked file, so file counts map to elapsed time
    progress = [s.count for s in seen if s.state == STATE_INDEXING]
    assert progress[0] == 0
    assert len(progress) > 2
    for earlier, later in zip(progress, progress[1:]):
        assert (later - earlier) * step > PROGRESS_INTERVAL


def test_reads_during_reindex_see_previous_snapshot(tmp_path: Path, monkeypatch) -> None:
    make_files(tmp_path, ["old.txt"])
    index = build_index(tmp_path)

    entered, gate = _block_first_estimate(monkeypatch)
    make_files(tmp_path, ["new.txt"])
    thread = index.reindex()
    try:
        assert entered.wait(timeout=5)
        assert index.status().state == STATE_INDEXING
        assert [e.name for e in index.search_files("old")] == ["old.txt"]
        assert index.search_files("new") == []
        assert index.names() == ["old.txt"]
    finally:
        gate.set()
    thread.join(timeout=10)

    assert sorted(index.names()) == ["new.txt", "old.txt"]
