# core/file_index.py

"""Background file indexing with an atomically swapped in-memory snapshot."""
import os
import time
import queue
import logging
import threading
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, NamedTuple, Optional, Tuple

from core.data_structures import (
    FileEntry, IndexStatus,
    STATE_IDLE, STATE_INDEXING, STATE_READY
)
from utils.i18n import translator as t

logger = logging.getLogger(__name__)

StatusCallback = Callable[[IndexStatus], None]

CONTENT_DIRS = ['Desktop', 'Documents', 'Downloads', 'Pictures', 'Videos', 'Music']
PROJECT_DIRS = ['Projects', 'code']

SKIP_DIR_NAMES = frozenset({
    'node_modules', '__pycache__', 'vendor',
    '$RECYCLE.BIN', 'System Volume Information',
    'AppData', 'cache', 'Cache',
    'dist', 'build', 'target',
    'venv', '.venv', 'env',
})

# Every nested directory counts as this many files when estimating a total
ESTIMATE_DIR_WEIGHT = 500
PROGRESS_INTERVAL = 0.2
MAX_SEARCH_RESULTS = 15

def default_scan_roots(home: Optional[Path] = None, extra_roots: Iterable = ()) -> List[Path]:
    """Well-known user content folders, plus project folders that exist."""
    home = Path(home) if home else Path.home()
    roots = [home / name for name in CONTENT_DIRS]
    roots.extend(home / name for name in PROJECT_DIRS if (home / name).is_dir())
    for extra in extra_roots:
        path = Path(extra).expanduser()
        if path.is_dir() and path not in roots:
            roots.append(path)
    return roots

def should_skip_dir(name: str) -> bool:
    return name.startswith('.') or name in SKIP_DIR_NAMES

def estimate_count(directory: Path) -> int:
    """Cheap, shallow guess at how many files live under ``directory``."""
    count = 0
    try:
        with os.scandir(directory) as it:
            for entry in it:
                try:
                    count += ESTIMATE_DIR_WEIGHT if entry.is_dir() else 1
                except OSError:
                    continue
    except OSError:
        return 0
    return count

def walk_files(root: Path) -> Iterator[FileEntry]:
    """Recursively yield files under ``root``, never descending into skipped dirs.

    Unreadable directories and files are skipped.
    """
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if not should_skip_dir(d)]
        for filename in filenames:
            path = os.path.join(dirpath, filename)
            try:
                size = os.stat(path).st_size
            except OSError:
                continue
            yield FileEntry(
                name=filename,
                path=path,
                directory=dirpath,
                ext=os.path.splitext(filename)[1].lower(),
                size=size
            )

class _Snapshot(NamedTuple):
    files: Tuple[FileEntry, ...]
    names_lower: Tuple[str, ...]
    paths_lower: Tuple[str, ...]

    @classmethod
    def build(cls, files: List[FileEntry]) -> '_Snapshot':
        return cls(
            tuple(files),
            tuple(f.name.lower() for f in files),
            tuple(f.path.lower() for f in files)
        )

_EMPTY_SNAPSHOT = _Snapshot((), (), ())

class StatusDispatcher:
    """
    Delivers status updates to observers from its own thread, so the
    publisher never waits on a slow observer. Updates are delivered in
    publication order.
    """

    def __init__(self):
        self._observers: List[StatusCallback] = []
        self._lock = threading.Lock()
        self._queue = queue.Queue()
        self._thread: Optional[threading.Thread] = None

    def subscribe(self, callback: StatusCallback):
        with self._lock:
            if callback not in self._observers:
                self._observers.append(callback)

    def unsubscribe(self, callback: StatusCallback):
        with self._lock:
            if callback in self._observers:
                self._observers.remove(callback)

    def publish(self, status: IndexStatus):
        self._queue.put(status)
        with self._lock:
            if self._thread is None or not self._thread.is_alive():
                self._thread = threading.Thread(target=self._run, name="index-status", daemon=True)
                self._thread.start()

    def _run(self):
        while True:
            status = self._queue.get()
            with self._lock:
                observers = list(self._observers)
            for callback in observers:
                try:
                    callback(status)
                except Exception:
                    logger.exception("Index status observer %r failed", callback)
            self._queue.task_done()

class FileIndex:
    """
    In-memory index of user files. Scans run on background threads; readers
    always see the last completed snapshot. Each scan carries a generation
    number and only the most recently requested scan may install its
    snapshot or publish status.
    """

    def __init__(self, roots: Optional[List[Path]] = None,
                 on_status: Optional[StatusCallback] = None,
                 extra_roots: Iterable = ()):
        self._roots = [Path(r) for r in roots] if roots is not None else None
        self._extra_roots = list(extra_roots)
        self._lock = threading.Lock()
        self._snapshot = _EMPTY_SNAPSHOT
        self._status = IndexStatus(STATE_IDLE, t.get('index_not_indexed'))
        self._generation = 0
        self.events = StatusDispatcher()
        if on_status:
            self.events.subscribe(on_status)

    def subscribe(self, callback: StatusCallback):
        self.events.subscribe(callback)

    def unsubscribe(self, callback: StatusCallback):
        self.events.unsubscribe(callback)

    def scan_roots(self) -> List[Path]:
        if self._roots is not None:
            return list(self._roots)
        return default_scan_roots(extra_roots=self._extra_roots)

    def start(self) -> threading.Thread:
        """Start a scan in the background, superseding any scan in flight."""
        with self._lock:
            self._generation += 1
            generation = self._generation
        thread = threading.Thread(
            target=self._build_index, args=(generation,),
            name=f"file-index-{generation}", daemon=True
        )
        thread.start()
        logger.info("File scan %d started", generation)
        return thread

    def reindex(self) -> threading.Thread:
        return self.start()

    def clear_index(self):
        """Drop the snapshot and return to idle. Scans in flight are abandoned."""
        with self._lock:
            self._generation += 1
            self._snapshot = _EMPTY_SNAPSHOT
            self._publish(IndexStatus(STATE_IDLE, t.get('index_cleared')))
        logger.info("File index cleared")

    def status(self) -> IndexStatus:
        with self._lock:
            return self._status

    def files(self) -> List[FileEntry]:
        with self._lock:
            snapshot = self._snapshot
        return list(snapshot.files)

    def names(self) -> List[str]:
        with self._lock:
            snapshot = self._snapshot
        return [f.name for f in snapshot.files]

    def search_files(self, query: str, limit: int = MAX_SEARCH_RESULTS) -> List[FileEntry]:
        """Case-insensitive substring match on file name or full path.

        Results come back in snapshot order, at most ``limit`` of them.
        """
        if not query:
            return []
        with self._lock:
            snapshot = self._snapshot

        q = query.lower()
        results = []
        for i, entry in enumerate(snapshot.files):
            if q in snapshot.names_lower[i] or q in snapshot.paths_lower[i]:
                results.append(entry)
                if len(results) >= limit:
                    break
        return results

    def _publish(self, status: IndexStatus):
        # Caller holds self._lock
        self._status = status
        self.events.publish(status)

    def _set_status(self, status: IndexStatus, generation: int) -> bool:
        with self._lock:
            if generation != self._generation:
                return False
            self._publish(status)
            return True

    def _build_index(self, generation: int):
        try:
            self._scan(generation)
        except Exception:
            logger.exception("File scan %d failed", generation)
            self._set_status(IndexStatus(STATE_IDLE, t.get('index_failed')), generation)

    def _scan(self, generation: int):
        if not self._set_status(IndexStatus(STATE_INDEXING, t.get('index_scanning')), generation):
            return

        roots = self.scan_roots()
        total = sum(estimate_count(root) for root in roots) or 1

        start = time.monotonic()
        last_update = start
        found: List[FileEntry] = []

        for root in roots:
            for entry in walk_files(root):
                found.append(entry)
                now = time.monotonic()
                if now - last_update > PROGRESS_INTERVAL:
                    last_update = now
                    status = IndexStatus(STATE_INDEXING, t.get('index_scanning_dir', root.name),
                                         len(found), total)
                    if not self._set_status(status, generation):
                        logger.info("File scan %d superseded, stopping", generation)
                        return

        snapshot = _Snapshot.build(found)
        elapsed = time.monotonic() - start
        count = len(snapshot.files)

        with self._lock:
            if generation != self._generation:
                logger.info("File scan %d superseded, discarding %d files", generation, count)
                return
            self._snapshot = snapshot
            self._publish(IndexStatus(STATE_READY, t.get('index_ready', count, elapsed), count, count))
        logger.info("File scan %d indexed %d files in %.3fs", generation, count, elapsed)
