# core/clipboard.py

"""Clipboard history: capture, persistence and copy-back."""
import time
import logging
import threading
from pathlib import Path
from typing import Callable, List, Optional

from core.data_structures import ClipboardEntry
from utils.file_utils import read_json, write_json
from utils.platform_utils import FileOperationError, copy_to_clipboard, read_clipboard

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 50

class ClipboardHistory:
    """Most-recent-first buffer of captured clipboard text."""

    def __init__(self, path: Path, max_size: int = DEFAULT_MAX_ENTRIES,
                 read_clipboard: Callable[[], str] = read_clipboard,
                 write_clipboard: Callable[[str], None] = copy_to_clipboard):
        self.path = Path(path)
        self.max_size = max_size
        self._read_clipboard = read_clipboard
        self._write_clipboard = write_clipboard
        self._save_lock = threading.Lock()
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._poll_thread: Optional[threading.Thread] = None
        self._entries: List[ClipboardEntry] = self._load()

    def _load(self) -> List[ClipboardEntry]:
        data = read_json(self.path, [])
        if not isinstance(data, list):
            return []
        entries = []
        for item in data:
            try:
                entries.append(ClipboardEntry(str(item['content']), int(item.get('timestamp', 0))))
            except (KeyError, TypeError, ValueError, AttributeError):
                continue
        return entries[:self.max_size]

    def save(self):
        with self._save_lock:
            with self._lock:
                data = [entry._asdict() for entry in self._entries]
            write_json(self.path, data)

    def add(self, content: str) -> bool:
        """Capture ``content``; repeats of the newest entry are ignored."""
        if not content:
            return False
        with self._lock:
            if self._entries and self._entries[0].content == content:
                return False
            self._entries.insert(0, ClipboardEntry(content, int(time.time())))
            del self._entries[self.max_size:]
        threading.Thread(target=self.save, name="clipboard-save", daemon=True).start()
        return True

    def entries(self) -> List[ClipboardEntry]:
        with self._lock:
            return list(self._entries)

    def copy_to_clipboard(self, index: int) -> bool:
        """Put entry ``index`` back on the system clipboard."""
        with self._lock:
            if index < 0 or index >= len(self._entries):
                return False
            content = self._entries[index].content
        try:
            self._write_clipboard(content)
        except FileOperationError as e:
            logger.warning("Clipboard copy failed: %s", e)
            return False
        return True

    def poll_once(self, last_content: str) -> str:
        text = self._read_clipboard()
        if text and text != last_content:
            self.add(text)
            return text
        return last_content

    def start_polling(self, interval: float = 1.0) -> threading.Thread:
        """Watch the system clipboard on a daemon thread."""
        self._stop.clear()

        def poll():
            last_content = ""
            while not self._stop.is_set():
                last_content = self.poll_once(last_content)
                self._stop.wait(interval)

        self._poll_thread = threading.Thread(target=poll, name="clipboard-poll", daemon=True)
        self._poll_thread.start()
        logger.debug("Clipboard polling started (every %.1fs)", interval)
        return self._poll_thread

    def stop_polling(self):
        self._stop.set()
        if self._poll_thread is not None:
            self._poll_thread.join(timeout=2.0)
            self._poll_thread = None
