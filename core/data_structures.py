"""Core data structures for the quick-launcher engine."""
from typing import List, NamedTuple

STATE_IDLE = "idle"
STATE_INDEXING = "indexing"
STATE_READY = "ready"

# Result categories, in the order providers contribute them
CATEGORY_CALCULATOR = "Calculator"
CATEGORY_CLIPBOARD = "Clipboard"
CATEGORY_SYSTEM = "System"
CATEGORY_APPLICATIONS = "Applications"
CATEGORY_FILES = "Files"
CATEGORY_RECENT = "Recent"
CATEGORY_SUGGESTED = "Suggested"
CATEGORY_GENERAL = "General"

class AppEntry(NamedTuple):
    """An application known to the catalog."""
    name: str
    path: str
    launch_target: str = ""
    is_shortcut: bool = False

class FileEntry(NamedTuple):
    """Represents a single indexed file."""
    name: str
    path: str
    directory: str
    ext: str
    size: int

class IndexStatus(NamedTuple):
    """Snapshot of the file indexer's progress."""
    state: str
    message: str
    count: int = 0
    total: int = 0

class Match(NamedTuple):
    """A ranked candidate: score plus position in the input sequence."""
    score: int
    index: int

class SearchResult(NamedTuple):
    """A single entry of the aggregated result list."""
    id: str
    title: str
    subtitle: str
    icon: str
    category: str
    path: str = ""

    def to_dict(self) -> dict:
        return self._asdict()

class ContextAction(NamedTuple):
    id: str
    label: str
    icon: str

class ClipboardEntry(NamedTuple):
    content: str
    timestamp: int

class SystemCommand(NamedTuple):
    """A power/session command offered in search results."""
    id: str
    name: str
    subtitle: str
    icon: str
    keywords: List[str]

class CalcResult(NamedTuple):
    expression: str = ""
    result: str = ""
    valid: bool = False
