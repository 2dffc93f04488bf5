# core/aggregator.py

"""Query routing across providers, result merging and execution dispatch."""
import logging
import threading
from typing import Callable, Dict, List, Optional

from core import calculator, fuzzy
from core.catalog import AppCatalog
from core.clipboard import ClipboardHistory
from core.data_structures import (
    AppEntry, CalcResult, ContextAction, IndexStatus, SearchResult, SystemCommand,
    STATE_READY,
    CATEGORY_CALCULATOR, CATEGORY_CLIPBOARD, CATEGORY_SYSTEM, CATEGORY_APPLICATIONS,
    CATEGORY_FILES, CATEGORY_RECENT, CATEGORY_SUGGESTED, CATEGORY_GENERAL
)
from core.file_index import FileIndex
from core.system_commands import (
    SYSTEM_COMMANDS, SystemCommandError, execute_system_command, search_commands
)
from core.usage import UsageTracker
from utils import platform_utils
from utils.file_utils import get_display_path
from utils.i18n import translator as t

logger = logging.getLogger(__name__)

# Result identifiers
CALC_ID = 'calc-result'
NO_RESULTS_ID = 'no-results'
CLIP_PREFIX = 'clip-'
SYS_PREFIX = 'sys-'
FILE_OPEN_PREFIX = 'file-open:'
FILE_REVEAL_PREFIX = 'file-reveal:'

CLIPBOARD_TRIGGERS = ('cb', 'clip', 'clipboard')
CLIPBOARD_PREFIXES = ('cb ', 'clip ')

MAX_CLIPBOARD_RESULTS = 8
CLIPBOARD_PREVIEW_LEN = 80
MAX_APP_RESULTS = 10
MAX_FILE_RESULTS = 5
MIN_FILE_QUERY_LEN = 3
MAX_DEFAULT_RESULTS = 6

# Outcomes returned by execute()
OK = 'ok'
COPIED = 'copied'
ERROR = 'error'
NOT_FOUND = 'not found'
UNKNOWN_ACTION = 'unknown action'

ACTION_OPEN = 'open'
ACTION_ADMIN = 'admin'
ACTION_REVEAL = 'reveal'
ACTION_COPY_PATH = 'copy-path'

def is_clipboard_query(query: str) -> bool:
    q = query.lower()
    return q in CLIPBOARD_TRIGGERS or q.startswith(CLIPBOARD_PREFIXES)

def preview_text(content: str, limit: int = CLIPBOARD_PREVIEW_LEN) -> str:
    if len(content) > limit:
        return content[:limit] + '…'
    return content

class ResultAggregator:
    """
    Answers launcher queries by asking each provider in priority order
    (calculator, clipboard, system commands, applications, files) and
    concatenating their results. Result ids encode the owning provider so
    that execute() can route the chosen result back to it.

    Platform side effects (opening, launching, clipboard writes) go through
    the callables passed in, which default to utils.platform_utils.
    """

    def __init__(self, catalog: AppCatalog, usage: UsageTracker, file_index: FileIndex,
                 clipboard: ClipboardHistory,
                 system_commands: Optional[List[SystemCommand]] = None,
                 run_system_command: Callable[[str], None] = execute_system_command,
                 icon_provider: Optional[Callable[[str], str]] = None,
                 open_path: Callable[[str], None] = platform_utils.open_path,
                 reveal_path: Callable[[str], None] = platform_utils.reveal_path,
                 launch: Callable[..., None] = platform_utils.launch,
                 run_elevated: Callable[[str], None] = platform_utils.run_elevated,
                 copy_text: Callable[[str], None] = platform_utils.copy_to_clipboard,
                 on_launched: Optional[Callable[[], None]] = None):
        self.catalog = catalog
        self.usage = usage
        self.file_index = file_index
        self.clipboard = clipboard
        self.system_commands = system_commands if system_commands is not None else SYSTEM_COMMANDS
        self._run_system_command = run_system_command
        self._icon_provider = icon_provider
        self._open_path = open_path
        self._reveal_path = reveal_path
        self._launch = launch
        self._run_elevated = run_elevated
        self._copy_text = copy_text
        self._on_launched = on_launched
        self._icon_cache: Dict[str, str] = {}
        self._icon_lock = threading.Lock()
        self._last_calc = CalcResult()

    # --- Search ---

    def search(self, query: str) -> List[SearchResult]:
        if not query:
            return self.default_results()

        results: List[SearchResult] = []
        results.extend(self.search_calculator(query))
        results.extend(self.search_clipboard(query))
        results.extend(self.search_system_commands(query))
        results.extend(self.search_apps(query))
        results.extend(self.search_files(query))

        if not results:
            return [SearchResult(NO_RESULTS_ID, t.get('no_results'), query, '', CATEGORY_GENERAL)]

        logger.debug("Query %r produced %d results", query, len(results))
        return results

    def search_calculator(self, query: str) -> List[SearchResult]:
        if not calculator.is_calc_query(query):
            return []
        calc = calculator.evaluate(query)
        if not calc.valid:
            return []
        self._last_calc = calc
        return [SearchResult(CALC_ID, calc.result, t.get('calc_subtitle', calc.expression),
                             '', CATEGORY_CALCULATOR)]

    def search_clipboard(self, query: str) -> List[SearchResult]:
        if not is_clipboard_query(query):
            return []
        entries = self.clipboard.entries()[:MAX_CLIPBOARD_RESULTS]
        return [
            SearchResult(f"{CLIP_PREFIX}{i}", preview_text(entry.content),
                         t.get('clipboard_subtitle'), '', CATEGORY_CLIPBOARD)
            for i, entry in enumerate(entries)
        ]

    def search_system_commands(self, query: str) -> List[SearchResult]:
        return [SearchResult(SYS_PREFIX + command.id, command.name, command.subtitle,
                             command.icon, CATEGORY_SYSTEM)
                for command in search_commands(query, self.system_commands)]

    def _rank_apps(self, query: str, limit: int):
        apps = self.catalog.apps()
        names = [app.name for app in apps]
        usage_scores = [self.usage.score(app.name) for app in apps]
        matches = fuzzy.rank(query, names, usage_scores)[:limit]
        return [(apps[m.index], usage_scores[m.index]) for m in matches]

    def search_apps(self, query: str) -> List[SearchResult]:
        return [self._app_result(app, CATEGORY_APPLICATIONS)
                for app, _ in self._rank_apps(query, MAX_APP_RESULTS)]

    def search_files(self, query: str) -> List[SearchResult]:
        if len(query) < MIN_FILE_QUERY_LEN:
            return []
        if self.file_index.status().state != STATE_READY:
            return []
        results = []
        for entry in self.file_index.search_files(query)[:MAX_FILE_RESULTS]:
            results.append(SearchResult(FILE_OPEN_PREFIX + entry.path, entry.name,
                                        get_display_path(entry.directory), '',
                                        CATEGORY_FILES, entry.path))
        return results

    def default_results(self) -> List[SearchResult]:
        """Most used applications first, then catalog order."""
        results = []
        for app, usage_score in self._rank_apps('', MAX_DEFAULT_RESULTS):
            category = CATEGORY_RECENT if usage_score > 0 else CATEGORY_SUGGESTED
            results.append(self._app_result(app, category))
        return results

    def _app_result(self, app: AppEntry, category: str) -> SearchResult:
        subtitle = t.get('application') if app.is_shortcut else get_display_path(app.path)
        return SearchResult(app.name, app.name, subtitle, self.get_icon(app.path), category, app.path)

    def get_icon(self, path: str) -> str:
        if self._icon_provider is None:
            return ''
        with self._icon_lock:
            if path in self._icon_cache:
                return self._icon_cache[path]
        icon = self._icon_provider(path) or ''
        with self._icon_lock:
            self._icon_cache[path] = icon
        return icon

    # --- Execution ---

    def execute(self, result_id: str) -> str:
        """Run the action behind a result id and describe the outcome."""
        logger.info("Execute %r", result_id)

        if result_id == CALC_ID:
            if not self._last_calc.valid:
                return ERROR
            return self._copy(self._last_calc.result)

        if result_id.startswith(CLIP_PREFIX):
            try:
                index = int(result_id[len(CLIP_PREFIX):])
            except ValueError:
                return ERROR
            return COPIED if self.clipboard.copy_to_clipboard(index) else ERROR

        if result_id.startswith(SYS_PREFIX):
            try:
                self._run_system_command(result_id[len(SYS_PREFIX):])
            except SystemCommandError as e:
                return str(e)
            return OK

        if result_id.startswith(FILE_OPEN_PREFIX):
            return self._platform_call(self._open_path, result_id[len(FILE_OPEN_PREFIX):], hide=True)

        if result_id.startswith(FILE_REVEAL_PREFIX):
            return self._platform_call(self._reveal_path, result_id[len(FILE_REVEAL_PREFIX):])

        app = self.catalog.find(result_id)
        if app is None:
            return NOT_FOUND
        self.usage.record(app.name)
        return self._platform_call(self._launch, app.launch_target or app.path, app.name, hide=True)

    def get_context_actions(self, result_id: str) -> List[ContextAction]:
        if self.catalog.find(result_id) is None:
            return []
        return [
            ContextAction(ACTION_OPEN, t.get('action_open'), '▶'),
            ContextAction(ACTION_ADMIN, t.get('action_admin'), '🛡️'),
            ContextAction(ACTION_REVEAL, t.get('action_reveal'), '📂'),
            ContextAction(ACTION_COPY_PATH, t.get('action_copy_path'), '📋'),
        ]

    def execute_context_action(self, result_id: str, action_id: str) -> str:
        app = self.catalog.find(result_id)
        if app is None:
            return NOT_FOUND

        if action_id == ACTION_OPEN:
            self.usage.record(app.name)
            return self._platform_call(self._launch, app.launch_target or app.path, app.name, hide=True)
        if action_id == ACTION_ADMIN:
            self.usage.record(app.name)
            return self._platform_call(self._run_elevated, app.path, hide=True)
        if action_id == ACTION_REVEAL:
            return self._platform_call(self._reveal_path, app.path)
        if action_id == ACTION_COPY_PATH:
            outcome = self._copy(app.path)
            return OK if outcome == COPIED else outcome
        return UNKNOWN_ACTION

    def _copy(self, text: str) -> str:
        try:
            self._copy_text(text)
        except platform_utils.FileOperationError as e:
            logger.warning("Copy failed: %s", e)
            return ERROR
        return COPIED

    def _platform_call(self, func, *args, hide: bool = False) -> str:
        try:
            func(*args)
        except platform_utils.FileOperationError as e:
            logger.warning("%s failed: %s", getattr(func, '__name__', func), e)
            return str(e)
        if hide and self._on_launched:
            self._on_launched()
        return OK

    # --- File index passthrough ---

    def get_index_status(self) -> IndexStatus:
        return self.file_index.status()

    def reindex_files(self):
        return self.file_index.reindex()

    def clear_index(self):
        self.file_index.clear_index()
