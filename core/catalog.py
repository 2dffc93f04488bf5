# core/catalog.py

"""Application catalog: the candidate list the fuzzy matcher ranks."""
import os
import logging
import threading
import configparser
from pathlib import Path
from typing import Iterable, List, Optional

from core.data_structures import AppEntry
from utils.platform_utils import get_system

logger = logging.getLogger(__name__)

IGNORED_PATH_SEGMENTS = [
    'system32', 'syswow64', 'winsxs', 'servicing',
    'windows defender', 'windows nt', 'windows mail',
    'windows sidebar', 'windows media player',
    'maintenance', 'accessibility',
]

IGNORED_NAME_PARTS = [
    'uninstall', 'readme', 'help', 'license', 'changelog',
    'release notes', 'setup', 'install', 'update',
]

APP_EXTENSIONS = {'.lnk', '.exe', '.desktop', '.app'}

def is_ignored_path(path: str) -> bool:
    lower = path.lower()
    if any(segment in lower for segment in IGNORED_PATH_SEGMENTS):
        return True
    return any(part.startswith('.') and len(part) > 1 for part in Path(path).parts)

def is_ignored_name(name: str) -> bool:
    lower = name.lower()
    return any(part in lower for part in IGNORED_NAME_PARTS)

def default_app_dirs(system: Optional[str] = None) -> List[Path]:
    """Start-menu style directories for the current platform."""
    system = system or get_system()
    home = Path.home()
    if system == 'windows':
        dirs = []
        for var in ('ProgramData', 'AppData'):
            base = os.environ.get(var)
            if base:
                dirs.append(Path(base) / 'Microsoft' / 'Windows' / 'Start Menu' / 'Programs')
        return dirs
    if system == 'darwin':
        return [Path('/Applications'), Path('/System/Applications'), home / 'Applications']
    data_dirs = os.environ.get('XDG_DATA_DIRS', '/usr/local/share:/usr/share').split(':')
    dirs = [home / '.local' / 'share' / 'applications']
    dirs.extend(Path(d) / 'applications' for d in data_dirs if d)
    dirs.append(Path('/var/lib/flatpak/exports/share/applications'))
    return dirs

def read_desktop_entry(path: Path) -> Optional[AppEntry]:
    """Parse a freedesktop .desktop file into an AppEntry, or None if hidden/invalid."""
    parser = configparser.ConfigParser(interpolation=None, strict=False)
    try:
        parser.read(path, encoding='utf-8')
    except (configparser.Error, OSError, UnicodeDecodeError):
        return None
    if not parser.has_section('Desktop Entry'):
        return None
    section = parser['Desktop Entry']
    if section.get('Type', 'Application') != 'Application':
        return None
    if section.get('NoDisplay', 'false').lower() == 'true' or section.get('Hidden', 'false').lower() == 'true':
        return None
    name = section.get('Name', '').strip()
    if not name:
        return None
    return AppEntry(name=name, path=str(path), launch_target=str(path), is_shortcut=True)

def scan_dir(root: Path) -> List[AppEntry]:
    """Walk one application directory, collecting launchable entries."""
    results = []
    for dirpath, dirnames, filenames in os.walk(root):
        # .app bundles are entries, not folders to descend into
        bundles = [d for d in dirnames if d.lower().endswith('.app')]
        dirnames[:] = [d for d in dirnames if not d.startswith('.') and d not in bundles]

        for filename in filenames + bundles:
            path = os.path.join(dirpath, filename)
            stem, ext = os.path.splitext(filename)
            ext = ext.lower()
            if ext not in APP_EXTENSIONS or is_ignored_path(path):
                continue
            if ext == '.desktop':
                entry = read_desktop_entry(Path(path))
                if entry is None or is_ignored_name(entry.name):
                    continue
                results.append(entry)
                continue
            if is_ignored_name(stem):
                continue
            results.append(AppEntry(name=stem, path=path, launch_target=path,
                                    is_shortcut=ext == '.lnk'))
    return results

def scan_path_apps() -> List[AppEntry]:
    """Executables found directly on PATH (Windows only)."""
    results = []
    seen = set()
    for directory in os.environ.get('PATH', '').split(os.pathsep):
        if not directory or is_ignored_path(directory):
            continue
        try:
            names = os.listdir(directory)
        except OSError:
            continue
        for filename in names:
            stem, ext = os.path.splitext(filename)
            if ext.lower() != '.exe':
                continue
            lower = stem.lower()
            if lower in seen or is_ignored_name(stem):
                continue
            seen.add(lower)
            path = os.path.join(directory, filename)
            results.append(AppEntry(name=stem, path=path, launch_target=path))
    return results

def deduplicate(apps: Iterable[AppEntry]) -> List[AppEntry]:
    seen = set()
    result = []
    for app in apps:
        key = app.name.lower()
        if key not in seen:
            seen.add(key)
            result.append(app)
    return result

class AppCatalog:
    """Thread-safe list of installed applications."""

    def __init__(self, dirs: Optional[List[Path]] = None, scan_path: Optional[bool] = None,
                 scan_on_init: bool = True):
        self.dirs = dirs
        self.scan_path = scan_path if scan_path is not None else get_system() == 'windows'
        self._lock = threading.Lock()
        self._apps: List[AppEntry] = []
        if scan_on_init:
            self.scan()

    @classmethod
    def from_entries(cls, entries: Iterable[AppEntry]) -> 'AppCatalog':
        catalog = cls(dirs=[], scan_path=False, scan_on_init=False)
        catalog._apps = deduplicate(entries)
        return catalog

    def scan(self):
        found = []
        for directory in (self.dirs if self.dirs is not None else default_app_dirs()):
            found.extend(scan_dir(Path(directory)))
        if self.scan_path:
            found.extend(scan_path_apps())
        found = deduplicate(found)

        with self._lock:
            self._apps = found
        logger.info("Application catalog holds %d entries", len(found))

    def apps(self) -> List[AppEntry]:
        with self._lock:
            return list(self._apps)

    def names(self) -> List[str]:
        with self._lock:
            return [app.name for app in self._apps]

    def find(self, name: str) -> Optional[AppEntry]:
        with self._lock:
            for app in self._apps:
                if app.name == name:
                    return app
        return None
