from pathlib import Path

import pytest

from core.catalog import AppCatalog
from core.clipboard import ClipboardHistory
from core.data_structures import AppEntry
from core.file_index import FileIndex
from core.usage import UsageTracker
from core.aggregator import ResultAggregator
from utils.i18n import translator


@pytest.fixture(autouse=True)
def english_messages():
    previous = translator.current_lang
    translator.set_language('en')
    yield
    translator.set_language(previous)


def make_files(root: Path, relative_paths) -> None:
    for rel in relative_paths:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x", encoding="utf-8")


class PlatformRecorder:
    """Collects the platform calls the aggregator makes."""

    def __init__(self):
        self.calls = []
        self.fail_with = None

    def _record(self, name, *args):
        if self.fail_with is not None:
            raise self.fail_with
        self.calls.append((name,) + args)

    def open_path(self, path):
        self._record('open', path)

    def reveal_path(self, path):
        self._record('reveal', path)

    def launch(self, target, name=""):
        self._record('launch', target, name)

    def run_elevated(self, path):
        self._record('elevated', path)

    def copy_text(self, text):
        self._record('copy', text)

    def run_system_command(self, command_id):
        self._record('system', command_id)


@pytest.fixture
def platform_recorder():
    return PlatformRecorder()


@pytest.fixture
def sample_apps():
    return [
        AppEntry("Notepad", "/opt/apps/notepad.exe", "/opt/apps/notepad.exe", False),
        AppEntry("Firefox", "/usr/share/applications/firefox.desktop",
                 "/usr/share/applications/firefox.desktop", True),
        AppEntry("Terminal", "/usr/share/applications/terminal.desktop",
                 "/usr/share/applications/terminal.desktop", True),
        AppEntry("Paint", "/opt/apps/paint.exe", "/opt/apps/paint.exe", False),
        AppEntry("Writer", "/opt/apps/writer.exe", "/opt/apps/writer.exe", False),
        AppEntry("Music Player", "/opt/apps/music.exe", "/opt/apps/music.exe", False),
        AppEntry("Maps", "/opt/apps/maps.exe", "/opt/apps/maps.exe", False),
        AppEntry("Weather", "/opt/apps/weather.exe", "/opt/apps/weather.exe", False),
    ]


@pytest.fixture
def aggregator(tmp_path, sample_apps, platform_recorder):
    docs = tmp_path / "Documents"
    docs.mkdir()
    rec = platform_recorder
    clipboard = ClipboardHistory(tmp_path / "clipboard.json",
                                 read_clipboard=lambda: "",
                                 write_clipboard=rec.copy_text)
    return ResultAggregator(
        catalog=AppCatalog.from_entries(sample_apps),
        usage=UsageTracker(tmp_path / "usage.json"),
        file_index=FileIndex(roots=[docs]),
        clipboard=clipboard,
        run_system_command=rec.run_system_command,
        open_path=rec.open_path,
        reveal_path=rec.reveal_path,
        launch=rec.launch,
        run_elevated=rec.run_elevated,
        copy_text=rec.copy_text,
    )
