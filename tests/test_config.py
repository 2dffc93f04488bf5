import json
from pathlib import Path

from core.config import DATA_DIR_ENV, Config, default_data_dir


def test_defaults_when_no_file(tmp_path: Path) -> None:
    config = Config(tmp_path)
    assert config.get('language') == 'en'
    assert config.get('clipboard_max_entries') == 50
    assert config.is_first_run()
    assert config.data_path('usage.json') == tmp_path / 'usage.json'


def test_saved_values_merge_with_defaults(tmp_path: Path) -> None:
    (tmp_path / 'config.json').write_text(json.dumps({'language': 'de'}), encoding='utf-8')
    config = Config(tmp_path)
    assert config.get('language') == 'de'
    assert config.get('hotkey') == 'Alt+Space'


def test_corrupt_file_falls_back_to_defaults(tmp_path: Path) -> None:
    (tmp_path / 'config.json').write_text('{broken', encoding='utf-8')
    assert Config(tmp_path).get('language') == 'en'


def test_complete_onboarding_persists(tmp_path: Path) -> None:
    config = Config(tmp_path / 'data')
    assert config.complete_onboarding('Ctrl+Space')

    reloaded = Config(tmp_path / 'data')
    assert not reloaded.is_first_run()
    assert reloaded.get('hotkey') == 'Ctrl+Space'


def test_data_dir_override(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path))
    assert default_data_dir() == tmp_path
    monkeypatch.delenv(DATA_DIR_ENV)
    assert default_data_dir() == Path.home() / '.quicklaunch'
