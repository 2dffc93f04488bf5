# core/config.py

"""Configuration management."""
import json
import os
from pathlib import Path
from typing import Optional

DATA_DIR_ENV = 'QUICKLAUNCH_HOME'

def default_data_dir() -> Path:
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / '.quicklaunch'

class Config:
    """Application configuration manager."""

    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir) if data_dir else default_data_dir()
        self.config_file = self.data_dir / 'config.json'
        self.default_config = {
            'language': 'en',
            'hotkey': 'Alt+Space',
            'first_run': True,
            'extra_index_roots': [],
            'clipboard_max_entries': 50,
            'clipboard_poll_interval': 1.0,
        }
        self.config = self.load_config()

    def load_config(self) -> dict:
        """Load configuration from file."""
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    # Merge with defaults
                    config = self.default_config.copy()
                    config.update(loaded)
                    return config
            except (OSError, ValueError):
                pass
        return self.default_config.copy()

    def save_config(self) -> bool:
        """Save configuration to file."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.config, f, indent=2, ensure_ascii=False)
            return True
        except OSError:
            return False

    def get(self, key: str, default=None):
        """Get configuration value."""
        return self.config.get(key, default)

    def set(self, key: str, value):
        """Set configuration value."""
        self.config[key] = value

    def data_path(self, name: str) -> Path:
        """Path of a state file (usage.json, clipboard.json, debug.log) in the data dir."""
        return self.data_dir / name

    def is_first_run(self) -> bool:
        return bool(self.config.get('first_run', True))

    def complete_onboarding(self, hotkey: str = "") -> bool:
        self.config['first_run'] = False
        if hotkey:
            self.config['hotkey'] = hotkey
        return self.save_config()
