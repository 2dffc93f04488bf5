# utils/logging_utils.py

"""Logging setup for the launcher."""
import logging
import os
from pathlib import Path
from typing import Optional

ENV_VAR = 'QUICKLAUNCH_ENV'
LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

def file_logging_enabled() -> bool:
    return os.environ.get(ENV_VAR, '').lower() != 'production'

def setup_logging(log_file: Optional[Path] = None, verbose: bool = False) -> logging.Logger:
    """Configure the root logger: stderr always, a debug log file outside production."""
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    root.addHandler(console)

    if log_file and file_logging_enabled():
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        except OSError as e:
            root.warning("Could not open log file %s: %s", log_file, e)
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            root.addHandler(file_handler)

    return root
