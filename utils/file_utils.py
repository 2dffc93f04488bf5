# utils/file_utils.py

"""File and path utilities."""
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

def get_display_path(file_path: str, home: Optional[str] = None) -> str:
    """Shows ``file_path`` relative to the home directory ("~/...") when possible."""
    home_str = str(home) if home is not None else str(Path.home())
    path_str = str(file_path)
    if home_str and path_str.startswith(home_str):
        return "~" + path_str[len(home_str):]
    return path_str

def read_json(path: Path, default: Any) -> Any:
    """Load JSON from ``path``; missing or corrupt files yield ``default``."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.debug("Could not read %s: %s", path, e)
        return default

def write_json(path: Path, data: Any) -> bool:
    """Write ``data`` as JSON through a temp file. Returns False on failure."""
    path = Path(path)
    tmp_path = path.with_suffix(path.suffix + '.tmp')
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)
        return True
    except (OSError, TypeError, ValueError) as e:
        logger.debug("Could not write %s: %s", path, e)
        return False
