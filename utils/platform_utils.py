# utils/platform_utils.py

"""Platform-specific utilities: opening, launching and the system clipboard."""
import os
import platform
import subprocess
from pathlib import Path
from typing import List, Optional

class FileOperationError(Exception):
    """Custom exception for file operation errors."""
    pass

def get_system() -> str:
    return platform.system().lower()

def _spawn(args: List[str], cwd: Optional[str] = None):
    """Start a detached process without waiting for it."""
    kwargs = {'cwd': cwd, 'stdin': subprocess.DEVNULL,
              'stdout': subprocess.DEVNULL, 'stderr': subprocess.DEVNULL}
    if get_system() == 'windows':
        kwargs['creationflags'] = getattr(subprocess, 'DETACHED_PROCESS', 0) | \
            getattr(subprocess, 'CREATE_NO_WINDOW', 0)
    else:
        kwargs['start_new_session'] = True
    try:
        subprocess.Popen(args, **kwargs)
    except (OSError, ValueError) as e:
        raise FileOperationError(f"Could not start {args[0]}: {e}")

def open_path(path: str):
    """Opens a file or folder with the OS default handler.

    Raises:
        FileOperationError: If the handler could not be started
    """
    system = get_system()
    if system == 'windows':
        try:
            os.startfile(path)
        except OSError as e:
            raise FileOperationError(f"Could not open path {path}: {e}")
    elif system == 'darwin':
        _spawn(['open', str(path)])
    else:
        _spawn(['xdg-open', str(path)])

def reveal_path(path: str):
    """Shows ``path`` selected in the file manager (or opens its folder)."""
    system = get_system()
    if system == 'windows':
        _spawn(['explorer', '/select,', str(path)])
    elif system == 'darwin':
        _spawn(['open', '-R', str(path)])
    else:
        _spawn(['xdg-open', str(Path(path).parent)])

def launch(target: str, name: str = ""):
    """Launches an application target (executable, shortcut or desktop entry)."""
    system = get_system()
    lower = target.lower()
    if system == 'windows':
        if lower.endswith('.lnk'):
            _spawn(['cmd', '/c', 'start', '', target])
        else:
            _spawn([target])
    elif system == 'darwin':
        _spawn(['open', target] if lower.endswith('.app') else [target])
    elif lower.endswith('.desktop'):
        _spawn(['gio', 'launch', target])
    else:
        _spawn([target])

def run_elevated(path: str):
    """Runs ``path`` with administrator rights."""
    system = get_system()
    if system == 'windows':
        script = f"Start-Process -FilePath '{path}' -Verb RunAs"
        _spawn(['powershell', '-NoProfile', '-Command', script], cwd=str(Path(path).parent))
    elif system == 'darwin':
        script = f'do shell script quoted form of "{path}" with administrator privileges'
        _spawn(['osascript', '-e', script])
    else:
        _spawn(['pkexec', path])

def copy_to_clipboard(text: str):
    """Puts ``text`` on the system clipboard."""
    system = get_system()
    if system == 'windows':
        args = ['clip']
    elif system == 'darwin':
        args = ['pbcopy']
    else:
        args = ['xclip', '-selection', 'clipboard']
    try:
        subprocess.run(args, input=text.encode('utf-8'), check=True, timeout=5,
                       stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
    except (OSError, subprocess.SubprocessError) as e:
        raise FileOperationError(f"Could not write clipboard: {e}")

def read_clipboard() -> str:
    """Returns the current clipboard text, or "" if it cannot be read."""
    system = get_system()
    if system == 'windows':
        args = ['powershell', '-NoProfile', '-Command', 'Get-Clipboard -Raw']
    elif system == 'darwin':
        args = ['pbpaste']
    else:
        args = ['xclip', '-selection', 'clipboard', '-o']
    try:
        result = subprocess.run(args, capture_output=True, timeout=5)
    except (OSError, subprocess.SubprocessError):
        return ""
    if result.returncode != 0:
        return ""
    text = result.stdout.decode('utf-8', errors='replace')
    # Get-Clipboard appends a line ending
    return text.rstrip('\r\n') if system == 'windows' else text

def calculate_window_geometry(screen_width: int, screen_height: int) -> str:
    """Launcher window: horizontally centered, in the upper third of the screen."""
    width = max(500, min(760, int(screen_width * 0.45)))
    height = max(360, min(520, int(screen_height * 0.5)))
    x = (screen_width - width) // 2
    y = screen_height // 5
    return f"{width}x{height}+{x}+{y}"
