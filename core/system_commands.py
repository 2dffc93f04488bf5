# core/system_commands.py

"""Power and session commands offered as search results."""
import getpass
import logging
import os
import subprocess
from typing import Dict, List

from core.data_structures import SystemCommand
from utils.platform_utils import get_system

logger = logging.getLogger(__name__)

class SystemCommandError(Exception):
    """Raised when a system command cannot be run."""
    pass

SYSTEM_COMMANDS: List[SystemCommand] = [
    SystemCommand('lock-screen', 'Lock Screen', 'Lock this computer', '🔒',
                  ['lock', 'screen', 'secure']),
    SystemCommand('sleep', 'Sleep', 'Put computer to sleep', '💤',
                  ['sleep', 'suspend', 'standby']),
    SystemCommand('shutdown', 'Shut Down', 'Shut down this computer', '⏻',
                  ['shutdown', 'shut down', 'power off', 'turn off']),
    SystemCommand('restart', 'Restart', 'Restart this computer', '🔄',
                  ['restart', 'reboot']),
    SystemCommand('recycle-bin', 'Empty Recycle Bin', 'Permanently delete recycled files', '🗑️',
                  ['recycle', 'bin', 'trash', 'empty', 'delete']),
    SystemCommand('logout', 'Log Out', 'Sign out of this account', '🚪',
                  ['logout', 'log out', 'sign out', 'signout']),
]

COMMAND_LINES: Dict[str, Dict[str, List[str]]] = {
    'windows': {
        'lock-screen': ['rundll32.exe', 'user32.dll,LockWorkStation'],
        'sleep': ['rundll32.exe', 'powrprof.dll,SetSuspendState', '0', '1', '0'],
        'shutdown': ['shutdown.exe', '/s', '/t', '0'],
        'restart': ['shutdown.exe', '/r', '/t', '0'],
        'recycle-bin': ['powershell', '-NoProfile', '-Command', 'Clear-RecycleBin -Force'],
        'logout': ['shutdown.exe', '/l'],
    },
    'darwin': {
        'lock-screen': ['pmset', 'displaysleepnow'],
        'sleep': ['pmset', 'sleepnow'],
        'shutdown': ['osascript', '-e', 'tell app "System Events" to shut down'],
        'restart': ['osascript', '-e', 'tell app "System Events" to restart'],
        'recycle-bin': ['osascript', '-e', 'tell app "Finder" to empty trash'],
        'logout': ['osascript', '-e', 'tell app "System Events" to log out'],
    },
    'linux': {
        'lock-screen': ['loginctl', 'lock-session'],
        'sleep': ['systemctl', 'suspend'],
        'shutdown': ['systemctl', 'poweroff'],
        'restart': ['systemctl', 'reboot'],
        'recycle-bin': ['gio', 'trash', '--empty'],
        'logout': ['loginctl', 'terminate-user', ''],
    },
}

def current_user() -> str:
    try:
        return getpass.getuser()
    except (OSError, KeyError):
        return str(os.getuid())

def search_commands(query: str, commands: List[SystemCommand] = SYSTEM_COMMANDS) -> List[SystemCommand]:
    """Commands whose name or any keyword contains ``query`` (case-insensitive), in table order."""
    q = query.lower()
    return [c for c in commands
            if q in c.name.lower() or any(q in keyword.lower() for keyword in c.keywords)]

def get_command_line(command_id: str, system: str = None) -> List[str]:
    table = COMMAND_LINES.get(system or get_system(), COMMAND_LINES['linux'])
    if command_id not in table:
        raise SystemCommandError(f"Unknown system command: {command_id}")
    args = list(table[command_id])
    if command_id == 'logout' and args[-1] == '':
        args[-1] = current_user()
    return args

def execute_system_command(command_id: str, runner=subprocess.run):
    """Runs a system command and waits for it.

    Raises:
        SystemCommandError: For unknown ids or if the command fails
    """
    args = get_command_line(command_id)
    logger.info("Running system command %s: %s", command_id, args)
    try:
        runner(args, check=True, capture_output=True, timeout=30)
    except subprocess.CalledProcessError as e:
        raise SystemCommandError(f"{args[0]} exited with status {e.returncode}")
    except (OSError, subprocess.SubprocessError) as e:
        raise SystemCommandError(str(e))
