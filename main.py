#!/usr/bin/env python3
"""
Quick Launch - Entry Point

A keyboard-driven launcher that searches applications, files, system
commands, clipboard history and inline arithmetic. Runs the launcher
window by default, or single operations from the command line.
"""

import argparse
import json
import sys
import threading

from tqdm import tqdm

from core.config import Config
from core.data_structures import IndexStatus, STATE_INDEXING
from core.services import build_aggregator, start_background, stop_background
from utils.i18n import translator as t
from utils.logging_utils import setup_logging


def run_index_with_progress(aggregator, stream=sys.stderr) -> IndexStatus:
    """Run a file scan in the foreground, rendering status updates as a progress bar."""
    done = threading.Event()
    bar = tqdm(total=1, desc=t.get('cli_indexing'), unit='file', file=stream, leave=True)

    def on_status(status: IndexStatus):
        if status.state == STATE_INDEXING:
            if status.total:
                bar.total = max(status.total, status.count)
            bar.n = status.count
            bar.set_postfix_str(status.message)
            bar.refresh()
        else:
            bar.total = bar.n = status.count
            bar.set_postfix_str(status.message)
            bar.refresh()
            done.set()

    aggregator.file_index.subscribe(on_status)
    try:
        aggregator.reindex_files()
        done.wait()
    finally:
        aggregator.file_index.unsubscribe(on_status)
        bar.close()
    return aggregator.get_index_status()


def run_search_cli(aggregator, args):
    """Handles the 'search' command."""
    if args.files:
        run_index_with_progress(aggregator)

    results = aggregator.search(args.query)

    if args.output == 'json':
        print(json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False))
        return

    if not results:
        print(t.get('cli_no_results'))
        return
    for result in results:
        print(f"{result.category:<12s} | {result.title} | {result.subtitle}  [{result.id}]")


def run_exec_cli(aggregator, args):
    """Handles the 'exec' command."""
    # Calculator and clipboard ids refer to the preceding query
    if args.query is not None:
        aggregator.search(args.query)
    outcome = aggregator.execute(args.id)
    print(t.get('cli_outcome', outcome))
    return 0 if outcome in ('ok', 'copied') else 1


def run_actions_cli(aggregator, args):
    """Handles the 'actions' and 'action' commands."""
    if args.command == 'actions':
        actions = aggregator.get_context_actions(args.id)
        if not actions:
            print(t.get('cli_no_actions', args.id))
            return 1
        for action in actions:
            print(f"{action.id:<10s} {action.icon} {action.label}")
        return 0

    outcome = aggregator.execute_context_action(args.id, args.action_id)
    print(t.get('cli_outcome', outcome))
    return 0 if outcome == 'ok' else 1


def run_cli(aggregator, args) -> int:
    """Master CLI handler that dispatches to sub-commands."""
    if args.command == 'search':
        run_search_cli(aggregator, args)
        return 0
    if args.command == 'exec':
        return run_exec_cli(aggregator, args)
    if args.command in ('actions', 'action'):
        return run_actions_cli(aggregator, args)
    if args.command == 'index':
        status = run_index_with_progress(aggregator)
        print(status.message)
        return 0
    return 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Quick Launch: search and launch apps, files and commands.",
        formatter_class=argparse.RawTextHelpFormatter,
        epilog="""
Run without arguments to open the launcher window.

Examples:
  quicklaunch search notepad
  quicklaunch search "=2+2*3" --output json
  quicklaunch search report --files
  quicklaunch exec "Firefox"
  quicklaunch actions "Firefox"
"""
    )
    parser.add_argument('--lang', choices=['en', 'de'], help='Language for messages')
    parser.add_argument('--verbose', '-v', action='store_true', help='Log debug output to stderr')

    subparsers = parser.add_subparsers(dest='command', help='Available commands', required=False)

    search_parser = subparsers.add_parser('search', help='Search and print results')
    search_parser.add_argument('query', type=str, help='Query text (empty string for suggestions)')
    search_parser.add_argument('--files', action='store_true', help='Index user files first so file results are included')
    search_parser.add_argument('--output', choices=['text', 'json'], default='text', help='Output format')

    exec_parser = subparsers.add_parser('exec', help='Execute a result by id')
    exec_parser.add_argument('id', type=str, help='Result id, as printed by search')
    exec_parser.add_argument('--query', type=str, help='Query that produced the id (calculator results)')

    actions_parser = subparsers.add_parser('actions', help='List context actions for an application')
    actions_parser.add_argument('id', type=str)

    action_parser = subparsers.add_parser('action', help='Run a context action for an application')
    action_parser.add_argument('id', type=str)
    action_parser.add_argument('action_id', choices=['open', 'admin', 'reveal', 'copy-path'])

    subparsers.add_parser('index', help='Index user files and report the result')
    return parser


def main():
    """Main entry point for the launcher window and CLI."""
    args = build_parser().parse_args()

    config = Config()
    setup_logging(config.data_path('debug.log'), verbose=args.verbose)
    t.set_language(args.lang or config.get('language', 'en'))

    if args.command:
        aggregator = build_aggregator(config)
        try:
            sys.exit(run_cli(aggregator, args))
        finally:
            stop_background(aggregator)

    from ui.launcher_window import LauncherWindow
    try:
        app = LauncherWindow(config)
        start_background(app.aggregator, config)
        app.run()
    except KeyboardInterrupt:
        print("\nApplication interrupted by user.")

if __name__ == "__main__":
    main()
