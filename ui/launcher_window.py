# ui/launcher_window.py

"""Launcher window: query entry, result list and index status line."""
import queue
import tkinter as tk
from tkinter import ttk
from typing import List, Optional

from core.config import Config
from core.data_structures import IndexStatus, SearchResult, STATE_INDEXING
from core.services import build_aggregator, onboarding_message, stop_background
from utils.i18n import translator as t
from utils.platform_utils import calculate_window_geometry

class LauncherWindow:
    """Single-window front end for the ResultAggregator."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

        self.root = tk.Tk()
        self.root.title(t.get('app_title'))
        self.root.geometry(calculate_window_geometry(self.root.winfo_screenwidth(),
                                                     self.root.winfo_screenheight()))
        self.root.protocol("WM_DELETE_WINDOW", self.on_closing)

        # Status updates arrive on the dispatcher thread; the Tk loop drains them
        self.status_queue = queue.Queue()
        self.aggregator = build_aggregator(self.config, on_status=self.status_queue.put,
                                           on_launched=self.hide)
        self.results: List[SearchResult] = []

        self.setup_ui()
        self.refresh_results()
        self.root.after(100, self.poll_status_queue)

    def setup_ui(self):
        main_frame = ttk.Frame(self.root, padding=10)
        main_frame.pack(fill=tk.BOTH, expand=True)

        self.query_var = tk.StringVar()
        self.query_var.trace_add('write', lambda *_: self.refresh_results())
        self.entry = ttk.Entry(main_frame, textvariable=self.query_var, font=('TkDefaultFont', 14))
        self.entry.pack(fill=tk.X)
        ttk.Label(main_frame, text=t.get('search_hint'), foreground='gray').pack(anchor=tk.W, pady=(2, 8))
        self.entry.focus_set()

        columns = ('title', 'subtitle', 'category')
        self.tree = ttk.Treeview(main_frame, columns=columns, show='', selectmode='browse')
        self.tree.column('title', width=260)
        self.tree.column('subtitle', width=280)
        self.tree.column('category', width=110, anchor=tk.E)
        self.tree.pack(fill=tk.BOTH, expand=True)

        welcome = onboarding_message(self.config)
        self.status_var = tk.StringVar(value=welcome or self.aggregator.get_index_status().message)
        ttk.Label(self.root, textvariable=self.status_var, relief=tk.SUNKEN).pack(fill=tk.X, side=tk.BOTTOM)

        self.entry.bind('<Return>', lambda e: self.execute_selected())
        self.entry.bind('<Down>', lambda e: self.move_selection(1))
        self.entry.bind('<Up>', lambda e: self.move_selection(-1))
        self.root.bind('<Escape>', lambda e: self.hide())
        self.tree.bind('<Double-Button-1>', lambda e: self.execute_selected())
        self.tree.bind('<Button-3>', self.on_right_click)

    def refresh_results(self):
        self.results = self.aggregator.search(self.query_var.get())
        self.tree.delete(*self.tree.get_children())
        for i, result in enumerate(self.results):
            self.tree.insert('', tk.END, iid=str(i),
                             values=(result.title, result.subtitle, result.category))
        if self.results:
            self.tree.selection_set('0')

    def selected_result(self) -> Optional[SearchResult]:
        selection = self.tree.selection()
        if not selection:
            return None
        return self.results[int(selection[0])]

    def move_selection(self, step: int):
        if not self.results:
            return
        current = self.tree.selection()
        index = int(current[0]) + step if current else 0
        index = max(0, min(len(self.results) - 1, index))
        self.tree.selection_set(str(index))
        self.tree.see(str(index))

    def execute_selected(self):
        result = self.selected_result()
        if result:
            self.status_var.set(t.get('cli_outcome', self.aggregator.execute(result.id)))

    def on_right_click(self, event):
        row = self.tree.identify_row(event.y)
        if not row:
            return
        self.tree.selection_set(row)
        result = self.results[int(row)]
        actions = self.aggregator.get_context_actions(result.id)
        if not actions:
            return
        menu = tk.Menu(self.root, tearoff=0)
        for action in actions:
            menu.add_command(label=f"{action.icon}  {action.label}",
                             command=lambda a=action.id: self.run_context_action(result.id, a))
        try:
            menu.tk_popup(event.x_root, event.y_root)
        finally:
            menu.grab_release()

    def run_context_action(self, result_id: str, action_id: str):
        outcome = self.aggregator.execute_context_action(result_id, action_id)
        self.status_var.set(t.get('cli_outcome', outcome))

    def poll_status_queue(self):
        """Show index status updates handed over by the indexer."""
        try:
            while True:
                status: IndexStatus = self.status_queue.get_nowait()
                if status.state == STATE_INDEXING and status.total:
                    percent = min(100, int(status.count * 100 / status.total))
                    self.status_var.set(f"{status.message} {percent}%")
                else:
                    self.status_var.set(status.message)
                    self.refresh_results()
        except queue.Empty:
            pass
        self.root.after(100, self.poll_status_queue)

    def hide(self):
        self.query_var.set('')
        self.root.iconify()

    def on_closing(self):
        stop_background(self.aggregator)
        self.root.destroy()

    def run(self):
        """Run the application."""
        self.root.mainloop()
