#!/usr/bin/env python3
"""Overwork tracker console application."""

from __future__ import annotations

import signal
import sys
from datetime import timedelta

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

import storage
from logging_handler import setup_logger
from models import Store
from utils import format_duration, history_with_gaps, parse_hhmm

logger = setup_logger(__name__)

MENU_OPTIONS = [
    (1, "Record Working Hours"),
    (2, "Change Need Work"),
    (3, "Print History"),
]


def overwork_text(value: timedelta) -> Text:
    """Overwork as styled text: red for a shortfall, green for extra time."""
    style = "red" if value < timedelta() else "green" if value > timedelta() else ""
    return Text(format_duration(value), style=style)


class OverworkApp:
    """Interactive menu over the store.

    Every action that changes the store saves it before returning to the menu.
    """

    def __init__(self, store: Store, console: Console | None = None):
        self.store = store
        self.console = console or Console()

    def run(self):
        """Main loop. Ends only on EOFError or an interrupt from the caller."""
        while True:
            self.show_main_screen()
            self.dispatch(self.read_option())

    def show_main_screen(self):
        self.console.print("---")
        self.console.print(f"Work Today:\t{format_duration(self.store.need_work)}")
        self.console.print(Text("Overwork:\t").append_text(overwork_text(self.store.overwork)))
        self.console.print()
        for number, label in MENU_OPTIONS:
            self.console.print(f"{number}. {label}")
        self.console.print("---")

    def read_option(self) -> int | None:
        """Read a menu choice; anything that isn't an integer is None."""
        raw = self.console.input("Select an option: ")
        try:
            return int(raw.strip())
        except ValueError:
            return None

    def dispatch(self, option: int | None):
        if option == 1:
            self.record_working_hours()
        elif option == 2:
            self.change_need_work()
        elif option == 3:
            self.print_history()
        else:
            self.console.print("Invalid option, please try again.", style="yellow")

    def scan_duration(self, prompt: str) -> timedelta:
        """Prompt until a valid HH:MM duration is entered."""
        self.console.print(prompt)
        while True:
            try:
                return parse_hhmm(self.console.input())
            except ValueError as exc:
                self.console.print(str(exc), style="red", markup=False)

    def wait_for_enter(self, message: str = ""):
        self.console.print(f"\n{message}")
        self.console.input("-> Press Enter to return to the main screen")

    def record_working_hours(self):
        worked = self.scan_duration("Enter hours worked today (format: '09:15'):")
        record = self.store.record_worked(worked)
        storage.save_store(self.store)
        logger.info(
            "Recorded %s worked on %s (overwork %s, total %s)",
            format_duration(record.worked),
            record.date.date().isoformat(),
            format_duration(record.overwork),
            format_duration(self.store.overwork),
        )
        self.wait_for_enter("Worked hours are recorded.")

    def change_need_work(self):
        need_work = self.scan_duration("Enter required work hours for today (format: '09:11'):")
        self.store.change_need_work(need_work)
        storage.save_store(self.store)
        logger.info("Need work changed to %s", format_duration(need_work))
        self.wait_for_enter("Today's need work time is changed.")

    def build_history_table(self) -> Table:
        """History table with one blank row per skipped calendar day."""
        table = Table(title="History")
        table.add_column("Date")
        table.add_column("Worked", justify="right")
        table.add_column("Need work", justify="right")
        table.add_column("Overwork", justify="right")

        for record in history_with_gaps(self.store.history):
            if record is None:
                table.add_row("", "", "", "")
                continue
            table.add_row(
                record.date.strftime("%d.%m"),
                format_duration(record.worked),
                format_duration(record.need_work),
                overwork_text(record.overwork),
            )
        return table

    def print_history(self):
        self.console.print(self.build_history_table())
        self.wait_for_enter()


def _raise_exit(signum, frame):
    raise SystemExit(128 + signum)


def main() -> int:
    console = Console()

    try:
        store = storage.startup()
    except storage.StorageError as exc:
        console.print(f"Can't start up the program: {escape(str(exc))}", style="bold red")
        logger.error("Startup failed: %s", exc)
        return 1

    signal.signal(signal.SIGTERM, _raise_exit)
    console.print(f"Data file: {escape(str(storage.DATA_PATH))}", style="dim")
    app = OverworkApp(store, console)

    try:
        app.run()
    except storage.StorageError as exc:
        # In-memory state no longer matches the file, don't keep going
        console.print(f"\nCan't save data: {escape(str(exc))}", style="bold red")
        logger.error("Aborting session: %s", exc)
        return 1
    except (KeyboardInterrupt, SystemExit, EOFError) as exc:
        logger.info("Session ended by %s", type(exc).__name__)

    try:
        storage.shutdown(store)
    except storage.StorageError as exc:
        console.print(f"\nCan't save data: {escape(str(exc))}", style="bold red")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
