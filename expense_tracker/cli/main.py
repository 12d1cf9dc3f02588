"""Command-line interface for recording and reviewing expenses."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from datetime import date
from pathlib import Path
from typing import Any

from expense_tracker import __version__
from expense_tracker.engine.config import Settings, load_settings
from expense_tracker.engine.dates import parse_local_date
from expense_tracker.engine.errors import ExpenseTrackerError, NotFound
from expense_tracker.engine.filters import FilterSpec, Statistics
from expense_tracker.engine.formatting import format_currency, format_date
from expense_tracker.engine.gui import launch_gui
from expense_tracker.engine.lifecycle import AppState, LifecycleManager
from expense_tracker.engine.logging import configure_cli_logging, setup_logger
from expense_tracker.engine.records import Category, ExpenseRecord, category_label
from expense_tracker.engine.stores import available_stores

DESCRIPTION = "Personal expense tracker"
PREFIX = "[expenses]"


def _parse_date(value: str) -> date:
    try:
        return parse_local_date(value)
    except ExpenseTrackerError as exc:
        raise argparse.ArgumentTypeError("Expected YYYY-MM-DD date format") from exc


def _category_choices() -> list[str]:
    return [category.value for category in Category]


def _add_list_subparser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    listing = subparsers.add_parser("list", help="Show expenses, optionally filtered")
    listing.add_argument("--category", choices=_category_choices(), help="Only this category")
    listing.add_argument("--from", dest="start_date", type=_parse_date, help="Earliest date (inclusive)")
    listing.add_argument("--to", dest="end_date", type=_parse_date, help="Latest date (inclusive)")


def _add_add_subparser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    add = subparsers.add_parser("add", help="Record a new expense")
    add.add_argument("--title", required=True)
    add.add_argument("--amount", required=True, help="Non-negative amount")
    add.add_argument("--category", required=True, choices=_category_choices())
    add.add_argument(
        "--date",
        default=None,
        help="Calendar day (YYYY-MM-DD); defaults to today",
    )


def _add_edit_subparser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    edit = subparsers.add_parser("edit", help="Replace an expense; omitted fields keep their value")
    edit.add_argument("id", type=int)
    edit.add_argument("--title")
    edit.add_argument("--amount")
    edit.add_argument("--category", choices=_category_choices())
    edit.add_argument("--date")


def _add_delete_subparser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    delete = subparsers.add_parser("delete", help="Delete an expense")
    delete.add_argument("id", type=int)


def _add_serve_subparser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    serve = subparsers.add_parser("serve", help="Run the REST API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=5000)


def _add_gui_subparser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    gui = subparsers.add_parser("gui", help="Launch the desktop form")
    gui.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the resolved settings without opening a window",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="expenses", description=DESCRIPTION)
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--json-logs",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Mirror logs to artifacts/logs/expenses.log in JSON format",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default INFO)")
    parser.add_argument("--config", type=Path, default=None, help="YAML settings file")
    parser.add_argument("--store", choices=available_stores(), default=None, help="Record store backend")
    parser.add_argument("--api-url", default=None, help="Base URL of the REST API")
    parser.add_argument("--local-path", type=Path, default=None, help="JSON file for the local store")
    parser.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds")
    sub = parser.add_subparsers(dest="cmd", required=True)
    _add_list_subparser(sub)
    _add_add_subparser(sub)
    _add_edit_subparser(sub)
    _add_delete_subparser(sub)
    sub.add_parser("stats", help="Show totals and per-category breakdown")
    _add_serve_subparser(sub)
    _add_gui_subparser(sub)
    return parser


def _settings(args: argparse.Namespace) -> Settings:
    return load_settings(
        args.config,
        overrides={
            "store": args.store,
            "api_url": args.api_url,
            "local_path": args.local_path,
            "timeout": args.timeout,
        },
    )


def _format_row(record: ExpenseRecord, symbol: str) -> str:
    return (
        f"{record.id:>6}  {format_date(record.date):<12} {record.title:<28} "
        f"{category_label(record.category):<14} {format_currency(record.amount, symbol):>12}"
    )


def _print_statistics(stats: Statistics, symbol: str) -> None:
    print(
        f"{PREFIX} stats count={stats.count} total={format_currency(stats.total, symbol)} "
        f"this_month={format_currency(stats.current_month_total, symbol)}"
    )
    for item in stats.per_category_totals:
        print(f"  {item.label:<14} {format_currency(item.total, symbol):>12}")


def _handle_list(manager: LifecycleManager, state: AppState, settings: Settings, args: argparse.Namespace) -> None:
    spec = FilterSpec(
        category=Category(args.category) if args.category else None,
        start_date=args.start_date,
        end_date=args.end_date,
    )
    state = manager.set_filter(state, spec)
    visible = manager.visible(state)
    for record in visible:
        print(_format_row(record, settings.currency_symbol))
    shown_total = sum(record.amount for record in visible)
    print(
        f"{PREFIX} list shown={len(visible)} of={len(state.records)} "
        f"total={format_currency(shown_total, settings.currency_symbol)}"
    )


def _handle_add(manager: LifecycleManager, state: AppState, settings: Settings, args: argparse.Namespace) -> None:
    values = {
        "title": args.title,
        "amount": args.amount,
        "category": args.category,
        "date": args.date or date.today().isoformat(),
    }
    known = {record.id for record in state.records}
    state = manager.submit(state, values)
    record = next(item for item in state.records if item.id not in known)
    print(f"{PREFIX} added {_format_row(record, settings.currency_symbol).strip()}")


def _handle_edit(manager: LifecycleManager, state: AppState, settings: Settings, args: argparse.Namespace) -> None:
    current = state.find(args.id)
    if current is None:
        raise NotFound(args.id)
    values: dict[str, Any] = current.to_draft().to_payload()
    for key in ("title", "amount", "category", "date"):
        value = getattr(args, key)
        if value is not None:
            values[key] = value
    state = manager.submit(manager.begin_edit(state, args.id), values, editing_id=args.id)
    record = state.find(args.id)
    print(f"{PREFIX} updated {_format_row(record, settings.currency_symbol).strip()}")  # type: ignore[arg-type]


def _handle_delete(manager: LifecycleManager, state: AppState, settings: Settings, args: argparse.Namespace) -> None:
    existed = state.find(args.id) is not None
    manager.remove(state, args.id)
    print(f"{PREFIX} delete id={args.id} status={'deleted' if existed else 'absent'}")


def _handle_stats(manager: LifecycleManager, state: AppState, settings: Settings, args: argparse.Namespace) -> None:
    _print_statistics(manager.statistics(state), settings.currency_symbol)


def _handle_serve(args: argparse.Namespace) -> None:
    from backend.server import main as serve

    setup_logger("backend", level=args.log_level)
    print(f"{PREFIX} serve host={args.host} port={args.port}")
    serve(host=args.host, port=args.port)


def _handle_gui(settings: Settings, args: argparse.Namespace) -> None:
    if args.dry_run:
        print(
            f"{PREFIX} gui dry-run store={settings.store} api_url={settings.api_url} "
            f"local_path={settings.local_path}"
        )
        return
    if not launch_gui(settings):
        raise SystemExit(f"{PREFIX} error: PySide6 is not installed")


_STORE_COMMANDS = {
    "list": _handle_list,
    "add": _handle_add,
    "edit": _handle_edit,
    "delete": _handle_delete,
    "stats": _handle_stats,
}


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_cli_logging(json_logs=bool(args.json_logs), level=args.log_level)
    if args.cmd == "serve":
        _handle_serve(args)
        return
    try:
        settings = _settings(args)
        if args.cmd == "gui":
            _handle_gui(settings, args)
            return
        manager = LifecycleManager(settings.build_store())
        state = manager.reconcile(AppState())
        _STORE_COMMANDS[args.cmd](manager, state, settings, args)
    except ExpenseTrackerError as exc:
        raise SystemExit(f"{PREFIX} error: {exc}") from exc


if __name__ == "__main__":
    main()
