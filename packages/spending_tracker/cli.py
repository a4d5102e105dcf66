"""CLI for the ``spending_tracker`` package.

Command handlers (``cmd_*``) are plain functions returning a process exit
code; the Typer commands below are thin wrappers around them. Environment
variables are loaded from a local ``.env`` (``python-dotenv``) by the root
callback before any command runs. Business logic lives in
``spending_tracker.api`` and the modules it calls.
"""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table
from typer.models import OptionInfo

from . import api
from .config import load_settings
from .errors import EmptyOrUnreadableFile, InvalidAmount, ParseError
from .logging_setup import configure_logging
from .reports import budget_overview, budget_plan, get_monthly_totals, month_over_month
from .store import TrackerStore
from .term_ui import describe_transaction, select_category


def _store(database_url: str | None) -> TrackerStore:
    store = TrackerStore.from_settings(load_settings(database_url=database_url))
    api.ensure_catalog(store=store)
    return store


def _err(msg: str) -> None:
    print(f"Error: {msg}", file=sys.stderr)


# ---- Command handlers ---------------------------------------------------------


def cmd_import(
    csv_path: str,
    *,
    database_url: str | None = None,
    reexport: bool | None = None,
) -> int:
    """Import a bank CSV (or one of our own exports) into the stored state.

    Prints ``<appended> appended, <flagged> flagged for review`` on success.
    Any parse failure leaves stored state untouched and returns 1.
    """

    store = _store(database_url)
    try:
        summary = api.import_file(csv_path, store=store, reexport=reexport)
    except InvalidAmount as e:
        _err(f"Import aborted, no transactions were added. {e}")
        return 1
    except EmptyOrUnreadableFile as e:
        _err(f"Nothing to import: {e}")
        return 1
    except ParseError as e:
        _err(f"Failed to parse CSV: {e}")
        return 1

    origin = " (re-export)" if summary.reexport else ""
    print(
        f"{summary.appended} appended, {summary.flagged_for_review} flagged for review, "
        f"{summary.ignored} ignored{origin}"
    )
    return 0


def cmd_review(*, database_url: str | None = None, session=None) -> int:
    """Walk the review queue interactively; an empty answer stops (finish later)."""

    store = _store(database_url)
    names = [c.name for c in store.load_categories()]
    resolved = 0
    while True:
        pending = api.pending_reviews(store=store)
        if not pending:
            print("No transactions need review.")
            break
        current = pending[0]
        print()
        print(f"{len(pending)} transaction(s) need review")
        print(describe_transaction(current))
        choice = select_category(names, session=session)
        if choice is None:
            print("Finishing later.")
            break
        api.resolve_review(current.id, choice, store=store)
        resolved += 1
    print(f"Resolved {resolved} transaction(s).")
    return 0


def cmd_resolve(tx_id: str, category: str, *, database_url: str | None = None) -> int:
    store = _store(database_url)
    resolved = api.resolve_review(tx_id, category, store=store)
    if resolved is None:
        _err(f"No pending review with id {tx_id!r}")
        return 1
    print(f"{resolved.id}\t{resolved.category}")
    return 0


def cmd_skip(tx_id: str, *, database_url: str | None = None) -> int:
    store = _store(database_url)
    if not api.skip_review(tx_id, store=store):
        _err(f"No pending review with id {tx_id!r}")
        return 1
    return 0


def cmd_pending(*, database_url: str | None = None) -> int:
    store = _store(database_url)
    pending = api.pending_reviews(store=store)
    table = Table(title=f"Pending review ({len(pending)})")
    for col in ("ID", "Date", "Description", "Amount", "Category"):
        table.add_column(col)
    for tx in pending:
        table.add_row(tx.id, tx.date, tx.description, f"{tx.amount:.2f}", tx.category)
    Console().print(table)
    return 0


def cmd_export(output: str | None, *, database_url: str | None = None) -> int:
    store = _store(database_url)
    try:
        path, count = api.export_to(output, store=store)
    except OSError as e:
        _err(f"Export failed: {e}")
        return 1
    print(f"Exported {count} transaction(s) to {path}")
    return 0


def cmd_report(month: str, *, database_url: str | None = None) -> int:
    """Print monthly totals, spending by category and the budget overview."""

    store = _store(database_url)
    transactions = store.load_transactions()
    try:
        totals = get_monthly_totals(transactions, month)
    except ValueError as e:
        _err(str(e))
        return 1

    console = Console()
    summary = Table(title=f"Summary for {month}")
    summary.add_column("Income", justify="right")
    summary.add_column("Expenses", justify="right")
    summary.add_column("Net", justify="right")
    summary.add_row(f"{totals.income:.2f}", f"{totals.expense:.2f}", f"{totals.net:.2f}")
    console.print(summary)

    by_cat = Table(title="Spending by category")
    by_cat.add_column("Category")
    by_cat.add_column("Spent", justify="right")
    for name, spent in sorted(totals.by_category.items(), key=lambda kv: kv[1], reverse=True):
        by_cat.add_row(name, f"{spent:.2f}")
    console.print(by_cat)

    budgets = store.load_budgets()
    if budgets:
        overview = Table(title="Budgets")
        for col in ("Category", "Spent", "Budget", "Left", "Used %"):
            overview.add_column(col)
        for st in budget_overview(transactions, month, budgets, store.load_categories()):
            left = f"{st.overage:.2f} over" if st.over_budget else f"{st.remaining:.2f}"
            overview.add_row(
                st.category, f"{st.spent:.2f}", f"{st.budget:.2f}", left, f"{st.percent_used}"
            )
        console.print(overview)
        plan = budget_plan(budgets, store.load_monthly_income())
        console.print(
            f"Income {plan.income:.2f} - budgeted {plan.total_budgeted:.2f} = "
            f"{plan.remaining_income:.2f} unallocated"
        )

    if "-" in month:
        cmp = month_over_month(transactions, month)
        console.print(
            f"Net {cmp.current:.2f} vs {cmp.previous:.2f} in {cmp.previous_month} "
            f"({cmp.change:+.2f}, {cmp.percent}%)"
        )
    return 0


def cmd_set_budget(category: str, amount: str, *, database_url: str | None = None) -> int:
    store = _store(database_url)
    value = api.set_category_budget(category, amount, store=store)
    print(f"{category}\t{value:.2f}")
    return 0


def cmd_set_income(amount: str, *, database_url: str | None = None) -> int:
    store = _store(database_url)
    api.set_monthly_income(amount, store=store)
    return 0


def cmd_clear(*, yes: bool, database_url: str | None = None) -> int:
    if not yes:
        _err("Refusing to clear stored data without --yes")
        return 1
    store = TrackerStore.from_settings(load_settings(database_url=database_url))
    api.clear_all(store=store)
    print("Cleared all stored data.")
    return 0


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help=(
        "Track spending from bank CSV exports: import, review ambiguous "
        "transactions, report monthly totals and budgets."
    ),
)


# Module-level option objects keep calls out of parameter defaults.
CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,
    "--csv-path",
    help="Path to the CSV file to import",
    dir_okay=False,
    file_okay=True,
    exists=False,  # the handler reports missing files itself
)
DATABASE_URL_OPTION: OptionInfo = typer.Option(
    None, help="Override SPENDING_TRACKER_DATABASE_URL / DATABASE_URL."
)


def _db(ctx: typer.Context, database_url: str | None) -> str | None:
    return database_url or (ctx.obj or {}).get("database_url")


@app.command("import")
def import_cmd(
    ctx: typer.Context,
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    *,
    reexport: bool | None = typer.Option(
        None,
        "--reexport/--no-reexport",
        help="Force provenance; by default files named 'exported*' are re-exports.",
    ),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Import a CSV into the stored transactions."""

    raise typer.Exit(
        cmd_import(str(csv_path), database_url=_db(ctx, database_url), reexport=reexport)
    )


@app.command("review")
def review_cmd(ctx: typer.Context, database_url: str | None = DATABASE_URL_OPTION) -> None:
    """Assign categories to flagged transactions one by one."""

    raise typer.Exit(cmd_review(database_url=_db(ctx, database_url)))


@app.command("resolve")
def resolve_cmd(
    ctx: typer.Context,
    tx_id: str = typer.Option(..., "--id", help="Transaction id from `pending`."),
    category: str = typer.Option(..., help="Category to assign."),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Resolve one pending transaction without prompting."""

    raise typer.Exit(cmd_resolve(tx_id, category, database_url=_db(ctx, database_url)))


@app.command("skip")
def skip_cmd(
    ctx: typer.Context,
    tx_id: str = typer.Option(..., "--id", help="Transaction id from `pending`."),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Move a pending transaction to the back of the review queue."""

    raise typer.Exit(cmd_skip(tx_id, database_url=_db(ctx, database_url)))


@app.command("pending")
def pending_cmd(ctx: typer.Context, database_url: str | None = DATABASE_URL_OPTION) -> None:
    """List transactions waiting for review."""

    raise typer.Exit(cmd_pending(database_url=_db(ctx, database_url)))


@app.command("export")
def export_cmd(
    ctx: typer.Context,
    output: str | None = typer.Option(
        None, help="File or directory (default: exported-transactions-<date>.csv in CWD)."
    ),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Export all transactions in a re-importable CSV."""

    raise typer.Exit(cmd_export(output, database_url=_db(ctx, database_url)))


@app.command("report")
def report_cmd(
    ctx: typer.Context,
    month: str | None = typer.Option(
        None, help="Month as YYYY-MM, or 1-12 for any year (default: current month)."
    ),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Show income, expenses, spending by category and budgets for a month."""

    month = month or date.today().strftime("%Y-%m")
    raise typer.Exit(cmd_report(month, database_url=_db(ctx, database_url)))


budget_app = typer.Typer(no_args_is_help=True, help="Monthly category budgets.")
income_app = typer.Typer(no_args_is_help=True, help="Declared monthly income.")
app.add_typer(budget_app, name="budget")
app.add_typer(income_app, name="income")


@budget_app.command("set")
def budget_set_cmd(
    ctx: typer.Context,
    category: str = typer.Option(..., help="Catalog category name."),
    amount: str = typer.Option(..., help="Monthly limit; invalid input stores 0."),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Set the monthly budget for one category."""

    raise typer.Exit(cmd_set_budget(category, amount, database_url=_db(ctx, database_url)))


@income_app.command("set")
def income_set_cmd(
    ctx: typer.Context,
    amount: str = typer.Option(..., help="Declared monthly income."),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Record the declared monthly income."""

    raise typer.Exit(cmd_set_income(amount, database_url=_db(ctx, database_url)))


@app.command("clear")
def clear_cmd(
    ctx: typer.Context,
    yes: bool = typer.Option(False, "--yes", help="Confirm deleting all stored data."),
    database_url: str | None = DATABASE_URL_OPTION,
) -> None:
    """Delete all stored transactions, review queue, budgets and income."""

    raise typer.Exit(cmd_clear(yes=yes, database_url=_db(ctx, database_url)))


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    *,
    database_url: str | None = DATABASE_URL_OPTION,
    log_level: str | None = typer.Option(
        None, help="Logging level (defaults to SPENDING_TRACKER_LOG_LEVEL or INFO)."
    ),
) -> None:
    """Root command: load ``.env`` and configure logging for all subcommands."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)
    ctx.obj = {"database_url": database_url}

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


def main() -> None:  # pragma: no cover - console script entry point
    app()


if __name__ == "__main__":  # pragma: no cover
    app()
