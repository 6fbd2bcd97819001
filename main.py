import os
import sys
from dataclasses import dataclass
from pathlib import Path

import typer

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.transaction_dao import TransactionDAO
from database.category_dao import CategoryDAO
from database.subcategory_blacklist_dao import SubcategoryBlacklistDAO

from services.category_service import CategoryService
from services.transaction_service import TransactionService
from services.report_service import ReportService
from services.chart_service import ChartService
from services.data_service import DataService
from services.reminder_service import ReminderService

from models.chart import ChartRange, RangeKind
from ui.charts import render_bucket_chart, render_breakdown_pie
from utils.app_config import AppConfig, load_config, set_db_folder, set_language
from utils.currency import format_currency
from utils.date_helpers import friendly_month, today_str
from utils.logging_setup import configure_logging, get_logger

log = get_logger("tally.cli")


@dataclass
class AppContext:
    db: DatabaseManager
    config: AppConfig
    categories: CategoryService
    transactions: TransactionService
    reports: ReportService
    charts: ChartService
    data: DataService
    reminders: ReminderService


def build_context(config: AppConfig, env: str | None = None) -> AppContext:
    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open_default(
        db_folder=config.db_folder, env=env or os.getenv("TALLY_ENV")
    )

    # ── DAOs ─────────────────────────────────────────────────────────────────
    tx_dao = TransactionDAO(db)
    category_dao = CategoryDAO(db)
    blacklist_dao = SubcategoryBlacklistDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    category_svc = CategoryService(category_dao)
    return AppContext(
        db=db,
        config=config,
        categories=category_svc,
        transactions=TransactionService(tx_dao, blacklist_dao),
        reports=ReportService(category_svc),
        charts=ChartService(tx_dao, category_svc),
        data=DataService(db, category_dao, tx_dao),
        reminders=ReminderService(config),
    )


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Record income and expenses, chart them, and back them up.",
)
categories_app = typer.Typer(no_args_is_help=True, help="Manage categories.")
app.add_typer(categories_app, name="categories")


def _fail(exc: Exception):
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(1)


@app.callback()
def _root(
    ctx: typer.Context,
    db_folder: str | None = typer.Option(
        None, help="Folder holding the database file (overrides the saved config)."
    ),
    log_level: str | None = typer.Option(
        None, help="Logging level, e.g. DEBUG (falls back to TALLY_LOG_LEVEL)."
    ),
) -> None:
    """Open the database and show the monthly backup reminder when due."""
    configure_logging(log_level)
    config = load_config()
    log.debug("loaded config %s", config)
    if db_folder:
        config.db_folder = db_folder
    context = build_context(config)
    ctx.obj = context
    ctx.call_on_close(context.db.close)
    for reminder in context.reminders.get_reminders():
        typer.echo(reminder.title, err=True)


# ── Categories ───────────────────────────────────────────────────────────────


@categories_app.command("list")
def categories_list(ctx: typer.Context):
    for c in ctx.obj.categories.get_all():
        typer.echo(f"{c.id:>4}  {c.type:<8} {c.color}  {c.name}")


@categories_app.command("add")
def categories_add(
    ctx: typer.Context,
    name: str,
    type_: str = typer.Option("expense", "--type", "-t", help="expense or income"),
):
    try:
        c = ctx.obj.categories.create(name, type_)
    except ValueError as exc:
        _fail(exc)
    typer.echo(f"Added {c.type} category {c.name} ({c.color}) with id {c.id}")


@categories_app.command("rename")
def categories_rename(ctx: typer.Context, category_id: int, name: str):
    try:
        c = ctx.obj.categories.rename(category_id, name)
    except ValueError as exc:
        _fail(exc)
    typer.echo(f"Renamed category {c.id} to {c.name}")


@categories_app.command("delete")
def categories_delete(ctx: typer.Context, category_id: int):
    try:
        ctx.obj.categories.delete(category_id)
    except ValueError as exc:
        _fail(exc)
    typer.echo(f"Deleted category {category_id}")


# ── Transactions ─────────────────────────────────────────────────────────────


@app.command("add")
def add_transaction(
    ctx: typer.Context,
    category: str = typer.Option(..., "--category", "-c"),
    amount: float = typer.Option(..., "--amount", "-a"),
    type_: str = typer.Option("expense", "--type", "-t", help="expense or income"),
    date: str | None = typer.Option(None, "--date", "-d", help="YYYY-MM-DD, defaults to today"),
    note: str = typer.Option("", "--note", "-n"),
    subcategory: str | None = typer.Option(None, "--subcategory", "-s"),
):
    try:
        tx = ctx.obj.transactions.create(
            type_, category, amount, date or today_str(), note, subcategory
        )
    except ValueError as exc:
        _fail(exc)
    typer.echo(f"Added {tx.type} #{tx.id}: {tx.date} {tx.category} {format_currency(tx.amount)}")


@app.command("edit")
def edit_transaction(
    ctx: typer.Context,
    tx_id: int,
    category: str | None = typer.Option(None, "--category", "-c"),
    amount: float | None = typer.Option(None, "--amount", "-a"),
    type_: str | None = typer.Option(None, "--type", "-t"),
    date: str | None = typer.Option(None, "--date", "-d"),
    note: str | None = typer.Option(None, "--note", "-n"),
    subcategory: str | None = typer.Option(None, "--subcategory", "-s"),
):
    svc = ctx.obj.transactions
    current = svc.get_by_id(tx_id)
    if current is None:
        _fail(ValueError(f"No transaction with id {tx_id}."))
    try:
        tx = svc.update(
            tx_id,
            type_ or current.type,
            category or current.category,
            current.amount if amount is None else amount,
            date or current.date,
            current.note if note is None else note,
            current.subcategory if subcategory is None else subcategory,
        )
    except ValueError as exc:
        _fail(exc)
    typer.echo(f"Updated #{tx.id}: {tx.date} {tx.category} {format_currency(tx.amount)}")


@app.command("delete")
def delete_transaction(ctx: typer.Context, tx_id: int):
    try:
        ctx.obj.transactions.delete(tx_id)
    except ValueError as exc:
        _fail(exc)
    typer.echo(f"Deleted transaction {tx_id}")


@app.command("list")
def list_transactions(
    ctx: typer.Context,
    year: int | None = typer.Option(None, "--year", "-y"),
    month: int | None = typer.Option(None, "--month", "-m"),
):
    """Transactions grouped by year, month and day, newest first."""
    try:
        txs = ctx.obj.transactions.get_for_period(year, month)
    except ValueError as exc:
        _fail(exc)
    reports = ctx.obj.reports
    language = ctx.obj.config.language
    for y, months in reports.group_by_month(txs).items():
        year_totals = reports.get_summary(t for m in months.values() for t in m)
        typer.echo(
            f"{y}  In: +{format_currency(year_totals['income'])}"
            f"  Out: -{format_currency(year_totals['expense'])}"
        )
        for m, month_txs in months.items():
            month_totals = reports.get_summary(month_txs)
            typer.echo(
                f"  {friendly_month(y, m, language)}"
                f"  In: +{format_currency(month_totals['income'])}"
                f"  Out: -{format_currency(month_totals['expense'])}"
            )
            for day in reports.get_daily_summaries(month_txs):
                typer.echo(f"    {day.date[5:]}")
                day_txs = sorted(
                    (t for t in month_txs if t.date == day.date),
                    key=lambda t: t.id, reverse=True,
                )
                for t in day_txs:
                    sign = "+" if t.type == "income" else "-"
                    sub = f"/{t.subcategory}" if t.subcategory else ""
                    typer.echo(
                        f"      #{t.id:<5} {sign}{format_currency(t.amount):>12}"
                        f"  {t.category}{sub}  {t.note}".rstrip()
                    )


@app.command("summary")
def summary(
    ctx: typer.Context,
    year: int | None = typer.Option(None, "--year", "-y"),
    month: int | None = typer.Option(None, "--month", "-m"),
    expense_png: Path | None = typer.Option(None, help="Write the expense breakdown donut here."),
    income_png: Path | None = typer.Option(None, help="Write the income breakdown donut here."),
):
    """Totals and per-category breakdown for a period."""
    try:
        txs = ctx.obj.transactions.get_for_period(year, month)
    except ValueError as exc:
        _fail(exc)
    reports = ctx.obj.reports
    totals = reports.get_summary(txs)
    typer.echo(
        f"Income {format_currency(totals['income'])}  "
        f"Expense {format_currency(totals['expense'])}  "
        f"Net {format_currency(totals['net'])}"
    )
    for type_, png in (("expense", expense_png), ("income", income_png)):
        breakdown = reports.get_category_breakdown(txs, type_)
        if breakdown:
            typer.echo(f"{type_.capitalize()} by category:")
        for s in breakdown:
            typer.echo(f"  {s.category:<16} {format_currency(s.amount):>12}  {s.percentage:5.1f}%")
        if png:
            render_breakdown_pie(breakdown, png, title=type_.upper()[:3])
            typer.echo(f"Wrote {png}")


@app.command("chart")
def chart(
    ctx: typer.Context,
    range_: RangeKind = typer.Option(RangeKind.TWELVE_DAYS, "--range", "-r"),
    start: str = typer.Option("", "--start", help="Custom range start, YYYY-MM-DD"),
    end: str = typer.Option("", "--end", help="Custom range end, YYYY-MM-DD"),
    png: Path | None = typer.Option(None, help="Write the stacked bar chart here."),
    hide: list[str] | None = typer.Option(None, "--hide", help="Category to leave out of the chart."),
):
    """Income and expense per time bucket."""
    buckets = ctx.obj.charts.get_buckets(ChartRange(range_, start, end))
    if not buckets:
        typer.echo("A custom range needs both --start and --end.")
        return
    for b in buckets:
        typer.echo(
            f"{b.label:<15} In {format_currency(b.total_income):>12}"
            f"  Out {format_currency(b.total_expense):>12}"
        )
    if png:
        render_bucket_chart(buckets, ctx.obj.charts.get_color_map(), png, hidden=hide or ())
        typer.echo(f"Wrote {png}")


@app.command("hints")
def hints(
    ctx: typer.Context,
    category: str,
    hidden: bool = typer.Option(False, "--hidden", help="List hidden hints instead."),
):
    """Recently used subcategories for a category."""
    svc = ctx.obj.transactions
    found = svc.get_hidden_subcategory_hints(category) if hidden else svc.get_subcategory_hints(category)
    for h in found:
        typer.echo(h)


@app.command("hide-hint")
def hide_hint(ctx: typer.Context, category: str, subcategory: str):
    ctx.obj.transactions.hide_subcategory_hint(category, subcategory)
    typer.echo(f"Hid hint {subcategory} for {category}")


@app.command("show-hint")
def show_hint(ctx: typer.Context, category: str, subcategory: str):
    """Offer a previously hidden subcategory hint again."""
    ctx.obj.transactions.show_subcategory_hint(category, subcategory)
    typer.echo(f"Showing hint {subcategory} for {category} again")


# ── Backup ───────────────────────────────────────────────────────────────────


@app.command("export")
def export(
    ctx: typer.Context,
    folder: Path = typer.Option(Path("."), "--folder", "-f"),
):
    """Write a JSON backup of all categories and transactions."""
    path = ctx.obj.data.write_backup(folder)
    ctx.obj.reminders.mark_reminded()
    typer.echo(f"Wrote {path}")


@app.command("import")
def import_(ctx: typer.Context, path: Path):
    """Merge a JSON backup into the database."""
    try:
        stats = ctx.obj.data.import_data(DataService.read_backup(path))
    except (OSError, ValueError) as exc:
        _fail(exc)
    typer.echo(
        f"Imported {stats['categories']} categories and "
        f"{stats['transactions']} transactions"
    )


@app.command("language")
def language(ctx: typer.Context, lang: str | None = typer.Argument(None)):
    """Show or set the display language (zh or en)."""
    if lang is None:
        typer.echo(ctx.obj.config.language)
        return
    try:
        set_language(ctx.obj.config, lang)
    except ValueError as exc:
        _fail(exc)
    typer.echo(f"Language set to {lang}")


@app.command("db-folder")
def db_folder_cmd(ctx: typer.Context, path: Path | None = typer.Argument(None)):
    """Show or save the folder holding the database file."""
    if path is None:
        typer.echo(ctx.obj.db.db_path)
        return
    path.mkdir(parents=True, exist_ok=True)
    set_db_folder(ctx.obj.config, str(path.resolve()))
    typer.echo(f"Database folder set to {path.resolve()} (takes effect next run)")


def main():
    app()


if __name__ == "__main__":
    main()
