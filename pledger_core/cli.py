from __future__ import annotations

import dataclasses
import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from pledger_core.domain.models import KINDS, LedgerConfig
from pledger_core.io import config as config_io
from pledger_core.services import reports
from pledger_core.services import scenario as scenario_service
from pledger_core.services import summary as summary_service
from pledger_core.services.store import LedgerStore

app = typer.Typer(help="Probability-weighted ledger: summaries and what-if outcomes.")
report_app = typer.Typer(help="Period reports over the whole ledger.")
app.add_typer(report_app, name="report")

console = Console()

DATE_FORMATS = ["%Y-%m-%d"]


def _money(value: float) -> str:
    return f"{value:,.2f}"


def _as_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(None, help="JSON config with ledger/backup paths"),
    ledger: Optional[Path] = typer.Option(None, help="Primary ledger CSV (overrides config)"),
    backup: Optional[Path] = typer.Option(None, help="Backup ledger CSV (overrides config)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    cfg = config_io.load_ledger_config(config)
    if ledger is not None:
        cfg = dataclasses.replace(cfg, ledger_path=ledger)
    if backup is not None:
        cfg = dataclasses.replace(cfg, backup_path=backup)
    ctx.obj = cfg


def _open_store(ctx: typer.Context) -> LedgerStore:
    cfg: LedgerConfig = ctx.obj
    store = LedgerStore.from_config(cfg)
    report = store.load()
    if report.error and cfg.ledger_path.exists():
        console.print(f"[yellow]Ledger partially loaded ({report.loaded} records): {report.error}[/yellow]")
    return store


def _report_save(store: LedgerStore) -> None:
    report = store.last_save
    if report is None:
        return
    for path, error in report.failed.items():
        console.print(f"[red]Could not write {path}: {error}[/red]")


@app.command()
def add(
    ctx: typer.Context,
    kind: str = typer.Argument(..., help=f"One of: {', '.join(KINDS)}"),
    name: str = typer.Argument(..., help="Item name, used by edit/delete"),
    amount: float = typer.Option(..., help="Amount"),
    category: str = typer.Option("", help="Category (default from config)"),
    when: Optional[datetime] = typer.Option(None, "--date", formats=DATE_FORMATS, help="YYYY-MM-DD, default today"),
    probability: float = typer.Option(1.0, help="Chance the item occurs, 0..1"),
):
    """Add an asset, liability, income or expense."""
    cfg: LedgerConfig = ctx.obj
    store = _open_store(ctx)
    try:
        record = store.add_item(
            kind=kind,
            name=name,
            category=category or cfg.default_category,
            amount=amount,
            date=_as_date(when) or date.today(),
            probability=probability,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    _report_save(store)
    typer.echo(f"Added {record.kind} '{record.name}' ({_money(record.amount)})")


@app.command()
def edit(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the item to edit (first match)"),
    amount: Optional[float] = typer.Option(None, help="New amount"),
    category: Optional[str] = typer.Option(None, help="New category"),
    when: Optional[datetime] = typer.Option(None, "--date", formats=DATE_FORMATS, help="New date"),
    probability: Optional[float] = typer.Option(None, help="New probability"),
):
    """Edit the first item with NAME; omitted options keep their current value."""
    store = _open_store(ctx)
    current = store.find_first_by_name(name)
    if current is None:
        typer.echo(f"No item named '{name}'.")
        raise typer.Exit(code=1)
    try:
        store.edit(
            name,
            category=category if category is not None else current.category,
            amount=amount if amount is not None else current.amount,
            date=_as_date(when) or current.date,
            probability=probability if probability is not None else current.probability,
        )
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    _report_save(store)
    typer.echo(f"Updated '{name}'.")


@app.command()
def delete(ctx: typer.Context, name: str = typer.Argument(..., help="Every item with this name is removed")):
    """Delete all items named NAME."""
    store = _open_store(ctx)
    if not store.delete(name):
        typer.echo(f"No item named '{name}'.")
        raise typer.Exit(code=1)
    _report_save(store)
    typer.echo(f"Deleted '{name}'.")


@app.command("list")
def list_items(ctx: typer.Context):
    """Show every item in date order."""
    store = _open_store(ctx)
    store.sort_by_date()
    table = Table(title="Ledger")
    for col in ("Date", "Type", "Name", "Category", "Amount", "Probability"):
        table.add_column(col)
    for r in store.all():
        table.add_row(r.date.isoformat(), r.kind, r.name, r.category, _money(r.amount), f"{r.probability:.0%}")
    console.print(table)


@app.command()
def summary(
    ctx: typer.Context,
    today: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS, help="Evaluation date, default today"),
):
    """Month-to-date totals per type."""
    store = _open_store(ctx)
    result = summary_service.month_summary(store, _as_date(today))
    table = Table(title=f"Summary for {result.month:%B %Y}")
    table.add_column("Type")
    table.add_column("Total", justify="right")
    table.add_row("Assets", _money(result.asset))
    table.add_row("Liabilities", _money(result.liability))
    table.add_row("Income", _money(result.income))
    table.add_row("Expenses", _money(result.expense))
    console.print(table)


@app.command()
def detail(
    ctx: typer.Context,
    today: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS, help="Evaluation date, default today"),
    top: Optional[int] = typer.Option(None, help="Number of expense categories to rank"),
):
    """Projected vs current net and the top expense categories."""
    cfg: LedgerConfig = ctx.obj
    store = _open_store(ctx)
    result = summary_service.detailed_summary(store, _as_date(today), top_n=top or cfg.top_categories)
    console.print(f"Projected assets at end of {result.month:%B %Y}: [bold]{_money(result.projected_net)}[/bold]")
    console.print(f"Current assets as of {result.as_of.isoformat()}: [bold]{_money(result.current_net)}[/bold]")
    if not result.top_expense_categories:
        console.print("No expenses recorded.")
        return
    table = Table(title="Top expense categories")
    table.add_column("Category")
    table.add_column("Total", justify="right")
    for category, total in result.top_expense_categories:
        table.add_row(category, _money(total))
    console.print(table)


@app.command()
def scenario(
    ctx: typer.Context,
    max_items: int = typer.Option(scenario_service.MAX_VARIABLE_ITEMS, help="Refuse beyond this many uncertain items"),
    out: Optional[Path] = typer.Option(None, help="Write the outcome JSON here"),
):
    """Best, worst, most and least likely net outcome over every item."""
    store = _open_store(ctx)
    try:
        result = scenario_service.evaluate_scenarios(store.all(), max_variable_items=max_items)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    if out:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(json.dumps(result.snapshot(), indent=2))
        typer.echo(f"Scenario written to {out}")
        return

    console.print(f"Uncertain items: {result.variable_count} | combinations: {result.combinations}")
    table = Table(title="What-if outcomes")
    table.add_column("Case")
    table.add_column("Total", justify="right")
    table.add_column("Probability", justify="right")
    table.add_row("Best", _money(result.best_case), "")
    table.add_row("Worst", _money(result.worst_case), "")
    table.add_row("Most likely", _money(result.most_likely.total), f"{result.most_likely.probability_pct:.2f}%")
    table.add_row("Least likely", _money(result.least_likely.total), f"{result.least_likely.probability_pct:.2f}%")
    console.print(table)


def _print_frame(title: str, frame) -> None:
    table = Table(title=title)
    table.add_column(frame.index.name or "")
    for col in frame.columns:
        table.add_column(str(col), justify="right")
    for idx, row in frame.iterrows():
        table.add_row(str(idx), *[_money(v) for v in row.tolist()])
    console.print(table)


@report_app.command("monthly")
def report_monthly(ctx: typer.Context, year: int = typer.Option(date.today().year, help="Calendar year")):
    """Per-month totals for one year."""
    store = _open_store(ctx)
    _print_frame(f"Monthly report {year}", reports.monthly_report(store.all(), year))


@report_app.command("annual")
def report_annual(ctx: typer.Context):
    """Per-year totals."""
    store = _open_store(ctx)
    _print_frame("Annual report", reports.annual_report(store.all()))


@report_app.command("income-vs-expenses")
def report_income_vs_expenses(ctx: typer.Context):
    """Monthly income against expenses."""
    store = _open_store(ctx)
    _print_frame("Income vs. expenses", reports.income_vs_expenses(store.all()))


@report_app.command("breakdown")
def report_breakdown(ctx: typer.Context):
    """Assets and liabilities by category."""
    store = _open_store(ctx)
    result = reports.asset_liability_breakdown(store.all())
    table = Table(title="Asset and liability breakdown")
    table.add_column("Type")
    table.add_column("Category")
    table.add_column("Total", justify="right")
    for category, total in result["assets"].items():
        table.add_row("Asset", category, _money(total))
    for category, total in result["liabilities"].items():
        table.add_row("Liability", category, _money(total))
    console.print(table)
    console.print(f"Net worth: [bold]{_money(result['net_worth'])}[/bold]")


if __name__ == "__main__":
    app()
