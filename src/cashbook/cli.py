import typer
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from cashbook.authorization import AccessDeniedError
from cashbook.config.settings import ConfigLoader, Settings
from cashbook.database.connection import DatabaseConfig, DatabaseManager
from cashbook.database.setup import initialize_database
from cashbook.domain.enums import TransactionType, UserRole
from cashbook.domain.models import ReportSummary, Transaction
from cashbook.domain.timestamps import utcnow
from cashbook.formatting import format_amount, to_subunits
from cashbook.logger import configure_logging
from cashbook.repositories.sqlite_audit_log_repository import SQLiteAuditLogRepository
from cashbook.repositories.sqlite_category_repository import SQLiteCategoryRepository
from cashbook.repositories.sqlite_profile_repository import SQLiteProfileRepository
from cashbook.repositories.sqlite_transaction_repository import SQLiteTransactionRepository
from cashbook.services.errors import TransactionValidationError
from cashbook.services.export import export_summary
from cashbook.services.profile_service import ProfileService
from cashbook.services.report_service import ReportService
from cashbook.services.transaction_service import TransactionService

app = typer.Typer(
    name="cashbook",
    help="Record income and expenses and report on them by category",
    add_completion=False,
)

console = Console()

class State:
    verbose: bool = False
    settings: Optional[Settings] = None
    db_manager: Optional[DatabaseManager] = None
    transactions: Optional[TransactionService] = None
    reports: Optional[ReportService] = None
    profiles: Optional[ProfileService] = None


state = State()

USER_OPTION = typer.Option(..., "--user", "-u", help="Your profile ID")

@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable verbose output",
    ),
    db: Optional[Path] = typer.Option(
        None,
        "--db",
        help="Path to the SQLite database (defaults to the configured path)",
        dir_okay=False,
    ),
):
    """
    Cashbook - record transactions and see where the money goes.
    """
    state.settings = ConfigLoader.load_settings()
    configure_logging("DEBUG" if verbose else state.settings.log_level)

    db_manager = DatabaseManager(DatabaseConfig(db or state.settings.database_path))
    ctx.call_on_close(db_manager.close)

    state.db_manager = db_manager
    state.transactions = TransactionService(
        SQLiteTransactionRepository(db_manager),
        SQLiteCategoryRepository(db_manager),
        SQLiteAuditLogRepository(db_manager),
        db_manager=db_manager,
    )
    state.reports = ReportService(SQLiteTransactionRepository(db_manager))
    state.profiles = ProfileService(SQLiteProfileRepository(db_manager))
    state.verbose = verbose

def money(amount: int) -> str:
    """Format subunits using the configured currency"""
    return format_amount(amount, state.settings.currency_symbol, state.settings.subunits_per_unit)

def fail(error: Exception) -> None:
    """Print an error the same way for every command and exit with code 1"""
    if isinstance(error, TransactionValidationError):
        console.print("[bold red]Validation failed[/bold red]")
        error_table = Table(show_header=True, box=None, padding=(0, 2))
        error_table.add_column("Field", style="cyan")
        error_table.add_column("Code", style="red")
        error_table.add_column("Message")
        for field_error in error.errors:
            error_table.add_row(field_error.field, field_error.code.value, field_error.message)
        console.print(error_table)
    elif isinstance(error, AccessDeniedError):
        console.print(f"[bold red]Forbidden:[/bold red] {error.message}")
    else:
        console.print(f"[bold red]Error:[/bold red] {error}")

    if state.verbose:
        console.print_exception()
    raise typer.Exit(code=1)

@app.command(name="init-db")
def init_db():
    """
    Create the database schema and seed the default categories.

    Examples:
        cashbook init-db
        cashbook --db /tmp/cashbook.db init-db
    """
    try:
        row = initialize_database(state.db_manager)
    except Exception as e:
        fail(e)

    console.print(f"[bold green]✓ Database initialized[/bold green] at {state.db_manager.config.db_path}")
    if row:
        console.print(f"  Schema version: {row['version']}")
        console.print(f"  Description: {row['description']}")

@app.command(name="add-user")
def add_user(
    email: str = typer.Argument(..., help="Email address of the new user"),
    admin: bool = typer.Option(False, "--admin", help="Grant the admin role"),
):
    """
    Register a user profile and print its ID.

    Examples:
        cashbook add-user alice@example.com
        cashbook add-user ops@example.com --admin
    """
    try:
        profile = state.profiles.register(email, UserRole.ADMIN if admin else UserRole.USER)
    except Exception as e:
        fail(e)

    console.print(f"[bold green]✓ Created {profile.role.value}[/bold green] {profile.email}")
    console.print(f"  ID: {profile.id}")

@app.command(name="categories")
def categories(
    transaction_type: Optional[TransactionType] = typer.Option(
        None,
        "--type", "-t",
        help="Only show income or expense categories",
        case_sensitive=False,
    ),
):
    """
    List the available categories.

    Examples:
        cashbook categories
        cashbook categories --type expense
    """
    try:
        found = state.transactions.list_categories(transaction_type)
    except Exception as e:
        fail(e)

    table = Table(title="Categories")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    for category in found:
        color = "green" if category.type == TransactionType.INCOME else "red"
        table.add_row(category.id, category.name, f"[{color}]{category.type.value}[/{color}]")
    console.print(table)

@app.command(name="add")
def add_transaction(
    user: str = USER_OPTION,
    transaction_type: str = typer.Option(..., "--type", "-t", help="income or expense"),
    amount: str = typer.Option(..., "--amount", "-a", help="Amount in currency units, e.g. 12.50"),
    category: str = typer.Option(..., "--category", "-c", help="Category ID"),
    note: Optional[str] = typer.Option(None, "--note", "-n", help="Optional note (max 500 characters)"),
    occurred_at: Optional[str] = typer.Option(
        None,
        "--at",
        help="When it happened, ISO-8601 (defaults to now)",
    ),
):
    """
    Record a new transaction.

    Examples:
        cashbook add -u <id> -t expense -a 45.50 -c <category-id>
        cashbook add -u <id> -t income -a 50000 -c <category-id> --at 2025-01-31T09:00:00Z
    """
    try:
        principal = state.profiles.resolve_principal(user)
        payload = {
            "type": transaction_type,
            "amount": to_subunits(amount, state.settings.subunits_per_unit),
            "category_id": category,
            "note": note,
            "occurred_at": occurred_at or utcnow().isoformat(),
        }
        txn = state.transactions.create_transaction(principal, payload)
    except Exception as e:
        fail(e)

    console.print(Panel.fit(
        f"[bold]ID:[/bold] {txn.id}\n"
        f"[bold]Type:[/bold] {txn.type.value}\n"
        f"[bold]Category:[/bold] {txn.category.name if txn.category else txn.category_id}\n"
        f"[bold]Amount:[/bold] {money(txn.amount)}\n"
        f"[bold]When:[/bold] {txn.occurred_at:%Y-%m-%d %H:%M} UTC"
        + (f"\n[bold]Note:[/bold] {txn.note}" if txn.note else ""),
        title="[bold green]✓ Transaction recorded[/bold green]",
        border_style="green",
    ))

@app.command(name="list")
def list_transactions(
    user: str = USER_OPTION,
    from_date: Optional[str] = typer.Option(None, "--from", help="ISO-8601 lower bound"),
    to_date: Optional[str] = typer.Option(None, "--to", help="ISO-8601 upper bound"),
    transaction_type: Optional[str] = typer.Option(None, "--type", "-t", help="income or expense"),
    limit: int = typer.Option(50, "--limit", "-l", help="Maximum rows to show", min=1),
):
    """
    List your transactions, newest first.

    Examples:
        cashbook list -u <id>
        cashbook list -u <id> --from 2025-01-01T00:00:00Z --type expense
    """
    try:
        principal = state.profiles.resolve_principal(user)
        found = state.transactions.list_transactions(principal, from_date, to_date, transaction_type)
    except Exception as e:
        fail(e)

    if not found:
        console.print(Panel(
            "[yellow]No transactions found[/yellow]",
            title="Empty",
            border_style="yellow"
        ))
        return

    console.print(transactions_table(found[:limit]))

    if len(found) > limit:
        console.print(f"\n[dim]Showing {limit} of {len(found)} transactions[/dim]")

@app.command(name="show")
def show_transaction(
    transaction_id: str = typer.Argument(..., help="Transaction ID"),
    user: str = USER_OPTION,
):
    """Show one of your transactions."""
    try:
        principal = state.profiles.resolve_principal(user)
        txn = state.transactions.get_transaction(principal, transaction_id)
    except Exception as e:
        fail(e)

    console.print(transactions_table([txn]))

@app.command(name="delete")
def delete_transaction(
    transaction_id: str = typer.Argument(..., help="Transaction ID"),
    user: str = USER_OPTION,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """
    Delete a transaction (admins only).

    Examples:
        cashbook delete <transaction-id> -u <admin-id>
    """
    try:
        principal = state.profiles.resolve_principal(user)
        if not yes:
            typer.confirm(f"Delete transaction {transaction_id}?", abort=True)
        txn = state.transactions.delete_transaction(principal, transaction_id)
    except typer.Abort:
        raise
    except Exception as e:
        fail(e)

    console.print(f"[bold green]✓ Deleted[/bold green] {txn.id} ({money(txn.amount)})")

@app.command(name="report")
def report(
    user: str = USER_OPTION,
    from_date: Optional[str] = typer.Option(None, "--from", help="ISO-8601 lower bound"),
    to_date: Optional[str] = typer.Option(None, "--to", help="ISO-8601 upper bound"),
    transaction_type: Optional[str] = typer.Option(None, "--type", "-t", help="income or expense"),
    export: Optional[Path] = typer.Option(
        None,
        "--export", "-e",
        help="Also write the report to this .csv file",
        dir_okay=False,
    ),
):
    """
    Show income, expenses and balance broken down by category.

    Examples:
        cashbook report -u <id>
        cashbook report -u <id> --from 2025-01-01T00:00:00Z --to 2025-01-31T23:59:59Z
        cashbook report -u <id> --export january.csv
    """
    try:
        principal = state.profiles.resolve_principal(user)
        summary = state.reports.category_report(principal, from_date, to_date, transaction_type)
        if export:
            export_summary(summary, export)
    except Exception as e:
        fail(e)

    print_summary(summary)

    if export:
        console.print(f"\n[green]✓[/green] Exported to {export}")

@app.command(name="audit")
def audit(user: str = USER_OPTION):
    """Show the audit trail of your own writes."""
    try:
        principal = state.profiles.resolve_principal(user)
        entries = state.transactions.list_audit_log(principal)
    except Exception as e:
        fail(e)

    table = Table(title="Audit log")
    table.add_column("When", style="cyan")
    table.add_column("Action")
    table.add_column("Table", style="dim")
    table.add_column("Record")
    for entry in entries:
        table.add_row(f"{entry.created_at:%Y-%m-%d %H:%M:%S}", entry.action.value, entry.table_name, entry.record_id)
    console.print(table)

def transactions_table(transactions: list[Transaction]) -> Table:
    txn_table = Table(show_header=True, padding=(0, 1))
    txn_table.add_column("Date", style="cyan", width=16)
    txn_table.add_column("Category", style="magenta")
    txn_table.add_column("Note", style="white", max_width=40)
    txn_table.add_column("Amount", justify="right")
    txn_table.add_column("ID", style="dim")

    for txn in transactions:
        note = txn.note or ""
        if len(note) > 40:
            note = note[:37] + "..."

        if txn.type == TransactionType.EXPENSE:
            amount_str = f"[red]-{money(txn.amount)}[/red]"
        else:
            amount_str = f"[green]+{money(txn.amount)}[/green]"

        txn_table.add_row(
            f"{txn.occurred_at:%Y-%m-%d %H:%M}",
            txn.category.name if txn.category else "(missing)",
            note,
            amount_str,
            txn.id,
        )
    return txn_table

def print_summary(summary: ReportSummary) -> None:
    totals = summary.totals
    summary_text = (
        f"[green]💰 Income:[/green]  {money(totals.income):>16}\n"
        f"[red]💸 Expense:[/red] {money(totals.expense):>16}\n"
        f"{'─' * 30}\n"
    )

    if totals.balance >= 0:
        summary_text += f"[bold green]📈 Balance:[/bold green] {money(totals.balance):>16}"
    else:
        summary_text += f"[bold red]📉 Balance:[/bold red] {money(totals.balance):>16}"

    console.print(Panel(
        summary_text,
        title="[bold]Summary[/bold]",
        border_style="cyan",
        padding=(1, 2)
    ))

    if not summary.by_category:
        console.print("[yellow]No transactions in this period[/yellow]")
        return

    for title, rows, color, total in (
        ("Income by Category", summary.income_categories, "green", totals.income),
        ("Expense by Category", summary.expense_categories, "red", totals.expense),
    ):
        if not rows:
            continue

        console.print(f"\n[bold]{title}[/bold]")
        category_table = Table(show_header=True, box=None, padding=(0, 2))
        category_table.add_column("Category", style="cyan", no_wrap=True)
        category_table.add_column("Amount", justify="right", style=color)
        category_table.add_column("% of Total", justify="right", style="dim")

        for row in rows:
            percentage = row.total_amount * 100 / total if total > 0 else 0
            category_table.add_row(row.category_name, money(row.total_amount), f"{percentage:.1f}%")

        console.print(category_table)

def cli_main():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    cli_main()
