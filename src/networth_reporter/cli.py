"""Command-line interface for the net-worth reporter."""

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from networth_reporter import __version__
from networth_reporter.config import Config, ConfigError, load_config
from networth_reporter.loader import LoadError, load_accounts, load_budgets, load_transactions
from networth_reporter.models.report import ReconciliationReport, ReportBundle
from networth_reporter.processing.reconciliation import (
    LedgerDriftError,
    reconcile_ledger,
    require_consistent,
)
from networth_reporter.processing.report_generator import generate_report
from networth_reporter.utils.date_utils import TimeRange
from networth_reporter.utils.decimal_utils import format_currency
from networth_reporter.utils.logging_config import get_logger, setup_logging

# Load environment variables from .env file (if it exists)
load_dotenv()

CONFIG_ENV_VAR = "NETWORTH_CONFIG"

console = Console()
logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="networth-report",
        description=(
            "Reconstruct historical net worth and cash flow from account "
            "and transaction exports"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --accounts accounts.json --transactions transactions.json
  %(prog)s -a accounts.json -t transactions.json --range 12m -o reports/networth.xlsx
  %(prog)s -a accounts.json -t transactions.json --range all -o reports/networth.csv
  %(prog)s -a accounts.json -t transactions.json --reconcile --strict
  %(prog)s -a accounts.json -t transactions.json -b budgets.json -o reports/networth.xlsx
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-a", "--accounts",
        type=Path,
        required=True,
        help="JSON export of accounts",
    )

    parser.add_argument(
        "-t", "--transactions",
        type=Path,
        required=True,
        help="JSON export of transactions",
    )

    parser.add_argument(
        "-b", "--budgets",
        type=Path,
        default=None,
        help="JSON export of budgets; adds monthly budgeted vs. spent metrics",
    )

    parser.add_argument(
        "-r", "--range",
        dest="time_range",
        choices=[r.value for r in TimeRange],
        default=None,
        help="Trailing window to report on (default: from settings, else 6m)",
    )

    parser.add_argument(
        "--category",
        default=None,
        metavar="ID",
        help="Limit income/expense figures to one category",
    )

    parser.add_argument(
        "--account",
        default=None,
        metavar="ID",
        help="Limit income/expense figures to one account",
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help="Write the report to an .xlsx workbook, or CSV files beside a .csv path",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"Path to settings.yaml (default: ${CONFIG_ENV_VAR} or config/settings.yaml)",
    )

    parser.add_argument(
        "--reconcile",
        action="store_true",
        help="Check stored balances against transaction history before reporting",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Abort on malformed records and on ledger drift",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compute and display the report without writing output",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase output verbosity (-v, -vv)",
    )

    return parser


def get_log_level(verbosity: int) -> str:
    """Convert verbosity count to log level.

    Args:
        verbosity: Number of -v flags.

    Returns:
        Log level string.
    """
    if verbosity >= 2:
        return "DEBUG"
    elif verbosity >= 1:
        return "INFO"
    else:
        return "WARNING"


def validate_output_path(path: Path, base_dir: Path | None = None) -> Path:
    """Validate that an output path stays within the base directory.

    Args:
        path: The path to validate.
        base_dir: Base directory to constrain paths within (default: cwd).

    Returns:
        The resolved, validated path.

    Raises:
        ValueError: If the path escapes the allowed directory.
    """
    if base_dir is None:
        base_dir = Path.cwd()

    resolved_base = base_dir.resolve()
    resolved_path = (base_dir / path).resolve()

    try:
        resolved_path.relative_to(resolved_base)
    except ValueError:
        raise ValueError(
            f"Invalid path: '{path}' escapes the allowed directory. "
            f"Paths must be within '{resolved_base}'"
        ) from None

    return resolved_path


def display_report(report: ReportBundle, config: Config) -> None:
    """Print the report tables.

    Args:
        report: Computed report.
        config: Application configuration (for currency formatting).
    """
    symbol = config.output.currency_symbol
    places = config.output.decimal_places

    def money(amount):
        return format_currency(amount, symbol, places)

    summary = report.net_worth
    console.print(f"\n[bold]Net Worth[/bold] ({report.time_range.label}, {report.period_display})")
    console.print(f"  Total assets: [green]{money(summary.total_assets)}[/green]")
    console.print(f"  Total debts:  [red]{money(summary.total_debts)}[/red]")
    console.print(f"  Net worth:    [bold]{money(summary.net_worth)}[/bold]")

    history_table = Table(title="Net Worth History")
    history_table.add_column("Month")
    history_table.add_column("Assets", justify="right", style="green")
    history_table.add_column("Liabilities", justify="right", style="red")
    history_table.add_column("Net Worth", justify="right", style="bold")
    for point in summary.history:
        history_table.add_row(
            point.month, money(point.assets), money(point.liabilities), money(point.net_worth)
        )
    console.print(history_table)

    flow_table = Table(title="Income vs Expenses")
    flow_table.add_column("Month")
    flow_table.add_column("Income", justify="right", style="green")
    flow_table.add_column("Expense", justify="right", style="red")
    flow_table.add_column("Surplus", justify="right")
    for point in report.cash_flow:
        flow_table.add_row(
            point.month, money(point.income), money(point.expense), money(point.surplus)
        )
    overview = report.overview
    flow_table.add_row(
        "[bold]Total[/bold]",
        money(overview.total_income),
        money(overview.total_expense),
        money(overview.total_surplus),
    )
    console.print(flow_table)
    rate = overview.savings_rate
    rate_text = "n/a" if rate is None else f"{rate:.1%}"
    console.print(f"  Savings rate: [bold]{rate_text}[/bold]")

    account_table = Table(title="Account Flow")
    account_table.add_column("Account")
    account_table.add_column("Inflow", justify="right", style="green")
    account_table.add_column("Outflow", justify="right", style="red")
    account_table.add_column("Net Flow", justify="right")
    for flow in report.account_flows:
        account_table.add_row(
            flow.name, money(flow.inflow), money(flow.outflow), money(flow.net_flow)
        )
    console.print(account_table)

    if report.budgets:
        budget_table = Table(title="Budget Metrics")
        budget_table.add_column("Month")
        budget_table.add_column("Budgeted", justify="right")
        budget_table.add_column("Spent", justify="right")
        budget_table.add_column("Remaining", justify="right")
        budget_table.add_column("Over budget")
        for month in report.budgets:
            over = [c.name for c in month.categories if c.is_over_budget]
            remaining = money(month.remaining)
            if month.remaining < 0:
                remaining = f"[red]{remaining}[/red]"
            budget_table.add_row(
                month.month,
                money(month.total_budgeted),
                money(month.total_spent),
                remaining,
                ", ".join(over),
            )
        console.print(budget_table)


def display_reconciliation(report: ReconciliationReport) -> None:
    """Print reconciliation results.

    Args:
        report: Reconciliation report.
    """
    table = Table(title="Ledger Reconciliation")
    table.add_column("Account")
    table.add_column("Stored", justify="right")
    table.add_column("Replayed", justify="right")
    table.add_column("Drift", justify="right")
    table.add_column("Status")

    for result in report.results:
        replayed = "" if result.replayed_balance is None else str(result.replayed_balance)
        drift = "" if result.drift is None else str(result.drift)
        status = "[green]OK[/green]" if result.is_consistent else "[red]" + "; ".join(result.issues) + "[/red]"
        table.add_row(result.account_name, str(result.stored_balance), replayed, drift, status)

    console.print(table)

    if report.orphan_transaction_ids:
        console.print(
            f"[yellow]{len(report.orphan_transaction_ids)} transaction(s) reference "
            "unknown accounts[/yellow]"
        )


def write_output(output: Path, report: ReportBundle, config: Config) -> list[Path]:
    """Write the report in the format implied by the output suffix.

    ``.xlsx`` produces a workbook; anything else is treated as a CSV target
    and the CSV files are written to its parent directory.

    Args:
        output: Requested output path.
        report: Computed report.
        config: Application configuration.

    Returns:
        Paths written.
    """
    from networth_reporter.output import CSVExporter, ExcelWriter

    if output.suffix.lower() == ".xlsx":
        ExcelWriter(config).write(output, report)
        return [output]
    return CSVExporter(config).export(output.parent, report)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Argument list (default: sys.argv[1:]).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    settings_path = args.config
    if settings_path is None and os.environ.get(CONFIG_ENV_VAR):
        settings_path = Path(os.environ[CONFIG_ENV_VAR])

    try:
        config = load_config(settings_path=settings_path)
    except (FileNotFoundError, ConfigError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    # -v flags override the configured level
    setup_logging(
        level=get_log_level(args.verbose) if args.verbose else config.logging.level,
        log_file=config.logging.file,
        console_output=args.verbose > 0,
    )

    output_path = None
    if args.output is not None and not args.dry_run:
        try:
            output_path = validate_output_path(args.output)
        except ValueError as e:
            console.print(f"[red]Error: {e}[/red]")
            return 1

    try:
        with console.status("[bold green]Loading data..."):
            accounts = load_accounts(args.accounts, strict=args.strict)
            transactions = load_transactions(args.transactions, strict=args.strict)
            budgets = (
                load_budgets(args.budgets, strict=args.strict)
                if args.budgets is not None
                else None
            )
    except (FileNotFoundError, LoadError) as e:
        console.print(f"[red]Error: {e}[/red]")
        logger.error(f"Load error: {e}")
        return 1

    loaded = f"Loaded {len(accounts)} accounts and {len(transactions)} transactions"
    if budgets is not None:
        loaded += f" and {len(budgets)} budgets"
    console.print(loaded)

    if args.reconcile:
        reconciliation = reconcile_ledger(accounts, transactions, config)
        display_reconciliation(reconciliation)
        if args.strict:
            try:
                require_consistent(reconciliation)
            except LedgerDriftError as e:
                console.print(f"[red]Error: {e}[/red]")
                logger.error(str(e))
                return 1

    with console.status("[bold green]Computing report..."):
        report = generate_report(
            accounts,
            transactions,
            config,
            time_range=args.time_range,
            category_id=args.category,
            account_id=args.account,
            budgets=budgets,
        )

    display_report(report, config)

    if args.dry_run:
        console.print("\n[yellow]Dry run - no output generated[/yellow]")
    elif output_path is not None:
        written = write_output(output_path, report, config)
        for path in written:
            console.print(f"[green]Wrote {path}[/green]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
