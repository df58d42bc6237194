"""Assembles every report view for one run."""

from collections.abc import Sequence
from datetime import datetime

from networth_reporter.config import Config
from networth_reporter.models.account import Account
from networth_reporter.models.budget import Budget
from networth_reporter.models.report import ReportBundle
from networth_reporter.models.transaction import Transaction
from networth_reporter.processing.budget_metrics import BudgetAnalyzer
from networth_reporter.processing.cash_flow import CashFlowAnalyzer
from networth_reporter.processing.net_worth import NetWorthCalculator
from networth_reporter.utils.date_utils import TimeRange, utc_now
from networth_reporter.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)


def generate_report(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    config: Config,
    time_range: TimeRange | str | None = None,
    category_id: str | None = None,
    account_id: str | None = None,
    budgets: Sequence[Budget] | None = None,
    now: datetime | None = None,
) -> ReportBundle:
    """Compute every report view for one window.

    Single source of truth for report figures - used by the console view
    and by both exporters.

    Args:
        accounts: All accounts.
        transactions: All transactions.
        config: Application configuration.
        time_range: Window to cover (default: configured default range).
        category_id: Limit cash-flow figures to one category.
        account_id: Limit cash-flow figures to one account.
        budgets: Budgets for the budget view; None skips it.
        now: Reference instant (default: current UTC time).

    Returns:
        ReportBundle with all views computed for the same window.
    """
    resolved_range = TimeRange.parse(time_range or config.report.default_range)
    if now is None:
        now = utc_now()

    with LogContext(logger, "report generation", range=resolved_range.value):
        net_worth = NetWorthCalculator(config).calculate(
            accounts, transactions, resolved_range, now
        )
        cash_flow, overview, flows = CashFlowAnalyzer(config).analyze(
            accounts,
            transactions,
            resolved_range,
            category_id=category_id,
            account_id=account_id,
            now=now,
        )
        budget_months = (
            BudgetAnalyzer(config).analyze(accounts, transactions, budgets, resolved_range, now)
            if budgets is not None
            else []
        )

    return ReportBundle(
        time_range=resolved_range,
        generated_at=now.date(),
        net_worth=net_worth,
        cash_flow=cash_flow,
        overview=overview,
        account_flows=flows,
        budgets=budget_months,
        category_filter=category_id,
        account_filter=account_id,
    )
