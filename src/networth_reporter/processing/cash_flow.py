"""Income vs. expense and per-account flow analysis."""

from collections.abc import Sequence
from datetime import date, datetime

from networth_reporter.config import Config
from networth_reporter.models.account import Account
from networth_reporter.models.report import AccountFlow, CashFlowOverview, CashFlowPoint
from networth_reporter.models.transaction import Transaction
from networth_reporter.processing.net_worth import resolve_range_start
from networth_reporter.utils.date_utils import (
    TimeRange,
    generate_month_range,
    month_label,
    utc_now,
)
from networth_reporter.utils.logging_config import get_logger

logger = get_logger(__name__)


def filter_transactions(
    transactions: Sequence[Transaction],
    start: date,
    category_id: str | None = None,
    account_id: str | None = None,
) -> list[Transaction]:
    """Transactions on or after ``start`` matching the optional filters.

    Args:
        transactions: Transactions to filter.
        start: First day of the window.
        category_id: Keep only this category (None keeps all).
        account_id: Keep only this account (None keeps all).

    Returns:
        Matching transactions, input order preserved.
    """
    cutoff = datetime.combine(start, datetime.min.time())
    return [
        t for t in transactions
        if t.date >= cutoff
        and (category_id is None or t.category_id == category_id)
        and (account_id is None or t.account_id == account_id)
    ]


def monthly_income_vs_expense(
    transactions: Sequence[Transaction],
    start: date,
    end: date,
) -> list[CashFlowPoint]:
    """Sum income and expense per calendar month.

    Every month from ``start`` through ``end`` gets a point, zero when
    there was no activity. Transactions outside those months are ignored.

    Args:
        transactions: Already-filtered transactions.
        start: Any date in the first month.
        end: Any date in the last month.

    Returns:
        Points in chronological order.
    """
    buckets = {
        (year, month): CashFlowPoint(month=month_label(year, month), date=date(year, month, 1))
        for year, month in generate_month_range(start, end)
    }

    for txn in transactions:
        point = buckets.get((txn.date.year, txn.date.month))
        if point is None:
            continue
        if txn.is_income:
            point.income += txn.amount
        else:
            point.expense += txn.amount

    return list(buckets.values())


def summarize(points: Sequence[CashFlowPoint]) -> CashFlowOverview:
    """Total income and expense across a series."""
    overview = CashFlowOverview()
    for point in points:
        overview.total_income += point.income
        overview.total_expense += point.expense
    return overview


def account_flow(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
) -> list[AccountFlow]:
    """Inflow and outflow per account.

    Every account appears, including those without activity. Results are
    ordered by absolute net flow, largest first.

    Args:
        accounts: Accounts to report on.
        transactions: Already-filtered transactions.

    Returns:
        One AccountFlow per account.
    """
    flows = {a.id: AccountFlow(account_id=a.id, name=a.name) for a in accounts}

    for txn in transactions:
        flow = flows.get(txn.account_id)
        if flow is None:
            continue
        if txn.is_income:
            flow.inflow += txn.amount
        else:
            flow.outflow += txn.amount

    return sorted(flows.values(), key=lambda f: abs(f.net_flow), reverse=True)


class CashFlowAnalyzer:
    """Builds the cash-flow views of a report window."""

    def __init__(self, config: Config):
        """Initialize cash-flow analyzer.

        Args:
            config: Application configuration.
        """
        self.config = config

    def analyze(
        self,
        accounts: Sequence[Account],
        transactions: Sequence[Transaction],
        time_range: TimeRange | str | None = None,
        category_id: str | None = None,
        account_id: str | None = None,
        now: datetime | None = None,
    ) -> tuple[list[CashFlowPoint], CashFlowOverview, list[AccountFlow]]:
        """Compute the monthly series, its totals, and per-account flow.

        Args:
            accounts: All accounts.
            transactions: All transactions.
            time_range: Window to cover (default: configured default range).
            category_id: Optional category filter.
            account_id: Optional account filter.
            now: Reference instant (default: current UTC time).

        Returns:
            Tuple of (monthly points, overview, account flows).
        """
        time_range = TimeRange.parse(time_range or self.config.report.default_range)
        if now is None:
            now = utc_now()
        today = now.date()

        start = resolve_range_start(time_range, accounts, transactions, today)
        filtered = filter_transactions(transactions, start, category_id, account_id)
        logger.debug(
            f"Cash flow window starts {start}: {len(filtered)} of "
            f"{len(transactions)} transactions selected"
        )

        points = monthly_income_vs_expense(filtered, start, today)
        return points, summarize(points), account_flow(accounts, filtered)
