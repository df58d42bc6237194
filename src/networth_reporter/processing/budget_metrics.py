"""Monthly budgeted vs. spent metrics.

A one-off budget counts toward the month its start date falls in. A
recurring budget counts toward a month when it has started by the month's
end, has not ended before the month began, and its recurrence rule has an
occurrence inside the month.
"""

from collections import defaultdict
from collections.abc import Sequence
from datetime import date, datetime

from networth_reporter.config import Config
from networth_reporter.models.account import Account
from networth_reporter.models.budget import Budget
from networth_reporter.models.report import BudgetMonth, CategoryBudget
from networth_reporter.models.transaction import Transaction
from networth_reporter.processing.net_worth import resolve_range_start
from networth_reporter.utils.date_utils import (
    TimeRange,
    generate_month_range,
    month_end,
    month_label,
    utc_now,
)
from networth_reporter.utils.decimal_utils import ZERO
from networth_reporter.utils.logging_config import get_logger

logger = get_logger(__name__)


def is_active_in_month(budget: Budget, year: int, month: int) -> bool:
    """Whether a budget applies to a calendar month."""
    if budget.schedule is None:
        return (budget.start_date.year, budget.start_date.month) == (year, month)

    first = datetime(year, month, 1)
    last = month_end(year, month)
    if budget.start_date > last:
        return False
    if budget.end_date is not None and budget.end_date.date() < first.date():
        return False

    occurrence = budget.schedule.after(first, inc=True)
    if occurrence is None or occurrence > last:
        return False
    return budget.end_date is None or occurrence.date() <= budget.end_date.date()


def counts_as_spending(transaction: Transaction) -> bool:
    """Categorized expenses, excluding transfers between own accounts."""
    return (
        not transaction.is_income
        and transaction.category_id is not None
        and not transaction.is_transfer
    )


def monthly_budget(
    budgets: Sequence[Budget],
    transactions: Sequence[Transaction],
    year: int,
    month: int,
) -> BudgetMonth:
    """Compute budgeted and spent totals for one month.

    Category budgets active in the month are summed per category. When an
    overall budget is active, its amount is the month's total budget in
    place of the category sum. Spending counts every categorized expense
    in the month; only budgeted categories get a breakdown entry.

    Args:
        budgets: All budgets.
        transactions: Transactions to consider; other months are ignored.
        year: Calendar year.
        month: Calendar month (1-12).

    Returns:
        BudgetMonth with categories ordered by name.
    """
    categories: dict[str, CategoryBudget] = {}
    category_total = ZERO
    overall_total = ZERO
    has_overall = False

    for budget in budgets:
        if not is_active_in_month(budget, year, month):
            continue
        if budget.is_overall:
            overall_total += budget.amount
            has_overall = True
        elif budget.category_id is not None:
            entry = categories.setdefault(
                budget.category_id,
                CategoryBudget(category_id=budget.category_id, name=budget.name),
            )
            entry.budgeted += budget.amount
            category_total += budget.amount

    spent = ZERO
    for txn in transactions:
        if (txn.date.year, txn.date.month) != (year, month) or not counts_as_spending(txn):
            continue
        spent += txn.amount
        entry = categories.get(txn.category_id)
        if entry is not None:
            entry.spent += txn.amount

    return BudgetMonth(
        month=month_label(year, month),
        date=date(year, month, 1),
        total_budgeted=overall_total if has_overall else category_total,
        total_spent=spent,
        categories=sorted(categories.values(), key=lambda c: c.name.lower()),
    )


class BudgetAnalyzer:
    """Builds the budget view of a report window."""

    def __init__(self, config: Config):
        """Initialize budget analyzer.

        Args:
            config: Application configuration.
        """
        self.config = config

    def analyze(
        self,
        accounts: Sequence[Account],
        transactions: Sequence[Transaction],
        budgets: Sequence[Budget],
        time_range: TimeRange | str | None = None,
        now: datetime | None = None,
    ) -> list[BudgetMonth]:
        """Compute budget metrics for every month of the window.

        Args:
            accounts: All accounts (only used to resolve an all-time window).
            transactions: All transactions.
            budgets: All budgets.
            time_range: Window to cover (default: configured default range).
            now: Reference instant (default: current UTC time).

        Returns:
            One BudgetMonth per month, in chronological order.
        """
        time_range = TimeRange.parse(time_range or self.config.report.default_range)
        if now is None:
            now = utc_now()
        today = now.date()

        start = resolve_range_start(time_range, accounts, transactions, today)

        by_month: dict[tuple[int, int], list[Transaction]] = defaultdict(list)
        for txn in transactions:
            if counts_as_spending(txn):
                by_month[(txn.date.year, txn.date.month)].append(txn)

        months = [
            monthly_budget(budgets, by_month.get((year, month), []), year, month)
            for year, month in generate_month_range(start, today)
        ]

        over = sum(1 for m in months if m.total_budgeted and m.remaining < 0)
        logger.info(
            f"Computed budget metrics for {len(months)} months from "
            f"{len(budgets)} budgets ({over} over budget)"
        )
        return months


def budget_metrics(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
    config: Config,
    time_range: TimeRange | str | None = None,
    now: datetime | None = None,
) -> list[BudgetMonth]:
    """Convenience function to compute monthly budget metrics.

    Args:
        accounts: All accounts.
        transactions: All transactions.
        budgets: All budgets.
        config: Application configuration.
        time_range: Window to cover (default: configured default range).
        now: Reference instant.

    Returns:
        List of BudgetMonth.
    """
    return BudgetAnalyzer(config).analyze(accounts, transactions, budgets, time_range, now)
