"""Historical net-worth reconstruction.

Stored account balances are the only ground truth: a balance at the end
of a past month is derived by starting from the current balance and
undoing, newest first, every transaction dated after that month end.
"""

from bisect import bisect_right
from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from networth_reporter.config import Config
from networth_reporter.models.account import Account
from networth_reporter.models.report import NetWorthPoint, NetWorthSummary
from networth_reporter.models.transaction import Transaction
from networth_reporter.utils.date_utils import (
    TimeRange,
    first_of_month,
    generate_month_range,
    get_range_start,
    month_end,
    month_label,
    utc_now,
)
from networth_reporter.utils.decimal_utils import ZERO
from networth_reporter.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class _AccountLedger:
    """An account's transactions in ascending date order."""

    dates: list[datetime] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)

    def after(self, cutoff: datetime) -> list[Transaction]:
        """Transactions dated strictly after ``cutoff``, oldest first."""
        return self.transactions[bisect_right(self.dates, cutoff):]


def _build_ledgers(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
) -> dict[str, _AccountLedger]:
    known_ids = {account.id for account in accounts}
    by_account: dict[str, list[Transaction]] = defaultdict(list)
    unmatched = 0
    for txn in transactions:
        if txn.account_id in known_ids:
            by_account[txn.account_id].append(txn)
        else:
            unmatched += 1

    if unmatched:
        logger.debug(f"Ignoring {unmatched} transactions with no matching account")

    ledgers: dict[str, _AccountLedger] = {}
    for account_id in known_ids:
        ordered = sorted(by_account.get(account_id, []), key=lambda t: t.date)
        ledgers[account_id] = _AccountLedger(
            dates=[t.date for t in ordered],
            transactions=ordered,
        )
    return ledgers


def _undo_after(account: Account, ledger: _AccountLedger, cutoff: datetime) -> Decimal:
    balance = account.balance
    for txn in reversed(ledger.after(cutoff)):
        balance -= txn.balance_effect(account.is_liability)
    return balance


def balance_as_of(
    account: Account,
    transactions: Sequence[Transaction],
    as_of: datetime,
) -> Decimal:
    """Reconstruct one account's balance at a past instant.

    Transactions belonging to other accounts are ignored.

    Args:
        account: Account whose current balance is the starting point.
        transactions: Transactions to consider.
        as_of: Instant to reconstruct the balance for.

    Returns:
        The balance the account held at ``as_of``.
    """
    ledger = _build_ledgers([account], transactions)[account.id]
    return _undo_after(account, ledger, as_of)


def resolve_range_start(
    time_range: TimeRange,
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    today: date,
) -> date:
    """First month of a report window.

    With no data at all, an all-time window collapses to the current month.
    """
    if time_range is TimeRange.ALL and not accounts and not transactions:
        return first_of_month(today)
    return get_range_start(time_range, (t.date for t in transactions), today)


def current_totals(accounts: Sequence[Account]) -> tuple[Decimal, Decimal]:
    """Current total assets and total debts.

    Liability balances count by magnitude.

    Returns:
        Tuple of (total_assets, total_debts).
    """
    total_assets = ZERO
    total_debts = ZERO
    for account in accounts:
        if account.is_liability:
            total_debts += abs(account.balance)
        else:
            total_assets += account.balance
    return total_assets, total_debts


def reconstruct_net_worth(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    time_range: TimeRange | str = TimeRange.SIX_MONTHS,
    now: datetime | None = None,
) -> list[NetWorthPoint]:
    """Build the month-by-month net-worth series.

    One point is produced for every calendar month from the start of the
    window through the month containing ``now``. For each month end, an
    account created after that instant contributes nothing; every other
    account contributes its current balance with all later transactions
    undone. Liabilities are accumulated by magnitude.

    Args:
        accounts: All accounts, with current balances.
        transactions: All transactions.
        time_range: Trailing window ("3m", "6m", "12m" or "all").
        now: Reference instant (default: current UTC time).

    Returns:
        Points in chronological order.
    """
    time_range = TimeRange.parse(time_range)
    if now is None:
        now = utc_now()
    today = now.date()

    start = resolve_range_start(time_range, accounts, transactions, today)
    ledgers = _build_ledgers(accounts, transactions)

    history: list[NetWorthPoint] = []
    for year, month in generate_month_range(start, today):
        cutoff = month_end(year, month)
        month_assets = ZERO
        month_liabilities = ZERO

        for account in accounts:
            if account.created_at > cutoff:
                continue
            balance = _undo_after(account, ledgers[account.id], cutoff)
            if account.is_liability:
                month_liabilities += abs(balance)
            else:
                month_assets += balance

        history.append(
            NetWorthPoint(
                month=month_label(year, month),
                date=date(year, month, 1),
                assets=month_assets,
                liabilities=month_liabilities,
                net_worth=month_assets - month_liabilities,
            )
        )

    return history


class NetWorthCalculator:
    """Computes the current net-worth snapshot and its history.

    Applies report settings (default window, inactive-account handling)
    on top of reconstruct_net_worth().
    """

    def __init__(self, config: Config):
        """Initialize net-worth calculator.

        Args:
            config: Application configuration.
        """
        self.config = config
        self.report_config = config.report

    def select_accounts(self, accounts: Sequence[Account]) -> list[Account]:
        """Accounts that count toward net worth under the current settings."""
        if self.report_config.include_inactive_accounts:
            return list(accounts)
        active = [a for a in accounts if a.is_active]
        skipped = len(accounts) - len(active)
        if skipped:
            logger.info(f"Excluding {skipped} inactive accounts from net worth")
        return active

    def calculate(
        self,
        accounts: Sequence[Account],
        transactions: Sequence[Transaction],
        time_range: TimeRange | str | None = None,
        now: datetime | None = None,
    ) -> NetWorthSummary:
        """Compute current totals and the monthly history.

        Args:
            accounts: All accounts.
            transactions: All transactions.
            time_range: Window to cover (default: configured default range).
            now: Reference instant (default: current UTC time).

        Returns:
            NetWorthSummary with history in chronological order.
        """
        if time_range is None:
            time_range = self.report_config.default_range

        selected = self.select_accounts(accounts)
        total_assets, total_debts = current_totals(selected)
        history = reconstruct_net_worth(selected, transactions, time_range, now)

        logger.info(
            f"Reconstructed {len(history)} months of net worth from "
            f"{len(selected)} accounts and {len(transactions)} transactions"
        )
        return NetWorthSummary(
            total_assets=total_assets,
            total_debts=total_debts,
            history=history,
        )


def calculate_net_worth(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    config: Config,
    time_range: TimeRange | str | None = None,
    now: datetime | None = None,
) -> NetWorthSummary:
    """Convenience function to compute a net-worth summary.

    Args:
        accounts: All accounts.
        transactions: All transactions.
        config: Application configuration.
        time_range: Window to cover (default: configured default range).
        now: Reference instant.

    Returns:
        NetWorthSummary.
    """
    calculator = NetWorthCalculator(config)
    return calculator.calculate(accounts, transactions, time_range, now)
