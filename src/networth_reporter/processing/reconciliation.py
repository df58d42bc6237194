"""Ledger reconciliation: checks stored balances against transaction history.

Net-worth reconstruction trusts each account's stored balance. This module
makes that trust explicit by replaying an account's history from its
opening balance and reporting any difference.
"""

from collections import defaultdict
from collections.abc import Sequence

from networth_reporter.config import Config
from networth_reporter.models.account import Account
from networth_reporter.models.report import ReconciliationReport, ReconciliationResult
from networth_reporter.models.transaction import Transaction
from networth_reporter.utils.logging_config import get_logger

logger = get_logger(__name__)


class LedgerDriftError(Exception):
    """Raised when stored balances disagree with transaction history."""

    def __init__(self, report: ReconciliationReport):
        self.report = report
        problems = len(report.inconsistent)
        orphans = len(report.orphan_transaction_ids)
        super().__init__(
            f"Ledger inconsistent: {problems} account(s) with issues, "
            f"{orphans} orphan transaction(s)"
        )


class Reconciler:
    """Compares each account's stored balance to its replayed history."""

    def __init__(self, config: Config):
        """Initialize reconciler.

        Args:
            config: Application configuration (for the drift tolerance).
        """
        self.config = config
        self.tolerance = config.report.reconciliation_tolerance

    def reconcile(
        self,
        accounts: Sequence[Account],
        transactions: Sequence[Transaction],
    ) -> ReconciliationReport:
        """Check every account.

        Args:
            accounts: Accounts to check.
            transactions: All transactions.

        Returns:
            ReconciliationReport with one result per account.
        """
        by_account: dict[str, list[Transaction]] = defaultdict(list)
        for txn in transactions:
            by_account[txn.account_id].append(txn)

        known_ids = {a.id for a in accounts}
        orphans = sorted(
            t.id for t in transactions if t.account_id not in known_ids
        )
        if orphans:
            logger.warning(f"{len(orphans)} transactions reference unknown accounts")

        results = [
            self._reconcile_account(account, by_account.get(account.id, []))
            for account in accounts
        ]
        report = ReconciliationReport(results=results, orphan_transaction_ids=orphans)

        logger.info(
            f"Reconciled {len(results)} accounts: "
            f"{len(report.inconsistent)} with issues"
        )
        return report

    def _reconcile_account(
        self,
        account: Account,
        transactions: list[Transaction],
    ) -> ReconciliationResult:
        result = ReconciliationResult(
            account_id=account.id,
            account_name=account.name,
            stored_balance=account.balance,
            opening_balance=account.opening_balance,
            transaction_count=len(transactions),
        )

        # Transaction dates carry only the calendar day
        opened = account.created_at.date()
        early = [t for t in transactions if t.date.date() < opened]
        if early:
            result.issues.append(
                f"{len(early)} transaction(s) dated before the account was created"
            )

        if account.opening_balance is not None:
            replayed = account.opening_balance
            for txn in sorted(transactions, key=lambda t: t.date):
                replayed += txn.balance_effect(account.is_liability)
            result.replayed_balance = replayed

            drift = account.balance - replayed
            if abs(drift) > self.tolerance:
                result.issues.append(
                    f"Stored balance {account.balance} differs from replayed "
                    f"history {replayed} by {drift}"
                )

        for issue in result.issues:
            logger.warning(f"Account {account.id}: {issue}")

        return result


def reconcile_ledger(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    config: Config,
) -> ReconciliationReport:
    """Convenience function to reconcile a ledger.

    Args:
        accounts: Accounts to check.
        transactions: All transactions.
        config: Application configuration.

    Returns:
        ReconciliationReport.
    """
    return Reconciler(config).reconcile(accounts, transactions)


def require_consistent(report: ReconciliationReport) -> None:
    """Raise if a reconciliation report found any problem.

    Raises:
        LedgerDriftError: If any account has issues or orphans exist.
    """
    if not report.is_consistent:
        raise LedgerDriftError(report)
