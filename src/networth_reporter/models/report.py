"""Report data models for net-worth and cash-flow output."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from networth_reporter.utils.date_utils import TimeRange
from networth_reporter.utils.decimal_utils import ZERO


@dataclass
class NetWorthPoint:
    """Reconstructed balances for one calendar month.

    Attributes:
        month: Chart label, e.g. "Jan 25".
        date: First day of the month.
        assets: Sum of asset balances at month end.
        liabilities: Sum of liability magnitudes at month end.
        net_worth: assets - liabilities.
    """

    month: str
    date: date
    assets: Decimal = ZERO
    liabilities: Decimal = ZERO
    net_worth: Decimal = ZERO

    def to_dict(self) -> dict[str, object]:
        """Record in the shape consumed by chart renderers."""
        return {
            "month": self.month,
            "date": self.date.isoformat(),
            "assets": float(self.assets),
            "liabilities": float(self.liabilities),
            "netWorth": float(self.net_worth),
        }


@dataclass
class NetWorthSummary:
    """Current net-worth snapshot plus its monthly history."""

    total_assets: Decimal = ZERO
    total_debts: Decimal = ZERO
    history: list[NetWorthPoint] = field(default_factory=list)

    @property
    def net_worth(self) -> Decimal:
        return self.total_assets - self.total_debts


@dataclass
class CashFlowPoint:
    """Income and expense totals for one calendar month."""

    month: str
    date: date
    income: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def surplus(self) -> Decimal:
        return self.income - self.expense

    def to_dict(self) -> dict[str, object]:
        return {
            "month": self.month,
            "date": self.date.isoformat(),
            "income": float(self.income),
            "expense": float(self.expense),
            "surplus": float(self.surplus),
        }


@dataclass
class CashFlowOverview:
    """Totals across a cash-flow series."""

    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO

    @property
    def total_surplus(self) -> Decimal:
        return self.total_income - self.total_expense

    @property
    def savings_rate(self) -> Decimal | None:
        """Share of income kept, or None when there was no income."""
        if self.total_income == 0:
            return None
        return self.total_surplus / self.total_income


@dataclass
class AccountFlow:
    """Money in and out of a single account over the report window."""

    account_id: str
    name: str
    inflow: Decimal = ZERO
    outflow: Decimal = ZERO

    @property
    def net_flow(self) -> Decimal:
        return self.inflow - self.outflow


@dataclass
class CategoryBudget:
    """Budgeted vs. spent for one category in one month."""

    category_id: str
    name: str
    budgeted: Decimal = ZERO
    spent: Decimal = ZERO

    @property
    def remaining(self) -> Decimal:
        return self.budgeted - self.spent

    @property
    def is_over_budget(self) -> bool:
        return self.spent > self.budgeted


@dataclass
class BudgetMonth:
    """Budget metrics for one calendar month.

    Attributes:
        month: Chart label, e.g. "Jan 25".
        date: First day of the month.
        total_budgeted: Sum of category budgets active in the month, or
            the overall budget when one is active.
        total_spent: Categorized expenses in the month, transfers excluded.
        categories: Per-category breakdown for budgeted categories.
    """

    month: str
    date: date
    total_budgeted: Decimal = ZERO
    total_spent: Decimal = ZERO
    categories: list[CategoryBudget] = field(default_factory=list)

    @property
    def remaining(self) -> Decimal:
        return self.total_budgeted - self.total_spent

    @property
    def utilization(self) -> Decimal | None:
        """Share of the budget spent, or None when nothing was budgeted."""
        if self.total_budgeted == 0:
            return None
        return self.total_spent / self.total_budgeted

    def to_dict(self) -> dict[str, object]:
        return {
            "month": self.month,
            "date": self.date.isoformat(),
            "totalBudgeted": float(self.total_budgeted),
            "totalSpent": float(self.total_spent),
            "categoryBreakdown": {
                c.category_id: {
                    "name": c.name,
                    "budgeted": float(c.budgeted),
                    "spent": float(c.spent),
                }
                for c in self.categories
            },
        }


@dataclass
class ReconciliationResult:
    """Outcome of checking one account's balance against its history.

    Attributes:
        account_id: Account checked.
        account_name: Display name.
        stored_balance: The account's current balance field.
        opening_balance: Balance at creation, if known.
        replayed_balance: opening_balance plus every transaction's effect,
            or None when no opening balance was available.
        transaction_count: Number of transactions in the account.
        issues: Human-readable problems found.
    """

    account_id: str
    account_name: str
    stored_balance: Decimal
    opening_balance: Decimal | None = None
    replayed_balance: Decimal | None = None
    transaction_count: int = 0
    issues: list[str] = field(default_factory=list)

    @property
    def drift(self) -> Decimal | None:
        """Stored minus replayed balance, or None if not replayed."""
        if self.replayed_balance is None:
            return None
        return self.stored_balance - self.replayed_balance

    @property
    def is_consistent(self) -> bool:
        return not self.issues


@dataclass
class ReconciliationReport:
    """Reconciliation results for every account plus orphan transactions."""

    results: list[ReconciliationResult] = field(default_factory=list)
    orphan_transaction_ids: list[str] = field(default_factory=list)

    @property
    def inconsistent(self) -> list[ReconciliationResult]:
        return [r for r in self.results if not r.is_consistent]

    @property
    def is_consistent(self) -> bool:
        return not self.inconsistent and not self.orphan_transaction_ids


@dataclass
class ReportBundle:
    """Everything an exporter needs for one report run.

    Attributes:
        time_range: Window the series cover.
        generated_at: Date the report was computed.
        net_worth: Current snapshot and monthly history.
        cash_flow: Monthly income vs. expense series.
        overview: Totals across the cash-flow series.
        account_flows: Per-account inflow/outflow, largest net flow first.
        budgets: Monthly budget metrics; empty when no budgets were given.
        category_filter: Category the cash-flow figures were limited to.
        account_filter: Account the cash-flow figures were limited to.
    """

    time_range: TimeRange
    generated_at: date
    net_worth: NetWorthSummary
    cash_flow: list[CashFlowPoint] = field(default_factory=list)
    overview: CashFlowOverview = field(default_factory=CashFlowOverview)
    account_flows: list[AccountFlow] = field(default_factory=list)
    budgets: list[BudgetMonth] = field(default_factory=list)
    category_filter: str | None = None
    account_filter: str | None = None

    @property
    def period_display(self) -> str:
        """Formatted first-to-last month string."""
        history = self.net_worth.history
        if not history:
            return "No data"
        return f"{history[0].month} to {history[-1].month}"
