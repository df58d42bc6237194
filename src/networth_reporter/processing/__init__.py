"""Report computation components."""

from networth_reporter.processing.budget_metrics import (
    BudgetAnalyzer,
    budget_metrics,
    monthly_budget,
)
from networth_reporter.processing.cash_flow import (
    CashFlowAnalyzer,
    account_flow,
    monthly_income_vs_expense,
)
from networth_reporter.processing.net_worth import (
    NetWorthCalculator,
    balance_as_of,
    calculate_net_worth,
    reconstruct_net_worth,
)
from networth_reporter.processing.reconciliation import (
    LedgerDriftError,
    Reconciler,
    reconcile_ledger,
    require_consistent,
)

__all__ = [
    "NetWorthCalculator",
    "calculate_net_worth",
    "reconstruct_net_worth",
    "balance_as_of",
    "CashFlowAnalyzer",
    "monthly_income_vs_expense",
    "account_flow",
    "BudgetAnalyzer",
    "budget_metrics",
    "monthly_budget",
    "Reconciler",
    "reconcile_ledger",
    "require_consistent",
    "LedgerDriftError",
]
