"""Data models for accounts, transactions and reports."""

from networth_reporter.models.account import (
    ASSET_TYPES,
    LIABILITY_TYPES,
    Account,
    AccountType,
)
from networth_reporter.models.budget import Budget
from networth_reporter.models.report import (
    AccountFlow,
    BudgetMonth,
    CashFlowOverview,
    CashFlowPoint,
    CategoryBudget,
    NetWorthPoint,
    NetWorthSummary,
    ReconciliationReport,
    ReconciliationResult,
    ReportBundle,
)
from networth_reporter.models.transaction import Transaction, TransactionType

__all__ = [
    "Account",
    "AccountType",
    "ASSET_TYPES",
    "LIABILITY_TYPES",
    "Transaction",
    "TransactionType",
    "Budget",
    "NetWorthPoint",
    "NetWorthSummary",
    "CashFlowPoint",
    "CashFlowOverview",
    "AccountFlow",
    "BudgetMonth",
    "CategoryBudget",
    "ReconciliationResult",
    "ReconciliationReport",
    "ReportBundle",
]
