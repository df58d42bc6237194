"""Tests for report assembly."""

from datetime import date, datetime
from decimal import Decimal

from networth_reporter.config import Config, ReportConfig
from networth_reporter.models.account import Account, AccountType
from networth_reporter.models.budget import Budget
from networth_reporter.models.transaction import Transaction, TransactionType
from networth_reporter.processing.report_generator import generate_report
from networth_reporter.utils.date_utils import TimeRange

NOW = datetime(2025, 6, 15, 12, 0, 0)


def create_accounts() -> list[Account]:
    """A checking account and a credit card."""
    return [
        Account(
            id="checking",
            name="Main Checking",
            account_type=AccountType.CHECKING,
            balance=Decimal("2500.00"),
            created_at=datetime(2024, 1, 1),
        ),
        Account(
            id="visa",
            name="Visa",
            account_type=AccountType.CREDIT_CARD,
            balance=Decimal("400.00"),
            created_at=datetime(2024, 1, 1),
        ),
    ]


def create_transactions() -> list[Transaction]:
    """Salary into checking and a dinner on the card."""
    return [
        Transaction(
            id="t1",
            account_id="checking",
            amount=Decimal("3000.00"),
            transaction_type=TransactionType.INCOME,
            date=datetime(2025, 5, 1),
            category_id="salary",
        ),
        Transaction(
            id="t2",
            account_id="visa",
            amount=Decimal("150.00"),
            transaction_type=TransactionType.EXPENSE,
            date=datetime(2025, 5, 20),
            category_id="dining",
        ),
    ]


class TestGenerateReport:
    """Tests for generate_report."""

    def test_views_share_window(self) -> None:
        """Test net worth and cash flow cover the same months."""
        report = generate_report(create_accounts(), create_transactions(), Config(), "6m", now=NOW)

        assert report.time_range is TimeRange.SIX_MONTHS
        assert report.generated_at == date(2025, 6, 15)
        assert [p.date for p in report.net_worth.history] == [p.date for p in report.cash_flow]
        assert report.period_display == "Dec 24 to Jun 25"

    def test_figures(self) -> None:
        """Test the bundle carries the computed figures."""
        report = generate_report(create_accounts(), create_transactions(), Config(), "3m", now=NOW)

        assert report.net_worth.net_worth == Decimal("2100.00")
        april = report.net_worth.history[1]
        assert april.date == date(2025, 4, 1)
        assert april.assets == Decimal("-500.00")
        assert april.liabilities == Decimal("250.00")
        assert report.overview.total_income == Decimal("3000.00")
        assert report.overview.total_expense == Decimal("150.00")
        assert report.account_flows[0].account_id == "checking"

    def test_default_range_from_config(self) -> None:
        """Test the configured default range is used."""
        config = Config(report=ReportConfig(default_range=TimeRange.THREE_MONTHS))

        report = generate_report(create_accounts(), [], config, now=NOW)

        assert report.time_range is TimeRange.THREE_MONTHS
        assert len(report.net_worth.history) == 4

    def test_filters_recorded(self) -> None:
        """Test filters narrow cash flow only and are recorded on the bundle."""
        report = generate_report(
            create_accounts(),
            create_transactions(),
            Config(),
            "3m",
            category_id="dining",
            now=NOW,
        )

        assert report.category_filter == "dining"
        assert report.account_filter is None
        assert report.overview.total_income == Decimal("0")
        assert report.overview.total_expense == Decimal("150.00")
        assert report.net_worth.net_worth == Decimal("2100.00")

    def test_empty_input(self) -> None:
        """Test an empty ledger produces a single empty month for all-time."""
        report = generate_report([], [], Config(), "all", now=NOW)

        assert len(report.net_worth.history) == 1
        assert report.net_worth.net_worth == Decimal("0")
        assert report.account_flows == []
        assert report.budgets == []

    def test_budgets(self) -> None:
        """Test budget metrics cover the report window."""
        budget = Budget(
            id="bud_1",
            name="Dining",
            amount=Decimal("100.00"),
            start_date=datetime(2025, 5, 1),
            category_id="dining",
        )

        report = generate_report(
            create_accounts(), create_transactions(), Config(), "3m", budgets=[budget], now=NOW
        )

        assert [m.date for m in report.budgets] == [p.date for p in report.cash_flow]
        may = report.budgets[2]
        assert may.total_budgeted == Decimal("100.00")
        assert may.total_spent == Decimal("150.00")
        assert may.categories[0].is_over_budget
        assert report.budgets[3].total_budgeted == Decimal("0")
