"""Tests for income vs. expense and account flow analysis."""

from datetime import date, datetime
from decimal import Decimal

from networth_reporter.config import Config
from networth_reporter.models.account import Account, AccountType
from networth_reporter.models.transaction import Transaction, TransactionType
from networth_reporter.processing.cash_flow import (
    CashFlowAnalyzer,
    account_flow,
    filter_transactions,
    monthly_income_vs_expense,
    summarize,
)

NOW = datetime(2025, 6, 15, 12, 0, 0)


def create_account(account_id: str, balance: str = "0.00") -> Account:
    """Helper to create an Account for testing."""
    return Account(
        id=account_id,
        name=account_id.title(),
        account_type=AccountType.CHECKING,
        balance=Decimal(balance),
        created_at=datetime(2023, 1, 1),
    )


def create_transaction(
    amount: str,
    when: datetime,
    transaction_type: TransactionType = TransactionType.EXPENSE,
    account_id: str = "main",
    category_id: str | None = None,
) -> Transaction:
    """Helper to create a Transaction for testing."""
    return Transaction(
        id=f"{account_id}-{when.isoformat()}",
        account_id=account_id,
        amount=Decimal(amount),
        transaction_type=transaction_type,
        date=when,
        category_id=category_id,
    )


def sample_transactions() -> list[Transaction]:
    """A month of salary and spending, plus activity outside the 6m window."""
    return [
        create_transaction("3000.00", datetime(2025, 5, 1), TransactionType.INCOME,
                           category_id="salary"),
        create_transaction("1200.00", datetime(2025, 5, 15), category_id="rent"),
        create_transaction("100.00", datetime(2025, 6, 2), account_id="card",
                           category_id="dining"),
        create_transaction("50.00", datetime(2024, 11, 30), TransactionType.INCOME),
        create_transaction("999.00", datetime(2025, 7, 1)),
    ]


class TestMonthlyIncomeVsExpense:
    """Tests for monthly_income_vs_expense."""

    def test_every_month_has_a_bucket(self) -> None:
        """Test months without activity appear with zeros."""
        points = monthly_income_vs_expense([], date(2024, 12, 1), date(2025, 6, 15))

        assert [p.date for p in points] == [
            date(2024, 12, 1),
            date(2025, 1, 1),
            date(2025, 2, 1),
            date(2025, 3, 1),
            date(2025, 4, 1),
            date(2025, 5, 1),
            date(2025, 6, 1),
        ]
        assert all(p.income == 0 and p.expense == 0 for p in points)

    def test_sums_by_month(self) -> None:
        """Test income and expense are summed into their month."""
        points = monthly_income_vs_expense(
            sample_transactions(), date(2024, 12, 1), date(2025, 6, 15)
        )
        by_month = {p.date: p for p in points}

        may = by_month[date(2025, 5, 1)]
        assert may.income == Decimal("3000.00")
        assert may.expense == Decimal("1200.00")
        assert may.surplus == Decimal("1800.00")
        assert by_month[date(2025, 6, 1)].expense == Decimal("100.00")

    def test_out_of_range_transactions_ignored(self) -> None:
        """Test transactions outside the bucketed months are not counted."""
        points = monthly_income_vs_expense(
            sample_transactions(), date(2024, 12, 1), date(2025, 6, 15)
        )

        assert sum(p.income for p in points) == Decimal("3000.00")
        assert sum(p.expense for p in points) == Decimal("1300.00")

    def test_point_to_dict(self) -> None:
        """Test chart records use the expected field names."""
        points = monthly_income_vs_expense(
            sample_transactions(), date(2025, 5, 1), date(2025, 5, 31)
        )

        assert points[0].to_dict() == {
            "month": "May 25",
            "date": "2025-05-01",
            "income": 3000.0,
            "expense": 1200.0,
            "surplus": 1800.0,
        }


class TestFilterTransactions:
    """Tests for filter_transactions."""

    def test_start_is_inclusive(self) -> None:
        """Test a transaction at the start of the window is kept."""
        transactions = [
            create_transaction("10.00", datetime(2024, 12, 1, 0, 0, 0)),
            create_transaction("10.00", datetime(2024, 11, 30, 23, 59, 59)),
        ]

        result = filter_transactions(transactions, date(2024, 12, 1))

        assert len(result) == 1
        assert result[0].date == datetime(2024, 12, 1)

    def test_category_filter(self) -> None:
        """Test only the selected category is kept."""
        result = filter_transactions(
            sample_transactions(), date(2024, 12, 1), category_id="rent"
        )

        assert [t.category_id for t in result] == ["rent"]

    def test_account_filter(self) -> None:
        """Test only the selected account is kept."""
        result = filter_transactions(
            sample_transactions(), date(2024, 12, 1), account_id="card"
        )

        assert len(result) == 1
        assert result[0].account_id == "card"


class TestSummarize:
    """Tests for the cash-flow overview."""

    def test_totals_equal_sum_of_points(self) -> None:
        """Test overview totals match the per-month series."""
        points = monthly_income_vs_expense(
            sample_transactions(), date(2024, 12, 1), date(2025, 6, 15)
        )

        overview = summarize(points)

        assert overview.total_income == sum(p.income for p in points)
        assert overview.total_expense == sum(p.expense for p in points)
        assert overview.total_surplus == Decimal("1700.00")

    def test_savings_rate(self) -> None:
        """Test savings rate is surplus over income."""
        points = monthly_income_vs_expense(
            sample_transactions(), date(2025, 5, 1), date(2025, 5, 31)
        )

        overview = summarize(points)

        assert overview.savings_rate == Decimal("0.6")

    def test_savings_rate_without_income(self) -> None:
        """Test savings rate is undefined when nothing was earned."""
        overview = summarize([])

        assert overview.savings_rate is None


class TestAccountFlow:
    """Tests for per-account flow."""

    def test_every_account_listed(self) -> None:
        """Test accounts without activity still appear."""
        accounts = [create_account("main"), create_account("card"), create_account("idle")]

        flows = account_flow(accounts, sample_transactions()[:3])

        assert {f.account_id for f in flows} == {"main", "card", "idle"}

    def test_ordered_by_absolute_net_flow(self) -> None:
        """Test the largest movement comes first regardless of sign."""
        accounts = [create_account("idle"), create_account("card"), create_account("main")]

        flows = account_flow(accounts, sample_transactions()[:3])

        assert [f.account_id for f in flows] == ["main", "card", "idle"]
        assert flows[0].inflow == Decimal("3000.00")
        assert flows[0].outflow == Decimal("1200.00")
        assert flows[0].net_flow == Decimal("1800.00")
        assert flows[1].net_flow == Decimal("-100.00")
        assert flows[2].net_flow == Decimal("0")

    def test_unknown_accounts_ignored(self) -> None:
        """Test transactions for unlisted accounts are not counted."""
        flows = account_flow(
            [create_account("main")],
            [create_transaction("20.00", datetime(2025, 5, 1), account_id="other")],
        )

        assert len(flows) == 1
        assert flows[0].outflow == Decimal("0")


class TestCashFlowAnalyzer:
    """Tests for CashFlowAnalyzer."""

    def test_analyze_six_months(self) -> None:
        """Test the analyzer windows, buckets and totals the data."""
        accounts = [create_account("main"), create_account("card")]

        points, overview, flows = CashFlowAnalyzer(Config()).analyze(
            accounts, sample_transactions(), "6m", now=NOW
        )

        assert len(points) == 7
        assert points[0].date == date(2024, 12, 1)
        assert overview.total_income == Decimal("3000.00")
        assert overview.total_expense == Decimal("1300.00")
        assert [f.account_id for f in flows] == ["main", "card"]

    def test_analyze_with_category(self) -> None:
        """Test a category filter narrows series and flows alike."""
        accounts = [create_account("main"), create_account("card")]

        points, overview, flows = CashFlowAnalyzer(Config()).analyze(
            accounts, sample_transactions(), "6m", category_id="dining", now=NOW
        )

        assert overview.total_income == Decimal("0")
        assert overview.total_expense == Decimal("100.00")
        assert flows[0].account_id == "card"

    def test_analyze_all_time(self) -> None:
        """Test the all-time window starts with the earliest transaction."""
        points, overview, _ = CashFlowAnalyzer(Config()).analyze(
            [create_account("main")], sample_transactions(), "all", now=NOW
        )

        assert points[0].date == date(2024, 11, 1)
        assert overview.total_income == Decimal("3050.00")
