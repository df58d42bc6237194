"""Tests for the command-line interface."""

import json
from datetime import timedelta
from pathlib import Path
from unittest.mock import patch

import pytest

from networth_reporter.cli import create_parser, get_log_level, main, validate_output_path
from networth_reporter.config import ConfigError
from networth_reporter.utils.date_utils import utc_now


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each CLI test from an isolated directory with sample exports."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("NETWORTH_CONFIG", raising=False)

    recent = utc_now() - timedelta(days=1)
    accounts = [
        {
            "accountId": "checking",
            "name": "Main Checking",
            "type": "checking",
            "balance": 1000,
            "openingBalance": 700,
            "createdAt": "2020-01-01T00:00:00Z",
        },
    ]
    transactions = [
        {
            "transactionId": "t1",
            "accountId": "checking",
            "amount": 300,
            "type": "income",
            "date": recent.isoformat(),
        },
    ]
    (tmp_path / "accounts.json").write_text(json.dumps({"data": accounts}), encoding="utf-8")
    (tmp_path / "transactions.json").write_text(json.dumps(transactions), encoding="utf-8")
    return tmp_path


def base_args() -> list[str]:
    return ["-a", "accounts.json", "-t", "transactions.json"]


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self) -> None:
        """Test optional arguments default to unset."""
        args = create_parser().parse_args(base_args())

        assert args.time_range is None
        assert args.output is None
        assert not args.reconcile
        assert not args.strict

    def test_invalid_range(self) -> None:
        """Test unknown ranges are rejected by argparse."""
        with pytest.raises(SystemExit):
            create_parser().parse_args(base_args() + ["--range", "2y"])

    @pytest.mark.parametrize("verbosity, level", [(0, "WARNING"), (1, "INFO"), (2, "DEBUG")])
    def test_log_level(self, verbosity: int, level: str) -> None:
        """Test verbosity maps to log levels."""
        assert get_log_level(verbosity) == level


class TestValidateOutputPath:
    """Tests for validate_output_path."""

    def test_within_base(self, tmp_path: Path) -> None:
        """Test a nested path is accepted."""
        result = validate_output_path(Path("reports/out.xlsx"), tmp_path)

        assert result == (tmp_path / "reports" / "out.xlsx").resolve()

    def test_escape_rejected(self, tmp_path: Path) -> None:
        """Test paths leaving the base directory are rejected."""
        with pytest.raises(ValueError, match="escapes the allowed directory"):
            validate_output_path(Path("../out.xlsx"), tmp_path)


class TestMain:
    """Tests for main()."""

    def test_console_report(self, workspace: Path) -> None:
        """Test a plain run succeeds without writing output."""
        assert main(base_args() + ["--range", "3m"]) == 0
        assert not list(workspace.glob("*.csv"))

    def test_excel_output(self, workspace: Path) -> None:
        """Test an .xlsx output path writes a workbook."""
        assert main(base_args() + ["-o", "reports/networth.xlsx"]) == 0
        assert (workspace / "reports" / "networth.xlsx").exists()

    def test_csv_output(self, workspace: Path) -> None:
        """Test a .csv output path writes CSV files beside it."""
        assert main(base_args() + ["-o", "reports/networth.csv", "--range", "all"]) == 0
        assert (workspace / "reports" / "net_worth_history.csv").exists()
        assert (workspace / "reports" / "income_vs_expense.csv").exists()
        assert (workspace / "reports" / "account_flow.csv").exists()

    def test_dry_run(self, workspace: Path) -> None:
        """Test dry runs never write output."""
        assert main(base_args() + ["-o", "reports/networth.xlsx", "--dry-run"]) == 0
        assert not (workspace / "reports").exists()

    def test_output_escape_rejected(self, workspace: Path) -> None:
        """Test output outside the working directory fails."""
        assert main(base_args() + ["-o", "../networth.xlsx"]) == 1

    def test_missing_input(self, workspace: Path) -> None:
        """Test a missing export fails."""
        assert main(["-a", "nope.json", "-t", "transactions.json"]) == 1

    def test_strict_rejects_malformed_records(self, workspace: Path) -> None:
        """Test strict mode fails on a malformed record."""
        (workspace / "transactions.json").write_text(
            json.dumps([{"accountId": "checking", "type": "income"}]), encoding="utf-8"
        )

        assert main(base_args()) == 0
        assert main(base_args() + ["--strict"]) == 1

    def test_reconcile_consistent(self, workspace: Path) -> None:
        """Test a consistent ledger passes strict reconciliation."""
        assert main(base_args() + ["--reconcile", "--strict"]) == 0

    def test_reconcile_drift(self, workspace: Path) -> None:
        """Test ledger drift fails only in strict mode."""
        accounts = json.loads((workspace / "accounts.json").read_text(encoding="utf-8"))
        accounts["data"][0]["balance"] = 1500
        (workspace / "accounts.json").write_text(json.dumps(accounts), encoding="utf-8")

        assert main(base_args() + ["--reconcile"]) == 0
        assert main(base_args() + ["--reconcile", "--strict"]) == 1

    def test_settings_file(self, workspace: Path) -> None:
        """Test an explicit settings file is applied."""
        settings = workspace / "settings.yaml"
        settings.write_text("report:\n  default_range: 12m\n", encoding="utf-8")

        assert main(base_args() + ["--config", str(settings)]) == 0

    def test_settings_from_environment(
        self, workspace: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test the settings path can come from the environment."""
        monkeypatch.setenv("NETWORTH_CONFIG", str(workspace / "missing.yaml"))

        assert main(base_args()) == 1

    def test_invalid_settings(self, workspace: Path) -> None:
        """Test an invalid settings file fails."""
        settings = workspace / "settings.yaml"
        settings.write_text("report:\n  default_range: 2y\n", encoding="utf-8")

        assert main(base_args() + ["--config", str(settings)]) == 1

    def test_config_error_handled(self, workspace: Path) -> None:
        """Test configuration errors are reported, not raised."""
        with patch(
            "networth_reporter.cli.load_config",
            side_effect=ConfigError("bad settings"),
        ):
            assert main(base_args()) == 1

    def test_config_error_writes_no_log_file(self, workspace: Path) -> None:
        """Test a run that fails on settings creates no log file."""
        settings = workspace / "settings.yaml"
        settings.write_text("report:\n  default_range: 2y\n", encoding="utf-8")

        assert main(base_args() + ["--config", str(settings)]) == 1
        assert not (workspace / "networth_reporter.log").exists()

    def test_configured_log_file(self, workspace: Path) -> None:
        """Test the log file named in settings is the only one created."""
        settings = workspace / "settings.yaml"
        settings.write_text("logging:\n  file: custom.log\n", encoding="utf-8")

        assert main(base_args() + ["--config", str(settings)]) == 0
        assert (workspace / "custom.log").exists()
        assert not (workspace / "networth_reporter.log").exists()

    def test_budgets(self, workspace: Path) -> None:
        """Test a budgets export adds budget CSV files."""
        budgets = [
            {
                "budgetId": "b1",
                "name": "Groceries",
                "amount": 400,
                "categoryId": "groceries",
                "startDate": "2020-01-01T00:00:00Z",
                "recurrenceRule": "FREQ=MONTHLY;BYMONTHDAY=1",
            },
        ]
        (workspace / "budgets.json").write_text(json.dumps(budgets), encoding="utf-8")

        args = base_args() + ["-b", "budgets.json", "-o", "reports/networth.csv"]
        assert main(args) == 0
        assert (workspace / "reports" / "budget_metrics.csv").exists()
        assert (workspace / "reports" / "budget_categories.csv").exists()

    def test_missing_budgets_file(self, workspace: Path) -> None:
        """Test a missing budgets export fails."""
        assert main(base_args() + ["--budgets", "nope.json"]) == 1
