"""CSV exporter for report series."""

import csv
from decimal import Decimal
from pathlib import Path

from networth_reporter.config import Config
from networth_reporter.models.report import ReportBundle
from networth_reporter.utils.decimal_utils import quantize_money
from networth_reporter.utils.logging_config import get_logger
from networth_reporter.utils.sanitize import sanitize_for_csv

logger = get_logger(__name__)

NET_WORTH_FILENAME = "net_worth_history.csv"
CASH_FLOW_FILENAME = "income_vs_expense.csv"
ACCOUNT_FLOW_FILENAME = "account_flow.csv"
BUDGET_FILENAME = "budget_metrics.csv"
BUDGET_CATEGORIES_FILENAME = "budget_categories.csv"


class CSVExporter:
    """Exports report series to CSV files.

    Creates in the output directory:
    - net_worth_history.csv
    - income_vs_expense.csv
    - account_flow.csv
    - budget_metrics.csv and budget_categories.csv, when the report has
      budget metrics
    """

    def __init__(self, config: Config):
        """Initialize CSV exporter.

        Args:
            config: Application configuration.
        """
        self.config = config
        self.output_config = config.output

    def export(self, output_dir: Path, report: ReportBundle) -> list[Path]:
        """Export all report series.

        Args:
            output_dir: Directory to write into (created if missing).
            report: Computed report.

        Returns:
            Paths of the created files.
        """
        output_dir.mkdir(parents=True, exist_ok=True)

        created_files = [
            self._export_net_worth(output_dir, report),
            self._export_cash_flow(output_dir, report),
            self._export_account_flow(output_dir, report),
        ]
        if report.budgets:
            created_files.append(self._export_budgets(output_dir, report))
            created_files.append(self._export_budget_categories(output_dir, report))

        logger.info(f"Exported {len(created_files)} CSV files to {output_dir}")
        return created_files

    def _export_net_worth(self, output_dir: Path, report: ReportBundle) -> Path:
        output_path = output_dir / NET_WORTH_FILENAME

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Month", "Date", "Assets", "Liabilities", "Net Worth"])
            for point in report.net_worth.history:
                writer.writerow([
                    point.month,
                    point.date.strftime(self.output_config.date_format),
                    self._money(point.assets),
                    self._money(point.liabilities),
                    self._money(point.net_worth),
                ])

        logger.debug(f"Exported {len(report.net_worth.history)} net worth rows to {output_path}")
        return output_path

    def _export_cash_flow(self, output_dir: Path, report: ReportBundle) -> Path:
        output_path = output_dir / CASH_FLOW_FILENAME

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Month", "Date", "Income", "Expense", "Surplus"])
            for point in report.cash_flow:
                writer.writerow([
                    point.month,
                    point.date.strftime(self.output_config.date_format),
                    self._money(point.income),
                    self._money(point.expense),
                    self._money(point.surplus),
                ])
            writer.writerow([
                "Total",
                "",
                self._money(report.overview.total_income),
                self._money(report.overview.total_expense),
                self._money(report.overview.total_surplus),
            ])

        logger.debug(f"Exported {len(report.cash_flow)} cash flow rows to {output_path}")
        return output_path

    def _export_account_flow(self, output_dir: Path, report: ReportBundle) -> Path:
        output_path = output_dir / ACCOUNT_FLOW_FILENAME

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Account ID", "Account", "Inflow", "Outflow", "Net Flow"])
            for flow in report.account_flows:
                writer.writerow([
                    sanitize_for_csv(flow.account_id),
                    sanitize_for_csv(flow.name),
                    self._money(flow.inflow),
                    self._money(flow.outflow),
                    self._money(flow.net_flow),
                ])

        logger.debug(f"Exported {len(report.account_flows)} account flow rows to {output_path}")
        return output_path

    def _export_budgets(self, output_dir: Path, report: ReportBundle) -> Path:
        output_path = output_dir / BUDGET_FILENAME

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(["Month", "Date", "Budgeted", "Spent", "Remaining"])
            for month in report.budgets:
                writer.writerow([
                    month.month,
                    month.date.strftime(self.output_config.date_format),
                    self._money(month.total_budgeted),
                    self._money(month.total_spent),
                    self._money(month.remaining),
                ])

        logger.debug(f"Exported {len(report.budgets)} budget rows to {output_path}")
        return output_path

    def _export_budget_categories(self, output_dir: Path, report: ReportBundle) -> Path:
        output_path = output_dir / BUDGET_CATEGORIES_FILENAME

        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(
                ["Month", "Category ID", "Budget", "Budgeted", "Spent", "Remaining"]
            )
            for month in report.budgets:
                for category in month.categories:
                    writer.writerow([
                        month.month,
                        sanitize_for_csv(category.category_id),
                        sanitize_for_csv(category.name),
                        self._money(category.budgeted),
                        self._money(category.spent),
                        self._money(category.remaining),
                    ])

        return output_path

    def _money(self, amount: Decimal) -> str:
        return str(quantize_money(amount, self.output_config.decimal_places))
