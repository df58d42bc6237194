"""Excel workbook writer for report output."""

from decimal import Decimal
from pathlib import Path

from openpyxl import Workbook
from openpyxl.chart import BarChart, LineChart, Reference
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.worksheet.worksheet import Worksheet

from networth_reporter.config import Config
from networth_reporter.models.report import ReportBundle
from networth_reporter.utils.decimal_utils import ZERO
from networth_reporter.utils.logging_config import get_logger
from networth_reporter.utils.sanitize import sanitize_for_csv

logger = get_logger(__name__)


class ExcelWriter:
    """Writes a report to a multi-sheet Excel workbook.

    Generates sheets:
    - Summary
    - Net Worth (with a line chart)
    - Income vs Expense
    - Account Flow
    - Budget Metrics (with a budgeted vs. spent chart) and Budget
      Categories, when the report has budget metrics
    """

    SHEET_SUMMARY = "Summary"
    SHEET_NET_WORTH = "Net Worth"
    SHEET_CASH_FLOW = "Income vs Expense"
    SHEET_ACCOUNT_FLOW = "Account Flow"
    SHEET_BUDGETS = "Budget Metrics"
    SHEET_BUDGET_CATEGORIES = "Budget Categories"

    def __init__(self, config: Config):
        """Initialize Excel writer.

        Args:
            config: Application configuration.
        """
        self.config = config
        self.output_config = config.output

        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(
            start_color="4472C4", end_color="4472C4", fill_type="solid"
        )
        self.title_font = Font(bold=True, size=14)
        self.centered = Alignment(horizontal="center")

    def write(self, output_path: Path, report: ReportBundle) -> None:
        """Write the report to an Excel workbook.

        Args:
            output_path: Path for output file.
            report: Computed report.
        """
        logger.info(f"Writing Excel workbook to {output_path}")

        wb = Workbook()
        if wb.active:
            wb.remove(wb.active)

        self._create_summary(wb, report)
        self._create_net_worth_sheet(wb, report)
        self._create_cash_flow_sheet(wb, report)
        self._create_account_flow_sheet(wb, report)
        if report.budgets:
            self._create_budget_sheet(wb, report)
            self._create_budget_category_sheet(wb, report)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        wb.save(output_path)
        logger.info(f"Excel workbook saved: {output_path}")

    def _create_summary(self, wb: Workbook, report: ReportBundle) -> None:
        ws = wb.create_sheet(self.SHEET_SUMMARY)

        ws.cell(row=1, column=1, value="NET WORTH REPORT").font = self.title_font

        rows: list[tuple[str, object]] = [
            ("Generated", report.generated_at.strftime(self.output_config.date_format)),
            ("Time range", report.time_range.label),
            ("Period", report.period_display),
            ("Category filter", sanitize_for_csv(report.category_filter) or "All categories"),
            ("Account filter", sanitize_for_csv(report.account_filter) or "All accounts"),
            ("", None),
            ("Total assets", report.net_worth.total_assets),
            ("Total debts", report.net_worth.total_debts),
            ("Net worth", report.net_worth.net_worth),
            ("", None),
            ("Total income", report.overview.total_income),
            ("Total expense", report.overview.total_expense),
            ("Surplus", report.overview.total_surplus),
            ("Savings rate", report.overview.savings_rate),
        ]
        if report.budgets:
            rows += [
                ("", None),
                ("Total budgeted", sum((m.total_budgeted for m in report.budgets), ZERO)),
                ("Budget spending", sum((m.total_spent for m in report.budgets), ZERO)),
            ]

        for row, (label, value) in enumerate(rows, start=3):
            if not label:
                continue
            label_cell = ws.cell(row=row, column=1, value=label)
            if label in ("Net worth", "Surplus"):
                label_cell.font = Font(bold=True)
            if label == "Savings rate":
                rate = ws.cell(row=row, column=2, value="n/a" if value is None else float(value))
                rate.number_format = "0.0%"
            elif isinstance(value, Decimal):
                cell = ws.cell(row=row, column=2, value=float(value))
                cell.number_format = self._money_format()
            else:
                ws.cell(row=row, column=2, value=value)

        ws.column_dimensions["A"].width = 20
        ws.column_dimensions["B"].width = 24

    def _create_net_worth_sheet(self, wb: Workbook, report: ReportBundle) -> None:
        ws = wb.create_sheet(self.SHEET_NET_WORTH)
        self._write_headers(ws, ["Month", "Date", "Assets", "Liabilities", "Net Worth"])

        history = report.net_worth.history
        for row, point in enumerate(history, start=2):
            ws.cell(row=row, column=1, value=point.month)
            ws.cell(row=row, column=2, value=point.date).number_format = "yyyy-mm-dd"
            self._money_cell(ws, row, 3, point.assets)
            self._money_cell(ws, row, 4, point.liabilities)
            self._money_cell(ws, row, 5, point.net_worth)

        self._set_widths(ws, [12, 12, 16, 16, 16])

        if history:
            chart = LineChart()
            chart.title = "Net Worth"
            chart.y_axis.title = "Amount"
            chart.x_axis.title = "Month"
            chart.height = 9
            chart.width = 20
            data = Reference(ws, min_col=3, max_col=5, min_row=1, max_row=len(history) + 1)
            categories = Reference(ws, min_col=1, min_row=2, max_row=len(history) + 1)
            chart.add_data(data, titles_from_data=True)
            chart.set_categories(categories)
            ws.add_chart(chart, "G2")

        logger.debug(f"Created Net Worth sheet with {len(history)} months")

    def _create_cash_flow_sheet(self, wb: Workbook, report: ReportBundle) -> None:
        ws = wb.create_sheet(self.SHEET_CASH_FLOW)
        self._write_headers(ws, ["Month", "Date", "Income", "Expense", "Surplus"])

        row = 2
        for point in report.cash_flow:
            ws.cell(row=row, column=1, value=point.month)
            ws.cell(row=row, column=2, value=point.date).number_format = "yyyy-mm-dd"
            self._money_cell(ws, row, 3, point.income)
            self._money_cell(ws, row, 4, point.expense)
            self._money_cell(ws, row, 5, point.surplus)
            row += 1

        ws.cell(row=row, column=1, value="Total").font = Font(bold=True)
        self._money_cell(ws, row, 3, report.overview.total_income).font = Font(bold=True)
        self._money_cell(ws, row, 4, report.overview.total_expense).font = Font(bold=True)
        self._money_cell(ws, row, 5, report.overview.total_surplus).font = Font(bold=True)

        self._set_widths(ws, [12, 12, 16, 16, 16])

    def _create_account_flow_sheet(self, wb: Workbook, report: ReportBundle) -> None:
        ws = wb.create_sheet(self.SHEET_ACCOUNT_FLOW)
        self._write_headers(ws, ["Account ID", "Account", "Inflow", "Outflow", "Net Flow"])

        for row, flow in enumerate(report.account_flows, start=2):
            ws.cell(row=row, column=1, value=sanitize_for_csv(flow.account_id))
            ws.cell(row=row, column=2, value=sanitize_for_csv(flow.name))
            self._money_cell(ws, row, 3, flow.inflow)
            self._money_cell(ws, row, 4, flow.outflow)
            self._money_cell(ws, row, 5, flow.net_flow)

        self._set_widths(ws, [24, 30, 16, 16, 16])

    def _create_budget_sheet(self, wb: Workbook, report: ReportBundle) -> None:
        ws = wb.create_sheet(self.SHEET_BUDGETS)
        self._write_headers(ws, ["Month", "Date", "Budgeted", "Spent", "Remaining", "Used"])

        months = report.budgets
        for row, month in enumerate(months, start=2):
            ws.cell(row=row, column=1, value=month.month)
            ws.cell(row=row, column=2, value=month.date).number_format = "yyyy-mm-dd"
            self._money_cell(ws, row, 3, month.total_budgeted)
            self._money_cell(ws, row, 4, month.total_spent)
            self._money_cell(ws, row, 5, month.remaining)
            used = month.utilization
            used_cell = ws.cell(row=row, column=6, value=None if used is None else float(used))
            used_cell.number_format = "0.0%"

        self._set_widths(ws, [12, 12, 16, 16, 16, 10])

        chart = BarChart()
        chart.title = "Budgeted vs Spent"
        chart.y_axis.title = "Amount"
        chart.height = 9
        chart.width = 20
        data = Reference(ws, min_col=3, max_col=4, min_row=1, max_row=len(months) + 1)
        categories = Reference(ws, min_col=1, min_row=2, max_row=len(months) + 1)
        chart.add_data(data, titles_from_data=True)
        chart.set_categories(categories)
        ws.add_chart(chart, "H2")

        logger.debug(f"Created Budget Metrics sheet with {len(months)} months")

    def _create_budget_category_sheet(self, wb: Workbook, report: ReportBundle) -> None:
        ws = wb.create_sheet(self.SHEET_BUDGET_CATEGORIES)
        self._write_headers(
            ws, ["Month", "Category ID", "Budget", "Budgeted", "Spent", "Remaining"]
        )

        row = 2
        for month in report.budgets:
            for category in month.categories:
                ws.cell(row=row, column=1, value=month.month)
                ws.cell(row=row, column=2, value=sanitize_for_csv(category.category_id))
                ws.cell(row=row, column=3, value=sanitize_for_csv(category.name))
                self._money_cell(ws, row, 4, category.budgeted)
                self._money_cell(ws, row, 5, category.spent)
                remaining = self._money_cell(ws, row, 6, category.remaining)
                if category.is_over_budget:
                    remaining.font = Font(bold=True, color="C00000")
                row += 1

        self._set_widths(ws, [12, 20, 28, 16, 16, 16])

    def _write_headers(self, ws: Worksheet, headers: list[str]) -> None:
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = self.centered
        ws.freeze_panes = "A2"

    def _money_cell(self, ws: Worksheet, row: int, column: int, amount: Decimal):
        cell = ws.cell(row=row, column=column, value=float(amount))
        cell.number_format = self._money_format()
        return cell

    @staticmethod
    def _set_widths(ws: Worksheet, widths: list[int]) -> None:
        for index, width in enumerate(widths):
            ws.column_dimensions[chr(ord("A") + index)].width = width

    def _money_format(self) -> str:
        """Get number format for money values.

        Returns:
            Excel number format string.
        """
        symbol = self.output_config.currency_symbol
        decimals = "0" * self.output_config.decimal_places
        fraction = f".{decimals}" if decimals else ""
        return f"{symbol}#,##0{fraction}_);[Red]({symbol}#,##0{fraction})"
