"""Output generation for Excel and CSV exports."""

from networth_reporter.output.csv_exporter import CSVExporter
from networth_reporter.output.excel_writer import ExcelWriter

__all__ = ["ExcelWriter", "CSVExporter"]
