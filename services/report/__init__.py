from services.report.builder import ChangeReportBuilder
from services.report.formatters import format_relative_time

__all__ = ["ChangeReportBuilder", "format_relative_time"]
