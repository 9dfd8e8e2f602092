"""Automated transformation report (PDF or HTML)."""
from tabshaper.reporting.entries import BinningEntry, EntryKind, ErrorEntry, ImputationEntry, TransformEntry
from tabshaper.reporting.renderers import HtmlReportRenderer, PdfReportRenderer, get_renderer
from tabshaper.reporting.report import Report, TransformationReport, transformation_report

__all__ = [
    "BinningEntry",
    "EntryKind",
    "ErrorEntry",
    "HtmlReportRenderer",
    "ImputationEntry",
    "PdfReportRenderer",
    "Report",
    "TransformEntry",
    "TransformationReport",
    "get_renderer",
    "transformation_report",
]
