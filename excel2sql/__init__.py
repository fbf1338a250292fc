"""Migrate worksheets of an Excel workbook into existing MySQL tables."""

__version__ = "0.1.0"
