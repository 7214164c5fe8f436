"""
Report exporters: text table, CSV and JSON.
"""
from .table_renderer import render_table, format_amount, EMPTY_MESSAGE
from .csv_exporter import export_csv, export_json

__all__ = ["render_table", "format_amount", "EMPTY_MESSAGE", "export_csv", "export_json"]
