"""
CSV / JSON Exporter: Write the batch report to files.

CSV Format:
- ProductName (canonical name)
- TotalPrice (two decimals, no currency symbol)
- Records (number of receipt lines merged)
- Variants (merged spellings, "|" separated)

A final TOTAL row carries the grand total.
"""
import csv
import logging
from pathlib import Path
from typing import Union

from ..models import AnalysisReport

logger = logging.getLogger(__name__)

CSV_HEADERS = ["ProductName", "TotalPrice", "Records", "Variants"]


def export_csv(report: AnalysisReport, path: Union[str, Path]) -> Path:
    """
    Write product totals to a CSV file (overwrites).

    Returns:
        Path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADERS)
        for product in report.products:
            writer.writerow([
                product.name,
                f"{product.total:.2f}",
                product.record_count,
                "|".join(product.variants),
            ])
        writer.writerow(["TOTAL", f"{report.grand_total:.2f}", "", ""])
    logger.info(f"Exported {report.product_count} products to {path}")
    return path


def export_json(report: AnalysisReport, path: Union[str, Path]) -> Path:
    """
    Write the full report as JSON (overwrites).

    Returns:
        Path written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(report.model_dump_json(indent=2), encoding="utf-8")
    logger.info(f"Exported report to {path}")
    return path
