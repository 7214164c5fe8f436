"""
Table Renderer: Plain-text table of aggregated product totals.

Layout (borders only, no row separators):

    +--------------+-------------+
    | Product Name | Total Price |
    +--------------+-------------+
    | pommes       | €2.50       |
    | TOTAL        | €3.69       |
    +--------------+-------------+

    Found 2 unique products
"""
from decimal import Decimal
from typing import List, Optional

from ..config import settings
from ..models import AnalysisReport

EMPTY_MESSAGE = "No products found in receipt images."
HEADERS = ("Product Name", "Total Price")


def format_amount(amount: Decimal, currency_symbol: Optional[str] = None) -> str:
    """Format an amount with two decimals and the display currency symbol."""
    symbol = settings.currency_symbol if currency_symbol is None else currency_symbol
    return f"{symbol}{amount:.2f}"


def render_table(report: AnalysisReport, currency_symbol: Optional[str] = None) -> str:
    """
    Render the report as a bordered text table.

    Returns:
        Table text followed by the distinct product count, or EMPTY_MESSAGE
        when nothing was extracted
    """
    if not report.products:
        return EMPTY_MESSAGE

    rows = [(p.name, format_amount(p.total, currency_symbol)) for p in report.products]
    rows.append(("TOTAL", format_amount(report.grand_total, currency_symbol)))

    widths = [
        max(len(HEADERS[i]), *(len(row[i]) for row in rows))
        for i in range(2)
    ]
    border = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    def line(cells) -> str:
        return "| " + " | ".join(cell.ljust(w) for cell, w in zip(cells, widths)) + " |"

    out: List[str] = [border, line(HEADERS), border]
    out.extend(line(row) for row in rows)
    out.append(border)
    out.append("")
    out.append(f"Found {report.product_count} unique products")
    return "\n".join(out)
