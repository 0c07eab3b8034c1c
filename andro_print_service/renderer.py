"""
Invoice Renderer
================

Turns an invoice payload into the ordered command list for one receipt.
Pure: no I/O, same input gives the same commands.
"""

from typing import List, Iterable

from .commands import Line, Row, Cell, Rule, Cut
from .config import ITEM_NAME_MAX
from .models import CompanyInfo, BillHeader, LineItem

CLOSING_LINE = 'Thank You! Visit Again'

# seq | item | qty | total: (minimum width, align, shrink)
COLUMNS = ((2, 'left', False), (0, 'left', True), (4, 'right', False), (10, 'right', False))


def format_amount(value: float) -> str:
    return f"{value:.2f}"


def format_qty(value: float) -> str:
    """Whole quantities print without decimals; never in exponent form."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.3f}".rstrip('0').rstrip('.')


def item_row(seq: int, item: LineItem) -> Row:
    texts = (
        str(seq),
        item.name[:ITEM_NAME_MAX],
        format_qty(item.qty),
        format_amount(item.total),
    )
    return Row(cells=[Cell(text, width, align, shrink)
                      for text, (width, align, shrink) in zip(texts, COLUMNS)])


def render_invoice(company: CompanyInfo, header: BillHeader,
                   lines: Iterable[LineItem]) -> List:
    """
    Render an invoice.

    Args:
        company: Seller details; optional fields are omitted when empty
        header: Bill number/date always print (possibly empty)
        lines: Line items in print order

    Returns:
        Commands ending with ``Cut``
    """
    commands = [Line(company.name, align='center', bold=True)]
    for optional in (company.address, company.phone):
        if optional:
            commands.append(Line(optional))
    if company.tax_id:
        commands.append(Line(f"Tax ID: {company.tax_id}"))
    commands.append(Rule())

    commands.append(Line(f"Bill No: {header.bill_no}"))
    commands.append(Line(f"Date: {header.date} {header.time}".rstrip()))
    if header.party_name:
        commands.append(Line(f"Party: {header.party_name}"))
    commands.append(Rule())

    for seq, item in enumerate(lines, start=1):
        commands.append(item_row(seq, item))

    commands.append(Rule())
    commands.append(Line(f"Net Total: {format_amount(header.net_amount)}", align='right', bold=True))
    commands.append(Line(CLOSING_LINE, align='center'))
    commands.append(Cut())
    return commands
