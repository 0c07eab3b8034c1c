"""
Printer Commands
================

Device-independent commands produced by rendering a job and consumed by a
transport. A rendered job always ends with ``Cut``.
"""

from dataclasses import dataclass, field
from typing import List, Any

ALIGNMENTS = ('left', 'center', 'right')


@dataclass
class Line:
    """One line of text."""

    text: str = ""
    align: str = 'left'
    bold: bool = False


@dataclass
class Cell:
    text: str = ""
    width: int = 0  # minimum characters
    align: str = 'left'
    shrink: bool = False  # may be shortened to fit the line


@dataclass
class Row:
    """Table row laid out across the line width."""

    cells: List[Cell] = field(default_factory=list)


@dataclass
class Rule:
    """Horizontal rule."""

    char: str = '-'


@dataclass
class Image:
    """Raster image (a PIL image, already 1-bit and within paper width)."""

    image: Any = None


@dataclass
class Raw:
    """Bytes passed through to the device unmodified."""

    data: bytes = b""


@dataclass
class Cut:
    """Feed and full cut."""


def format_row(row: Row, line_width: int) -> str:
    """
    Lay out a table row as one line of text, cells separated by a space.

    A cell is padded to its ``width`` and never cut unless it is ``shrink``.
    When the row is too long, padding is given back right to left, then
    shrinkable cells are shortened. Spare room widens the first shrinkable
    cell. Cells that may not be cut are kept whole even past ``line_width``.
    """
    cells = row.cells
    if not cells:
        return ''

    widths = [max(cell.width, len(cell.text)) for cell in cells]
    overflow = sum(widths) + len(cells) - 1 - line_width

    for i in reversed(range(len(cells))):
        if overflow <= 0:
            break
        if not cells[i].shrink:
            give = min(widths[i] - len(cells[i].text), overflow)
            widths[i] -= give
            overflow -= give

    for i, cell in enumerate(cells):
        if overflow <= 0:
            break
        if cell.shrink:
            give = min(widths[i] - 1, overflow)
            widths[i] -= give
            overflow -= give

    if overflow < 0:
        flexible = [i for i, cell in enumerate(cells) if cell.shrink]
        widths[flexible[0] if flexible else 0] -= overflow

    parts = []
    for cell, width in zip(cells, widths):
        text = cell.text[:width]
        if cell.align == 'right':
            parts.append(text.rjust(width))
        elif cell.align == 'center':
            parts.append(text.center(width))
        else:
            parts.append(text.ljust(width))
    return ' '.join(parts).rstrip()
