from collections.abc import Sequence

from rich.cells import cell_len
from rich.console import Console
from rich.table import Table
from rich.text import Text

ELLIPSIS = "..."
EMPTY_CELL = "-"
COLUMN_GAP = "  "


def truncate(text: str | None, max_length: int) -> str:
    """Truncate text to at most `max_length` characters, ending in `...` when cut.

    Examples:
        >>> truncate("hello world", 8)
        'hello...'
        >>> truncate("hello", 8)
        'hello'
    """
    if not text:
        return ""

    if len(text) <= max_length:
        return text

    return text[: max(max_length - len(ELLIPSIS), 0)] + ELLIPSIS


def preview(text: str | None, max_length: int) -> str:
    """A single-line, truncated preview of text, or `-` if there is none."""
    flattened = " ".join(text.split()) if text else ""
    return truncate(flattened, max_length) or EMPTY_CELL


def format_table(headers: Sequence[str], rows: Sequence[Sequence[str]], color: bool = False) -> str:
    """Lay out rows as left-aligned columns padded to the widest cell.

    When `color` is set the header row is bold white and the first column is cyan.
    """
    table = Table(box=None, show_edge=False, pad_edge=False, header_style="bold white" if color else "")
    for i, header in enumerate(headers):
        table.add_column(Text(header), style="cyan" if color and i == 0 else "", no_wrap=True)
    for row in rows:
        table.add_row(*(Text(cell) for cell in row))

    widths = [cell_len(header) for header in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], cell_len(cell))

    console = Console(
        width=sum(widths) + len(COLUMN_GAP) * len(widths),
        color_system="standard" if color else None,
        force_terminal=color,
        no_color=not color,
        highlight=False,
    )
    with console.capture() as capture:
        console.print(table)

    # cells are padded to the column width, including the last one
    return "".join(f"{line.rstrip()}\n" for line in capture.get().splitlines())
