from typing import Iterable, List


class Table:
    """
    Rows of text cells rendered with every column padded to its widest cell.
    """

    def __init__(self):
        self.rows: List[List[str]] = []

    def push_row(self, row: Iterable[str]) -> None:
        self.rows.append([str(cell) for cell in row])

    def column_widths(self) -> List[int]:
        widths: List[int] = []
        for row in self.rows:
            for col, cell in enumerate(row):
                if col >= len(widths):
                    widths.append(len(cell))
                else:
                    widths[col] = max(widths[col], len(cell))
        return widths

    def to_string(self, separator: str = ' ') -> str:
        widths = self.column_widths()
        lines = []
        for row in self.rows:
            cells = [cell.ljust(widths[col]) for col, cell in enumerate(row)]
            lines.append(separator.join(cells).rstrip())
        return '\n'.join(lines)
