"""Table row model for flat and tabular display."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple


ERROR_COLUMN = "Error"


@dataclass
class TableRow:
    """
    Ordered sequence of named cells.

    Column names are fixed per format kind; cell order follows insertion
    order of ``cells``. Error rows carry a single ``Error`` cell.
    """

    cells: Dict[str, str] = field(default_factory=dict)
    is_error: bool = False

    def __post_init__(self):
        """Validate row after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate row integrity."""
        if not isinstance(self.cells, dict):
            raise ValueError("cells must be a dict")

        for name, value in self.cells.items():
            if not isinstance(name, str):
                raise ValueError(f"column name must be a string, got {type(name).__name__}")
            if not isinstance(value, str):
                raise ValueError(f"cell '{name}' must be a string, got {type(value).__name__}")

    @classmethod
    def of(cls, columns: Sequence[str], values: Sequence[Any]) -> 'TableRow':
        """
        Build a row from parallel column and value sequences.

        Missing trailing values become empty cells; values are stringified.
        """
        padded = list(values) + [""] * (len(columns) - len(values))
        return cls(cells={
            column: "" if value is None else str(value)
            for column, value in zip(columns, padded)
        })

    @classmethod
    def error(cls, message: str) -> 'TableRow':
        """Build the synthetic error row."""
        return cls(cells={ERROR_COLUMN: message}, is_error=True)

    @property
    def columns(self) -> Tuple[str, ...]:
        """Column names in order."""
        return tuple(self.cells.keys())

    @property
    def values(self) -> Tuple[str, ...]:
        """Cell values in column order."""
        return tuple(self.cells.values())

    def get(self, column: str, default: Optional[str] = None) -> Optional[str]:
        """Get a cell by column name."""
        return self.cells.get(column, default)

    def __getitem__(self, column: str) -> str:
        return self.cells[column]

    def is_blank(self) -> bool:
        """Check if every cell is empty (separator row)."""
        return all(value == "" for value in self.cells.values())

    def to_dict(self) -> Dict[str, str]:
        """Convert row to dictionary for JSON serialization."""
        return dict(self.cells)


def render_table(rows: List[TableRow], separator: str = " | ") -> str:
    """
    Render rows as aligned text with a header line.

    Rows with a different column set than the first row start a new header.
    """
    if not rows:
        return ""

    lines: List[str] = []
    block: List[TableRow] = []

    def flush() -> None:
        if not block:
            return
        columns = block[0].columns
        widths = [
            max(len(column), *(len(row.get(column, "")) for row in block))
            for column in columns
        ]
        lines.append(separator.join(c.ljust(w) for c, w in zip(columns, widths)).rstrip())
        lines.append(separator.join("-" * w for w in widths))
        for row in block:
            lines.append(separator.join(row.get(c, "").ljust(w) for c, w in zip(columns, widths)).rstrip())
        block.clear()

    for row in rows:
        if block and row.columns != block[0].columns:
            flush()
        block.append(row)
    flush()

    return "\n".join(lines)
