"""Parsers turning database CLI table output into rows.

Each parser returns ``None`` when the text holds no recognisable table, so
callers can fall back to showing plain output. A table with a header but no
rows yields an empty list.
"""

from __future__ import annotations

from dataclasses import dataclass

from livecode.execution.base import Row

MYSQL_NULL = "NULL"


def parse_mysql_table(output: str) -> list[Row] | None:
    """Parse ``mysql --table`` output; ``NULL`` cells become None."""

    return parse_bordered_table(output, null_marker=MYSQL_NULL)


def parse_postgres_table(output: str) -> list[Row] | None:
    """Parse ``psql --pset=border=2`` output; blank cells stay empty strings."""

    return parse_bordered_table(output)


def parse_bordered_table(output: str, null_marker: str | None = None) -> list[Row] | None:
    """Parse a table drawn with ``+----+`` rule lines and ``|`` separated cells.

    Example input::

        +----+-------+
        | id | name  |
        +----+-------+
        | 1  | Alice |
        +----+-------+

    Args:
        output: Text printed by the database client.
        null_marker: Cell text that maps to None, if the dialect has one.

    Returns:
        One dict per data row keyed by column name, or None when no header
        closed by a rule line was found.
    """

    header: str | None = None
    data_lines: list[str] = []
    borders = 0
    for line in output.split("\n"):
        if is_border(line):
            borders += 1
            if borders >= 3:
                break
            continue
        if borders == 1 and not header:
            header = line
        elif borders == 2 and line:
            data_lines.append(line)

    if not header or borders < 2:
        return None
    columns = [segment.strip() for segment in header.split("|") if segment.strip()]
    if not columns:
        return None

    rows: list[Row] = []
    for line in data_lines:
        values = [segment.strip() for segment in line.split("|") if segment != ""]
        row: Row = {}
        for index, column in enumerate(columns):
            value = values[index] if index < len(values) else ""
            row[column] = None if null_marker is not None and value == null_marker else value
        rows.append(row)
    return rows


def is_border(line: str) -> bool:
    """Return True for rule lines such as ``+----+-------+``."""

    if len(line) < 3:
        return False
    stripped = line.strip()
    if not stripped or stripped[0] != "+" or stripped[-1] != "+":
        return False
    return all(char in "+-" for char in stripped)


@dataclass(frozen=True)
class _Column:
    name: str
    start: int
    end: int | None


def parse_column_output(output: str) -> list[Row] | None:
    """Parse ``sqlite3 -header -column`` output.

    Column boundaries come from the header line: each run of non-space
    characters names a column and marks where it starts. A column spans up
    to the start of the next one, and the last column extends to the end of
    every line, so values wider than their header word are kept whole.

    Returns:
        One dict per non-empty data line, or None without a header and at
        least one following line.
    """

    lines = output.split("\n")
    if len(lines) < 2:
        return None
    columns = _column_layout(lines[0])
    if not columns:
        return None

    start = 2 if is_column_rule(lines[1]) else 1
    rows: list[Row] = []
    for line in lines[start:]:
        if not line:
            continue
        rows.append({column.name: line[column.start : column.end].strip() for column in columns})
    return rows


def is_column_rule(line: str) -> bool:
    """Return True for the dash separator sqlite prints under the header."""

    return bool(line) and all(char in "- " for char in line)


def _column_layout(header: str) -> list[_Column]:
    names: list[tuple[str, int]] = []
    start: int | None = None
    for index, char in enumerate(header):
        if char == " ":
            if start is not None:
                names.append((header[start:index], start))
                start = None
        elif start is None:
            start = index
    if start is not None:
        names.append((header[start:], start))

    # A column ends where the next one begins; sqlite pads values to that width.
    columns: list[_Column] = []
    for position, (name, column_start) in enumerate(names):
        end = names[position + 1][1] if position + 1 < len(names) else None
        columns.append(_Column(name, column_start, end))
    return columns
