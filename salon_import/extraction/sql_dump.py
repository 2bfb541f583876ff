"""Reading plain-text SQL dumps made of INSERT statements.

Only ``INSERT INTO <table> (<columns>) VALUES (...), (...);`` is
understood. Everything else in the dump (DDL, comments, other statements)
is ignored.
"""

import re
from dataclasses import dataclass, field

from salon_import.extraction.csv_reader import normalize_header

_INSERT = re.compile(
    r"INSERT\s+INTO\s+(?:[`\"\[]?\w+[`\"\]]?\.)?[`\"'\[]?(?P<table>\w+)[`\"'\]]?"
    r"\s*\((?P<columns>[^)]*)\)\s*VALUES\s*",
    re.IGNORECASE,
)
_IDENTIFIER_QUOTES = "`\"'[] "
_BACKSLASH_ESCAPES = {"n": "\n", "r": "\r", "t": "\t"}

DumpValue = str | None


@dataclass
class DumpTable:
    """Rows inserted into one table, keyed by normalized column names."""

    name: str
    columns: list[str] = field(default_factory=list)
    rows: list[dict[str, DumpValue]] = field(default_factory=list)


def read_sql_dump(text: str) -> list[DumpTable]:
    """Collect the INSERTed rows per table, in the order tables first appear."""
    tables: dict[str, DumpTable] = {}
    position = 0
    while (match := _INSERT.search(text, position)) is not None:
        columns = [
            normalize_header(column.strip(_IDENTIFIER_QUOTES))
            for column in match.group("columns").split(",")
        ]
        table = tables.setdefault(match.group("table").lower(), DumpTable(match.group("table")))
        table.columns.extend(column for column in columns if column not in table.columns)
        tuples, position = _scan_tuples(text, match.end())
        for values in tuples:
            table.rows.append(
                {column: (values[i] if i < len(values) else None) for i, column in enumerate(columns)}
            )
    return [table for table in tables.values() if table.rows]


def _skip_spaces(text: str, position: int) -> int:
    while position < len(text) and text[position].isspace():
        position += 1
    return position


def _scan_tuples(text: str, position: int) -> tuple[list[list[DumpValue]], int]:
    tuples: list[list[DumpValue]] = []
    while True:
        position = _skip_spaces(text, position)
        if position >= len(text) or text[position] != "(":
            return tuples, position
        values, position = _scan_values(text, position + 1)
        if values is None:
            # Truncated dump: the last tuple never closed.
            return tuples, position
        tuples.append(values)
        position = _skip_spaces(text, position)
        if position < len(text) and text[position] == ",":
            position += 1
            continue
        return tuples, position


def _scan_values(text: str, position: int) -> tuple[list[DumpValue] | None, int]:
    """Read one parenthesized value list; ``position`` is just past the "("."""
    values: list[DumpValue] = []
    position = _skip_spaces(text, position)
    if position < len(text) and text[position] == ")":
        return values, position + 1
    while position < len(text):
        position = _skip_spaces(text, position)
        if position < len(text) and text[position] in "'\"":
            value, position = _scan_quoted(text, position)
            if value is None:
                return None, position
            values.append(value)
            # Casts and collations after a literal ('x'::text) are dropped.
            while position < len(text) and text[position] not in ",)":
                position += 1
        else:
            end = position
            while end < len(text) and text[end] not in ",)":
                end += 1
            token = text[position:end].strip()
            values.append(None if token.upper() == "NULL" else token)
            position = end
        if position >= len(text):
            break
        if text[position] == ")":
            return values, position + 1
        position += 1
    return None, len(text)


def _scan_quoted(text: str, position: int) -> tuple[str | None, int]:
    quote = text[position]
    position += 1
    chars: list[str] = []
    while position < len(text):
        char = text[position]
        if char == "\\" and position + 1 < len(text):
            escaped = text[position + 1]
            chars.append(_BACKSLASH_ESCAPES.get(escaped, escaped))
            position += 2
        elif char == quote:
            if text[position + 1 : position + 2] == quote:
                chars.append(quote)
                position += 2
            else:
                return "".join(chars), position + 1
        else:
            chars.append(char)
            position += 1
    return None, len(text)
