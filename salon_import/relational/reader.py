import sqlite3
import tempfile
from collections.abc import Generator, Iterator
from contextlib import closing, contextmanager
from pathlib import Path

from salon_import.detection.exceptions import UnrecognizedFormatError
from salon_import.detection.models import has_database_header
from salon_import.extraction.models import CellValue
from salon_import.logging.logger import Log


def _quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def _to_cell(value: object) -> CellValue:
    if value is None or isinstance(value, (str, int, float)):
        return value  # type: ignore[return-value]
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class RelationalDatabase:
    """Read-only view over an opened backup database."""

    def __init__(self, connection: sqlite3.Connection, tables: list[str]) -> None:
        self._connection = connection
        self.tables = tables

    def columns(self, table: str) -> list[str]:
        cursor = self._connection.execute(
            f"PRAGMA table_info({_quote_identifier(table)})"
        )
        return [row[1] for row in cursor.fetchall()]

    def rows(self, table: str) -> Iterator[dict[str, CellValue]]:
        """Yield every row of ``table`` as a column -> cell mapping."""
        cursor = self._connection.execute(f"SELECT * FROM {_quote_identifier(table)}")
        names = [description[0] for description in cursor.description]
        for raw in cursor:
            yield {name: _to_cell(value) for name, value in zip(names, raw)}


class RelationalFileReader:
    """Opens decompressed backup bytes as an SQLite database."""

    @contextmanager
    def open(self, data: bytes) -> Generator[RelationalDatabase, None, None]:
        """Yield a RelationalDatabase; the handle is closed on every exit path.

        Raises:
            UnrecognizedFormatError: if the bytes are not a readable database.
        """
        if not has_database_header(data):
            raise UnrecognizedFormatError(
                "Input is not a supported database backup"
            )
        with tempfile.TemporaryDirectory(prefix="salon_import_") as tmp_dir:
            path = Path(tmp_dir) / "backup.db"
            path.write_bytes(data)
            try:
                connection = sqlite3.connect(f"file:{path.as_posix()}?mode=ro", uri=True)
            except sqlite3.Error as exc:
                raise UnrecognizedFormatError(f"Database could not be opened: {exc}") from exc
            with closing(connection):
                tables = self._list_tables(connection)
                Log.info(f"Opened backup database with {len(tables)} tables: {tables}")
                yield RelationalDatabase(connection, tables)

    @staticmethod
    def _list_tables(connection: sqlite3.Connection) -> list[str]:
        try:
            cursor = connection.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY rowid"
            )
            names = [row[0] for row in cursor.fetchall()]
        except sqlite3.DatabaseError as exc:
            raise UnrecognizedFormatError(f"Database catalog is unreadable: {exc}") from exc
        return [name for name in names if name and not name.lower().startswith("sqlite_")]
