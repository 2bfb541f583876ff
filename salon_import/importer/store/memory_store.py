from collections.abc import Sequence

from salon_import.importer.serializers import DestinationRow, TableTarget
from salon_import.importer.store.base import BaseDestinationStore
from salon_import.logging.logger import Log


class MemoryDestinationStore(BaseDestinationStore):
    """In-process store for dry runs: same batching and merge rules, no database."""

    def __init__(self) -> None:
        self._tables: dict[str, list[DestinationRow]] = {}

    def rows(self, table: str) -> list[DestinationRow]:
        return list(self._tables.get(table, []))

    def existing_keys(self, target: TableTarget, keys: Sequence[str]) -> set[str]:
        wanted = set(keys)
        return {
            row[target.key]
            for row in self._tables.get(target.table, [])
            if row.get(target.key) in wanted
        }

    def write_batch(
        self,
        target: TableTarget,
        rows: Sequence[DestinationRow],
        upsert: bool,
    ) -> int:
        table = self._tables.setdefault(target.table, [])
        for row in rows:
            key = row.get(target.key)
            position = self._position(table, target.key, key) if upsert and key else None
            if position is None:
                table.append(dict(row))
            else:
                table[position] = dict(row)
        Log.debug(f"Dry run: {len(rows)} rows into {target.table} ({len(table)} total)")
        return len(rows)

    @staticmethod
    def _position(table: list[DestinationRow], column: str, key: object) -> int | None:
        for index, stored in enumerate(table):
            if stored.get(column) == key:
                return index
        return None
