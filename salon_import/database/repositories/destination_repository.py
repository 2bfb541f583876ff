from collections.abc import Sequence

import psycopg
from psycopg import sql

from salon_import.database.connection import get_connection
from salon_import.importer.exceptions import StoreWriteError
from salon_import.importer.serializers import DestinationRow, TableTarget
from salon_import.importer.store.base import BaseDestinationStore


class PostgresDestinationStore(BaseDestinationStore):
    """Writes import batches into the salon's PostgreSQL tables.

    Upserts rely on a unique index over each table's natural key column.
    """

    def existing_keys(self, target: TableTarget, keys: Sequence[str]) -> set[str]:
        if not keys:
            return set()
        query = sql.SQL("SELECT {key} FROM {table} WHERE {key} = ANY(%s)").format(
            key=sql.Identifier(target.key),
            table=sql.Identifier(target.table),
        )
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(query, (list(keys),))
                    rows = cur.fetchall()
        except psycopg.Error as exc:
            raise StoreWriteError(f"Key lookup on {target.table} failed: {exc}") from exc
        return {row[0] for row in rows}

    def write_batch(
        self,
        target: TableTarget,
        rows: Sequence[DestinationRow],
        upsert: bool,
    ) -> int:
        """Insert (or upsert) the whole batch in one transaction."""
        if not rows:
            return 0
        columns = list(rows[0])
        plain = [row for row in rows if not (upsert and row.get(target.key))]
        keyed = [row for row in rows if upsert and row.get(target.key)]
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    if plain:
                        cur.executemany(
                            self._insert_query(target, columns),
                            [tuple(row[column] for column in columns) for row in plain],
                        )
                    if keyed:
                        cur.executemany(
                            self._upsert_query(target, columns),
                            [tuple(row[column] for column in columns) for row in keyed],
                        )
                conn.commit()
        except psycopg.Error as exc:
            raise StoreWriteError(f"Batch write into {target.table} failed: {exc}") from exc
        return len(rows)

    @staticmethod
    def _insert_query(target: TableTarget, columns: list[str]) -> sql.Composed:
        return sql.SQL("INSERT INTO {table} ({columns}) VALUES ({values})").format(
            table=sql.Identifier(target.table),
            columns=sql.SQL(", ").join(map(sql.Identifier, columns)),
            values=sql.SQL(", ").join(sql.Placeholder() * len(columns)),
        )

    @classmethod
    def _upsert_query(cls, target: TableTarget, columns: list[str]) -> sql.Composed:
        updates = sql.SQL(", ").join(
            sql.SQL("{column} = EXCLUDED.{column}").format(column=sql.Identifier(column))
            for column in columns
            if column != target.key
        )
        return sql.SQL("{insert} ON CONFLICT ({key}) DO UPDATE SET {updates}").format(
            insert=cls._insert_query(target, columns),
            key=sql.Identifier(target.key),
            updates=updates,
        )
