from collections.abc import Iterable, Mapping, Sequence


def _normalize(name: str) -> str:
    return name.strip().lower()


class SchemaMapper:
    """Resolves tables and columns against ranked alias lists.

    Matching is exact after trimming and lower-casing. The first alias in
    priority order that has a match wins; there is no partial matching.
    """

    def find_table(self, tables: Iterable[str], aliases: Sequence[str]) -> str | None:
        return self._first_match(tables, aliases)

    def find_column(self, columns: Iterable[str], aliases: Sequence[str]) -> str | None:
        return self._first_match(columns, aliases)

    def resolve_columns(
        self,
        columns: Iterable[str],
        field_aliases: Mapping[str, Sequence[str]],
    ) -> dict[str, str | None]:
        """Map every canonical field to its resolved column (or None)."""
        candidates = list(columns)
        return {
            field: self.find_column(candidates, aliases)
            for field, aliases in field_aliases.items()
        }

    @staticmethod
    def _first_match(candidates: Iterable[str], aliases: Sequence[str]) -> str | None:
        by_name: dict[str, str] = {}
        for candidate in candidates:
            by_name.setdefault(_normalize(candidate), candidate)
        for alias in aliases:
            match = by_name.get(_normalize(alias))
            if match is not None:
                return match
        return None
