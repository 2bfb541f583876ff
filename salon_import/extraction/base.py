from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from typing import ClassVar, Generic, TypeVar

from salon_import.extraction.aliases import ALIASES, FamilyAliases
from salon_import.extraction.coercion import to_text
from salon_import.extraction.exceptions import ExtractionError, MissingNameColumnError
from salon_import.extraction.models import CellValue, Entity, EntityFamily
from salon_import.relational.schema_mapper import SchemaMapper

E = TypeVar("E", bound=Entity)


class BaseEntityExtractor(ABC, Generic[E]):
    """Turns rows of one family into canonical records.

    Subclasses only describe how resolved cells become a record; column
    resolution, blank-name filtering and id numbering live here.
    """

    family: ClassVar[EntityFamily]

    def __init__(self, mapper: SchemaMapper | None = None) -> None:
        self._mapper = mapper or SchemaMapper()

    @property
    def aliases(self) -> FamilyAliases:
        return ALIASES[self.family]

    def resolve_columns(self, columns: Sequence[str]) -> dict[str, str | None]:
        return self._mapper.resolve_columns(columns, self.aliases.fields)

    def extract(
        self,
        columns: Sequence[str],
        rows: Iterable[Mapping[str, CellValue]],
    ) -> list[E]:
        """Read every row once and build records from the resolved columns.

        Raises:
            MissingNameColumnError: if no column resolves to the name field.
            ExtractionError: if reading or normalizing the rows fails.
        """
        resolved = self.resolve_columns(columns)
        if resolved["name"] is None:
            raise MissingNameColumnError(
                f"No name column among {list(columns)} for {self.family.value}"
            )
        try:
            return self.build_records(
                {field: row.get(column) if column else None for field, column in resolved.items()}
                for row in rows
            )
        except ExtractionError:
            raise
        except Exception as exc:
            raise ExtractionError(f"Failed to read {self.family.value} rows: {exc}") from exc

    def build_records(self, cells: Iterable[Mapping[str, CellValue]]) -> list[E]:
        """Build records from per-field cells, dropping rows without a name.

        Ids are assigned after filtering, so they run 1..n without gaps.
        """
        records: list[E] = []
        for row in cells:
            name = to_text(row.get("name"))
            if name is None:
                continue
            records.append(self._build(len(records) + 1, name, row))
        return records

    @abstractmethod
    def _build(self, record_id: int, name: str, cells: Mapping[str, CellValue]) -> E:
        raise NotImplementedError
