from collections.abc import Mapping, Sequence
from typing import Any

from salon_import.extraction import EXTRACTORS
from salon_import.extraction.models import FAMILY_ORDER, CellValue, EntityFamily, ParsedDataset
from salon_import.logging.logger import Log


def _cell(value: Any) -> CellValue:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    # Nested objects and arrays carry no usable scalar.
    return None


def _is_present(value: CellValue) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


class JsonNormalizer:
    """Maps a decoded JSON export onto the canonical collections.

    Each family is read from the first of its top-level keys that holds a
    non-empty value. Inside a record, each field takes the value of the first
    alias key that holds a non-blank value. Keys are compared
    case-insensitively.
    """

    def normalize(self, document: Any) -> ParsedDataset:
        collections: dict[str, tuple] = {}
        for family in FAMILY_ORDER:
            records = self.normalize_family(family, document)
            collections[family.value] = tuple(records)
            Log.info(f"JSON export: {len(records)} {family.value} records")
        return ParsedDataset(**collections)

    def normalize_family(self, family: EntityFamily, document: Any) -> list:
        extractor = EXTRACTORS[family]()
        entries = self._find_collection(document, extractor.aliases.json_keys)
        if entries is None:
            return []
        fields = extractor.aliases.fields
        return extractor.build_records(
            self._record_cells(entry, fields) for entry in entries if isinstance(entry, Mapping)
        )

    @staticmethod
    def _find_collection(document: Any, keys: Sequence[str]) -> list | None:
        if not isinstance(document, Mapping):
            return None
        by_key = {str(key).strip().lower(): value for key, value in document.items()}
        for key in keys:
            value = by_key.get(key)
            if not value:
                # Falsy values (null, "", 0, []) defer to the next alias.
                continue
            return value if isinstance(value, list) else None
        return None

    @staticmethod
    def _record_cells(
        entry: Mapping[str, Any],
        fields: Mapping[str, Sequence[str]],
    ) -> dict[str, CellValue]:
        by_key = {str(key).strip().lower(): _cell(value) for key, value in entry.items()}
        cells: dict[str, CellValue] = {}
        for field, aliases in fields.items():
            cells[field] = next(
                (by_key[alias] for alias in aliases if _is_present(by_key.get(alias))),
                None,
            )
        return cells
