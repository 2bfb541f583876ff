from dataclasses import dataclass
from enum import Enum

from salon_import.extraction.models import ParsedDataset


class DetectedFormat(str, Enum):
    JSON = "json"
    RELATIONAL = "relational"
    CSV = "csv"
    SQL_DUMP = "sql-dump"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ParseReport:
    """What the parser found, alongside the dataset."""

    format: DetectedFormat
    tables: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
    success: bool = False


@dataclass(frozen=True)
class ParseResult:
    """Report plus dataset; ``dataset`` is None only when parsing failed outright."""

    report: ParseReport
    dataset: ParsedDataset | None = None
