from dataclasses import dataclass, field
from enum import Enum

from salon_import.extraction.models import FAMILY_ORDER, EntityFamily, ParsedDataset

DEFAULT_BATCH_SIZE = 50


class MergeStrategy(str, Enum):
    REPLACE = "replace"
    MERGE = "merge"


@dataclass(frozen=True)
class ImportPlan:
    """What to write and how. Families outside ``families`` are left untouched."""

    dataset: ParsedDataset
    strategy: MergeStrategy = MergeStrategy.MERGE
    batch_size: int = DEFAULT_BATCH_SIZE
    families: frozenset[EntityFamily] = frozenset(FAMILY_ORDER)

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {self.batch_size}")


@dataclass(frozen=True)
class ImportProgress:
    """Snapshot handed to the progress callback after each batch."""

    stage: str
    current: int
    total: int
    message: str


@dataclass(frozen=True)
class FamilyCounts:
    imported: int = 0
    errors: int = 0


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one import run.

    ``success`` is False when any family hit a fatal failure or the run was
    cancelled; failed batches alone only show up in ``errors``.
    """

    success: bool
    customers: FamilyCounts = field(default_factory=FamilyCounts)
    services: FamilyCounts = field(default_factory=FamilyCounts)
    products: FamilyCounts = field(default_factory=FamilyCounts)
    staff: FamilyCounts = field(default_factory=FamilyCounts)
    errors: tuple[str, ...] = ()
    cancelled: bool = False

    @property
    def total_imported(self) -> int:
        return sum(
            counts.imported
            for counts in (self.customers, self.services, self.products, self.staff)
        )

    @property
    def total_errors(self) -> int:
        return sum(
            counts.errors
            for counts in (self.customers, self.services, self.products, self.staff)
        )
