import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from salon_import.config.settings import Settings
from salon_import.extraction.models import FAMILY_ORDER, Entity, EntityFamily
from salon_import.importer.exceptions import StoreWriteError
from salon_import.importer.models import (
    FamilyCounts,
    ImportPlan,
    ImportProgress,
    ImportResult,
    MergeStrategy,
)
from salon_import.importer.serializers import (
    TABLE_TARGETS,
    DestinationRow,
    natural_key,
    to_destination_row,
)
from salon_import.importer.store.base import BaseDestinationStore
from salon_import.importer.store.factory import DestinationStoreFactory
from salon_import.logging.logger import Log

ProgressCallback = Callable[[ImportProgress], None]


@dataclass
class _RunAccumulator:
    """Mutable tally owned by one run; frozen into an ImportResult at the end."""

    imported: dict[EntityFamily, int] = field(
        default_factory=lambda: dict.fromkeys(FAMILY_ORDER, 0)
    )
    failed: dict[EntityFamily, int] = field(
        default_factory=lambda: dict.fromkeys(FAMILY_ORDER, 0)
    )
    errors: list[str] = field(default_factory=list)
    fatal: bool = False
    cancelled: bool = False

    def freeze(self) -> ImportResult:
        counts = {
            family.value: FamilyCounts(
                imported=self.imported[family], errors=self.failed[family]
            )
            for family in FAMILY_ORDER
        }
        return ImportResult(
            success=not (self.fatal or self.cancelled),
            errors=tuple(self.errors),
            cancelled=self.cancelled,
            **counts,
        )


class ImportBatcher:
    """Writes a parsed dataset into the destination store in fixed-size batches.

    Families run in a fixed order and never affect each other: a rejected
    batch becomes one error entry and the run moves on to the next batch.
    """

    def __init__(self, store: BaseDestinationStore) -> None:
        self._store = store

    def run(
        self,
        plan: ImportPlan,
        on_progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ImportResult:
        Log.info(
            f"Importing {plan.dataset.total} records "
            f"(strategy={plan.strategy.value}, batch_size={plan.batch_size})"
        )
        tally = _RunAccumulator()
        for family in FAMILY_ORDER:
            if tally.cancelled:
                break
            if family not in plan.families:
                Log.info(f"Skipping {family.value}: not selected for import")
                continue
            try:
                self._import_family(family, plan, tally, on_progress, cancel_event)
            except Exception as exc:
                Log.exception(f"Import of {family.value} aborted: {exc}")
                tally.fatal = True
                tally.errors.append(f"{family.value}: fatal error: {exc}")

        result = tally.freeze()
        Log.info(
            f"Import finished: {result.total_imported} imported, "
            f"{result.total_errors} failed, success={result.success}"
        )
        return result

    def _import_family(
        self,
        family: EntityFamily,
        plan: ImportPlan,
        tally: _RunAccumulator,
        on_progress: ProgressCallback | None,
        cancel_event: threading.Event | None,
    ) -> None:
        records = plan.dataset.records(family)
        total = len(records)
        for start in range(0, total, plan.batch_size):
            if cancel_event is not None and cancel_event.is_set():
                Log.warning(f"Import cancelled before {family.value} row {start + 1}")
                tally.cancelled = True
                return
            batch = records[start : start + plan.batch_size]
            label = f"{family.value} rows {batch[0].id}-{batch[-1].id}"
            try:
                written, skipped = self._write_batch(family, batch, plan.strategy)
            except StoreWriteError as exc:
                Log.error(f"Batch {label} failed: {exc}")
                tally.failed[family] += len(batch)
                tally.errors.append(f"{label}: {exc}")
            else:
                Log.info(f"Batch {label}: {written} written, {skipped} skipped")
                tally.imported[family] += written

            current = start + len(batch)
            self._notify(
                on_progress,
                ImportProgress(
                    stage=family.value,
                    current=current,
                    total=total,
                    message=f"Importing {family.value} {start + 1} to {current}...",
                ),
            )

    def _write_batch(
        self,
        family: EntityFamily,
        batch: Sequence[Entity],
        strategy: MergeStrategy,
    ) -> tuple[int, int]:
        """Write one batch and return (written, skipped)."""
        target = TABLE_TARGETS[family]
        rows = self._collapse_duplicate_keys(
            family, [to_destination_row(family, record) for record in batch]
        )
        if strategy is MergeStrategy.MERGE:
            keys = [key for row in rows if (key := natural_key(family, row)) is not None]
            existing = self._store.existing_keys(target, keys) if keys else set()
            rows = [row for row in rows if natural_key(family, row) not in existing]

        skipped = len(batch) - len(rows)
        if not rows:
            return 0, skipped
        written = self._store.write_batch(
            target, rows, upsert=strategy is MergeStrategy.REPLACE
        )
        return written, skipped

    @staticmethod
    def _collapse_duplicate_keys(
        family: EntityFamily, rows: list[DestinationRow]
    ) -> list[DestinationRow]:
        """Keep only the last row for each natural key; rows without a key all stay."""
        keys = [natural_key(family, row) for row in rows]
        last_seen = {key: index for index, key in enumerate(keys) if key is not None}
        return [
            row
            for index, (row, key) in enumerate(zip(rows, keys))
            if key is None or last_seen[key] == index
        ]

    @staticmethod
    def _notify(on_progress: ProgressCallback | None, progress: ImportProgress) -> None:
        if on_progress is None:
            return
        try:
            on_progress(progress)
        except Exception as exc:
            Log.warning(f"Progress callback failed: {exc}")


def build_batcher(
    settings: Settings,
    store: BaseDestinationStore | None = None,
) -> ImportBatcher:
    """Build an ImportBatcher for the configured (or given) destination store."""
    if store is None:
        store = DestinationStoreFactory.create(settings)
    return ImportBatcher(store=store)
