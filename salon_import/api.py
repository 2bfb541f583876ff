"""Library entry points used by the salon application's import screen."""

import threading
import time
from collections.abc import Iterable, Mapping

from salon_import.config.settings import Settings
from salon_import.database.connection import init_pool
from salon_import.database.repositories.import_log_repository import ImportLogRepository
from salon_import.extraction.models import FAMILY_ORDER, EntityFamily, ParsedDataset
from salon_import.importer.batcher import ProgressCallback, build_batcher
from salon_import.importer.models import ImportPlan, ImportResult, MergeStrategy
from salon_import.importer.store.base import BaseDestinationStore
from salon_import.logging.logger import Log
from salon_import.parser.models import ParseResult
from salon_import.parser.parser import build_parser


def _configured(settings: Settings | None) -> Settings:
    settings = settings or Settings()
    Log.configure(settings.log_level)
    return settings


def parse_file(
    data: bytes,
    filename: str | None = None,
    *,
    settings: Settings | None = None,
) -> ParseResult:
    """Parse one legacy backup.

    Accepts a JSON export, a database file (optionally compressed), an SQL
    dump of INSERT statements or a single CSV export.
    """
    _configured(settings)
    return build_parser().parse(data, filename)


def parse_csv_files(
    files: Mapping[str, bytes],
    *,
    settings: Settings | None = None,
) -> ParseResult:
    _configured(settings)
    return build_parser().parse_csv_files(files)


def import_dataset(
    dataset: ParsedDataset,
    strategy: MergeStrategy | str | None = None,
    on_progress: ProgressCallback | None = None,
    *,
    settings: Settings | None = None,
    store: BaseDestinationStore | None = None,
    batch_size: int | None = None,
    families: Iterable[EntityFamily | str] | None = None,
    cancel_event: threading.Event | None = None,
    file_name: str | None = None,
) -> ImportResult:
    """Write a parsed dataset to the destination store.

    Explicit arguments win over settings. ``families`` limits the run to the
    selected collections (all four by default). The returned ImportResult
    carries every failure; only invalid configuration (unknown store,
    strategy or family, batch size below 1) raises, before anything is
    written.
    """
    settings = _configured(settings)
    plan = ImportPlan(
        dataset=dataset,
        strategy=MergeStrategy(strategy or settings.import_merge_strategy),
        batch_size=batch_size if batch_size is not None else settings.import_batch_size,
        families=frozenset(
            FAMILY_ORDER if families is None else (EntityFamily(family) for family in families)
        ),
    )
    if store is None and settings.destination_store.lower() == "postgres":
        init_pool(settings)
    batcher = build_batcher(settings, store=store)

    started = time.monotonic()
    result = batcher.run(plan, on_progress=on_progress, cancel_event=cancel_event)
    if settings.import_log_enabled:
        _record_import_log(settings, result, file_name, int(time.monotonic() - started))
    return result


def _record_import_log(
    settings: Settings,
    result: ImportResult,
    file_name: str | None,
    elapsed_seconds: int,
) -> None:
    try:
        init_pool(settings)
        log_id = ImportLogRepository().record(result, file_name, elapsed_seconds)
    except Exception as exc:
        Log.error(f"Could not record import log for {file_name or 'upload'}: {exc}")
        return
    Log.info(f"Import log {log_id} recorded")
