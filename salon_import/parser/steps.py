import dataclasses
import sqlite3
from collections.abc import Iterable, Mapping, Sequence

from salon_import.detection.decompression import DecompressionChain
from salon_import.detection.exceptions import UnrecognizedFormatError
from salon_import.detection.models import SniffKind, has_database_header
from salon_import.detection.sniffer import FormatSniffer
from salon_import.extraction import EXTRACTORS, BaseEntityExtractor
from salon_import.extraction.csv_reader import decode_text, detect_family, looks_delimited, read_csv
from salon_import.extraction.exceptions import ExtractionError
from salon_import.extraction.json_normalizer import JsonNormalizer
from salon_import.extraction.models import FAMILY_ORDER, CellValue, EntityFamily, ParsedDataset
from salon_import.extraction.sql_dump import read_sql_dump
from salon_import.logging.logger import Log
from salon_import.parser.models import DetectedFormat
from salon_import.parser.pipeline import PipelineContext, PipelineStep
from salon_import.relational.reader import RelationalDatabase, RelationalFileReader
from salon_import.relational.schema_mapper import SchemaMapper

ExtractorRegistry = Mapping[EntityFamily, type[BaseEntityExtractor]]  # type: ignore[type-arg]
Gathered = dict[EntityFamily, list]

_UNDETECTED_FILE = (
    "could not tell which data the file holds; include "
    "clientes, servicos, produtos or profissionais in its name"
)


def _empty_gathered() -> Gathered:
    return {family: [] for family in FAMILY_ORDER}


def _gather(
    extractors: ExtractorRegistry,
    family: EntityFamily,
    label: str,
    headers: Sequence[str],
    rows: Iterable[Mapping[str, CellValue]],
    context: PipelineContext,
    gathered: Gathered,
) -> bool:
    """Extract one named source of a known family into ``gathered``.

    Returns False when the source could not be extracted; the reason is
    recorded in ``context.errors``.
    """
    try:
        records = extractors[family]().extract(headers, rows)
    except ExtractionError as exc:
        context.errors.append(f"{label}: {exc}")
        return False
    Log.info(f"{label}: {len(records)} {family.value} records")
    gathered[family].extend(records)
    return True


def _renumbered(gathered: Gathered) -> ParsedDataset:
    """Concatenated sources of one family get ids 1..n again."""
    return ParsedDataset(
        **{
            family.value: tuple(
                dataclasses.replace(record, id=index)
                for index, record in enumerate(records, start=1)
            )
            for family, records in gathered.items()
        }
    )


class SniffFormatStep(PipelineStep):
    def __init__(self, sniffer: FormatSniffer) -> None:
        self._sniffer = sniffer

    def run(self, context: PipelineContext) -> PipelineContext:
        context.sniff = self._sniffer.classify(context.raw_bytes)
        if context.sniff.kind is SniffKind.JSON:
            context.detected_format = DetectedFormat.JSON
        Log.info(f"Input of {len(context.raw_bytes)} bytes sniffed as {context.sniff.kind.value}")
        return context


class NormalizeJsonStep(PipelineStep):
    def __init__(self, normalizer: JsonNormalizer) -> None:
        self._normalizer = normalizer

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.detected_format is not DetectedFormat.JSON:
            return context
        if context.sniff is None:
            raise ValueError("PipelineContext.sniff must be set before JSON normalization")
        document = context.sniff.document
        if isinstance(document, Mapping):
            context.tables = [str(key) for key in document]
        context.dataset = self._normalizer.normalize(document)
        return context


class DecompressStep(PipelineStep):
    def __init__(self, chain: DecompressionChain) -> None:
        self._chain = chain

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.detected_format is DetectedFormat.JSON:
            return context
        context.database_bytes = self._chain.run(context.raw_bytes)
        return context


class ExtractRelationalStep(PipelineStep):
    """Opens the database once and extracts each family independently.

    Input without a database header is left for the text-based steps.
    """

    def __init__(
        self,
        reader: RelationalFileReader,
        mapper: SchemaMapper,
        extractors: ExtractorRegistry = EXTRACTORS,
    ) -> None:
        self._reader = reader
        self._mapper = mapper
        self._extractors = extractors

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.dataset is not None or not has_database_header(context.database_bytes):
            return context
        with self._reader.open(context.database_bytes) as database:
            context.detected_format = DetectedFormat.RELATIONAL
            context.tables = list(database.tables)
            collections = {
                family.value: tuple(self._extract_family(database, family, context.errors))
                for family in FAMILY_ORDER
            }
        context.dataset = ParsedDataset(**collections)
        return context

    def _extract_family(
        self,
        database: RelationalDatabase,
        family: EntityFamily,
        errors: list[str],
    ) -> list:
        extractor = self._extractors[family](self._mapper)
        table = self._mapper.find_table(database.tables, extractor.aliases.tables)
        if table is None:
            Log.info(f"No {family.value} table among {database.tables}")
            errors.append(f"{family.value}: no matching table found")
            return []
        try:
            columns = database.columns(table)
            Log.debug(f"{family.value} -> {table}: {extractor.resolve_columns(columns)}")
            records = extractor.extract(columns, database.rows(table))
        except (ExtractionError, sqlite3.Error) as exc:
            Log.warning(f"Skipping {family.value} from table {table}: {exc}")
            errors.append(f"{family.value}: table {table} could not be extracted: {exc}")
            return []
        Log.info(f"Extracted {len(records)} {family.value} records from table {table}")
        return records


class ExtractSqlDumpStep(PipelineStep):
    """Reads INSERT statements from a text dump, one family per table."""

    def __init__(self, extractors: ExtractorRegistry = EXTRACTORS) -> None:
        self._extractors = extractors

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.dataset is not None:
            return context
        tables = read_sql_dump(decode_text(context.raw_bytes))
        if not tables:
            return context
        gathered = _empty_gathered()
        for table in tables:
            family = detect_family(table.name, table.columns)
            if family is None:
                Log.info(f"SQL dump table {table.name} matches no family")
                context.errors.append(f"table {table.name}: no matching family")
                continue
            _gather(
                self._extractors, family, f"table {table.name}", table.columns, table.rows, context, gathered
            )
        if not any(gathered.values()):
            Log.info(f"SQL dump tables {[t.name for t in tables]} gave no records")
            return context
        context.detected_format = DetectedFormat.SQL_DUMP
        context.tables = [table.name for table in tables]
        context.dataset = _renumbered(gathered)
        return context


class ExtractCsvTextStep(PipelineStep):
    """Reads a single uploaded file as a delimited export of one family."""

    def __init__(self, extractors: ExtractorRegistry = EXTRACTORS) -> None:
        self._extractors = extractors

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.dataset is not None or not looks_delimited(decode_text(context.raw_bytes)):
            return context
        label = context.filename or "upload"
        try:
            headers, rows = read_csv(context.raw_bytes)
        except ExtractionError as exc:
            context.errors.append(f"{label}: {exc}")
            return context
        family = detect_family(context.filename or "", headers)
        if family is None:
            context.errors.append(f"{label}: {_UNDETECTED_FILE}")
            return context
        gathered = _empty_gathered()
        _gather(self._extractors, family, label, headers, rows, context, gathered)
        if not gathered[family]:
            return context
        context.detected_format = DetectedFormat.CSV
        context.tables = [family.value]
        context.dataset = _renumbered(gathered)
        return context


class RequireDatasetStep(PipelineStep):
    """Fails the parse when no earlier step could read the input."""

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.dataset is None:
            raise UnrecognizedFormatError(
                "File is not a JSON export, a supported database backup, "
                "an SQL dump or a CSV export"
            )
        return context


class ExtractCsvFilesStep(PipelineStep):
    """Reads one family per CSV file and concatenates files of the same family."""

    def __init__(self, extractors: ExtractorRegistry = EXTRACTORS) -> None:
        self._extractors = extractors

    def run(self, context: PipelineContext) -> PipelineContext:
        context.detected_format = DetectedFormat.CSV
        gathered = _empty_gathered()
        for filename, content in context.csv_files.items():
            try:
                headers, rows = read_csv(content)
            except ExtractionError as exc:
                Log.warning(f"Skipping {filename}: {exc}")
                context.errors.append(f"{filename}: {exc}")
                continue
            if not rows:
                context.errors.append(f"{filename}: empty or invalid file")
                continue
            family = detect_family(filename, headers)
            if family is None:
                context.errors.append(f"{filename}: {_UNDETECTED_FILE}")
                continue
            extracted = _gather(self._extractors, family, filename, headers, rows, context, gathered)
            if extracted and family.value not in context.tables:
                context.tables.append(family.value)
        if not any(gathered.values()):
            raise UnrecognizedFormatError("No records could be read from the CSV files")
        context.dataset = _renumbered(gathered)
        return context
