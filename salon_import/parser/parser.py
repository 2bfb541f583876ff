from collections.abc import Mapping, Sequence

from salon_import.detection.decompression import DecompressionChain
from salon_import.detection.exceptions import UnrecognizedFormatError
from salon_import.detection.sniffer import FormatSniffer
from salon_import.extraction.json_normalizer import JsonNormalizer
from salon_import.logging.logger import Log
from salon_import.parser.models import DetectedFormat, ParseReport, ParseResult
from salon_import.parser.pipeline import PipelineContext, PipelineStep
from salon_import.parser.steps import (
    DecompressStep,
    ExtractCsvFilesStep,
    ExtractCsvTextStep,
    ExtractRelationalStep,
    ExtractSqlDumpStep,
    NormalizeJsonStep,
    RequireDatasetStep,
    SniffFormatStep,
)
from salon_import.relational.reader import RelationalFileReader
from salon_import.relational.schema_mapper import SchemaMapper


class LegacyFileParser:
    """Turns an uploaded legacy backup into a canonical dataset.

    Pipeline: sniff -> normalize JSON | decompress -> open database -> extract,
    then the text fallbacks (SQL INSERT dump, single CSV export) for input
    nothing earlier could read. Only an unrecognized input fails the whole
    parse; per-family problems end up in the report diagnostics.
    """

    def __init__(
        self,
        steps: Sequence[PipelineStep],
        csv_steps: Sequence[PipelineStep] = (),
    ) -> None:
        self._steps = steps
        self._csv_steps = csv_steps

    def parse(self, data: bytes, filename: str | None = None) -> ParseResult:
        Log.info(f"Parsing {filename or 'upload'} ({len(data)} bytes)")
        context = PipelineContext(raw_bytes=data, filename=filename)
        return self._run(self._steps, context)

    def parse_csv_files(self, files: Mapping[str, bytes]) -> ParseResult:
        """Parse loose CSV exports, one entity family per file."""
        Log.info(f"Parsing {len(files)} CSV files")
        context = PipelineContext(csv_files=dict(files))
        return self._run(self._csv_steps, context)

    @staticmethod
    def _run(steps: Sequence[PipelineStep], context: PipelineContext) -> ParseResult:
        try:
            for step in steps:
                context = step.run(context)
        except UnrecognizedFormatError as exc:
            Log.error(f"Parse failed: {exc}")
            report = ParseReport(
                format=DetectedFormat.UNKNOWN,
                errors=(*context.errors, str(exc)),
                success=False,
            )
            return ParseResult(report=report)

        report = ParseReport(
            format=context.detected_format,
            tables=tuple(context.tables),
            errors=tuple(context.errors),
            success=True,
        )
        if context.dataset is not None:
            Log.info(f"Parsed {report.format.value} input: {context.dataset.counts()}")
        return ParseResult(report=report, dataset=context.dataset)


def build_parser() -> LegacyFileParser:
    """Build a LegacyFileParser wired with the default steps."""
    mapper = SchemaMapper()
    return LegacyFileParser(
        steps=[
            SniffFormatStep(FormatSniffer()),
            NormalizeJsonStep(JsonNormalizer()),
            DecompressStep(DecompressionChain()),
            ExtractRelationalStep(RelationalFileReader(), mapper),
            ExtractSqlDumpStep(),
            ExtractCsvTextStep(),
            RequireDatasetStep(),
        ],
        csv_steps=[ExtractCsvFilesStep()],
    )
