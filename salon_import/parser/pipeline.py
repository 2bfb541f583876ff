from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from salon_import.detection.models import SniffResult
from salon_import.extraction.models import ParsedDataset
from salon_import.parser.models import DetectedFormat


@dataclass(slots=True)
class PipelineContext:
    raw_bytes: bytes = b""
    filename: str | None = None
    csv_files: dict[str, bytes] = field(default_factory=dict)
    sniff: SniffResult | None = None
    detected_format: DetectedFormat = DetectedFormat.UNKNOWN
    database_bytes: bytes = b""
    tables: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    dataset: ParsedDataset | None = None


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
