from dataclasses import dataclass
from enum import Enum
from typing import Any

SQLITE_HEADER = b"SQLite format 3\x00"


class SniffKind(str, Enum):
    JSON = "json"
    RELATIONAL_CANDIDATE = "relational-candidate"


@dataclass(frozen=True)
class SniffResult:
    """Outcome of looking at the first bytes of an upload.

    ``document`` holds the decoded JSON value when ``kind`` is JSON.
    """

    kind: SniffKind
    document: Any = None


@dataclass(frozen=True)
class Decompressed:
    codec: str
    data: bytes


@dataclass(frozen=True)
class DecompressionFailed:
    codec: str
    reason: str


CodecResult = Decompressed | DecompressionFailed


def has_database_header(data: bytes) -> bool:
    """True when the first 16 bytes are the SQLite file signature."""
    return data[: len(SQLITE_HEADER)] == SQLITE_HEADER
