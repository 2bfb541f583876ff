import json

from salon_import.detection.models import SniffKind, SniffResult
from salon_import.logging.logger import Log

_JSON_OPENERS = frozenset("{[")
_UTF8_BOM = b"\xef\xbb\xbf"


class FormatSniffer:
    """Tells JSON exports apart from everything else.

    Anything that is not a complete JSON document is handed on as a
    relational candidate; the decision that a file is unusable is only made
    after every other reader has been tried.
    """

    def classify(self, data: bytes) -> SniffResult:
        first = self._first_character(data)
        if first not in _JSON_OPENERS:
            return SniffResult(kind=SniffKind.RELATIONAL_CANDIDATE)
        try:
            document = json.loads(self._decode(data))
        except json.JSONDecodeError as exc:
            Log.debug(f"Input starts with {first!r} but is not JSON: {exc}")
            return SniffResult(kind=SniffKind.RELATIONAL_CANDIDATE)
        return SniffResult(kind=SniffKind.JSON, document=document)

    @staticmethod
    def _decode(data: bytes) -> str:
        """UTF-8 (BOM tolerated), else Latin-1 as written by older Windows tools."""
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError:
            return data.decode("latin-1")

    @staticmethod
    def _first_character(data: bytes) -> str | None:
        stripped = data.removeprefix(_UTF8_BOM).lstrip()
        if not stripped:
            return None
        # A lone lead byte of a multi-byte sequence can never be "{" or "[".
        return stripped[:1].decode("utf-8", errors="replace")
