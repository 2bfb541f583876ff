import gzip
import zlib
from abc import ABC, abstractmethod
from collections.abc import Sequence

from salon_import.detection.models import (
    CodecResult,
    Decompressed,
    DecompressionFailed,
    has_database_header,
)
from salon_import.logging.logger import Log


class BaseCodec(ABC):
    """One decompression attempt. Never raises; failures come back as data."""

    name: str = ""

    def decompress(self, data: bytes) -> CodecResult:
        try:
            output = self._decompress(data)
        except (OSError, EOFError, zlib.error) as exc:
            return DecompressionFailed(codec=self.name, reason=str(exc) or type(exc).__name__)
        if not has_database_header(output):
            return DecompressionFailed(
                codec=self.name, reason="output has no database header"
            )
        return Decompressed(codec=self.name, data=output)

    @abstractmethod
    def _decompress(self, data: bytes) -> bytes:
        raise NotImplementedError


class GzipCodec(BaseCodec):
    name = "gzip"

    def _decompress(self, data: bytes) -> bytes:
        return gzip.decompress(data)


class RawDeflateCodec(BaseCodec):
    name = "deflate-raw"

    def _decompress(self, data: bytes) -> bytes:
        inflater = zlib.decompressobj(-zlib.MAX_WBITS)
        output = inflater.decompress(data) + inflater.flush()
        if not inflater.eof:
            raise zlib.error("truncated deflate stream")
        return output


class ZlibCodec(BaseCodec):
    name = "zlib"

    def _decompress(self, data: bytes) -> bytes:
        return zlib.decompress(data)


DEFAULT_CODECS: tuple[BaseCodec, ...] = (GzipCodec(), RawDeflateCodec(), ZlibCodec())


class DecompressionChain:
    """Tries each codec in order until one produces a database file.

    Input that already carries the database header is returned untouched,
    and so is input no codec could unpack; the reader downstream decides.
    """

    def __init__(self, codecs: Sequence[BaseCodec] = DEFAULT_CODECS) -> None:
        self._codecs = tuple(codecs)

    def run(self, data: bytes) -> bytes:
        if has_database_header(data):
            return data
        for codec in self._codecs:
            result = codec.decompress(data)
            if isinstance(result, Decompressed):
                Log.info(
                    f"Decompressed {len(data)} bytes with {result.codec} "
                    f"into {len(result.data)} bytes"
                )
                return result.data
            Log.debug(f"Codec {result.codec} rejected input: {result.reason}")
        Log.debug("No codec produced a database file, passing input through")
        return data
