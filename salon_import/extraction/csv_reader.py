"""Reading loose CSV exports (one entity family per file)."""

import csv
import re
import unicodedata

from salon_import.extraction.exceptions import ExtractionError
from salon_import.extraction.models import EntityFamily

_HEADER_SPACES = re.compile(r"\s+")
_HEADER_SYMBOLS = re.compile(r"[^a-z0-9_]")

_FILENAME_HINTS: tuple[tuple[EntityFamily, tuple[str, ...]], ...] = (
    (EntityFamily.CUSTOMERS, ("cliente", "customer")),
    (EntityFamily.SERVICES, ("servico", "service")),
    (EntityFamily.PRODUCTS, ("produto", "product")),
    (EntityFamily.STAFF, ("profission", "funcionario", "employee", "staff")),
)
_HEADER_HINTS: tuple[tuple[EntityFamily, tuple[str, ...]], ...] = (
    (EntityFamily.CUSTOMERS, ("cpf", "data_nascimento", "celular")),
    (EntityFamily.SERVICES, ("duracao", "tempo")),
    (EntityFamily.PRODUCTS, ("estoque", "codigo_barras", "preco_custo")),
    (EntityFamily.STAFF, ("comissao", "especialidade")),
)


def normalize_header(header: str) -> str:
    """Lower-case, strip accents, join words with "_" and drop other symbols."""
    decomposed = unicodedata.normalize("NFD", header.strip().lower())
    plain = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _HEADER_SYMBOLS.sub("", _HEADER_SPACES.sub("_", plain))


def decode_text(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def detect_delimiter(header_line: str) -> str:
    if "\t" in header_line:
        return "\t"
    if ";" in header_line and "," not in header_line:
        return ";"
    return ","


def looks_delimited(text: str) -> bool:
    """A header line with a delimiter followed by at least one more line."""
    lines = [line for line in text.splitlines() if line.strip()]
    return len(lines) >= 2 and any(sep in lines[0] for sep in (",", ";", "\t"))


def read_csv(content: bytes) -> tuple[list[str], list[dict[str, str]]]:
    """Return normalized headers and the non-blank rows keyed by them.

    Raises:
        ExtractionError: if the csv module rejects the content
            (e.g. a field above ``csv.field_size_limit()``).
    """
    text = decode_text(content)
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) < 2:
        return [], []
    reader = csv.reader(lines, delimiter=detect_delimiter(lines[0]))
    rows: list[dict[str, str]] = []
    try:
        headers = [normalize_header(h) for h in next(reader)]
        for values in reader:
            if not any(v.strip() for v in values):
                continue
            rows.append(
                {header: (values[i].strip() if i < len(values) else "") for i, header in enumerate(headers)}
            )
    except csv.Error as exc:
        raise ExtractionError(f"could not be read as CSV: {exc}") from exc
    return headers, rows


def detect_family(filename: str, headers: list[str]) -> EntityFamily | None:
    """Guess the family from the file name, then from characteristic headers."""
    lowered = normalize_header(filename)
    for family, hints in _FILENAME_HINTS:
        if any(hint in lowered for hint in hints):
            return family
    joined = ",".join(headers)
    for family, hints in _HEADER_HINTS:
        if any(hint in joined for hint in hints):
            return family
    return None
