import gzip
import json
import sqlite3
import zlib
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

TableSpec = tuple[list[str], list[tuple[Any, ...]]]


def _raw_deflate(data: bytes) -> bytes:
    compressor = zlib.compressobj(9, zlib.DEFLATED, -zlib.MAX_WBITS)
    return compressor.compress(data) + compressor.flush()


@pytest.fixture()
def build_backup(tmp_path: Path) -> Callable[[dict[str, TableSpec]], bytes]:
    """Return a factory that writes tables into a fresh SQLite file and returns its bytes."""
    counter = iter(range(1_000))

    def _build(tables: dict[str, TableSpec]) -> bytes:
        path = tmp_path / f"backup_{next(counter)}.db"
        conn = sqlite3.connect(path)
        try:
            for table, (columns, rows) in tables.items():
                column_list = ", ".join(f'"{column}"' for column in columns)
                conn.execute(f'CREATE TABLE "{table}" ({column_list})')
                placeholders = ", ".join("?" for _ in columns)
                conn.executemany(
                    f'INSERT INTO "{table}" VALUES ({placeholders})', rows
                )
            conn.commit()
        finally:
            conn.close()
        return path.read_bytes()

    return _build


@pytest.fixture()
def salon_backup_bytes(build_backup: Callable[[dict[str, TableSpec]], bytes]) -> bytes:
    """A legacy backup with all four families and a few noisy rows."""
    return build_backup(
        {
            "Clientes": (
                ["Codigo", "Nome", "Celular", "Email", "CPF", "Cidade"],
                [
                    (1, "Ana Silva", "11999990000", "ANA@MAIL.COM", "123.456.789-00", "Campinas"),
                    (2, "   ", "11911112222", None, None, None),
                    (3, "Bruno Costa", None, "bruno@mail.com", None, "Santos"),
                ],
            ),
            "tb_servicos": (
                ["nome", "preco", "duracao", "comissao"],
                [
                    ("Corte", "R$ 35,00", 40, 50),
                    ("Escova", "abc", None, None),
                ],
            ),
            "produtos": (
                ["descricao", "preco_venda", "estoque", "codigo_barras"],
                [("Shampoo 300ml", 29.9, 12, "7891234567890")],
            ),
            "Funcionarios": (
                ["nome", "telefone", "comissao", "ativo"],
                [
                    ("Carla", "1133334444", 40, 1),
                    ("Diego", None, None, "N"),
                ],
            ),
        }
    )


@pytest.fixture()
def customers_only_backup_bytes(build_backup: Callable[[dict[str, TableSpec]], bytes]) -> bytes:
    return build_backup(
        {
            "clientes": (
                ["nome", "name", "email"],
                [("Ana Silva", "Ana English", "ana@mail.com")],
            ),
            "agenda": (["data", "cliente"], [("2020-01-01", 1)]),
        }
    )


@pytest.fixture()
def gzip_backup_bytes(salon_backup_bytes: bytes) -> bytes:
    return gzip.compress(salon_backup_bytes)


@pytest.fixture()
def deflate_backup_bytes(salon_backup_bytes: bytes) -> bytes:
    return _raw_deflate(salon_backup_bytes)


@pytest.fixture()
def zlib_backup_bytes(salon_backup_bytes: bytes) -> bytes:
    return zlib.compress(salon_backup_bytes)


@pytest.fixture()
def salon_json_bytes() -> bytes:
    payload = {
        "clientes": [
            {"nome": "Ana Silva", "celular": "11999990000", "email": "Ana@Mail.com"},
            {"nome": "  "},
            {"Nome": "Bruno Costa", "cpf": "98765432100"},
        ],
        "servicos": [{"nome": "Corte", "preco": 35, "duracao": 45}],
        "produtos": [{"nome": "Shampoo", "preco_venda": "29,90", "codigo_barras": "789"}],
        "profissionais": [{"nome": "Carla", "ativo": False, "comissao": "40"}],
    }
    return json.dumps(payload).encode("utf-8")
