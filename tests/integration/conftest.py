import os
from collections.abc import Generator
from typing import Any

import psycopg
import pytest

from salon_import.config.settings import Settings
from salon_import.database.connection import close_pool, get_connection, init_pool

SALON_TABLES = ("clientes", "servicos", "produtos", "profissionais", "import_logs")

SCHEMA = """
CREATE TABLE IF NOT EXISTS clientes (
    id BIGSERIAL PRIMARY KEY,
    nome TEXT NOT NULL,
    celular TEXT NOT NULL,
    telefone TEXT,
    email TEXT,
    cpf TEXT UNIQUE,
    data_nascimento DATE,
    endereco TEXT,
    bairro TEXT,
    cidade TEXT,
    estado TEXT,
    cep TEXT,
    observacoes TEXT,
    ativo BOOLEAN NOT NULL DEFAULT TRUE,
    receber_mensagens BOOLEAN NOT NULL DEFAULT TRUE
);
CREATE TABLE IF NOT EXISTS servicos (
    id BIGSERIAL PRIMARY KEY,
    nome TEXT NOT NULL UNIQUE,
    preco NUMERIC(10, 2) NOT NULL DEFAULT 0,
    duracao_minutos INTEGER NOT NULL DEFAULT 30,
    comissao_percentual NUMERIC(5, 2) NOT NULL DEFAULT 0,
    descricao TEXT,
    categoria TEXT,
    ativo BOOLEAN NOT NULL DEFAULT TRUE
);
CREATE TABLE IF NOT EXISTS produtos (
    id BIGSERIAL PRIMARY KEY,
    nome TEXT NOT NULL,
    preco_venda NUMERIC(10, 2) NOT NULL DEFAULT 0,
    preco_custo NUMERIC(10, 2) NOT NULL DEFAULT 0,
    estoque_atual NUMERIC(10, 2) NOT NULL DEFAULT 0,
    estoque_minimo NUMERIC(10, 2) NOT NULL DEFAULT 0,
    codigo_barras TEXT UNIQUE,
    categoria TEXT,
    descricao TEXT,
    ativo BOOLEAN NOT NULL DEFAULT TRUE
);
CREATE TABLE IF NOT EXISTS profissionais (
    id BIGSERIAL PRIMARY KEY,
    nome TEXT NOT NULL,
    telefone TEXT,
    email TEXT UNIQUE,
    comissao_padrao NUMERIC(5, 2) NOT NULL DEFAULT 0,
    especialidade TEXT,
    ativo BOOLEAN NOT NULL DEFAULT TRUE
);
CREATE TABLE IF NOT EXISTS import_logs (
    id BIGSERIAL PRIMARY KEY,
    arquivo_nome TEXT,
    status TEXT NOT NULL,
    tempo_processamento_segundos INTEGER,
    total_registros_importados INTEGER,
    total_erros INTEGER,
    clientes_importados INTEGER,
    servicos_importados INTEGER,
    produtos_importados INTEGER,
    profissionais_importados INTEGER,
    erros_detalhados JSONB,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);
"""


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "salon_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        with get_connection() as conn:
            conn.execute(SCHEMA)
            conn.commit()
    except Exception as e:
        close_pool()
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        conn.execute("TRUNCATE " + ", ".join(SALON_TABLES) + " RESTART IDENTITY")
        conn.commit()
        yield conn
        conn.rollback()
        conn.execute("TRUNCATE " + ", ".join(SALON_TABLES) + " RESTART IDENTITY")
        conn.commit()
