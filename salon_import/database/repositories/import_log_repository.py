from psycopg.types.json import Jsonb

from salon_import.database.connection import get_connection
from salon_import.importer.models import ImportResult


def import_status(result: ImportResult) -> str:
    if result.cancelled:
        return "cancelado"
    return "concluido" if result.success else "erro"


class ImportLogRepository:
    """Database operations for the import_logs table."""

    def record(
        self,
        result: ImportResult,
        file_name: str | None,
        elapsed_seconds: int = 0,
    ) -> int:
        """Insert one summary row for a finished import run and return its id."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO import_logs (
                        arquivo_nome, status, tempo_processamento_segundos,
                        total_registros_importados, total_erros,
                        clientes_importados, servicos_importados,
                        produtos_importados, profissionais_importados,
                        erros_detalhados
                    )
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING id
                    """,
                    (
                        file_name,
                        import_status(result),
                        elapsed_seconds,
                        result.total_imported,
                        result.total_errors,
                        result.customers.imported,
                        result.services.imported,
                        result.products.imported,
                        result.staff.imported,
                        Jsonb([{"mensagem": error} for error in result.errors]),
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("INSERT INTO import_logs returned no id")
        return int(row[0])
