import threading
from unittest.mock import MagicMock, patch

import pytest

from salon_import import api
from salon_import.config.settings import Settings
from salon_import.extraction.models import Customer, EntityFamily, ParsedDataset, Service
from salon_import.importer.models import MergeStrategy
from salon_import.importer.store.memory_store import MemoryDestinationStore
from salon_import.parser.models import DetectedFormat


def _settings(**overrides: object) -> Settings:
    values: dict[str, object] = {"destination_store": "memory", "import_log_enabled": False}
    values.update(overrides)
    return Settings(**values)  # type: ignore[arg-type]


class TestParseFile:
    def test_parses_json(self) -> None:
        result = api.parse_file(b'{"clientes": [{"nome": "Ana"}]}', "backup.json")
        assert result.report.format is DetectedFormat.JSON
        assert result.dataset is not None
        assert result.dataset.customers[0].name == "Ana"

    def test_parses_relational(self, salon_backup_bytes: bytes) -> None:
        result = api.parse_file(salon_backup_bytes)
        assert result.report.format is DetectedFormat.RELATIONAL

    def test_parses_csv_files(self) -> None:
        result = api.parse_csv_files({"clientes.csv": b"nome\nAna\n"})
        assert result.report.format is DetectedFormat.CSV

    def test_parses_single_csv_export(self) -> None:
        result = api.parse_file(b"nome;cpf\nAna;1\n", "clientes.csv")
        assert result.report.format is DetectedFormat.CSV
        assert result.dataset is not None
        assert result.dataset.customers[0].tax_id == "1"

    @patch("salon_import.api.Log")
    def test_configures_logging_from_settings(self, mock_log: MagicMock) -> None:
        api.parse_file(b"{}", settings=_settings(log_level="DEBUG"))
        api.parse_csv_files({"clientes.csv": b"nome\nAna\n"}, settings=_settings(log_level="WARNING"))
        assert [c.args for c in mock_log.configure.call_args_list] == [("DEBUG",), ("WARNING",)]


class TestImportDataset:
    def test_uses_settings_defaults(self) -> None:
        store = MemoryDestinationStore()
        dataset = ParsedDataset(customers=(Customer(id=1, name="Ana", tax_id="1"),))

        result = api.import_dataset(dataset, settings=_settings(), store=store)

        assert result.success is True
        assert result.customers.imported == 1
        assert store.rows("clientes")[0]["nome"] == "Ana"

    def test_explicit_arguments_win(self) -> None:
        store = MagicMock(wraps=MemoryDestinationStore())
        dataset = ParsedDataset(customers=tuple(Customer(id=i, name=f"C{i}") for i in range(1, 4)))

        api.import_dataset(
            dataset,
            "replace",
            settings=_settings(import_batch_size=50),
            store=store,
            batch_size=2,
        )

        assert store.write_batch.call_count == 2
        assert store.write_batch.call_args.kwargs["upsert"] is True
        store.existing_keys.assert_not_called()

    def test_cancel_event_is_forwarded(self) -> None:
        cancel = threading.Event()
        cancel.set()
        dataset = ParsedDataset(customers=(Customer(id=1, name="Ana"),))

        result = api.import_dataset(
            dataset, MergeStrategy.MERGE, settings=_settings(), store=MemoryDestinationStore(), cancel_event=cancel
        )

        assert result.cancelled is True

    def test_unknown_strategy_raises(self) -> None:
        with pytest.raises(ValueError):
            api.import_dataset(ParsedDataset(), "overwrite", settings=_settings(), store=MemoryDestinationStore())

    @patch("salon_import.api.init_pool")
    def test_postgres_store_opens_the_pool(self, mock_init_pool: MagicMock) -> None:
        settings = _settings(destination_store="postgres")
        api.import_dataset(ParsedDataset(), settings=settings)
        mock_init_pool.assert_called_once_with(settings)

    @patch("salon_import.api.ImportLogRepository")
    @patch("salon_import.api.init_pool")
    def test_records_import_log_when_enabled(
        self, _mock_init_pool: MagicMock, mock_repo_cls: MagicMock
    ) -> None:
        mock_repo_cls.return_value.record.return_value = 1
        result = api.import_dataset(
            ParsedDataset(),
            settings=_settings(import_log_enabled=True),
            store=MemoryDestinationStore(),
            file_name="backup.db",
        )

        mock_repo_cls.return_value.record.assert_called_once()
        args = mock_repo_cls.return_value.record.call_args.args
        assert args[0] is result
        assert args[1] == "backup.db"

    @patch("salon_import.api.ImportLogRepository")
    @patch("salon_import.api.init_pool")
    def test_import_log_failure_does_not_change_result(
        self, _mock_init_pool: MagicMock, mock_repo_cls: MagicMock
    ) -> None:
        mock_repo_cls.return_value.record.side_effect = RuntimeError("pool exhausted")
        dataset = ParsedDataset(customers=(Customer(id=1, name="Ana"),))

        result = api.import_dataset(
            dataset, settings=_settings(import_log_enabled=True), store=MemoryDestinationStore()
        )

        assert result.success is True
        assert result.customers.imported == 1

    @patch("salon_import.api.Log")
    def test_configures_logging_before_importing(self, mock_log: MagicMock) -> None:
        api.import_dataset(ParsedDataset(), settings=_settings(log_level="ERROR"), store=MemoryDestinationStore())
        mock_log.configure.assert_called_once_with("ERROR")

    def test_families_limit_the_import(self) -> None:
        store = MemoryDestinationStore()
        dataset = ParsedDataset(
            customers=(Customer(id=1, name="Ana", tax_id="1"),),
            services=(Service(id=1, name="Corte"),),
        )

        result = api.import_dataset(dataset, settings=_settings(), store=store, families=["services"])

        assert result.customers.imported == 0
        assert result.services.imported == 1
        assert store.rows("clientes") == []

    def test_families_accept_enum_members(self) -> None:
        store = MemoryDestinationStore()
        dataset = ParsedDataset(customers=(Customer(id=1, name="Ana", tax_id="1"),))

        result = api.import_dataset(
            dataset, settings=_settings(), store=store, families=[EntityFamily.CUSTOMERS]
        )

        assert result.customers.imported == 1

    def test_unknown_family_raises(self) -> None:
        with pytest.raises(ValueError):
            api.import_dataset(
                ParsedDataset(), settings=_settings(), store=MemoryDestinationStore(), families=["clientes"]
            )
