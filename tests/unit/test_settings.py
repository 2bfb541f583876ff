import pytest
from pydantic import ValidationError

from salon_import.config.settings import Settings


class TestSettingsDefaults:
    def test_default_log_level(self) -> None:
        s = Settings()
        assert s.log_level == "INFO"

    def test_default_db_port(self) -> None:
        s = Settings()
        assert s.db_port == 5432

    def test_default_destination_store(self) -> None:
        s = Settings()
        assert s.destination_store == "postgres"

    def test_default_import_batch_size(self) -> None:
        s = Settings()
        assert s.import_batch_size == 50

    def test_default_merge_strategy(self) -> None:
        s = Settings()
        assert s.import_merge_strategy == "merge"

    def test_import_log_disabled_by_default(self) -> None:
        s = Settings()
        assert s.import_log_enabled is False


class TestSettingsFromEnv:
    def test_loads_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        s = Settings()
        assert s.log_level == "DEBUG"

    def test_loads_db_host(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_HOST", "db.example.com")
        s = Settings()
        assert s.db_host == "db.example.com"

    def test_loads_destination_store(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DESTINATION_STORE", "memory")
        s = Settings()
        assert s.destination_store == "memory"

    def test_loads_import_batch_size(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IMPORT_BATCH_SIZE", "100")
        s = Settings()
        assert s.import_batch_size == 100

    def test_loads_import_log_enabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IMPORT_LOG_ENABLED", "true")
        s = Settings()
        assert s.import_log_enabled is True


class TestSettingsValidation:
    def test_invalid_db_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings()

    def test_batch_size_below_one_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IMPORT_BATCH_SIZE", "0")
        with pytest.raises(ValidationError):
            Settings()
