from salon_import.config.settings import Settings
from salon_import.database.repositories.destination_repository import PostgresDestinationStore
from salon_import.importer.store.base import BaseDestinationStore
from salon_import.importer.store.memory_store import MemoryDestinationStore


class DestinationStoreFactory:
    """Creates the destination store selected in settings."""

    ADAPTERS: dict[str, type[BaseDestinationStore]] = {
        "postgres": PostgresDestinationStore,
        "memory": MemoryDestinationStore,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseDestinationStore:
        name = settings.destination_store.lower()
        adapter_cls = cls.ADAPTERS.get(name)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown destination store '{name}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()
