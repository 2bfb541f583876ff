from abc import ABC, abstractmethod
from collections.abc import Sequence

from salon_import.importer.serializers import DestinationRow, TableTarget


class BaseDestinationStore(ABC):
    """Contract for all destination stores an import writes into."""

    @abstractmethod
    def existing_keys(self, target: TableTarget, keys: Sequence[str]) -> set[str]:
        """Return the subset of ``keys`` already present in the target table.

        Raises:
            StoreWriteError: if the lookup fails.
        """

    @abstractmethod
    def write_batch(
        self,
        target: TableTarget,
        rows: Sequence[DestinationRow],
        upsert: bool,
    ) -> int:
        """Write one batch atomically and return the number of rows written.

        Args:
            target: Destination table and its natural key column.
            rows: Column -> value mappings, all with the same columns.
            upsert: When True, rows whose natural key already exists
                overwrite the stored row; rows without a key are inserted.

        Raises:
            StoreWriteError: if the batch is rejected. Nothing of it is kept.
        """
