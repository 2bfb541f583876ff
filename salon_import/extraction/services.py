from collections.abc import Mapping

from salon_import.extraction.base import BaseEntityExtractor
from salon_import.extraction.coercion import to_number, to_text
from salon_import.extraction.models import CellValue, EntityFamily, Service

DEFAULT_DURATION_MINUTES = 30.0


class ServiceExtractor(BaseEntityExtractor[Service]):
    family = EntityFamily.SERVICES

    def _build(self, record_id: int, name: str, cells: Mapping[str, CellValue]) -> Service:
        return Service(
            id=record_id,
            name=name,
            price=to_number(cells.get("price")),
            duration_minutes=to_number(
                cells.get("duration_minutes"), default=DEFAULT_DURATION_MINUTES
            ),
            commission_percent=to_number(cells.get("commission_percent")),
            description=to_text(cells.get("description")),
            category=to_text(cells.get("category")),
        )
