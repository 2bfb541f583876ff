from collections.abc import Mapping

from salon_import.extraction.base import BaseEntityExtractor
from salon_import.extraction.coercion import to_active, to_email, to_number, to_text
from salon_import.extraction.models import CellValue, EntityFamily, Staff


class StaffExtractor(BaseEntityExtractor[Staff]):
    family = EntityFamily.STAFF

    def _build(self, record_id: int, name: str, cells: Mapping[str, CellValue]) -> Staff:
        return Staff(
            id=record_id,
            name=name,
            phone=to_text(cells.get("phone")),
            email=to_email(cells.get("email")),
            commission_percent=to_number(cells.get("commission_percent")),
            specialty=to_text(cells.get("specialty")),
            active=to_active(cells.get("active")),
        )
