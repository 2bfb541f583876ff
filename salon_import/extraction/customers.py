from collections.abc import Mapping

from salon_import.extraction.base import BaseEntityExtractor
from salon_import.extraction.coercion import to_email, to_text
from salon_import.extraction.models import CellValue, Customer, EntityFamily


class CustomerExtractor(BaseEntityExtractor[Customer]):
    family = EntityFamily.CUSTOMERS

    def _build(self, record_id: int, name: str, cells: Mapping[str, CellValue]) -> Customer:
        return Customer(
            id=record_id,
            name=name,
            mobile_phone=to_text(cells.get("mobile_phone")),
            phone=to_text(cells.get("phone")),
            email=to_email(cells.get("email")),
            tax_id=to_text(cells.get("tax_id")),
            birth_date=to_text(cells.get("birth_date")),
            address=to_text(cells.get("address")),
            neighborhood=to_text(cells.get("neighborhood")),
            city=to_text(cells.get("city")),
            state=to_text(cells.get("state")),
            postal_code=to_text(cells.get("postal_code")),
            notes=to_text(cells.get("notes")),
        )
