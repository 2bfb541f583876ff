from salon_import.extraction.base import BaseEntityExtractor
from salon_import.extraction.customers import CustomerExtractor
from salon_import.extraction.models import EntityFamily
from salon_import.extraction.products import ProductExtractor
from salon_import.extraction.services import ServiceExtractor
from salon_import.extraction.staff import StaffExtractor

EXTRACTORS: dict[EntityFamily, type[BaseEntityExtractor]] = {  # type: ignore[type-arg]
    EntityFamily.CUSTOMERS: CustomerExtractor,
    EntityFamily.SERVICES: ServiceExtractor,
    EntityFamily.PRODUCTS: ProductExtractor,
    EntityFamily.STAFF: StaffExtractor,
}

__all__ = [
    "EXTRACTORS",
    "BaseEntityExtractor",
    "CustomerExtractor",
    "ProductExtractor",
    "ServiceExtractor",
    "StaffExtractor",
]
