from collections.abc import Mapping

from salon_import.extraction.base import BaseEntityExtractor
from salon_import.extraction.coercion import to_number, to_text
from salon_import.extraction.models import CellValue, EntityFamily, Product


class ProductExtractor(BaseEntityExtractor[Product]):
    family = EntityFamily.PRODUCTS

    def _build(self, record_id: int, name: str, cells: Mapping[str, CellValue]) -> Product:
        return Product(
            id=record_id,
            name=name,
            sale_price=to_number(cells.get("sale_price")),
            cost_price=to_number(cells.get("cost_price")),
            stock_quantity=to_number(cells.get("stock_quantity")),
            min_stock_quantity=to_number(cells.get("min_stock_quantity")),
            barcode=to_text(cells.get("barcode")),
            category=to_text(cells.get("category")),
            description=to_text(cells.get("description")),
        )
