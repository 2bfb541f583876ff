from dataclasses import dataclass
from enum import Enum

CellValue = str | int | float | bool | None


class EntityFamily(str, Enum):
    CUSTOMERS = "customers"
    SERVICES = "services"
    PRODUCTS = "products"
    STAFF = "staff"


FAMILY_ORDER: tuple[EntityFamily, ...] = (
    EntityFamily.CUSTOMERS,
    EntityFamily.SERVICES,
    EntityFamily.PRODUCTS,
    EntityFamily.STAFF,
)


@dataclass(frozen=True)
class Customer:
    id: int
    name: str
    mobile_phone: str | None = None
    phone: str | None = None
    email: str | None = None
    tax_id: str | None = None
    birth_date: str | None = None
    address: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class Service:
    id: int
    name: str
    price: float = 0.0
    duration_minutes: float = 30.0
    commission_percent: float = 0.0
    description: str | None = None
    category: str | None = None


@dataclass(frozen=True)
class Product:
    id: int
    name: str
    sale_price: float = 0.0
    cost_price: float = 0.0
    stock_quantity: float = 0.0
    min_stock_quantity: float = 0.0
    barcode: str | None = None
    category: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class Staff:
    id: int
    name: str
    phone: str | None = None
    email: str | None = None
    commission_percent: float = 0.0
    specialty: str | None = None
    active: bool = True


Entity = Customer | Service | Product | Staff


@dataclass(frozen=True)
class ParsedDataset:
    """The four canonical collections recovered from one backup."""

    customers: tuple[Customer, ...] = ()
    services: tuple[Service, ...] = ()
    products: tuple[Product, ...] = ()
    staff: tuple[Staff, ...] = ()

    def records(self, family: EntityFamily) -> tuple[Entity, ...]:
        return getattr(self, family.value)

    def counts(self) -> dict[str, int]:
        return {family.value: len(self.records(family)) for family in FAMILY_ORDER}

    @property
    def total(self) -> int:
        return sum(self.counts().values())
