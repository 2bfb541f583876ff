"""Destination row shapes for the four salon tables."""

import re
from collections.abc import Callable
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from salon_import.extraction.models import Customer, Entity, EntityFamily, Product, Service, Staff

DestinationRow = dict[str, Any]

DEFAULT_CATEGORY = "Geral"
PLACEHOLDER_MOBILE = "(00) 00000-0000"

_NON_DIGITS = re.compile(r"\D")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_DAY_FIRST_DATE = re.compile(r"^(\d{2})[/-](\d{2})[/-](\d{4})")


@dataclass(frozen=True)
class TableTarget:
    """Destination table and the natural key column used for upserts."""

    table: str
    key: str


TABLE_TARGETS: MappingProxyType[EntityFamily, TableTarget] = MappingProxyType(
    {
        EntityFamily.CUSTOMERS: TableTarget(table="clientes", key="cpf"),
        EntityFamily.SERVICES: TableTarget(table="servicos", key="nome"),
        EntityFamily.PRODUCTS: TableTarget(table="produtos", key="codigo_barras"),
        EntityFamily.STAFF: TableTarget(table="profissionais", key="email"),
    }
)


def digits_only(value: str | None) -> str | None:
    if value is None:
        return None
    return _NON_DIGITS.sub("", value) or None


def format_phone(value: str | None) -> str | None:
    """Format 10/11 digit Brazilian numbers as "(DD) DDDD-DDDD" / "(DD) DDDDD-DDDD"."""
    if not value:
        return None
    digits = _NON_DIGITS.sub("", value)
    if len(digits) == 11:
        return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"
    if len(digits) == 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    return value


def format_date(value: str | None) -> str | None:
    """ISO date from YYYY-MM-DD, DD/MM/YYYY or DD-MM-YYYY; anything else is None."""
    if not value:
        return None
    iso = _ISO_DATE.match(value)
    if iso:
        return f"{iso[1]}-{iso[2]}-{iso[3]}"
    day_first = _DAY_FIRST_DATE.match(value)
    if day_first:
        return f"{day_first[3]}-{day_first[2]}-{day_first[1]}"
    return None


def _customer_row(record: Customer) -> DestinationRow:
    phone = format_phone(record.phone)
    return {
        "nome": record.name,
        "celular": format_phone(record.mobile_phone) or phone or PLACEHOLDER_MOBILE,
        "telefone": phone,
        "email": record.email,
        "cpf": digits_only(record.tax_id),
        "data_nascimento": format_date(record.birth_date),
        "endereco": record.address,
        "bairro": record.neighborhood,
        "cidade": record.city,
        "estado": record.state,
        "cep": digits_only(record.postal_code),
        "observacoes": record.notes,
        "ativo": True,
        "receber_mensagens": True,
    }


def _service_row(record: Service) -> DestinationRow:
    return {
        "nome": record.name,
        "preco": record.price,
        "duracao_minutos": int(round(record.duration_minutes)),
        "comissao_percentual": record.commission_percent,
        "descricao": record.description,
        "categoria": record.category or DEFAULT_CATEGORY,
        "ativo": True,
    }


def _product_row(record: Product) -> DestinationRow:
    return {
        "nome": record.name,
        "preco_venda": record.sale_price,
        "preco_custo": record.cost_price,
        "estoque_atual": record.stock_quantity,
        "estoque_minimo": record.min_stock_quantity,
        "codigo_barras": record.barcode,
        "categoria": record.category or DEFAULT_CATEGORY,
        "descricao": record.description,
        "ativo": True,
    }


def _staff_row(record: Staff) -> DestinationRow:
    return {
        "nome": record.name,
        "telefone": format_phone(record.phone),
        "email": record.email,
        "comissao_padrao": record.commission_percent,
        "especialidade": record.specialty,
        "ativo": record.active,
    }


_SERIALIZERS: MappingProxyType[EntityFamily, Callable[[Any], DestinationRow]] = MappingProxyType(
    {
        EntityFamily.CUSTOMERS: _customer_row,
        EntityFamily.SERVICES: _service_row,
        EntityFamily.PRODUCTS: _product_row,
        EntityFamily.STAFF: _staff_row,
    }
)


def to_destination_row(family: EntityFamily, record: Entity) -> DestinationRow:
    """Column -> value mapping written to the family's destination table."""
    return _SERIALIZERS[family](record)


def natural_key(family: EntityFamily, row: DestinationRow) -> str | None:
    value = row.get(TABLE_TARGETS[family].key)
    return value if value else None
