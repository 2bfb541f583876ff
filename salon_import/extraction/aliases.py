"""Ranked names observed in legacy exports, per entity family.

Every tuple is ordered by priority: the first alias that matches wins.
The tables are built once at import time and never mutated.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from salon_import.extraction.models import EntityFamily


@dataclass(frozen=True)
class FamilyAliases:
    tables: tuple[str, ...]
    json_keys: tuple[str, ...]
    fields: Mapping[str, tuple[str, ...]]


def _fields(**aliases: tuple[str, ...]) -> Mapping[str, tuple[str, ...]]:
    return MappingProxyType(dict(aliases))


CUSTOMER_ALIASES = FamilyAliases(
    tables=(
        "clientes", "cliente", "customers", "customer", "tb_clientes", "tb_cliente",
        "tbl_clientes", "tbl_cliente", "cad_clientes", "cadastro_clientes",
        "clients", "client",
    ),
    json_keys=("clientes", "clients", "customers"),
    fields=_fields(
        name=("nome", "name", "cliente", "nomecliente", "nome_cliente"),
        mobile_phone=("celular", "cel", "mobile", "telefone_celular", "fone_celular", "whatsapp"),
        phone=("telefone", "tel", "phone", "fone", "telefone_fixo"),
        email=("email", "e_mail", "e-mail", "mail"),
        tax_id=("cpf", "cpf_cnpj", "documento", "cnpj"),
        birth_date=("data_nascimento", "nascimento", "birthday", "dt_nascimento", "datanascimento"),
        address=("endereco", "address", "rua", "logradouro"),
        neighborhood=("bairro", "neighborhood"),
        city=("cidade", "city", "municipio"),
        state=("estado", "uf", "state"),
        postal_code=("cep", "zip", "zipcode", "postal_code"),
        notes=("observacoes", "obs", "notes", "observacao"),
    ),
)

SERVICE_ALIASES = FamilyAliases(
    tables=(
        "servicos", "servico", "services", "service", "tb_servicos", "tb_servico",
        "tbl_servicos", "cad_servicos",
    ),
    json_keys=("servicos", "services"),
    fields=_fields(
        name=("nome", "name", "servico", "nomeservico", "nome_servico", "descricao"),
        price=("preco", "valor", "price", "preco_venda", "vlr"),
        duration_minutes=("duracao", "tempo", "duration", "duracao_minutos", "tempo_minutos"),
        commission_percent=("comissao", "commission", "comissao_percentual", "perc_comissao"),
        description=("descricao", "description"),
        category=("categoria", "category", "grupo"),
    ),
)

PRODUCT_ALIASES = FamilyAliases(
    tables=(
        "produtos", "produto", "products", "product", "tb_produtos", "tb_produto",
        "tbl_produtos", "cad_produtos",
    ),
    json_keys=("produtos", "products"),
    fields=_fields(
        name=("nome", "name", "produto", "nomeproduto", "nome_produto", "descricao"),
        sale_price=("preco_venda", "preco", "valor", "price", "valor_venda"),
        cost_price=("preco_custo", "custo", "cost", "valor_custo"),
        stock_quantity=("estoque", "quantidade", "stock", "qtd", "estoque_atual"),
        min_stock_quantity=("estoque_minimo", "min_stock", "qtd_minima"),
        barcode=("codigo_barras", "barcode", "ean", "gtin", "codigo"),
        category=("categoria", "category", "grupo"),
        description=("descricao", "description"),
    ),
)

STAFF_ALIASES = FamilyAliases(
    tables=(
        "profissionais", "profissional", "professionals", "professional",
        "funcionarios", "funcionario", "employees", "employee", "staff",
        "colaboradores", "tb_profissionais", "tb_funcionarios",
    ),
    json_keys=("profissionais", "professionals", "funcionarios"),
    fields=_fields(
        name=("nome", "name", "profissional", "funcionario", "nome_profissional"),
        phone=("telefone", "tel", "celular", "phone"),
        email=("email", "e_mail"),
        commission_percent=("comissao", "commission", "comissao_padrao"),
        specialty=("especialidade", "funcao", "cargo", "specialty", "role"),
        active=("ativo", "active"),
    ),
)

ALIASES: Mapping[EntityFamily, FamilyAliases] = MappingProxyType(
    {
        EntityFamily.CUSTOMERS: CUSTOMER_ALIASES,
        EntityFamily.SERVICES: SERVICE_ALIASES,
        EntityFamily.PRODUCTS: PRODUCT_ALIASES,
        EntityFamily.STAFF: STAFF_ALIASES,
    }
)
