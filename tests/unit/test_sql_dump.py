from salon_import.extraction.sql_dump import DumpTable, read_sql_dump


class TestReadSqlDump:
    def test_multi_row_insert_with_quoted_identifiers(self) -> None:
        text = (
            "INSERT INTO `Clientes` (`Nome`, `CPF`, obs) VALUES "
            "('Ana', '123', NULL), ('Bia', 456, 'vip');"
        )
        assert read_sql_dump(text) == [
            DumpTable(
                name="Clientes",
                columns=["nome", "cpf", "obs"],
                rows=[
                    {"nome": "Ana", "cpf": "123", "obs": None},
                    {"nome": "Bia", "cpf": "456", "obs": "vip"},
                ],
            )
        ]

    def test_quotes_commas_and_parentheses_inside_strings(self) -> None:
        text = r"""INSERT INTO clientes (nome, obs) VALUES ('O''Brien, Ana', 'it\'s (vip)');"""
        [table] = read_sql_dump(text)
        assert table.rows == [{"nome": "O'Brien, Ana", "obs": "it's (vip)"}]

    def test_statements_for_the_same_table_are_merged(self) -> None:
        text = (
            "INSERT INTO produtos (nome) VALUES ('Gel');\n"
            "INSERT INTO servicos (nome) VALUES ('Corte');\n"
            "INSERT INTO PRODUTOS (nome, estoque) VALUES ('Shampoo', 3);\n"
        )
        tables = read_sql_dump(text)
        assert [t.name for t in tables] == ["produtos", "servicos"]
        assert tables[0].columns == ["nome", "estoque"]
        assert tables[0].rows == [{"nome": "Gel"}, {"nome": "Shampoo", "estoque": "3"}]

    def test_schema_prefix_and_casts_are_dropped(self) -> None:
        text = "INSERT INTO public.clientes (nome) VALUES ('Ana'::character varying);"
        [table] = read_sql_dump(text)
        assert table.name == "clientes"
        assert table.rows == [{"nome": "Ana"}]

    def test_missing_values_are_null(self) -> None:
        [table] = read_sql_dump("INSERT INTO clientes (nome, cpf) VALUES ('Ana');")
        assert table.rows == [{"nome": "Ana", "cpf": None}]

    def test_truncated_tuple_is_dropped(self) -> None:
        [table] = read_sql_dump("INSERT INTO clientes (nome) VALUES ('Ana'), ('Bi")
        assert table.rows == [{"nome": "Ana"}]

    def test_text_without_inserts(self) -> None:
        assert read_sql_dump("CREATE TABLE clientes (nome text);\nnome,cpf\n") == []
