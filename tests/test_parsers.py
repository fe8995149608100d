from __future__ import annotations

from livecode.execution.parsers import (
    is_border,
    is_column_rule,
    parse_bordered_table,
    parse_column_output,
    parse_mysql_table,
    parse_postgres_table,
)


def test_mysql_table_maps_null_to_none() -> None:
    output = "+----+-------+\n| id | name  |\n+----+-------+\n| 1  | NULL  |\n+----+-------+"

    rows = parse_mysql_table(output)

    assert rows == [{"id": "1", "name": None}]


def test_mysql_table_parses_every_row_in_order() -> None:
    output = "\n".join(
        [
            "+----+-------+-------------------+",
            "| id | name  | email             |",
            "+----+-------+-------------------+",
            "|  1 | Alice | alice@example.com |",
            "|  2 | Bob   | bob@example.com   |",
            "|  3 | Carol | carol@example.com |",
            "+----+-------+-------------------+",
        ]
    )

    rows = parse_mysql_table(output)

    assert rows is not None
    assert len(rows) == 3
    assert all(set(row) == {"id", "name", "email"} for row in rows)
    assert [row["name"] for row in rows] == ["Alice", "Bob", "Carol"]
    assert rows[1]["email"] == "bob@example.com"


def test_postgres_table_keeps_blank_cells_as_empty_strings() -> None:
    output = "\n".join(
        [
            "+----+-------+",
            "| id | name  |",
            "+----+-------+",
            "|  1 |       |",
            "|  2 | NULL  |",
            "+----+-------+",
            "(2 rows)",
        ]
    )

    rows = parse_postgres_table(output)

    assert rows == [{"id": "1", "name": ""}, {"id": "2", "name": "NULL"}]


def test_bordered_table_ignores_text_after_closing_border() -> None:
    output = "+---+\n| n |\n+---+\n| 7 |\n+---+\n| 8 |\n+---+"

    assert parse_bordered_table(output) == [{"n": "7"}]


def test_bordered_table_with_no_rows_is_empty_list() -> None:
    output = "+----+------+\n| id | name |\n+----+------+\n+----+------+"

    rows = parse_mysql_table(output)

    assert rows == []
    assert rows is not None


def test_bordered_table_without_header_is_none() -> None:
    assert parse_mysql_table("Query OK, 1 row affected") is None
    assert parse_postgres_table("INSERT 0 1") is None
    assert parse_postgres_table("+----+\n+----+") is None


def test_bordered_table_with_unclosed_header_is_none() -> None:
    assert parse_mysql_table("+----+\n| id |") is None


def test_bordered_table_fills_missing_cells() -> None:
    output = "+----+------+\n| id | name |\n+----+------+\n| 1 |\n+----+------+"

    assert parse_mysql_table(output) == [{"id": "1", "name": ""}]


def test_is_border_detects_rule_lines() -> None:
    assert is_border("+----+-------+")
    assert is_border("  +--+  ")
    assert not is_border("| id | name |")
    assert not is_border("+-")
    assert not is_border("+-x-+")


def test_column_output_uses_header_offsets() -> None:
    output = "\n".join(
        [
            "id  name   city",
            "--  -----  ------",
            "1   Alice  Berlin",
            "2   Bob    San Francisco",
        ]
    )

    rows = parse_column_output(output)

    assert rows == [
        {"id": "1", "name": "Alice", "city": "Berlin"},
        {"id": "2", "name": "Bob", "city": "San Francisco"},
    ]


def test_column_output_keeps_values_wider_than_header() -> None:
    output = "id  name   n\n--  -----  -\n1   Alice  9"

    assert parse_column_output(output) == [{"id": "1", "name": "Alice", "n": "9"}]


def test_column_output_without_rule_line() -> None:
    output = "id  name\n1   Alice\n\n2   Bob"

    assert parse_column_output(output) == [
        {"id": "1", "name": "Alice"},
        {"id": "2", "name": "Bob"},
    ]


def test_column_output_short_rows_yield_empty_values() -> None:
    output = "id  name\n--  ----\n1"

    assert parse_column_output(output) == [{"id": "1", "name": ""}]


def test_column_output_header_only_is_empty_list() -> None:
    assert parse_column_output("id  name\n--  ----") == []


def test_column_output_requires_two_lines() -> None:
    assert parse_column_output("hello") is None
    assert parse_column_output("   \nvalue") is None


def test_is_column_rule() -> None:
    assert is_column_rule("--  -----")
    assert not is_column_rule("")
    assert not is_column_rule("1   Alice")
