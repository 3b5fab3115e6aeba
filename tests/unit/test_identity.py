import hashlib

from databootstrap.services.custom_resources.identity import (
    inline_statements_id,
    kv_item_id,
    relational_bootstrap_id,
    stored_query_id,
    truncated_hex,
)
from databootstrap.utils.strings import md5_of_parts


def test_stored_query_id_is_the_query_id():
    assert stored_query_id("a1b2c3d4-5678") == "a1b2c3d4-5678"


def test_inline_statements_id_is_stable():
    statements = ["create database tpch", "create external table nation (n_nationkey bigint)"]

    first = inline_statements_id(statements)
    second = inline_statements_id(list(statements))

    assert first == second
    assert first.startswith("inline-")
    assert first == "inline-" + hashlib.md5("".join(statements).encode()).hexdigest()


def test_inline_statements_id_changes_with_content():
    original = inline_statements_id(["create database tpch", "select 1"])

    assert inline_statements_id(["create database tpch", "select 2"]) != original
    assert inline_statements_id(["select 1", "create database tpch"]) != original
    assert inline_statements_id(["create database tpch"]) != original


def test_truncated_hex_length():
    assert len(truncated_hex("some text")) == 32
    assert len(truncated_hex("some text", length=8)) == 8
    assert truncated_hex("some text", length=8) == hashlib.md5(b"some text").hexdigest()[:8]


def test_kv_item_id():
    assert kv_item_id("T", "a") == "T:a"
    assert kv_item_id("T", "a", "b") == "T:a:b"
    assert kv_item_id("T", "a", store_name="ddb") == "ddb:T:a"
    assert kv_item_id("T", 1, 2, store_name="ddb") == "ddb:T:1:2"


def test_kv_item_id_is_stable_and_content_sensitive():
    assert kv_item_id("T", "a", "b") == kv_item_id("T", "a", "b")
    assert kv_item_id("T", "a", "b") != kv_item_id("T", "a", "c")
    assert kv_item_id("T", "a") != kv_item_id("U", "a")


def test_relational_bootstrap_id():
    schema = "CREATE TABLE film (id int);"
    data = "INSERT INTO film VALUES (1);"

    physical_id = relational_bootstrap_id("pagila", schema, data)

    assert physical_id == f"pagila-{hashlib.md5((schema + data).encode()).hexdigest()}"
    assert relational_bootstrap_id("pagila", schema, data) == physical_id
    assert relational_bootstrap_id("pagila", schema, data + "\n") != physical_id
    assert relational_bootstrap_id("other", schema, data) != physical_id


def test_inline_statements_are_hashed_without_separator():
    # IDs of stacks deployed with earlier releases depend on the plain concatenation
    assert inline_statements_id(["ab", "c"]) == inline_statements_id(["a", "bc"])
    assert md5_of_parts(["ab", "c"]) == hashlib.md5(b"abc").hexdigest()
