"""
Derivation of physical resource IDs for bootstrapped data.

The physical resource ID is what CloudFormation uses to decide whether a resource was replaced: the same inputs must
always produce the same ID, and a change of the identifying content (SQL text, item keys, scripts) must produce a
different one. Content hashes are MD5 hex digests, which keeps IDs stable across deployments of earlier releases.
"""

from typing import Any, Iterable, Optional, Union

from databootstrap.constants import INLINE_QUERY_ID_PREFIX, PHYSICAL_ID_HASH_LENGTH
from databootstrap.utils.strings import md5_of_parts


def truncated_hex(*parts: Union[str, bytes], length: int = PHYSICAL_ID_HASH_LENGTH) -> str:
    """Content hash over all ``parts`` in order, as a hex string of at most ``length`` characters."""
    return md5_of_parts(parts)[:length]


def stored_query_id(query_id: str) -> str:
    # stored query IDs are unique within the account already
    return query_id


def inline_statements_id(statements: Iterable[str]) -> str:
    # no separator: ["ab", "c"] and ["a", "bc"] share an ID, matching IDs of earlier releases
    return INLINE_QUERY_ID_PREFIX + truncated_hex(*statements)


def kv_item_id(
    table_name: str,
    partition_value: Any,
    sort_value: Any = None,
    store_name: Optional[str] = None,
) -> str:
    """
    ID of a single key-value item, in the format ``[store:]table:partitionValue[:sortValue]``.
    """
    parts = [table_name, partition_value]
    if store_name:
        parts.insert(0, store_name)
    if sort_value is not None:
        parts.append(sort_value)
    return ":".join(str(part) for part in parts)


def relational_bootstrap_id(database_name: str, schema_script: str, data_script: str) -> str:
    return f"{database_name}-{truncated_hex(schema_script, data_script)}"
