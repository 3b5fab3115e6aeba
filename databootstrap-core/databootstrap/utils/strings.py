import hashlib
from typing import Iterable, Union

from databootstrap.constants import DEFAULT_ENCODING


def to_bytes(obj: Union[str, bytes], encoding: str = DEFAULT_ENCODING, errors="strict") -> bytes:
    """If ``obj`` is a ``str``, return
    ``obj.encode(encoding, errors)``, otherwise return ``obj``"""
    return obj.encode(encoding, errors) if isinstance(obj, str) else obj


def truncate(data: str, max_length: int = 100) -> str:
    data = str(data or "")
    return ("%s..." % data[:max_length]) if len(data) > max_length else data


def md5_of_parts(parts: Iterable[Union[str, bytes]]) -> str:
    """Hex MD5 digest of all ``parts``, fed into the hash one after another (without separators)."""
    m = hashlib.md5()
    for part in parts:
        m.update(to_bytes(part))
    return m.hexdigest()
