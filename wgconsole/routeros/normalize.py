from dataclasses import dataclass
from typing import Any, List, Union


@dataclass(frozen=True)
class Rows:
    items: List[Any]


@dataclass(frozen=True)
class Malformed:
    value: Any


def decode_rows(data: Any) -> Union[Rows, Malformed]:
    """Tag a proxy ``data`` field as a row sequence or as malformed."""
    if isinstance(data, (list, tuple)):
        return Rows(list(data))
    return Malformed(data)


def rows_or_empty(data: Any) -> List[Any]:
    decoded = decode_rows(data)
    if isinstance(decoded, Rows):
        return decoded.items
    # Malformed payloads are shown as an empty collection, not reported
    return []
