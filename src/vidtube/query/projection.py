from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from vidtube.store.adapter import Document


def lookup(record: Mapping[str, Any], path: str) -> Any:
    """Follow a dotted path; any missing or None step yields None."""
    value: Any = record
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def flatten(record: Mapping[str, Any], fields: Mapping[str, str]) -> Document:
    """Build a flat record from ``{output key: dotted source path}``.

    Unlisted fields are dropped.
    """
    return {key: lookup(record, path) for key, path in fields.items()}


def expand(record: Mapping[str, Any], path: str) -> List[Document]:
    """One row per element attached at ``path``.

    A single attached object counts as one element; None or an empty list
    produce no rows at all.
    """
    attached = record.get(path)
    if attached is None:
        return []
    elements = attached if isinstance(attached, (list, tuple)) else [attached]
    return [{**record, path: element} for element in elements]


@dataclass(frozen=True)
class Projection:
    fields: Mapping[str, str]
    unwind: Optional[str] = None


def project(records: Iterable[Mapping[str, Any]], projection: Projection) -> List[Document]:
    rows: List[Document] = []
    for record in records:
        expanded = expand(record, projection.unwind) if projection.unwind else [record]
        rows.extend(flatten(row, projection.fields) for row in expanded)
    return rows
