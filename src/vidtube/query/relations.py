"""Attach related records to a base result set.

A :class:`RelationSpec` is an equality join from a local field (one ID or an
ordered list of IDs) to a key of another collection. Foreign records are
fetched in one batch per spec, their own nested specs are resolved first, and
only the projected fields are kept on what gets attached.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from vidtube.store.adapter import Document


@dataclass(frozen=True)
class RelationSpec:
    local_field: str
    foreign_collection: str
    output_field: Optional[str] = None
    projected_fields: Tuple[str, ...] = ()
    foreign_key: str = "_id"
    nested: Tuple["RelationSpec", ...] = ()

    @property
    def target(self) -> str:
        return self.output_field or self.local_field


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _keep(document: Document, fields: Sequence[str]) -> Document:
    if not fields:
        return dict(document)
    return {f: document[f] for f in fields if f in document}


def _referenced_ids(records: Sequence[Document], local_field: str) -> List[Any]:
    ids: List[Any] = []
    seen = set()
    for record in records:
        value = record.get(local_field)
        values = value if _is_sequence(value) else [value]
        for item in values:
            if item is not None and item not in seen:
                seen.add(item)
                ids.append(item)
    return ids


def _fetch(store, spec: RelationSpec, ids: List[Any]) -> Dict[Any, Document]:
    if not ids:
        return {}
    found = store.find(spec.foreign_collection, {spec.foreign_key: {"$in": ids}})
    if spec.nested:
        found = resolve_relations(store, found, spec.nested)
    by_key: Dict[Any, Document] = {}
    for document in found:
        # first match wins when the foreign key is not unique
        by_key.setdefault(document.get(spec.foreign_key), _keep(document, spec.projected_fields))
    return by_key


def resolve_relations(store, records: Sequence[Document], specs: Sequence[RelationSpec]) -> List[Document]:
    """Return copies of ``records`` with every spec's output field attached.

    A single ID resolves to one projected record or None when nothing
    matches. A list of IDs resolves to a list in the same order, skipping IDs
    with no match. ``records`` is never modified.
    """
    resolved = [dict(record) for record in records]
    for spec in specs:
        matches = _fetch(store, spec, _referenced_ids(resolved, spec.local_field))
        for record in resolved:
            value = record.get(spec.local_field)
            if _is_sequence(value):
                record[spec.target] = [dict(matches[i]) for i in value if i in matches]
            elif value is not None and value in matches:
                record[spec.target] = dict(matches[value])
            else:
                record[spec.target] = None
    return resolved
