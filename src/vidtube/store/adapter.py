"""Document-style access to the relational tables.

Records come back as plain dicts keyed by camelCase field names with the
primary key under ``_id``. Array fields (a playlist's ``videos``, a user's
``watchHistory``) are backed by link tables and surface as ordered ID lists.
"""
import enum
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Type

from pydantic.alias_generators import to_camel, to_snake
from sqlalchemy import delete, func, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import SQLModel, Session, select

from vidtube.db.models import (
    Comment,
    Like,
    Playlist,
    PlaylistVideo,
    Subscription,
    Tweet,
    User,
    Video,
    WatchHistory,
    utc_now,
)

logger = logging.getLogger("store")

Document = Dict[str, Any]
Filter = Mapping[str, Any]
Sort = Sequence[Tuple[str, int]]


class StoreError(Exception):
    """Base class for failures raised by the document store."""


class RecordNotFound(StoreError):
    def __init__(self, collection: str, record_id: Any):
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"No record {record_id!r} in {collection}")


class DuplicateRecord(StoreError):
    def __init__(self, collection: str, detail: str = ""):
        self.collection = collection
        super().__init__(f"Duplicate record in {collection}: {detail}".rstrip(": "))


class StoreUnavailable(StoreError):
    pass


@dataclass(frozen=True)
class ArrayField:
    link_model: Type[SQLModel]
    parent_key: str
    value_key: str


@dataclass(frozen=True)
class Collection:
    name: str
    model: Type[SQLModel]
    arrays: Mapping[str, ArrayField] = field(default_factory=dict)
    hidden: Tuple[str, ...] = ()


COLLECTIONS: Dict[str, Collection] = {
    c.name: c
    for c in (
        Collection(
            "users",
            User,
            arrays={"watchHistory": ArrayField(WatchHistory, "user_id", "video_id")},
            hidden=("password", "refreshToken"),
        ),
        Collection("videos", Video),
        Collection("comments", Comment),
        Collection("likes", Like),
        Collection("subscriptions", Subscription),
        Collection("tweets", Tweet),
        Collection(
            "playlists",
            Playlist,
            arrays={"videos": ArrayField(PlaylistVideo, "playlist_id", "video_id")},
        ),
    )
}


def to_attribute(field_name: str) -> str:
    if field_name == "_id":
        return "id"
    return to_snake(field_name)


def to_field(attribute: str) -> str:
    if attribute == "id":
        return "_id"
    return to_camel(attribute)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class DocumentStore:
    """Collection-oriented CRUD over a SQLModel session.

    Each mutating call commits on its own unless it runs inside
    ``transaction()``, which commits the whole group once. The atomic primitives (``toggle``, ``increment``,
    ``add_to_set``) are the only way uniqueness-sensitive state changes.
    """

    def __init__(self, session: Session, collections: Mapping[str, Collection] = COLLECTIONS):
        self.session = session
        self.collections = collections
        self._transaction_depth = 0

    # -- transactions ------------------------------------------------------

    @contextmanager
    def transaction(self):
        """Group several writes so they commit together or not at all.

        Writes inside the block only flush; the outermost block commits on
        exit and rolls everything back if any write raises.
        """
        self._transaction_depth += 1
        try:
            yield self
            if self._transaction_depth == 1:
                self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateRecord("transaction", str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error(f"Store failure while committing transaction: {exc}")
            raise StoreUnavailable("Database error during transaction") from exc
        except Exception:
            self.session.rollback()
            raise
        finally:
            self._transaction_depth -= 1

    def _commit(self) -> None:
        if self._transaction_depth:
            self.session.flush()
        else:
            self.session.commit()

    # -- helpers -----------------------------------------------------------

    def _collection(self, name: str) -> Collection:
        try:
            return self.collections[name]
        except KeyError:
            raise ValueError(f"Unknown collection {name!r}") from None

    def _column(self, coll: Collection, field_name: str):
        attribute = to_attribute(field_name)
        if attribute not in coll.model.model_fields:
            raise ValueError(f"Unknown field {field_name!r} for collection {coll.name!r}")
        return getattr(coll.model, attribute)

    def _conditions(self, coll: Collection, filter: Optional[Filter]) -> list:
        conditions = []
        for field_name, expected in (filter or {}).items():
            column = self._column(coll, field_name)
            if isinstance(expected, Mapping):
                for op, operand in expected.items():
                    if op == "$in":
                        conditions.append(column.in_(list(operand)))
                    elif op == "$ne":
                        conditions.append(column != operand)
                    elif op == "$contains":
                        conditions.append(column.ilike(f"%{_escape_like(str(operand))}%", escape="\\"))
                    else:
                        raise ValueError(f"Unsupported filter operator {op!r}")
            else:
                conditions.append(column == expected)
        return conditions

    def _attributes(self, coll: Collection, values: Mapping[str, Any]) -> Dict[str, Any]:
        attributes = {}
        for field_name, value in values.items():
            if field_name in coll.arrays:
                raise ValueError(f"Array field {field_name!r} must be changed with add_to_set/pull")
            attributes[self._column(coll, field_name).key] = value
        return attributes

    def _documents(self, coll: Collection, rows: Iterable[SQLModel], include_hidden: bool = False) -> List[Document]:
        documents = []
        for row in rows:
            document = {}
            for attribute, value in row.model_dump().items():
                name = to_field(attribute)
                if name in coll.hidden and not include_hidden:
                    continue
                document[name] = value.value if isinstance(value, enum.Enum) else value
            documents.append(document)
        if documents and coll.arrays:
            ids = [d["_id"] for d in documents]
            for name, array in coll.arrays.items():
                members = self._array_members(array, ids)
                for document in documents:
                    document[name] = members.get(document["_id"], [])
        return documents

    def _array_members(self, array: ArrayField, parent_ids: List[Any]) -> Dict[Any, List[Any]]:
        link = array.link_model
        parent_column = getattr(link, array.parent_key)
        rows = self.session.exec(
            select(link).where(parent_column.in_(parent_ids)).order_by(link.id)
        ).all()
        members: Dict[Any, List[Any]] = {}
        for row in rows:
            members.setdefault(getattr(row, array.parent_key), []).append(getattr(row, array.value_key))
        return members

    def _require(self, coll: Collection, record_id: Any) -> SQLModel:
        row = self.session.get(coll.model, record_id)
        if row is None:
            raise RecordNotFound(coll.name, record_id)
        return row

    @contextmanager
    def _guard(self, coll: Collection, operation: str):
        try:
            yield
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateRecord(coll.name, str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error(f"Store failure during {operation} on {coll.name}: {exc}")
            raise StoreUnavailable(f"Database error during {operation}") from exc

    # -- reads -------------------------------------------------------------

    def find(
        self,
        collection: str,
        filter: Optional[Filter] = None,
        sort: Optional[Sort] = None,
        skip: int = 0,
        limit: Optional[int] = None,
        include_hidden: bool = False,
    ) -> List[Document]:
        coll = self._collection(collection)
        statement = select(coll.model).where(*self._conditions(coll, filter))
        for field_name, direction in sort or ():
            column = self._column(coll, field_name)
            statement = statement.order_by(column.desc() if direction < 0 else column.asc())
        # stable order between pages
        statement = statement.order_by(coll.model.id)
        if skip:
            statement = statement.offset(skip)
        if limit is not None:
            statement = statement.limit(limit)
        with self._guard(coll, "find"):
            rows = self.session.exec(statement).all()
            return self._documents(coll, rows, include_hidden)

    def find_one(self, collection: str, filter: Filter, include_hidden: bool = False) -> Optional[Document]:
        found = self.find(collection, filter, limit=1, include_hidden=include_hidden)
        return found[0] if found else None

    def find_by_id(self, collection: str, record_id: Any, include_hidden: bool = False) -> Optional[Document]:
        coll = self._collection(collection)
        with self._guard(coll, "find_by_id"):
            row = self.session.get(coll.model, record_id)
            if row is None:
                return None
            return self._documents(coll, [row], include_hidden)[0]

    def count(self, collection: str, filter: Optional[Filter] = None) -> int:
        coll = self._collection(collection)
        statement = select(func.count()).select_from(coll.model).where(*self._conditions(coll, filter))
        with self._guard(coll, "count"):
            return self.session.exec(statement).one()

    def sum(self, collection: str, field_name: str, filter: Optional[Filter] = None) -> int:
        coll = self._collection(collection)
        column = self._column(coll, field_name)
        statement = select(func.coalesce(func.sum(column), 0)).where(*self._conditions(coll, filter))
        with self._guard(coll, "sum"):
            return self.session.exec(statement).one()

    # -- writes ------------------------------------------------------------

    def insert(self, collection: str, values: Mapping[str, Any]) -> Document:
        coll = self._collection(collection)
        row = coll.model(**self._attributes(coll, values))
        with self._guard(coll, "insert"):
            self.session.add(row)
            self._commit()
            self.session.refresh(row)
            return self._documents(coll, [row])[0]

    def update_by_id(self, collection: str, record_id: Any, values: Mapping[str, Any]) -> Document:
        coll = self._collection(collection)
        attributes = self._attributes(coll, values)
        with self._guard(coll, "update"):
            row = self._require(coll, record_id)
            for attribute, value in attributes.items():
                setattr(row, attribute, value)
            if "updated_at" in coll.model.model_fields:
                row.updated_at = utc_now()
            self.session.add(row)
            self._commit()
            self.session.refresh(row)
            return self._documents(coll, [row])[0]

    def delete_by_id(self, collection: str, record_id: Any) -> Document:
        coll = self._collection(collection)
        with self._guard(coll, "delete"):
            row = self._require(coll, record_id)
            document = self._documents(coll, [row])[0]
            for array in coll.arrays.values():
                self.session.exec(
                    delete(array.link_model).where(getattr(array.link_model, array.parent_key) == record_id)
                )
            self.session.delete(row)
            self._commit()
            return document

    def delete_many(self, collection: str, filter: Filter) -> int:
        coll = self._collection(collection)
        if coll.arrays:
            raise ValueError(f"delete_many is not supported on {collection}")
        statement = delete(coll.model).where(*self._conditions(coll, filter))
        with self._guard(coll, "delete_many"):
            result = self.session.exec(statement)
            self._commit()
            return result.rowcount

    # -- atomic primitives -------------------------------------------------

    def toggle(self, collection: str, match: Mapping[str, Any]) -> Optional[Document]:
        """Delete the record matching ``match`` or create it if there is none.

        Returns the created record, or None when one was removed. The delete
        runs first as a single statement; the unique constraint on the link
        columns decides any insert race, and the loser returns the winner's row.
        """
        coll = self._collection(collection)
        statement = delete(coll.model).where(*self._conditions(coll, match))
        with self._guard(coll, "toggle"):
            removed = self.session.exec(statement).rowcount
            self._commit()
        if removed:
            return None
        try:
            return self.insert(collection, match)
        except DuplicateRecord:
            logger.info(f"Concurrent toggle on {collection} resolved to existing record")
            return self.find_one(collection, match)

    def increment(self, collection: str, record_id: Any, field_name: str, amount: int = 1) -> None:
        coll = self._collection(collection)
        column = self._column(coll, field_name)
        statement = (
            update(coll.model)
            .where(coll.model.id == record_id)
            .values({column.key: column + amount})
        )
        with self._guard(coll, "increment"):
            updated = self.session.exec(statement).rowcount
            self._commit()
            # loaded rows must not keep the pre-increment value
            self.session.expire_all()
        if not updated:
            raise RecordNotFound(coll.name, record_id)

    def _array(self, coll: Collection, field_name: str) -> ArrayField:
        try:
            return coll.arrays[field_name]
        except KeyError:
            raise ValueError(f"{field_name!r} is not an array field of {coll.name!r}") from None

    def add_to_set(self, collection: str, record_id: Any, field_name: str, value: Any) -> bool:
        """Append ``value`` unless already present. Returns True if appended."""
        coll = self._collection(collection)
        array = self._array(coll, field_name)
        with self._guard(coll, "add_to_set"):
            self._require(coll, record_id)
        try:
            with self._guard(coll, "add_to_set"):
                self.session.add(array.link_model(**{array.parent_key: record_id, array.value_key: value}))
                self._commit()
        except DuplicateRecord:
            return False
        return True

    def pull(self, collection: str, record_id: Any, field_name: str, value: Any) -> bool:
        """Remove ``value`` from the array. Returns True if it was a member."""
        coll = self._collection(collection)
        array = self._array(coll, field_name)
        link = array.link_model
        statement = delete(link).where(
            getattr(link, array.parent_key) == record_id,
            getattr(link, array.value_key) == value,
        )
        with self._guard(coll, "pull"):
            self._require(coll, record_id)
            removed = self.session.exec(statement).rowcount
            self._commit()
        return removed > 0

    def pull_all(self, collection: str, field_name: str, value: Any) -> int:
        """Remove ``value`` from the array of every record. Returns how many lost it."""
        coll = self._collection(collection)
        array = self._array(coll, field_name)
        link = array.link_model
        statement = delete(link).where(getattr(link, array.value_key) == value)
        with self._guard(coll, "pull_all"):
            removed = self.session.exec(statement).rowcount
            self._commit()
        return removed
