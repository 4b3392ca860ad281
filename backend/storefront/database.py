"""
Storefront Backend — Document Store
=====================================

What:  Embedded document collections with a MongoDB-like API
       (insert / find / find_one / update / remove / count).
How:   Each collection is its own SQLite file accessed through async
       SQLAlchemy (aiosqlite driver). A single `documents` table holds one
       row per document: an insertion sequence, the store-assigned `_id` and
       the JSON body. Filter trees (storefront.filters) are compiled into
       SQL over JSON_EXTRACT.
Who:   `Datastore` is built once in the application lifespan and handed to
       the services; tests build their own over temporary files.

Table layout (identical in every collection file):
    seq   INTEGER PRIMARY KEY   insertion order, tie-breaker for sorting
    id    VARCHAR UNIQUE        the document's `_id`
    body  JSON                  every other field

Field addressing:
    "_id"       → the id column
    "price"     → JSON_EXTRACT(body, '$."price"')
    "meta.tag"  → JSON_EXTRACT(body, '$."meta"."tag"')

Concurrency:
    SQLite serializes writers per file. Updates are read-modify-write inside
    one transaction; concurrent updates of the same document are
    last-write-wins.
"""

import copy
import functools
import json
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    and_,
    delete,
    event,
    false,
    func,
    or_,
    select,
    text,
    true,
    update as sa_update,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from storefront.config import Settings
from storefront.exceptions import DatabaseError
from storefront.filters import (
    And,
    Contains,
    Equals,
    Filter,
    MatchAll,
    Or,
    Range,
    parse_filter,
)

logger = logging.getLogger(__name__)

FilterSpec = Union[Filter, Mapping[str, Any], None]

# Registered on every connection; SQLite's own lower() folds ASCII only
CASEFOLD_FUNCTION = "py_casefold"

# NaN and Infinity are not JSON; SQLite rejects bodies containing them
_json_serializer = functools.partial(json.dumps, allow_nan=False)

metadata = MetaData()

documents = Table(
    "documents",
    metadata,
    Column("seq", Integer, primary_key=True, autoincrement=True),
    Column("id", String(64), nullable=False, unique=True),
    Column("body", JSON, nullable=False),
)


# ══════════════════════════════════════════════════════════════════════════
# Filter compilation
# ══════════════════════════════════════════════════════════════════════════

def casefold(value):
    """Unicode case folding for strings; other values pass through."""
    return value.casefold() if isinstance(value, str) else value


def _register_functions(dbapi_connection, connection_record) -> None:
    dbapi_connection.create_function(CASEFOLD_FUNCTION, 1, casefold, deterministic=True)


def _json_path(field: str) -> str:
    return "$" + "".join(f'."{part}"' for part in field.split("."))


def _field(field: str, type_=None):
    if field == "_id":
        return documents.c.id
    return func.json_extract(documents.c.body, _json_path(field), type_=type_)


def _json_type_in(field: str, *json_types: str):
    if field == "_id":
        return true()
    return func.json_type(documents.c.body, _json_path(field)).in_(json_types)


def _value_type(value: Any):
    if isinstance(value, bool):
        return Boolean
    if isinstance(value, (int, float)):
        return Float
    if isinstance(value, str):
        return String
    return None


def compile_filter(expr: Filter):
    """Translate a Filter tree into a SQLAlchemy boolean clause."""
    if isinstance(expr, MatchAll):
        return true()

    if isinstance(expr, Equals):
        if expr.value is None:
            return _field(expr.field).is_(None)
        return _field(expr.field, _value_type(expr.value)) == expr.value

    if isinstance(expr, Range):
        column = _field(expr.field, Float)
        # Only numbers take part in a range; strings never compare as in-bounds
        conditions = [_json_type_in(expr.field, "integer", "real")]
        if expr.gte is not None:
            conditions.append(column >= expr.gte)
        if expr.lte is not None:
            conditions.append(column <= expr.lte)
        return and_(true(), *conditions)

    if isinstance(expr, Contains):
        folded = func.py_casefold(_field(expr.field, String), type_=String)
        return and_(
            _json_type_in(expr.field, "text"),
            folded.contains(casefold(expr.text), autoescape=True),
        )

    if isinstance(expr, Or):
        return or_(false(), *(compile_filter(c) for c in expr.clauses))

    if isinstance(expr, And):
        return and_(true(), *(compile_filter(c) for c in expr.clauses))

    raise TypeError(f"Unsupported filter node: {expr!r}")


# ══════════════════════════════════════════════════════════════════════════
# Document helpers
# ══════════════════════════════════════════════════════════════════════════

def apply_projection(doc: Dict[str, Any], projection: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Apply a MongoDB-style projection to one document.

    {"items": 0}          → every field except items
    {"name": 1}           → _id and name only
    {"name": 1, "_id": 0} → name only

    Raises:
        ValueError: inclusion and exclusion mixed (other than for _id).
    """
    if not projection:
        return doc

    include = {k for k, v in projection.items() if k != "_id" and v}
    exclude = {k for k, v in projection.items() if k != "_id" and not v}
    if include and exclude:
        raise ValueError("Cannot mix inclusion and exclusion in a projection")

    keep_id = bool(projection.get("_id", 1))
    out: Dict[str, Any] = {"_id": doc["_id"]} if keep_id and "_id" in doc else {}
    for key, value in doc.items():
        if key == "_id":
            continue
        if include and key not in include:
            continue
        if key in exclude:
            continue
        out[key] = value
    return out


def _set_path(body: Dict[str, Any], path: str, value: Any) -> None:
    *parents, leaf = path.split(".")
    target = body
    for part in parents:
        child = target.get(part)
        if not isinstance(child, dict):
            child = {}
            target[part] = child
        target = child
    target[leaf] = value


def _unset_path(body: Dict[str, Any], path: str) -> None:
    *parents, leaf = path.split(".")
    target = body
    for part in parents:
        target = target.get(part)
        if not isinstance(target, dict):
            return
    target.pop(leaf, None)


def apply_update(body: Dict[str, Any], changes: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Return a new body with `changes` applied.

    `changes` is either a modifier mapping ("$set" / "$unset") or a plain
    replacement document. The `_id` is never part of the body.
    """
    operators = [k for k in changes if k.startswith("$")]
    if not operators:
        return {k: v for k, v in changes.items() if k != "_id"}
    if len(operators) != len(changes):
        raise ValueError("Cannot mix update operators with plain fields")

    unknown = set(operators) - {"$set", "$unset"}
    if unknown:
        raise ValueError(f"Unsupported update operator(s): {sorted(unknown)}")

    new_body = copy.deepcopy(body)
    for path, value in changes.get("$set", {}).items():
        if path != "_id":
            _set_path(new_body, path, value)
    for path in changes.get("$unset", {}):
        _unset_path(new_body, path)
    return new_body


def _row_to_doc(row) -> Dict[str, Any]:
    return {"_id": row.id, **row.body}


# ══════════════════════════════════════════════════════════════════════════
# Collections
# ══════════════════════════════════════════════════════════════════════════

class DocumentStore:
    """
    One collection persisted in one SQLite file.

    Lifecycle:
        store = DocumentStore("products", "./data/db/products.db")
        await store.connect()      # creates the file and table
        ...
        await store.dispose()      # closes pooled connections

    Every public method wraps SQLAlchemy failures in DatabaseError so the
    global handler answers with a generic 500.
    """

    def __init__(self, name: str, path: str, echo: bool = False):
        self.name = name
        self.path = Path(path).resolve()
        self._engine: AsyncEngine = create_async_engine(
            f"sqlite+aiosqlite:///{self.path}",
            echo=echo,
            json_serializer=_json_serializer,
        )
        event.listen(self._engine.sync_engine, "connect", _register_functions)

    def _fail(self, operation: str, exc: Exception) -> DatabaseError:
        logger.error("Store %s: %s failed: %s", self.name, operation, str(exc))
        return DatabaseError(
            context={"collection": self.name, "operation": operation, "error": type(exc).__name__},
        )

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def connect(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
        except SQLAlchemyError as e:
            raise self._fail("connect", e) from e
        logger.info("Collection '%s' opened at %s", self.name, self.path)

    async def dispose(self) -> None:
        await self._engine.dispose()

    async def ping(self) -> bool:
        """Lightweight connectivity probe used by the health check."""
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("Store %s unreachable: %s", self.name, str(e))
            return False

    # ── Reads ─────────────────────────────────────────────────────────────

    async def find(
        self,
        filter: FilterSpec = None,
        *,
        sort: Optional[Mapping[str, int]] = None,
        skip: int = 0,
        limit: Optional[int] = None,
        projection: Optional[Mapping[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Documents matching `filter`.

        Args:
            sort:       {"field": 1} ascending / {"field": -1} descending.
                        A field no document has leaves insertion order.
            skip/limit: pagination window applied after sorting.
            projection: see apply_projection().
        """
        stmt = select(documents.c.id, documents.c.body).where(
            compile_filter(parse_filter(filter))
        )
        for field, direction in (sort or {}).items():
            column = _field(field)
            stmt = stmt.order_by(column.desc() if direction < 0 else column.asc())
        stmt = stmt.order_by(documents.c.seq)
        if skip:
            stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            async with self._engine.connect() as conn:
                rows = (await conn.execute(stmt)).all()
        except SQLAlchemyError as e:
            raise self._fail("find", e) from e

        return [apply_projection(_row_to_doc(row), projection) for row in rows]

    async def find_one(
        self,
        filter: FilterSpec = None,
        projection: Optional[Mapping[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        found = await self.find(filter, limit=1, projection=projection)
        return found[0] if found else None

    async def count(self, filter: FilterSpec = None) -> int:
        stmt = select(func.count()).select_from(documents).where(
            compile_filter(parse_filter(filter))
        )
        try:
            async with self._engine.connect() as conn:
                return (await conn.execute(stmt)).scalar_one()
        except SQLAlchemyError as e:
            raise self._fail("count", e) from e

    # ── Writes ────────────────────────────────────────────────────────────

    async def insert(self, doc: Mapping[str, Any]) -> Dict[str, Any]:
        """Store a copy of `doc`, assigning `_id` unless one is supplied."""
        doc_id = str(doc.get("_id") or uuid.uuid4().hex)
        body = {k: v for k, v in doc.items() if k != "_id"}
        try:
            async with self._engine.begin() as conn:
                await conn.execute(documents.insert().values(id=doc_id, body=body))
        except SQLAlchemyError as e:
            raise self._fail("insert", e) from e
        return {"_id": doc_id, **body}

    async def update(
        self,
        filter: FilterSpec,
        changes: Mapping[str, Any],
        *,
        multi: bool = False,
    ) -> List[Dict[str, Any]]:
        """
        Apply `changes` to the first matching document (all of them with
        multi=True) and return the updated documents. An empty list means
        nothing matched.
        """
        stmt = (
            select(documents.c.seq, documents.c.id, documents.c.body)
            .where(compile_filter(parse_filter(filter)))
            .order_by(documents.c.seq)
        )
        if not multi:
            stmt = stmt.limit(1)

        updated = []
        try:
            async with self._engine.begin() as conn:
                rows = (await conn.execute(stmt)).all()
                for row in rows:
                    body = apply_update(row.body, changes)
                    await conn.execute(
                        sa_update(documents)
                        .where(documents.c.seq == row.seq)
                        .values(body=body)
                    )
                    updated.append({"_id": row.id, **body})
        except SQLAlchemyError as e:
            raise self._fail("update", e) from e
        return updated

    async def remove(self, filter: FilterSpec, *, multi: bool = False) -> int:
        """Delete the first matching document (all with multi=True); returns the count removed."""
        stmt = (
            select(documents.c.seq)
            .where(compile_filter(parse_filter(filter)))
            .order_by(documents.c.seq)
        )
        if not multi:
            stmt = stmt.limit(1)

        try:
            async with self._engine.begin() as conn:
                seqs = list((await conn.execute(stmt)).scalars().all())
                if seqs:
                    await conn.execute(delete(documents).where(documents.c.seq.in_(seqs)))
        except SQLAlchemyError as e:
            raise self._fail("remove", e) from e
        return len(seqs)


class Datastore:
    """
    The two collections of the application, opened and closed together.

    Built by the lifespan handler from settings and stored on app.state;
    routes reach it through the dependencies in storefront.dependencies.
    """

    def __init__(self, products: DocumentStore, orders: DocumentStore):
        self.products = products
        self.orders = orders

    @classmethod
    def from_settings(cls, settings: Settings) -> "Datastore":
        echo = settings.log_level == "DEBUG"
        return cls(
            products=DocumentStore("products", settings.products_db_path, echo=echo),
            orders=DocumentStore("orders", settings.orders_db_path, echo=echo),
        )

    async def connect(self) -> None:
        await self.products.connect()
        await self.orders.connect()

    async def dispose(self) -> None:
        await self.products.dispose()
        await self.orders.dispose()
