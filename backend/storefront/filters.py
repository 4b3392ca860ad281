"""
Storefront Backend — Filter Expressions
=========================================

What:  A small tagged tree describing which documents a query selects.
How:   Frozen dataclasses, one per node kind. Services build trees from HTTP
       query parameters; the document store compiles them into SQL.
Who:   Built by ProductService / OrderService, interpreted by DocumentStore.

Node kinds:
    Equals(field, value)          field == value (None matches missing fields)
    Range(field, gte, lte)        both bounds optional, applied to one field
    Contains(field, text)         case-insensitive literal substring
    Or(clauses) / And(clauses)    disjunction / conjunction
    MatchAll()                    selects everything

MongoDB-style mappings are accepted at the store boundary and converted with
parse_filter():

    {"category": "books", "price": {"$gte": 5, "$lte": 20}}
    → And((Equals("category", "books"), Range("price", gte=5, lte=20)))
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple, Union


@dataclass(frozen=True)
class MatchAll:
    pass


@dataclass(frozen=True)
class Equals:
    field: str
    value: Any


@dataclass(frozen=True)
class Range:
    field: str
    gte: Optional[float] = None
    lte: Optional[float] = None


@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match. `text` is matched literally."""

    field: str
    text: str


@dataclass(frozen=True)
class Or:
    clauses: Tuple["Filter", ...]


@dataclass(frozen=True)
class And:
    clauses: Tuple["Filter", ...]


Filter = Union[MatchAll, Equals, Range, Contains, Or, And]

FILTER_TYPES = (MatchAll, Equals, Range, Contains, Or, And)


def all_of(*clauses: Filter) -> Filter:
    """
    Conjunction of `clauses`, dropping MatchAll members.

    Returns MatchAll when nothing is left and the bare clause when only one
    remains, so callers can add conditions unconditionally.
    """
    kept = tuple(c for c in clauses if not isinstance(c, MatchAll))
    if not kept:
        return MatchAll()
    if len(kept) == 1:
        return kept[0]
    return And(kept)


def any_of(*clauses: Filter) -> Filter:
    """Disjunction of `clauses`. A MatchAll member makes the whole thing MatchAll."""
    if not clauses or any(isinstance(c, MatchAll) for c in clauses):
        return MatchAll()
    if len(clauses) == 1:
        return clauses[0]
    return Or(tuple(clauses))


# ══════════════════════════════════════════════════════════════════════════
# MongoDB-style mapping → Filter
# ══════════════════════════════════════════════════════════════════════════

_RANGE_OPERATORS = {"$gte", "$lte"}


def _parse_condition(field: str, condition: Any) -> Filter:
    if not isinstance(condition, Mapping):
        return Equals(field, condition)

    unknown = set(condition) - _RANGE_OPERATORS - {"$eq"}
    if unknown:
        raise ValueError(f"Unsupported operator(s) for field '{field}': {sorted(unknown)}")

    clauses = []
    if "$eq" in condition:
        clauses.append(Equals(field, condition["$eq"]))
    if _RANGE_OPERATORS & set(condition):
        clauses.append(Range(field, gte=condition.get("$gte"), lte=condition.get("$lte")))
    return all_of(*clauses)


def parse_filter(query: Union[Filter, Mapping[str, Any], None]) -> Filter:
    """
    Convert a MongoDB-like query mapping into a Filter tree.

    Accepts an already-built Filter (returned unchanged), None / {} (MatchAll),
    or a mapping of field conditions plus optional "$or" / "$and" lists.

    Raises:
        ValueError: unknown top-level or field operator.
    """
    if query is None:
        return MatchAll()
    if isinstance(query, FILTER_TYPES):
        return query

    clauses = []
    for key, value in query.items():
        if key == "$or":
            clauses.append(any_of(*(parse_filter(sub) for sub in value)))
        elif key == "$and":
            clauses.append(all_of(*(parse_filter(sub) for sub in value)))
        elif key.startswith("$"):
            raise ValueError(f"Unsupported top-level operator: {key}")
        else:
            clauses.append(_parse_condition(key, value))
    return all_of(*clauses)
