"""
Typed predicate algebra over patient roster attributes.

A predicate is one of:
- FieldCompare: a single comparison on a field of one entity
- And / Or: n-ary conjunction / disjunction
- Not: negation

Predicates are plain immutable values; the compiler turns them into
SQLAlchemy clauses against the joined roster models.
"""

import enum
from dataclasses import dataclass
from typing import Any, FrozenSet, Tuple, Union


class Entity(enum.Enum):
    """Record set a field lives on."""
    PATIENT = "patient"
    GENERAL_INFO = "general_info"
    MEDICAL_INFO = "medical_info"
    PDB_INFO = "pdb_info"


class Op(enum.Enum):
    EQ = "eq"
    NE = "ne"
    LT = "lt"
    GT = "gt"
    BETWEEN = "between"  # value = (first, second), literal SQL BETWEEN order
    IS_NULL = "is_null"
    NOT_NULL = "not_null"
    REGEX = "regex"  # case-sensitive
    IREGEX = "iregex"  # case-insensitive
    ICONTAINS = "icontains"  # case-insensitive substring
    IN = "in"
    NOT_IN = "not_in"


@dataclass(frozen=True)
class Field:
    entity: Entity
    name: str

    def __str__(self) -> str:
        return f"{self.entity.value}.{self.name}"


@dataclass(frozen=True)
class FieldCompare:
    field: Field
    op: Op
    # A literal, a tuple (BETWEEN / IN), or another Field for column-to-column
    value: Any = None


@dataclass(frozen=True)
class And:
    items: Tuple["Predicate", ...]


@dataclass(frozen=True)
class Or:
    items: Tuple["Predicate", ...]


@dataclass(frozen=True)
class Not:
    item: "Predicate"


Predicate = Union[FieldCompare, And, Or, Not]

# Empty conjunction: matches everything.
TRUE = And(())


def and_(*items: Predicate) -> Predicate:
    """Conjunction that flattens nested Ands and drops TRUE."""
    flat = []
    for item in items:
        if isinstance(item, And):
            flat.extend(item.items)
        else:
            flat.append(item)
    if len(flat) == 1:
        return flat[0]
    return And(tuple(flat))


def or_(*items: Predicate) -> Predicate:
    """Disjunction that flattens nested Ors."""
    flat = []
    for item in items:
        if isinstance(item, Or):
            flat.extend(item.items)
        else:
            flat.append(item)
    if len(flat) == 1:
        return flat[0]
    return Or(tuple(flat))


def not_(item: Predicate) -> Predicate:
    return Not(item)


# -----------------------------------------------------------------------------
# Field shorthands
# -----------------------------------------------------------------------------

def patient(name: str) -> Field:
    return Field(Entity.PATIENT, name)


def general(name: str) -> Field:
    return Field(Entity.GENERAL_INFO, name)


def medical(name: str) -> Field:
    return Field(Entity.MEDICAL_INFO, name)


def pdb(name: str) -> Field:
    return Field(Entity.PDB_INFO, name)


def eq(field: Field, value: Any) -> FieldCompare:
    return FieldCompare(field, Op.EQ, value)


def ne(field: Field, value: Any) -> FieldCompare:
    return FieldCompare(field, Op.NE, value)


def lt(field: Field, value: Any) -> FieldCompare:
    return FieldCompare(field, Op.LT, value)


def gt(field: Field, value: Any) -> FieldCompare:
    return FieldCompare(field, Op.GT, value)


def between(field: Field, first: Any, second: Any) -> FieldCompare:
    return FieldCompare(field, Op.BETWEEN, (first, second))


def is_null(field: Field) -> FieldCompare:
    return FieldCompare(field, Op.IS_NULL)


def not_null(field: Field) -> FieldCompare:
    return FieldCompare(field, Op.NOT_NULL)


def regex(field: Field, pattern: str) -> FieldCompare:
    return FieldCompare(field, Op.REGEX, pattern)


def iregex(field: Field, pattern: str) -> FieldCompare:
    return FieldCompare(field, Op.IREGEX, pattern)


def icontains(field: Field, text: str) -> FieldCompare:
    return FieldCompare(field, Op.ICONTAINS, text)


def in_(field: Field, values) -> FieldCompare:
    return FieldCompare(field, Op.IN, tuple(values))


def not_in(field: Field, values) -> FieldCompare:
    return FieldCompare(field, Op.NOT_IN, tuple(values))


def referenced_entities(predicate: Predicate) -> FrozenSet[Entity]:
    """Entities whose fields the predicate touches."""
    if isinstance(predicate, FieldCompare):
        found = {predicate.field.entity}
        if isinstance(predicate.value, Field):
            found.add(predicate.value.entity)
        return frozenset(found)
    if isinstance(predicate, Not):
        return referenced_entities(predicate.item)
    if isinstance(predicate, (And, Or)):
        found = set()
        for item in predicate.items:
            found |= referenced_entities(item)
        return frozenset(found)
    raise TypeError(f"Not a predicate: {predicate!r}")
