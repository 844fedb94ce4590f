"""
Translate roster predicates into SQLAlchemy clauses.

Fields resolve against the joined roster models: Patient, general info,
medical info and PDB info. Regex matching uses ``regexp_match`` (``~`` on
PostgreSQL, a Python REGEXP function on SQLite); case-insensitive regex
uses the inline ``(?i)`` option understood by both engines.
"""

from sqlalchemy import String, and_, cast, false, not_, or_, true

from roster.errors import UpstreamError
from roster.models import Patient, PatientGeneralInfo, PatientMedicalInfo, PatientPDBInfo
from roster.query.predicates import And, Entity, Field, FieldCompare, Not, Op, Or

ENTITY_MODELS = {
    Entity.PATIENT: Patient,
    Entity.GENERAL_INFO: PatientGeneralInfo,
    Entity.MEDICAL_INFO: PatientMedicalInfo,
    Entity.PDB_INFO: PatientPDBInfo,
}


def resolve_column(field: Field):
    """Mapped column for ``field``; unknown columns are a store error."""
    model = ENTITY_MODELS[field.entity]
    if field.name not in model.__table__.columns:
        raise UpstreamError(
            f"Unknown column {field}",
            context={"entity": field.entity.value, "field": field.name},
        )
    return getattr(model, field.name)


def _as_text(column):
    if isinstance(column.type, String):
        return column
    return cast(column, String)


def _compile_compare(node: FieldCompare):
    column = resolve_column(node.field)
    value = node.value
    if isinstance(value, Field):
        value = resolve_column(value)

    op = node.op
    if op is Op.EQ:
        return column.is_(None) if value is None else column == value
    if op is Op.NE:
        return column.is_not(None) if value is None else column != value
    if op is Op.LT:
        return column < value
    if op is Op.GT:
        return column > value
    if op is Op.BETWEEN:
        first, second = value
        return column.between(first, second)
    if op is Op.IS_NULL:
        return column.is_(None)
    if op is Op.NOT_NULL:
        return column.is_not(None)
    if op is Op.REGEX:
        return _as_text(column).regexp_match(value)
    if op is Op.IREGEX:
        return _as_text(column).regexp_match(f"(?i){value}")
    if op is Op.ICONTAINS:
        return _as_text(column).icontains(value, autoescape=True)
    if op is Op.IN:
        return column.in_(value)
    if op is Op.NOT_IN:
        return column.not_in(value)
    raise ValueError(f"Unsupported operator: {op}")


def compile_predicate(predicate):
    """Build the SQLAlchemy clause for ``predicate``."""
    if isinstance(predicate, FieldCompare):
        return _compile_compare(predicate)
    if isinstance(predicate, And):
        if not predicate.items:
            return true()
        return and_(*[compile_predicate(item) for item in predicate.items])
    if isinstance(predicate, Or):
        if not predicate.items:
            return false()
        return or_(*[compile_predicate(item) for item in predicate.items])
    if isinstance(predicate, Not):
        return not_(compile_predicate(predicate.item))
    raise TypeError(f"Not a predicate: {predicate!r}")
