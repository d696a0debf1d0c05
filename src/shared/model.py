"""Mapping between Protean aggregates and MongoDB documents."""

from datetime import UTC, datetime
from uuid import uuid4

from protean.utils.reflection import declared_fields


def new_id() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    """Current UTC time at millisecond precision, the resolution BSON dates keep."""
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def to_document(aggregate) -> dict:
    """Serialize an aggregate with its identity stored as ``_id``.

    Timestamps stay native ``datetime`` values so the store can sort and
    range-query them; everything else goes through the field's ``as_dict``.
    """
    document = {}
    for name, field in declared_fields(aggregate).items():
        value = getattr(aggregate, name, None)
        document[name] = value if isinstance(value, datetime) else field.as_dict(value)
    document["_id"] = document.pop("id")
    return document


def from_document(cls, document: dict):
    """Rebuild an aggregate of type ``cls`` from a stored document."""
    fields = declared_fields(cls)
    data = {name: value for name, value in document.items() if name in fields}
    data["id"] = document["_id"]
    return cls(**data)
