# detailing/utils/ids.py
from typing import Iterable, List
from uuid import UUID

from detailing.core.exceptions import ValidationError


def as_uuid(value) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise ValidationError(f"Invalid id '{value}'")


def as_uuids(values: Iterable) -> List[UUID]:
    return [as_uuid(value) for value in values or []]
