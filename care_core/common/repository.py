# care_core/common/repository.py
from __future__ import annotations

import logging
from typing import Any, Generic, Optional, Type, TypeVar

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError, IntegrityError, models
from django.db.models import QuerySet

from care_core.common.api.exceptions import ConflictError, InternalFailure

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=models.Model)


class ModelRepository(Generic[M]):
    """
    Storage access for one resource type.

    Capability set: create, get_by_id, get_by_key, list, update, delete.
    `key_field` is the natural key used by get_by_key (defaults to the primary key).
    Driver errors surface as ConflictError (integrity) or InternalFailure (anything else).
    """

    def __init__(self, model: Type[M], *, key_field: str = "pk", select_related: tuple[str, ...] = ()):
        self.model = model
        self.key_field = key_field
        self.select_related = select_related

    def _base(self) -> QuerySet[M]:
        qs = self.model._default_manager.all()
        if self.select_related:
            qs = qs.select_related(*self.select_related)
        return qs

    def _fetch(self, **lookup) -> Optional[M]:
        try:
            return self._base().filter(**lookup).first()
        except (ValueError, TypeError, DjangoValidationError):
            # malformed key (e.g. "abc" for an integer id) cannot match anything
            return None
        except DatabaseError as e:
            logger.exception("Lookup failed on %s", self.model.__name__)
            raise InternalFailure(f"Could not read {self.model.__name__}.") from e

    def list(self) -> QuerySet[M]:
        return self._base().order_by("pk")

    def get_by_id(self, pk: Any) -> Optional[M]:
        return self._fetch(pk=pk)

    def get_by_key(self, key: Any) -> Optional[M]:
        return self._fetch(**{self.key_field: key})

    def key_of(self, obj: M) -> Any:
        value: Any = obj
        for part in self.key_field.split("__"):
            value = getattr(value, part)
        return value

    def create(self, **fields) -> M:
        obj = self.model(**fields)
        return self.save(obj, force_insert=True)

    def update(self, obj: M, **fields) -> M:
        """Full replace: every given field is overwritten."""
        for name, value in fields.items():
            setattr(obj, name, value)
        return self.save(obj)

    def save(self, obj: M, **kwargs) -> M:
        try:
            obj.save(**kwargs)
        except IntegrityError as e:
            raise ConflictError(f"{self.model.__name__} conflicts with an existing record.") from e
        except DatabaseError as e:
            logger.exception("Save failed on %s", self.model.__name__)
            raise InternalFailure(f"Could not save {self.model.__name__}.") from e
        return obj

    def delete(self, obj: M) -> None:
        try:
            obj.delete()
        except IntegrityError as e:
            raise ConflictError(f"{self.model.__name__} is still referenced by other records.") from e
        except DatabaseError as e:
            logger.exception("Delete failed on %s", self.model.__name__)
            raise InternalFailure(f"Could not delete {self.model.__name__}.") from e
