import typing as t

from django.db import models, transaction
from pydantic import BaseModel

ModelT = t.TypeVar("ModelT", bound=models.Model)


@transaction.atomic
def update_db_instance(instance: ModelT, payload: BaseModel | None = None, **fields: t.Any) -> ModelT:
    """Apply a partial update to a freshly locked copy of ``instance``.

    Only the fields set on ``payload`` are written, plus any keyword overrides.
    The row is re-read with ``select_for_update`` and the updated copy is returned.
    """
    locked = type(instance)._default_manager.select_for_update().get(pk=instance.pk)
    changes = payload.model_dump(exclude_unset=True) if payload is not None else {}
    changes.update(fields)
    for name, value in changes.items():
        setattr(locked, name, value)
    locked.save()
    return t.cast(ModelT, locked)
