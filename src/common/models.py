import typing as t
import uuid

from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base for EventFlow tables: UUID key, creation and modification stamps.

    Model validation (``full_clean``) runs on every save, including saves from the admin.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True, db_index=True)

    class Meta:
        abstract = True

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Validate the instance, then save it."""
        self.full_clean()
        super().save(*args, **kwargs)
