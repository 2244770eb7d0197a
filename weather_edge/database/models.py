"""
Tortoise ORM models for the durable key-value backend.
"""
from tortoise import fields
from tortoise.models import Model


class KVEntry(Model):
    """One key-value pair with an optional absolute expiry."""

    key = fields.CharField(max_length=255, pk=True)
    value = fields.TextField()

    # Cache metadata
    expires_at = fields.DatetimeField(null=True, index=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "kv_entries"

    def __str__(self):
        return f"KVEntry(key={self.key}, expires_at={self.expires_at})"
