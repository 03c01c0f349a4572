# sales/models/document_sequence.py

from django.db import models


class DocumentSequence(models.Model):
    """
    Monotonic counter row per document-number prefix (e.g. "INV-202401-").

    The allocator locks this row (SELECT ... FOR UPDATE) inside the finalize
    transaction, which serialises concurrent allocations for one period.
    """

    prefix = models.CharField(max_length=32, unique=True)
    last_value = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["prefix"]

    def __str__(self):
        return f"{self.prefix}{self.last_value}"
