# inventory/models/site.py

import uuid

from django.db import models


class Site(models.Model):
    """
    A physical location / supplier relationship.
    The unit of stock accounting: every live-bird movement belongs to one site.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=120, unique=True)
    address = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name
