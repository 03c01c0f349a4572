# sales/models/customer.py

import uuid

from django.db import models


class Customer(models.Model):
    """
    Mutable customer master record.
    Deletion is blocked while any of the customer's sales still has an
    outstanding balance (sales.services.customer_service.delete_customer).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=160)
    phone = models.CharField(max_length=40, blank=True, default="")
    address = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["name"], name="sales_customer_name_idx"),
        ]

    def __str__(self):
        return self.name
