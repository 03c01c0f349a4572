# inventory/models/mortality_record.py

import uuid

from django.db import models

from .site import Site


class MortalityRecord(models.Model):
    """
    Birds that died on site.

    The cost is never stored here: it is valued on demand from the nearest
    preceding IncomingBatch at the same site (finance.services.loss_valuation).
    """

    CLAIMABLE = "CLAIMABLE"
    NOT_CLAIMABLE = "NOT_CLAIMABLE"

    CLAIM_STATUS_CHOICES = [
        (CLAIMABLE, "Claimable"),
        (NOT_CLAIMABLE, "Not claimable"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    site = models.ForeignKey(
        Site,
        on_delete=models.PROTECT,
        related_name="mortality_records",
    )

    date = models.DateField()
    bird_count = models.PositiveIntegerField()
    claim_status = models.CharField(
        max_length=16,
        choices=CLAIM_STATUS_CHOICES,
        default=NOT_CLAIMABLE,
    )
    note = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(bird_count__gt=0),
                name="mortality_bird_count_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["site", "date"], name="inv_mortality_site_date_idx"),
            models.Index(fields=["date", "claim_status"], name="inv_mortality_date_claim_idx"),
        ]

    @property
    def is_claimable(self) -> bool:
        return self.claim_status == self.CLAIMABLE

    def __str__(self):
        return f"{self.site} | {self.date} | {self.bird_count} ({self.claim_status})"
