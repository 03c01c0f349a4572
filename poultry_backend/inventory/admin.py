# inventory/admin.py

from django.contrib import admin

from inventory.models import (
    IncomingBatch,
    LiveShipment,
    MortalityRecord,
    ProcessedShipment,
    ProcessedShipmentItem,
    Site,
)


@admin.register(Site)
class SiteAdmin(admin.ModelAdmin):
    list_display = ("name", "address", "created_at")
    search_fields = ("name",)


# ======================================================
# MOVEMENTS
# ======================================================
# Corrections to movement rows are made here; stock is always re-derived.


@admin.register(IncomingBatch)
class IncomingBatchAdmin(admin.ModelAdmin):
    list_display = (
        "site",
        "arrival_date",
        "cage_label",
        "bird_count",
        "total_weight_kg",
        "price_per_kg",
        "total_price",
        "supplier_balance",
    )
    readonly_fields = ("supplier_balance", "created_at")
    list_filter = ("site", "arrival_date")
    search_fields = ("cage_label", "site__name")


@admin.register(MortalityRecord)
class MortalityRecordAdmin(admin.ModelAdmin):
    list_display = ("site", "date", "bird_count", "claim_status")
    list_filter = ("site", "claim_status", "date")


@admin.register(LiveShipment)
class LiveShipmentAdmin(admin.ModelAdmin):
    list_display = (
        "site",
        "date",
        "customer_name",
        "bird_count",
        "grade",
        "sale_amount",
        "deduction",
        "net_amount",
    )
    readonly_fields = ("sale_amount", "net_amount", "created_at")
    list_filter = ("site", "grade", "date")
    search_fields = ("customer_name",)


class ProcessedShipmentItemInline(admin.TabularInline):
    model = ProcessedShipmentItem
    extra = 0
    readonly_fields = ("subtotal",)


@admin.register(ProcessedShipment)
class ProcessedShipmentAdmin(admin.ModelAdmin):
    list_display = ("date", "customer_name", "sale_amount", "deduction", "net_amount")
    readonly_fields = ("sale_amount", "net_amount", "created_at")
    list_filter = ("date",)
    search_fields = ("customer_name",)
    inlines = [ProcessedShipmentItemInline]
