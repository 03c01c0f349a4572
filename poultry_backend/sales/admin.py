# sales/admin.py

from django.contrib import admin

from sales.models import (
    BalanceAdjustmentLog,
    Customer,
    DocumentSequence,
    PaymentRecord,
    Sale,
    SaleItem,
)


# ======================================================
# CUSTOMER ADMIN
# ======================================================


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "created_at")
    search_fields = ("name", "phone")


# ======================================================
# SALE ADMIN
# ======================================================


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    readonly_fields = ("description", "bird_count", "weight_kg", "unit_price", "subtotal")
    can_delete = False


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = (
        "document_number",
        "customer",
        "transaction_date",
        "category",
        "grand_total",
        "amount_paid",
        "outstanding",
        "status",
    )
    # Projection fields are written by the receivables service only.
    readonly_fields = (
        "document_number",
        "grand_total",
        "amount_paid",
        "outstanding",
        "status",
        "is_finalized",
        "finalized_at",
        "created_at",
        "updated_at",
    )
    search_fields = ("document_number", "customer__name")
    list_filter = ("status", "category", "transaction_date")
    inlines = [SaleItemInline]


# ======================================================
# APPEND-ONLY LEDGER ROWS (READ-ONLY ADMIN)
# ======================================================


class _ReadOnlyAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(PaymentRecord)
class PaymentRecordAdmin(_ReadOnlyAdmin):
    list_display = ("sale", "customer", "payment_date", "amount", "method", "recorded_by")
    search_fields = ("sale__document_number", "customer__name")
    list_filter = ("payment_date", "method")


@admin.register(BalanceAdjustmentLog)
class BalanceAdjustmentLogAdmin(_ReadOnlyAdmin):
    list_display = (
        "sale",
        "amount_paid_before",
        "amount_paid_after",
        "outstanding_after",
        "actor_name",
        "created_at",
    )
    search_fields = ("sale__document_number", "reason")
    list_filter = ("created_at",)


@admin.register(DocumentSequence)
class DocumentSequenceAdmin(_ReadOnlyAdmin):
    list_display = ("prefix", "last_value", "updated_at")
