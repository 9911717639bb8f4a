"""Carimbo admin.

Stamp balances and purchases are read-only here: they only change through
the ledger. Coupons can only be marked as used.
"""

from django.contrib import admin, messages
from django.utils.html import format_html

from carimbo import clock
from carimbo.exceptions import CarimboError
from carimbo.models import Client, Coupon, Purchase
from carimbo.services import coupon as coupon_service


# ===========================================
# Client Admin
# ===========================================


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = [
        "formatted_cpf",
        "name",
        "phone",
        "email",
        "stamps_progress",
        "last_purchase_at",
    ]
    search_fields = ["cpf", "name", "email", "phone"]
    readonly_fields = ["current_stamps", "last_purchase_at", "created_at", "updated_at"]

    fieldsets = [
        ("Identification", {"fields": ["cpf", "name", "birth_date"]}),
        ("Contact", {"fields": ["phone", "email"]}),
        ("Stamp card", {"fields": ["current_stamps", "last_purchase_at"]}),
        ("Timestamps", {"fields": ["created_at", "updated_at"], "classes": ["collapse"]}),
    ]

    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return ["cpf", *self.readonly_fields]
        return self.readonly_fields

    def formatted_cpf(self, obj):
        return obj.formatted_cpf

    formatted_cpf.short_description = "CPF"

    def stamps_progress(self, obj):
        return format_html(
            "{}/{} ({}%)",
            obj.current_stamps,
            obj.current_stamps + obj.stamps_remaining,
            obj.stamps_progress_percent,
        )

    stamps_progress.short_description = "Carimbos"


# ===========================================
# Purchase Admin
# ===========================================


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = ["created_at", "client_cpf", "amount", "stamps_generated"]
    search_fields = ["client_cpf"]
    readonly_fields = ["client_cpf", "amount", "stamps_generated", "created_at"]
    date_hierarchy = "created_at"
    ordering = ["-created_at"]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ===========================================
# Coupon Admin
# ===========================================


@admin.action(description="Marcar como usado")
def mark_used(modeladmin, request, queryset):
    redeemed = 0
    for coupon_id in queryset.values_list("pk", flat=True):
        try:
            coupon_service.redeem(coupon_id)
            redeemed += 1
        except CarimboError as exc:
            modeladmin.message_user(request, exc.message, level=messages.ERROR)
    modeladmin.message_user(request, f"{redeemed} cupom(ns) marcado(s) como usado(s).")


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = [
        "code",
        "client_cpf",
        "discount_display",
        "issued_at",
        "valid_until",
        "status_badge",
    ]
    list_filter = ["used"]
    search_fields = ["code", "client_cpf"]
    readonly_fields = [
        "client_cpf",
        "code",
        "discount_rate",
        "used",
        "issued_at",
        "valid_until",
    ]
    date_hierarchy = "issued_at"
    ordering = ["-issued_at"]
    actions = [mark_used]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def discount_display(self, obj):
        return f"{obj.discount_percent}%"

    discount_display.short_description = "Desconto"

    def status_badge(self, obj):
        if obj.used:
            color, text = "#6c757d", "Usado"
        elif obj.is_active(clock.now()):
            color, text = "#28a745", "Ativo"
        else:
            color, text = "#dc3545", "Expirado"
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:3px; font-size:11px;">{}</span>',
            color,
            text,
        )

    status_badge.short_description = "Status"
