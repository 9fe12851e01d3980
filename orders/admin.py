from django.contrib import admin
from .models import Order

@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("order_id", "payment_method", "payment_status", "total", "created_at")
    search_fields = ("order_id",)
    list_filter = ("payment_method", "payment_status", "created_at")
    readonly_fields = ("order_id", "customer", "items", "subtotal", "shipping", "total",
                       "payment_method", "payment_status", "payment", "created_at")

    # Orders are append-only
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
