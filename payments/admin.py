# ==================== PAYMENTS/ADMIN.PY ====================
from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['id', 'booking', 'user', 'amount', 'payment_method', 'status', 'transaction_id', 'created_at']
    list_filter = ['status', 'payment_method', 'created_at']
    search_fields = ['transaction_id', 'booking__id', 'user__email']
    readonly_fields = ['payment_details', 'created_at', 'updated_at']
