# ==================== BOOKINGS/ADMIN.PY ====================
from django.contrib import admin
from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'parking_spot', 'status', 'payment_status', 'start_time', 'end_time', 'total_cost', 'created_at']
    list_filter = ['status', 'payment_status', 'payment_method', 'created_at']
    search_fields = ['user__email', 'user__name', 'parking_spot__spot_number', 'license_plate']
    readonly_fields = ['duration', 'total_cost', 'created_at', 'updated_at']
