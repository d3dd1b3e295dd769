# ==================== PARKING/ADMIN.PY ====================
from django.contrib import admin
from .models import ParkingSpot


@admin.register(ParkingSpot)
class ParkingSpotAdmin(admin.ModelAdmin):
    list_display = ['spot_number', 'location', 'type', 'status', 'hourly_rate', 'created_at']
    list_filter = ['type', 'status', 'created_at']
    search_fields = ['spot_number', 'location', 'address']
    readonly_fields = ['created_at', 'updated_at']
