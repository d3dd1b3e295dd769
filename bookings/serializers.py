# ==================== BOOKINGS/SERIALIZERS.PY ====================
from django.utils import timezone
from rest_framework import serializers

from parking.serializers import SpotSummarySerializer
from users.serializers import UserSummarySerializer
from utils.hateoas import build_booking_links
from .models import Booking
from .services import validate_booking_window


class VehicleInfoSerializer(serializers.Serializer):
    """Nested view over the booking's flat vehicle columns"""
    license_plate = serializers.CharField(min_length=2, max_length=15)
    make = serializers.CharField(source='vehicle_make', max_length=50, required=False, allow_blank=True)
    model = serializers.CharField(source='vehicle_model', max_length=50, required=False, allow_blank=True)
    color = serializers.CharField(source='vehicle_color', max_length=30, required=False, allow_blank=True)

    def validate_license_plate(self, value):
        return value.strip().upper()


class BookingCreateSerializer(serializers.Serializer):
    parking_spot = serializers.IntegerField(min_value=1)
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    vehicle_info = VehicleInfoSerializer(source='*')
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)

    def validate_start_time(self, value):
        if value <= timezone.now():
            raise serializers.ValidationError('Start time must be in the future')
        return value

    def validate(self, data):
        validate_booking_window(data['start_time'], data['end_time'])
        return data


class BookingUpdateSerializer(serializers.Serializer):
    """All fields optional; untouched fields keep their values"""
    start_time = serializers.DateTimeField(required=False)
    end_time = serializers.DateTimeField(required=False)
    vehicle_info = VehicleInfoSerializer(source='*', required=False)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)


class BookingSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)
    parking_spot = SpotSummarySerializer(read_only=True)
    vehicle_info = VehicleInfoSerializer(source='*', read_only=True)
    links = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = ['id', 'user', 'parking_spot', 'start_time', 'end_time', 'duration', 'total_cost',
                  'status', 'payment_status', 'payment_method', 'vehicle_info', 'notes',
                  'created_at', 'updated_at', 'links']

    def get_links(self, obj):
        request = self.context.get('request')
        return build_booking_links(obj, getattr(request, 'user', None))
