# ==================== PARKING/SERIALIZERS.PY ====================
from rest_framework import serializers

from utils.exceptions import SpotStatusConflict
from utils.hateoas import build_spot_links
from .models import ParkingSpot
from .services import SpotService


class CoordinatesSerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)


class ParkingSpotSerializer(serializers.ModelSerializer):
    """Read/write representation of a spot; coordinates nest lat/lng"""
    coordinates = CoordinatesSerializer(source='*')
    features = serializers.ListField(
        child=serializers.CharField(max_length=50, trim_whitespace=True),
        required=False
    )
    links = serializers.SerializerMethodField()

    class Meta:
        model = ParkingSpot
        fields = ['id', 'spot_number', 'location', 'address', 'coordinates', 'type', 'status',
                  'hourly_rate', 'features', 'description', 'created_at', 'updated_at', 'links']
        read_only_fields = ['id', 'created_at', 'updated_at']
        extra_kwargs = {
            'location': {'min_length': 3},
            'description': {'max_length': 500},
        }

    def get_links(self, obj):
        request = self.context.get('request')
        return build_spot_links(obj, getattr(request, 'user', None))

    def validate_spot_number(self, value):
        value = value.strip().upper()
        if not value:
            raise serializers.ValidationError('Spot number is required')
        queryset = ParkingSpot.objects.filter(spot_number=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError('A spot with this number already exists', code='unique')
        return value

    def validate_status(self, value):
        if self.instance is not None:
            SpotService.check_status_change(self.instance, value)
        elif value == ParkingSpot.STATUS_RESERVED:
            raise SpotStatusConflict('A new spot has no active booking and cannot be reserved')
        return value


class NearbySpotSerializer(ParkingSpotSerializer):
    distance = serializers.FloatField(read_only=True)

    class Meta(ParkingSpotSerializer.Meta):
        fields = ParkingSpotSerializer.Meta.fields + ['distance']


class SpotStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ParkingSpot.STATUS_CHOICES)


class SpotSummarySerializer(serializers.ModelSerializer):
    """Embedded spot info on bookings"""

    class Meta:
        model = ParkingSpot
        fields = ['id', 'spot_number', 'location', 'address', 'hourly_rate']
