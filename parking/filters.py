# ============================= PARKING/FILTERS.PY =============================
import django_filters

from .models import ParkingSpot


class ParkingSpotFilter(django_filters.FilterSet):
    """Filtering for the spot listing"""

    location = django_filters.CharFilter(
        field_name='location',
        lookup_expr='icontains',
        label='Location contains'
    )
    min_rate = django_filters.NumberFilter(
        field_name='hourly_rate',
        lookup_expr='gte',
        label='Minimum Hourly Rate'
    )
    max_rate = django_filters.NumberFilter(
        field_name='hourly_rate',
        lookup_expr='lte',
        label='Maximum Hourly Rate'
    )

    class Meta:
        model = ParkingSpot
        fields = ['type', 'status', 'location', 'min_rate', 'max_rate']
