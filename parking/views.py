# ============================= PARKING SPOT VIEWS =============================
import logging

from rest_framework import viewsets, status, permissions, filters
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from django_filters.rest_framework import DjangoFilterBackend

from utils.permissions import IsAdmin
from utils.responses import envelope
from .models import ParkingSpot
from .serializers import ParkingSpotSerializer, NearbySpotSerializer, SpotStatusSerializer
from .filters import ParkingSpotFilter
from .services import SpotService

logger = logging.getLogger(__name__)


class ParkingSpotViewSet(viewsets.ModelViewSet):
    """Parking spot listing, creation, and management"""

    queryset = ParkingSpot.objects.all()
    serializer_class = ParkingSpotSerializer
    filter_backends = [
        DjangoFilterBackend,  # For custom filters
        filters.SearchFilter,  # For search
        filters.OrderingFilter  # For sorting
    ]
    filterset_class = ParkingSpotFilter
    search_fields = ['spot_number', 'location', 'address', 'description']
    ordering_fields = ['created_at', 'hourly_rate', 'spot_number', 'type', 'status']
    ordering = ['-created_at']

    results_key = 'spots'
    list_message = 'Parking spots retrieved successfully'

    def get_permissions(self):
        if self.action in ['list', 'retrieve', 'nearby']:
            permission_classes = [permissions.AllowAny]
        else:
            permission_classes = [permissions.IsAuthenticated, IsAdmin]
        return [permission() for permission in permission_classes]

    def retrieve(self, request, *args, **kwargs):
        spot = self.get_object()
        return envelope('Parking spot retrieved successfully', {'spot': self.get_serializer(spot).data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        spot = serializer.save()
        logger.info(f"Spot created: {spot.spot_number} by {request.user.pk}")
        return envelope(
            'Parking spot created successfully',
            {'spot': serializer.data},
            status_code=status.HTTP_201_CREATED
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        spot = self.get_object()
        serializer = self.get_serializer(spot, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        spot = SpotService.update(spot, serializer.validated_data)
        return envelope('Parking spot updated successfully', {'spot': self.get_serializer(spot).data})

    def destroy(self, request, *args, **kwargs):
        spot = self.get_object()
        SpotService.delete(spot)
        return envelope(
            'Parking spot deleted successfully',
            None,
            links=[
                {'rel': 'all-spots', 'href': '/api/v1/spots/'},
                {'rel': 'create', 'href': '/api/v1/spots/', 'method': 'POST'},
            ]
        )

    @action(detail=True, methods=['patch'], url_path='status')
    def update_status(self, request, pk=None):
        """Update parking spot status

        Body: { "status": "available|occupied|reserved|maintenance" }
        """
        spot = self.get_object()
        serializer = SpotStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        spot = SpotService.change_status(spot.pk, serializer.validated_data['status'])
        return envelope(
            'Parking spot status updated successfully',
            {'spot': self.get_serializer(spot).data}
        )

    @action(detail=False, methods=['get'], url_path=r'nearby/(?P<lat>[^/]+)/(?P<lng>[^/]+)')
    def nearby(self, request, lat=None, lng=None):
        """Available spots near a location

        Query params: radius (metres, default 1000), limit (default 10)

        Example: /api/v1/spots/nearby/27.7172/85.3240/?radius=2000
        """
        try:
            latitude = float(lat)
            longitude = float(lng)
            radius = float(request.query_params.get('radius', 1000))
            limit = int(request.query_params.get('limit', 10))
        except (TypeError, ValueError):
            raise ValidationError('Invalid coordinates provided')

        if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
            raise ValidationError('Invalid coordinates provided')
        if radius <= 0 or limit <= 0:
            raise ValidationError('Radius and limit must be positive')

        spots = SpotService.nearby(latitude, longitude, radius_m=radius, limit=limit)
        serializer = NearbySpotSerializer(spots, many=True, context=self.get_serializer_context())
        return envelope(
            'Nearby parking spots retrieved successfully',
            {
                'spots': serializer.data,
                'search_center': {'latitude': latitude, 'longitude': longitude},
                'radius': radius,
                'count': len(spots),
            },
            links=[{'rel': 'all-spots', 'href': '/api/v1/spots/'}]
        )
