# ============================= BOOKINGS VIEWS =============================
from rest_framework import viewsets, status, permissions, filters
from rest_framework.decorators import action
from rest_framework.generics import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend

from parking.models import ParkingSpot
from utils.permissions import IsAdmin, IsOwnerOrAdmin, is_admin
from utils.responses import envelope
from .models import Booking
from .serializers import BookingCreateSerializer, BookingUpdateSerializer, BookingSerializer
from .services import BookingService


class BookingViewSet(viewsets.ModelViewSet):
    """Booking creation, management, and lifecycle transitions"""

    serializer_class = BookingSerializer
    filter_backends = [
        DjangoFilterBackend,  # For filtering
        filters.OrderingFilter  # For ordering
    ]
    filterset_fields = ['status', 'payment_status']
    ordering_fields = ['created_at', 'start_time', 'total_cost']
    ordering = ['-created_at']

    results_key = 'bookings'
    list_message = 'Bookings retrieved successfully'

    def get_permissions(self):
        if self.action in ['destroy', 'spot_bookings']:
            permission_classes = [permissions.IsAuthenticated, IsAdmin]
        else:
            permission_classes = [permissions.IsAuthenticated, IsOwnerOrAdmin]
        return [permission() for permission in permission_classes]

    def get_queryset(self):
        queryset = Booking.objects.select_related('user', 'parking_spot')
        # Users list only their own bookings; detail access is decided by IsOwnerOrAdmin
        if self.action == 'list' and not is_admin(self.request.user):
            queryset = queryset.filter(user=self.request.user)
        return queryset

    def _booking_response(self, message, booking, status_code=status.HTTP_200_OK):
        return envelope(
            message,
            {'booking': BookingSerializer(booking, context=self.get_serializer_context()).data},
            status_code=status_code
        )

    def retrieve(self, request, *args, **kwargs):
        booking = self.get_object()
        return self._booking_response('Booking retrieved successfully', booking)

    def create(self, request, *args, **kwargs):
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        booking = BookingService.create_booking(
            request.user,
            data.pop('parking_spot'),
            data.pop('start_time'),
            data.pop('end_time'),
            **data
        )
        booking = self.get_queryset().get(pk=booking.pk)
        return self._booking_response('Booking created successfully', booking, status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """PUT and PATCH both accept any subset of the updatable fields"""
        booking = self.get_object()
        serializer = BookingUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        booking = BookingService.update_booking(booking, serializer.validated_data)
        booking = self.get_queryset().get(pk=booking.pk)
        return self._booking_response('Booking updated successfully', booking)

    def destroy(self, request, *args, **kwargs):
        booking = self.get_object()
        BookingService.delete_booking(booking)
        return envelope(
            'Booking deleted successfully',
            None,
            links=[{'rel': 'all-bookings', 'href': '/api/v1/bookings/'}]
        )

    @action(detail=True, methods=['patch'])
    def cancel(self, request, pk=None):
        """Cancel an active booking and release its spot"""
        booking = BookingService.cancel_booking(self.get_object())
        return self._booking_response('Booking cancelled successfully', booking)

    @action(detail=True, methods=['patch'])
    def complete(self, request, pk=None):
        """Complete an active booking; marks it paid and releases its spot"""
        booking = BookingService.complete_booking(self.get_object())
        return self._booking_response('Booking completed successfully', booking)

    @action(detail=False, methods=['get'], url_path=r'spot/(?P<spot_id>[^/.]+)')
    def spot_bookings(self, request, spot_id=None):
        """All bookings of one spot, latest start first (admin only)"""
        spot = get_object_or_404(ParkingSpot, pk=spot_id)
        queryset = Booking.objects.select_related('user', 'parking_spot').filter(
            parking_spot=spot
        ).order_by('-start_time')

        self.list_message = 'Spot bookings retrieved successfully'
        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        response = self.get_paginated_response(serializer.data)
        response.data['data']['spot'] = {
            'id': spot.pk,
            'spot_number': spot.spot_number,
            'location': spot.location,
        }
        response.data['links'].extend([
            {'rel': 'spot', 'href': f'/api/v1/spots/{spot.pk}/'},
            {'rel': 'all-bookings', 'href': '/api/v1/bookings/'},
        ])
        return response
