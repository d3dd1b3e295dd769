# ==================== PAYMENTS/VIEWS.PY ====================
from rest_framework import viewsets, status, permissions
from rest_framework.decorators import action
import logging

from utils.permissions import IsAdmin, IsOwnerOrAdmin, is_admin
from utils.responses import envelope
from .models import Payment
from .serializers import (
    PaymentSerializer, KhaltiVerifySerializer, PaymentHistoryQuerySerializer,
    AnalyticsQuerySerializer, ReceiptSerializer
)
from .services import PaymentService, PaymentAnalyticsService

logger = logging.getLogger(__name__)


class PaymentViewSet(viewsets.ReadOnlyModelViewSet):
    """Payment verification, history, receipts and analytics"""
    serializer_class = PaymentSerializer
    results_key = 'payments'
    list_message = 'Payment history retrieved successfully'

    def get_permissions(self):
        if self.action == 'analytics':
            permission_classes = [permissions.IsAuthenticated, IsAdmin]
        else:
            permission_classes = [permissions.IsAuthenticated, IsOwnerOrAdmin]
        return [permission() for permission in permission_classes]

    def get_queryset(self):
        queryset = Payment.objects.select_related('user', 'booking', 'booking__parking_spot')
        if self.action != 'list':
            return queryset

        if not is_admin(self.request.user):
            queryset = queryset.filter(user=self.request.user)

        query = PaymentHistoryQuerySerializer(data=self.request.query_params)
        query.is_valid(raise_exception=True)
        filters = query.validated_data
        if 'status' in filters:
            queryset = queryset.filter(status=filters['status'])
        if 'start_date' in filters:
            queryset = queryset.filter(created_at__date__gte=filters['start_date'])
        if 'end_date' in filters:
            queryset = queryset.filter(created_at__date__lte=filters['end_date'])
        return queryset.order_by('-created_at')

    def retrieve(self, request, *args, **kwargs):
        payment = self.get_object()
        return envelope(
            'Payment retrieved successfully',
            {'payment': self.get_serializer(payment).data},
            links=[
                {'rel': 'receipt', 'href': f'/api/v1/payments/{payment.pk}/receipt/'},
                {'rel': 'booking', 'href': f'/api/v1/bookings/{payment.booking_id}/'},
            ]
        )

    @action(detail=False, methods=['post'], url_path='verify-khalti')
    def verify_khalti(self, request):
        """Verify a Khalti payment and record it

        Body: {
            "token": "<khalti token>",
            "amount": 2000,
            "booking_id": 1
        }
        """
        serializer = KhaltiVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        logger.info(f"Khalti payment submitted by user {request.user.pk} for booking {data['booking_id']}")

        payment = PaymentService().verify_and_record(
            request.user, data['booking_id'], data['token'], data['amount']
        )
        return envelope(
            'Payment verified successfully',
            {'payment': self.get_serializer(payment).data},
            links=[
                {'rel': 'receipt', 'href': f'/api/v1/payments/{payment.pk}/receipt/'},
                {'rel': 'booking', 'href': f'/api/v1/bookings/{payment.booking_id}/'},
            ]
        )

    @action(detail=True, methods=['get'])
    def receipt(self, request, pk=None):
        payment = self.get_object()
        return envelope(
            'Receipt generated successfully',
            {'receipt': ReceiptSerializer(payment).data}
        )

    @action(detail=False, methods=['get'])
    def analytics(self, request):
        """Completed-payment earnings within a date range (default last 30 days)"""
        query = AnalyticsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        summary = PaymentAnalyticsService.summarize(
            query.validated_data.get('start_date'),
            query.validated_data.get('end_date'),
        )
        return envelope('Payment analytics retrieved successfully', summary)
