# ==================== PAYMENTS/SERVICES.PY ====================
import requests
import logging
from datetime import datetime, time, timedelta
from decimal import Decimal
from django.conf import settings
from django.db import transaction
from django.db.models import Sum, Count
from django.db.models.functions import TruncDate
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied

from bookings.models import Booking
from utils.exceptions import InvalidBookingState, PaymentVerificationFailed
from utils.permissions import is_owner_or_admin
from .models import Payment

logger = logging.getLogger(__name__)


class KhaltiService:
    """Khalti payment verification"""

    def __init__(self, secret_key=None, verify_url=None, timeout=None):
        self.secret_key = secret_key if secret_key is not None else settings.KHALTI_SECRET_KEY
        self.verify_url = verify_url or settings.KHALTI_VERIFY_URL
        self.timeout = timeout or settings.KHALTI_TIMEOUT

    def verify(self, token, amount):
        """Verify a client token; returns the provider payload.

        Raises PaymentVerificationFailed when the provider rejects the token,
        answers without a transaction ``idx`` or cannot be reached.
        """
        try:
            response = requests.post(
                self.verify_url,
                data={'token': token, 'amount': amount},
                headers={'Authorization': f'Key {self.secret_key}'},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Khalti verification request failed: {str(e)}")
            raise PaymentVerificationFailed(provider_response={'detail': str(e)})

        try:
            payload = response.json()
        except ValueError:
            payload = {'detail': response.text}

        if not response.ok or not payload.get('idx'):
            logger.warning(f"Khalti rejected token (HTTP {response.status_code}): {payload}")
            raise PaymentVerificationFailed(provider_response=payload)

        logger.info(f"Khalti payment verified: {payload['idx']}")
        return payload


class PaymentService:
    """Record verified payments against bookings"""

    def __init__(self, gateway=None):
        self.gateway = gateway or KhaltiService()

    def verify_and_record(self, user, booking_id, token, amount):
        """Verify ``amount`` (paisa) with the gateway, then store the payment"""
        try:
            booking = Booking.objects.select_related('parking_spot').get(pk=booking_id)
        except Booking.DoesNotExist:
            raise NotFound('Booking not found')

        if not is_owner_or_admin(user, booking):
            raise PermissionDenied('You can only pay for your own bookings')

        if booking.payment_status == Booking.PAYMENT_PAID:
            raise InvalidBookingState('Booking is already paid')
        if booking.status == Booking.STATUS_CANCELLED:
            raise InvalidBookingState('Cannot pay for a cancelled booking')

        payload = self.gateway.verify(token, amount)

        with transaction.atomic():
            booking = Booking.objects.select_for_update().get(pk=booking.pk)
            if booking.payment_status == Booking.PAYMENT_PAID:
                logger.warning(
                    f"Booking {booking.pk} was paid concurrently; verified Khalti transaction "
                    f"{payload['idx']} was not recorded"
                )
                raise InvalidBookingState('Booking is already paid')

            payment = Payment.objects.create(
                user=booking.user,
                booking=booking,
                amount=(Decimal(amount) / 100).quantize(Decimal('0.01')),
                payment_method=Payment.METHOD_KHALTI,
                status=Payment.STATUS_COMPLETED,
                transaction_id=payload['idx'],
                payment_details=payload,
            )

            booking.payment_status = Booking.PAYMENT_PAID
            booking.payment_method = Payment.METHOD_KHALTI
            booking.save(update_fields=['payment_status', 'payment_method', 'updated_at'])

        logger.info(f"Payment recorded: {payment.pk} for booking {booking.pk} (NPR {payment.amount})")
        return payment


class PaymentAnalyticsService:

    DEFAULT_WINDOW_DAYS = 30

    @staticmethod
    def date_range(start_date=None, end_date=None):
        """Aware datetimes covering whole days; defaults to the last 30 days"""
        today = timezone.localdate()
        end_date = end_date or today
        start_date = start_date or end_date - timedelta(days=PaymentAnalyticsService.DEFAULT_WINDOW_DAYS)
        start = timezone.make_aware(datetime.combine(start_date, time.min))
        end = timezone.make_aware(datetime.combine(end_date, time.max))
        return start, end

    @staticmethod
    def summarize(start_date=None, end_date=None):
        start, end = PaymentAnalyticsService.date_range(start_date, end_date)
        payments = Payment.objects.filter(
            status=Payment.STATUS_COMPLETED,
            created_at__gte=start,
            created_at__lte=end,
        )

        total = payments.aggregate(total=Sum('amount'))['total'] or Decimal('0')

        by_method = payments.values('payment_method').annotate(
            total=Sum('amount'), count=Count('id')
        ).order_by('-total')

        by_spot = payments.values(
            'booking__parking_spot_id',
            'booking__parking_spot__spot_number',
            'booking__parking_spot__location',
        ).annotate(total=Sum('amount'), count=Count('id')).order_by('-total')

        by_day = payments.annotate(day=TruncDate('created_at')).values('day').annotate(
            total=Sum('amount'), count=Count('id')
        ).order_by('day')

        return {
            'total_earnings': total,
            'earnings_by_method': [
                {'method': row['payment_method'], 'total': row['total'], 'count': row['count']}
                for row in by_method
            ],
            'earnings_by_spot': [
                {
                    'spot_id': row['booking__parking_spot_id'],
                    'spot_number': row['booking__parking_spot__spot_number'],
                    'location': row['booking__parking_spot__location'],
                    'total': row['total'],
                    'count': row['count'],
                }
                for row in by_spot
            ],
            'earnings_by_day': [
                {'date': row['day'].isoformat(), 'total': row['total'], 'count': row['count']}
                for row in by_day
            ],
            'payment_method_distribution': {
                row['payment_method']: row['count'] for row in by_method
            },
            'date_range': {
                'start_date': start.date().isoformat(),
                'end_date': end.date().isoformat(),
            },
        }
