from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.db import models
from django.core.validators import MinValueValidator

from parking.models import ParkingSpot

MIN_DURATION_HOURS = 0.5
MAX_DURATION_HOURS = 24


class Booking(models.Model):
    STATUS_ACTIVE = 'active'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_EXPIRED = 'expired'
    STATUS_CHOICES = (
        (STATUS_ACTIVE, 'Active'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_EXPIRED, 'Expired'),
    )
    # Bookings in these statuses hold their interval on the spot
    BLOCKING_STATUSES = (STATUS_ACTIVE,)
    FINAL_STATUSES = (STATUS_COMPLETED, STATUS_CANCELLED, STATUS_EXPIRED)

    PAYMENT_PENDING = 'pending'
    PAYMENT_PAID = 'paid'
    PAYMENT_FAILED = 'failed'
    PAYMENT_REFUNDED = 'refunded'
    PAYMENT_STATUS_CHOICES = (
        (PAYMENT_PENDING, 'Pending'),
        (PAYMENT_PAID, 'Paid'),
        (PAYMENT_FAILED, 'Failed'),
        (PAYMENT_REFUNDED, 'Refunded'),
    )

    PAYMENT_METHOD_CHOICES = (
        ('khalti', 'Khalti'),
        ('credit_card', 'Credit Card'),
        ('debit_card', 'Debit Card'),
        ('paypal', 'PayPal'),
        ('cash', 'Cash'),
    )

    # Relations
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='bookings')
    parking_spot = models.ForeignKey(ParkingSpot, on_delete=models.CASCADE, related_name='bookings')

    # Booking window
    start_time = models.DateTimeField(db_index=True)
    end_time = models.DateTimeField(db_index=True)
    duration = models.FloatField(help_text='Hours, derived from start and end time')
    total_cost = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    payment_status = models.CharField(
        max_length=20, choices=PAYMENT_STATUS_CHOICES, default=PAYMENT_PENDING, db_index=True
    )
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default='credit_card')

    # Vehicle
    license_plate = models.CharField(max_length=15)
    vehicle_make = models.CharField(max_length=50, blank=True)
    vehicle_model = models.CharField(max_length=50, blank=True)
    vehicle_color = models.CharField(max_length=30, blank=True)

    notes = models.TextField(max_length=500, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status'], name='booking_user_status_idx'),
            models.Index(fields=['parking_spot', 'start_time', 'end_time'], name='booking_spot_window_idx'),
        ]

    def __str__(self):
        return f"Booking {self.id} - {self.license_plate} at {self.parking_spot.spot_number}"

    @property
    def is_active(self):
        return self.status == self.STATUS_ACTIVE

    def calculate_cost(self, hourly_rate):
        """Derive duration (hours) and total cost from the booking window"""
        seconds = (self.end_time - self.start_time).total_seconds()
        self.duration = seconds / 3600
        cost = Decimal(str(self.duration)) * Decimal(hourly_rate)
        self.total_cost = cost.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
        return self.total_cost
