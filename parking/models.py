# parking/models.py

from django.db import models
from django.core.validators import MinLengthValidator, MinValueValidator, MaxValueValidator


class ParkingSpot(models.Model):
    TYPE_STANDARD = 'standard'
    TYPE_COMPACT = 'compact'
    TYPE_HANDICAP = 'handicap'
    TYPE_ELECTRIC = 'electric'
    TYPE_CHOICES = (
        (TYPE_STANDARD, 'Standard'),
        (TYPE_COMPACT, 'Compact'),
        (TYPE_HANDICAP, 'Handicap'),
        (TYPE_ELECTRIC, 'Electric'),
    )

    STATUS_AVAILABLE = 'available'
    STATUS_OCCUPIED = 'occupied'
    STATUS_RESERVED = 'reserved'
    STATUS_MAINTENANCE = 'maintenance'
    STATUS_CHOICES = (
        (STATUS_AVAILABLE, 'Available'),
        (STATUS_OCCUPIED, 'Occupied'),
        (STATUS_RESERVED, 'Reserved'),
        (STATUS_MAINTENANCE, 'Maintenance'),
    )
    # New bookings may be placed while the spot is in one of these
    BOOKABLE_STATUSES = (STATUS_AVAILABLE, STATUS_RESERVED)

    spot_number = models.CharField(max_length=20, unique=True)

    # Location info
    location = models.CharField(max_length=100, validators=[MinLengthValidator(3)], db_index=True)
    address = models.CharField(max_length=255)
    latitude = models.FloatField(validators=[MinValueValidator(-90), MaxValueValidator(90)])
    longitude = models.FloatField(validators=[MinValueValidator(-180), MaxValueValidator(180)])

    # Spot details
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_STANDARD, db_index=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_AVAILABLE, db_index=True)
    hourly_rate = models.DecimalField(max_digits=8, decimal_places=2, validators=[MinValueValidator(0)])
    features = models.JSONField(default=list, blank=True)  # ["covered", "ev_charger"]
    description = models.TextField(max_length=500, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['hourly_rate'], name='spot_rate_idx'),
            models.Index(fields=['latitude', 'longitude'], name='spot_coords_idx'),
        ]

    def __str__(self):
        return f"{self.spot_number} - {self.location}"

    def save(self, *args, **kwargs):
        self.spot_number = self.spot_number.strip().upper()
        super().save(*args, **kwargs)

    def has_active_bookings(self, exclude_booking=None):
        bookings = self.bookings.filter(status='active')
        if exclude_booking is not None:
            bookings = bookings.exclude(pk=exclude_booking.pk)
        return bookings.exists()
