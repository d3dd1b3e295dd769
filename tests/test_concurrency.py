import threading
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import connection
from django.test import TransactionTestCase
from django.utils import timezone
from rest_framework.exceptions import APIException

from bookings.models import Booking
from bookings.services import BookingService
from parking.models import ParkingSpot
from utils.exceptions import BookingConflict
from .base import PASSWORD

User = get_user_model()


class ConcurrentBookingTestCase(TransactionTestCase):
    """Two requests racing for the same spot and interval"""

    def setUp(self):
        self.drivers = [
            User.objects.create_user(email=f'racer{n}@parkease.test', password=PASSWORD, name=f'Racer {n}')
            for n in range(2)
        ]
        self.spot = ParkingSpot.objects.create(
            spot_number='R-1',
            location='Lazimpat',
            address='Lazimpat, Kathmandu',
            latitude=27.7215,
            longitude=85.3203,
            hourly_rate=Decimal('10.00'),
        )
        self.start = (timezone.now() + timedelta(days=1)).replace(minute=0, second=0, microsecond=0)

    def test_at_most_one_overlapping_booking_succeeds(self):
        barrier = threading.Barrier(2)
        results = [None, None]

        def book(index):
            try:
                barrier.wait()
                BookingService.create_booking(
                    self.drivers[index],
                    self.spot.pk,
                    self.start,
                    self.start + timedelta(hours=2),
                    license_plate=f'BA {index} PA 1000',
                )
                results[index] = 'ok'
            except APIException as exc:
                results[index] = exc
            finally:
                connection.close()

        threads = [threading.Thread(target=book, args=(index,)) for index in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        successes = results.count('ok')
        self.assertLessEqual(successes, 1)
        for result in results:
            if result != 'ok':
                self.assertIsInstance(result, BookingConflict)
        self.assertEqual(Booking.objects.filter(parking_spot=self.spot).count(), successes)
