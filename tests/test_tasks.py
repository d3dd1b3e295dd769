from datetime import timedelta

from django.test import override_settings
from django.utils import timezone

from bookings.models import Booking
from bookings.services import BookingService
from bookings.tasks import expire_overdue_bookings
from .base import APITestCase


class ExpireOverdueBookingsTestCase(APITestCase):

    def setUp(self):
        super().setUp()
        # Finished three hours ago, still active
        self.base = timezone.now().replace(microsecond=0) - timedelta(hours=5)
        self.overdue = self.create_booking(start=0, end=2)

    def test_overdue_booking_expires_and_frees_spot(self):
        expired = expire_overdue_bookings()

        self.assertEqual(expired, 1)
        self.overdue.refresh_from_db()
        self.assertEqual(self.overdue.status, Booking.STATUS_EXPIRED)
        self.spot.refresh_from_db()
        self.assertEqual(self.spot.status, 'available')

    def test_grace_period(self):
        now = self.overdue.end_time + timedelta(minutes=10)
        self.assertEqual(BookingService.expire_overdue(now=now, grace_minutes=30), 0)

        now = self.overdue.end_time + timedelta(minutes=31)
        self.assertEqual(BookingService.expire_overdue(now=now, grace_minutes=30), 1)

    @override_settings(BOOKING_EXPIRY_GRACE_MINUTES=600)
    def test_grace_from_settings(self):
        self.assertEqual(expire_overdue_bookings(), 0)

    def test_future_and_finished_bookings_untouched(self):
        upcoming = self.create_booking(start=10, end=12)
        cancelled = self.create_booking(user=self.other_user, start=2, end=3)
        BookingService.cancel_booking(cancelled)

        expire_overdue_bookings()

        upcoming.refresh_from_db()
        cancelled.refresh_from_db()
        self.assertEqual(upcoming.status, Booking.STATUS_ACTIVE)
        self.assertEqual(cancelled.status, Booking.STATUS_CANCELLED)
        self.spot.refresh_from_db()
        self.assertEqual(self.spot.status, 'reserved')

    def test_expired_booking_cannot_be_updated(self):
        expire_overdue_bookings()
        self.client.force_authenticate(user=self.user)

        response = self.client.patch(f'/api/v1/bookings/{self.overdue.pk}/', {'notes': 'late'}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Cannot update a booking that is expired')
