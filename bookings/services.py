# ==================== BOOKINGS/SERVICES.PY ====================
import logging
from contextlib import contextmanager
from datetime import timedelta

from django.conf import settings
from django.db import OperationalError, transaction
from django.utils import timezone
from rest_framework import serializers
from rest_framework.exceptions import NotFound

from parking.models import ParkingSpot
from parking.services import SpotService
from utils.exceptions import BookingConflict, SpotUnavailable, InvalidBookingState
from .models import Booking, MIN_DURATION_HOURS, MAX_DURATION_HOURS

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('license_plate', 'vehicle_make', 'vehicle_model', 'vehicle_color', 'notes')


def validate_booking_window(start_time, end_time):
    """End after start, duration within [0.5, 24] hours"""
    if end_time <= start_time:
        raise serializers.ValidationError({'end_time': 'End time must be after start time'})

    hours = (end_time - start_time).total_seconds() / 3600
    if hours < MIN_DURATION_HOURS:
        raise serializers.ValidationError({'end_time': 'Minimum booking duration is 30 minutes'})
    if hours > MAX_DURATION_HOURS:
        raise serializers.ValidationError({'end_time': 'Maximum booking duration is 24 hours'})


@contextmanager
def lock_contention_as_conflict():
    """Report a write that lost the database lock to a concurrent booking as a conflict.

    Backends without row locks (SQLite) serialize writers on the whole table;
    the request that loses that race sees a "locked" OperationalError.
    """
    try:
        yield
    except OperationalError as e:
        if 'locked' not in str(e):
            raise
        logger.warning(f"Booking write lost a lock race: {e}")
        raise BookingConflict('Parking spot is being booked by another request, please retry')


class BookingService:
    """Booking lifecycle: create, update, cancel, complete, delete, expire.

    Every operation that touches a spot's bookings locks the spot row first,
    so the conflict check and the write it guards happen atomically.
    """

    @staticmethod
    def find_conflict(spot, start_time, end_time, exclude_booking=None):
        """First blocking booking on the spot overlapping [start_time, end_time)"""
        conflicts = Booking.objects.filter(
            parking_spot=spot,
            status__in=Booking.BLOCKING_STATUSES,
            start_time__lt=end_time,
            end_time__gt=start_time,
        )
        if exclude_booking is not None:
            conflicts = conflicts.exclude(pk=exclude_booking.pk)
        return conflicts.first()

    @staticmethod
    def _lock_spot(spot_id):
        try:
            return ParkingSpot.objects.select_for_update().get(pk=spot_id)
        except ParkingSpot.DoesNotExist:
            raise NotFound('Parking spot not found')

    @staticmethod
    def _lock_booking(booking_id):
        try:
            return Booking.objects.select_for_update().get(pk=booking_id)
        except Booking.DoesNotExist:
            raise NotFound('Booking not found')

    @staticmethod
    def create_booking(user, spot_id, start_time, end_time, **details):
        validate_booking_window(start_time, end_time)

        with lock_contention_as_conflict(), transaction.atomic():
            spot = BookingService._lock_spot(spot_id)

            if spot.status not in ParkingSpot.BOOKABLE_STATUSES:
                raise SpotUnavailable(f"Parking spot {spot.spot_number} is not available ({spot.status})")

            if BookingService.find_conflict(spot, start_time, end_time):
                raise BookingConflict()

            booking = Booking(
                user=user,
                parking_spot=spot,
                start_time=start_time,
                end_time=end_time,
                **details
            )
            booking.license_plate = booking.license_plate.strip().upper()
            booking.calculate_cost(spot.hourly_rate)
            booking.save()

            SpotService.reserve(spot)

        logger.info(
            f"Booking created: {booking.pk} on spot {spot.spot_number} "
            f"{start_time.isoformat()} - {end_time.isoformat()} cost {booking.total_cost}"
        )
        return booking

    @staticmethod
    def update_booking(booking, changes):
        """Partial update; time changes re-run the conflict check and re-price"""
        with lock_contention_as_conflict(), transaction.atomic():
            booking = BookingService._lock_booking(booking.pk)

            if booking.status in Booking.FINAL_STATUSES:
                raise InvalidBookingState(f'Cannot update a booking that is {booking.status}')

            new_start = changes.get('start_time', booking.start_time)
            new_end = changes.get('end_time', booking.end_time)
            times_changed = 'start_time' in changes or 'end_time' in changes

            if times_changed:
                if 'start_time' in changes and new_start <= timezone.now():
                    raise serializers.ValidationError({'start_time': 'Start time must be in the future'})
                validate_booking_window(new_start, new_end)
                spot = BookingService._lock_spot(booking.parking_spot_id)

                if BookingService.find_conflict(spot, new_start, new_end, exclude_booking=booking):
                    raise BookingConflict('Updated time conflicts with another booking')

                booking.start_time = new_start
                booking.end_time = new_end
                booking.calculate_cost(spot.hourly_rate)

            for field in UPDATABLE_FIELDS:
                if field in changes:
                    setattr(booking, field, changes[field])
            booking.license_plate = booking.license_plate.strip().upper()

            booking.save()

        logger.info(f"Booking updated: {booking.pk} (times changed: {times_changed})")
        return booking

    @staticmethod
    def cancel_booking(booking):
        with transaction.atomic():
            booking = BookingService._lock_booking(booking.pk)
            if booking.status != Booking.STATUS_ACTIVE:
                raise InvalidBookingState('Only active bookings can be cancelled')

            spot = BookingService._lock_spot(booking.parking_spot_id)
            booking.status = Booking.STATUS_CANCELLED
            booking.save(update_fields=['status', 'updated_at'])
            SpotService.release(spot, booking)

        logger.info(f"Booking cancelled: {booking.pk}")
        return booking

    @staticmethod
    def complete_booking(booking):
        """Completion assumes payment has been settled"""
        with transaction.atomic():
            booking = BookingService._lock_booking(booking.pk)
            if booking.status != Booking.STATUS_ACTIVE:
                raise InvalidBookingState('Only active bookings can be completed')

            spot = BookingService._lock_spot(booking.parking_spot_id)
            booking.status = Booking.STATUS_COMPLETED
            booking.payment_status = Booking.PAYMENT_PAID
            booking.save(update_fields=['status', 'payment_status', 'updated_at'])
            SpotService.release(spot, booking)

        logger.info(f"Booking completed: {booking.pk}")
        return booking

    @staticmethod
    def delete_booking(booking):
        with transaction.atomic():
            booking = BookingService._lock_booking(booking.pk)
            spot = BookingService._lock_spot(booking.parking_spot_id)
            was_active = booking.is_active
            booking_id = booking.pk
            booking.delete()
            if was_active:
                SpotService.release(spot)

        logger.info(f"Booking deleted: {booking_id} (was active: {was_active})")

    @staticmethod
    def expire_overdue(now=None, grace_minutes=None):
        """Expire active bookings that ended more than the grace period ago"""
        now = now or timezone.now()
        if grace_minutes is None:
            grace_minutes = settings.BOOKING_EXPIRY_GRACE_MINUTES
        cutoff = now - timedelta(minutes=grace_minutes)

        overdue_ids = list(
            Booking.objects.filter(status=Booking.STATUS_ACTIVE, end_time__lte=cutoff)
            .values_list('pk', flat=True)
        )

        expired = 0
        for booking_id in overdue_ids:
            with transaction.atomic():
                booking = BookingService._lock_booking(booking_id)
                if booking.status != Booking.STATUS_ACTIVE:
                    continue
                spot = BookingService._lock_spot(booking.parking_spot_id)
                booking.status = Booking.STATUS_EXPIRED
                booking.save(update_fields=['status', 'updated_at'])
                SpotService.release(spot, booking)
                expired += 1

        return expired
