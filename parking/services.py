# ==================== PARKING/SERVICES.PY ====================
import logging

from django.db import transaction

from utils.distance_calculator import DistanceCalculator
from utils.exceptions import SpotStatusConflict
from .models import ParkingSpot

logger = logging.getLogger(__name__)


class SpotService:
    """Spot status management shared by admins and the booking lifecycle.

    Invariant: a spot with an active booking is either reserved or occupied,
    and a spot is never reserved without one.
    """

    @staticmethod
    def check_status_change(spot, new_status):
        """Raise SpotStatusConflict if new_status contradicts the spot's active bookings"""
        if new_status == spot.status:
            return

        has_active = spot.has_active_bookings()
        if has_active and new_status in (ParkingSpot.STATUS_AVAILABLE, ParkingSpot.STATUS_MAINTENANCE):
            raise SpotStatusConflict(
                f"Spot {spot.spot_number} has active bookings and cannot be set to {new_status}"
            )
        if not has_active and new_status == ParkingSpot.STATUS_RESERVED:
            raise SpotStatusConflict(
                f"Spot {spot.spot_number} has no active booking and cannot be reserved"
            )

    @staticmethod
    def change_status(spot_id, new_status):
        """Admin status override, guarded against active bookings"""
        with transaction.atomic():
            spot = ParkingSpot.objects.select_for_update().get(pk=spot_id)
            SpotService.check_status_change(spot, new_status)
            previous = spot.status
            spot.status = new_status
            spot.save(update_fields=['status', 'updated_at'])

        logger.info(f"Spot {spot.spot_number} status changed: {previous} -> {new_status}")
        return spot

    @staticmethod
    def reserve(spot):
        """Mark a spot as reserved by a new booking. Caller holds the row lock."""
        if spot.status != ParkingSpot.STATUS_RESERVED:
            spot.status = ParkingSpot.STATUS_RESERVED
            spot.save(update_fields=['status', 'updated_at'])

    @staticmethod
    def release(spot, booking=None):
        """Called when a booking stops being active. Caller holds the row lock."""
        if spot.has_active_bookings(exclude_booking=booking):
            new_status = ParkingSpot.STATUS_RESERVED
        else:
            new_status = ParkingSpot.STATUS_AVAILABLE

        if spot.status != new_status:
            spot.status = new_status
            spot.save(update_fields=['status', 'updated_at'])
            logger.info(f"Spot {spot.spot_number} released -> {new_status}")
        return spot

    @staticmethod
    def update(spot, changes):
        """Admin edit of spot fields; only the columns in ``changes`` are written.

        The row is locked and the status guard re-run, so a concurrent booking
        cannot have its reservation overwritten by a stale copy of the spot.
        """
        with transaction.atomic():
            spot = ParkingSpot.objects.select_for_update().get(pk=spot.pk)
            if 'status' in changes:
                SpotService.check_status_change(spot, changes['status'])

            for field, value in changes.items():
                setattr(spot, field, value)
            spot.save(update_fields=[*changes, 'updated_at'])

        logger.info(f"Spot {spot.spot_number} updated: {', '.join(changes)}")
        return spot

    @staticmethod
    def delete(spot):
        with transaction.atomic():
            spot = ParkingSpot.objects.select_for_update().get(pk=spot.pk)
            if spot.has_active_bookings():
                raise SpotStatusConflict(
                    f"Spot {spot.spot_number} has active bookings and cannot be deleted"
                )
            spot_number = spot.spot_number
            spot.delete()
        logger.info(f"Spot {spot_number} deleted")

    @staticmethod
    def nearby(latitude, longitude, radius_m=1000, limit=10):
        """Available spots within radius_m metres, nearest first, each with .distance in metres"""
        min_lat, max_lat, min_lng, max_lng = DistanceCalculator.bounding_box(
            latitude, longitude, radius_m / 1000
        )
        candidates = ParkingSpot.objects.filter(
            status=ParkingSpot.STATUS_AVAILABLE,
            latitude__gte=min_lat,
            latitude__lte=max_lat,
            longitude__gte=min_lng,
            longitude__lte=max_lng,
        )

        spots = []
        for spot in candidates:
            distance = DistanceCalculator.get_distance_m(latitude, longitude, spot.latitude, spot.longitude)
            if distance <= radius_m:
                spot.distance = round(distance, 1)
                spots.append(spot)

        spots.sort(key=lambda s: s.distance)
        return spots[:limit]
