# ==================== UTILS/HATEOAS.PY ====================
from django.urls import reverse

from utils.permissions import is_admin


def build_spot_links(spot, user=None):
    """Follow-up actions for a parking spot"""
    links = [
        {'rel': 'self', 'href': reverse('spot-detail', args=[spot.pk])},
        {'rel': 'book', 'href': reverse('booking-list'), 'method': 'POST'},
        {'rel': 'all-spots', 'href': reverse('spot-list')},
    ]

    if is_admin(user):
        links.extend([
            {'rel': 'update', 'href': reverse('spot-detail', args=[spot.pk]), 'method': 'PUT'},
            {'rel': 'delete', 'href': reverse('spot-detail', args=[spot.pk]), 'method': 'DELETE'},
            {'rel': 'update-status', 'href': reverse('spot-update-status', args=[spot.pk]), 'method': 'PATCH'},
        ])

    return links


def build_booking_links(booking, user=None):
    """Follow-up actions for a booking; cancel/complete only while active"""
    links = [
        {'rel': 'self', 'href': reverse('booking-detail', args=[booking.pk])},
        {'rel': 'spot', 'href': reverse('spot-detail', args=[booking.parking_spot_id])},
        {'rel': 'user-bookings', 'href': reverse('booking-list')},
    ]

    if booking.status == 'active':
        links.extend([
            {'rel': 'cancel', 'href': reverse('booking-cancel', args=[booking.pk]), 'method': 'PATCH'},
            {'rel': 'complete', 'href': reverse('booking-complete', args=[booking.pk]), 'method': 'PATCH'},
        ])

    if is_admin(user):
        links.extend([
            {'rel': 'update', 'href': reverse('booking-detail', args=[booking.pk]), 'method': 'PUT'},
            {'rel': 'delete', 'href': reverse('booking-detail', args=[booking.pk]), 'method': 'DELETE'},
        ])

    return links
