from decimal import Decimal

from rest_framework import status

from parking.models import ParkingSpot
from parking.services import SpotService
from utils.exceptions import SpotStatusConflict
from .base import APITestCase


class SpotCrudTestCase(APITestCase):

    def spot_payload(self, **extra):
        payload = {
            'spot_number': 'b-202',
            'location': 'New Road',
            'address': 'New Road, Kathmandu',
            'coordinates': {'latitude': 27.7045, 'longitude': 85.3110},
            'type': 'electric',
            'hourly_rate': '25.00',
            'features': ['covered', 'ev_charger'],
        }
        payload.update(extra)
        return payload

    def test_admin_can_create_spot(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.post('/api/v1/spots/', self.spot_payload(), format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        spot = response.data['data']['spot']
        self.assertEqual(spot['spot_number'], 'B-202')
        self.assertEqual(spot['status'], 'available')
        self.assertEqual(spot['coordinates'], {'latitude': 27.7045, 'longitude': 85.3110})

    def test_user_cannot_create_spot(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.post('/api/v1/spots/', self.spot_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_duplicate_spot_number_is_conflict(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post('/api/v1/spots/', self.spot_payload(spot_number='a-101'), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_negative_rate_rejected(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post('/api/v1/spots/', self.spot_payload(hourly_rate='-1'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_anyone_can_list_spots(self):
        self.create_spot('C-1', type='compact', hourly_rate='5.00')

        response = self.client.get('/api/v1/spots/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']['spots']), 2)
        self.assertEqual(response.data['data']['pagination']['total_count'], 2)

    def test_list_filters(self):
        self.create_spot('C-1', type='compact', hourly_rate='5.00', location='Patan')
        self.create_spot('E-1', type='electric', hourly_rate='40.00')

        by_type = self.client.get('/api/v1/spots/', {'type': 'compact'})
        by_rate = self.client.get('/api/v1/spots/', {'min_rate': 8, 'max_rate': 20})
        by_location = self.client.get('/api/v1/spots/', {'location': 'pat'})

        self.assertEqual([s['spot_number'] for s in by_type.data['data']['spots']], ['C-1'])
        self.assertEqual([s['spot_number'] for s in by_rate.data['data']['spots']], ['A-101'])
        self.assertEqual([s['spot_number'] for s in by_location.data['data']['spots']], ['C-1'])

    def test_pagination_limit(self):
        for number in range(3):
            self.create_spot(f'P-{number}')

        response = self.client.get('/api/v1/spots/', {'limit': 2, 'page': 2})

        pagination = response.data['data']['pagination']
        self.assertEqual(len(response.data['data']['spots']), 2)
        self.assertEqual(pagination['current_page'], 2)
        self.assertEqual(pagination['total_pages'], 2)
        self.assertTrue(pagination['has_prev_page'])
        self.assertFalse(pagination['has_next_page'])

    def test_retrieve_includes_admin_links_for_admin_only(self):
        anonymous = self.client.get(f'/api/v1/spots/{self.spot.pk}/')
        self.client.force_authenticate(user=self.admin)
        admin = self.client.get(f'/api/v1/spots/{self.spot.pk}/')

        anonymous_rels = {link['rel'] for link in anonymous.data['data']['spot']['links']}
        admin_rels = {link['rel'] for link in admin.data['data']['spot']['links']}
        self.assertNotIn('delete', anonymous_rels)
        self.assertIn('delete', admin_rels)
        self.assertIn('update-status', admin_rels)

    def test_missing_spot_is_not_found(self):
        response = self.client.get('/api/v1/spots/9999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(response.data['success'])

    def test_partial_update(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.patch(f'/api/v1/spots/{self.spot.pk}/', {'hourly_rate': '12.50'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.spot.refresh_from_db()
        self.assertEqual(str(self.spot.hourly_rate), '12.50')

    def test_new_spot_cannot_start_reserved(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.post('/api/v1/spots/', self.spot_payload(status='reserved'), format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(ParkingSpot.objects.filter(spot_number='B-202').exists())

    def test_rate_change_keeps_reservation(self):
        self.create_booking()
        self.client.force_authenticate(user=self.admin)

        response = self.client.patch(f'/api/v1/spots/{self.spot.pk}/', {'hourly_rate': '12.00'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['spot']['status'], 'reserved')
        self.spot.refresh_from_db()
        self.assertEqual(self.spot.status, 'reserved')
        self.assertEqual(self.spot.hourly_rate, Decimal('12.00'))

    def test_update_from_stale_copy_does_not_overwrite_status(self):
        stale = ParkingSpot.objects.get(pk=self.spot.pk)
        self.create_booking()

        spot = SpotService.update(stale, {'hourly_rate': Decimal('12.00')})

        self.assertEqual(spot.status, 'reserved')
        self.spot.refresh_from_db()
        self.assertEqual(self.spot.status, 'reserved')

    def test_update_from_stale_copy_rechecks_status_guard(self):
        stale = ParkingSpot.objects.get(pk=self.spot.pk)
        self.create_booking()

        with self.assertRaises(SpotStatusConflict):
            SpotService.update(stale, {'status': 'maintenance'})

        self.spot.refresh_from_db()
        self.assertEqual(self.spot.status, 'reserved')

    def test_delete_spot(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.delete(f'/api/v1/spots/{self.spot.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(ParkingSpot.objects.filter(pk=self.spot.pk).exists())

    def test_delete_spot_with_active_booking_is_conflict(self):
        self.create_booking()
        self.client.force_authenticate(user=self.admin)

        response = self.client.delete(f'/api/v1/spots/{self.spot.pk}/')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(ParkingSpot.objects.filter(pk=self.spot.pk).exists())


class SpotStatusTestCase(APITestCase):

    def setUp(self):
        super().setUp()
        self.client.force_authenticate(user=self.admin)
        self.url = f'/api/v1/spots/{self.spot.pk}/status/'

    def test_admin_sets_maintenance(self):
        response = self.client.patch(self.url, {'status': 'maintenance'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['spot']['status'], 'maintenance')

    def test_invalid_status_rejected(self):
        response = self.client.patch(self.url, {'status': 'closed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_free_spot_with_active_booking(self):
        self.create_booking()

        response = self.client.patch(self.url, {'status': 'available'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.spot.refresh_from_db()
        self.assertEqual(self.spot.status, 'reserved')

    def test_cannot_reserve_spot_without_booking(self):
        response = self.client.patch(self.url, {'status': 'reserved'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_spot_update_runs_same_guard(self):
        self.create_booking()
        response = self.client.patch(f'/api/v1/spots/{self.spot.pk}/', {'status': 'maintenance'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_user_cannot_change_status(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.patch(self.url, {'status': 'maintenance'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class NearbySpotsTestCase(APITestCase):

    def test_nearby_returns_available_spots_in_radius_nearest_first(self):
        # ~300 m and ~5 km from the search point
        close = self.create_spot('N-1', latitude=27.7180, longitude=85.3123)
        self.create_spot('F-1', latitude=27.7600, longitude=85.3123)
        self.create_spot('M-1', latitude=27.7155, longitude=85.3124, status='maintenance')

        response = self.client.get('/api/v1/spots/nearby/27.7154/85.3123/', {'radius': 1000})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        numbers = [spot['spot_number'] for spot in response.data['data']['spots']]
        self.assertEqual(numbers, ['A-101', close.spot_number])
        self.assertEqual(response.data['data']['count'], 2)
        self.assertEqual(response.data['data']['spots'][0]['distance'], 0.0)

    def test_nearby_respects_limit(self):
        self.create_spot('N-1', latitude=27.7160, longitude=85.3123)

        response = self.client.get('/api/v1/spots/nearby/27.7154/85.3123/', {'limit': 1})

        self.assertEqual(len(response.data['data']['spots']), 1)

    def test_nearby_rejects_bad_coordinates(self):
        response = self.client.get('/api/v1/spots/nearby/123.0/85.3123/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.get('/api/v1/spots/nearby/abc/85.3123/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
