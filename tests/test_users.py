from rest_framework import status

from .base import APITestCase, PASSWORD, User


class RegistrationTestCase(APITestCase):

    def test_register_returns_tokens(self):
        response = self.client.post('/api/v1/auth/register/', {
            'name': 'Hari Bahadur',
            'email': 'Hari@Example.com',
            'password': PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['data']['user']['email'], 'hari@example.com')
        self.assertEqual(response.data['data']['user']['role'], 'user')
        self.assertIn('access', response.data['data'])
        self.assertIn('refresh', response.data['data'])

    def test_duplicate_email_is_conflict(self):
        response = self.client.post('/api/v1/auth/register/', {
            'name': 'Copy Cat',
            'email': 'DRIVER@parkease.test',
            'password': PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['message'], 'User already exists')

    def test_weak_password_rejected(self):
        response = self.client.post('/api/v1/auth/register/', {
            'name': 'Weak Pass',
            'email': 'weak@example.com',
            'password': 'short',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', [error['field'] for error in response.data['errors']])

    def test_role_cannot_be_self_assigned(self):
        self.client.post('/api/v1/auth/register/', {
            'name': 'Sneaky User',
            'email': 'sneaky@example.com',
            'password': PASSWORD,
            'role': 'admin',
        }, format='json')

        self.assertEqual(User.objects.get(email='sneaky@example.com').role, 'user')


class LoginTestCase(APITestCase):

    def test_login_with_valid_credentials(self):
        response = self.client.post('/api/v1/auth/login/', {
            'email': 'driver@parkease.test',
            'password': PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['user']['name'], 'Sita Driver')

    def test_login_with_wrong_password(self):
        response = self.client.post('/api/v1/auth/login/', {
            'email': 'driver@parkease.test',
            'password': 'not-the-password',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Invalid credentials')

    def test_access_token_authenticates_requests(self):
        login = self.client.post('/api/v1/auth/login/', {
            'email': 'driver@parkease.test',
            'password': PASSWORD,
        }, format='json')
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['data']['access']}")

        response = self.client.get('/api/v1/auth/profile/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['email'], 'driver@parkease.test')

    def test_refresh_token(self):
        login = self.client.post('/api/v1/auth/login/', {
            'email': 'driver@parkease.test',
            'password': PASSWORD,
        }, format='json')

        response = self.client.post('/api/v1/auth/token/refresh/', {
            'refresh': login.data['data']['refresh'],
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data['data'])


class ProfileTestCase(APITestCase):

    def test_profile_requires_authentication(self):
        response = self.client.get('/api/v1/auth/profile/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])

    def test_update_profile_keeps_email_and_role(self):
        self.client.force_authenticate(user=self.user)

        response = self.client.put('/api/v1/auth/profile/', {
            'name': 'Sita Sharma',
            'email': 'changed@example.com',
            'role': 'admin',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.name, 'Sita Sharma')
        self.assertEqual(self.user.email, 'driver@parkease.test')
        self.assertEqual(self.user.role, 'user')

    def test_logout(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.post('/api/v1/auth/logout/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
