# ==================== USERS/VIEWS.PY ====================
import logging

from rest_framework import viewsets, status, permissions
from rest_framework.decorators import action
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from utils.responses import envelope
from .serializers import UserRegistrationSerializer, UserLoginSerializer, UserProfileSerializer

logger = logging.getLogger(__name__)


def issue_tokens(user):
    refresh = RefreshToken.for_user(user)
    refresh['role'] = user.role
    return {'refresh': str(refresh), 'access': str(refresh.access_token)}


class UserViewSet(viewsets.ViewSet):
    """User registration, login, and profile management"""

    def get_permissions(self):
        if self.action in ['logout', 'profile']:
            permission_classes = [permissions.IsAuthenticated]
        else:
            permission_classes = [permissions.AllowAny]
        return [permission() for permission in permission_classes]

    @action(detail=False, methods=['post'])
    def register(self, request):
        """Register new user"""
        serializer = UserRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"User registered: {user.pk} ({user.email})")
        return envelope(
            'User registered successfully',
            {'user': UserProfileSerializer(user).data, **issue_tokens(user)},
            links=[{'rel': 'profile', 'href': '/api/v1/auth/profile/'}],
            status_code=status.HTTP_201_CREATED
        )

    @action(detail=False, methods=['post'])
    def login(self, request):
        """User login"""
        serializer = UserLoginSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data['user']
        return envelope(
            'Login successful',
            {'user': UserProfileSerializer(user).data, **issue_tokens(user)},
            links=[{'rel': 'profile', 'href': '/api/v1/auth/profile/'}],
        )

    @action(detail=False, methods=['post'])
    def logout(self, request):
        """Tokens are stateless; the client discards them"""
        return envelope('Logged out successfully')

    @action(detail=False, methods=['get', 'put'])
    def profile(self, request):
        """Get or update user profile"""
        if request.method == 'GET':
            return envelope('Profile retrieved successfully', UserProfileSerializer(request.user).data)

        serializer = UserProfileSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return envelope('Profile updated successfully', serializer.data)


class EnvelopeTokenRefreshView(TokenRefreshView):
    """simplejwt refresh wrapped in the API envelope"""

    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)
        return envelope('Token refreshed successfully', response.data)
