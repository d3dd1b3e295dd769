"""
URL configuration for parkease project.

Every API route lives under /api/v1/ and answers with the
{success, message, data, links} envelope.
"""
# ==================== PARKEASE/URLS.PY ====================
from django.contrib import admin
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from users.views import UserViewSet, EnvelopeTokenRefreshView

from parking.views import ParkingSpotViewSet
from bookings.views import BookingViewSet
from payments.views import PaymentViewSet
from dashboard.views import DashboardView

# Create router and register viewsets
router = DefaultRouter()
router.register(r'spots', ParkingSpotViewSet, basename='spot')
router.register(r'bookings', BookingViewSet, basename='booking')
router.register(r'payments', PaymentViewSet, basename='payment')

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # API versioning
    path('api/v1/', include([
        # Authentication endpoints
        path('auth/', include([
            path('register/', UserViewSet.as_view({'post': 'register'}), name='register'),
            path('login/', UserViewSet.as_view({'post': 'login'}), name='login'),
            path('logout/', UserViewSet.as_view({'post': 'logout'}), name='logout'),
            path('token/refresh/', EnvelopeTokenRefreshView.as_view(), name='token_refresh'),
            path('profile/', UserViewSet.as_view({'get': 'profile', 'put': 'profile'}), name='profile'),
        ])),

        path('dashboard/', DashboardView.as_view(), name='dashboard'),

        # API routes
        path('', include(router.urls)),
    ])),
]
