# ==================== DASHBOARD/VIEWS.PY ====================
from rest_framework import permissions
from rest_framework.views import APIView

from bookings.serializers import BookingSerializer
from utils.responses import envelope
from .services import DashboardService


class DashboardView(APIView):
    """Dashboard statistics for admins and users"""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        dashboard = DashboardService(request.user)
        recent = BookingSerializer(
            dashboard.recent_bookings(), many=True, context={'request': request}
        ).data

        return envelope('Dashboard data retrieved successfully', {
            'total_users': dashboard.total_users(),
            'active_sessions_today': dashboard.active_sessions_today(),
            'recent_users_change': dashboard.recent_users_change(),
            'session_activity': dashboard.session_activity(),
            'user_growth': dashboard.user_growth(),
            'parking_spots': dashboard.parking_spots(),
            'recent_bookings': recent,
            'earnings_data': dashboard.earnings_data(),
        })
