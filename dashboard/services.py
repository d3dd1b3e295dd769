# ==================== DASHBOARD/SERVICES.PY ====================
from datetime import datetime, time, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db.models import Count, Sum
from django.utils import timezone

from bookings.models import Booking
from parking.models import ParkingSpot
from utils.permissions import is_admin

User = get_user_model()


def _month_start(day, months_back=0):
    """First day of the month ``months_back`` months before ``day``"""
    month_index = day.year * 12 + (day.month - 1) - months_back
    return day.replace(year=month_index // 12, month=month_index % 12 + 1, day=1)


def _aware(day):
    return timezone.make_aware(datetime.combine(day, time.min))


class DashboardService:
    """Read-only rollups over users, spots and bookings.

    Admins see platform-wide numbers. Everyone else gets the same shape with
    booking figures limited to their own bookings and admin-only fields empty.
    """

    def __init__(self, user, now=None):
        self.user = user
        self.admin = is_admin(user)
        self.now = now or timezone.now()
        self.today = timezone.localdate(self.now)

    def _bookings(self):
        bookings = Booking.objects.all()
        if not self.admin:
            bookings = bookings.filter(user=self.user)
        return bookings

    def total_users(self):
        return User.objects.count() if self.admin else 0

    def active_sessions_today(self):
        return self._bookings().filter(
            status=Booking.STATUS_ACTIVE,
            start_time__lte=self.now,
            end_time__gte=self.now,
        ).count()

    def recent_users_change(self):
        """Week-over-week change in sign-ups, as a percentage"""
        if not self.admin:
            return 0

        week_ago = self.now - timedelta(days=7)
        two_weeks_ago = self.now - timedelta(days=14)
        current = User.objects.filter(created_at__gte=week_ago, created_at__lt=self.now).count()
        previous = User.objects.filter(created_at__gte=two_weeks_ago, created_at__lt=week_ago).count()

        if previous:
            return round((current - previous) / previous * 100, 2)
        return 100 if current else 0

    def session_activity(self, days=7):
        activity = []
        for offset in range(days - 1, -1, -1):
            day = self.today - timedelta(days=offset)
            count = self._bookings().filter(
                start_time__gte=_aware(day),
                start_time__lt=_aware(day + timedelta(days=1)),
            ).count()
            activity.append({'date': day.isoformat(), 'count': count})
        return activity

    def user_growth(self, months=12):
        if not self.admin:
            return []

        growth = []
        for offset in range(months - 1, -1, -1):
            start = _month_start(self.today, offset)
            end = _month_start(self.today, offset - 1)
            count = User.objects.filter(created_at__gte=_aware(start), created_at__lt=_aware(end)).count()
            growth.append({'month': start.strftime('%Y-%m'), 'count': count})
        return growth

    def parking_spots(self):
        counts = dict(
            ParkingSpot.objects.values_list('status').annotate(count=Count('id')).order_by()
        )
        return {
            'available': counts.get(ParkingSpot.STATUS_AVAILABLE, 0),
            'occupied': counts.get(ParkingSpot.STATUS_OCCUPIED, 0),
            'reserved': counts.get(ParkingSpot.STATUS_RESERVED, 0),
            'maintenance': counts.get(ParkingSpot.STATUS_MAINTENANCE, 0),
            'total': sum(counts.values()),
        }

    def recent_bookings(self, limit=5):
        return self._bookings().select_related('user', 'parking_spot').order_by('-created_at')[:limit]

    def earnings_data(self, months=6):
        earnings = []
        for offset in range(months - 1, -1, -1):
            start = _month_start(self.today, offset)
            end = _month_start(self.today, offset - 1)
            total = self._bookings().filter(
                status=Booking.STATUS_COMPLETED,
                end_time__gte=_aware(start),
                end_time__lt=_aware(end),
            ).aggregate(total=Sum('total_cost'))['total']
            earnings.append({'month': start.strftime('%b'), 'earnings': total or Decimal('0')})
        return earnings
