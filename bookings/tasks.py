# ==================== BOOKINGS/TASKS.PY (CELERY TASKS) ====================
from celery import shared_task
import logging

from .services import BookingService

logger = logging.getLogger(__name__)


@shared_task
def expire_overdue_bookings():
    """Expire active bookings whose end time passed the grace period"""
    expired = BookingService.expire_overdue()
    logger.info(f"Expired {expired} overdue bookings")
    return expired
