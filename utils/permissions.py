# ==================== UTILS/PERMISSIONS.PY ====================
from rest_framework import permissions


def is_admin(user):
    return bool(user and user.is_authenticated and getattr(user, 'role', None) == 'admin')


def is_owner_or_admin(user, obj):
    """Single ownership rule shared by bookings and payments: owner or admin."""
    if is_admin(user):
        return True
    return bool(user and user.is_authenticated and obj.user_id == user.pk)


class IsAdmin(permissions.BasePermission):
    """Only users with the admin role"""
    message = 'Admin privileges required'

    def has_permission(self, request, view):
        return is_admin(request.user)


class IsOwnerOrAdmin(permissions.BasePermission):
    """Object belongs to the requester, or the requester is an admin"""
    message = 'Access denied'

    def has_object_permission(self, request, view, obj):
        return is_owner_or_admin(request.user, obj)
