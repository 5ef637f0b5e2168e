# apps/core/permissions.py

from rest_framework import permissions


class IsAdminUserOrReadOnly(permissions.BasePermission):
    """
    خواندن برای همه آزاد است؛ نوشتن فقط برای کاربران ادمین (is_staff).
    """
    message = 'Only admin users can modify this resource.'

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        return bool(user and user.is_authenticated and user.is_staff)
