"""
Role-based permissions.
"""

from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """
    Allow only active users with the admin role.

    Anonymous requests still get 401 from IsAuthenticated listed first;
    authenticated non-admins get 403.
    """

    message = "Admin access required"

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin)
