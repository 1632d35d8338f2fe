from rest_framework.permissions import BasePermission


def is_admin_user(user):
    """True when the authenticated user carries the admin role"""
    return bool(user and user.is_authenticated and getattr(user, 'role', None) == 'admin')


def get_user_project_ids(user):
    """Ids of the projects assigned to a manager"""
    return list(user.projects.values_list('id', flat=True))


class IsAdminRole(BasePermission):
    """Allows access only to users with the admin role"""
    message = 'Admin access required'

    def has_permission(self, request, view):
        return is_admin_user(request.user)
