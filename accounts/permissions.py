from rest_framework.permissions import BasePermission, SAFE_METHODS

WRITE_ROLES = ('admin', 'registrar')


class IsAdminOrRegistrarWrite(BasePermission):
    """Authenticated users can read. Only admin/registrar can write."""
    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if request.method in SAFE_METHODS:
            return True
        return user.is_superuser or user.role in WRITE_ROLES
