from rest_framework.permissions import BasePermission, SAFE_METHODS

from accounts.permissions import WRITE_ROLES


class IsCampusMemberOrRegistrarWrite(BasePermission):
    """
    Campus members can read their campus. Only admin/registrar of the same
    campus can write.
    """
    message = 'Campus membership required.'

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if not user.campus_id:
            return False
        if request.method in SAFE_METHODS:
            return True
        return user.is_superuser or user.role in WRITE_ROLES
