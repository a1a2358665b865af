from rest_framework import generics, permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .permissions import IsAdminOrRegistrarWrite
from .serializers import (
    CampusSerializer,
    PhoneTokenObtainPairSerializer,
    RegisterUserSerializer,
    UserSerializer,
)


class LoginView(TokenObtainPairView):
    serializer_class = PhoneTokenObtainPairSerializer


class RefreshView(TokenRefreshView):
    pass


class MeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        user = request.user
        data = UserSerializer(user).data
        data["email"] = user.email or None
        data["campus"] = CampusSerializer(user.campus).data if user.campus else None

        # Attach teacher profile (if exists)
        teacher = getattr(user, "teacher_profile", None)
        if teacher:
            data["teacher"] = {
                "id": teacher.id,
                "employee_number": teacher.employee_number,
                "is_active": teacher.is_active,
            }
        return Response(data)


class RegisterUserView(generics.CreateAPIView):
    permission_classes = [permissions.IsAuthenticated, IsAdminOrRegistrarWrite]
    serializer_class = RegisterUserSerializer
